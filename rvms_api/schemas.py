# rvms_api/schemas.py
import math
from collections.abc import Mapping
from numbers import Number

from marshmallow import Schema, ValidationError, fields, validate

from .security import MAX_PASSWORD_BYTES


def _password_fits(value):
    if len(value.encode("utf-8")) > MAX_PASSWORD_BYTES:
        raise ValidationError(f"Password must be at most {MAX_PASSWORD_BYTES} bytes.")


class RegisterUserSchema(Schema):
    email = fields.Email(required=True)
    password = fields.String(
        required=True,
        load_only=True,
        validate=[validate.Length(min=1), _password_fits],
    )
    first_name = fields.String(data_key="firstName", load_default=None, allow_none=True)
    last_name = fields.String(data_key="lastName", load_default=None, allow_none=True)


class LogInUserSchema(Schema):
    email = fields.Email(required=True)
    password = fields.String(required=True, load_only=True)


class TimedSampleSchema(Schema):
    timestamp = fields.DateTime(required=True)
    value = fields.Float(required=True, allow_nan=False)


class Sample(fields.Field):
    """A bare reading (``72``) or a timestamped one (``{"timestamp", "value"}``)."""

    default_error_messages = {"invalid": "Sample must be a finite number or a timestamped value."}

    def _deserialize(self, value, attr, data, **kwargs):
        if isinstance(value, bool):
            raise self.make_error("invalid")
        if isinstance(value, Number):
            if not math.isfinite(value):
                raise self.make_error("invalid")
            return value
        if isinstance(value, Mapping):
            loaded = TimedSampleSchema().load(value)
            return {"timestamp": loaded["timestamp"].isoformat(), "value": loaded["value"]}
        raise self.make_error("invalid")


class VitalsSchema(Schema):
    ecg = fields.List(Sample(), load_default=list)
    heart_rate = fields.List(Sample(), data_key="heartRate", load_default=list)
    spo2 = fields.List(Sample(), data_key="spO2", load_default=list)


class UserSchema(Schema):
    id = fields.String()
    email = fields.Email()
    role = fields.String()
    first_name = fields.String(data_key="firstName", allow_none=True)
    last_name = fields.String(data_key="lastName", allow_none=True)


class PatientSchema(UserSchema):
    vitals = fields.Nested(VitalsSchema)


class HealthcarePractitionerSchema(UserSchema):
    patients = fields.List(fields.String())


def validate_emails(**emails):
    """Raise ValidationError keyed by parameter name for any malformed email."""
    check = validate.Email()
    errors = {}
    for name, email in emails.items():
        try:
            check(email)
        except ValidationError as e:
            errors[name] = e.messages
    if errors:
        raise ValidationError(errors)
