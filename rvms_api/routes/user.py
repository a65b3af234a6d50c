# rvms_api/routes/user.py
from __future__ import annotations
from flask import Blueprint, request, current_app
from marshmallow import ValidationError
from ..errors import error
from ..schemas import (
    RegisterUserSchema,
    LogInUserSchema,
    PatientSchema,
    HealthcarePractitionerSchema,
    validate_emails,
)

user_bp = Blueprint("user", __name__, url_prefix="/api/user")


def users():
    return current_app.extensions["user_service"]


@user_bp.get("/patient/<email>")
def get_patient(email):
    """Get a registered patient."""
    try:
        validate_emails(email=email)
    except ValidationError as e:
        return error("validation_error", 400, "Invalid email", e.messages)
    return PatientSchema().dump(users().get_patient(email)), 200


@user_bp.get("/hcp/<email>")
def get_hcp(email):
    """Get a registered healthcare practitioner."""
    try:
        validate_emails(email=email)
    except ValidationError as e:
        return error("validation_error", 400, "Invalid email", e.messages)
    return HealthcarePractitionerSchema().dump(users().get_hcp(email)), 200


@user_bp.post("/auth/patient/register")
def register_patient():
    """Register a new patient; 409 if the email is taken."""
    try:
        body = RegisterUserSchema().load(request.get_json(silent=True))
    except ValidationError as e:
        return error("validation_error", 400, "Invalid payload", e.messages)

    patient = users().register_patient(body)
    return (
        PatientSchema().dump(patient),
        201,
        {"Location": f"/api/user/patient/{patient['email']}"},
    )


@user_bp.post("/auth/hcp/register")
def register_hcp():
    """Register a new healthcare practitioner; 409 if the email is taken."""
    try:
        body = RegisterUserSchema().load(request.get_json(silent=True))
    except ValidationError as e:
        return error("validation_error", 400, "Invalid payload", e.messages)

    hcp = users().register_hcp(body)
    return (
        HealthcarePractitionerSchema().dump(hcp),
        201,
        {"Location": f"/api/user/hcp/{hcp['email']}"},
    )


@user_bp.post("/auth/patient/login")
def log_in_patient():
    """
    Patient login.
    200 on success, 401 on a wrong password, 404 if the patient is unknown.
    """
    try:
        body = LogInUserSchema().load(request.get_json(silent=True))
    except ValidationError as e:
        return error("validation_error", 400, "Invalid payload", e.messages)

    patient = users().log_in_patient(body["email"], body["password"])
    return PatientSchema().dump(patient), 200


@user_bp.post("/auth/hcp/login")
def log_in_hcp():
    """
    Healthcare practitioner login.
    200 on success, 401 on a wrong password, 404 if the HCP is unknown.
    """
    try:
        body = LogInUserSchema().load(request.get_json(silent=True))
    except ValidationError as e:
        return error("validation_error", 400, "Invalid payload", e.messages)

    hcp = users().log_in_hcp(body["email"], body["password"])
    return HealthcarePractitionerSchema().dump(hcp), 200


@user_bp.get("/hcp/<hcp_email>/patients")
def get_hcp_patients(hcp_email):
    try:
        validate_emails(hcpEmail=hcp_email)
    except ValidationError as e:
        return error("validation_error", 400, "Invalid email", e.messages)
    return users().get_patients(hcp_email), 200


@user_bp.put("/hcp/<hcp_email>/patients/<patient_email>")
def add_patient_to_hcp(hcp_email, patient_email):
    try:
        validate_emails(hcpEmail=hcp_email, patientEmail=patient_email)
    except ValidationError as e:
        return error("validation_error", 400, "Invalid email", e.messages)
    hcp = users().add_patient_to_hcp(hcp_email, patient_email)
    return HealthcarePractitionerSchema().dump(hcp), 200


@user_bp.delete("/hcp/<hcp_email>/patients/<patient_email>")
def remove_patient_from_hcp(hcp_email, patient_email):
    try:
        validate_emails(hcpEmail=hcp_email, patientEmail=patient_email)
    except ValidationError as e:
        return error("validation_error", 400, "Invalid email", e.messages)
    hcp = users().remove_patient_from_hcp(hcp_email, patient_email)
    return HealthcarePractitionerSchema().dump(hcp), 200
