# rvms_api/routes/vitals.py
from flask import Blueprint, request, current_app
from marshmallow import ValidationError
from ..errors import error
from ..schemas import VitalsSchema

vitals_bp = Blueprint("vitals", __name__, url_prefix="/api/vitals")


def vitals_service():
    return current_app.extensions["vitals_service"]


@vitals_bp.get("/<user_id>")
def get_vitals(user_id):
    """
    Return the user's vitals.
    404 if the user does not exist, 204 if the patient has no samples yet.
    """
    vitals = vitals_service().get(user_id)
    if not any(vitals.values()):
        return "", 204
    return VitalsSchema().dump(vitals), 200


@vitals_bp.put("/<user_id>")
def put_vitals(user_id):
    """Append the posted samples to the user's existing series."""
    try:
        incoming = VitalsSchema().load(request.get_json(silent=True))
    except ValidationError as e:
        return error("validation_error", 400, "Invalid payload", e.messages)

    vitals_service().put(user_id, incoming)
    return "", 204
