# rvms_api/models.py
from datetime import datetime, timezone

from .extensions import db

PATIENT = "patient"
HCP = "hcp"
ROLES = (PATIENT, HCP)


def _utcnow():
    return datetime.now(timezone.utc)


class Document(db.Model):
    """A JSON document addressed by (container, partition key, id)."""

    __tablename__ = "documents"

    container = db.Column(db.String, primary_key=True)
    partition_key = db.Column(db.String, primary_key=True)
    id = db.Column(db.String, primary_key=True)
    body = db.Column(db.JSON, nullable=False)
    etag = db.Column(db.String, nullable=False)
    created_at = db.Column(db.DateTime, default=_utcnow)
    updated_at = db.Column(db.DateTime, default=_utcnow, onupdate=_utcnow)


def empty_vitals() -> dict:
    return {"ecg": [], "heart_rate": [], "spo2": []}
