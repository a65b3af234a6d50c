# rvms_api/services/vitals.py
from __future__ import annotations

import logging

from ..errors import Conflict, NotFound
from ..models import PATIENT, empty_vitals
from ..store import DocumentStore, PreconditionFailedError, ResourceNotFoundError
from .users import normalize_email

logger = logging.getLogger(__name__)

SERIES = ("ecg", "heart_rate", "spo2")


class VitalsService:
    """Read and append to the vitals series stored on a patient document."""

    def __init__(self, store: DocumentStore, max_attempts: int = 5):
        self._store = store
        self._max_attempts = max_attempts

    def get(self, user_id: str) -> dict:
        key = normalize_email(user_id)
        try:
            user = self._store.read_item(key, partition_key=key)
        except ResourceNotFoundError:
            raise NotFound(f"User {user_id} not found.")
        if user.get("role") != PATIENT:
            raise NotFound(f"User {user_id} has no vitals.")
        vitals = empty_vitals()
        vitals.update(user.get("vitals") or {})
        return vitals

    def put(self, user_id: str, incoming: dict) -> dict:
        """Append each incoming series onto the stored one, keeping order."""

        def append(user):
            if user.get("role") != PATIENT:
                raise NotFound(f"User {user_id} has no vitals.")
            vitals = empty_vitals()
            vitals.update(user.get("vitals") or {})
            for name in SERIES:
                vitals[name].extend(incoming.get(name) or [])
            user["vitals"] = vitals
            return user

        key = normalize_email(user_id)
        try:
            updated = self._store.modify_item(
                key, key, append, max_attempts=self._max_attempts
            )
        except ResourceNotFoundError:
            raise NotFound(f"User {user_id} not found.")
        except PreconditionFailedError:
            raise Conflict(f"Unable to update vitals for {user_id}, try again.")

        logger.info(
            "Appended vitals for %s (%s)",
            user_id,
            ", ".join(f"{name}+{len(incoming.get(name) or [])}" for name in SERIES),
        )
        return updated["vitals"]
