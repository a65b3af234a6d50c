# rvms_api/services/users.py
"""
Patients, healthcare practitioners and the association between them.

Each user is one document whose id and partition key are the normalised
email; ``role`` tells a patient from an HCP. An HCP keeps the emails of
its patients in ``patients``.
"""
from __future__ import annotations

import logging

from .. import security
from ..errors import Conflict, NotFound, Unauthorized
from ..models import HCP, PATIENT, empty_vitals
from ..store import (
    DocumentStore,
    PreconditionFailedError,
    ResourceExistsError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)

ROLE_NAMES = {PATIENT: "Patient", HCP: "Healthcare Practitioner"}


def normalize_email(email: str) -> str:
    return email.strip().lower()


def _contains(emails, email: str) -> bool:
    needle = email.casefold()
    return any(e.casefold() == needle for e in emails)


class UserService:
    def __init__(self, store: DocumentStore, bcrypt_rounds: int = 12, max_attempts: int = 5):
        self._store = store
        self._bcrypt_rounds = bcrypt_rounds
        self._max_attempts = max_attempts

    def _get(self, email: str, role: str) -> dict:
        key = normalize_email(email)
        try:
            user = self._store.read_item(key, partition_key=key)
        except ResourceNotFoundError:
            raise NotFound(f"{ROLE_NAMES[role]} with email {email} not found.")
        if user.get("role") != role:
            raise NotFound(f"{ROLE_NAMES[role]} with email {email} not found.")
        return user

    def get_patient(self, email: str) -> dict:
        return self._get(email, PATIENT)

    def get_hcp(self, email: str) -> dict:
        return self._get(email, HCP)

    # -- authentication --

    def _register(self, role: str, data: dict) -> dict:
        email = normalize_email(data["email"])
        salt = security.generate_salt(self._bcrypt_rounds)
        user = {
            "id": email,
            "email": email,
            "role": role,
            "first_name": data.get("first_name"),
            "last_name": data.get("last_name"),
            "password": security.hash_password(data["password"], salt),
            "salt": salt,
        }
        if role == PATIENT:
            user["vitals"] = empty_vitals()
        else:
            user["patients"] = []

        try:
            created = self._store.create_item(user, partition_key=email)
        except ResourceExistsError:
            logger.info("Registration rejected, %s already exists", email)
            raise Conflict(f"User with email {email} already exists.")
        logger.info("Registered %s %s", role, email)
        return created

    def register_patient(self, data: dict) -> dict:
        return self._register(PATIENT, data)

    def register_hcp(self, data: dict) -> dict:
        return self._register(HCP, data)

    def _log_in(self, role: str, email: str, password: str) -> dict:
        user = self._get(email, role)
        if not security.validate_password(user["salt"], user["password"], password):
            logger.info("Failed login for %s %s", role, user["email"])
            raise Unauthorized("Invalid login credentials.")
        return user

    def log_in_patient(self, email: str, password: str) -> dict:
        return self._log_in(PATIENT, email, password)

    def log_in_hcp(self, email: str, password: str) -> dict:
        return self._log_in(HCP, email, password)

    # -- patient / HCP association --

    def get_patients(self, hcp_email: str) -> list[str]:
        return self.get_hcp(hcp_email)["patients"]

    def _modify_hcp(self, hcp_email: str, mutate) -> dict:
        key = normalize_email(hcp_email)

        def checked(hcp):
            if hcp.get("role") != HCP:
                raise NotFound(f"Healthcare Practitioner with email {hcp_email} not found.")
            return mutate(hcp)

        try:
            return self._store.modify_item(key, key, checked, max_attempts=self._max_attempts)
        except ResourceNotFoundError:
            raise NotFound(f"Healthcare Practitioner with email {hcp_email} not found.")
        except PreconditionFailedError:
            raise Conflict(f"Unable to update Healthcare Practitioner {hcp_email}, try again.")

    def add_patient_to_hcp(self, hcp_email: str, patient_email: str) -> dict:
        patient = self.get_patient(patient_email)

        def add(hcp):
            if _contains(hcp["patients"], patient["email"]):
                raise Conflict(
                    f"Patient {patient_email} is already registered with "
                    f"Healthcare Practitioner {hcp_email}."
                )
            hcp["patients"].append(patient["email"])
            return hcp

        updated = self._modify_hcp(hcp_email, add)
        logger.info("Added patient %s to HCP %s", patient["email"], updated["email"])
        return updated

    def remove_patient_from_hcp(self, hcp_email: str, patient_email: str) -> dict:
        patient = self.get_patient(patient_email)

        def remove(hcp):
            if not _contains(hcp["patients"], patient["email"]):
                raise Conflict(
                    f"Patient {patient_email} is not registered with "
                    f"Healthcare Practitioner {hcp_email}."
                )
            needle = patient["email"].casefold()
            hcp["patients"] = [e for e in hcp["patients"] if e.casefold() != needle]
            return hcp

        updated = self._modify_hcp(hcp_email, remove)
        logger.info("Removed patient %s from HCP %s", patient["email"], updated["email"])
        return updated
