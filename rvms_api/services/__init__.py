from .users import UserService
from .vitals import VitalsService

__all__ = ["UserService", "VitalsService"]
