import os

from dotenv import load_dotenv

load_dotenv()


def _flag(name: str, default: str) -> bool:
    return os.getenv(name, default).lower() in {"1", "true", "yes"}


class Config:
    SQLALCHEMY_DATABASE_URI = os.getenv("DATABASE_URL", "sqlite:///rvms.db")
    SQLALCHEMY_TRACK_MODIFICATIONS = False

    # Document store
    DOCUMENT_CONTAINER = os.getenv("DOCUMENT_CONTAINER", "users")
    AUTO_CREATE_CONTAINER = _flag("AUTO_CREATE_CONTAINER", "1")
    UPDATE_MAX_ATTEMPTS = int(os.getenv("UPDATE_MAX_ATTEMPTS", "5"))

    BCRYPT_ROUNDS = int(os.getenv("BCRYPT_ROUNDS", "12"))

    SECRET_KEY = os.getenv("SECRET_KEY", "change-me-in-prod")
    PREFERRED_URL_SCHEME = "https"
    CORS_ORIGINS = os.getenv("CORS_ORIGINS", "*")

    ENABLE_ADMIN = _flag("ENABLE_ADMIN", "0")
    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
