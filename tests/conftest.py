import pytest

from rvms_api import create_app
from rvms_api.config import Config


class TestingConfig(Config):
    TESTING = True
    SQLALCHEMY_DATABASE_URI = "sqlite:///:memory:"
    DOCUMENT_CONTAINER = "users-test"
    AUTO_CREATE_CONTAINER = True
    BCRYPT_ROUNDS = 4
    UPDATE_MAX_ATTEMPTS = 3
    ENABLE_ADMIN = True
    LOG_LEVEL = "DEBUG"


@pytest.fixture
def app():
    return create_app(TestingConfig)


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def app_ctx(app):
    with app.app_context():
        yield


@pytest.fixture
def store(app, app_ctx):
    return app.extensions["document_store"]


@pytest.fixture
def user_service(app, app_ctx):
    return app.extensions["user_service"]


@pytest.fixture
def vitals_service(app, app_ctx):
    return app.extensions["vitals_service"]


@pytest.fixture
def register(client):
    """POST a registration for ``role`` ("patient" or "hcp") and return the response."""

    def _register(role, email, password="pw1", **extra):
        body = {"email": email, "password": password, **extra}
        return client.post(f"/api/user/auth/{role}/register", json=body)

    return _register
