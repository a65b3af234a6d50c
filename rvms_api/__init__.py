import logging

from flask import Flask, request
from werkzeug.exceptions import InternalServerError

from .config import Config
from .errors import ServiceError, error
from .extensions import db, cors
from .services import UserService, VitalsService
from .store import DocumentStore, DocumentStoreError


def create_app(config_class: type = Config) -> Flask:
    app = Flask(__name__)
    app.config.from_object(config_class)
    app.json.sort_keys = False

    logging.basicConfig(format="%(asctime)s %(levelname)s %(name)s: %(message)s")
    logging.getLogger(__name__).setLevel(app.config["LOG_LEVEL"])
    app.logger.setLevel(app.config["LOG_LEVEL"])

    db.init_app(app)
    cors.init_app(app)

    # one store per process, shared by both services
    store = DocumentStore(db, app.config["DOCUMENT_CONTAINER"])
    max_attempts = app.config["UPDATE_MAX_ATTEMPTS"]
    app.extensions["document_store"] = store
    app.extensions["user_service"] = UserService(
        store, app.config["BCRYPT_ROUNDS"], max_attempts
    )
    app.extensions["vitals_service"] = VitalsService(store, max_attempts)

    if app.config["AUTO_CREATE_CONTAINER"]:
        with app.app_context():
            store.create_container_if_not_exists()

    @app.before_request
    def _log_req():
        app.logger.info("REQ: %s %s | CT: %s",
                        request.method, request.path, request.headers.get("Content-Type"))

    @app.errorhandler(ServiceError)
    def _service_error(e):
        return error(e.code, e.status, str(e))

    @app.errorhandler(DocumentStoreError)
    def _store_error(e):
        app.logger.exception("Document store failure")
        return error("internal_error", 500, "Document store failure")

    @app.errorhandler(InternalServerError)
    def _internal_error(e):
        return error("internal_error", 500, "Internal server error")

    @app.get("/health")
    def health():
        return {"status": "OK"}, 200

    # register blueprints
    from .routes.user import user_bp
    app.register_blueprint(user_bp)

    from .routes.vitals import vitals_bp
    app.register_blueprint(vitals_bp)

    if app.config["ENABLE_ADMIN"]:
        from .routes.admin import admin_bp
        app.register_blueprint(admin_bp)

    return app
