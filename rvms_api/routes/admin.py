from flask import Blueprint, request, current_app
from ..extensions import db

admin_bp = Blueprint("admin", __name__, url_prefix="/admin")


def store():
    return current_app.extensions["document_store"]


@admin_bp.get("/store")
def store_info():
    s = store()
    return {
        "database_uri": db.engine.url.render_as_string(hide_password=True),
        "container": s.container,
        "documents": s.count_items(),
    }, 200


@admin_bp.route("/init-store", methods=["POST", "GET"])
def init_store():
    if request.method == "GET" and request.args.get("confirm") != "yes":
        return {"message": "Use POST or /admin/init-store?confirm=yes (local only)"}, 200
    if store().create_container_if_not_exists():
        return {"status": "initialized"}, 201
    return {"status": "exists"}, 200


@admin_bp.get("/routes")
def list_routes():
    routes = []
    for rule in current_app.url_map.iter_rules():
        routes.append({"rule": str(rule), "methods": sorted(list(rule.methods))})
    return {"routes": routes}, 200
