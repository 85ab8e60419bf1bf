# Overview: Flask API routes for the item catalog; parses input and returns JSON responses.

"""
Catalog routes.

SECURITY:
- Listing requires any staff role (cashiers pick items for sessions)
- Create, update, delete and seed are admin-only
"""

from flask import Blueprint, current_app, jsonify, request

from ..decorators import require_auth, require_capability
from ..exceptions import HiveError
from ..permissions import can_manage_catalog, can_operate_sessions
from ..services import catalog_service


items_bp = Blueprint("items", __name__, url_prefix="/api/items")


@items_bp.get("")
@require_auth
@require_capability(can_operate_sessions)
def list_items_route():
    items = catalog_service.list_items()
    return jsonify({"items": [i.to_dict() for i in items], "count": len(items)})


@items_bp.post("")
@require_auth
@require_capability(can_manage_catalog)
def create_item_route():
    payload = request.get_json(silent=True) or {}
    try:
        item = catalog_service.create_item(payload)
        return jsonify({"item": item.to_dict()}), 201
    except HiveError as e:
        return jsonify({"error": str(e)}), e.http_status
    except Exception:
        current_app.logger.exception("Failed to create item")
        return jsonify({"error": "Internal server error"}), 500


@items_bp.route("/<int:item_id>", methods=["PUT", "PATCH"])
@require_auth
@require_capability(can_manage_catalog)
def update_item_route(item_id: int):
    payload = request.get_json(silent=True) or {}
    try:
        item = catalog_service.update_item(item_id, payload)
        return jsonify({"item": item.to_dict()})
    except HiveError as e:
        return jsonify({"error": str(e)}), e.http_status
    except Exception:
        current_app.logger.exception("Failed to update item")
        return jsonify({"error": "Internal server error"}), 500


@items_bp.delete("/<int:item_id>")
@require_auth
@require_capability(can_manage_catalog)
def delete_item_route(item_id: int):
    try:
        catalog_service.delete_item(item_id)
        return jsonify({"deleted": True})
    except HiveError as e:
        return jsonify({"error": str(e)}), e.http_status


@items_bp.post("/seed")
@require_auth
@require_capability(can_manage_catalog)
def seed_items_route():
    created = catalog_service.seed_catalog()
    if not created:
        return jsonify({"created": 0, "message": "Catalog already contains items. Seeding skipped."})
    return jsonify({"created": created}), 201
