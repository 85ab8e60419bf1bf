# Overview: Flask API routes for customer sessions; parses input and returns JSON responses.

"""
Session routes.

SECURITY:
- Start, add items, edit items, bill, checkout and cancel: any staff role
- Clearing every session is admin-only

CONCURRENCY: Mutations accept an optional expected_version. A stale value
returns 409 so the client can reload instead of overwriting a colleague.
"""

from flask import Blueprint, current_app, jsonify, request

from ..decorators import require_auth, require_capability
from ..exceptions import HiveError
from ..permissions import can_operate_sessions, is_admin
from ..services import session_service


sessions_bp = Blueprint("sessions", __name__, url_prefix="/api/sessions")


def _error(e: HiveError):
    body = {"error": str(e)}
    if e.details:
        body["details"] = e.details
    return jsonify(body), e.http_status


@sessions_bp.get("")
@require_auth
@require_capability(can_operate_sessions)
def list_sessions_route():
    status = request.args.get("status")
    try:
        sessions = session_service.list_sessions(status=status)
    except HiveError as e:
        return _error(e)
    return jsonify({"sessions": [s.to_dict() for s in sessions], "count": len(sessions)})


@sessions_bp.post("")
@require_auth
@require_capability(can_operate_sessions)
def start_session_route():
    data = request.get_json(silent=True) or {}
    try:
        record = session_service.start_session(data.get("name"))
        return jsonify({"session": record.to_dict()}), 201
    except HiveError as e:
        return _error(e)
    except Exception:
        current_app.logger.exception("Failed to start session")
        return jsonify({"error": "Internal server error"}), 500


@sessions_bp.delete("")
@require_auth
@require_capability(is_admin)
def clear_sessions_route():
    count = session_service.clear_all_sessions()
    return jsonify({"deleted": count})


@sessions_bp.get("/<int:session_id>")
@require_auth
@require_capability(can_operate_sessions)
def get_session_route(session_id: int):
    try:
        record = session_service.get_session(session_id)
    except HiveError as e:
        return _error(e)
    return jsonify({"session": record.to_dict()})


@sessions_bp.post("/<int:session_id>/items")
@require_auth
@require_capability(can_operate_sessions)
def add_item_route(session_id: int):
    data = request.get_json(silent=True) or {}
    item_id = data.get("item_id")
    quantity = data.get("quantity", 1)

    if item_id is None:
        return jsonify({"error": "item_id required"}), 400

    try:
        record = session_service.add_item(
            session_id,
            item_id,
            quantity,
            expected_version=data.get("expected_version"),
        )
        return jsonify({"session": record.to_dict()}), 200
    except HiveError as e:
        return _error(e)
    except Exception:
        current_app.logger.exception("Failed to add item to session")
        return jsonify({"error": "Internal server error"}), 500


@sessions_bp.put("/<int:session_id>/items")
@require_auth
@require_capability(can_operate_sessions)
def update_items_route(session_id: int):
    data = request.get_json(silent=True) or {}
    if "items" not in data:
        return jsonify({"error": "items required"}), 400

    try:
        record = session_service.update_items(
            session_id,
            data["items"],
            expected_version=data.get("expected_version"),
        )
        return jsonify({"session": record.to_dict()}), 200
    except HiveError as e:
        return _error(e)
    except Exception:
        current_app.logger.exception("Failed to update session items")
        return jsonify({"error": "Internal server error"}), 500


@sessions_bp.get("/<int:session_id>/bill")
@require_auth
@require_capability(can_operate_sessions)
def preview_bill_route(session_id: int):
    raw = request.args.get("discount_cents", "0").strip()
    try:
        discount_cents = int(raw)
    except ValueError:
        return jsonify({"error": "discount_cents must be an integer"}), 400

    try:
        bill = session_service.preview_bill(session_id, discount_cents=discount_cents)
    except HiveError as e:
        return _error(e)
    return jsonify({"bill": bill.to_dict()})


@sessions_bp.post("/<int:session_id>/checkout")
@require_auth
@require_capability(can_operate_sessions)
def checkout_route(session_id: int):
    data = request.get_json(silent=True) or {}
    payment_method = data.get("payment_method")

    if not payment_method:
        return jsonify({"error": "payment_method required"}), 400

    try:
        record, bill = session_service.checkout(
            session_id,
            discount_cents=data.get("discount_cents", 0),
            payment_method=payment_method,
            expected_version=data.get("expected_version"),
        )
        return jsonify({"session": record.to_dict(), "bill": bill.to_dict()}), 200
    except HiveError as e:
        return _error(e)
    except Exception:
        current_app.logger.exception("Failed to checkout session")
        return jsonify({"error": "Internal server error"}), 500


@sessions_bp.post("/<int:session_id>/cancel")
@require_auth
@require_capability(can_operate_sessions)
def cancel_route(session_id: int):
    data = request.get_json(silent=True) or {}
    try:
        record = session_service.cancel(session_id, expected_version=data.get("expected_version"))
        return jsonify({"session": record.to_dict()}), 200
    except HiveError as e:
        return _error(e)
    except Exception:
        current_app.logger.exception("Failed to cancel session")
        return jsonify({"error": "Internal server error"}), 500
