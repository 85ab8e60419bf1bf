# Overview: Flask API routes for global settings; parses input and returns JSON responses.

from flask import Blueprint, current_app, jsonify, request

from ..decorators import require_auth, require_capability
from ..exceptions import HiveError
from ..permissions import can_manage_settings, can_view_settings
from ..services import settings_service


settings_bp = Blueprint("settings", __name__, url_prefix="/api/settings")


@settings_bp.get("")
@require_auth
@require_capability(can_view_settings)
def get_settings_route():
    return jsonify({"settings": settings_service.get_settings().to_dict()})


@settings_bp.patch("")
@require_auth
@require_capability(can_manage_settings)
def update_settings_route():
    payload = request.get_json(silent=True)
    try:
        settings = settings_service.update_settings(payload)
        return jsonify({"settings": settings.to_dict()})
    except HiveError as e:
        return jsonify({"error": str(e)}), e.http_status
    except Exception:
        current_app.logger.exception("Failed to update settings")
        return jsonify({"error": "Internal server error"}), 500
