# Overview: Flask API routes for the daily revenue summary and its CSV export.

from flask import Blueprint, Response, jsonify, request

from ..decorators import require_auth, require_capability
from ..permissions import can_view_summary
from ..services import summary_service
from hive.time_utils import parse_iso_date


summary_bp = Blueprint("summary", __name__, url_prefix="/api/summary")


def _day_arg():
    """?day=YYYY-MM-DD; absent means today in the business timezone."""
    return parse_iso_date(request.args.get("day"))


@summary_bp.get("")
@require_auth
@require_capability(can_view_summary)
def daily_summary_route():
    try:
        day = _day_arg()
    except ValueError:
        return jsonify({"error": "day must be YYYY-MM-DD"}), 400

    summary = summary_service.daily_summary(day)
    return jsonify(summary.to_dict())


@summary_bp.get("/export.csv")
@require_auth
@require_capability(can_view_summary)
def export_csv_route():
    try:
        day = _day_arg()
    except ValueError:
        return jsonify({"error": "day must be YYYY-MM-DD"}), 400

    summary = summary_service.daily_summary(day)
    if not summary.sessions:
        return jsonify({"error": "No data to export"}), 404

    body = summary_service.export_csv(summary.day)
    filename = summary_service.export_filename(summary.day)
    return Response(
        body,
        mimetype="text/csv",
        headers={"Content-Disposition": f"attachment; filename={filename}"},
    )
