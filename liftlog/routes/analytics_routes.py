# liftlog/routes/analytics_routes.py
from flask import Blueprint, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from ..services.analytics import analytics_detail, analytics_overview

analytics_bp = Blueprint("analytics", __name__)


def _period_arg():
    period = (request.args.get("period") or "").strip().lower()
    return period or None


@analytics_bp.route("", methods=["GET"])
@jwt_required()
def overview():
    """
    GET /api/analytics?period=this_month|last_month|this_year|last_year|all

    Without a period the trailing 30 days are used.
    """
    user_id = int(get_jwt_identity())
    return jsonify(analytics_overview(user_id, _period_arg())), 200


@analytics_bp.route("/<int:template_id>", methods=["GET"])
@jwt_required()
def detail(template_id):
    """
    GET /api/analytics/<template_id>?period=...

    `enough_data` is false when fewer than two weight points fall inside
    the window; the client then shows "not enough data" instead of a chart.
    """
    user_id = int(get_jwt_identity())
    result = analytics_detail(user_id, template_id, _period_arg())
    if result is None:
        return jsonify({"message": "Exercise template not found"}), 404
    return jsonify(result), 200
