# liftlog/routes/library_routes.py
#
# Exercise templates, training plans and training days.
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from .. import db
from ..services import catalog
from ..services.errors import LiftLogError
from ..services.validation import as_payload

library_bp = Blueprint("library", __name__)


def _failed(message: str, e: Exception):
    db.session.rollback()
    current_app.logger.exception(f"[library] {message}: {e}")
    return jsonify({"message": "Internal server error"}), 500


# -----------------------------
# Exercise templates
# -----------------------------
@library_bp.route("/exercise-templates", methods=["GET"])
@jwt_required()
def list_templates():
    user_id = int(get_jwt_identity())
    templates = catalog.list_templates(user_id)
    return jsonify({"exercise_templates": [t.to_dict() for t in templates]}), 200


@library_bp.route("/exercise-templates", methods=["POST"])
@jwt_required()
def create_template():
    user_id = int(get_jwt_identity())
    data = as_payload(request.get_json(silent=True))

    try:
        template = catalog.create_template(user_id, data)
    except LiftLogError:
        raise
    except Exception as e:
        return _failed("Failed to create template", e)

    return jsonify({"exercise_template": template.to_dict()}), 201


@library_bp.route("/exercise-templates/<int:template_id>", methods=["DELETE"])
@jwt_required()
def delete_template(template_id):
    user_id = int(get_jwt_identity())

    try:
        catalog.delete_template(template_id, user_id)
    except LiftLogError:
        raise
    except Exception as e:
        return _failed("Failed to delete template", e)

    return "", 204


# -----------------------------
# Training plans
# -----------------------------
@library_bp.route("/training-plans", methods=["GET"])
@jwt_required()
def list_plans():
    user_id = int(get_jwt_identity())
    plans = catalog.list_plans(user_id)
    return jsonify({"training_plans": [p.to_dict() for p in plans]}), 200


@library_bp.route("/training-plans", methods=["POST"])
@jwt_required()
def create_plan():
    user_id = int(get_jwt_identity())
    data = as_payload(request.get_json(silent=True))

    try:
        plan = catalog.create_plan(user_id, data)
    except LiftLogError:
        raise
    except Exception as e:
        return _failed("Failed to create plan", e)

    return jsonify({"training_plan": plan.to_dict()}), 201


@library_bp.route("/training-plans/<int:plan_id>", methods=["DELETE"])
@jwt_required()
def delete_plan(plan_id):
    user_id = int(get_jwt_identity())

    try:
        catalog.delete_plan(plan_id, user_id)
    except LiftLogError:
        raise
    except Exception as e:
        return _failed("Failed to delete plan", e)

    return "", 204


# -----------------------------
# Training days
# -----------------------------
@library_bp.route("/training-days", methods=["GET"])
@jwt_required()
def list_standalone_days():
    user_id = int(get_jwt_identity())
    days = catalog.list_standalone_days(user_id)
    return jsonify({"training_days": [d.to_dict() for d in days]}), 200


@library_bp.route("/all-training-days", methods=["GET"])
@jwt_required()
def list_all_days():
    user_id = int(get_jwt_identity())
    days = catalog.list_all_days(user_id)
    return jsonify({"training_days": [d.to_dict() for d in days]}), 200


@library_bp.route("/training-days", methods=["POST"])
@jwt_required()
def create_day():
    user_id = int(get_jwt_identity())
    data = as_payload(request.get_json(silent=True))

    try:
        day = catalog.create_day(user_id, data)
    except LiftLogError:
        raise
    except Exception as e:
        return _failed("Failed to create training day", e)

    return jsonify({"training_day": day.to_dict()}), 201


@library_bp.route("/training-days/<int:day_id>", methods=["PATCH"])
@jwt_required()
def rename_day(day_id):
    user_id = int(get_jwt_identity())
    data = as_payload(request.get_json(silent=True))

    try:
        day = catalog.rename_day(day_id, user_id, data.get("name"))
    except LiftLogError:
        raise
    except Exception as e:
        return _failed("Failed to rename training day", e)

    return jsonify({"training_day": day.to_dict()}), 200


@library_bp.route("/training-days/<int:day_id>", methods=["DELETE"])
@jwt_required()
def delete_day(day_id):
    user_id = int(get_jwt_identity())

    try:
        catalog.delete_day(day_id, user_id)
    except LiftLogError:
        raise
    except Exception as e:
        return _failed("Failed to delete training day", e)

    return "", 204
