# liftlog/routes/exercise_routes.py
from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from .. import db
from ..services import catalog, weight_ledger, workout_log
from ..services.analytics import sort_entries
from ..services.errors import LiftLogError
from ..services.validation import as_payload
from ..services.ownership import get_owned_exercise

exercises_bp = Blueprint("exercises", __name__)


# ------------------------------
# Helpers
# ------------------------------
def _failed(message: str, e: Exception):
    db.session.rollback()
    current_app.logger.exception(f"[exercises] {message}: {e}")
    return jsonify({"message": "Internal server error"}), 500


# ------------------------------
# POST /api/exercises
# ------------------------------
@exercises_bp.route("", methods=["POST"])
@jwt_required()
def create_exercise():
    """
    Expected body:
    {
      "training_day_id": 3,
      "exercise_template_id": 7,   # optional, fills the defaults below
      "name": "Bench Press",
      "sets": 3, "rep_min": 8, "rep_max": 12,
      "weight": 60, "increment": 2.5
    }
    """
    user_id = int(get_jwt_identity())
    data = as_payload(request.get_json(silent=True))

    try:
        exercise = catalog.create_exercise(user_id, data)
    except LiftLogError:
        raise
    except Exception as e:
        return _failed("Failed to create exercise", e)

    return jsonify({"exercise": exercise.to_dict()}), 201


# ------------------------------
# PATCH / DELETE /api/exercises/<id>
# ------------------------------
@exercises_bp.route("/<int:exercise_id>", methods=["PATCH"])
@jwt_required()
def update_exercise(exercise_id):
    user_id = int(get_jwt_identity())
    data = as_payload(request.get_json(silent=True))

    try:
        exercise = catalog.update_exercise(exercise_id, user_id, data)
    except LiftLogError:
        raise
    except Exception as e:
        return _failed("Failed to update exercise", e)

    return jsonify({"exercise": exercise.to_dict()}), 200


@exercises_bp.route("/<int:exercise_id>", methods=["DELETE"])
@jwt_required()
def delete_exercise(exercise_id):
    user_id = int(get_jwt_identity())

    try:
        catalog.delete_exercise(exercise_id, user_id)
    except LiftLogError:
        raise
    except Exception as e:
        return _failed("Failed to delete exercise", e)

    return "", 204


# ------------------------------
# POST /api/exercises/<id>/increment|decrement
# ------------------------------
@exercises_bp.route("/<int:exercise_id>/increment", methods=["POST"])
@jwt_required()
def increment_weight(exercise_id):
    user_id = int(get_jwt_identity())

    try:
        exercise = weight_ledger.increment_weight(exercise_id, user_id)
    except LiftLogError:
        raise
    except Exception as e:
        return _failed("Failed to increment weight", e)

    return jsonify({"exercise": exercise.to_dict()}), 200


@exercises_bp.route("/<int:exercise_id>/decrement", methods=["POST"])
@jwt_required()
def decrement_weight(exercise_id):
    user_id = int(get_jwt_identity())

    try:
        exercise = weight_ledger.decrement_weight(exercise_id, user_id)
    except LiftLogError:
        raise
    except Exception as e:
        return _failed("Failed to decrement weight", e)

    return jsonify({"exercise": exercise.to_dict()}), 200


# ------------------------------
# GET /api/exercises/<id>/weight-history
# ------------------------------
@exercises_bp.route("/<int:exercise_id>/weight-history", methods=["GET"])
@jwt_required()
def weight_history(exercise_id):
    user_id = int(get_jwt_identity())
    get_owned_exercise(exercise_id, user_id)

    # chart order: oldest first, same-timestamp rows in insertion order
    rows = sort_entries(weight_ledger.history(exercise_id))
    return (
        jsonify(
            {
                "weight_history": [
                    {"weight": h.weight, "recorded_at": h.recorded_at.isoformat()}
                    for h in rows
                ]
            }
        ),
        200,
    )


# ------------------------------
# GET /api/exercises/<id>/last-workout
# ------------------------------
@exercises_bp.route("/<int:exercise_id>/last-workout", methods=["GET"])
@jwt_required()
def last_workout(exercise_id):
    user_id = int(get_jwt_identity())
    entry = workout_log.last_entry(exercise_id, user_id)
    return jsonify({"workout_log": entry.to_dict() if entry else None}), 200
