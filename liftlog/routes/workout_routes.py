# liftlog/routes/workout_routes.py

from flask import Blueprint, current_app, jsonify, request
from flask_jwt_extended import jwt_required, get_jwt_identity

from .. import db
from ..services import workout_log
from ..services.errors import LiftLogError
from ..services.validation import as_id, as_payload
from ..services.training_status import training_status as compute_training_status

workouts_bp = Blueprint("workouts", __name__)


# ------------------------------
# POST /api/workout-logs
# ------------------------------
@workouts_bp.route("/workout-logs", methods=["POST"])
@jwt_required()
def create_workout_log():
    """
    Expected body:
    {
      "exercise_id": 12,
      "weight": 60,
      "sets_completed": 3,
      "total_sets": 3,
      "reps_achieved": true,
      "set_weights": [60, 60, 57.5]    # optional
    }
    """
    user_id = int(get_jwt_identity())
    data = as_payload(request.get_json(silent=True))

    exercise_id = as_id(data.get("exercise_id"), "exercise_id")

    try:
        entry = workout_log.append(
            exercise_id,
            user_id,
            weight=data.get("weight"),
            sets_completed=data.get("sets_completed"),
            total_sets=data.get("total_sets"),
            reps_achieved=data.get("reps_achieved", False),
            set_weights=data.get("set_weights"),
        )
    except LiftLogError:
        raise
    except Exception as e:
        db.session.rollback()
        current_app.logger.exception(f"[workout-logs] Failed to record workout: {e}")
        return jsonify({"message": "Internal server error"}), 500

    return (
        jsonify(
            {
                "workout_log": entry.to_dict(),
                **workout_log.completion_signals(entry),
            }
        ),
        201,
    )


# ------------------------------
# GET /api/training-status
# ------------------------------
@workouts_bp.route("/training-status", methods=["GET"])
@jwt_required()
def training_status():
    user_id = int(get_jwt_identity())
    return jsonify(compute_training_status(user_id)), 200
