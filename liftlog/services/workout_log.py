# liftlog/services/workout_log.py
"""
Workout log store: one immutable row per "complete exercise" action
during a training session.
"""

from datetime import datetime
from typing import Any, Dict, Optional

from flask import current_app

from .. import db
from ..models.history import WorkoutLog
from .errors import ValidationFailure
from .validation import as_count, as_flag, as_weight, as_weight_list
from .ownership import get_owned_exercise


# ------------------------------
# Store
# ------------------------------
def last_entry(exercise_id: int, user_id: int) -> Optional[WorkoutLog]:
    get_owned_exercise(exercise_id, user_id)
    return (
        WorkoutLog.query.filter_by(exercise_id=exercise_id)
        .order_by(WorkoutLog.completed_at.desc(), WorkoutLog.id.desc())
        .first()
    )


def append(
    exercise_id: int,
    user_id: int,
    weight: Any,
    sets_completed: Any,
    total_sets: Any,
    reps_achieved: Any = False,
    set_weights: Any = None,
    completed_at: Optional[datetime] = None,
) -> WorkoutLog:
    """
    Record one completed exercise.

    Raises ValidationFailure before touching the store, NotFound for an
    unknown exercise and Forbidden when the exercise's day belongs to
    another user. Nothing is written in any of those cases.
    """
    weight = as_weight(weight, "weight")
    sets_completed = as_count(sets_completed, "sets_completed")
    total_sets = as_count(total_sets, "total_sets")
    set_weights = as_weight_list(set_weights)
    reps_achieved = as_flag(reps_achieved, "reps_achieved")
    if sets_completed > total_sets:
        raise ValidationFailure("sets_completed must not exceed total_sets", field="sets_completed")

    exercise = get_owned_exercise(exercise_id, user_id)

    entry = WorkoutLog(
        exercise_id=exercise.id,
        weight=weight,
        sets_completed=sets_completed,
        total_sets=total_sets,
        reps_achieved=reps_achieved,
        set_weights=set_weights,
        completed_at=completed_at or datetime.utcnow(),
    )

    try:
        db.session.add(entry)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise

    current_app.logger.info(
        f"[workout-log] exercise_id={exercise.id} sets={sets_completed}/{total_sets} weight={weight}"
    )
    return entry


def completion_signals(entry: WorkoutLog) -> Dict[str, bool]:
    """
    Flags the client needs after a completion. The "increase weight?"
    prompt itself is a UI decision.
    """
    increment = entry.exercise.increment if entry.exercise is not None else 0
    return {
        "all_sets_completed": entry.all_sets_completed,
        "offer_weight_increase": entry.all_sets_completed and bool(increment and increment > 0),
    }
