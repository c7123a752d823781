# liftlog/services/weight_ledger.py
"""
Weight ledger: append-only weight snapshots per exercise.

Every exercise gets one entry when it is created and one per
increment/decrement. `history()` hands entries back in storage order; the
analytics engine and the chart endpoint each sort them their own way.
"""

import math
from datetime import datetime
from typing import List, Optional

from flask import current_app

from .. import db
from ..models.history import WeightHistory
from ..models.training import Exercise
from .errors import NotFound
from .ownership import get_owned_exercise


def record(
    exercise_id: int,
    weight: float,
    recorded_at: Optional[datetime] = None,
    commit: bool = True,
) -> WeightHistory:
    """Append a snapshot. With commit=False the caller owns the transaction."""
    if Exercise.query.get(exercise_id) is None:
        raise NotFound("Exercise not found")

    entry = WeightHistory(
        exercise_id=exercise_id,
        weight=float(weight),
        recorded_at=recorded_at or datetime.utcnow(),
    )
    db.session.add(entry)
    if commit:
        db.session.commit()
    return entry


def history(exercise_id: int) -> List[WeightHistory]:
    return WeightHistory.query.filter_by(exercise_id=exercise_id).all()


def _step_weight(exercise: Exercise, direction: int) -> float:
    raw = (exercise.weight or 0.0) + direction * (exercise.increment or 0.0)
    # half-up to the hundredth, matching the analytics rounding
    new_weight = math.floor(raw * 100 + 0.5) / 100
    return max(0.0, new_weight)


def _apply_step(exercise_id: int, user_id: int, direction: int) -> Exercise:
    exercise = get_owned_exercise(exercise_id, user_id)

    try:
        old_weight = exercise.weight
        exercise.weight = _step_weight(exercise, direction)
        # weight write and ledger append land in the same commit
        record(exercise.id, exercise.weight, commit=False)
        db.session.commit()
    except Exception:
        db.session.rollback()
        current_app.logger.exception(
            f"[ledger] weight step failed for exercise_id={exercise_id}"
        )
        raise

    current_app.logger.info(
        f"[ledger] exercise_id={exercise.id} weight {old_weight} -> {exercise.weight}"
    )
    return exercise


def increment_weight(exercise_id: int, user_id: int) -> Exercise:
    return _apply_step(exercise_id, user_id, +1)


def decrement_weight(exercise_id: int, user_id: int) -> Exercise:
    """Lower the weight by one increment, clamped at 0."""
    return _apply_step(exercise_id, user_id, -1)
