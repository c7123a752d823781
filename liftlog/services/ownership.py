# liftlog/services/ownership.py
"""
One place that answers "which user owns this row?".

Templates, plans and days carry a user_id. Everything below a day inherits
ownership by walking up: ledger/log entry -> exercise -> day -> plan.
"""

from typing import Optional

from ..models.history import WeightHistory, WorkoutLog
from ..models.training import Exercise, ExerciseTemplate, TrainingDay, TrainingPlan
from .errors import Forbidden, NotFound


def owner_of(entity) -> Optional[int]:
    """Return the owning user id, or None when the chain is broken."""
    if entity is None:
        return None

    if isinstance(entity, (WeightHistory, WorkoutLog)):
        return owner_of(entity.exercise)

    if isinstance(entity, Exercise):
        return owner_of(entity.training_day)

    if isinstance(entity, TrainingDay):
        # Days inside a plan belong to the plan's owner.
        if entity.plan is not None:
            return entity.plan.user_id
        return entity.user_id

    if isinstance(entity, (TrainingPlan, ExerciseTemplate)):
        return entity.user_id

    raise TypeError(f"no ownership rule for {type(entity).__name__}")


def _require_owned(entity, user_id: int, label: str, entity_id: int):
    if entity is None:
        raise NotFound(f"{label} not found")
    owner = owner_of(entity)
    if owner is None or int(owner) != int(user_id):
        raise Forbidden(
            f"user {user_id} may not access {label.lower()} {entity_id} (owner={owner})",
            public_message=f"{label} not found",
        )
    return entity


def get_owned_exercise(exercise_id: int, user_id: int) -> Exercise:
    return _require_owned(Exercise.query.get(exercise_id), user_id, "Exercise", exercise_id)


def get_owned_day(day_id: int, user_id: int) -> TrainingDay:
    return _require_owned(TrainingDay.query.get(day_id), user_id, "Training day", day_id)


def get_owned_plan(plan_id: int, user_id: int) -> TrainingPlan:
    return _require_owned(TrainingPlan.query.get(plan_id), user_id, "Training plan", plan_id)


def get_owned_template(template_id: int, user_id: int) -> ExerciseTemplate:
    return _require_owned(
        ExerciseTemplate.query.get(template_id), user_id, "Exercise template", template_id
    )
