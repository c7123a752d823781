# liftlog/services/catalog.py
"""
Plain CRUD over templates, plans, days and exercises.

Two rules matter beyond storage: a new exercise gets its creation snapshot
in the weight ledger, and deletes follow the ORM cascade
(plan -> days -> exercises -> ledger/log rows) except for templates, which
only detach from their exercises.
"""

from typing import Any, Dict, List, Optional

from flask import current_app

from .. import db
from ..models.training import Exercise, ExerciseTemplate, TrainingDay, TrainingPlan
from . import weight_ledger
from .errors import ValidationFailure
from .ownership import get_owned_day, get_owned_exercise, get_owned_plan, get_owned_template
from .validation import as_count, as_name, as_optional_id, as_weight


def _commit():
    try:
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise


def _check_rep_range(rep_min: int, rep_max: int) -> None:
    if rep_min > rep_max:
        raise ValidationFailure("rep_min must not exceed rep_max", field="rep_min")


# ------------------------------
# Templates
# ------------------------------
def list_templates(user_id: int) -> List[ExerciseTemplate]:
    return (
        ExerciseTemplate.query.filter_by(user_id=user_id)
        .order_by(ExerciseTemplate.name.asc())
        .all()
    )


def create_template(user_id: int, data: Dict[str, Any]) -> ExerciseTemplate:
    category = data.get("category")
    if category is not None:
        category = str(category).strip() or None

    template = ExerciseTemplate(
        user_id=user_id,
        name=as_name(data.get("name")),
        category=category,
        default_sets=as_count(data.get("default_sets", 3), "default_sets"),
        default_rep_min=as_count(data.get("default_rep_min", 8), "default_rep_min"),
        default_rep_max=as_count(data.get("default_rep_max", 12), "default_rep_max"),
        default_weight=as_weight(data.get("default_weight", 0), "default_weight"),
        default_increment=as_weight(data.get("default_increment", 2.5), "default_increment"),
    )
    _check_rep_range(template.default_rep_min, template.default_rep_max)

    db.session.add(template)
    _commit()
    return template


def delete_template(template_id: int, user_id: int) -> None:
    template = get_owned_template(template_id, user_id)

    # exercises survive, they just lose the reference
    Exercise.query.filter_by(exercise_template_id=template.id).update(
        {"exercise_template_id": None}, synchronize_session="fetch"
    )
    db.session.delete(template)
    _commit()
    current_app.logger.info(f"[catalog] template {template_id} deleted, exercises detached")


# ------------------------------
# Plans
# ------------------------------
def list_plans(user_id: int) -> List[TrainingPlan]:
    return TrainingPlan.query.filter_by(user_id=user_id).order_by(TrainingPlan.id.asc()).all()


def create_plan(user_id: int, data: Dict[str, Any]) -> TrainingPlan:
    plan = TrainingPlan(user_id=user_id, name=as_name(data.get("name")))
    db.session.add(plan)
    _commit()
    return plan


def delete_plan(plan_id: int, user_id: int) -> None:
    plan = get_owned_plan(plan_id, user_id)
    db.session.delete(plan)
    _commit()
    current_app.logger.info(f"[catalog] plan {plan_id} deleted with its days")


# ------------------------------
# Days
# ------------------------------
def list_standalone_days(user_id: int) -> List[TrainingDay]:
    return (
        TrainingDay.query.filter_by(user_id=user_id, plan_id=None)
        .order_by(TrainingDay.id.asc())
        .all()
    )


def list_all_days(user_id: int) -> List[TrainingDay]:
    return TrainingDay.query.filter_by(user_id=user_id).order_by(TrainingDay.id.asc()).all()


def create_day(user_id: int, data: Dict[str, Any]) -> TrainingDay:
    name = as_name(data.get("name"))
    plan_id = as_optional_id(data.get("plan_id"), "plan_id")
    if plan_id is not None:
        get_owned_plan(plan_id, user_id)

    day = TrainingDay(user_id=user_id, plan_id=plan_id, name=name)
    db.session.add(day)
    _commit()
    return day


def rename_day(day_id: int, user_id: int, name: Any) -> TrainingDay:
    day = get_owned_day(day_id, user_id)
    day.name = as_name(name)
    _commit()
    return day


def delete_day(day_id: int, user_id: int) -> None:
    day = get_owned_day(day_id, user_id)
    db.session.delete(day)
    _commit()


# ------------------------------
# Exercises
# ------------------------------
def create_exercise(user_id: int, data: Dict[str, Any]) -> Exercise:
    """Create an exercise on a day; template defaults fill missing fields."""
    day_id = as_optional_id(data.get("training_day_id"), "training_day_id")
    if day_id is None:
        raise ValidationFailure("training_day_id is required", field="training_day_id")
    day = get_owned_day(day_id, user_id)

    template: Optional[ExerciseTemplate] = None
    template_id = as_optional_id(data.get("exercise_template_id"), "exercise_template_id")
    if template_id is not None:
        template = get_owned_template(template_id, user_id)

    def pick(key, template_attr, fallback):
        if data.get(key) is not None:
            return data[key]
        if template is not None:
            return getattr(template, template_attr)
        return fallback

    exercise = Exercise(
        training_day_id=day.id,
        exercise_template_id=template.id if template else None,
        name=as_name(pick("name", "name", None)),
        sets=as_count(pick("sets", "default_sets", 3), "sets"),
        rep_min=as_count(pick("rep_min", "default_rep_min", 8), "rep_min"),
        rep_max=as_count(pick("rep_max", "default_rep_max", 12), "rep_max"),
        weight=as_weight(pick("weight", "default_weight", 0), "weight"),
        increment=as_weight(pick("increment", "default_increment", 2.5), "increment"),
        order_index=as_count(data.get("order_index", len(day.exercises)), "order_index"),
    )
    _check_rep_range(exercise.rep_min, exercise.rep_max)

    try:
        db.session.add(exercise)
        db.session.flush()
        weight_ledger.record(exercise.id, exercise.weight, commit=False)
        db.session.commit()
    except Exception:
        db.session.rollback()
        raise
    return exercise


_EXERCISE_FIELDS = {
    "name": as_name,
    "sets": lambda v: as_count(v, "sets"),
    "rep_min": lambda v: as_count(v, "rep_min"),
    "rep_max": lambda v: as_count(v, "rep_max"),
    "weight": lambda v: as_weight(v, "weight"),
    "increment": lambda v: as_weight(v, "increment"),
    "order_index": lambda v: as_count(v, "order_index"),
}


def update_exercise(exercise_id: int, user_id: int, data: Dict[str, Any]) -> Exercise:
    """Manual edit. Does not touch the weight ledger."""
    exercise = get_owned_exercise(exercise_id, user_id)

    changes = {}
    for key, coerce in _EXERCISE_FIELDS.items():
        if key in data:
            changes[key] = coerce(data[key])

    if "exercise_template_id" in data:
        template_id = as_optional_id(data["exercise_template_id"], "exercise_template_id")
        if template_id is not None:
            get_owned_template(template_id, user_id)
        changes["exercise_template_id"] = template_id

    _check_rep_range(
        changes.get("rep_min", exercise.rep_min), changes.get("rep_max", exercise.rep_max)
    )

    for key, value in changes.items():
        setattr(exercise, key, value)
    _commit()
    return exercise


def delete_exercise(exercise_id: int, user_id: int) -> None:
    exercise = get_owned_exercise(exercise_id, user_id)
    db.session.delete(exercise)
    _commit()
