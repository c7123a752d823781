# liftlog/services/training_status.py
"""
Training status and next-day suggestion.

Only days that belong to a plan take part; standalone days are never
suggested. A day counts as trained at the latest workout-log timestamp of
any of its current exercises, so logs of deleted exercises simply drop out.
"""

from typing import Any, Dict, List, Optional

from sqlalchemy import func

from .. import db
from ..models.history import WorkoutLog
from ..models.training import TrainingPlan


def next_day_in_rotation(days: List[Dict[str, Any]], last_day_id: Optional[int]) -> Optional[Dict[str, Any]]:
    """
    Round-robin over `days` ordered by id: the day after `last_day_id`,
    wrapping to the first. An unknown id also lands on the first day.
    """
    if not days:
        return None
    ordered = sorted(days, key=lambda d: d["id"])
    ids = [d["id"] for d in ordered]
    try:
        idx = ids.index(last_day_id)
    except ValueError:
        return ordered[0]
    return ordered[(idx + 1) % len(ordered)]


def _latest_log_by_exercise(exercise_ids: List[int]) -> Dict[int, Any]:
    if not exercise_ids:
        return {}
    rows = (
        db.session.query(WorkoutLog.exercise_id, func.max(WorkoutLog.completed_at))
        .filter(WorkoutLog.exercise_id.in_(exercise_ids))
        .group_by(WorkoutLog.exercise_id)
        .all()
    )
    return {exercise_id: ts for exercise_id, ts in rows}


def _day_summary(day, plan) -> Dict[str, Any]:
    return {
        "id": day.id,
        "name": day.name,
        "plan_id": plan.id,
        "plan_name": plan.name,
        "exercise_count": len(day.exercises),
    }


def training_status(user_id: int) -> Dict[str, Any]:
    plans = (
        TrainingPlan.query.filter_by(user_id=user_id)
        .order_by(TrainingPlan.id.asc())
        .all()
    )

    exercise_ids = [
        ex.id for plan in plans for day in plan.training_days for ex in day.exercises
    ]
    latest = _latest_log_by_exercise(exercise_ids)

    last_trained_by_plan: Dict[int, Dict[str, Any]] = {}
    rotation: Dict[int, List[Dict[str, Any]]] = {}
    last_trained = None

    for plan in plans:
        rotation[plan.id] = [
            _day_summary(day, plan) for day in plan.training_days if day.exercises
        ]

        plan_last = None
        for day in plan.training_days:
            stamps = [latest[ex.id] for ex in day.exercises if latest.get(ex.id)]
            if not stamps:
                continue
            trained_at = max(stamps)
            # strict ">" keeps the first day/plan seen on equal timestamps
            if plan_last is None or trained_at > plan_last["trained_at"]:
                plan_last = {"day_id": day.id, "day_name": day.name, "trained_at": trained_at}

        if plan_last is None:
            continue

        last_trained_by_plan[plan.id] = plan_last
        if last_trained is None or plan_last["trained_at"] > last_trained["trained_at"]:
            last_trained = dict(plan_last, plan_id=plan.id, plan_name=plan.name)

    suggested = None
    if last_trained is not None:
        suggested = next_day_in_rotation(rotation[last_trained["plan_id"]], last_trained["day_id"])

    if suggested is None:
        # nothing logged yet: first day with exercises of the first plan that has one
        for plan in plans:
            if rotation[plan.id]:
                suggested = min(rotation[plan.id], key=lambda d: d["id"])
                break

    def _iso(entry):
        return dict(entry, trained_at=entry["trained_at"].isoformat())

    return {
        "last_trained_by_plan": {pid: _iso(v) for pid, v in last_trained_by_plan.items()},
        "last_trained": _iso(last_trained) if last_trained else None,
        "suggested_day": suggested,
    }
