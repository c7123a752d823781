# liftlog/services/analytics.py
"""
Progression analytics.

Percent weight change per logical exercise over a period window, grouped
by category for the overview, plus a per-template detail view with the
weight time series used by the chart.

The arithmetic (window bounds, old-weight pick, percent change, picking one
instance per template) lives in small pure functions; the two entry points
`analytics_overview` and `analytics_detail` only load rows and feed them
through.
"""

import math
from collections import OrderedDict
from datetime import datetime, timedelta
from typing import Any, Dict, Iterable, List, Optional, Sequence, Tuple

from flask import current_app

from config import DEFAULT_CATEGORIES, UNCATEGORIZED

from ..models.history import WeightHistory, WorkoutLog
from ..models.training import Exercise, ExerciseTemplate, TrainingDay
from .errors import ValidationFailure

PERIODS = ("this_month", "last_month", "this_year", "last_year", "all")

Window = Tuple[Optional[datetime], Optional[datetime]]


# ------------------------------
# Pure helpers
# ------------------------------
def _month_start(year: int, month: int) -> datetime:
    # month may run one past either end of the year
    if month < 1:
        year, month = year - 1, 12
    elif month > 12:
        year, month = year + 1, 1
    return datetime(year, month, 1)


def resolve_window(period: Optional[str], now: datetime, default_days: int = 30) -> Window:
    """
    Map a period token to (start, end). Either side may be None (open).

    start is the reference boundary for the old weight; end only limits the
    time series and the log counters.
    """
    if not period:
        return now - timedelta(days=default_days), None

    if period == "this_month":
        return _month_start(now.year, now.month), _month_start(now.year, now.month + 1)
    if period == "last_month":
        return _month_start(now.year, now.month - 1), _month_start(now.year, now.month)
    if period == "this_year":
        return datetime(now.year, 1, 1), datetime(now.year + 1, 1, 1)
    if period == "last_year":
        return datetime(now.year - 1, 1, 1), datetime(now.year, 1, 1)
    if period == "all":
        return None, None

    raise ValidationFailure(
        f"period must be one of {', '.join(PERIODS)}", field="period"
    )


def in_window(ts: Optional[datetime], window: Window) -> bool:
    start, end = window
    if ts is None:
        return False
    if start is not None and ts < start:
        return False
    if end is not None and ts >= end:
        return False
    return True


def sort_entries(entries: Iterable[WeightHistory]) -> List[WeightHistory]:
    """Chronological, ties broken by insertion id."""
    return sorted(entries, key=lambda h: (h.recorded_at, h.id or 0))


def select_old_entry(sorted_entries: Sequence[Any], start: Optional[datetime]):
    """
    Reference entry for the "old" weight.

    `sorted_entries` must be ascending by recorded_at. Returns the first entry
    recorded at or before `start`; when the whole history lies after `start`
    (or there is no start) the earliest entry is used. Empty input -> None.
    """
    if not sorted_entries:
        return None
    if start is not None:
        for entry in sorted_entries:
            if entry.recorded_at is not None and entry.recorded_at <= start:
                return entry
    return sorted_entries[0]


def _round_half_up(x: float) -> int:
    return math.floor(x + 0.5)


def percent_change(old: float, current: float) -> float:
    """Change from old to current in percent, one decimal. 0 when old is 0."""
    if not old:
        return 0
    return _round_half_up(((current - old) / old) * 1000) / 10


def average_change(values: Sequence[float]) -> float:
    if not values:
        return 0
    return _round_half_up(sum(values) / len(values) * 10) / 10


def pick_representatives(items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """
    One item per logical exercise: keyed by template when there is one,
    else by the exercise itself. The instance with the highest current
    weight wins; on equal weight the first one seen stays.
    """
    chosen: "OrderedDict[str, Dict[str, Any]]" = OrderedDict()
    for item in items:
        if item.get("template_id"):
            key = f"t_{item['template_id']}"
        else:
            key = f"e_{item['exercise_id']}"
        existing = chosen.get(key)
        if existing is None or item["current_weight"] > existing["current_weight"]:
            chosen[key] = item
    return list(chosen.values())


def group_by_category(items: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    buckets: Dict[str, List[Dict[str, Any]]] = {}
    for item in items:
        category = (item.get("category") or "").strip().lower() or UNCATEGORIZED
        buckets.setdefault(category, []).append(item)

    known = [c for c in DEFAULT_CATEGORIES if c in buckets]
    custom = sorted(c for c in buckets if c not in DEFAULT_CATEGORIES and c != UNCATEGORIZED)
    order = known + custom + ([UNCATEGORIZED] if UNCATEGORIZED in buckets else [])

    groups = []
    for category in order:
        members = sorted(buckets[category], key=lambda i: i["percent_change"], reverse=True)
        groups.append(
            {
                "category": category,
                "average_change": average_change([m["percent_change"] for m in members]),
                "items": members,
            }
        )
    return groups


def build_item(exercise: Exercise, sorted_entries: Sequence[WeightHistory], start) -> Dict[str, Any]:
    current_weight = exercise.weight or 0.0
    old_entry = select_old_entry(sorted_entries, start)
    old_weight = old_entry.weight if old_entry is not None else current_weight
    template = exercise.template

    return {
        "exercise_id": exercise.id,
        "exercise_name": exercise.name,
        "day_name": exercise.training_day.name if exercise.training_day else None,
        "template_id": exercise.exercise_template_id,
        "category": template.category if template is not None else None,
        "current_weight": current_weight,
        "old_weight": old_weight,
        "percent_change": percent_change(old_weight, current_weight),
    }


# ------------------------------
# Loading
# ------------------------------
def _user_exercises(user_id: int, template_id: Optional[int] = None) -> List[Exercise]:
    q = Exercise.query.join(TrainingDay, Exercise.training_day_id == TrainingDay.id).filter(
        TrainingDay.user_id == user_id
    )
    if template_id is not None:
        q = q.filter(Exercise.exercise_template_id == template_id)
    return q.order_by(TrainingDay.id.asc(), Exercise.order_index.asc(), Exercise.id.asc()).all()


def _history_by_exercise(exercise_ids: List[int]) -> Dict[int, List[WeightHistory]]:
    grouped: Dict[int, List[WeightHistory]] = {eid: [] for eid in exercise_ids}
    if not exercise_ids:
        return grouped
    for h in WeightHistory.query.filter(WeightHistory.exercise_id.in_(exercise_ids)).all():
        grouped[h.exercise_id].append(h)
    return {eid: sort_entries(rows) for eid, rows in grouped.items()}


def _logs_in_window(exercise_ids: List[int], window: Window) -> List[WorkoutLog]:
    if not exercise_ids:
        return []
    start, end = window
    q = WorkoutLog.query.filter(WorkoutLog.exercise_id.in_(exercise_ids))
    if start is not None:
        q = q.filter(WorkoutLog.completed_at >= start)
    if end is not None:
        q = q.filter(WorkoutLog.completed_at < end)
    return q.all()


def _window_for(period: Optional[str], now: Optional[datetime]) -> Window:
    default_days = int(current_app.config.get("ANALYTICS_DEFAULT_WINDOW_DAYS", 30))
    return resolve_window(period, now or datetime.utcnow(), default_days)


# ------------------------------
# Entry points
# ------------------------------
def analytics_overview(user_id: int, period: Optional[str] = None, now: Optional[datetime] = None) -> Dict[str, Any]:
    window = _window_for(period, now)
    start = window[0]

    exercises = _user_exercises(user_id)
    ids = [e.id for e in exercises]
    history = _history_by_exercise(ids)

    items = pick_representatives(build_item(e, history.get(e.id, []), start) for e in exercises)
    logs = _logs_in_window(ids, window)
    day_of = {e.id: e.training_day_id for e in exercises}

    return {
        "period": period or None,
        "total_training_days": len({day_of[log.exercise_id] for log in logs}),
        "total_sets": sum(log.sets_completed or 0 for log in logs),
        "total_workouts": len(logs),
        "exercise_count": len(items),
        "average_change": average_change([i["percent_change"] for i in items]),
        "items": group_by_category(items),
    }


def analytics_detail(
    user_id: int,
    template_id: int,
    period: Optional[str] = None,
    now: Optional[datetime] = None,
) -> Optional[Dict[str, Any]]:
    """Detail for one template; None when the user has no such template."""
    window = _window_for(period, now)

    template = ExerciseTemplate.query.filter_by(id=template_id, user_id=user_id).first()
    if template is None:
        return None

    instances = _user_exercises(user_id, template_id=template.id)
    ids = [e.id for e in instances]
    history = _history_by_exercise(ids)

    reps = pick_representatives(build_item(e, history.get(e.id, []), window[0]) for e in instances)
    rep = reps[0] if reps else None

    series = sort_entries(
        h for rows in history.values() for h in rows if in_window(h.recorded_at, window)
    )
    weight_history = [
        {
            "exercise_id": h.exercise_id,
            "weight": h.weight,
            "recorded_at": h.recorded_at.isoformat(),
        }
        for h in series
    ]

    return {
        "template_id": template.id,
        "name": template.name,
        "category": template.category,
        "total_workouts": len(_logs_in_window(ids, window)),
        "current_weight": rep["current_weight"] if rep else 0,
        "old_weight": rep["old_weight"] if rep else 0,
        "percent_change": rep["percent_change"] if rep else 0,
        # fewer than two points: the client shows "not enough data" instead of a chart
        "enough_data": len(weight_history) >= 2,
        "weight_history": weight_history,
    }
