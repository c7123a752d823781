"""
Progression analytics: window math, old-weight pick, percent change,
template deduplication, category grouping and the detail series.
"""
from datetime import datetime, timedelta
from types import SimpleNamespace

import pytest

from liftlog import db
from liftlog.models.history import WeightHistory
from liftlog.services import weight_ledger, workout_log
from liftlog.services.analytics import (
    analytics_detail,
    analytics_overview,
    average_change,
    group_by_category,
    percent_change,
    pick_representatives,
    resolve_window,
    select_old_entry,
)
from liftlog.services.errors import ValidationFailure


def _entry(days_ago, weight, now, entry_id=None):
    return SimpleNamespace(id=entry_id, weight=weight, recorded_at=now - timedelta(days=days_ago))


def _backdate_ledger(exercise, days):
    """Move every ledger row of an exercise `days` into the past."""
    for h in WeightHistory.query.filter_by(exercise_id=exercise.id).all():
        h.recorded_at = h.recorded_at - timedelta(days=days)
    db.session.commit()


# ═══════════════════════════════════════════════════════════════════════
# PURE FUNCTIONS
# ═══════════════════════════════════════════════════════════════════════

class TestResolveWindow:
    NOW = datetime(2026, 3, 15, 10, 30)

    def test_default_is_trailing_days(self):
        start, end = resolve_window(None, self.NOW)
        assert start == self.NOW - timedelta(days=30)
        assert end is None

    def test_default_days_configurable(self):
        start, _ = resolve_window("", self.NOW, default_days=7)
        assert start == self.NOW - timedelta(days=7)

    def test_this_month(self):
        assert resolve_window("this_month", self.NOW) == (datetime(2026, 3, 1), datetime(2026, 4, 1))

    def test_last_month(self):
        assert resolve_window("last_month", self.NOW) == (datetime(2026, 2, 1), datetime(2026, 3, 1))

    def test_last_month_in_january(self):
        now = datetime(2026, 1, 10)
        assert resolve_window("last_month", now) == (datetime(2025, 12, 1), datetime(2026, 1, 1))

    def test_this_month_in_december(self):
        now = datetime(2026, 12, 24)
        assert resolve_window("this_month", now) == (datetime(2026, 12, 1), datetime(2027, 1, 1))

    def test_years(self):
        assert resolve_window("this_year", self.NOW) == (datetime(2026, 1, 1), datetime(2027, 1, 1))
        assert resolve_window("last_year", self.NOW) == (datetime(2025, 1, 1), datetime(2026, 1, 1))

    def test_all_is_open(self):
        assert resolve_window("all", self.NOW) == (None, None)

    def test_unknown_token(self):
        with pytest.raises(ValidationFailure):
            resolve_window("fortnight", self.NOW)


class TestSelectOldEntry:
    NOW = datetime(2026, 3, 15)

    def test_empty(self):
        assert select_old_entry([], self.NOW) is None

    def test_first_entry_at_or_before_start(self):
        entries = [_entry(60, 40, self.NOW), _entry(40, 45, self.NOW), _entry(5, 50, self.NOW)]
        start = self.NOW - timedelta(days=30)
        assert select_old_entry(entries, start).weight == 40

    def test_boundary_is_inclusive(self):
        start = self.NOW - timedelta(days=30)
        entries = [SimpleNamespace(weight=42, recorded_at=start), _entry(1, 50, self.NOW)]
        assert select_old_entry(entries, start).weight == 42

    def test_history_inside_window_falls_back_to_earliest(self):
        entries = [_entry(10, 45, self.NOW), _entry(2, 50, self.NOW)]
        start = self.NOW - timedelta(days=30)
        assert select_old_entry(entries, start).weight == 45

    def test_no_start_uses_earliest(self):
        entries = [_entry(400, 20, self.NOW), _entry(2, 50, self.NOW)]
        assert select_old_entry(entries, None).weight == 20


class TestPercentChange:

    def test_basic(self):
        assert percent_change(20, 27.5) == 37.5
        assert percent_change(45, 50) == 11.1

    def test_decrease(self):
        assert percent_change(50, 45) == -10

    def test_zero_old_weight(self):
        assert percent_change(0, 0) == 0
        assert percent_change(0, 80) == 0

    def test_unchanged(self):
        assert percent_change(60, 60) == 0

    def test_average(self):
        assert average_change([]) == 0
        assert average_change([10, 0, 5.5]) == 5.2
        assert average_change([-10, 12.4]) == 1.2


class TestRepresentatives:

    def _item(self, exercise_id, template_id, weight, pct=0, category=None):
        return {
            "exercise_id": exercise_id,
            "template_id": template_id,
            "current_weight": weight,
            "percent_change": pct,
            "category": category,
        }

    def test_highest_current_weight_wins(self):
        items = [self._item(1, 7, 45), self._item(2, 7, 50), self._item(3, None, 10)]
        reps = pick_representatives(items)
        assert [r["exercise_id"] for r in reps] == [2, 3]

    def test_tie_keeps_first(self):
        items = [self._item(1, 7, 50), self._item(2, 7, 50)]
        assert pick_representatives(items)[0]["exercise_id"] == 1

    def test_without_template_each_exercise_counts(self):
        items = [self._item(1, None, 50), self._item(2, None, 50)]
        assert len(pick_representatives(items)) == 2

    def test_grouping_order_and_sorting(self):
        items = [
            self._item(1, None, 10, pct=5, category="legs"),
            self._item(2, None, 10, pct=12, category="legs"),
            self._item(3, None, 10, pct=3, category=None),
            self._item(4, None, 10, pct=1, category="grip"),
            self._item(5, None, 10, pct=-2, category="chest"),
        ]
        groups = group_by_category(items)

        assert [g["category"] for g in groups] == ["chest", "legs", "grip", "uncategorized"]
        legs = groups[1]
        assert [i["exercise_id"] for i in legs["items"]] == [2, 1]
        assert legs["average_change"] == 8.5


# ═══════════════════════════════════════════════════════════════════════
# OVERVIEW / DETAIL AGAINST THE STORE
# ═══════════════════════════════════════════════════════════════════════

class TestOverview:

    def test_empty_user(self, app, user):
        result = analytics_overview(user.id)
        assert result["items"] == []
        assert result["total_sets"] == 0
        assert result["total_training_days"] == 0
        assert result["average_change"] == 0

    @pytest.mark.parametrize("period", [None, "this_month", "last_month", "this_year", "last_year", "all"])
    def test_fresh_exercise_has_no_change(self, make, user, period):
        day = make.day(user)
        make.exercise(user, day, weight=35)

        item = analytics_overview(user.id, period)["items"][0]["items"][0]
        assert item["old_weight"] == item["current_weight"] == 35
        assert item["percent_change"] == 0

    def test_shared_template_reports_heaviest_instance(self, make, user):
        bench = make.template(user, "Bench Press", category="chest")
        push_a = make.day(user, "Push A")
        push_b = make.day(user, "Push B")
        make.exercise(user, push_a, weight=50, template=bench)
        make.exercise(user, push_b, weight=45, template=bench)

        result = analytics_overview(user.id)

        assert result["exercise_count"] == 1
        chest = result["items"][0]
        assert chest["category"] == "chest"
        assert chest["items"][0]["current_weight"] == 50
        assert chest["items"][0]["day_name"] == "Push A"

    def test_change_against_entry_before_window(self, make, user):
        day = make.day(user)
        ex = make.exercise(user, day, weight=20, increment=2.5)
        _backdate_ledger(ex, 45)
        for _ in range(3):
            weight_ledger.increment_weight(ex.id, user.id)

        item = analytics_overview(user.id)["items"][0]["items"][0]
        assert item["old_weight"] == 20
        assert item["current_weight"] == 27.5
        assert item["percent_change"] == 37.5

    def test_zero_start_weight_reports_zero_change(self, make, user):
        day = make.day(user)
        ex = make.exercise(user, day, weight=0, increment=5)
        weight_ledger.increment_weight(ex.id, user.id)

        item = analytics_overview(user.id, "all")["items"][0]["items"][0]
        assert item["current_weight"] == 5
        assert item["percent_change"] == 0

    def test_counters_from_workout_log(self, make, user):
        push = make.day(user, "Push")
        pull = make.day(user, "Pull")
        bench = make.exercise(user, push, name="Bench Press")
        dips = make.exercise(user, push, name="Dips")
        row = make.exercise(user, pull, name="Row")
        make.exercise(user, make.day(user, "Legs"), name="Squat")

        workout_log.append(bench.id, user.id, weight=20, sets_completed=3, total_sets=3)
        workout_log.append(dips.id, user.id, weight=0, sets_completed=2, total_sets=3)
        workout_log.append(row.id, user.id, weight=30, sets_completed=4, total_sets=4)
        workout_log.append(row.id, user.id, weight=30, sets_completed=4, total_sets=4,
                           completed_at=datetime.utcnow() - timedelta(days=90))

        result = analytics_overview(user.id)
        assert result["total_training_days"] == 2
        assert result["total_sets"] == 9
        assert result["total_workouts"] == 3

        assert analytics_overview(user.id, "all")["total_sets"] == 13

    def test_other_users_data_invisible(self, make, user, other_user):
        day = make.day(user)
        make.exercise(user, day, weight=100)

        assert analytics_overview(other_user.id)["items"] == []

    def test_endpoint_rejects_unknown_period(self, client, user, auth_headers):
        resp = client.get("/api/analytics?period=decade", headers=auth_headers(user))
        assert resp.status_code == 400
        assert resp.get_json()["field"] == "period"

    def test_endpoint(self, client, make, user, auth_headers):
        day = make.day(user)
        make.exercise(user, day, weight=35)

        resp = client.get("/api/analytics?period=this_year", headers=auth_headers(user))
        assert resp.status_code == 200
        body = resp.get_json()
        assert body["period"] == "this_year"
        assert body["items"][0]["category"] == "uncategorized"


class TestDetail:

    def test_unknown_template(self, app, user):
        assert analytics_detail(user.id, 999) is None

    def test_foreign_template(self, make, user, other_user):
        squat = make.template(user, "Squat")
        assert analytics_detail(other_user.id, squat.id) is None

    def test_single_point_not_enough_data(self, make, user):
        squat = make.template(user, "Squat", category="legs")
        make.exercise(user, make.day(user), weight=80, template=squat)

        result = analytics_detail(user.id, squat.id)
        assert result["weight_history"] and len(result["weight_history"]) == 1
        assert result["enough_data"] is False
        assert result["percent_change"] == 0

    def test_series_merges_instances_and_respects_window(self, make, user):
        squat = make.template(user, "Squat", category="legs")
        legs_a = make.exercise(user, make.day(user, "Legs A"), weight=80, increment=5, template=squat)
        legs_b = make.exercise(user, make.day(user, "Legs B"), weight=70, increment=5, template=squat)
        _backdate_ledger(legs_a, 60)
        weight_ledger.increment_weight(legs_a.id, user.id)
        weight_ledger.increment_weight(legs_b.id, user.id)
        workout_log.append(legs_a.id, user.id, weight=85, sets_completed=5, total_sets=5)

        recent = analytics_detail(user.id, squat.id)
        assert [p["weight"] for p in recent["weight_history"]] == [70, 85, 75]
        assert recent["enough_data"] is True
        assert recent["current_weight"] == 85
        assert recent["old_weight"] == 80
        assert recent["percent_change"] == 6.3
        assert recent["total_workouts"] == 1

        everything = analytics_detail(user.id, squat.id, "all")
        assert [p["weight"] for p in everything["weight_history"]] == [80, 70, 85, 75]

    def test_template_without_instances(self, make, user):
        curl = make.template(user, "Curl")
        result = analytics_detail(user.id, curl.id)
        assert result["weight_history"] == []
        assert result["current_weight"] == 0
        assert result["enough_data"] is False

    def test_endpoint_404(self, client, user, auth_headers):
        resp = client.get("/api/analytics/777", headers=auth_headers(user))
        assert resp.status_code == 404
