"""
Weight ledger: increment/decrement mutations and the append-only history.
Run: pytest tests/ -v
"""
import pytest

from liftlog import db
from liftlog.models.history import WeightHistory
from liftlog.models.training import Exercise
from liftlog.services import weight_ledger
from liftlog.services.errors import Forbidden, NotFound


def _weight_of(exercise_id):
    db.session.expire_all()
    return Exercise.query.get(exercise_id).weight


class TestIncrementDecrement:

    def test_increment_chain(self, make, user):
        day = make.day(user)
        ex = make.exercise(user, day, weight=20, increment=2.5)

        weights = [weight_ledger.increment_weight(ex.id, user.id).weight for _ in range(3)]

        assert weights == [22.5, 25, 27.5]
        assert len(weight_ledger.history(ex.id)) == 4

    def test_ledger_grows_by_one_per_step(self, make, user):
        day = make.day(user)
        ex = make.exercise(user, day, weight=40, increment=5)
        assert len(weight_ledger.history(ex.id)) == 1  # creation snapshot

        weight_ledger.increment_weight(ex.id, user.id)
        assert len(weight_ledger.history(ex.id)) == 2
        weight_ledger.decrement_weight(ex.id, user.id)
        assert len(weight_ledger.history(ex.id)) == 3

    def test_decrement_clamps_at_zero(self, make, user):
        day = make.day(user)
        ex = make.exercise(user, day, weight=4, increment=2.5)

        for _ in range(5):
            weight_ledger.decrement_weight(ex.id, user.id)

        assert _weight_of(ex.id) == 0
        assert all(h.weight >= 0 for h in weight_ledger.history(ex.id))
        # clamped steps are still recorded
        assert len(weight_ledger.history(ex.id)) == 6

    def test_result_rounded_to_two_decimals(self, make, user):
        day = make.day(user)
        ex = make.exercise(user, day, weight=0.1, increment=0.2)

        assert weight_ledger.increment_weight(ex.id, user.id).weight == 0.3

    def test_half_hundredth_rounds_up(self, make, user):
        day = make.day(user)
        ex = make.exercise(user, day, weight=20, increment=0.125)

        assert weight_ledger.increment_weight(ex.id, user.id).weight == 20.13
        assert weight_ledger.history(ex.id)[-1].weight == 20.13

    def test_zero_increment_keeps_weight(self, make, user):
        day = make.day(user)
        ex = make.exercise(user, day, weight=12, increment=0)

        assert weight_ledger.increment_weight(ex.id, user.id).weight == 12


class TestOwnershipAndFailures:

    def test_unknown_exercise(self, app, user):
        with pytest.raises(NotFound):
            weight_ledger.increment_weight(999, user.id)

    def test_record_unknown_exercise(self, app):
        with pytest.raises(NotFound):
            weight_ledger.record(999, 10)

    def test_foreign_exercise_untouched(self, make, user, other_user):
        day = make.day(user)
        ex = make.exercise(user, day, weight=30)

        with pytest.raises(Forbidden):
            weight_ledger.increment_weight(ex.id, other_user.id)

        assert _weight_of(ex.id) == 30
        assert len(weight_ledger.history(ex.id)) == 1

    def test_failed_append_leaves_weight_unchanged(self, make, user, monkeypatch):
        day = make.day(user)
        ex = make.exercise(user, day, weight=30, increment=2.5)

        def boom(*args, **kwargs):
            raise RuntimeError("disk full")

        monkeypatch.setattr(weight_ledger, "record", boom)
        with pytest.raises(RuntimeError):
            weight_ledger.increment_weight(ex.id, user.id)

        assert _weight_of(ex.id) == 30
        assert WeightHistory.query.filter_by(exercise_id=ex.id).count() == 1


class TestEndpoints:

    def test_increment_endpoint(self, client, make, user, auth_headers):
        day = make.day(user)
        ex = make.exercise(user, day, weight=20, increment=2.5)

        resp = client.post(f"/api/exercises/{ex.id}/increment", headers=auth_headers(user))

        assert resp.status_code == 200
        assert resp.get_json()["exercise"]["weight"] == 22.5

    def test_decrement_foreign_exercise_looks_missing(self, client, make, user, other_user, auth_headers):
        day = make.day(user)
        ex = make.exercise(user, day)

        resp = client.post(f"/api/exercises/{ex.id}/decrement", headers=auth_headers(other_user))

        assert resp.status_code == 404
        missing = client.post("/api/exercises/4242/decrement", headers=auth_headers(other_user))
        assert missing.status_code == 404
        assert resp.get_json()["message"] == missing.get_json()["message"]

    def test_weight_history_sorted_oldest_first(self, client, make, user, auth_headers):
        day = make.day(user)
        ex = make.exercise(user, day, weight=20, increment=2.5)
        weight_ledger.increment_weight(ex.id, user.id)
        weight_ledger.increment_weight(ex.id, user.id)

        resp = client.get(f"/api/exercises/{ex.id}/weight-history", headers=auth_headers(user))

        assert resp.status_code == 200
        assert [h["weight"] for h in resp.get_json()["weight_history"]] == [20, 22.5, 25]

    def test_requires_token(self, client, make, user):
        day = make.day(user)
        ex = make.exercise(user, day)

        resp = client.post(f"/api/exercises/{ex.id}/increment")
        assert resp.status_code == 401
