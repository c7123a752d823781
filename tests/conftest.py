"""Shared fixtures: app on in-memory SQLite, auth headers, entity factories."""
import sys
from pathlib import Path

import pytest
from flask_jwt_extended import create_access_token

# Project root on the path so `config` and `liftlog` import without install
sys.path.insert(0, str(Path(__file__).parent.parent))

from config import TestConfig  # noqa: E402
from liftlog import create_app, db  # noqa: E402
from liftlog.models.user import User  # noqa: E402
from liftlog.services import catalog  # noqa: E402


@pytest.fixture
def app():
    app = create_app(TestConfig)
    with app.app_context():
        yield app
        db.session.remove()
        db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


class Factory:
    """Builds rows through the catalog service so ledger snapshots exist."""

    def __init__(self):
        self._n = 0

    def user(self, username=None):
        self._n += 1
        user = User(username=username or f"lifter{self._n}")
        db.session.add(user)
        db.session.commit()
        return user

    def template(self, user, name="Bench Press", **kw):
        return catalog.create_template(user.id, dict(name=name, **kw))

    def plan(self, user, name="Push/Pull/Legs"):
        return catalog.create_plan(user.id, {"name": name})

    def day(self, user, name="Push", plan=None):
        return catalog.create_day(user.id, {"name": name, "plan_id": plan.id if plan else None})

    def exercise(self, user, day, name="Bench Press", weight=20, increment=2.5, template=None, **kw):
        data = dict(training_day_id=day.id, name=name, weight=weight, increment=increment, **kw)
        if template is not None:
            data["exercise_template_id"] = template.id
        return catalog.create_exercise(user.id, data)


@pytest.fixture
def make(app):
    return Factory()


@pytest.fixture
def user(make):
    return make.user("owner")


@pytest.fixture
def other_user(make):
    return make.user("stranger")


@pytest.fixture
def auth_headers(app):
    def _headers(user):
        token = create_access_token(identity=str(user.id))
        return {"Authorization": f"Bearer {token}"}

    return _headers
