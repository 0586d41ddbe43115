from datetime import datetime, timedelta, timezone

import pytest

from fynd import create_app
from fynd.extensions import db as _db
from fynd.models.item import Item


@pytest.fixture
def app():
    app = create_app("testing")
    with app.app_context():
        _db.create_all()
        yield app
        _db.session.remove()
        _db.drop_all()


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def db(app):
    return _db


def as_user(user_id, email=None, role=None):
    """Dev-mode identity headers accepted while DEBUG is on."""
    headers = {"X-User-Id": user_id}
    if email:
        headers["X-User-Email"] = email
    if role:
        headers["X-User-Role"] = role
    return headers


@pytest.fixture
def make_item(db):
    def _make(owner="owner-1", category="found", title="Black leather wallet", **kw):
        item = Item(user_id=owner, category=category, title=title, status=kw.pop("status", "active"), **kw)
        if "created_at" not in kw:
            item.created_at = datetime.now(timezone.utc)
        db.session.add(item)
        db.session.commit()
        return item

    return _make


def days_ago(n):
    return datetime.now(timezone.utc) - timedelta(days=n)
