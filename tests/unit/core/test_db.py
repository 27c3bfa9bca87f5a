"""Tests for the MongoDB document mapping shared by users and sessions."""

from futuresqr.core.modules.session.models import Session
from futuresqr.core.modules.user.models import User


def test_id_stored_as_underscore_id():
    user = User(login_name="robert", display_name="Robert", password_hash="$2b$hash")
    doc = user.to_mongo()

    assert doc["_id"] == user.id
    assert "id" not in doc
    assert User.model_validate(doc) == user


def test_session_round_trip_keeps_identity():
    session = Session(session_id="opaque")
    assert Session.model_validate(session.to_mongo()).id == session.id
