"""Tests for request authentication and allow-list parsing."""

from uuid import uuid4

from wellness_tracker.config import parse_allowed_user_ids
from wellness_tracker.services.auth import AuthService
from tests.conftest import FakeAuthClient


def test_authenticate_returns_user_for_valid_token() -> None:
    user_id = uuid4()
    service = AuthService(FakeAuthClient({"token": user_id}))

    assert service.authenticate("token") == user_id


def test_authenticate_rejects_blank_and_unknown_tokens() -> None:
    service = AuthService(FakeAuthClient({"token": uuid4()}))

    assert service.authenticate("   ") is None
    assert service.authenticate("other") is None


def test_authenticate_applies_allow_list() -> None:
    allowed, blocked = uuid4(), uuid4()
    service = AuthService(
        FakeAuthClient({"a": allowed, "b": blocked}), allowed_user_ids={allowed}
    )

    assert service.authenticate("a") == allowed
    assert service.authenticate("b") is None


def test_parse_allowed_user_ids() -> None:
    first, second = uuid4(), uuid4()

    assert parse_allowed_user_ids(None) is None
    assert parse_allowed_user_ids(" * ") is None
    assert parse_allowed_user_ids("") is None
    assert parse_allowed_user_ids(f"{first}, not-a-uuid,{second},") == {first, second}
    assert parse_allowed_user_ids("not-a-uuid") is None
