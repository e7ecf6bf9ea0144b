"""Tests for RefreshTokenStore and PasswordResetStore."""
from datetime import timedelta

import pytest

from models.password_reset import PasswordResetToken
from services.token_store import PasswordResetStore, RefreshTokenStore, generate_token


@pytest.fixture
def refresh_store(storage, clock):
    return RefreshTokenStore(storage, clock=clock)


@pytest.fixture
def reset_store(storage, clock):
    return PasswordResetStore(storage, clock=clock)


def test_generated_tokens_are_long_and_unique():
    tokens = {generate_token() for _ in range(200)}
    assert len(tokens) == 200
    assert all(len(t) >= 43 for t in tokens)


class TestRefreshTokenStore:
    def test_create_and_lookup(self, storage, refresh_store, user, clock):
        row = refresh_store.create(user.id, timedelta(days=7))
        storage.save()

        found = refresh_store.get_by_token(row.token)
        assert found is not None
        assert found.user_id == user.id
        assert found.expires_at == clock() + timedelta(days=7)
        assert refresh_store.is_valid(row.token)

    def test_unknown_token(self, refresh_store):
        assert refresh_store.get_by_token("nope") is None
        assert refresh_store.get_by_token("") is None
        assert not refresh_store.is_valid("nope")

    def test_expired_token_is_invalid(self, storage, refresh_store, user, clock):
        row = refresh_store.create(user.id, timedelta(days=1))
        storage.save()
        clock.advance(days=1)
        assert not refresh_store.is_valid(row.token)

    def test_mark_used_only_once(self, storage, refresh_store, user):
        row = refresh_store.create(user.id, timedelta(days=7))
        storage.save()

        assert refresh_store.mark_used(row.token) is True
        storage.save()
        assert refresh_store.mark_used(row.token) is False
        storage.save()

        found = refresh_store.get_by_token(row.token)
        assert found.is_used is True
        assert not refresh_store.is_valid(row.token)

    def test_mark_used_refuses_revoked(self, storage, refresh_store, user):
        row = refresh_store.create(user.id, timedelta(days=7))
        storage.save()
        assert refresh_store.mark_revoked(row.token)
        storage.save()

        assert refresh_store.mark_used(row.token) is False

    def test_revoke_all_for_user(self, storage, refresh_store, user):
        tokens = [refresh_store.create(user.id, timedelta(days=7)).token for _ in range(3)]
        storage.save()

        assert refresh_store.revoke_all_for_user(user.id) == 3
        storage.save()

        assert all(not refresh_store.is_valid(t) for t in tokens)
        assert all(r.is_revoked for r in refresh_store.get_by_user_id(user.id))
        # already revoked rows are not counted again
        assert refresh_store.revoke_all_for_user(user.id) == 0

    def test_tokens_removed_with_user(self, storage, refresh_store, user):
        row = refresh_store.create(user.id, timedelta(days=7))
        storage.save()

        storage.delete(user)
        storage.save()

        assert refresh_store.get_by_token(row.token) is None


class TestPasswordResetStore:
    def test_get_valid_by_email_returns_newest(self, storage, reset_store, clock):
        first = reset_store.create("u1@x.com", timedelta(hours=1))
        clock.advance(seconds=5)
        second = reset_store.create("u1@x.com", timedelta(hours=1))
        storage.save()

        assert reset_store.get_valid_by_email("u1@x.com").token == second.token
        assert reset_store.is_valid(first.token)

    def test_get_valid_by_email_ignores_used_and_expired(self, storage, reset_store, clock):
        used = reset_store.create("u1@x.com", timedelta(hours=1))
        storage.save()
        reset_store.mark_used(used.token)
        storage.save()
        assert reset_store.get_valid_by_email("u1@x.com") is None

        reset_store.create("u1@x.com", timedelta(hours=1))
        storage.save()
        clock.advance(hours=2)
        assert reset_store.get_valid_by_email("u1@x.com") is None

    def test_invalidate_all_for_email(self, storage, reset_store):
        a = reset_store.create("u1@x.com", timedelta(hours=1))
        b = reset_store.create("u1@x.com", timedelta(hours=1))
        other = reset_store.create("u2@x.com", timedelta(hours=1))
        storage.save()

        assert reset_store.invalidate_all_for_email("u1@x.com") == 2
        storage.save()

        assert not reset_store.is_valid(a.token)
        assert not reset_store.is_valid(b.token)
        assert reset_store.is_valid(other.token)

    def test_mark_used_refuses_expired(self, storage, reset_store, clock):
        row = reset_store.create("u1@x.com", timedelta(hours=1))
        storage.save()
        clock.advance(hours=1, seconds=1)

        assert reset_store.mark_used(row.token) is False
        storage.save()
        stored = storage.get_session().query(PasswordResetToken).filter_by(token=row.token).one()
        assert stored.is_used is False
