"""Unit tests for the User aggregate."""

from uuid import uuid4

import pytest

from nexus.domain.shared.exceptions import ValidationError
from nexus.domain.shared.time import utc_now
from nexus_identity.domain.user import User


class TestUserCreation:
    def test_create_verified(self):
        """A freshly created user has already proven email ownership."""
        user = User.create_verified("New@Example.com", "hash", " New User ")

        assert user.email == "new@example.com"
        assert user.name == "New User"
        assert user.is_email_verified is True
        assert user.email_verified_at is not None
        assert user.pending_email is None

    def test_empty_name_rejected(self):
        with pytest.raises(ValidationError, match="Name cannot be empty"):
            User.create_verified("a@example.com", "hash", "   ")

    def test_reconstitute_keeps_fields(self):
        user_id = uuid4()
        now = utc_now()

        user = User.reconstitute(
            id=user_id,
            email="a@example.com",
            password_hash="hash",
            name="A",
            is_email_verified=True,
            email_verified_at=now,
            pending_email="B@example.com",
            created_at=now,
            updated_at=now,
        )

        assert user.id == user_id
        assert user.pending_email == "b@example.com"
        assert user.created_at == now

    def test_equality_by_id(self):
        user = User.create_verified("a@example.com", "hash", "A")
        same = User.reconstitute(
            id=user.id,
            email="other@example.com",
            password_hash="x",
            name="Other",
            is_email_verified=True,
            email_verified_at=None,
            pending_email=None,
            created_at=user.created_at,
            updated_at=user.updated_at,
        )

        assert user == same
        assert hash(user) == hash(same)


class TestUserMutations:
    def setup_method(self):
        self.user = User.create_verified("a@example.com", "hash", "A")

    def test_change_password_hash_touches_updated_at(self):
        before = self.user.updated_at

        self.user.change_password_hash("new-hash")

        assert self.user.password_hash == "new-hash"
        assert self.user.updated_at >= before

    def test_rename(self):
        self.user.rename("  Alice  ")

        assert self.user.name == "Alice"

    def test_rename_to_blank_rejected(self):
        with pytest.raises(ValidationError):
            self.user.rename("")

    def test_email_change_flow(self):
        """Requesting then confirming moves the pending address into place."""
        self.user.request_email_change("New@Example.com")
        assert self.user.pending_email == "new@example.com"
        assert self.user.email == "a@example.com"

        self.user.confirm_email_change()

        assert self.user.email == "new@example.com"
        assert self.user.pending_email is None
        assert self.user.is_email_verified is True

    def test_confirm_without_pending_change_rejected(self):
        with pytest.raises(ValidationError, match="No email change is pending"):
            self.user.confirm_email_change()

    def test_cancel_email_change(self):
        self.user.request_email_change("new@example.com")

        self.user.cancel_email_change()

        assert self.user.pending_email is None
        assert self.user.email == "a@example.com"
