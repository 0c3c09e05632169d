"""Unit tests for OTPService."""

import json
from datetime import timedelta
from unittest.mock import AsyncMock, patch

import pytest

from nexus.domain.shared.time import utc_now
from nexus_identity.infrastructure.cache import MemoryEphemeralStore
from nexus_identity.services import OTPPurpose, OTPService

TEST_EMAIL = "otp@example.com"


class TestOTPGeneration:
    """Tests for code generation and key naming."""

    def setup_method(self):
        self.service = OTPService(MemoryEphemeralStore())

    def test_generate_returns_six_digits_by_default(self):
        code = self.service.generate()

        assert len(code) == 6
        assert code.isdigit()

    def test_generate_keeps_leading_zeros(self):
        with patch("nexus_identity.services.otp_service.secrets.randbelow", return_value=42):
            code = self.service.generate()

        assert code == "000042"

    def test_custom_length(self):
        service = OTPService(MemoryEphemeralStore(), length=8)

        assert len(service.generate()) == 8

    def test_length_below_four_rejected(self):
        with pytest.raises(ValueError, match="at least 4"):
            OTPService(MemoryEphemeralStore(), length=3)

    def test_keys_are_scoped_by_purpose(self):
        """Verification and reset codes for one address never share a key."""
        verify_key = OTPService.key_for(OTPPurpose.EMAIL_VERIFY, TEST_EMAIL)
        reset_key = OTPService.key_for(OTPPurpose.PASSWORD_RESET, TEST_EMAIL)

        assert verify_key == "email-verify:otp@example.com"
        assert reset_key == "password-reset:otp@example.com"

    def test_expiry_minutes(self):
        service = OTPService(MemoryEphemeralStore(), expiry_minutes=15)

        assert service.expiry_minutes == 15


class TestOTPVerification:
    """Tests for storing and checking codes."""

    def setup_method(self):
        self.store = MemoryEphemeralStore()
        self.service = OTPService(self.store)
        self.key = OTPService.key_for(OTPPurpose.EMAIL_VERIFY, TEST_EMAIL)

    @pytest.mark.asyncio
    async def test_correct_code_verifies_once(self):
        """A code is consumed by its first successful check."""
        await self.service.store(self.key, "123456")

        assert await self.service.verify(self.key, "123456") is True
        assert await self.service.verify(self.key, "123456") is False

    @pytest.mark.asyncio
    async def test_wrong_code_does_not_consume(self):
        await self.service.store(self.key, "123456")

        assert await self.service.verify(self.key, "654321") is False
        assert await self.service.verify(self.key, "123456") is True

    @pytest.mark.asyncio
    async def test_missing_code_fails(self):
        assert await self.service.verify(self.key, "123456") is False

    @pytest.mark.asyncio
    async def test_empty_submission_fails(self):
        await self.service.store(self.key, "123456")

        assert await self.service.verify(self.key, "") is False

    @pytest.mark.asyncio
    async def test_new_code_replaces_old(self):
        """Only the most recently issued code for a key is valid."""
        await self.service.store(self.key, "111111")
        await self.service.store(self.key, "222222")

        assert await self.service.verify(self.key, "111111") is False
        assert await self.service.verify(self.key, "222222") is True

    @pytest.mark.asyncio
    async def test_expired_code_fails(self):
        """A record whose expires_at has passed is rejected even if still stored."""
        expired = json.dumps(
            {
                "code": "123456",
                "expires_at": (utc_now() - timedelta(seconds=1)).isoformat(),
            }
        )
        await self.store.set(self.key, expired, 60)

        assert await self.service.verify(self.key, "123456") is False

    @pytest.mark.asyncio
    async def test_malformed_record_is_discarded(self):
        await self.store.set(self.key, "not-json", 60)

        assert await self.service.verify(self.key, "123456") is False
        assert await self.store.exists(self.key) is False

    @pytest.mark.asyncio
    async def test_reset_code_does_not_satisfy_verification(self):
        code = await self.service.issue(OTPPurpose.PASSWORD_RESET, TEST_EMAIL)

        assert await self.service.verify(self.key, code) is False

    @pytest.mark.asyncio
    async def test_lost_race_on_delete_fails(self):
        """When another caller consumed the record first, the check fails."""
        store = AsyncMock()
        store.get.return_value = json.dumps(
            {
                "code": "123456",
                "expires_at": (utc_now() + timedelta(minutes=5)).isoformat(),
            }
        )
        store.compare_and_delete.return_value = False
        service = OTPService(store)

        assert await service.verify(self.key, "123456") is False
        store.compare_and_delete.assert_awaited_once()

    @pytest.mark.asyncio
    async def test_store_sets_ttl_from_expiry(self):
        store = AsyncMock()
        service = OTPService(store, expiry_minutes=10)

        await service.store(self.key, "123456")

        key, _, ttl = store.set.call_args.args
        assert key == self.key
        assert ttl == 600

    @pytest.mark.asyncio
    async def test_discard_removes_code(self):
        await self.service.store(self.key, "123456")

        await self.service.discard(self.key)

        assert await self.service.verify(self.key, "123456") is False
