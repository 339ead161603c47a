"""Identity-MFA pipeline tests."""

import asyncio
import logging

import pytest
from unittest.mock import AsyncMock, MagicMock
from supacheck.exceptions import IdentityAPIError, PipelineError
from supacheck.models import CheckKind
from supacheck.pipelines.mfa import IdentityMFAPipeline, verified_factors

LOGGER_NAME = "tests.mfa"


def _factor(factor_id, status, factor_type="totp"):
    return {
        "id": factor_id,
        "factor_type": factor_type,
        "status": status,
        "created_at": "2024-01-01T00:00:00Z",
        "updated_at": "2024-01-02T00:00:00Z",
        "last_challenged_at": None,
    }


@pytest.fixture
def users():
    return [
        {"id": "u1", "email": "alice@example.com"},
        {"id": "u2", "email": "bob@example.com"},
        {"id": "u3", "email": None},
    ]


def _pipeline(provider):
    return IdentityMFAPipeline(provider, logging.getLogger(LOGGER_NAME))


class TestIdentityMFAPipeline:
    @pytest.mark.asyncio
    async def test_verified_and_pending_factor_counts_as_enabled(self):
        provider = MagicMock()
        provider.list_users = AsyncMock(return_value=[{"id": "u1", "email": "a@example.com"}])
        provider.list_factors = AsyncMock(
            return_value=[_factor("f1", "verified"), _factor("f2", "unverified")]
        )

        result = await _pipeline(provider).run()

        assert result.kind == CheckKind.MFA
        assert len(result) == 1
        item = result.items[0]
        assert item.enabled is True
        assert item.error is None
        assert [f.factor_id for f in item.detail] == ["f1"]

    @pytest.mark.asyncio
    async def test_no_verified_factors_is_disabled_and_logged(self, caplog):
        provider = MagicMock()
        provider.list_users = AsyncMock(return_value=[{"id": "u1", "email": "a@example.com"}])
        provider.list_factors = AsyncMock(return_value=[_factor("f1", "unverified")])
        caplog.set_level(logging.WARNING, logger=LOGGER_NAME)

        result = await _pipeline(provider).run()

        item = result.items[0]
        assert item.enabled is False
        assert item.detail == []
        assert "MFA check failed for user a@example.com" in caplog.text

    @pytest.mark.asyncio
    async def test_listing_failure_fails_pipeline(self):
        provider = MagicMock()
        provider.list_users = AsyncMock(side_effect=IdentityAPIError("unauthorized", 401))
        provider.list_factors = AsyncMock()

        with pytest.raises(PipelineError) as exc_info:
            await _pipeline(provider).run()

        assert exc_info.value.kind == "mfa"
        provider.list_factors.assert_not_called()

    @pytest.mark.asyncio
    async def test_single_lookup_failure_is_isolated(self, users, caplog):
        async def list_factors(user_id):
            if user_id == "u2":
                raise IdentityAPIError("boom", 500)
            return [_factor(f"{user_id}-f", "verified")]

        provider = MagicMock()
        provider.list_users = AsyncMock(return_value=users)
        provider.list_factors = AsyncMock(side_effect=list_factors)
        caplog.set_level(logging.ERROR, logger=LOGGER_NAME)

        result = await _pipeline(provider).run()

        assert len(result) == 3
        assert [i.enabled for i in result] == [True, None, True]
        failed = result.items[1]
        assert failed.user_id == "u2"
        assert failed.error == "Failed to retrieve MFA factors"
        assert failed.detail == []
        assert "u2" in caplog.text

    @pytest.mark.asyncio
    async def test_identifier_falls_back_to_user_id(self, users):
        provider = MagicMock()
        provider.list_users = AsyncMock(return_value=users)
        provider.list_factors = AsyncMock(return_value=[])

        result = await _pipeline(provider).run()

        assert [i.identifier for i in result] == [
            "alice@example.com",
            "bob@example.com",
            "u3",
        ]

    @pytest.mark.asyncio
    async def test_order_follows_listing_when_first_lookup_is_slowest(self, users):
        async def list_factors(user_id):
            if user_id == "u1":
                await asyncio.sleep(0.05)
            return [_factor(f"{user_id}-f", "verified")]

        provider = MagicMock()
        provider.list_users = AsyncMock(return_value=users)
        provider.list_factors = AsyncMock(side_effect=list_factors)

        result = await _pipeline(provider).run()

        assert [i.user_id for i in result] == ["u1", "u2", "u3"]

    @pytest.mark.asyncio
    async def test_every_item_satisfies_error_invariant(self, users):
        async def list_factors(user_id):
            if user_id == "u3":
                raise IdentityAPIError("timeout")
            return [_factor("f", "verified")] if user_id == "u1" else []

        provider = MagicMock()
        provider.list_users = AsyncMock(return_value=users)
        provider.list_factors = AsyncMock(side_effect=list_factors)

        result = await _pipeline(provider).run()

        for item in result:
            assert (item.enabled is None) == (item.error is not None)

    @pytest.mark.asyncio
    async def test_repeated_runs_are_equal(self, users):
        provider = MagicMock()
        provider.list_users = AsyncMock(return_value=users)
        provider.list_factors = AsyncMock(return_value=[_factor("f1", "verified")])
        pipeline = _pipeline(provider)

        first = await pipeline.run()
        second = await pipeline.run()

        assert first.to_dict() == second.to_dict()
        assert first is not second

    @pytest.mark.asyncio
    async def test_no_users_yields_empty_result(self):
        provider = MagicMock()
        provider.list_users = AsyncMock(return_value=[])
        provider.list_factors = AsyncMock()

        result = await _pipeline(provider).run()

        assert len(result) == 0


def test_verified_factors_preserves_upstream_order():
    factors = [
        _factor("f3", "verified"),
        _factor("f1", "unverified"),
        _factor("f2", "verified", factor_type="phone"),
    ]
    assert [f.factor_id for f in verified_factors(factors)] == ["f3", "f2"]


@pytest.mark.asyncio
async def test_malformed_user_rows_are_skipped():
    provider = MagicMock()
    provider.list_users = AsyncMock(
        return_value=[{"email": "ghost@example.com"}, None, {"id": "u1", "email": "a@example.com"}]
    )
    provider.list_factors = AsyncMock(return_value=[_factor("f1", "verified")])

    result = await _pipeline(provider).run()

    assert [i.user_id for i in result] == ["u1"]
    provider.list_factors.assert_awaited_once_with("u1")
