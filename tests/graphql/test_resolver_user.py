"""
Tests for the user GraphQL resolver
"""

from unittest.mock import AsyncMock, MagicMock

import pytest
import strawberry

from userql.config import settings
from userql.database.gateway import StoreError, UserStore
from userql.database.models import Users
from userql.graphql.context import InternalConfigurationError, LookupContext
from userql.graphql.resolvers.user import resolve_user_by_username_or_email
from userql.graphql.types.user import CREDENTIAL_MASK


@pytest.fixture
def sample_record():
    record = MagicMock(spec=Users)
    record.id = 1
    record.username = "alice"
    record.email = "a@x.com"
    record.password = "p1"
    return record


@pytest.fixture
def mock_store():
    store = MagicMock(spec=UserStore)
    store.find_user_by_username_or_email = AsyncMock(return_value=None)
    return store


def make_info(context):
    info = MagicMock(spec=strawberry.Info)
    info.context = context
    return info


class TestResolveUserByUsernameOrEmail:
    """Tests for resolve_user_by_username_or_email."""

    @pytest.mark.asyncio
    async def test_found_masks_credential_by_default(self, mock_store, sample_record):
        mock_store.find_user_by_username_or_email.return_value = sample_record
        info = make_info(LookupContext(store=mock_store))

        result = await resolve_user_by_username_or_email(info, "alice", "")

        mock_store.find_user_by_username_or_email.assert_awaited_once_with("alice", "")
        assert result is not None
        assert result.id == 1
        assert result.username == "alice"
        assert result.email == "a@x.com"
        assert result.password == CREDENTIAL_MASK

    @pytest.mark.asyncio
    async def test_found_exposes_credential_when_enabled(self, mock_store, sample_record):
        mock_store.find_user_by_username_or_email.return_value = sample_record
        info = make_info(LookupContext(store=mock_store, expose_credentials=True))

        result = await resolve_user_by_username_or_email(info, "alice", "")

        assert result.password == "p1"

    @pytest.mark.asyncio
    async def test_not_found_returns_none(self, mock_store):
        info = make_info(LookupContext(store=mock_store))

        result = await resolve_user_by_username_or_email(info, "bob", "")

        assert result is None

    @pytest.mark.asyncio
    async def test_store_error_propagates(self, mock_store):
        mock_store.find_user_by_username_or_email.side_effect = StoreError("store down")
        info = make_info(LookupContext(store=mock_store))

        with pytest.raises(StoreError, match="store down"):
            await resolve_user_by_username_or_email(info, "bob", "")

    @pytest.mark.asyncio
    async def test_missing_context_raises(self):
        info = make_info(None)

        with pytest.raises(InternalConfigurationError, match="not found in GraphQL context"):
            await resolve_user_by_username_or_email(info, "bob", "")

    @pytest.mark.asyncio
    async def test_wrong_context_type_raises(self, mock_store):
        info = make_info({"store": mock_store})

        with pytest.raises(InternalConfigurationError):
            await resolve_user_by_username_or_email(info, "bob", "")

        mock_store.find_user_by_username_or_email.assert_not_awaited()

    @pytest.mark.asyncio
    async def test_missing_context_legacy_returns_none(self, monkeypatch):
        monkeypatch.setattr(settings, "legacy_null_on_missing_store", True)
        info = make_info({"db": object()})

        assert await resolve_user_by_username_or_email(info, "bob", "") is None

    @pytest.mark.asyncio
    async def test_empty_store_raises(self):
        info = make_info(LookupContext(store=None))

        with pytest.raises(InternalConfigurationError, match="empty"):
            await resolve_user_by_username_or_email(info, "bob", "")

    @pytest.mark.asyncio
    async def test_empty_store_legacy_returns_none(self):
        info = make_info(LookupContext(store=None, strict=False))

        assert await resolve_user_by_username_or_email(info, "bob", "") is None
