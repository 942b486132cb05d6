"""
Test suite for create_service and services over mixin-based models.

Uses UUID primary keys and ORM-managed timestamps to check the factory
defaults and that full replacement keeps managed columns.

System role: Verification of service construction from settings
"""

import uuid

import pytest

from crud_adapter.configs import get_settings
from crud_adapter.core.exceptions import NotFound
from crud_adapter.service import Page, SQLAlchemyService, create_service
from tests.models import Note


@pytest.fixture(autouse=True)
def clear_settings_cache():
    """Reset cached settings around each test so env changes apply."""
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def notes(session_factory) -> SQLAlchemyService:
    """Provide a Note service built by the factory."""
    return create_service(Note, session_factory)


class TestCreateService:
    """Test suite for create_service()."""

    def test_create_service_should_require_model(self) -> None:
        with pytest.raises(ValueError):
            create_service(None)

    def test_create_service_should_use_settings_defaults(
        self, monkeypatch: pytest.MonkeyPatch, session_factory
    ) -> None:
        """Test SERVICE_* environment variables become service options."""
        # Arrange
        monkeypatch.setenv("SERVICE_PAGINATE_DEFAULT", "5")
        monkeypatch.setenv("SERVICE_PAGINATE_MAX", "20")
        monkeypatch.setenv("SERVICE_RAW", "false")

        # Act
        service = create_service(Note, session_factory)

        # Assert
        assert service.paginate.default == 5
        assert service.paginate.max == 20
        assert service.raw is False

    def test_create_service_overrides_should_win(self, session_factory) -> None:
        service = create_service(Note, session_factory, paginate={"default": 7}, raw=False)

        assert service.paginate.default == 7
        assert service.raw is False


class TestMixinModelService:
    """Test suite for services over UUIDMixin/TimestampMixin models."""

    @pytest.mark.asyncio
    async def test_create_should_generate_uuid_and_timestamps(
        self, notes: SQLAlchemyService
    ) -> None:
        result = await notes.create({"body": "hello"})

        assert isinstance(result["id"], uuid.UUID)
        assert result["created_at"] is not None
        assert result["updated_at"] is not None

    @pytest.mark.asyncio
    async def test_update_should_keep_managed_timestamps(
        self, notes: SQLAlchemyService
    ) -> None:
        """Test full replacement does not null non-nullable defaulted columns."""
        # Arrange
        created = await notes.create({"body": "first"})

        # Act
        result = await notes.update(created["id"], {})

        # Assert
        assert result["body"] is None
        assert result["created_at"] == created["created_at"]
        assert result["updated_at"] is not None

    @pytest.mark.asyncio
    async def test_get_unknown_uuid_should_raise_not_found(
        self, notes: SQLAlchemyService
    ) -> None:
        with pytest.raises(NotFound):
            await notes.get(uuid.uuid4())

    @pytest.mark.asyncio
    async def test_patch_should_auto_detect_strategy(
        self, notes: SQLAlchemyService
    ) -> None:
        """Test patch works when the strategy is detected from the dialect."""
        # Arrange
        created = await notes.create({"body": "first"})

        # Act
        result = await notes.patch(created["id"], {"body": "second"})

        # Assert
        assert notes.options.returning_update is None
        assert result["body"] == "second"

    @pytest.mark.asyncio
    async def test_find_paginated_via_params(self, notes: SQLAlchemyService) -> None:
        await notes.create([{"body": str(i)} for i in range(5)])

        page = await notes.find({"paginate": {"default": 2, "max": 4}, "query": {"$limit": 10}})

        assert isinstance(page, Page)
        assert page.limit == 4
        assert len(page.data) == 4
        assert page.total == 5
