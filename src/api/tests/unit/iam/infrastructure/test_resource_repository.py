"""Unit tests for ResourceRepository and CollaborationGrantRepository."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from iam.domain.value_objects import ResourceKind, ResourceRef
from iam.infrastructure.observability import ResourceRepositoryProbe
from iam.infrastructure.resource_repository import (
    CollaborationGrantRepository,
    ResourceRepository,
)
from iam.infrastructure.resource_tables import RESOURCE_TABLES
from iam.ports.repositories import ICollaborationGrantRepository, IResourceRepository
from shared_kernel.authorization.roles import GrantRole

PROJECT_ID = "33333333-3333-3333-3333-333333333333"
ORG_ID = "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa"
USER_ID = "11111111-1111-1111-1111-111111111111"
PROJECT = ResourceRef(kind=ResourceKind.PROJECT, id=PROJECT_ID)


@pytest.fixture
def mock_session():
    return AsyncMock()


@pytest.fixture
def mock_probe():
    return MagicMock(spec=ResourceRepositoryProbe)


def _row_result(row):
    result = MagicMock()
    result.mappings.return_value.first.return_value = row
    return result


class TestResourceTables:
    def test_every_kind_has_a_table(self):
        assert set(RESOURCE_TABLES) == set(ResourceKind)

    def test_project_owner_columns_in_priority_order(self):
        spec = RESOURCE_TABLES[ResourceKind.PROJECT]

        assert spec.owner_columns == ("owner_user_id", "user_id", "owner_id")
        assert [c.name for c in spec.selected_columns()] == [
            "id",
            "owner_user_id",
            "user_id",
            "owner_id",
            "organization_id",
            "title",
        ]


class TestResourceRepository:
    @pytest.fixture
    def repository(self, mock_session, mock_probe):
        return ResourceRepository(session=mock_session, probe=mock_probe)

    def test_implements_protocol(self, repository):
        assert isinstance(repository, IResourceRepository)

    @pytest.mark.asyncio
    async def test_first_non_null_owner_column_wins(self, repository, mock_session):
        mock_session.execute.return_value = _row_result(
            {
                "id": PROJECT_ID,
                "owner_user_id": None,
                "user_id": USER_ID,
                "owner_id": "someone-else",
                "organization_id": ORG_ID,
                "title": "Apollo",
            }
        )

        resource = await repository.get(PROJECT)

        assert resource.owner_subject_id == USER_ID
        assert resource.organization_id == ORG_ID
        assert resource.title == "Apollo"

    @pytest.mark.asyncio
    async def test_unscoped_resource(self, repository, mock_session):
        mock_session.execute.return_value = _row_result(
            {"id": PROJECT_ID, "seller_id": USER_ID, "organization_id": None, "title": "Kit"}
        )

        resource = await repository.get(ResourceRef(ResourceKind.LISTING, PROJECT_ID))

        assert resource.owner_subject_id == USER_ID
        assert resource.organization_id is None

    @pytest.mark.asyncio
    async def test_missing_row(self, repository, mock_session, mock_probe):
        mock_session.execute.return_value = _row_result(None)

        assert await repository.get(PROJECT) is None
        mock_probe.resource_not_found.assert_called_once_with(resource=str(PROJECT))

    @pytest.mark.asyncio
    async def test_malformed_id(self, repository, mock_session):
        assert await repository.get(ResourceRef(ResourceKind.FILE, "../etc")) is None
        mock_session.execute.assert_not_called()


class TestCollaborationGrantRepository:
    @pytest.fixture
    def repository(self, mock_session, mock_probe):
        return CollaborationGrantRepository(session=mock_session, probe=mock_probe)

    def test_implements_protocol(self, repository):
        assert isinstance(repository, ICollaborationGrantRepository)

    @pytest.mark.asyncio
    async def test_returns_grant(self, repository, mock_session):
        result = MagicMock()
        result.scalar_one_or_none.return_value = "contributor"
        mock_session.execute.return_value = result

        grant = await repository.get(PROJECT, USER_ID)

        assert grant.role is GrantRole.CONTRIBUTOR
        assert grant.resource == PROJECT

    @pytest.mark.asyncio
    async def test_non_project_kinds_have_no_grants(self, repository, mock_session):
        assert await repository.get(ResourceRef(ResourceKind.SITE, PROJECT_ID), USER_ID) is None
        mock_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_role_grants_nothing(self, repository, mock_session, mock_probe):
        result = MagicMock()
        result.scalar_one_or_none.return_value = "editor"
        mock_session.execute.return_value = result

        assert await repository.get(PROJECT, USER_ID) is None
        mock_probe.unknown_grant_role.assert_called_once()
