"""Unit tests for MembershipRepository and OrganizationRepository."""

from datetime import UTC, datetime
from unittest.mock import AsyncMock, MagicMock

import pytest
from sqlalchemy.exc import OperationalError

from iam.infrastructure.membership_repository import MembershipRepository
from iam.infrastructure.models import OrganizationMemberModel, OrganizationModel
from iam.infrastructure.observability import MembershipRepositoryProbe
from iam.infrastructure.organization_repository import OrganizationRepository
from iam.ports.repositories import IMembershipRepository, IOrganizationRepository
from shared_kernel.authorization.roles import MembershipRole
from shared_kernel.exceptions import BackingStoreUnavailableError

ORG_ID = "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa"
USER_ID = "11111111-1111-1111-1111-111111111111"


@pytest.fixture
def mock_session():
    """Create mock async session."""
    return AsyncMock()


@pytest.fixture
def mock_probe():
    return MagicMock(spec=MembershipRepositoryProbe)


@pytest.fixture
def repository(mock_session, mock_probe):
    return MembershipRepository(session=mock_session, probe=mock_probe)


def _member_model(role: str = "admin") -> OrganizationMemberModel:
    return OrganizationMemberModel(
        id="22222222-2222-2222-2222-222222222222",
        organization_id=ORG_ID,
        user_id=USER_ID,
        role=role,
        created_at=datetime(2025, 1, 1, tzinfo=UTC),
    )


def _scalar_result(value):
    result = MagicMock()
    result.scalar_one_or_none.return_value = value
    return result


class TestProtocolCompliance:
    def test_implements_protocols(self, repository, mock_session):
        assert isinstance(repository, IMembershipRepository)
        assert isinstance(OrganizationRepository(mock_session), IOrganizationRepository)


class TestGet:
    @pytest.mark.asyncio
    async def test_returns_membership(self, repository, mock_session):
        mock_session.execute.return_value = _scalar_result(_member_model())

        membership = await repository.get(ORG_ID, USER_ID)

        assert membership.organization_id == ORG_ID
        assert membership.subject_id == USER_ID
        assert membership.role is MembershipRole.ADMIN

    @pytest.mark.asyncio
    async def test_not_a_member(self, repository, mock_session):
        mock_session.execute.return_value = _scalar_result(None)

        assert await repository.get(ORG_ID, USER_ID) is None

    @pytest.mark.asyncio
    async def test_malformed_ids_never_reach_the_store(self, repository, mock_session):
        assert await repository.get("not-a-uuid", USER_ID) is None
        mock_session.execute.assert_not_called()

    @pytest.mark.asyncio
    async def test_unknown_role_reads_as_viewer(self, repository, mock_session, mock_probe):
        mock_session.execute.return_value = _scalar_result(_member_model("superuser"))

        membership = await repository.get(ORG_ID, USER_ID)

        assert membership.role is MembershipRole.VIEWER
        mock_probe.unknown_membership_role.assert_called_once_with(
            organization_id=ORG_ID, role="superuser"
        )

    @pytest.mark.asyncio
    async def test_driver_failure_translated(self, repository, mock_session):
        mock_session.execute.side_effect = OperationalError("SELECT", {}, Exception("down"))

        with pytest.raises(BackingStoreUnavailableError) as exc_info:
            await repository.get(ORG_ID, USER_ID)
        assert exc_info.value.operation == "membership.get"


class TestListForSubject:
    @pytest.mark.asyncio
    async def test_lists_memberships(self, repository, mock_session, mock_probe):
        result = MagicMock()
        result.scalars.return_value.all.return_value = [_member_model(), _member_model("owner")]
        mock_session.execute.return_value = result

        memberships = await repository.list_for_subject(USER_ID)

        assert [m.role for m in memberships] == [MembershipRole.ADMIN, MembershipRole.OWNER]
        mock_probe.memberships_listed.assert_called_once_with(subject_id=USER_ID, count=2)

    @pytest.mark.asyncio
    async def test_malformed_subject(self, repository, mock_session):
        assert await repository.list_for_subject("anonymous") == []
        mock_session.execute.assert_not_called()


class TestOrganizationRepository:
    @pytest.mark.asyncio
    async def test_get_by_id(self, mock_session):
        mock_session.execute.return_value = _scalar_result(
            OrganizationModel(id=ORG_ID, name="Acme", slug="acme", plan=None)
        )

        organization = await OrganizationRepository(mock_session).get_by_id(ORG_ID)

        assert organization.slug == "acme"
        assert organization.plan == "free"
        assert organization.owner_subject_id is None

    @pytest.mark.asyncio
    async def test_list_by_ids_skips_malformed(self, mock_session):
        assert await OrganizationRepository(mock_session).list_by_ids(["x", "y"]) == []
        mock_session.execute.assert_not_called()
