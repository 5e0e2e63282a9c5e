"""Unit tests for the session and organization routes."""

from __future__ import annotations

from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import FastAPI, status
from fastapi.testclient import TestClient
from starlette.middleware.sessions import SessionMiddleware

from iam.dependencies.organization_context import get_organization_context_service
from iam.dependencies.repositories import (
    get_membership_repository,
    get_organization_repository,
)
from iam.dependencies.session import get_resolved_session
from iam.domain.value_objects import Membership, Organization
from iam.ports.repositories import IMembershipRepository, IOrganizationRepository
from shared_kernel.auth import ResolvedSession, SessionSource
from shared_kernel.authorization.roles import MembershipRole
from shared_kernel.exceptions import BackingStoreUnavailableError

SUBJECT = "11111111-1111-1111-1111-111111111111"
ORG_A = "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa"
ORG_B = "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb"
ORG_C = "cccccccc-cccc-cccc-cccc-cccccccccccc"


@pytest.fixture
def memberships() -> list[Membership]:
    return [
        Membership(id="m-a", organization_id=ORG_A, subject_id=SUBJECT, role=MembershipRole.OWNER),
        Membership(id="m-b", organization_id=ORG_B, subject_id=SUBJECT, role=MembershipRole.MEMBER),
    ]


@pytest.fixture
def mock_membership_repo(memberships) -> MagicMock:
    by_org = {m.organization_id: m for m in memberships}
    repo = MagicMock(spec=IMembershipRepository)

    async def get(organization_id, subject_id):
        return by_org.get(organization_id) if subject_id == SUBJECT else None

    repo.get = AsyncMock(side_effect=get)
    repo.get_default_for_subject = AsyncMock(return_value=memberships[0])
    repo.list_for_subject = AsyncMock(return_value=memberships)
    return repo


@pytest.fixture
def mock_organization_repo() -> MagicMock:
    repo = MagicMock(spec=IOrganizationRepository)
    repo.list_by_ids = AsyncMock(
        return_value=[
            Organization(id=ORG_A, name="Acme", slug="acme", plan="pro"),
            Organization(id=ORG_B, name="Beta", slug="beta"),
        ]
    )
    return repo


@pytest.fixture
def resolved() -> ResolvedSession:
    return ResolvedSession(SUBJECT, False, SessionSource.SESSION)


@pytest.fixture
def app(resolved, mock_membership_repo, mock_organization_repo) -> FastAPI:
    from iam.presentation import router

    app = FastAPI()
    app.add_middleware(SessionMiddleware, secret_key="test-secret")
    app.dependency_overrides[get_resolved_session] = lambda: resolved
    app.dependency_overrides[get_membership_repository] = lambda: mock_membership_repo
    app.dependency_overrides[get_organization_repository] = lambda: mock_organization_repo
    app.include_router(router)
    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


class TestGetSession:
    def test_authenticated_with_default_org(self, client):
        response = client.get("/iam/session")

        assert response.status_code == status.HTTP_200_OK
        body = response.json()
        assert body["authenticated"] is True
        assert body["subject_id"] == SUBJECT
        assert body["source"] == "session"
        assert body["organization"] == {
            "organization_id": ORG_A,
            "role": "owner",
            "source": "default",
        }
        assert body["organization_outcome"] == "resolved"

    def test_anonymous_is_not_an_error(self, app, client):
        app.dependency_overrides[get_resolved_session] = ResolvedSession.anonymous

        body = client.get("/iam/session").json()

        assert body["authenticated"] is False
        assert body["organization"] is None
        assert body["organization_outcome"] == "anonymous"


class TestListOrganizations:
    def test_lists_with_current_marker(self, client):
        response = client.get("/iam/organizations", headers={"X-Org-ID": ORG_B})

        assert response.status_code == status.HTTP_200_OK
        assert [(o["slug"], o["role"], o["is_current"]) for o in response.json()] == [
            ("acme", "owner", False),
            ("beta", "member", True),
        ]

    def test_store_failure_is_503(self, client, mock_membership_repo):
        mock_membership_repo.list_for_subject.side_effect = BackingStoreUnavailableError(
            "membership.list_for_subject"
        )

        response = client.get("/iam/organizations")

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE

    def test_requires_authentication(self, app, client):
        app.dependency_overrides[get_resolved_session] = ResolvedSession.anonymous

        assert client.get("/iam/organizations").status_code == status.HTTP_401_UNAUTHORIZED


class TestSelectCurrentOrganization:
    def test_selection_sticks_in_session(self, client):
        response = client.put("/iam/organizations/current", json={"organization_id": ORG_B})

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["organization_id"] == ORG_B

        session = client.get("/iam/session").json()
        assert session["organization"]["organization_id"] == ORG_B
        assert session["organization"]["source"] == "session"

    def test_non_member_is_403(self, client):
        response = client.put("/iam/organizations/current", json={"organization_id": ORG_C})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["detail"] == {"error": "Not a member of this organization"}

    def test_store_failure_is_503(self, app, client):
        service = MagicMock()
        service.select = AsyncMock(side_effect=BackingStoreUnavailableError("membership.get"))
        app.dependency_overrides[get_organization_context_service] = lambda: service

        response = client.put("/iam/organizations/current", json={"organization_id": ORG_B})

        assert response.status_code == status.HTTP_503_SERVICE_UNAVAILABLE
