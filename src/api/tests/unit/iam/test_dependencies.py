"""Unit tests for IAM FastAPI dependencies.

Each test mounts the dependency on a throwaway route and overrides the
identity and repository dependencies with mocks.
"""

from __future__ import annotations

from typing import Annotated
from unittest.mock import AsyncMock, MagicMock

import pytest
from fastapi import Depends, FastAPI, status
from fastapi.testclient import TestClient
from starlette.middleware.sessions import SessionMiddleware

from iam.dependencies.capability import capability_guard
from iam.dependencies.organization_context import (
    get_organization_context,
    organization_scope,
    require_organization_context,
    require_organization_role,
)
from iam.dependencies.repositories import (
    get_collaboration_grant_repository,
    get_membership_repository,
    get_resource_repository,
)
from iam.dependencies.resource_access import require_resource_access
from iam.dependencies.session import (
    get_resolved_session,
    require_platform_admin,
    require_subject,
)
from iam.domain.value_objects import (
    Membership,
    Resource,
    ResourceKind,
    ResourceRef,
)
from iam.ports.repositories import (
    ICollaborationGrantRepository,
    IMembershipRepository,
    IResourceRepository,
)
from shared_kernel.auth import ResolvedSession, SessionSource
from shared_kernel.authorization.roles import GrantRole, MembershipRole
from shared_kernel.middleware.organization_context import OrganizationContext

SUBJECT = "11111111-1111-1111-1111-111111111111"
ORG_A = "aaaaaaaa-aaaa-aaaa-aaaa-aaaaaaaaaaaa"
ORG_B = "bbbbbbbb-bbbb-bbbb-bbbb-bbbbbbbbbbbb"
PROJECT_ID = "33333333-3333-3333-3333-333333333333"


def _membership(organization_id: str, role: MembershipRole) -> Membership:
    return Membership(
        id=f"m-{organization_id[:4]}",
        organization_id=organization_id,
        subject_id=SUBJECT,
        role=role,
    )


@pytest.fixture
def resolved() -> ResolvedSession:
    return ResolvedSession(SUBJECT, False, SessionSource.SESSION)


@pytest.fixture
def mock_membership_repo() -> MagicMock:
    """Subject is owner of A (default) and viewer of B."""
    memberships = {
        ORG_A: _membership(ORG_A, MembershipRole.OWNER),
        ORG_B: _membership(ORG_B, MembershipRole.VIEWER),
    }
    repo = MagicMock(spec=IMembershipRepository)

    async def get(organization_id, subject_id):
        return memberships.get(organization_id) if subject_id == SUBJECT else None

    repo.get = AsyncMock(side_effect=get)
    repo.get_default_for_subject = AsyncMock(return_value=memberships[ORG_A])
    return repo


@pytest.fixture
def app(resolved, mock_membership_repo) -> FastAPI:
    app = FastAPI()
    app.add_middleware(SessionMiddleware, secret_key="test-secret")
    app.dependency_overrides[get_resolved_session] = lambda: resolved
    app.dependency_overrides[get_membership_repository] = lambda: mock_membership_repo

    @app.get("/subject")
    def subject(subject_id: Annotated[str, Depends(require_subject)]):
        return {"subject_id": subject_id}

    @app.get("/admin")
    def admin(_: Annotated[ResolvedSession, Depends(require_platform_admin)]):
        return {"ok": True}

    @app.get("/optional-org")
    def optional_org(
        context: Annotated[OrganizationContext | None, Depends(get_organization_context)],
    ):
        return {"organization_id": context.organization_id if context else None}

    @app.get("/org")
    def org(context: Annotated[OrganizationContext, Depends(require_organization_context)]):
        return {"organization_id": context.organization_id, "source": context.source}

    @app.get("/scope")
    def scope(organization_id: Annotated[str, Depends(organization_scope)]):
        return {"organization_id": organization_id}

    @app.get(
        "/org-admin",
        dependencies=[Depends(require_organization_role(MembershipRole.ADMIN))],
    )
    def org_admin():
        return {"ok": True}

    return app


@pytest.fixture
def client(app) -> TestClient:
    return TestClient(app)


class TestRequireSubject:
    def test_authenticated(self, client):
        assert client.get("/subject").json() == {"subject_id": SUBJECT}

    def test_anonymous_gets_401(self, app, client):
        app.dependency_overrides[get_resolved_session] = ResolvedSession.anonymous

        response = client.get("/subject")

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == {"error": "Authentication required"}


class TestRequirePlatformAdmin:
    def test_non_admin_gets_403(self, client):
        response = client.get("/admin")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["detail"] == {"error": "Admin access required"}

    def test_admin_allowed(self, app, client):
        app.dependency_overrides[get_resolved_session] = lambda: ResolvedSession(
            SUBJECT, True, SessionSource.BEARER
        )

        assert client.get("/admin").status_code == status.HTTP_200_OK


class TestOrganizationContext:
    def test_default_membership(self, client):
        assert client.get("/org").json() == {"organization_id": ORG_A, "source": "default"}

    def test_header_selects_member_org(self, client):
        response = client.get("/org", headers={"X-Org-ID": ORG_B})

        assert response.json() == {"organization_id": ORG_B, "source": "header"}

    def test_header_for_non_member_org_is_400(self, client):
        response = client.get(
            "/org", headers={"X-Org-ID": "cccccccc-cccc-cccc-cccc-cccccccccccc"}
        )

        assert response.status_code == status.HTTP_400_BAD_REQUEST
        assert response.json()["detail"] == {"error": "Organization context required"}

    def test_optional_context_is_null_without_membership(
        self, client, mock_membership_repo
    ):
        mock_membership_repo.get_default_for_subject.return_value = None

        assert client.get("/optional-org").json() == {"organization_id": None}

    def test_anonymous_required_context_is_401(self, app, client):
        app.dependency_overrides[get_resolved_session] = ResolvedSession.anonymous

        assert client.get("/org").status_code == status.HTTP_401_UNAUTHORIZED

    def test_scope_returns_organization_id(self, client):
        assert client.get("/scope").json() == {"organization_id": ORG_A}


class TestRequireOrganizationRole:
    def test_owner_meets_admin(self, client):
        assert client.get("/org-admin").status_code == status.HTTP_200_OK

    def test_viewer_denied_with_required_and_current(self, client):
        response = client.get("/org-admin", headers={"X-Org-ID": ORG_B})

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["detail"] == {
            "error": "Insufficient permissions",
            "required": "admin",
            "current": "viewer",
        }


class TestCapabilityGuard:
    @pytest.fixture
    def guarded_client(self) -> TestClient:
        app = FastAPI(dependencies=[Depends(capability_guard)])

        @app.get("/api/hub/analytics/summary")
        def analytics():
            return {"ok": True}

        @app.get("/open")
        def open_route():
            return {"ok": True}

        return TestClient(app)

    def test_foundation_realm_denied(self, guarded_client):
        response = guarded_client.get("/api/hub/analytics/summary")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        detail = response.json()["detail"]
        assert detail["error"] == "This endpoint requires corporation realm"
        assert detail["realm"] == "foundation"
        assert detail["required"] == ["analytics"]

    def test_corporation_realm_allowed(self, guarded_client):
        response = guarded_client.get(
            "/api/hub/analytics/summary", headers={"X-User-Realm": "corporation"}
        )

        assert response.status_code == status.HTTP_200_OK

    def test_unguarded_route_passes(self, guarded_client):
        assert guarded_client.get("/open").status_code == status.HTTP_200_OK


class TestRequireResourceAccess:
    @pytest.fixture
    def resource_client(self, app, mock_membership_repo) -> TestClient:
        resource_repo = MagicMock(spec=IResourceRepository)
        resource_repo.get = AsyncMock(
            return_value=Resource(
                ref=ResourceRef(ResourceKind.PROJECT, PROJECT_ID),
                owner_subject_id="someone-else",
                organization_id=ORG_B,
            )
        )
        grant_repo = MagicMock(spec=ICollaborationGrantRepository)
        grant_repo.get = AsyncMock(return_value=None)
        app.dependency_overrides[get_resource_repository] = lambda: resource_repo
        app.dependency_overrides[get_collaboration_grant_repository] = lambda: grant_repo

        @app.get("/projects/{project_id}")
        def view(
            decision=Depends(
                require_resource_access(ResourceKind.PROJECT, path_param="project_id")
            ),
        ):
            return {"basis": str(decision.basis)}

        @app.delete("/projects/{project_id}")
        def delete(
            decision=Depends(
                require_resource_access(
                    ResourceKind.PROJECT, GrantRole.ADMIN, path_param="project_id"
                )
            ),
        ):
            return {"basis": str(decision.basis)}

        return TestClient(app)

    def test_org_viewer_may_view(self, resource_client):
        response = resource_client.get(f"/projects/{PROJECT_ID}")

        assert response.json() == {"basis": "organization_member"}

    def test_org_viewer_may_not_delete(self, resource_client):
        response = resource_client.delete(f"/projects/{PROJECT_ID}")

        assert response.status_code == status.HTTP_403_FORBIDDEN
        assert response.json()["detail"] == {"error": "Insufficient permissions"}
