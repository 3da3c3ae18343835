"""Integration tests for company user API endpoints."""

from unittest.mock import MagicMock

import pytest
from fastapi.testclient import TestClient
from postgrest.exceptions import APIError as PostgrestAPIError

CALLER_ID = "550e8400-e29b-41d4-a716-446655440000"
BOB = {"email": "bob@acme.com", "full_name": "Bob Jones", "role": "user", "can_view_all_tasks": False}


def make_response(data: object) -> MagicMock:
    response = MagicMock()
    response.data = data
    return response


@pytest.fixture
def acme_owner(tables: dict[str, MagicMock]) -> MagicMock:
    """Configure the caller as the active owner of Acme with no existing invitee.

    Returns the company_users table mock.
    """
    tables["user_settings"].select.return_value.eq.return_value.single.return_value.execute.return_value = (
        make_response({"company_name": "Acme"})
    )
    company_users = tables["company_users"]
    company_users.select.return_value.eq.return_value.eq.return_value.maybe_single.return_value.execute.side_effect = [
        make_response({"role": "owner", "company_name": "Acme", "status": "active"}),
        None,
    ]

    def echo(row: dict) -> MagicMock:
        query = MagicMock()
        query.execute.return_value = make_response([{"id": "770e8400-e29b-41d4-a716-446655440000", "user_id": None, **row}])
        return query

    company_users.insert.side_effect = echo
    return company_users


class TestAddCompanyUser:
    """Tests for POST /api/v1/company-users endpoint."""

    def test_invites_user(self, auth_client: TestClient, acme_owner: MagicMock) -> None:
        """Test that an owner's invitation creates a pending membership."""
        response = auth_client.post("/api/v1/company-users", json=BOB)

        assert response.status_code == 201
        data = response.json()
        assert data["email"] == "bob@acme.com"
        assert data["full_name"] == "Bob Jones"
        assert data["company_name"] == "Acme"
        assert data["role"] == "user"
        assert data["status"] == "pending"
        assert data["invited_by"] == CALLER_ID

    def test_admin_role_always_views_all_tasks(self, auth_client: TestClient, acme_owner: MagicMock) -> None:
        """Test that inviting an admin forces task visibility on."""
        response = auth_client.post("/api/v1/company-users", json={**BOB, "role": "admin"})

        assert response.status_code == 201
        assert acme_owner.insert.call_args[0][0]["can_view_all_tasks"] is True

    def test_second_invitation_is_pending(self, auth_client: TestClient, acme_owner: MagicMock) -> None:
        """Test that inviting the same email twice reports a pending invitation."""
        acme_owner.select.return_value.eq.return_value.eq.return_value.maybe_single.return_value.execute.side_effect = [
            make_response({"role": "owner", "company_name": "Acme", "status": "active"}),
            make_response({"id": "x", "email": "bob@acme.com", "status": "pending", "company_name": "Acme"}),
        ]

        response = auth_client.post("/api/v1/company-users", json=BOB)

        assert response.status_code == 409
        data = response.json()
        assert data["error"] == "invitation_pending"
        assert data["message"] == "This user already has a pending invitation"
        acme_owner.insert.assert_not_called()

    def test_race_on_insert_is_pending(self, auth_client: TestClient, acme_owner: MagicMock) -> None:
        """Test that a unique-constraint hit maps to invitation_pending, not a 500."""
        acme_owner.insert.side_effect = None
        acme_owner.insert.return_value.execute.side_effect = PostgrestAPIError(
            {"message": "duplicate key value violates unique constraint", "code": "23505", "details": None, "hint": None}
        )

        response = auth_client.post("/api/v1/company-users", json=BOB)

        assert response.status_code == 409
        assert response.json()["error"] == "invitation_pending"

    def test_non_admin_is_forbidden(self, auth_client: TestClient, acme_owner: MagicMock) -> None:
        """Test that a plain user cannot invite."""
        acme_owner.select.return_value.eq.return_value.eq.return_value.maybe_single.return_value.execute.side_effect = [
            make_response({"role": "user", "company_name": "Acme", "status": "active"}),
        ]

        response = auth_client.post("/api/v1/company-users", json=BOB)

        assert response.status_code == 403
        assert response.json()["error"] == "not_authorized"

    def test_blank_name_is_invalid_input(self, auth_client: TestClient, acme_owner: MagicMock) -> None:
        """Test that blank fields reach the workflow and fail as invalid input."""
        response = auth_client.post("/api/v1/company-users", json={**BOB, "full_name": "   "})

        assert response.status_code == 422
        assert response.json()["error"] == "invalid_input"

    def test_unexpected_failure_hides_store_detail(self, auth_client: TestClient, acme_owner: MagicMock) -> None:
        """Test that store error text never reaches the client."""
        acme_owner.insert.side_effect = None
        acme_owner.insert.return_value.execute.side_effect = PostgrestAPIError(
            {"message": "relation company_users_secret does not exist", "code": "42P01", "details": None, "hint": None}
        )

        response = auth_client.post("/api/v1/company-users", json=BOB)

        assert response.status_code == 500
        data = response.json()
        assert data["error"] == "unexpected_failure"
        assert "company_users_secret" not in response.text

    def test_returns_401_without_auth(self, client: TestClient) -> None:
        """Test that 401 is returned without auth header."""
        response = client.post("/api/v1/company-users", json=BOB)

        assert response.status_code == 401


class TestListCompanyUsers:
    """Tests for GET /api/v1/company-users endpoint."""

    def test_lists_members(self, auth_client: TestClient, tables: dict[str, MagicMock]) -> None:
        """Test that members of the caller's company are returned."""
        tables["user_settings"].select.return_value.eq.return_value.single.return_value.execute.return_value = (
            make_response({"company_name": "Acme"})
        )
        tables["company_users"].select.return_value.eq.return_value.execute.return_value = make_response(
            [
                {"user_id": CALLER_ID, "email": "owner@acme.com", "full_name": "Ann Owner", "role": "owner", "can_view_all_tasks": True, "status": "active"},
                {"user_id": None, "email": "bob@acme.com", "full_name": "Bob Jones", "role": "user", "can_view_all_tasks": False, "status": "pending"},
            ]
        )

        response = auth_client.get("/api/v1/company-users")

        assert response.status_code == 200
        assert [member["email"] for member in response.json()] == ["owner@acme.com", "bob@acme.com"]

    def test_returns_404_without_company(self, auth_client: TestClient, tables: dict[str, MagicMock]) -> None:
        """Test that a caller without settings gets 404."""
        tables["user_settings"].select.return_value.eq.return_value.single.return_value.execute.side_effect = (
            PostgrestAPIError({"message": "no rows", "code": "PGRST116", "details": None, "hint": None})
        )

        response = auth_client.get("/api/v1/company-users")

        assert response.status_code == 404
        assert response.json()["error"] == "not_found"


class TestUpdateCompanyUserRole:
    """Tests for PATCH /api/v1/company-users/{id} endpoint."""

    def test_updates_role(self, auth_client: TestClient, acme_owner: MagicMock) -> None:
        """Test that an owner can promote a member."""
        member_id = "660e8400-e29b-41d4-a716-446655440000"

        response = auth_client.patch(f"/api/v1/company-users/{member_id}", json={"role": "admin"})

        assert response.status_code == 204
        acme_owner.update.assert_called_once_with({"role": "admin"})

    def test_rejects_owner_role(self, auth_client: TestClient, acme_owner: MagicMock) -> None:
        """Test that ownership cannot be granted through a role update."""
        member_id = "660e8400-e29b-41d4-a716-446655440000"

        response = auth_client.patch(f"/api/v1/company-users/{member_id}", json={"role": "owner"})

        assert response.status_code == 422
        acme_owner.update.assert_not_called()
