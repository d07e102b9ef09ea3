"""
Edge function handler tests

get-user-profile, make-admin and start-policy-analysis, gate by gate.
"""

import uuid
from unittest.mock import AsyncMock, MagicMock, patch

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.exc import OperationalError

from listing_shield.core.auth import AuthUser
from listing_shield.core.config import settings
from listing_shield.core.database import get_db
from listing_shield.core.exceptions import NetworkError
from listing_shield.main import app
from listing_shield.models.job import PolicyAnalysisJob
from listing_shield.models.profile import Profile

FUNCTIONS = "listing_shield.api.v1.endpoints.functions"
POLICY_ANALYSIS = "listing_shield.services.policy_analysis"

CALLER_ID = str(uuid.uuid4())
TARGET_ID = str(uuid.uuid4())
AUTH = {"Authorization": "Bearer caller-token"}


@pytest.fixture
def client(db):
    app.dependency_overrides[get_db] = lambda: db
    yield TestClient(app)
    app.dependency_overrides.clear()


def caller():
    return AuthUser(id=CALLER_ID, email="caller@example.com")


def profile(role, user_id=CALLER_ID):
    return Profile(id=uuid.UUID(user_id), role=role)


# ============================================================================
# get-user-profile
# ============================================================================


class TestGetUserProfile:

    URL = "/functions/v1/get-user-profile"

    def test_missing_authorization_header(self, client):
        response = client.get(self.URL)

        assert response.status_code == 500
        assert response.headers["content-type"].startswith("text/plain")
        assert "Missing Authorization header" in response.text

    def test_invalid_token(self, client):
        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=None)):
            response = client.get(self.URL, headers=AUTH)

        assert response.status_code == 500
        assert "Invalid token" in response.text

    def test_missing_profile(self, client):
        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=caller())), \
                patch(f"{FUNCTIONS}.get_profile", AsyncMock(return_value=None)):
            response = client.get(self.URL, headers=AUTH)

        assert response.status_code == 500
        assert "Profile not found" in response.text

    def test_missing_configuration(self, client):
        with patch.object(settings, "SUPABASE_SERVICE_ROLE_KEY", ""), \
                patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock()) as resolve:
            response = client.get(self.URL, headers=AUTH)

        assert response.status_code == 500
        assert "misconfigured" in response.text
        resolve.assert_not_awaited()

    def test_returns_own_profile(self, client):
        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=caller())) as resolve, \
                patch(f"{FUNCTIONS}.get_profile", AsyncMock(return_value=profile("user"))):
            response = client.post(self.URL, headers=AUTH)

        assert response.status_code == 200
        assert response.json() == {"id": CALLER_ID, "role": "user"}
        resolve.assert_awaited_once_with("caller-token", service_role=True)

    def test_store_fault_becomes_500(self, client):
        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=caller())), \
                patch(f"{FUNCTIONS}.get_profile", AsyncMock(side_effect=RuntimeError("db down"))):
            response = client.get(self.URL, headers=AUTH)

        assert response.status_code == 500
        assert response.text == "db down"


# ============================================================================
# make-admin
# ============================================================================


class TestMakeAdmin:

    URL = "/functions/v1/make-admin"

    def test_preflight(self, client):
        response = client.options(self.URL)

        assert response.status_code == 200
        assert response.text == "ok"
        assert response.headers["access-control-allow-origin"] == "*"

    def test_rejects_non_post(self, client):
        response = client.get(self.URL, headers=AUTH)

        assert response.status_code == 405

    def test_missing_token(self, client):
        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock()) as resolve:
            response = client.post(self.URL, json={"email": "target@example.com"})

        assert response.status_code == 401
        assert response.json() == {"error": "Authentication failed"}
        resolve.assert_not_awaited()

    def test_invalid_token(self, client):
        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=None)):
            response = client.post(self.URL, json={"email": "target@example.com"}, headers=AUTH)

        assert response.status_code == 401

    def test_non_admin_caller_forbidden_without_write(self, client):
        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=caller())), \
                patch(f"{FUNCTIONS}.get_profile", AsyncMock(return_value=profile("user"))), \
                patch(f"{FUNCTIONS}.find_user_id_by_email", AsyncMock()) as lookup, \
                patch(f"{FUNCTIONS}.upsert_profile_role", AsyncMock()) as upsert:
            response = client.post(self.URL, json={"email": "target@example.com"}, headers=AUTH)

        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden: Caller is not an admin"}
        lookup.assert_not_awaited()
        upsert.assert_not_awaited()

    def test_caller_without_profile_forbidden(self, client):
        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=caller())), \
                patch(f"{FUNCTIONS}.get_profile", AsyncMock(return_value=None)), \
                patch(f"{FUNCTIONS}.upsert_profile_role", AsyncMock()) as upsert:
            response = client.post(self.URL, json={"email": "target@example.com"}, headers=AUTH)

        assert response.status_code == 403
        upsert.assert_not_awaited()

    def test_caller_profile_store_error_forbidden(self, client, db):
        store_error = OperationalError("SELECT role FROM profiles", {}, Exception("db down"))

        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=caller())), \
                patch(f"{FUNCTIONS}.get_profile", AsyncMock(side_effect=store_error)), \
                patch(f"{FUNCTIONS}.upsert_profile_role", AsyncMock()) as upsert:
            response = client.post(self.URL, json={"email": "target@example.com"}, headers=AUTH)

        assert response.status_code == 403
        assert response.json() == {"error": "Forbidden: Caller is not an admin"}
        upsert.assert_not_awaited()
        db.rollback.assert_awaited_once()

    def test_store_error_message_not_leaked(self, client):
        store_error = OperationalError("SELECT id FROM auth.users", {}, Exception("db down"))

        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=caller())), \
                patch(f"{FUNCTIONS}.get_profile", AsyncMock(return_value=profile("admin"))), \
                patch(f"{FUNCTIONS}.find_user_id_by_email", AsyncMock(side_effect=store_error)):
            response = client.post(self.URL, json={"email": "target@example.com"}, headers=AUTH)

        assert response.status_code == 500
        assert response.json() == {"error": "Database operation failed"}

    @pytest.mark.parametrize("body", [{}, {"email": ""}, {"email": "   "}, ["target@example.com"]])
    def test_email_required(self, client, body):
        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=caller())), \
                patch(f"{FUNCTIONS}.get_profile", AsyncMock(return_value=profile("admin"))):
            response = client.post(self.URL, json=body, headers=AUTH)

        assert response.status_code == 400
        assert response.json() == {"error": "Email is required"}

    def test_malformed_body(self, client):
        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=caller())), \
                patch(f"{FUNCTIONS}.get_profile", AsyncMock(return_value=profile("admin"))):
            response = client.post(
                self.URL,
                content=b"{not json",
                headers={**AUTH, "Content-Type": "application/json"},
            )

        assert response.status_code == 400

    def test_unknown_email(self, client):
        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=caller())), \
                patch(f"{FUNCTIONS}.get_profile", AsyncMock(return_value=profile("admin"))), \
                patch(f"{FUNCTIONS}.find_user_id_by_email", AsyncMock(return_value=None)), \
                patch(f"{FUNCTIONS}.upsert_profile_role", AsyncMock()) as upsert:
            response = client.post(self.URL, json={"email": "nobody@example.com"}, headers=AUTH)

        assert response.status_code == 404
        assert response.json() == {"error": "User not found with that email"}
        upsert.assert_not_awaited()

    def test_promotes_target(self, client, db):
        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=caller())), \
                patch(f"{FUNCTIONS}.get_profile", AsyncMock(return_value=profile("admin"))), \
                patch(f"{FUNCTIONS}.find_user_id_by_email", AsyncMock(return_value=TARGET_ID)), \
                patch(f"{FUNCTIONS}.upsert_profile_role", AsyncMock()) as upsert:
            response = client.post(self.URL, json={"email": "target@example.com"}, headers=AUTH)

        assert response.status_code == 200
        assert response.json() == {"message": "User target@example.com has been made an admin."}
        upsert.assert_awaited_once_with(db, TARGET_ID, "admin")

    def test_upsert_failure_is_500(self, client):
        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=caller())), \
                patch(f"{FUNCTIONS}.get_profile", AsyncMock(return_value=profile("admin"))), \
                patch(f"{FUNCTIONS}.find_user_id_by_email", AsyncMock(return_value=TARGET_ID)), \
                patch(f"{FUNCTIONS}.upsert_profile_role", AsyncMock(side_effect=RuntimeError("write failed"))):
            response = client.post(self.URL, json={"email": "target@example.com"}, headers=AUTH)

        assert response.status_code == 500
        assert response.json() == {"error": "write failed"}


# ============================================================================
# start-policy-analysis
# ============================================================================


class TestStartPolicyAnalysis:

    URL = "/functions/v1/start-policy-analysis"

    def _job(self):
        return PolicyAnalysisJob(id=uuid.uuid4(), user_id=uuid.UUID(CALLER_ID), status="pending")

    def test_preflight(self, client):
        response = client.options(self.URL)

        assert response.status_code == 200
        assert response.headers["access-control-allow-origin"] == "*"

    def test_missing_token(self, client):
        response = client.post(self.URL, json={})

        assert response.status_code == 401
        assert response.json() == {"error": "Authorization required"}

    def test_invalid_token(self, client):
        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=None)):
            response = client.post(self.URL, json={}, headers=AUTH)

        assert response.status_code == 401
        assert response.json() == {"error": "Invalid authorization"}

    def test_refuses_duplicate(self, client):
        existing = self._job()

        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=caller())), \
                patch(f"{POLICY_ANALYSIS}.find_active_job", AsyncMock(return_value=existing)), \
                patch(f"{POLICY_ANALYSIS}.create_pending_job", AsyncMock()) as create:
            response = client.post(self.URL, json={}, headers=AUTH)

        assert response.status_code == 409
        assert response.json()["existingJobId"] == str(existing.id)
        create.assert_not_awaited()

    def test_creates_job_and_hands_off(self, client):
        job = self._job()

        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=caller())), \
                patch(f"{POLICY_ANALYSIS}.find_active_job", AsyncMock(return_value=None)), \
                patch(f"{POLICY_ANALYSIS}.fetch_policy_count", AsyncMock(return_value=42)), \
                patch(f"{POLICY_ANALYSIS}.create_pending_job", AsyncMock(return_value=job)) as create, \
                patch(f"{POLICY_ANALYSIS}.trigger_processing", AsyncMock(return_value=True)) as trigger:
            response = client.post(self.URL, json={}, headers=AUTH)

        assert response.status_code == 200
        assert response.json() == {
            "success": True,
            "jobId": str(job.id),
            "message": "Policy analysis job started successfully",
        }
        assert create.await_args.args[1:] == (CALLER_ID, 42)
        trigger.assert_awaited_once()

    def test_policy_feed_failure_is_500(self, client):
        with patch(f"{FUNCTIONS}.get_user_from_token", AsyncMock(return_value=caller())), \
                patch(f"{POLICY_ANALYSIS}.find_active_job", AsyncMock(return_value=None)), \
                patch(f"{POLICY_ANALYSIS}.fetch_policy_count", AsyncMock(side_effect=NetworkError("feed down"))):
            response = client.post(self.URL, json={}, headers=AUTH)

        assert response.status_code == 500
        assert response.json() == {"error": "feed down", "success": False}
