"""
Policy analysis job creation tests

count_policies, policy feed fetch and the background hand-off.
"""

import asyncio
import uuid
from unittest.mock import AsyncMock, patch

import httpx
import pytest

from listing_shield.core.exceptions import NetworkError, ValidationError
from listing_shield.models.job import PolicyAnalysisJob
from listing_shield.services import policy_analysis
from listing_shield.services.policy_analysis import (
    HANDOFF_FAILED_MESSAGE,
    count_policies,
    create_pending_job,
    fetch_policy_count,
    trigger_processing,
)

MODULE = "listing_shield.services.policy_analysis"
RealAsyncClient = httpx.AsyncClient


def feed_client(handler):
    """AsyncClient factory serving the policy feed from `handler`"""
    def factory(**kwargs):
        return RealAsyncClient(transport=httpx.MockTransport(handler), **kwargs)
    return factory


class TestCountPolicies:

    @pytest.mark.parametrize("payload,expected", [
        ([{"id": 1}, {"id": 2}], 2),
        ({"policies": [{"id": 1}]}, 1),
        ({"policies": None}, 0),
        ({"other": []}, 0),
        ("text", 0),
    ])
    def test_shapes(self, payload, expected):
        assert count_policies(payload) == expected


class TestFetchPolicyCount:

    def test_counts_feed(self):
        handler = lambda request: httpx.Response(200, text='{"policies": [{"id": 1}, {"id": 2},]}')

        with patch(f"{MODULE}.httpx.AsyncClient", feed_client(handler)):
            assert asyncio.run(fetch_policy_count()) == 2

    def test_http_error_is_network(self):
        handler = lambda request: httpx.Response(503, text="unavailable")

        with patch(f"{MODULE}.httpx.AsyncClient", feed_client(handler)):
            with pytest.raises(NetworkError):
                asyncio.run(fetch_policy_count())

    def test_garbage_is_validation(self):
        handler = lambda request: httpx.Response(200, text="<html>not json</html>")

        with patch(f"{MODULE}.httpx.AsyncClient", feed_client(handler)):
            with pytest.raises(ValidationError):
                asyncio.run(fetch_policy_count())


class TestJobLifecycle:

    def test_create_pending_job(self, db):
        user_id = str(uuid.uuid4())

        job = asyncio.run(create_pending_job(db, user_id, 7))

        assert job.status == "pending"
        assert job.total_policies == 7
        assert job.user_id == uuid.UUID(user_id)
        db.add.assert_called_once_with(job)
        db.commit.assert_awaited_once()

    def test_find_active_job(self, db, result_factory):
        existing = PolicyAnalysisJob(id=uuid.uuid4(), status="running")
        db.execute.return_value = result_factory(scalar=existing)

        assert asyncio.run(policy_analysis.find_active_job(db, str(uuid.uuid4()))) is existing


class TestTriggerProcessing:

    def _job(self):
        return PolicyAnalysisJob(id=uuid.uuid4(), status="pending")

    def _response(self, status_code):
        return httpx.Response(status_code, text="", request=httpx.Request("POST", "https://functions.test"))

    def test_success_leaves_job_pending(self, db):
        job = self._job()

        with patch(f"{MODULE}.invoke_function", AsyncMock(return_value=self._response(200))) as invoke, \
                patch(f"{MODULE}.mark_job_failed", AsyncMock()) as mark_failed:
            assert asyncio.run(trigger_processing(db, job)) is True

        invoke.assert_awaited_once_with("process-policies-ai", {"jobId": str(job.id)})
        mark_failed.assert_not_awaited()

    def test_non_2xx_marks_job_failed(self, db):
        job = self._job()

        with patch(f"{MODULE}.invoke_function", AsyncMock(return_value=self._response(500))), \
                patch(f"{MODULE}.mark_job_failed", AsyncMock()) as mark_failed:
            assert asyncio.run(trigger_processing(db, job)) is False

        mark_failed.assert_awaited_once_with(db, job.id, HANDOFF_FAILED_MESSAGE)

    def test_network_error_marks_job_failed(self, db):
        job = self._job()

        with patch(f"{MODULE}.invoke_function", AsyncMock(side_effect=NetworkError("timeout"))), \
                patch(f"{MODULE}.mark_job_failed", AsyncMock()) as mark_failed:
            assert asyncio.run(trigger_processing(db, job)) is False

        mark_failed.assert_awaited_once()
