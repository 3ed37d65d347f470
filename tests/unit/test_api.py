"""Unit tests for the HTTP trigger server."""

from unittest.mock import AsyncMock, Mock

import pytest
from fastapi.testclient import TestClient

from service_builder.domain.entities import DirectoryResult, DirectoryStatus, RunReport
from service_builder.domain.exceptions import (
    CommitNotFoundError,
    DiffFetchError,
    GitHubRateLimitError,
    InvalidChangeError,
    RepositoryAccessDeniedError,
    WorkspaceError,
    WorkspaceMismatchError,
)
from service_builder.interface.app import create_app
from service_builder.interface.dependencies import get_use_case_factory
from service_builder.services.build_commit import BuildCommitUseCase


@pytest.fixture
def use_case():
    return Mock(execute=AsyncMock())


@pytest.fixture
def client(use_case):
    app = create_app()
    app.dependency_overrides[get_use_case_factory] = lambda: (lambda sha: use_case)
    return TestClient(app, raise_server_exceptions=False)


class TestBuildsEndpoint:
    """Test cases for POST /builds."""

    def test_build_report(self, client, use_case):
        """Test the response of a partially failed run."""
        use_case.execute.return_value = RunReport(
            [
                DirectoryResult("serviceA", DirectoryStatus.DELETED),
                DirectoryResult("serviceB", DirectoryStatus.UPDATED, error="boom"),
            ]
        )

        response = client.post("/builds", json={"commit_sha": "abc123"})

        assert response.status_code == 200
        assert response.json() == {
            "success": False,
            "directories": [
                {"directory": "serviceA", "status": "deleted", "built": False, "error": None},
                {"directory": "serviceB", "status": "updated", "built": False, "error": "boom"},
            ],
        }
        use_case.execute.assert_awaited_once_with("abc123")

    @pytest.mark.parametrize("sha", ["", "   ", "not-a-sha"])
    def test_invalid_sha(self, client, sha):
        """Test request validation."""
        response = client.post("/builds", json={"commit_sha": sha})

        assert response.status_code == 422
        assert response.json()["status"] == "error"

    @pytest.mark.parametrize(
        "error, status",
        [
            (CommitNotFoundError("no such commit"), 404),
            (RepositoryAccessDeniedError("private"), 403),
            (GitHubRateLimitError("slow down"), 429),
            (DiffFetchError("github down"), 502),
            (InvalidChangeError("unknown status"), 502),
            (WorkspaceMismatchError("abc123", "def456"), 409),
            (WorkspaceError("not a git checkout"), 500),
        ],
    )
    def test_domain_errors(self, client, use_case, error, status):
        """Test the mapping of run-aborting errors onto HTTP statuses."""
        use_case.execute.side_effect = error

        response = client.post("/builds", json={"commit_sha": "abc123"})

        assert response.status_code == status
        assert response.json() == {
            "status": "error",
            "error": type(error).__name__,
            "message": str(error),
        }

    def test_workspace_at_other_commit_is_a_conflict(self, use_case):
        """Test that a checkout at another commit is rejected before classifying."""
        workspace = Mock(head_sha=Mock(return_value="def4567890"))
        classifier = Mock(classify=AsyncMock())
        build = BuildCommitUseCase(classifier, Mock(), workspace)
        app = create_app()
        app.dependency_overrides[get_use_case_factory] = lambda: (lambda sha: build)

        response = TestClient(app).post("/builds", json={"commit_sha": "abc123"})

        assert response.status_code == 409
        assert response.json()["error"] == "WorkspaceMismatchError"
        assert "def4567890" in response.json()["message"]
        classifier.classify.assert_not_awaited()

    def test_unexpected_error(self, client, use_case):
        """Test that unknown exceptions do not leak their message."""
        use_case.execute.side_effect = RuntimeError("secret detail")

        response = client.post("/builds", json={"commit_sha": "abc123"})

        assert response.status_code == 500
        assert response.json()["error"] == "InternalError"
        assert "secret detail" not in response.text

    def test_health(self, client):
        """Test the health check."""
        assert client.get("/health").json() == {"status": "ok"}
