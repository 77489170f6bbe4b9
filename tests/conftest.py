"""
Pytest configuration and shared fixtures for testing.
"""
import pytest
import os
import sys
from datetime import datetime, timedelta
from unittest.mock import MagicMock

# Add parent directory to path for imports
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from latedays.config import RunContext
from latedays.deadline import Deadline, REFERENCE_TIMEZONE
from latedays.gitlab_client import GitLabClient, BranchHead

STARTER_SHA = "0000starter0000"


@pytest.fixture
def mock_env_vars(monkeypatch, tmp_path):
    """Set environment variables for testing."""
    monkeypatch.setenv("GITLAB_TOKEN", "test_gitlab_token")
    monkeypatch.setenv("LOG_DIR", str(tmp_path / "logs"))
    monkeypatch.delenv("GITLAB_URL", raising=False)
    monkeypatch.delenv("LOG_LEVEL", raising=False)


@pytest.fixture
def due_date():
    """Due date in the reference timezone."""
    return datetime(2023, 1, 27, 23, 59, tzinfo=REFERENCE_TIMEZONE)


@pytest.fixture
def run_context(due_date):
    """Run context with a one-hour tolerance."""
    return RunContext(
        group_name="ece459-1231",
        designation="a1",
        starter_commit_id=STARTER_SHA,
        deadline=Deadline(due=due_date, tolerance=timedelta(minutes=60)),
    )


@pytest.fixture
def mock_gitlab():
    """Mock GitLab client."""
    return MagicMock(spec=GitLabClient)


@pytest.fixture
def make_head():
    """Factory for BranchHead values."""
    def _make(commit_id="abc123", committed_at=None, is_default=True, name="master"):
        if committed_at is None:
            committed_at = datetime(2023, 1, 27, 12, 0, tzinfo=REFERENCE_TIMEZONE)
        return BranchHead(
            name=name,
            is_default=is_default,
            commit_id=commit_id,
            committed_at=committed_at,
        )
    return _make


@pytest.fixture
def gitlab_project_response():
    """GitLab API response for a single project."""
    return {
        "id": 4242,
        "name": "ece459-1231-a1-alice",
        "path_with_namespace": "ece459-1231/ece459-1231-a1-alice",
        "default_branch": "master",
    }


@pytest.fixture
def gitlab_branch_response():
    """GitLab API response for a branch."""
    return {
        "name": "master",
        "default": True,
        "protected": True,
        "commit": {
            "id": "abc123def4567890",
            "short_id": "abc123de",
            "title": "Finish assignment",
            "committed_date": "2023-01-28T01:30:00.000-05:00",
        },
    }
