"""
GitLab API client for late-day calculation.

This module provides a client for the GitLab REST API (v4) that looks up
student projects and the head commit of their default branch.
"""
import logging
from dataclasses import dataclass
from datetime import datetime
from urllib.parse import quote

import requests

logger = logging.getLogger(__name__)

DEFAULT_GITLAB_URL = "https://git.uwaterloo.ca"
# One day this will be "main"
DEFAULT_BRANCH_NAME = "master"
REQUEST_TIMEOUT = 30


@dataclass
class BranchHead:
    """Head commit of a branch as reported by GitLab."""
    name: str
    is_default: bool  # Whether GitLab flags this branch as the project default
    commit_id: str
    committed_at: datetime  # Timezone-aware, as reported by GitLab


class GitLabClientError(Exception):
    """Base exception for GitLab client errors."""
    pass


class ResolutionError(GitLabClientError):
    """A project or its branch could not be located."""

    def __init__(self, project: str, message: str):
        self.project = project
        # Set by the runner: project name and roster entry being resolved
        self.project_ref: str | None = None
        self.roster_entry: list[str] | None = None
        super().__init__(f"{project}: {message}")


class GitLabClient:
    """Client for GitLab API operations."""

    def __init__(
        self,
        token: str,
        base_url: str = DEFAULT_GITLAB_URL,
        timeout: float = REQUEST_TIMEOUT,
    ):
        """
        Initialize GitLab client.

        Args:
            token: GitLab personal or project access token
            base_url: GitLab instance URL, with or without scheme
            timeout: Per-request timeout in seconds
        """
        if "://" not in base_url:
            base_url = f"https://{base_url}"
        self.api_url = f"{base_url.rstrip('/')}/api/v4"
        self.timeout = timeout
        self.headers = {"PRIVATE-TOKEN": token}

    def _get(self, url: str, project: str) -> dict:
        try:
            resp = requests.get(url, headers=self.headers, timeout=self.timeout)
        except requests.RequestException as e:
            raise ResolutionError(project, f"request failed: {e}") from e

        if resp.status_code == 404:
            raise ResolutionError(project, "not found")
        if resp.status_code != 200:
            raise ResolutionError(project, f"GitLab returned HTTP {resp.status_code}")

        try:
            data = resp.json()
        except ValueError as e:
            raise ResolutionError(project, "invalid JSON in GitLab response") from e
        if not isinstance(data, dict):
            raise ResolutionError(project, "unexpected GitLab response")
        return data

    def find_project(self, qualified_name: str) -> int:
        """
        Look up a project by its full path.

        Args:
            qualified_name: Namespace and project name, e.g. "ece459-1231/ece459-1231-a1-alice"

        Returns:
            Numeric project ID

        Raises:
            ResolutionError: If the project does not exist or cannot be fetched
        """
        url = f"{self.api_url}/projects/{quote(qualified_name, safe='')}"
        data = self._get(url, qualified_name)

        project_id = data.get("id")
        if not isinstance(project_id, int):
            raise ResolutionError(qualified_name, "project response has no id")
        return project_id

    def get_default_branch_head(
        self,
        project_id: int,
        branch_name: str = DEFAULT_BRANCH_NAME,
    ) -> BranchHead:
        """
        Get the head commit of the branch expected to be the default.

        The branch is fetched by name; whether GitLab actually considers it
        the default branch is reported in BranchHead.is_default.

        Args:
            project_id: Numeric project ID from find_project
            branch_name: Name of the expected default branch

        Returns:
            BranchHead with commit ID and commit timestamp

        Raises:
            ResolutionError: If the branch does not exist or the payload is malformed
        """
        project = f"project {project_id} branch {branch_name}"
        url = (
            f"{self.api_url}/projects/{project_id}"
            f"/repository/branches/{quote(branch_name, safe='')}"
        )
        data = self._get(url, project)

        commit = data.get("commit") or {}
        commit_id = commit.get("id")
        committed_date = commit.get("committed_date")
        if not commit_id or not committed_date:
            raise ResolutionError(project, "branch response has no head commit")

        try:
            committed_at = datetime.fromisoformat(committed_date.replace("Z", "+00:00"))
        except ValueError as e:
            raise ResolutionError(project, f"unparseable commit date {committed_date!r}") from e
        if committed_at.tzinfo is None:
            raise ResolutionError(project, f"commit date {committed_date!r} has no timezone")

        logger.debug(f"Head of {project}: {commit_id} at {committed_at}")
        return BranchHead(
            name=data.get("name", branch_name),
            is_default=bool(data.get("default", False)),
            commit_id=commit_id,
            committed_at=committed_at,
        )
