"""
Unit tests for latedays/gitlab_client.py

Tests GitLab API client with mocked HTTP responses.
"""
import pytest
import requests
import responses
from datetime import datetime, timedelta, timezone

from latedays.gitlab_client import (
    GitLabClient,
    GitLabClientError,
    ResolutionError,
    BranchHead,
)

API = "https://git.uwaterloo.ca/api/v4"
PROJECT_URL = f"{API}/projects/ece459-1231%2Fece459-1231-a1-alice"
BRANCH_URL = f"{API}/projects/4242/repository/branches/master"


class TestGitLabClientInit:
    """Tests for client construction."""

    def test_default_url(self):
        """Default instance is the UW GitLab."""
        client = GitLabClient("test_token")
        assert client.api_url == API

    def test_url_without_scheme(self):
        """Bare host name gets https."""
        client = GitLabClient("test_token", "gitlab.example.com/")
        assert client.api_url == "https://gitlab.example.com/api/v4"

    def test_token_header(self):
        """Token is sent as PRIVATE-TOKEN."""
        client = GitLabClient("test_token")
        assert client.headers == {"PRIVATE-TOKEN": "test_token"}


class TestGitLabClientFindProject:
    """Tests for find_project method."""

    @responses.activate
    def test_find_project(self, gitlab_project_response):
        """Existing project returns its ID."""
        responses.add(responses.GET, PROJECT_URL, json=gitlab_project_response, status=200)
        client = GitLabClient("test_token")

        assert client.find_project("ece459-1231/ece459-1231-a1-alice") == 4242
        assert responses.calls[0].request.headers["PRIVATE-TOKEN"] == "test_token"

    @responses.activate
    def test_project_not_found(self):
        """Missing project raises ResolutionError naming the project."""
        responses.add(responses.GET, PROJECT_URL, json={"message": "404 Project Not Found"}, status=404)
        client = GitLabClient("test_token")

        with pytest.raises(ResolutionError) as exc_info:
            client.find_project("ece459-1231/ece459-1231-a1-alice")
        assert exc_info.value.project == "ece459-1231/ece459-1231-a1-alice"
        assert "not found" in str(exc_info.value)

    @responses.activate
    def test_server_error(self):
        """Non-200 response raises ResolutionError with the status."""
        responses.add(responses.GET, PROJECT_URL, status=500)
        client = GitLabClient("test_token")

        with pytest.raises(ResolutionError, match="500"):
            client.find_project("ece459-1231/ece459-1231-a1-alice")

    @responses.activate
    def test_connection_error(self):
        """Transport failure raises ResolutionError."""
        responses.add(responses.GET, PROJECT_URL, body=requests.ConnectionError("refused"))
        client = GitLabClient("test_token")

        with pytest.raises(ResolutionError, match="request failed"):
            client.find_project("ece459-1231/ece459-1231-a1-alice")

    @responses.activate
    def test_missing_id(self):
        """Response without id raises ResolutionError."""
        responses.add(responses.GET, PROJECT_URL, json={"name": "x"}, status=200)
        client = GitLabClient("test_token")

        with pytest.raises(ResolutionError):
            client.find_project("ece459-1231/ece459-1231-a1-alice")

    @responses.activate
    def test_invalid_json(self):
        """Non-JSON body raises ResolutionError."""
        responses.add(responses.GET, PROJECT_URL, body="<html>", status=200)
        client = GitLabClient("test_token")

        with pytest.raises(ResolutionError, match="invalid JSON"):
            client.find_project("ece459-1231/ece459-1231-a1-alice")

    def test_resolution_error_is_client_error(self):
        """ResolutionError derives from GitLabClientError."""
        assert issubclass(ResolutionError, GitLabClientError)


class TestGitLabClientGetDefaultBranchHead:
    """Tests for get_default_branch_head method."""

    @responses.activate
    def test_get_branch_head(self, gitlab_branch_response):
        """Branch head carries commit ID and aware commit time."""
        responses.add(responses.GET, BRANCH_URL, json=gitlab_branch_response, status=200)
        client = GitLabClient("test_token")

        head = client.get_default_branch_head(4242)

        assert isinstance(head, BranchHead)
        assert head.name == "master"
        assert head.is_default is True
        assert head.commit_id == "abc123def4567890"
        assert head.committed_at == datetime(2023, 1, 28, 6, 30, tzinfo=timezone.utc)
        assert head.committed_at.utcoffset() == timedelta(hours=-5)

    @responses.activate
    def test_not_default(self, gitlab_branch_response):
        """Branch not flagged as default is reported as such."""
        gitlab_branch_response["default"] = False
        responses.add(responses.GET, BRANCH_URL, json=gitlab_branch_response, status=200)
        client = GitLabClient("test_token")

        assert client.get_default_branch_head(4242).is_default is False

    @responses.activate
    def test_custom_branch_name(self, gitlab_branch_response):
        """Branch name is part of the request URL."""
        gitlab_branch_response["name"] = "main"
        responses.add(
            responses.GET,
            f"{API}/projects/4242/repository/branches/main",
            json=gitlab_branch_response,
            status=200,
        )
        client = GitLabClient("test_token")

        assert client.get_default_branch_head(4242, "main").name == "main"

    @responses.activate
    def test_utc_z_suffix(self, gitlab_branch_response):
        """Commit dates with Z suffix are parsed as UTC."""
        gitlab_branch_response["commit"]["committed_date"] = "2023-01-28T06:30:00Z"
        responses.add(responses.GET, BRANCH_URL, json=gitlab_branch_response, status=200)
        client = GitLabClient("test_token")

        head = client.get_default_branch_head(4242)
        assert head.committed_at == datetime(2023, 1, 28, 6, 30, tzinfo=timezone.utc)

    @responses.activate
    def test_branch_not_found(self):
        """Missing branch raises ResolutionError."""
        responses.add(responses.GET, BRANCH_URL, json={"message": "404 Branch Not Found"}, status=404)
        client = GitLabClient("test_token")

        with pytest.raises(ResolutionError, match="master"):
            client.get_default_branch_head(4242)

    @responses.activate
    def test_missing_commit(self):
        """Branch without commit raises ResolutionError."""
        responses.add(responses.GET, BRANCH_URL, json={"name": "master", "default": True}, status=200)
        client = GitLabClient("test_token")

        with pytest.raises(ResolutionError, match="no head commit"):
            client.get_default_branch_head(4242)

    @responses.activate
    def test_unparseable_date(self, gitlab_branch_response):
        """Garbage commit date raises ResolutionError."""
        gitlab_branch_response["commit"]["committed_date"] = "yesterday"
        responses.add(responses.GET, BRANCH_URL, json=gitlab_branch_response, status=200)
        client = GitLabClient("test_token")

        with pytest.raises(ResolutionError, match="unparseable"):
            client.get_default_branch_head(4242)

    @responses.activate
    def test_naive_date_rejected(self, gitlab_branch_response):
        """Commit date without offset raises ResolutionError."""
        gitlab_branch_response["commit"]["committed_date"] = "2023-01-28T06:30:00"
        responses.add(responses.GET, BRANCH_URL, json=gitlab_branch_response, status=200)
        client = GitLabClient("test_token")

        with pytest.raises(ResolutionError, match="no timezone"):
            client.get_default_branch_head(4242)
