"""
Resolution of a student project's submitted state.

A project whose default-branch head is still the starter commit has no
submission; otherwise the head commit's timestamp is the submission time.
"""
import logging
from dataclasses import dataclass
from datetime import datetime, tzinfo
from enum import Enum

from .deadline import REFERENCE_TIMEZONE
from .gitlab_client import GitLabClient, DEFAULT_BRANCH_NAME

logger = logging.getLogger(__name__)


class SubmissionStatus(Enum):
    """Whether the student changed anything past the starter commit."""
    UNCHANGED = "unchanged"  # Head is still the starter commit
    SUBMITTED = "submitted"  # Head moved past the starter commit


@dataclass(frozen=True)
class SubmissionOutcome:
    """Submitted state of one project."""
    status: SubmissionStatus
    submitted_at: datetime | None = None  # Only set when SUBMITTED

    @classmethod
    def unchanged(cls) -> "SubmissionOutcome":
        return cls(SubmissionStatus.UNCHANGED)

    @classmethod
    def submitted(cls, submitted_at: datetime) -> "SubmissionOutcome":
        return cls(SubmissionStatus.SUBMITTED, submitted_at)


class RepositoryStateResolver:
    """
    Determines the submitted state of student projects on GitLab.

    Lookup errors from the client (ResolutionError) are not caught here;
    they propagate to the caller unchanged.
    """

    def __init__(
        self,
        gitlab_client: GitLabClient,
        expected_branch: str = DEFAULT_BRANCH_NAME,
        tz: tzinfo = REFERENCE_TIMEZONE,
    ):
        """
        Initialize resolver.

        Args:
            gitlab_client: Configured GitLabClient instance
            expected_branch: Branch expected to be the project default
            tz: Timezone submission timestamps are converted to
        """
        self.gitlab = gitlab_client
        self.expected_branch = expected_branch
        self.tz = tz

    def resolve(
        self,
        group_name: str,
        starter_commit_id: str,
        project_ref: str,
    ) -> SubmissionOutcome:
        """
        Resolve the submitted state of a project.

        Args:
            group_name: GitLab group (namespace) holding the student projects
            starter_commit_id: Commit every student project starts from
            project_ref: Project name within the group

        Returns:
            UNCHANGED if the head commit is the starter commit,
            otherwise SUBMITTED with the head commit time

        Raises:
            ResolutionError: If the project or its branch cannot be found
        """
        project_id = self.gitlab.find_project(f"{group_name}/{project_ref}")
        head = self.gitlab.get_default_branch_head(project_id, self.expected_branch)

        if not head.is_default:
            logger.warning(
                f"Project {project_ref} uses a different default branch "
                f"than expected {self.expected_branch}!"
            )

        # Identifier equality only; commit time is irrelevant here
        if head.commit_id == starter_commit_id:
            logger.info(f"Project {project_ref} is unchanged from starter commit {starter_commit_id}")
            return SubmissionOutcome.unchanged()

        return SubmissionOutcome.submitted(head.committed_at.astimezone(self.tz))
