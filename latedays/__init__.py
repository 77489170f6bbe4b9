"""
Late-day calculation for student GitLab projects.

This package contains the pieces of a late-day run:
- deadline: Effective deadline (due date plus tolerance)
- lateness: Late days for a submission instant
- gitlab_client: GitLab API client
- resolver: Submitted state of a project (unchanged or submitted)
- orchestrator: Runs the whole roster
- roster: CSV roster reader
- output: Output file writer
- config: Run configuration and settings
"""

from .deadline import (
    Deadline,
    effective_deadline,
    REFERENCE_TIMEZONE,
)

from .lateness import (
    calculate_late_days,
    minutes_late,
    MINUTES_PER_DAY,
)

from .gitlab_client import (
    GitLabClient,
    GitLabClientError,
    ResolutionError,
    BranchHead,
    DEFAULT_BRANCH_NAME,
    DEFAULT_GITLAB_URL,
)

from .resolver import (
    RepositoryStateResolver,
    SubmissionOutcome,
    SubmissionStatus,
)

from .config import (
    ConfigurationError,
    RunContext,
    Settings,
    build_context,
    load_settings,
    parse_due_date,
    parse_tolerance,
    read_token,
)

from .orchestrator import (
    LateDaysRunner,
    LateDaysReport,
    LateRecord,
    project_ref,
)

from .roster import (
    read_roster,
    parse_roster_rows,
)

from .output import (
    write_report,
    late_days_filename,
    unchanged_filename,
)

__all__ = [
    # deadline
    "Deadline",
    "effective_deadline",
    "REFERENCE_TIMEZONE",
    # lateness
    "calculate_late_days",
    "minutes_late",
    "MINUTES_PER_DAY",
    # gitlab_client
    "GitLabClient",
    "GitLabClientError",
    "ResolutionError",
    "BranchHead",
    "DEFAULT_BRANCH_NAME",
    "DEFAULT_GITLAB_URL",
    # resolver
    "RepositoryStateResolver",
    "SubmissionOutcome",
    "SubmissionStatus",
    # config
    "ConfigurationError",
    "RunContext",
    "Settings",
    "build_context",
    "load_settings",
    "parse_due_date",
    "parse_tolerance",
    "read_token",
    # orchestrator
    "LateDaysRunner",
    "LateDaysReport",
    "LateRecord",
    "project_ref",
    # roster
    "read_roster",
    "parse_roster_rows",
    # output
    "write_report",
    "late_days_filename",
    "unchanged_filename",
]
