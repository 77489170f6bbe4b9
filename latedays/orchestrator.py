"""
Late-day orchestrator.

This module provides the LateDaysRunner class that walks the roster,
resolves each project's submitted state and computes late days.
"""
import logging
from dataclasses import dataclass, field

from .config import RunContext
from .gitlab_client import ResolutionError
from .lateness import calculate_late_days, minutes_late
from .resolver import RepositoryStateResolver, SubmissionStatus

logger = logging.getLogger(__name__)


@dataclass
class LateRecord:
    """Late days charged to one student."""
    student: str
    late_days: int

    def to_line(self) -> str:
        return f"{self.student},{self.late_days}"


@dataclass
class LateDaysReport:
    """Result of a run, in roster order."""
    late_records: list[LateRecord] = field(default_factory=list)
    unchanged_records: list[str] = field(default_factory=list)  # Students with no submission


def project_ref(group_name: str, designation: str, entry: list[str], index: int) -> str:
    """
    Derive the project name for a roster entry.

    Solo entries are named after the student, groups after their
    1-based position in the roster.

    Args:
        group_name: GitLab group name
        designation: Assignment designation, e.g. "a1"
        entry: Student identifiers of the entry
        index: 0-based position of the entry in the roster

    Examples:
        >>> project_ref("ece459-1231", "a1", ["alice"], 4)
        'ece459-1231-a1-alice'
        >>> project_ref("ece459-1231", "a1", ["alice", "bob"], 2)
        'ece459-1231-a1-g3'
    """
    if not entry:
        raise ValueError(f"Roster entry {index + 1} has no students")
    if len(entry) == 1:
        return f"{group_name}-{designation}-{entry[0]}"
    return f"{group_name}-{designation}-g{index + 1}"


class LateDaysRunner:
    """
    Computes late days for a whole roster.

    Entries are processed sequentially. A ResolutionError for any entry
    aborts the run; no partial report is returned.
    """

    def __init__(self, resolver: RepositoryStateResolver):
        self.resolver = resolver

    def run(self, roster: list[list[str]], context: RunContext) -> LateDaysReport:
        """
        Compute late days for every student in the roster.

        Args:
            roster: Roster entries (solo students or groups)
            context: Group name, designation, starter commit and deadline

        Returns:
            LateDaysReport with late and unchanged records in roster order

        Raises:
            ResolutionError: If any project cannot be resolved
        """
        report = LateDaysReport()
        deadline = context.deadline.effective
        logger.info(
            f"Computing late days for {len(roster)} entries in {context.group_name}, "
            f"effective deadline {deadline}"
        )

        for index, entry in enumerate(roster):
            name = project_ref(context.group_name, context.designation, entry, index)
            try:
                outcome = self.resolver.resolve(context.group_name, context.starter_commit_id, name)
            except ResolutionError as e:
                e.project_ref = name
                e.roster_entry = entry
                raise

            if outcome.status == SubmissionStatus.UNCHANGED:
                report.unchanged_records.extend(entry)
                continue

            late_days = calculate_late_days(outcome.submitted_at, deadline)
            logger.info(
                f"{name}: last commit was on {outcome.submitted_at}; "
                f"due date was {deadline}"
            )
            if late_days > 0:
                late_minutes = int(minutes_late(outcome.submitted_at, deadline))
                logger.info(f"{name}: {late_minutes} minutes late, {late_days} late day(s)")

            for student in entry:
                report.late_records.append(LateRecord(student, late_days))

        logger.info(
            f"Done: {len(report.late_records)} late-day records, "
            f"{len(report.unchanged_records)} unchanged"
        )
        return report
