"""
Output files for a late-day run.

Two flat CSV files per assignment: late days per student, and students
whose project never moved past the starter commit.
"""
import logging
import os

from .orchestrator import LateDaysReport

logger = logging.getLogger(__name__)


def late_days_filename(group_name: str, designation: str) -> str:
    """
    Examples:
        >>> late_days_filename("ece459-1231", "a1")
        'ece459-1231-a1-latedays.csv'
    """
    return f"{group_name}-{designation}-latedays.csv"


def unchanged_filename(group_name: str, designation: str) -> str:
    return f"{group_name}-{designation}-unchanged.csv"


def _write_lines(path: str, lines: list[str]) -> None:
    with open(path, "w", encoding="utf-8", newline="") as f:
        for line in lines:
            f.write(f"{line}\n")


def write_report(
    report: LateDaysReport,
    group_name: str,
    designation: str,
    output_dir: str = ".",
) -> tuple[str, str]:
    """
    Write both output files, replacing any previous ones.

    Args:
        report: Result of LateDaysRunner.run
        group_name: GitLab group name
        designation: Assignment designation
        output_dir: Directory for the files (created if missing)

    Returns:
        Paths of the late-days file and the unchanged file
    """
    os.makedirs(output_dir, exist_ok=True)
    late_path = os.path.join(output_dir, late_days_filename(group_name, designation))
    unchanged_path = os.path.join(output_dir, unchanged_filename(group_name, designation))

    _write_lines(late_path, [record.to_line() for record in report.late_records])
    _write_lines(unchanged_path, report.unchanged_records)

    logger.info(f"Wrote {len(report.late_records)} records to {late_path}")
    logger.info(f"Wrote {len(report.unchanged_records)} records to {unchanged_path}")
    return late_path, unchanged_path
