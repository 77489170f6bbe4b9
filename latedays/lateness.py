"""
Late-day calculation for submissions.

Pure functions: given the submission instant and the effective deadline,
return how late it is and the number of whole late days charged.
"""
import math
from datetime import datetime, timezone

MINUTES_PER_DAY = 60 * 24


def minutes_late(submitted_at: datetime, effective_deadline: datetime) -> float:
    """
    Elapsed minutes from the deadline to the submission.

    Both instants are compared in UTC, so a DST change in between does
    not shift the result. Negative when submitted early.

    Raises:
        ValueError: If either datetime is naive
    """
    if submitted_at.tzinfo is None or effective_deadline.tzinfo is None:
        raise ValueError("Submission time and deadline must be timezone-aware")
    delta = submitted_at.astimezone(timezone.utc) - effective_deadline.astimezone(timezone.utc)
    return delta.total_seconds() / 60


def calculate_late_days(submitted_at: datetime, effective_deadline: datetime) -> int:
    """
    Calculate late days for a submission.

    Any lateness at all costs one day; every further full 24 hours past
    the effective deadline costs one more. Submitting exactly at the
    deadline is on time.

    Args:
        submitted_at: Timezone-aware instant of the submitted commit
        effective_deadline: Timezone-aware deadline including tolerance

    Returns:
        Number of late days (0 if submitted on time)

    Examples:
        >>> deadline = datetime(2023, 1, 24, 22, 5, tzinfo=timezone.utc)
        >>> calculate_late_days(datetime(2023, 1, 24, 22, 5, tzinfo=timezone.utc), deadline)
        0
        >>> calculate_late_days(datetime(2023, 1, 24, 22, 6, tzinfo=timezone.utc), deadline)
        1
        >>> calculate_late_days(datetime(2023, 1, 26, 23, 50, tzinfo=timezone.utc), deadline)
        3
    """
    late = minutes_late(submitted_at, effective_deadline)
    if late <= 0:
        return 0

    return 1 + math.floor(late / MINUTES_PER_DAY)
