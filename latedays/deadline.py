"""
Deadline handling for late-day calculation.

A deadline is a timezone-aware due instant plus a grace tolerance.
Lateness only starts accruing after the effective deadline.
"""
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from zoneinfo import ZoneInfo

# Canada/Eastern; all instants in a run are normalized to this zone
REFERENCE_TIMEZONE = ZoneInfo("America/Toronto")


def effective_deadline(due: datetime, tolerance: timedelta) -> datetime:
    """
    Calculate the instant after which a submission is late.

    Args:
        due: Timezone-aware due date and time
        tolerance: Non-negative grace period

    Returns:
        due + tolerance, in the same timezone as due

    Raises:
        ValueError: If due is naive or tolerance is negative

    Examples:
        >>> due = datetime(2023, 1, 27, 14, 30, tzinfo=timezone.utc)
        >>> effective_deadline(due, timedelta(minutes=15))
        datetime.datetime(2023, 1, 27, 14, 45, tzinfo=datetime.timezone.utc)
    """
    if due.tzinfo is None:
        raise ValueError("Due date must be timezone-aware")
    if tolerance < timedelta(0):
        raise ValueError(f"Tolerance must not be negative, got {tolerance}")
    return (due.astimezone(timezone.utc) + tolerance).astimezone(due.tzinfo)


@dataclass(frozen=True)
class Deadline:
    """Nominal due instant plus grace tolerance."""
    due: datetime
    tolerance: timedelta = timedelta(0)

    def __post_init__(self):
        if self.due.tzinfo is None:
            raise ValueError("Deadline due date must be timezone-aware")
        if self.tolerance < timedelta(0):
            raise ValueError(f"Tolerance must not be negative, got {self.tolerance}")

    @property
    def effective(self) -> datetime:
        return effective_deadline(self.due, self.tolerance)
