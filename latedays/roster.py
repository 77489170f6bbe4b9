"""
Roster reading.

The roster is a headerless CSV file: one row per solo student or group,
with the group members' identifiers in the row's columns.
"""
import csv
import logging
from typing import Iterable

from .config import ConfigurationError

logger = logging.getLogger(__name__)


def parse_roster_rows(rows: Iterable[list[str]]) -> list[list[str]]:
    """
    Turn raw CSV rows into roster entries.

    Cells are trimmed, empty cells dropped and rows left with no
    identifiers skipped.

    Examples:
        >>> parse_roster_rows([[" alice "], [], ["bob", "carol", ""]])
        [['alice'], ['bob', 'carol']]
    """
    roster = []
    for row in rows:
        entry = [cell.strip() for cell in row if cell.strip()]
        if entry:
            roster.append(entry)
    return roster


def read_roster(path: str) -> list[list[str]]:
    """
    Read the roster CSV file.

    Args:
        path: Path to the CSV file

    Returns:
        Roster entries in file order; empty list for an empty file

    Raises:
        ConfigurationError: If the file cannot be read or parsed
    """
    try:
        with open(path, newline="", encoding="utf-8-sig") as f:
            roster = parse_roster_rows(csv.reader(f))
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise ConfigurationError(f"Unable to read roster {path}: {e}") from e

    groups = sum(1 for entry in roster if len(entry) > 1)
    logger.info(f"Roster {path}: {len(roster)} entries ({groups} groups)")
    return roster
