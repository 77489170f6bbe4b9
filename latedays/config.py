"""
Run configuration for late-day calculation.

Values come from the command line, an optional YAML settings file and
the environment (.env is honoured via python-dotenv). The result is an
immutable RunContext handed to the orchestrator.
"""
import logging
import math
import os
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone, tzinfo
from typing import Any
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

import yaml

from .deadline import Deadline, REFERENCE_TIMEZONE
from .gitlab_client import DEFAULT_GITLAB_URL, DEFAULT_BRANCH_NAME, REQUEST_TIMEOUT

logger = logging.getLogger(__name__)

DATE_TIME_FORMAT = "%Y-%m-%d %H:%M"


class ConfigurationError(Exception):
    """Invalid or missing run configuration."""
    pass


@dataclass(frozen=True)
class RunContext:
    """Per-run values shared by every roster entry."""
    group_name: str
    designation: str
    starter_commit_id: str
    deadline: Deadline


@dataclass(frozen=True)
class Settings:
    """Tool settings that do not change between assignments."""
    gitlab_url: str = DEFAULT_GITLAB_URL
    default_branch: str = DEFAULT_BRANCH_NAME
    timezone: tzinfo = REFERENCE_TIMEZONE
    output_dir: str = "."
    request_timeout: float = REQUEST_TIMEOUT


def parse_due_date(text: str, tz: tzinfo = REFERENCE_TIMEZONE) -> datetime:
    """
    Parse a due date in local time of the reference timezone.

    Args:
        text: Date and time, e.g. "2023-01-27 23:59"
        tz: Timezone the wall-clock time is given in

    Returns:
        Timezone-aware datetime

    Raises:
        ConfigurationError: If the text is malformed or the wall-clock
            time does not exist in tz (skipped by a DST change)

    Note:
        Ambiguous times (repeated by a DST change) resolve to the
        first occurrence.
    """
    try:
        naive = datetime.strptime(text.strip(), DATE_TIME_FORMAT)
    except ValueError as e:
        raise ConfigurationError(
            f"Invalid due date {text!r}, expected format YYYY-MM-DD HH:MM"
        ) from e

    local = naive.replace(tzinfo=tz)
    round_trip = local.astimezone(timezone.utc).astimezone(tz)
    if round_trip.replace(tzinfo=None) != naive:
        raise ConfigurationError(f"Due date {text!r} does not exist in timezone {tz}")
    return local


def parse_tolerance(text: str) -> timedelta:
    """
    Parse a tolerance given in whole minutes.

    Raises:
        ConfigurationError: If the value is not a non-negative integer
    """
    try:
        minutes = int(text)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"Tolerance must be a whole number of minutes, got {text!r}") from e
    if minutes < 0:
        raise ConfigurationError(f"Tolerance must not be negative, got {minutes}")
    return timedelta(minutes=minutes)


def read_token(token_file: str | None = None) -> str:
    """
    Read the GitLab access token.

    Args:
        token_file: File holding the token; falls back to GITLAB_TOKEN

    Returns:
        Token with surrounding whitespace removed

    Raises:
        ConfigurationError: If no non-empty token is available
    """
    if token_file:
        try:
            with open(token_file, "r", encoding="utf-8") as f:
                token = f.read().strip()
        except OSError as e:
            raise ConfigurationError(f"Unable to read token from file {token_file}: {e}") from e
        if not token:
            raise ConfigurationError(f"Token file {token_file} is empty")
        return token

    token = os.getenv("GITLAB_TOKEN", "").strip()
    if not token:
        raise ConfigurationError(
            "No GitLab token: pass a token file or set GITLAB_TOKEN"
        )
    return token


def _load_yaml(path: str) -> dict[str, Any]:
    try:
        with open(path, "r", encoding="utf-8") as f:
            data = yaml.safe_load(f)
    except OSError as e:
        raise ConfigurationError(f"Unable to read config file {path}: {e}") from e
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in config file {path}: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a mapping")
    return data


def load_settings(config_file: str | None = None) -> Settings:
    """
    Load tool settings from a YAML file and the environment.

    YAML keys take precedence over environment variables.

    Example YAML:
        gitlab:
          url: git.uwaterloo.ca
          default-branch: main
        timezone: America/Toronto
        output-dir: results
        request-timeout: 10
    """
    data = _load_yaml(config_file) if config_file else {}
    gitlab = data.get("gitlab") or {}
    if not isinstance(gitlab, dict):
        raise ConfigurationError("'gitlab' section of config must be a mapping")

    tz = REFERENCE_TIMEZONE
    tz_name = data.get("timezone")
    if tz_name:
        try:
            tz = ZoneInfo(str(tz_name))
        except (ZoneInfoNotFoundError, ValueError) as e:
            raise ConfigurationError(f"Unknown timezone {tz_name!r}") from e

    timeout = data.get("request-timeout", REQUEST_TIMEOUT)
    try:
        timeout = float(timeout)
    except (TypeError, ValueError) as e:
        raise ConfigurationError(f"request-timeout must be a number, got {timeout!r}") from e
    if not math.isfinite(timeout) or timeout <= 0:
        raise ConfigurationError(f"request-timeout must be a positive number of seconds, got {timeout}")

    for key in ("url", "default-branch"):
        value = gitlab.get(key)
        if value is not None and not isinstance(value, str):
            raise ConfigurationError(f"gitlab.{key} must be a string, got {value!r}")

    settings = Settings(
        gitlab_url=gitlab.get("url") or os.getenv("GITLAB_URL") or DEFAULT_GITLAB_URL,
        default_branch=gitlab.get("default-branch") or DEFAULT_BRANCH_NAME,
        timezone=tz,
        output_dir=str(data.get("output-dir") or "."),
        request_timeout=timeout,
    )
    logger.debug(f"Loaded settings: {settings}")
    return settings


def build_context(
    designation: str,
    group_name: str,
    due_date_time: str,
    tolerance_minutes: str,
    starter_commit_id: str,
    tz: tzinfo = REFERENCE_TIMEZONE,
) -> RunContext:
    """
    Build the run context from raw command-line values.

    Raises:
        ConfigurationError: If any value is missing or malformed
    """
    for name, value in (
        ("designation", designation),
        ("group name", group_name),
        ("starter commit", starter_commit_id),
    ):
        if not value or not value.strip():
            raise ConfigurationError(f"The {name} must not be empty")

    deadline = Deadline(
        due=parse_due_date(due_date_time, tz),
        tolerance=parse_tolerance(tolerance_minutes),
    )
    return RunContext(
        group_name=group_name.strip(),
        designation=designation.strip(),
        starter_commit_id=starter_commit_id.strip(),
        deadline=deadline,
    )
