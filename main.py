import argparse
import dataclasses
import logging
import os
import sys

from dotenv import load_dotenv

from latedays import (
    ConfigurationError,
    GitLabClient,
    LateDaysRunner,
    RepositoryStateResolver,
    ResolutionError,
    build_context,
    load_settings,
    read_roster,
    read_token,
    write_report,
)

logger = logging.getLogger(__name__)

EXIT_OK = 0
EXIT_RESOLUTION_ERROR = 1
EXIT_CONFIGURATION_ERROR = 2
EXIT_OUTPUT_ERROR = 3


def configure_logging(level_name: str | None = None) -> str:
    """Configure root logging to console and file; returns the log file path."""
    log_dir = os.getenv("LOG_DIR", "logs")
    os.makedirs(log_dir, exist_ok=True)

    # Set log level from argument or environment (default: INFO)
    level_name = (level_name or os.getenv("LOG_LEVEL", "INFO")).upper()
    log_level = getattr(logging, level_name, logging.INFO)

    log_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        datefmt='%Y-%m-%d %H:%M:%S'
    )

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(log_formatter)

    log_file = os.path.join(log_dir, "latedays.log")
    file_handler = logging.FileHandler(log_file, encoding='utf-8')
    file_handler.setFormatter(log_formatter)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)
    for handler in root_logger.handlers[:]:
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.addHandler(console_handler)
    root_logger.addHandler(file_handler)
    return log_file


def parse_args(argv: list[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="latedays",
        description="Compute late days for student GitLab projects.",
        epilog='Example: latedays a1 ece459-1231 "2023-01-27 23:59" 60 1a2b3c4d students.csv token.git',
    )
    parser.add_argument("designation", help="Assignment designation, e.g. a1")
    parser.add_argument("group_name", help="GitLab group holding the student projects")
    parser.add_argument("due_date_time", help='Due date, "YYYY-MM-DD HH:MM" in the reference timezone')
    parser.add_argument("tolerance", help="Grace period in minutes")
    parser.add_argument("starter_commit", help="Commit ID every student project starts from")
    parser.add_argument("roster", help="CSV file with one student or group per row")
    parser.add_argument("token_file", nargs="?", help="File with the GitLab token (default: $GITLAB_TOKEN)")
    parser.add_argument("--config", help="YAML settings file")
    parser.add_argument("--output-dir", help="Directory for the output files")
    parser.add_argument("--gitlab-url", help="GitLab instance URL")
    parser.add_argument("--branch", help="Expected default branch name")
    parser.add_argument("--log-level", help="Logging level (default: $LOG_LEVEL or INFO)")
    return parser.parse_args(argv)


def main(argv: list[str] | None = None) -> int:
    load_dotenv()
    args = parse_args(argv)
    log_file = configure_logging(args.log_level)
    logger.info(f"Logging initialized. Log file: {log_file}")

    try:
        settings = load_settings(args.config)
        overrides = {
            "output_dir": args.output_dir,
            "gitlab_url": args.gitlab_url,
            "default_branch": args.branch,
        }
        settings = dataclasses.replace(
            settings, **{k: v for k, v in overrides.items() if v}
        )
        context = build_context(
            args.designation,
            args.group_name,
            args.due_date_time,
            args.tolerance,
            args.starter_commit,
            tz=settings.timezone,
        )
        token = read_token(args.token_file)
        roster = read_roster(args.roster)
    except ConfigurationError as e:
        logger.error(f"Configuration error: {e}")
        return EXIT_CONFIGURATION_ERROR

    client = GitLabClient(token, settings.gitlab_url, timeout=settings.request_timeout)
    resolver = RepositoryStateResolver(client, settings.default_branch, settings.timezone)

    try:
        report = LateDaysRunner(resolver).run(roster, context)
    except ResolutionError as e:
        where = ""
        if e.project_ref:
            where = f" for project {e.project_ref} (students: {', '.join(e.roster_entry or [])})"
        logger.error(f"Resolution error{where}, aborting run: {e}")
        return EXIT_RESOLUTION_ERROR

    try:
        write_report(report, context.group_name, context.designation, settings.output_dir)
    except OSError as e:
        logger.error(f"Unable to write output files to {settings.output_dir}: {e}")
        return EXIT_OUTPUT_ERROR
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
