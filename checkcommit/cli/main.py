"""
Command line entry point: resolve the commit range, validate every subject
and report.

Exit status is 0 when every subject passes, 1 when any subject fails or a
fatal error (configuration, environment detection, git) stops the run.
"""

import argparse
import logging
from typing import List, Optional, Sequence

from pydantic import ValidationError

from checkcommit import __version__
from checkcommit.core.config import (
    DEFAULT_CONFIG_FILE,
    LOG_LEVELS,
    Settings,
    load_policy,
)
from checkcommit.core.errors import CheckCommitError
from checkcommit.core.logging_config import setup_logging
from checkcommit.history.environment import CommitRange, resolve_range
from checkcommit.history.git_log import list_subjects
from checkcommit.validation.subject import SubjectValidator

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="checkcommit",
        description="Check commit subjects against a tag/scope policy.",
    )
    parser.add_argument(
        "-c",
        "--config",
        help="policy file (default: .check-commit.yml, or CHECKCOMMIT_CONFIG_FILE)",
    )
    parser.add_argument("--ref", help="source ref, overrides CI detection")
    parser.add_argument("--base", help="target ref, overrides CI detection")
    parser.add_argument(
        "-s",
        "--subject",
        action="append",
        default=[],
        help="validate this subject instead of reading git history (repeatable)",
    )
    parser.add_argument(
        "--log-level",
        type=str.upper,
        choices=LOG_LEVELS,
        help="logging threshold (default: INFO, or CHECKCOMMIT_LOG_LEVEL)",
    )
    parser.add_argument("--version", action="version", version=__version__)
    return parser


def collect_subjects(args: argparse.Namespace, settings: Settings) -> List[str]:
    if args.subject:
        return list(args.subject)

    if args.ref and args.base:
        commit_range = CommitRange(ref=args.ref, base=args.base)
    else:
        commit_range = resolve_range()
    return list_subjects(commit_range, git=settings.git_executable)


def run(argv: Optional[Sequence[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)
    if bool(args.ref) != bool(args.base):
        parser.error("--ref and --base must be given together")

    try:
        settings = Settings()
    except ValidationError as e:
        logger.error("invalid CHECKCOMMIT_* setting: %s", e)
        return 1
    if args.log_level:
        settings.log_level = args.log_level
    setup_logging(settings)

    try:
        config_file = args.config or settings.config_file
        # only the implicit default may be absent
        required = config_file != DEFAULT_CONFIG_FILE
        policy = load_policy(config_file, required=required)
        subjects = collect_subjects(args, settings)
    except CheckCommitError as e:
        logger.error("%s", e)
        return 1

    validator = SubjectValidator(policy)
    failures = 0
    for subject in subjects:
        result = validator.validate(subject)
        if not result.ok:
            logger.error("%s, original subject message '%s'", result.error, subject)
            failures += 1

    if failures:
        logger.error(
            "encountered one or more commit message errors (%d of %d subjects)",
            failures,
            len(subjects),
        )
        if policy.help_text:
            logger.error("%s", policy.help_text)
        return 1

    logger.info("check completed without errors")
    return 0


def main() -> None:
    raise SystemExit(run())


if __name__ == "__main__":
    main()
