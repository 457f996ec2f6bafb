"""Commit subject enumeration through ``git log``."""

import logging
import subprocess
from typing import List, Optional

from checkcommit.core.errors import HistoryError
from checkcommit.history.environment import CommitRange

logger = logging.getLogger(__name__)

# each subject is wrapped in this character by the pretty format
SUBJECT_QUOTE = "'"
PRETTY_FORMAT = f"--pretty=format:{SUBJECT_QUOTE}%s{SUBJECT_QUOTE}"


def build_log_command(commit_range: CommitRange, git: str = "git") -> List[str]:
    return [git, "log", commit_range.spec, PRETTY_FORMAT]


def parse_log_output(output: str) -> List[str]:
    """Split ``git log`` output into subjects, dropping the wrapping quotes."""
    output = output.rstrip("\n")
    if not output:
        return []
    return [line.strip(SUBJECT_QUOTE) for line in output.split("\n")]


def list_subjects(
    commit_range: CommitRange, git: str = "git", cwd: Optional[str] = None
) -> List[str]:
    """Return the subjects of all commits in ``commit_range``."""
    cmd = build_log_command(commit_range, git)
    logger.debug("running %s", " ".join(cmd))
    try:
        proc = subprocess.run(
            cmd, capture_output=True, text=True, check=True, cwd=cwd
        )
    except FileNotFoundError as e:
        raise HistoryError(f"Unable to get log subject '{e}'") from e
    except subprocess.CalledProcessError as e:
        detail = (e.stderr or "").strip() or f"exit status {e.returncode}"
        raise HistoryError(f"Unable to get log subject '{detail}'") from e

    subjects = parse_log_output(proc.stdout)
    logger.info("found %d commit(s) in %s", len(subjects), commit_range.spec)
    return subjects
