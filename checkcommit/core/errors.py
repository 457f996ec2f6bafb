"""
Error taxonomy for checkcommit.

Subclasses of ``CheckCommitError`` are fatal and stop the run before (or
while) subjects are collected. ``SubjectError`` is a per-subject finding that
is collected and reported without stopping the run.
"""

from enum import Enum


class CheckCommitError(Exception):
    """Base class for fatal errors."""


class ConfigurationError(CheckCommitError):
    """The policy document could not be read or does not match the schema."""


class EnvironmentDetectionError(CheckCommitError):
    """No known CI variable pair provides the commit range."""


class HistoryError(CheckCommitError):
    """The version-control log command failed."""


class FindingKind(str, Enum):
    """Kind of a per-subject finding."""

    INVALID_TAG = "invalid_tag"
    TOO_SHORT = "too_short"
    TOO_LONG = "too_long"


class SubjectError(Exception):
    """A commit subject does not satisfy the policy."""

    def __init__(self, kind: FindingKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message
