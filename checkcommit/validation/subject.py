"""Subject validation: tag groups first, then free-text heuristics."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import List, Optional

from checkcommit.core.config import CommitPolicy
from checkcommit.core.errors import FindingKind, SubjectError
from checkcommit.validation.matcher import TagMatch, attempt_match, parse_tag_prefix

logger = logging.getLogger(__name__)

MIN_WORDS = 3
MIN_LENGTH = 15
MAX_WORDS = 15
MAX_LENGTH = 100


@dataclass
class SubjectResult:
    """Outcome of validating one subject."""

    subject: str
    residual: str
    error: Optional[SubjectError] = None
    matches: List[TagMatch] = field(default_factory=list)
    warnings: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return self.error is None


def check_free_text(residual: str) -> Optional[SubjectError]:
    """Apply word-count and length bounds to the untagged part of a subject."""
    words = residual.split()

    if len(words) < MIN_WORDS:
        return SubjectError(
            FindingKind.TOO_SHORT,
            f"too short commit subject [words {len(words)} < {MIN_WORDS}] {words}",
        )
    if len(residual) < MIN_LENGTH:
        return SubjectError(
            FindingKind.TOO_SHORT,
            f"too short commit subject [len {len(residual)} < {MIN_LENGTH}] "
            f"'{residual}'",
        )
    if len(words) > MAX_WORDS:
        return SubjectError(
            FindingKind.TOO_LONG,
            f"too long commit subject [words {len(words)} > {MAX_WORDS} - use msg body]"
            f" {words}",
        )
    if len(residual) > MAX_LENGTH:
        return SubjectError(
            FindingKind.TOO_LONG,
            f"too long commit subject [len {len(residual)} > {MAX_LENGTH}] "
            f"'{residual}'",
        )
    return None


class SubjectValidator:
    """Validate commit subjects against a fixed policy.

    The validator keeps no state between calls; the same subject always
    yields the same result for the same policy.
    """

    def __init__(self, policy: CommitPolicy):
        self.policy = policy

    def validate(self, subject: str) -> SubjectResult:
        buffer = subject
        matches: List[TagMatch] = []
        last: Optional[TagMatch] = None

        for group in self.policy.tag_order:
            satisfied = group.optional
            # every alternative is tried; an accepted one advances the buffer
            # for the alternatives after it
            for patch_type_name in group.patch_types:
                # the last parsed pair labels the error
                candidate = parse_tag_prefix(buffer)
                if candidate is not None:
                    last = candidate
                match = attempt_match(buffer, patch_type_name, self.policy)
                if match is not None:
                    buffer = buffer[len(match.prefix) :]
                    matches.append(match)
                    satisfied = True

            if not satisfied:
                tag = last.tag if last else ""
                scope = last.scope if last else ""
                error = SubjectError(
                    FindingKind.INVALID_TAG,
                    f"invalid tag or no tag found: {tag}/{scope}",
                )
                return SubjectResult(subject, buffer, error=error, matches=matches)

        result = SubjectResult(subject, buffer, matches=matches)

        if self.policy.is_empty:
            return result

        if buffer != " ".join(buffer.split()):
            warning = (
                "malformatted subject string (trailing or double spaces?): "
                f"'{buffer}'"
            )
            logger.warning(warning)
            result.warnings.append(warning)

        result.error = check_free_text(buffer)
        return result

    def check(self, subject: str) -> str:
        """Return the free-text residual of ``subject`` or raise SubjectError."""
        result = self.validate(subject)
        if result.error is not None:
            raise result.error
        return result.residual
