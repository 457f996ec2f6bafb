"""
Leading tag/scope recognition for commit subjects.

A subject starts with zero or more annotations of the form ``TAG: `` or
``TAG/SCOPE: ``, where both parts are runs of uppercase ASCII letters. Matching
always anchors at the start of the remaining text and never mutates it: the
caller decides whether to consume the returned prefix.
"""

from __future__ import annotations

import logging
import re
from dataclasses import dataclass
from typing import Optional

from checkcommit.core.config import CommitPolicy

logger = logging.getLogger(__name__)

TAG_PREFIX_RE = re.compile(r"^(?P<match>(?P<tag>[A-Z]+)(/(?P<scope>[A-Z]+))?: )")


@dataclass(frozen=True)
class TagMatch:
    """A leading annotation; ``scope`` is empty when absent."""

    prefix: str
    tag: str
    scope: str = ""


def parse_tag_prefix(remaining: str) -> Optional[TagMatch]:
    """Split the leading ``TAG[/SCOPE]: `` off ``remaining``, without judging it."""
    m = TAG_PREFIX_RE.match(remaining)
    if m is None:
        return None
    return TagMatch(
        prefix=m.group("match"), tag=m.group("tag"), scope=m.group("scope") or ""
    )


def is_accepted(
    candidate: TagMatch, patch_type_name: str, policy: CommitPolicy
) -> bool:
    """Judge a parsed annotation against one patch type of ``policy``."""
    patch_type = policy.patch_type(patch_type_name)
    if patch_type is None or candidate.tag not in patch_type.values:
        return False
    if not candidate.scope:
        return True
    if not patch_type.scope:
        # scope given but nothing to verify it against
        logger.warning(
            "subject scope problem: patch type '%s' defines no scope for %s/%s",
            patch_type_name,
            candidate.tag,
            candidate.scope,
        )
        return False
    return candidate.scope in policy.scope_values(patch_type.scope)


def attempt_match(
    remaining: str, patch_type_name: str, policy: CommitPolicy
) -> Optional[TagMatch]:
    """Return the accepted leading annotation of ``remaining``, if any."""
    candidate = parse_tag_prefix(remaining)
    if candidate is None:
        return None
    if is_accepted(candidate, patch_type_name, policy):
        return candidate
    return None
