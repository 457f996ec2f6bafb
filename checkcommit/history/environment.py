"""Detection of the commit range from CI environment variables."""

import logging
import os
from dataclasses import dataclass
from typing import Mapping, Optional, Sequence

from checkcommit.core.errors import EnvironmentDetectionError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class CIProvider:
    """Names of the variables one CI system uses for source and target refs."""

    name: str
    ref_var: str
    base_var: str


KNOWN_PROVIDERS: Sequence[CIProvider] = (
    CIProvider("Github", "GITHUB_REF", "GITHUB_BASE_REF"),
    CIProvider(
        "Gitlab",
        "CI_MERGE_REQUEST_SOURCE_BRANCH_NAME",
        "CI_MERGE_REQUEST_TARGET_BRANCH_NAME",
    ),
)


@dataclass(frozen=True)
class CommitRange:
    """Source ref and target ref of a merge request."""

    ref: str
    base: str
    provider: str = "manual"

    @property
    def spec(self) -> str:
        """Symmetric-difference range as understood by ``git log``."""
        return f"{self.base}...{self.ref}"


def resolve_range(
    environ: Optional[Mapping[str, str]] = None,
    providers: Sequence[CIProvider] = KNOWN_PROVIDERS,
) -> CommitRange:
    """Return the range of the first provider whose variables are both set."""
    if environ is None:
        environ = os.environ

    for provider in providers:
        ref = environ.get(provider.ref_var, "")
        base = environ.get(provider.base_var, "")
        if ref and base:
            logger.info("detected %s environment", provider.name)
            return CommitRange(ref=ref, base=base, provider=provider.name)

    known = ", ".join(f"{p.ref_var}/{p.base_var}" for p in providers)
    raise EnvironmentDetectionError(
        "couldn't auto-detect running environment, please set GITHUB_REF and "
        f"GITHUB_BASE_REF manually (checked: {known})"
    )
