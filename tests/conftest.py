from typing import Any

"""
Pytest configuration and shared fixtures.
"""

import pytest

from checkcommit.core.config import CommitPolicy

CI_VARIABLES = (
    "GITHUB_REF",
    "GITHUB_BASE_REF",
    "CI_MERGE_REQUEST_SOURCE_BRANCH_NAME",
    "CI_MERGE_REQUEST_TARGET_BRANCH_NAME",
)

LAYERED_POLICY_YAML = """
HelpText: "Use SEVERITY: AREA: text"
PatchScopes:
  Severity:
    - MINOR
    - MAJOR
PatchTypes:
  Patch:
    Values: [BUG, FIX]
    Scope: Severity
  Area:
    Values: [NET, CORE]
TagOrder:
  - PatchTypes: [Patch]
  - PatchTypes: [Area]
    Optional: true
"""


@pytest.fixture
def default_policy() -> CommitPolicy:
    """Built-in HAProxy taxonomy."""
    return CommitPolicy.default()


@pytest.fixture
def empty_policy() -> CommitPolicy:
    """Policy that verifies nothing."""
    return CommitPolicy()


@pytest.fixture
def layered_policy() -> CommitPolicy:
    """Two groups: a mandatory patch tag followed by an optional area tag."""
    return CommitPolicy.from_yaml_text(LAYERED_POLICY_YAML)


@pytest.fixture
def clean_ci_env(monkeypatch: Any) -> Any:
    """Remove every CI variable the range resolver looks at."""
    for name in CI_VARIABLES:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch
