"""Configuration management using Pydantic models and settings."""

import logging
import re
from pathlib import Path
from typing import Dict, List, Optional, Union

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from checkcommit.core.errors import ConfigurationError

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_FILE = ".check-commit.yml"

LOG_LEVELS = ("TRACE", "DEBUG", "INFO", "SUCCESS", "WARNING", "ERROR", "CRITICAL")

GUIDELINES_LINK = (
    "Please refer to https://github.com/haproxy/haproxy/blob/master/CONTRIBUTING#L632"
)

DEFAULT_POLICY_YAML = f"""
---
HelpText: "{GUIDELINES_LINK}"
PatchScopes:
  HAProxy Standard Scope:
    - MINOR
    - MEDIUM
    - MAJOR
    - CRITICAL
PatchTypes:
  HAProxy Standard Patch:
    Values:
      - BUG
      - BUILD
      - CLEANUP
      - DOC
      - LICENSE
      - OPTIM
      - RELEASE
      - REORG
      - TEST
      - REVERT
    Scope: HAProxy Standard Scope
  HAProxy Standard Feature Commit:
    Values:
      - MINOR
      - MEDIUM
      - MAJOR
      - CRITICAL
TagOrder:
  - PatchTypes:
    - HAProxy Standard Patch
    - HAProxy Standard Feature Commit
"""


class PolicyLoader(yaml.SafeLoader):
    """SafeLoader that keeps YES, NO, ON and OFF as strings.

    Tag and scope values are uppercase words, so only true and false resolve
    to booleans.
    """


PolicyLoader.yaml_implicit_resolvers = {
    first: [(tag, rx) for tag, rx in resolvers if tag != "tag:yaml.org,2002:bool"]
    for first, resolvers in yaml.SafeLoader.yaml_implicit_resolvers.items()
}
PolicyLoader.add_implicit_resolver(
    "tag:yaml.org,2002:bool",
    re.compile(r"^(?:true|True|false|False)$"),
    list("tTfF"),
)


class PatchType(BaseModel):
    """Allowed tag values, optionally bound to a named scope.

    An empty ``scope`` means the patch type carries no scope definition.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    values: List[str] = Field(default_factory=list, alias="Values")
    scope: str = Field(default="", alias="Scope")


class TagAlternatives(BaseModel):
    """One position in the required tag sequence."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    patch_types: List[str] = Field(default_factory=list, alias="PatchTypes")
    optional: bool = Field(default=False, alias="Optional")


class CommitPolicy(BaseModel):
    """Scopes, patch types and the ordered tag groups a subject must carry."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    patch_scopes: Dict[str, List[str]] = Field(
        default_factory=dict, alias="PatchScopes"
    )
    patch_types: Dict[str, PatchType] = Field(default_factory=dict, alias="PatchTypes")
    tag_order: List[TagAlternatives] = Field(default_factory=list, alias="TagOrder")
    help_text: str = Field(default="", alias="HelpText")

    @classmethod
    def from_yaml_text(cls, text: str) -> "CommitPolicy":
        """Parse a policy document. An empty document yields the empty policy."""
        try:
            # PolicyLoader derives from SafeLoader
            data = yaml.load(text, Loader=PolicyLoader)  # nosec B506
        except yaml.YAMLError as e:
            raise ConfigurationError(f"error reading configuration: {e}") from e

        if data is None:
            data = {}
        if not isinstance(data, dict):
            raise ConfigurationError(
                "error reading configuration: top-level document must be a mapping, "
                f"got {type(data).__name__}"
            )

        try:
            return cls.model_validate(data)
        except ValidationError as e:
            raise ConfigurationError(f"error reading configuration: {e}") from e

    @classmethod
    def default(cls) -> "CommitPolicy":
        """Built-in HAProxy taxonomy."""
        return cls.from_yaml_text(DEFAULT_POLICY_YAML)

    @property
    def is_empty(self) -> bool:
        """True when nothing would be verified."""
        return not (self.patch_scopes or self.patch_types or self.tag_order)

    def scope_values(self, name: str) -> List[str]:
        return self.patch_scopes.get(name, [])

    def patch_type(self, name: str) -> Optional[PatchType]:
        return self.patch_types.get(name)

    def consistency_problems(self) -> List[str]:
        """List references to scopes or patch types that are not defined."""
        problems = []
        for name, patch_type in self.patch_types.items():
            if patch_type.scope and patch_type.scope not in self.patch_scopes:
                problems.append(
                    f"patch type '{name}' refers to undefined scope "
                    f"'{patch_type.scope}'"
                )
        for position, group in enumerate(self.tag_order, start=1):
            if not group.patch_types:
                problems.append(f"tag group {position} lists no patch types")
            for name in group.patch_types:
                if name not in self.patch_types:
                    problems.append(
                        f"tag group {position} refers to undefined patch type '{name}'"
                    )
        return problems


def load_policy(
    path: Union[str, Path, None] = DEFAULT_CONFIG_FILE, required: bool = False
) -> CommitPolicy:
    """Load the policy from ``path``, falling back to the built-in default.

    With ``required`` a missing file is an error instead.
    """
    config_file = Path(path) if path else None
    if required and (config_file is None or not config_file.exists()):
        raise ConfigurationError(f"configuration file not found: {path}")
    if config_file is None or not config_file.exists():
        logger.info(
            "no config found, using built-in fallback configuration (HAProxy defaults)"
        )
        policy = CommitPolicy.default()
    else:
        try:
            text = config_file.read_text(encoding="utf-8")
        except OSError as e:
            raise ConfigurationError(
                f"error reading configuration {config_file}: {e}"
            ) from e
        policy = CommitPolicy.from_yaml_text(text)
        logger.debug("loaded configuration from %s", config_file)

    if policy.is_empty:
        logger.warning("WARNING: using empty configuration (i.e. no verification)")
    for problem in policy.consistency_problems():
        logger.warning("configuration inconsistency: %s", problem)
    return policy


class Settings(BaseSettings):
    """Runtime settings, overridable through CHECKCOMMIT_* variables."""

    config_file: str = DEFAULT_CONFIG_FILE
    log_level: str = "INFO"
    log_file: str = ""
    git_executable: str = "git"

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        env_prefix="CHECKCOMMIT_",
        extra="ignore",
    )

    @field_validator("log_level")
    @classmethod
    def _known_level(cls, value: str) -> str:
        level = value.upper()
        if level not in LOG_LEVELS:
            raise ValueError(f"log_level must be one of {', '.join(LOG_LEVELS)}")
        return level
