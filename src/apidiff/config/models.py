"""Pydantic configuration models with env var support.

Configuration Hierarchy (highest to lowest precedence):
1. Direct kwargs to load_config()
2. Environment variables (APIDIFF__SECTION__KEY)
3. Repo YAML (.apidiff/config.yaml)
4. Global YAML (~/.config/apidiff/config.yaml)
5. Built-in defaults (this file)

Environment Variable Format:
    APIDIFF__<SECTION>__<KEY>=<VALUE>

Examples:
    APIDIFF__LOGGING__LEVEL=DEBUG
    APIDIFF__DIFF__RENAME_THRESHOLD=0.6
    APIDIFF__DIFF__MAX_NESTING_DEPTH=4
    APIDIFF__POLICY__NAME=semver-read-only
"""

from pathlib import Path
from typing import TYPE_CHECKING, Literal

from pydantic import BaseModel, Field, field_validator

from apidiff.diff.engine import DiffOptions

if TYPE_CHECKING:
    from apidiff.policy.models import Policy

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class LogOutputConfig(BaseModel):
    """Single logging output configuration.

    Env vars: Not directly configurable via env (use YAML for multi-output).
    """

    format: Literal["json", "console"] = "console"
    destination: str = "stderr"  # stderr, stdout, or absolute file path
    level: LogLevel | None = None  # Inherits from parent if None

    @field_validator("destination")
    @classmethod
    def validate_destination(cls, v: str) -> str:
        if v in ("stderr", "stdout"):
            return v
        path = Path(v).expanduser()
        if not path.is_absolute():
            raise ValueError(f"File destination must be absolute path: {v}")
        return str(path)


class LoggingConfig(BaseModel):
    """Logging configuration.

    Env vars:
        APIDIFF__LOGGING__LEVEL: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
    """

    level: LogLevel = Field(
        default="WARNING",
        description="Root log level. The diff engine only emits DEBUG events.",
    )
    outputs: list[LogOutputConfig] = Field(default_factory=lambda: [LogOutputConfig()])


class DiffConfig(DiffOptions):
    """Tree differ configuration. Fields and bounds come from DiffOptions.

    Env vars:
        APIDIFF__DIFF__RENAME_THRESHOLD: Minimum rename confidence (0-1)
        APIDIFF__DIFF__INCLUDE_NESTED_CHANGES: Recurse into members
        APIDIFF__DIFF__MAX_NESTING_DEPTH: Recursion budget below top-level exports
        APIDIFF__DIFF__DETECT_PARAMETER_REORDERING: Report reordered parameters
        APIDIFF__DIFF__RESOLVE_TYPE_RELATIONSHIPS: Consult the injected type relation
    """

    def to_options(self) -> DiffOptions:
        return DiffOptions.model_validate(self.model_dump())


class PolicyConfig(BaseModel):
    """Release policy selection.

    Env vars:
        APIDIFF__POLICY__NAME: Built-in policy name
        APIDIFF__POLICY__PATH: Absolute path to a YAML policy (wins over name)
    """

    name: str = Field(
        default="semver-default",
        description="Built-in policy: semver-default, semver-read-only, semver-write-only.",
    )
    path: str | None = Field(
        default=None,
        description="YAML policy file. Takes precedence over name when set.",
    )

    def resolve(self) -> "Policy":
        from apidiff.policy.builtin import get_builtin_policy
        from apidiff.policy.loader import load_policy

        if self.path:
            return load_policy(Path(self.path).expanduser())
        return get_builtin_policy(self.name)


class ApiDiffConfig(BaseModel):
    """Root configuration for apidiff.

    All settings can be configured via:
    1. Environment variables: APIDIFF__SECTION__KEY
    2. YAML config files (repo or global)
    3. Direct kwargs to load_config()
    """

    logging: LoggingConfig = Field(default_factory=LoggingConfig)
    diff: DiffConfig = Field(default_factory=DiffConfig)
    policy: PolicyConfig = Field(default_factory=PolicyConfig)
