"""apidiff error types with typed error codes.

Error code ranges:
- 2xxx: Config
- 3xxx: Policy

The diff and policy engines never raise for well-formed snapshots; these
errors only surface at the configuration and policy-loading boundary.
"""

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any


class ErrorCode(IntEnum):
    """Typed error codes for programmatic handling."""

    # Config (2xxx)
    CONFIG_PARSE_ERROR = 2001
    CONFIG_INVALID_VALUE = 2002
    CONFIG_MISSING_REQUIRED = 2003
    CONFIG_FILE_NOT_FOUND = 2004

    # Policy (3xxx)
    POLICY_PARSE_ERROR = 3001
    POLICY_INVALID_RULE = 3002
    POLICY_UNKNOWN = 3003
    POLICY_FILE_NOT_FOUND = 3004


@dataclass(frozen=True, slots=True)
class ApiDiffError(Exception):
    """Base error with structured context."""

    code: ErrorCode
    message: str
    retryable: bool = False
    details: dict[str, Any] = field(default_factory=dict)

    @property
    def error_name(self) -> str:
        """String identifier for logging (e.g., 'CONFIG_PARSE_ERROR')."""
        return self.code.name

    def to_dict(self) -> dict[str, Any]:
        """Serialize for JSON reports."""
        return {
            "code": self.code.value,
            "error": self.error_name,
            "message": self.message,
            "retryable": self.retryable,
            "details": self.details,
        }

    def __str__(self) -> str:
        return f"[{self.code.value}] {self.error_name}: {self.message}"


class ConfigError(ApiDiffError):
    """Configuration-related errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_PARSE_ERROR,
            message=f"Failed to parse config at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_value(cls, field: str, value: Any, reason: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_INVALID_VALUE,
            message=f"Invalid value for '{field}': {reason}",
            details={"field": field, "value": str(value), "reason": reason},
        )

    @classmethod
    def missing_required(cls, field: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_MISSING_REQUIRED,
            message=f"Missing required config field: {field}",
            details={"field": field},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "ConfigError":
        return cls(
            code=ErrorCode.CONFIG_FILE_NOT_FOUND,
            message=f"Config file not found: {path}",
            details={"path": path},
        )


class PolicyError(ApiDiffError):
    """Policy definition and lookup errors."""

    @classmethod
    def parse_error(cls, path: str, reason: str) -> "PolicyError":
        return cls(
            code=ErrorCode.POLICY_PARSE_ERROR,
            message=f"Failed to parse policy at {path}: {reason}",
            details={"path": path, "reason": reason},
        )

    @classmethod
    def invalid_rule(cls, rule: str, reason: str) -> "PolicyError":
        return cls(
            code=ErrorCode.POLICY_INVALID_RULE,
            message=f"Invalid policy rule '{rule}': {reason}",
            details={"rule": rule, "reason": reason},
        )

    @classmethod
    def unknown_policy(cls, name: str, known: list[str]) -> "PolicyError":
        return cls(
            code=ErrorCode.POLICY_UNKNOWN,
            message=f"Unknown policy '{name}' (known: {', '.join(known)})",
            details={"name": name, "known": known},
        )

    @classmethod
    def file_not_found(cls, path: str) -> "PolicyError":
        return cls(
            code=ErrorCode.POLICY_FILE_NOT_FOUND,
            message=f"Policy file not found: {path}",
            details={"path": path},
        )

