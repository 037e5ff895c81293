"""Policy data models: release types, rules, verdicts."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

from apidiff.diff.models import ApiChange


class ReleaseType(str, Enum):
    """Release severity, highest wins when aggregating."""

    FORBIDDEN = "forbidden"
    MAJOR = "major"
    MINOR = "minor"
    PATCH = "patch"
    NONE = "none"

    @property
    def rank(self) -> int:
        return _RANKS[self]


_RANKS: dict[ReleaseType, int] = {
    ReleaseType.FORBIDDEN: 5,
    ReleaseType.MAJOR: 4,
    ReleaseType.MINOR: 3,
    ReleaseType.PATCH: 2,
    ReleaseType.NONE: 1,
}

ChangeMatcherFn = Callable[[ApiChange], bool]


@dataclass(frozen=True, slots=True)
class PolicyRule:
    name: str
    matcher: ChangeMatcherFn
    release_type: ReleaseType
    rationale: str | None = None

    def matches(self, change: ApiChange) -> bool:
        return self.matcher(change)


@dataclass(frozen=True, slots=True)
class Policy:
    """Ordered rule list plus the verdict for changes no rule matches."""

    name: str
    rules: tuple[PolicyRule, ...] = ()
    default_release_type: ReleaseType = ReleaseType.MAJOR
    description: str | None = None

    def rule_names(self) -> list[str]:
        return [r.name for r in self.rules]


@dataclass(frozen=True, slots=True)
class MatchedRule:
    name: str
    rationale: str | None = None


@dataclass(frozen=True, slots=True)
class ClassifiedChange:
    """A change with its release verdict. ``matched_rule`` is None when the
    policy default applied."""

    change: ApiChange
    release_type: ReleaseType
    matched_rule: MatchedRule | None = None
