"""Declarative policies: YAML -> validated spec -> Policy.

Example file::

    name: library-policy
    default_release_type: major
    extends: semver-default      # optional; built-in rules appended after ours
    rules:
      - name: internal-anything
        node_kind: [namespace]
        has_tag: is-internal
        release_type: patch
      - name: breaking-removal
        action: removed
        release_type: major
        rationale: Removing anything breaks someone

Dimension keys accept a scalar or a list. Custom predicates are not
expressible here; build those with :func:`apidiff.policy.rules.rule`.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path
from typing import Any

import structlog
import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

from apidiff.core.errors import PolicyError
from apidiff.diff.models import ChangeAction, ChangeAspect, ChangeImpact, ChangeTarget, NodeKind
from apidiff.policy.builtin import get_builtin_policy
from apidiff.policy.models import Policy, PolicyRule, ReleaseType
from apidiff.policy.rules import rule

log = structlog.get_logger(__name__)


class RuleSpec(BaseModel):
    """One rule as data."""

    model_config = ConfigDict(extra="forbid")

    name: str
    release_type: ReleaseType
    rationale: str | None = None
    target: list[ChangeTarget] = Field(default_factory=list)
    action: list[ChangeAction] = Field(default_factory=list)
    aspect: list[ChangeAspect] = Field(default_factory=list)
    impact: list[ChangeImpact] = Field(default_factory=list)
    node_kind: list[NodeKind] = Field(default_factory=list)
    has_tag: list[str] = Field(default_factory=list)
    has_any_tag: list[str] = Field(default_factory=list)
    not_tag: list[str] = Field(default_factory=list)
    nested: bool | None = None

    @field_validator(
        "target",
        "action",
        "aspect",
        "impact",
        "node_kind",
        "has_tag",
        "has_any_tag",
        "not_tag",
        mode="before",
    )
    @classmethod
    def _listify(cls, v: Any) -> Any:
        if v is None:
            return []
        if isinstance(v, str):
            return [v]
        return v

    def to_rule(self) -> PolicyRule:
        builder = (
            rule(self.name)
            .target(*self.target)
            .action(*self.action)
            .aspect(*self.aspect)
            .impact(*self.impact)
            .node_kind(*self.node_kind)
            .has_tag(*self.has_tag)
            .has_any_tag(*self.has_any_tag)
            .not_tag(*self.not_tag)
        )
        if self.nested is not None:
            builder.nested(self.nested)
        if self.rationale:
            builder.rationale(self.rationale)
        return builder.returns(self.release_type)


class PolicySpec(BaseModel):
    """A whole policy as data."""

    model_config = ConfigDict(extra="forbid")

    name: str
    description: str | None = None
    default_release_type: ReleaseType = ReleaseType.MAJOR
    extends: str | None = Field(default=None, description="Built-in policy whose rules follow ours")
    rules: list[RuleSpec] = Field(default_factory=list)

    def to_policy(self) -> Policy:
        rules = tuple(r.to_rule() for r in self.rules)
        default = self.default_release_type
        if self.extends:
            base = get_builtin_policy(self.extends)
            rules += base.rules
            if "default_release_type" not in self.model_fields_set:
                default = base.default_release_type
        return Policy(
            name=self.name,
            rules=rules,
            default_release_type=default,
            description=self.description,
        )


def policy_from_mapping(data: Mapping[str, Any], source: str = "<mapping>") -> Policy:
    """Validate a policy mapping and build the Policy.

    Raises:
        PolicyError: invalid rule (code 3002), unknown ``extends`` target
            (3003), or any other schema violation (3001).
    """
    try:
        spec = PolicySpec.model_validate(dict(data))
    except ValidationError as e:
        err = e.errors()[0]
        loc = err["loc"]
        if len(loc) >= 2 and loc[0] == "rules":
            index = loc[1]
            rules = data.get("rules") or []
            raw = rules[index] if isinstance(index, int) and index < len(rules) else None
            label = raw.get("name") if isinstance(raw, Mapping) and raw.get("name") else f"rules[{index}]"
            field = ".".join(str(p) for p in loc[2:]) or "rule"
            raise PolicyError.invalid_rule(str(label), f"{field}: {err['msg']}") from e
        field = ".".join(str(p) for p in loc) or "policy"
        raise PolicyError.parse_error(source, f"{field}: {err['msg']}") from e
    return spec.to_policy()


def load_policy(path: Path) -> Policy:
    """Load a policy from a YAML file.

    Raises:
        PolicyError: missing file, YAML syntax error, or invalid content.
    """
    if not path.exists():
        raise PolicyError.file_not_found(str(path))
    try:
        with path.open() as f:
            data = yaml.safe_load(f)
    except yaml.YAMLError as e:
        raise PolicyError.parse_error(str(path), str(e)) from e
    if not isinstance(data, dict):
        raise PolicyError.parse_error(str(path), "top-level value must be a mapping")

    policy = policy_from_mapping(data, source=str(path))
    log.debug("policy_loaded", path=str(path), name=policy.name, rules=len(policy.rules))
    return policy
