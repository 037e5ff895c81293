"""Rule matching and the fluent rule / policy builders.

A matcher is a conjunction of independent per-dimension tests. Within a
dimension the accepted values are OR-ed, except ``has_tag`` (all listed
tags required) and ``not_tag`` (none may be present). An empty dimension
places no constraint.

    policy = (
        create_policy("my-policy", "major")
        .add_rule(rule("removal").action("removed").returns("major"))
        .add_rule(rule("addition").action("added").returns("minor"))
        .add_rule(rule("widening").aspect("type").impact("widening").returns("minor"))
        .build()
    )
"""

from __future__ import annotations

from collections.abc import Callable, Iterable
from dataclasses import dataclass
from enum import Enum
from typing import TypeVar

from apidiff.core.errors import PolicyError
from apidiff.diff.models import ApiChange, ChangeAction, ChangeAspect, ChangeImpact, ChangeTarget, NodeKind
from apidiff.policy.models import ChangeMatcherFn, Policy, PolicyRule, ReleaseType

_E = TypeVar("_E", bound=Enum)


@dataclass(frozen=True, slots=True)
class ChangeMatcher:
    """Composite predicate over an ApiChange's descriptor, context and kind."""

    targets: tuple[ChangeTarget, ...] = ()
    actions: tuple[ChangeAction, ...] = ()
    aspects: tuple[ChangeAspect, ...] = ()
    impacts: tuple[ChangeImpact, ...] = ()
    node_kinds: tuple[NodeKind, ...] = ()
    has_tags: tuple[str, ...] = ()
    has_any_tags: tuple[str, ...] = ()
    not_tags: tuple[str, ...] = ()
    nested: bool | None = None
    predicates: tuple[ChangeMatcherFn, ...] = ()

    def __call__(self, change: ApiChange) -> bool:
        descriptor = change.descriptor
        if self.targets and descriptor.target not in self.targets:
            return False
        if self.actions and descriptor.action not in self.actions:
            return False
        # a missing aspect/impact never satisfies a constraint on it
        if self.aspects and (descriptor.aspect is None or descriptor.aspect not in self.aspects):
            return False
        if self.impacts and (descriptor.impact is None or descriptor.impact not in self.impacts):
            return False
        if self.node_kinds and change.node_kind not in self.node_kinds:
            return False
        if any(tag not in descriptor.tags for tag in self.has_tags):
            return False
        if self.has_any_tags and not any(tag in descriptor.tags for tag in self.has_any_tags):
            return False
        if any(tag in descriptor.tags for tag in self.not_tags):
            return False
        if self.nested is not None and change.context.is_nested != self.nested:
            return False
        return all(predicate(change) for predicate in self.predicates)


class RuleBuilder:
    """Fluent builder for one :class:`PolicyRule`.

    Every dimension method may be called repeatedly; values accumulate.
    Enum-valued dimensions accept members or their string values.
    """

    def __init__(self, name: str) -> None:
        self._name = name
        self._targets: list[ChangeTarget] = []
        self._actions: list[ChangeAction] = []
        self._aspects: list[ChangeAspect] = []
        self._impacts: list[ChangeImpact] = []
        self._node_kinds: list[NodeKind] = []
        self._has_tags: list[str] = []
        self._has_any_tags: list[str] = []
        self._not_tags: list[str] = []
        self._nested: bool | None = None
        self._predicates: list[ChangeMatcherFn] = []
        self._rationale: str | None = None

    def _coerce(self, enum_cls: type[_E], values: Iterable[_E | str]) -> list[_E]:
        try:
            return [enum_cls(v) for v in values]
        except ValueError as e:
            raise PolicyError.invalid_rule(self._name, str(e)) from e

    def target(self, *targets: ChangeTarget | str) -> RuleBuilder:
        self._targets.extend(self._coerce(ChangeTarget, targets))
        return self

    def action(self, *actions: ChangeAction | str) -> RuleBuilder:
        self._actions.extend(self._coerce(ChangeAction, actions))
        return self

    def aspect(self, *aspects: ChangeAspect | str) -> RuleBuilder:
        self._aspects.extend(self._coerce(ChangeAspect, aspects))
        return self

    def impact(self, *impacts: ChangeImpact | str) -> RuleBuilder:
        self._impacts.extend(self._coerce(ChangeImpact, impacts))
        return self

    def node_kind(self, *kinds: NodeKind | str) -> RuleBuilder:
        """Restrict to node kinds, e.g. function removals but not interface removals."""
        self._node_kinds.extend(self._coerce(NodeKind, kinds))
        return self

    def has_tag(self, *tags: str) -> RuleBuilder:
        """Require every listed tag."""
        self._has_tags.extend(tags)
        return self

    def has_any_tag(self, *tags: str) -> RuleBuilder:
        """Require at least one listed tag."""
        self._has_any_tags.extend(tags)
        return self

    def not_tag(self, *tags: str) -> RuleBuilder:
        """Reject changes carrying any listed tag."""
        self._not_tags.extend(tags)
        return self

    def nested(self, is_nested: bool = True) -> RuleBuilder:
        self._nested = is_nested
        return self

    def when(self, predicate: Callable[[ApiChange], bool]) -> RuleBuilder:
        """Add a custom predicate, AND-ed with everything else."""
        self._predicates.append(predicate)
        return self

    def rationale(self, text: str) -> RuleBuilder:
        self._rationale = text
        return self

    def matcher(self) -> ChangeMatcher:
        return ChangeMatcher(
            targets=tuple(self._targets),
            actions=tuple(self._actions),
            aspects=tuple(self._aspects),
            impacts=tuple(self._impacts),
            node_kinds=tuple(self._node_kinds),
            has_tags=tuple(self._has_tags),
            has_any_tags=tuple(self._has_any_tags),
            not_tags=tuple(self._not_tags),
            nested=self._nested,
            predicates=tuple(self._predicates),
        )

    def returns(self, release_type: ReleaseType | str) -> PolicyRule:
        """Finish the rule with the verdict it assigns."""
        (resolved,) = self._coerce(ReleaseType, [release_type])
        return PolicyRule(
            name=self._name,
            matcher=self.matcher(),
            release_type=resolved,
            rationale=self._rationale,
        )


def rule(name: str) -> RuleBuilder:
    return RuleBuilder(name)


class PolicyBuilder:
    """Fluent builder for a :class:`Policy`; rules keep insertion order."""

    def __init__(
        self,
        name: str,
        default_release_type: ReleaseType | str = ReleaseType.MAJOR,
        description: str | None = None,
    ) -> None:
        try:
            self._default = ReleaseType(default_release_type)
        except ValueError as e:
            raise PolicyError.invalid_rule(name, f"invalid default release type: {default_release_type!r}") from e
        self._name = name
        self._description = description
        self._rules: list[PolicyRule] = []

    def add_rule(self, policy_rule: PolicyRule) -> PolicyBuilder:
        self._rules.append(policy_rule)
        return self

    def add_rules(self, *policy_rules: PolicyRule) -> PolicyBuilder:
        self._rules.extend(policy_rules)
        return self

    def describe(self, description: str) -> PolicyBuilder:
        self._description = description
        return self

    def build(self) -> Policy:
        return Policy(
            name=self._name,
            rules=tuple(self._rules),
            default_release_type=self._default,
            description=self._description,
        )


def create_policy(
    name: str,
    default_release_type: ReleaseType | str = ReleaseType.MAJOR,
) -> PolicyBuilder:
    return PolicyBuilder(name, default_release_type)
