"""Policy evaluation: per-change verdicts and release aggregation."""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from typing import Any

import structlog

from apidiff.diff.engine import DiffOptions, diff_trees
from apidiff.diff.grouping import flatten_changes
from apidiff.diff.impact import TypeRelation
from apidiff.diff.models import ApiChange, DeclarationNode
from apidiff.policy.models import ClassifiedChange, MatchedRule, Policy, ReleaseType

log = structlog.get_logger(__name__)


def classify_change(change: ApiChange, policy: Policy) -> ClassifiedChange:
    """Return the verdict of the first matching rule, else the policy default."""
    for policy_rule in policy.rules:
        if policy_rule.matches(change):
            log.debug(
                "rule_matched",
                policy=policy.name,
                rule=policy_rule.name,
                path=change.path,
                release_type=policy_rule.release_type.value,
            )
            return ClassifiedChange(
                change=change,
                release_type=policy_rule.release_type,
                matched_rule=MatchedRule(policy_rule.name, policy_rule.rationale),
            )
    return ClassifiedChange(change=change, release_type=policy.default_release_type)


def classify_changes(changes: Iterable[ApiChange], policy: Policy) -> list[ClassifiedChange]:
    return [classify_change(change, policy) for change in changes]


def determine_overall_release(results: Iterable[ClassifiedChange | ReleaseType]) -> ReleaseType:
    """Highest severity among verdicts; ``none`` for empty input."""
    highest = ReleaseType.NONE
    count = 0
    for result in results:
        count += 1
        release = result.release_type if isinstance(result, ClassifiedChange) else result
        if release.rank > highest.rank:
            highest = release
    log.debug("overall_release_determined", release_type=highest.value, verdicts=count)
    return highest


@dataclass(frozen=True, slots=True)
class ReleaseDecision:
    release_type: ReleaseType
    changes: list[ApiChange] = field(default_factory=list)
    classified: list[ClassifiedChange] = field(default_factory=list)

    @property
    def is_breaking(self) -> bool:
        return self.release_type.rank >= ReleaseType.MAJOR.rank


def evaluate(
    old_tree: Mapping[str, DeclarationNode],
    new_tree: Mapping[str, DeclarationNode],
    policy: Policy,
    options: DiffOptions | Mapping[str, Any] | None = None,
    *,
    type_relation: TypeRelation | None = None,
) -> ReleaseDecision:
    """Diff two snapshots, classify every change, and aggregate.

    Nested member changes are flattened before classification so rules such
    as member removal see them; ``changes`` keeps the nested tree.
    """
    changes = diff_trees(old_tree, new_tree, options, type_relation=type_relation)
    classified = classify_changes(flatten_changes(changes), policy)
    return ReleaseDecision(
        release_type=determine_overall_release(classified),
        changes=changes,
        classified=classified,
    )
