"""Release policies: rule matching, built-in semver policies, YAML loading.

Public API re-exports for the policy subpackage.
"""

from apidiff.policy.builtin import (
    BUILTIN_POLICIES,
    SEMVER_DEFAULT_POLICY,
    SEMVER_READ_ONLY_POLICY,
    SEMVER_WRITE_ONLY_POLICY,
    get_builtin_policy,
)
from apidiff.policy.engine import (
    ReleaseDecision,
    classify_change,
    classify_changes,
    determine_overall_release,
    evaluate,
)
from apidiff.policy.loader import PolicySpec, RuleSpec, load_policy, policy_from_mapping
from apidiff.policy.models import ClassifiedChange, MatchedRule, Policy, PolicyRule, ReleaseType
from apidiff.policy.rules import ChangeMatcher, PolicyBuilder, RuleBuilder, create_policy, rule

__all__ = [
    "BUILTIN_POLICIES",
    "SEMVER_DEFAULT_POLICY",
    "SEMVER_READ_ONLY_POLICY",
    "SEMVER_WRITE_ONLY_POLICY",
    "ChangeMatcher",
    "ClassifiedChange",
    "MatchedRule",
    "Policy",
    "PolicyBuilder",
    "PolicyRule",
    "PolicySpec",
    "ReleaseDecision",
    "ReleaseType",
    "RuleBuilder",
    "RuleSpec",
    "classify_change",
    "classify_changes",
    "create_policy",
    "determine_overall_release",
    "evaluate",
    "get_builtin_policy",
    "load_policy",
    "policy_from_mapping",
    "rule",
]
