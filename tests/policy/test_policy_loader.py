"""Tests for declarative policy loading (policy/loader.py)."""

from __future__ import annotations

from collections.abc import Callable
from pathlib import Path

import pytest

from apidiff.core.errors import ErrorCode, PolicyError
from apidiff.diff.models import ApiChange
from apidiff.policy.builtin import SEMVER_DEFAULT_POLICY
from apidiff.policy.engine import classify_change
from apidiff.policy.loader import RuleSpec, load_policy, policy_from_mapping
from apidiff.policy.models import ReleaseType

ChangeFactory = Callable[..., ApiChange]

POLICY_YAML = """\
name: library-policy
description: House rules
default_release_type: minor
rules:
  - name: internal-anything
    node_kind: namespace
    release_type: patch
  - name: breaking-removal
    action: [removed]
    nested: false
    release_type: major
    rationale: Removing anything breaks someone
"""


class TestRuleSpec:
    def test_scalar_dimension_becomes_list(self) -> None:
        spec = RuleSpec.model_validate({"name": "r", "action": "added", "release_type": "minor"})
        assert [a.value for a in spec.action] == ["added"]

    def test_to_rule_matches(self, change: ChangeFactory) -> None:
        spec = RuleSpec.model_validate(
            {"name": "r", "target": "parameter", "has_tag": ["now-required"], "release_type": "major"}
        )
        built = spec.to_rule()

        assert built.matches(change("parameter", "added", tags=["now-required"]))
        assert not built.matches(change("parameter", "added", tags=["now-optional"]))


class TestPolicyFromMapping:
    def test_rules_and_default(self, change: ChangeFactory) -> None:
        policy = policy_from_mapping(
            {
                "name": "p",
                "default_release_type": "patch",
                "rules": [{"name": "removal", "action": "removed", "release_type": "major"}],
            }
        )

        assert policy.rule_names() == ["removal"]
        assert classify_change(change(action="removed"), policy).release_type == ReleaseType.MAJOR
        assert classify_change(change(action="added"), policy).release_type == ReleaseType.PATCH

    def test_extends_appends_builtin_rules(self) -> None:
        policy = policy_from_mapping(
            {
                "name": "house",
                "extends": "semver-default",
                "rules": [{"name": "never-rename", "action": "renamed", "release_type": "forbidden"}],
            }
        )

        assert policy.rule_names() == ["never-rename", *SEMVER_DEFAULT_POLICY.rule_names()]
        assert policy.default_release_type == SEMVER_DEFAULT_POLICY.default_release_type

    def test_explicit_default_overrides_extended(self) -> None:
        policy = policy_from_mapping({"name": "house", "extends": "semver-default", "default_release_type": "minor"})
        assert policy.default_release_type == ReleaseType.MINOR

    def test_unknown_extends(self) -> None:
        with pytest.raises(PolicyError) as exc_info:
            policy_from_mapping({"name": "house", "extends": "semver-lenient"})
        assert exc_info.value.code == ErrorCode.POLICY_UNKNOWN

    def test_invalid_rule_names_the_rule(self) -> None:
        with pytest.raises(PolicyError) as exc_info:
            policy_from_mapping(
                {"name": "p", "rules": [{"name": "bad-one", "action": "deleted", "release_type": "major"}]}
            )
        assert exc_info.value.code == ErrorCode.POLICY_INVALID_RULE
        assert exc_info.value.details["rule"] == "bad-one"
        assert exc_info.value.details["reason"].startswith("action")

    def test_unnamed_invalid_rule_uses_index(self) -> None:
        with pytest.raises(PolicyError) as exc_info:
            policy_from_mapping({"name": "p", "rules": [{"release_type": "major"}]})
        assert exc_info.value.details["rule"] == "rules[0]"

    def test_unknown_rule_key(self) -> None:
        with pytest.raises(PolicyError) as exc_info:
            policy_from_mapping({"name": "p", "rules": [{"name": "r", "colour": "red", "release_type": "major"}]})
        assert exc_info.value.code == ErrorCode.POLICY_INVALID_RULE

    def test_missing_name_is_parse_error(self) -> None:
        with pytest.raises(PolicyError) as exc_info:
            policy_from_mapping({"rules": []}, source="inline")
        assert exc_info.value.code == ErrorCode.POLICY_PARSE_ERROR
        assert exc_info.value.details["path"] == "inline"


class TestLoadPolicy:
    def test_load_yaml(self, tmp_path: Path, change: ChangeFactory) -> None:
        path = tmp_path / "policy.yaml"
        path.write_text(POLICY_YAML)

        policy = load_policy(path)

        assert policy.name == "library-policy"
        assert policy.description == "House rules"
        assert policy.rule_names() == ["internal-anything", "breaking-removal"]
        assert policy.rules[1].rationale == "Removing anything breaks someone"
        assert classify_change(change(action="removed", kind="namespace"), policy).release_type == ReleaseType.PATCH
        assert classify_change(change(action="removed"), policy).release_type == ReleaseType.MAJOR
        assert classify_change(change(action="removed", nested=True), policy).release_type == ReleaseType.MINOR

    def test_missing_file(self, tmp_path: Path) -> None:
        with pytest.raises(PolicyError) as exc_info:
            load_policy(tmp_path / "absent.yaml")
        assert exc_info.value.code == ErrorCode.POLICY_FILE_NOT_FOUND

    def test_invalid_yaml(self, tmp_path: Path) -> None:
        path = tmp_path / "policy.yaml"
        path.write_text("name: [unclosed\n")

        with pytest.raises(PolicyError) as exc_info:
            load_policy(path)
        assert exc_info.value.code == ErrorCode.POLICY_PARSE_ERROR

    def test_non_mapping_document(self, tmp_path: Path) -> None:
        path = tmp_path / "policy.yaml"
        path.write_text("- just\n- a list\n")

        with pytest.raises(PolicyError) as exc_info:
            load_policy(path)
        assert exc_info.value.code == ErrorCode.POLICY_PARSE_ERROR
