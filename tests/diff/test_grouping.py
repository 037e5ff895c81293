"""Tests for change flattening and grouping (grouping.py)."""

from __future__ import annotations

from collections.abc import Callable

import pytest

from apidiff.diff.engine import diff_trees
from apidiff.diff.grouping import count_changes, descriptor_key, flatten_changes, group_changes_by_descriptor
from apidiff.diff.models import (
    TAG_IS_NESTED_CHANGE,
    ApiChange,
    ChangeAction,
    ChangeAspect,
    ChangeDescriptor,
    ChangeImpact,
    ChangeTarget,
    DeclarationNode,
)

NodeFactory = Callable[..., DeclarationNode]
TreeFactory = Callable[..., dict[str, DeclarationNode]]


@pytest.fixture
def nested_changes(node: NodeFactory, tree: TreeFactory) -> list[ApiChange]:
    """Widget gains/loses members; Helper is added at the top level."""
    old = tree(
        node(
            "Widget",
            "interface",
            "Widget",
            children=[node("id", "property", "number"), node("name", "property", "string")],
        )
    )
    new = tree(
        node(
            "Widget",
            "interface",
            "Widget",
            children=[node("id", "property", "string"), node("label", "property", "string")],
        ),
        node("Helper", "class", "Helper"),
    )
    return diff_trees(old, new)


class TestFlattenChanges:
    def test_pre_order(self, nested_changes: list[ApiChange]) -> None:
        flat = flatten_changes(nested_changes)

        assert [c.path for c in flat] == ["Helper", "Widget", "Widget.name", "Widget.label", "Widget.id"]

    def test_only_descendants_are_tagged(self, nested_changes: list[ApiChange]) -> None:
        flat = flatten_changes(nested_changes)

        assert [c.descriptor.has_tag(TAG_IS_NESTED_CHANGE) for c in flat] == [False, False, True, True, True]

    def test_input_is_not_mutated(self, nested_changes: list[ApiChange]) -> None:
        before = [c.descriptor for c in nested_changes[1].nested_changes]

        flatten_changes(nested_changes)

        assert [c.descriptor for c in nested_changes[1].nested_changes] == before
        assert not any(c.descriptor.has_tag(TAG_IS_NESTED_CHANGE) for c in nested_changes[1].nested_changes)

    def test_length_matches_count(self, nested_changes: list[ApiChange]) -> None:
        assert len(flatten_changes(nested_changes)) == count_changes(nested_changes) == 5

    def test_empty(self) -> None:
        assert flatten_changes([]) == []
        assert count_changes([]) == 0


class TestGrouping:
    @pytest.mark.parametrize(
        ("descriptor", "expected"),
        [
            (ChangeDescriptor(ChangeTarget.EXPORT, ChangeAction.ADDED), "export:added"),
            (
                ChangeDescriptor(
                    ChangeTarget.PROPERTY, ChangeAction.MODIFIED, ChangeAspect.TYPE, ChangeImpact.UNDETERMINED
                ),
                "property:modified:type",
            ),
        ],
    )
    def test_descriptor_key(self, descriptor: ChangeDescriptor, expected: str) -> None:
        assert descriptor_key(descriptor) == expected

    def test_groups_partition_input(self, nested_changes: list[ApiChange]) -> None:
        flat = flatten_changes(nested_changes)

        groups = group_changes_by_descriptor(flat)

        assert list(groups) == [
            "export:added",
            "export:modified:type",
            "property:removed",
            "property:added",
            "property:modified:type",
        ]
        assert sum(len(v) for v in groups.values()) == len(flat)
        for key, members in groups.items():
            assert all(descriptor_key(c.descriptor) == key for c in members)
