"""Flattening, grouping, and counting of change lists.

None of these mutate their inputs: flattened nested changes are copies
with an extra ``is-nested-change`` tag.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import replace

from apidiff.diff.models import TAG_IS_NESTED_CHANGE, ApiChange, ChangeDescriptor


def flatten_changes(changes: Iterable[ApiChange]) -> list[ApiChange]:
    """Pre-order flatten of a change forest.

    Top-level entries are returned as-is; every descendant is a copy whose
    descriptor also carries ``is-nested-change``.
    """
    result: list[ApiChange] = []

    def visit(change: ApiChange, nested: bool) -> None:
        if nested:
            result.append(replace(change, descriptor=change.descriptor.with_tags(TAG_IS_NESTED_CHANGE)))
        else:
            result.append(change)
        for child in change.nested_changes:
            visit(child, True)

    for change in changes:
        visit(change, False)
    return result


def descriptor_key(descriptor: ChangeDescriptor) -> str:
    """``target:action`` or ``target:action:aspect``."""
    return descriptor.key


def group_changes_by_descriptor(changes: Iterable[ApiChange]) -> dict[str, list[ApiChange]]:
    """Bucket changes by descriptor key, keeping first-seen key order."""
    groups: dict[str, list[ApiChange]] = {}
    for change in changes:
        groups.setdefault(descriptor_key(change.descriptor), []).append(change)
    return groups


def count_changes(changes: Iterable[ApiChange]) -> int:
    """Total number of changes, nested ones included."""
    return sum(1 + count_changes(c.nested_changes) for c in changes)
