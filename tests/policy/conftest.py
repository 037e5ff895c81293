"""Shared fixtures for policy tests."""

from __future__ import annotations

from collections.abc import Callable, Iterable

import pytest

from apidiff.diff.models import (
    ApiChange,
    ChangeAction,
    ChangeAspect,
    ChangeContext,
    ChangeDescriptor,
    ChangeImpact,
    ChangeTarget,
    NodeKind,
)

ChangeFactory = Callable[..., ApiChange]


def make_change(
    target: ChangeTarget | str = ChangeTarget.EXPORT,
    action: ChangeAction | str = ChangeAction.MODIFIED,
    aspect: ChangeAspect | str | None = None,
    impact: ChangeImpact | str | None = None,
    *,
    tags: Iterable[str] = (),
    kind: NodeKind | str = NodeKind.FUNCTION,
    path: str = "thing",
    nested: bool = False,
) -> ApiChange:
    """Build a bare ApiChange around a descriptor."""
    action = ChangeAction(action)
    if action == ChangeAction.MODIFIED:
        aspect = ChangeAspect(aspect or ChangeAspect.TYPE)
        impact = ChangeImpact(impact or ChangeImpact.UNDETERMINED)
    descriptor = ChangeDescriptor(
        target=ChangeTarget(target),
        action=action,
        aspect=ChangeAspect(aspect) if aspect is not None else None,
        impact=ChangeImpact(impact) if impact is not None else None,
        tags=frozenset(tags),
    )
    context = ChangeContext(is_nested=True, depth=1, ancestors=("Parent",)) if nested else ChangeContext()
    return ApiChange(
        descriptor=descriptor,
        path=path,
        node_kind=NodeKind(kind),
        explanation="test change",
        context=context,
    )


@pytest.fixture
def change() -> ChangeFactory:
    """Factory: change(target, action, aspect, impact, tags=..., kind=..., nested=...)."""
    return make_change
