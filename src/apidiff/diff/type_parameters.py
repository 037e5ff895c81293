"""Generic type parameter change detection."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

from apidiff.diff.models import (
    TAG_AFFECTS_TYPE_PARAMETER,
    ChangeAction,
    ChangeAspect,
    ChangeImpact,
    ChangeTarget,
    DeclarationNode,
    DescriptorBuilder,
)

TypeParameterChangeKind = Literal["removed", "added", "constraint-changed", "default-changed"]


@dataclass(frozen=True, slots=True)
class TypeParameterChange:
    kind: TypeParameterChangeKind
    name: str
    old_value: str | None = None
    new_value: str | None = None


def detect_type_parameter_changes(
    old_node: DeclarationNode,
    new_node: DeclarationNode,
) -> list[TypeParameterChange]:
    """List type parameter differences: removals, additions, then per-name
    constraint and default changes in old declaration order."""
    old_params = old_node.type_info.type_parameters
    new_params = new_node.type_info.type_parameters
    old_by_name = {tp.name: tp for tp in old_params}
    new_by_name = {tp.name: tp for tp in new_params}

    changes = [TypeParameterChange("removed", tp.name) for tp in old_params if tp.name not in new_by_name]
    changes.extend(TypeParameterChange("added", tp.name) for tp in new_params if tp.name not in old_by_name)

    for old_tp in old_params:
        new_tp = new_by_name.get(old_tp.name)
        if new_tp is None:
            continue
        if old_tp.constraint != new_tp.constraint:
            changes.append(
                TypeParameterChange("constraint-changed", old_tp.name, old_tp.constraint, new_tp.constraint)
            )
        if old_tp.default != new_tp.default:
            changes.append(TypeParameterChange("default-changed", old_tp.name, old_tp.default, new_tp.default))

    return changes


def _three_way(old_value: str | None, new_value: str | None, *, added: ChangeImpact) -> ChangeImpact:
    """Impact when a value appears, disappears, or is replaced."""
    if not old_value:
        return added
    if not new_value:
        return ChangeImpact.WIDENING if added == ChangeImpact.NARROWING else ChangeImpact.NARROWING
    return ChangeImpact.UNDETERMINED


def classify_type_parameter_change(
    old_node: DeclarationNode,
    new_node: DeclarationNode,
) -> tuple[DescriptorBuilder, str] | None:
    """Classify the first type parameter difference, if any."""
    changes = detect_type_parameter_changes(old_node, new_node)
    if not changes:
        return None

    change = changes[0]
    tags = (TAG_AFFECTS_TYPE_PARAMETER,)
    where = old_node.path

    if change.kind == "added":
        return (
            DescriptorBuilder.simple(ChangeTarget.TYPE_PARAMETER, ChangeAction.ADDED, tags),
            f"Added type parameter '{change.name}' to '{where}'",
        )
    if change.kind == "removed":
        return (
            DescriptorBuilder.simple(ChangeTarget.TYPE_PARAMETER, ChangeAction.REMOVED, tags),
            f"Removed type parameter '{change.name}' from '{where}'",
        )

    old_value, new_value = change.old_value, change.new_value
    if change.kind == "constraint-changed":
        # a new constraint restricts callers; dropping one frees them
        impact = _three_way(old_value, new_value, added=ChangeImpact.NARROWING)
        if old_value and new_value:
            explanation = (
                f"Changed constraint on type parameter '{change.name}' in '{where}' "
                f"from '{old_value}' to '{new_value}'"
            )
        elif new_value:
            explanation = f"Added constraint '{new_value}' to type parameter '{change.name}' in '{where}'"
        else:
            explanation = f"Removed constraint from type parameter '{change.name}' in '{where}' (was '{old_value}')"
        return (
            DescriptorBuilder.modified(ChangeTarget.TYPE_PARAMETER, ChangeAspect.CONSTRAINT, impact, tags),
            explanation,
        )

    # a default makes the type argument optional
    impact = _three_way(old_value, new_value, added=ChangeImpact.WIDENING)
    if old_value and new_value:
        explanation = (
            f"Changed default type of type parameter '{change.name}' in '{where}' "
            f"from '{old_value}' to '{new_value}'"
        )
    elif new_value:
        explanation = f"Added default type '{new_value}' to type parameter '{change.name}' in '{where}'"
    else:
        explanation = f"Removed default type from type parameter '{change.name}' in '{where}' (was '{old_value}')"
    return (
        DescriptorBuilder.modified(ChangeTarget.TYPE_PARAMETER, ChangeAspect.DEFAULT_TYPE, impact, tags),
        explanation,
    )
