"""Structural diff engine over two API snapshots.

Compares two name-keyed trees of DeclarationNodes (old vs new) and emits
one ApiChange per observable difference. No I/O, purely functional.

Top-level emission order:
- renamed: a removed/added pair of the same kind scored above the rename
  threshold (see ``matching.detect_renames``)
- removed: exports only in the old tree
- added: exports only in the new tree
- modified: same-named exports that classify as a real change, or that
  carry nested member changes

Nested levels repeat removed / added / modified for members. Rename
detection only runs at the top level.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from pydantic.alias_generators import to_camel

from apidiff.core.errors import ConfigError
from apidiff.diff.classification import (
    Classification,
    addition_tags,
    classify_pair,
    node_kind_to_target,
    removal_tags,
)
from apidiff.diff.impact import TypeRelation
from apidiff.diff.matching import detect_renames, match_nodes
from apidiff.diff.models import (
    TAG_HAS_NESTED_CHANGES,
    ApiChange,
    ChangeAction,
    ChangeContext,
    ChangeTarget,
    DeclarationNode,
    DescriptorBuilder,
)

log = structlog.get_logger(__name__)


class DiffOptions(BaseModel):
    """Options for one diff run. Unrecognized fields are ignored."""

    model_config = ConfigDict(
        frozen=True,
        extra="ignore",
        alias_generator=to_camel,
        populate_by_name=True,
    )

    rename_threshold: float = Field(
        default=0.8,
        ge=0.0,
        le=1.0,
        description="Minimum confidence for a removed/added pair to be reported as a rename",
    )
    include_nested_changes: bool = Field(default=True, description="Diff members of matched declarations")
    max_nesting_depth: int = Field(default=10, ge=0, description="Member levels to descend before stopping")
    detect_parameter_reordering: bool = Field(default=True, description="Report swapped parameters as reordered")
    resolve_type_relationships: bool = Field(
        default=True,
        description="Use the injected TypeRelation, when one is given, for type impact",
    )

    @classmethod
    def coerce(cls, value: DiffOptions | Mapping[str, Any] | None) -> DiffOptions:
        """Accept an instance, a plain mapping (snake or camel case), or None."""
        if value is None:
            return cls()
        if isinstance(value, DiffOptions):
            return value
        try:
            return cls.model_validate(dict(value))
        except ValidationError as e:
            err = e.errors()[0]
            field = ".".join(str(p) for p in err["loc"]) or "options"
            raise ConfigError.invalid_value(field, err.get("input"), err["msg"]) from e


@dataclass(frozen=True, slots=True)
class _Run:
    """Per-run settings threaded through the recursion."""

    options: DiffOptions
    type_relation: TypeRelation | None

    def classify(self, old: DeclarationNode, new: DeclarationNode) -> Classification:
        return classify_pair(
            old,
            new,
            detect_parameter_reordering=self.options.detect_parameter_reordering,
            type_relation=self.type_relation,
        )


def diff_trees(
    old_tree: Mapping[str, DeclarationNode],
    new_tree: Mapping[str, DeclarationNode],
    options: DiffOptions | Mapping[str, Any] | None = None,
    *,
    type_relation: TypeRelation | None = None,
) -> list[ApiChange]:
    """Compute the API changes between two snapshots.

    Args:
        old_tree: export name -> node, old snapshot
        new_tree: export name -> node, new snapshot
        options: DiffOptions, a mapping of option fields, or None for defaults
        type_relation: optional semantic oracle for type impact; ignored
            when ``resolve_type_relationships`` is off

    Returns:
        Top-level changes in emission order, nested changes attached.
    """
    opts = DiffOptions.coerce(options)
    run = _Run(opts, type_relation if opts.resolve_type_relationships else None)
    log.debug(
        "diff_started",
        old_exports=len(old_tree),
        new_exports=len(new_tree),
        semantic=run.type_relation is not None,
    )

    match = match_nodes(old_tree, new_tree)
    renames = detect_renames(match.removed, match.added, opts.rename_threshold)
    renamed_old = {r.old_node.path for r in renames}
    renamed_new = {r.new_node.path for r in renames}

    changes: list[ApiChange] = []

    for candidate in renames:
        old_node, new_node = candidate.old_node, candidate.new_node
        nested = _diff_members(old_node, new_node, run, 0, ()) if opts.include_nested_changes else []
        descriptor = DescriptorBuilder.simple(ChangeTarget.EXPORT, ChangeAction.RENAMED)
        if nested:
            descriptor.add_tag(TAG_HAS_NESTED_CHANGES)
        changes.append(
            ApiChange(
                descriptor=descriptor.build(),
                path=old_node.path,
                node_kind=old_node.kind,
                explanation=f"'{old_node.name}' renamed to '{new_node.name}'",
                old_range=old_node.source_range,
                new_range=new_node.source_range,
                old_node=old_node,
                new_node=new_node,
                nested_changes=tuple(nested),
                context=ChangeContext(rename_confidence=candidate.confidence),
            )
        )

    for old_node in match.removed:
        if old_node.path in renamed_old:
            continue
        changes.append(
            ApiChange(
                descriptor=DescriptorBuilder.simple(ChangeTarget.EXPORT, ChangeAction.REMOVED).build(),
                path=old_node.path,
                node_kind=old_node.kind,
                explanation=f"Export '{old_node.name}' removed",
                old_range=old_node.source_range,
                old_node=old_node,
            )
        )

    for new_node in match.added:
        if new_node.path in renamed_new:
            continue
        changes.append(
            ApiChange(
                descriptor=DescriptorBuilder.simple(ChangeTarget.EXPORT, ChangeAction.ADDED).build(),
                path=new_node.path,
                node_kind=new_node.kind,
                explanation=f"Export '{new_node.name}' added",
                new_range=new_node.source_range,
                new_node=new_node,
            )
        )

    for old_node, new_node in match.matched:
        result = run.classify(old_node, new_node)
        nested = _diff_members(old_node, new_node, run, 0, ()) if opts.include_nested_changes else []
        if result.descriptor.is_equivalent and not nested:
            continue
        if nested:
            result.descriptor.add_tag(TAG_HAS_NESTED_CHANGES)
        changes.append(
            ApiChange(
                descriptor=result.descriptor.build(),
                path=old_node.path,
                node_kind=old_node.kind,
                explanation=result.explanation,
                old_range=old_node.source_range,
                new_range=new_node.source_range,
                old_node=old_node,
                new_node=new_node,
                nested_changes=tuple(nested),
                context=ChangeContext(old_type=old_node.signature, new_type=new_node.signature),
            )
        )

    log.debug(
        "diff_complete",
        changes=len(changes),
        renames=len(renames),
        removed=len(match.removed) - len(renamed_old),
        added=len(match.added) - len(renamed_new),
    )
    return changes


def diff_members(
    old_parent: DeclarationNode,
    new_parent: DeclarationNode,
    options: DiffOptions | Mapping[str, Any] | None = None,
    *,
    type_relation: TypeRelation | None = None,
) -> list[ApiChange]:
    """Diff the members of one matched declaration pair.

    Same rules as the nested part of :func:`diff_trees`, with the pair
    treated as a top-level export (emitted changes have depth 1).
    """
    opts = DiffOptions.coerce(options)
    run = _Run(opts, type_relation if opts.resolve_type_relationships else None)
    return _diff_members(old_parent, new_parent, run, 0, ())


def _diff_members(
    old_parent: DeclarationNode,
    new_parent: DeclarationNode,
    run: _Run,
    depth: int,
    ancestors: tuple[str, ...],
) -> list[ApiChange]:
    """Diff the children of a matched pair.

    ``depth`` is the depth of the parents (0 for exports); emitted changes
    sit one level deeper. Returns nothing once ``max_nesting_depth`` is
    reached.
    """
    if depth >= run.options.max_nesting_depth:
        if old_parent.children or new_parent.children:
            log.debug("nesting_depth_reached", path=old_parent.path, depth=depth)
        return []

    chain = (*ancestors, old_parent.path)
    child_context = ChangeContext(is_nested=True, depth=depth + 1, ancestors=chain)
    match = match_nodes(old_parent.children, new_parent.children)
    changes: list[ApiChange] = []

    for child in match.removed:
        target = node_kind_to_target(child.kind)
        descriptor = DescriptorBuilder.simple(target, ChangeAction.REMOVED, removal_tags(child))
        changes.append(
            ApiChange(
                descriptor=descriptor.build(),
                path=child.path,
                node_kind=child.kind,
                explanation=f"Member '{child.name}' removed from {old_parent.kind.value} '{old_parent.name}'",
                old_range=child.source_range,
                old_node=child,
                context=child_context,
            )
        )

    for child in match.added:
        target = node_kind_to_target(child.kind)
        descriptor = DescriptorBuilder.simple(target, ChangeAction.ADDED, addition_tags(child))
        changes.append(
            ApiChange(
                descriptor=descriptor.build(),
                path=child.path,
                node_kind=child.kind,
                explanation=f"Member '{child.name}' added to {new_parent.kind.value} '{new_parent.name}'",
                new_range=child.source_range,
                new_node=child,
                context=child_context,
            )
        )

    for old_child, new_child in match.matched:
        result = run.classify(old_child, new_child)
        nested: list[ApiChange] = []
        if old_child.children and run.options.include_nested_changes:
            nested = _diff_members(old_child, new_child, run, depth + 1, chain)
        if result.descriptor.is_equivalent and not nested:
            continue
        if nested:
            result.descriptor.add_tag(TAG_HAS_NESTED_CHANGES)
        changes.append(
            ApiChange(
                descriptor=result.descriptor.build(),
                path=old_child.path,
                node_kind=old_child.kind,
                explanation=result.explanation,
                old_range=old_child.source_range,
                new_range=new_child.source_range,
                old_node=old_child,
                new_node=new_child,
                nested_changes=tuple(nested),
                context=ChangeContext(
                    is_nested=True,
                    depth=depth + 1,
                    ancestors=chain,
                    old_type=old_child.signature,
                    new_type=new_child.signature,
                ),
            )
        )

    return changes
