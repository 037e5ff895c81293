"""Change classification for one matched (old, new) node pair.

Classification is a strict first-match cascade. Each entry of
:data:`CLASSIFICATION_CHECKS` inspects one dimension and either returns a
:class:`Classification` or ``None``; the first non-``None`` result wins and
later checks never run. When nothing fires, :func:`classify_pair` returns
the ``type`` / ``equivalent`` fallback that the tree differ uses to
suppress no-op pairs.

The order is fixed. When several modifiers change at once the earlier
check determines the reported aspect (readonly before optionality,
abstractness before staticness, and so on).
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass

from apidiff.diff.impact import TypeRelation, determine_type_impact
from apidiff.diff.models import (
    TAG_HAD_DEFAULT,
    TAG_HAS_DEFAULT,
    TAG_NOW_OPTIONAL,
    TAG_NOW_REQUIRED,
    TAG_WAS_OPTIONAL,
    TAG_WAS_REQUIRED,
    VISIBILITY_MODIFIERS,
    ChangeAction,
    ChangeAspect,
    ChangeImpact,
    ChangeTarget,
    DeclarationNode,
    DescriptorBuilder,
    Modifier,
    NodeKind,
    SignatureInfo,
)
from apidiff.diff.parameters import ParameterOrderAnalysis, analyze_parameter_order
from apidiff.diff.similarity import normalize_signature
from apidiff.diff.type_parameters import classify_type_parameter_change

# Kinds whose first call/construct signature is checked for reordering
FUNCTION_LIKE_KINDS = frozenset({NodeKind.FUNCTION, NodeKind.METHOD, NodeKind.CALL_SIGNATURE})

# Kinds whose additions/removals carry required/optional tags
_MEMBER_SLOT_KINDS = frozenset({NodeKind.PARAMETER, NodeKind.PROPERTY})

_KIND_TO_TARGET: dict[NodeKind, ChangeTarget] = {
    NodeKind.PROPERTY: ChangeTarget.PROPERTY,
    NodeKind.METHOD: ChangeTarget.METHOD,
    NodeKind.PARAMETER: ChangeTarget.PARAMETER,
    NodeKind.TYPE_PARAMETER: ChangeTarget.TYPE_PARAMETER,
    NodeKind.ENUM_MEMBER: ChangeTarget.ENUM_MEMBER,
    NodeKind.INDEX_SIGNATURE: ChangeTarget.INDEX_SIGNATURE,
    NodeKind.GETTER: ChangeTarget.ACCESSOR,
    NodeKind.SETTER: ChangeTarget.ACCESSOR,
    NodeKind.CONSTRUCT_SIGNATURE: ChangeTarget.CONSTRUCTOR,
}


def node_kind_to_target(kind: NodeKind) -> ChangeTarget:
    """Map a node kind to the API construct category it represents.

    Anything without a more specific category (functions, classes,
    interfaces, aliases, namespaces, variables, call signatures) is an
    ``export``.
    """
    return _KIND_TO_TARGET.get(kind, ChangeTarget.EXPORT)


@dataclass(slots=True)
class Classification:
    """Result of classifying one pair; the descriptor is still pending."""

    descriptor: DescriptorBuilder
    explanation: str
    parameter_analysis: ParameterOrderAnalysis | None = None


@dataclass(frozen=True, slots=True)
class CheckContext:
    detect_parameter_reordering: bool = True
    type_relation: TypeRelation | None = None


CheckFn = Callable[[DeclarationNode, DeclarationNode, CheckContext], Classification | None]


@dataclass(frozen=True, slots=True)
class ClassificationCheck:
    name: str
    check: CheckFn


def _modified(
    old: DeclarationNode,
    aspect: ChangeAspect,
    impact: ChangeImpact,
    explanation: str,
    tags: tuple[str, ...] = (),
) -> Classification:
    target = node_kind_to_target(old.kind)
    return Classification(DescriptorBuilder.modified(target, aspect, impact, tags), explanation)


# ============================================================================
# Checks, in cascade order
# ============================================================================


def _first_signature(node: DeclarationNode) -> SignatureInfo | None:
    info = node.type_info
    if info.call_signatures:
        return info.call_signatures[0]
    if info.construct_signatures:
        return info.construct_signatures[0]
    return None


def check_parameter_reordering(
    old: DeclarationNode, new: DeclarationNode, ctx: CheckContext
) -> Classification | None:
    # Runs even when the signature string is unchanged: a swap of two
    # same-typed parameters keeps the types but moves the names.
    if not ctx.detect_parameter_reordering or old.kind not in FUNCTION_LIKE_KINDS:
        return None
    old_sig = _first_signature(old)
    new_sig = _first_signature(new)
    if old_sig is None or new_sig is None:
        return None

    analysis = analyze_parameter_order(old_sig.parameters, new_sig.parameters)
    if not analysis.has_reordering:
        return None
    return Classification(
        DescriptorBuilder.simple(ChangeTarget.PARAMETER, ChangeAction.REORDERED),
        f"Parameters reordered in '{old.name}': {analysis.summary}",
        parameter_analysis=analysis,
    )


def check_type_parameters(
    old: DeclarationNode, new: DeclarationNode, ctx: CheckContext
) -> Classification | None:
    found = classify_type_parameter_change(old, new)
    if found is None:
        return None
    descriptor, explanation = found
    return Classification(descriptor, explanation)


def check_enum_value(old: DeclarationNode, new: DeclarationNode, ctx: CheckContext) -> Classification | None:
    if old.kind != NodeKind.ENUM_MEMBER or old.signature == new.signature:
        return None
    return Classification(
        DescriptorBuilder.modified(ChangeTarget.ENUM_MEMBER, ChangeAspect.ENUM_VALUE, ChangeImpact.UNRELATED),
        f"Changed value of enum member '{old.name}' from '{old.signature}' to '{new.signature}'",
    )


def check_type_signature(old: DeclarationNode, new: DeclarationNode, ctx: CheckContext) -> Classification | None:
    if normalize_signature(old.signature) == normalize_signature(new.signature):
        return None

    impact = determine_type_impact(old.signature, new.signature, ctx.type_relation)
    if impact == ChangeImpact.EQUIVALENT:
        return _modified(
            old,
            ChangeAspect.TYPE,
            ChangeImpact.EQUIVALENT,
            f"Type of '{old.path}' changed syntax but is semantically equivalent",
        )

    verb = {ChangeImpact.WIDENING: "Widened", ChangeImpact.NARROWING: "Narrowed"}.get(impact, "Changed")
    return _modified(
        old,
        ChangeAspect.TYPE,
        impact,
        f"{verb} type of '{old.path}' from '{old.signature}' to '{new.signature}'",
    )


def _toggle(old: DeclarationNode, new: DeclarationNode, modifier: Modifier) -> bool | None:
    """True if ``modifier`` was added, False if removed, None if unchanged."""
    before = old.has_modifier(modifier)
    after = new.has_modifier(modifier)
    if before == after:
        return None
    return after


def check_readonly(old: DeclarationNode, new: DeclarationNode, ctx: CheckContext) -> Classification | None:
    added = _toggle(old, new, Modifier.READONLY)
    if added is None:
        return None
    if added:
        return _modified(old, ChangeAspect.READONLY, ChangeImpact.NARROWING, f"Made '{old.path}' readonly")
    return _modified(
        old, ChangeAspect.READONLY, ChangeImpact.WIDENING, f"Made '{old.path}' writable (removed readonly)"
    )


def check_optionality(old: DeclarationNode, new: DeclarationNode, ctx: CheckContext) -> Classification | None:
    added = _toggle(old, new, Modifier.OPTIONAL)
    if added is None:
        return None
    if added:
        return _modified(
            old,
            ChangeAspect.OPTIONALITY,
            ChangeImpact.WIDENING,
            f"Made '{old.path}' optional (was required)",
            (TAG_WAS_REQUIRED, TAG_NOW_OPTIONAL),
        )
    return _modified(
        old,
        ChangeAspect.OPTIONALITY,
        ChangeImpact.NARROWING,
        f"Made '{old.path}' required (was optional)",
        (TAG_WAS_OPTIONAL, TAG_NOW_REQUIRED),
    )


def check_abstractness(old: DeclarationNode, new: DeclarationNode, ctx: CheckContext) -> Classification | None:
    added = _toggle(old, new, Modifier.ABSTRACT)
    if added is None:
        return None
    if added:
        return _modified(old, ChangeAspect.ABSTRACTNESS, ChangeImpact.NARROWING, f"Made '{old.path}' abstract")
    return _modified(
        old, ChangeAspect.ABSTRACTNESS, ChangeImpact.WIDENING, f"Made '{old.path}' concrete (removed abstract)"
    )


def check_staticness(old: DeclarationNode, new: DeclarationNode, ctx: CheckContext) -> Classification | None:
    added = _toggle(old, new, Modifier.STATIC)
    if added is None:
        return None
    explanation = (
        f"Made '{old.path}' static" if added else f"Made '{old.path}' an instance member (removed static)"
    )
    return _modified(old, ChangeAspect.STATICNESS, ChangeImpact.UNRELATED, explanation)


def check_visibility(old: DeclarationNode, new: DeclarationNode, ctx: CheckContext) -> Classification | None:
    for modifier in VISIBILITY_MODIFIERS:
        if new.has_modifier(modifier) and not old.has_modifier(modifier):
            return _modified(
                old,
                ChangeAspect.VISIBILITY,
                ChangeImpact.UNDETERMINED,
                f"Changed visibility of '{old.path}' to {modifier.value}",
            )
    return None


def _clause_change(
    old: DeclarationNode,
    new: DeclarationNode,
    old_clause: tuple[str, ...],
    new_clause: tuple[str, ...],
    aspect: ChangeAspect,
    keyword: str,
) -> Classification | None:
    if old_clause == new_clause:
        return None
    if not old_clause:
        return _modified(
            old,
            aspect,
            ChangeImpact.NARROWING,
            f"Added {keyword} clause to '{new.path}': now {keyword} {', '.join(new_clause)}",
        )
    if not new_clause:
        return _modified(
            old,
            aspect,
            ChangeImpact.WIDENING,
            f"Removed {keyword} clause from '{old.path}' (no longer {keyword} {', '.join(old_clause)})",
        )
    return _modified(
        old,
        aspect,
        ChangeImpact.UNDETERMINED,
        f"Changed {keyword} clause of '{old.path}' from '{', '.join(old_clause)}' to '{', '.join(new_clause)}'",
    )


def check_extends(old: DeclarationNode, new: DeclarationNode, ctx: CheckContext) -> Classification | None:
    return _clause_change(old, new, old.extends, new.extends, ChangeAspect.EXTENDS_CLAUSE, "extends")


def check_implements(old: DeclarationNode, new: DeclarationNode, ctx: CheckContext) -> Classification | None:
    return _clause_change(old, new, old.implements, new.implements, ChangeAspect.IMPLEMENTS_CLAUSE, "implements")


def check_deprecation(old: DeclarationNode, new: DeclarationNode, ctx: CheckContext) -> Classification | None:
    if old.is_deprecated == new.is_deprecated:
        return None
    if new.is_deprecated:
        message = new.metadata.deprecation_message if new.metadata else None
        suffix = f": {message}" if message else ""
        return _modified(
            old, ChangeAspect.DEPRECATION, ChangeImpact.WIDENING, f"Marked '{old.path}' as @deprecated{suffix}"
        )
    return _modified(old, ChangeAspect.DEPRECATION, ChangeImpact.NARROWING, f"Removed @deprecated from '{old.path}'")


CLASSIFICATION_CHECKS: tuple[ClassificationCheck, ...] = (
    ClassificationCheck("parameter-reordering", check_parameter_reordering),
    ClassificationCheck("type-parameters", check_type_parameters),
    ClassificationCheck("enum-value", check_enum_value),
    ClassificationCheck("type-signature", check_type_signature),
    ClassificationCheck("readonly", check_readonly),
    ClassificationCheck("optionality", check_optionality),
    ClassificationCheck("abstractness", check_abstractness),
    ClassificationCheck("staticness", check_staticness),
    ClassificationCheck("visibility", check_visibility),
    ClassificationCheck("extends-clause", check_extends),
    ClassificationCheck("implements-clause", check_implements),
    ClassificationCheck("deprecation", check_deprecation),
)


def classify_pair(
    old: DeclarationNode,
    new: DeclarationNode,
    *,
    detect_parameter_reordering: bool = True,
    type_relation: TypeRelation | None = None,
) -> Classification:
    """Classify a matched pair into exactly one descriptor.

    Args:
        old: Node from the old snapshot.
        new: Same-named node from the new snapshot.
        detect_parameter_reordering: Run the parameter reordering check.
        type_relation: Optional semantic oracle for type impact.

    Returns:
        The first classification the cascade produces, or the
        ``type``/``equivalent`` fallback.
    """
    ctx = CheckContext(detect_parameter_reordering, type_relation)
    for entry in CLASSIFICATION_CHECKS:
        result = entry.check(old, new, ctx)
        if result is not None:
            return result

    return _modified(old, ChangeAspect.TYPE, ChangeImpact.EQUIVALENT, "No significant change detected")


def addition_tags(node: DeclarationNode) -> tuple[str, ...]:
    """Tags describing an added parameter or property."""
    if node.kind not in _MEMBER_SLOT_KINDS:
        return ()
    tags = [TAG_NOW_OPTIONAL if node.has_modifier(Modifier.OPTIONAL) else TAG_NOW_REQUIRED]
    if node.metadata is not None and node.metadata.default_value is not None:
        tags.append(TAG_HAS_DEFAULT)
    return tuple(tags)


def removal_tags(node: DeclarationNode) -> tuple[str, ...]:
    """Tags describing a removed parameter or property."""
    if node.kind not in _MEMBER_SLOT_KINDS:
        return ()
    tags = [TAG_WAS_OPTIONAL if node.has_modifier(Modifier.OPTIONAL) else TAG_WAS_REQUIRED]
    if node.metadata is not None and node.metadata.default_value is not None:
        tags.append(TAG_HAD_DEFAULT)
    return tuple(tags)
