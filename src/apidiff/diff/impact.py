"""Type variance judgement for modified signatures.

``determine_type_impact`` answers one question: does the new type accept
more values than the old one (widening), fewer (narrowing), the same
(equivalent), something incomparable (unrelated), or can we not tell
(undetermined)?

When a :class:`TypeRelation` is injected the answer comes from its union
membership and subtype judgements. Without one, string heuristics over the
normalized signature text are used; those can only recognise union
containment and optionality markers.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable

from apidiff.diff.models import ChangeImpact
from apidiff.diff.similarity import normalize_signature

_OPENERS = {"(": ")", "<": ">", "[": "]", "{": "}"}
_CLOSERS = {v: k for k, v in _OPENERS.items()}
_TOP_TYPES = frozenset({"any", "unknown"})
_BOTTOM_TYPE = "never"


@runtime_checkable
class TypeRelation(Protocol):
    """Semantic type oracle supplied by the caller.

    Implementations typically wrap a real type checker. All arguments are
    signature strings as they appear in ``TypeInfo.signature``.
    """

    def canonical(self, type_text: str) -> str:
        """Canonical spelling; equal canonical forms mean equivalent types."""
        ...

    def members(self, type_text: str) -> Sequence[str]:
        """Canonical union members (a single entry for non-union types)."""
        ...

    def is_subtype_of(self, sub: str, sup: str) -> bool:
        """True if every value of ``sub`` is also a value of ``sup``."""
        ...


def split_union(type_text: str) -> list[str]:
    """Split on top-level ``|``, ignoring separators nested in brackets or quotes."""
    parts: list[str] = []
    stack: list[str] = []
    quote: str | None = None
    current: list[str] = []

    for ch in type_text:
        if quote is not None:
            current.append(ch)
            if ch == quote:
                quote = None
            continue
        if ch in "'\"`":
            quote = ch
        elif ch in _OPENERS:
            stack.append(ch)
        elif ch in _CLOSERS and stack and stack[-1] == _CLOSERS[ch]:
            stack.pop()
        elif ch == "|" and not stack:
            parts.append("".join(current).strip())
            current = []
            continue
        current.append(ch)

    parts.append("".join(current).strip())
    return [p for p in parts if p]


class UnionTypeRelation:
    """Syntactic :class:`TypeRelation` over union spellings.

    Member order is irrelevant, ``never`` is a subtype of everything and
    everything is a subtype of ``any``/``unknown``. Anything deeper
    (structural object types, generics) is treated as opaque text.
    """

    def canonical(self, type_text: str) -> str:
        return " | ".join(self.members(type_text))

    def members(self, type_text: str) -> list[str]:
        return sorted({normalize_signature(m) for m in split_union(normalize_signature(type_text))})

    def is_subtype_of(self, sub: str, sup: str) -> bool:
        sub_members = set(self.members(sub))
        sup_members = set(self.members(sup))
        if sup_members & _TOP_TYPES:
            return True
        sub_members.discard(_BOTTOM_TYPE)
        return sub_members <= sup_members


def determine_type_impact(
    old_type: str,
    new_type: str,
    relation: TypeRelation | None = None,
) -> ChangeImpact:
    old_norm = normalize_signature(old_type)
    new_norm = normalize_signature(new_type)
    if old_norm == new_norm:
        return ChangeImpact.EQUIVALENT

    if relation is not None:
        return _impact_from_relation(old_norm, new_norm, relation)
    return _impact_from_strings(old_norm, new_norm)


def _impact_from_relation(old_norm: str, new_norm: str, relation: TypeRelation) -> ChangeImpact:
    old_canonical = relation.canonical(old_norm)
    new_canonical = relation.canonical(new_norm)
    if old_canonical == new_canonical:
        return ChangeImpact.EQUIVALENT

    old_members = list(relation.members(old_norm))
    new_members = list(relation.members(new_norm))

    if len(old_members) > 1 and len(new_members) > 1:
        old_in_new = set(old_members) <= set(new_members)
        new_in_old = set(new_members) <= set(old_members)
        if old_in_new and new_in_old:
            return ChangeImpact.EQUIVALENT
        if old_in_new:
            return ChangeImpact.WIDENING
        if new_in_old:
            return ChangeImpact.NARROWING

    if len(new_members) > 1 and old_canonical in new_members:
        return ChangeImpact.WIDENING
    if len(old_members) > 1 and new_canonical in old_members:
        return ChangeImpact.NARROWING

    old_sub = relation.is_subtype_of(old_canonical, new_canonical)
    new_sub = relation.is_subtype_of(new_canonical, old_canonical)
    if old_sub and new_sub:
        return ChangeImpact.EQUIVALENT
    if old_sub:
        return ChangeImpact.WIDENING
    if new_sub:
        return ChangeImpact.NARROWING
    return ChangeImpact.UNRELATED


def _impact_from_strings(old_norm: str, new_norm: str) -> ChangeImpact:
    if "|" in new_norm and old_norm in (p.strip() for p in new_norm.split("|")):
        return ChangeImpact.WIDENING
    if "|" in old_norm and new_norm in (p.strip() for p in old_norm.split("|")):
        return ChangeImpact.NARROWING

    old_optional = "?" in old_norm
    new_optional = "?" in new_norm
    if old_optional and not new_optional:
        return ChangeImpact.NARROWING
    if new_optional and not old_optional:
        return ChangeImpact.WIDENING
    return ChangeImpact.UNDETERMINED
