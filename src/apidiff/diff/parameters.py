"""Parameter order analysis for function-like declarations.

Two detections, strongest first:

- high: both lists hold the same multiset of (name, type) pairs in a
  different order.
- medium: positional types are unchanged, but at least two positions got
  dissimilar names that each resemble an old name from another position,
  e.g. ``(sourcePath, targetPath)`` -> ``(target, source)``.
"""

from __future__ import annotations

from collections import Counter
from collections.abc import Sequence
from dataclasses import dataclass
from typing import Literal

from apidiff.diff.models import ParameterInfo
from apidiff.diff.similarity import name_similarity

ReorderConfidence = Literal["high", "medium", "low"]

_DISSIMILAR_BELOW = 0.6
_RESEMBLES_AT = 0.7


@dataclass(frozen=True, slots=True)
class ParameterPosition:
    position: int
    old_name: str
    new_name: str
    type: str
    similarity: float
    interpretation: str


@dataclass(frozen=True, slots=True)
class ParameterOrderAnalysis:
    has_reordering: bool
    confidence: ReorderConfidence
    summary: str
    positions: tuple[ParameterPosition, ...] = ()


def interpret_name_change(old_name: str, new_name: str, similarity: float) -> str:
    """Describe a parameter name change in words."""
    if old_name == new_name:
        return "unchanged"
    if similarity >= 0.95:
        return "case change only"
    if similarity >= 0.8:
        old_lower = old_name.lower()
        new_lower = new_name.lower()
        if old_lower.startswith(new_lower) or new_lower.startswith(old_lower):
            return "abbreviation expansion/contraction"
        return "minor spelling variation"
    if similarity >= 0.6:
        return "moderate name change"
    if similarity >= 0.4:
        return "significant name change"
    return "completely different name"


def _order(params: Sequence[ParameterInfo]) -> str:
    return ", ".join(p.name for p in params)


def analyze_parameter_order(
    old_params: Sequence[ParameterInfo],
    new_params: Sequence[ParameterInfo],
) -> ParameterOrderAnalysis:
    positions: list[ParameterPosition] = []
    for i, (old, new) in enumerate(zip(old_params, new_params, strict=False)):
        similarity = name_similarity(old.name, new.name)
        positions.append(
            ParameterPosition(
                position=i,
                old_name=old.name,
                new_name=new.name,
                type=old.type,
                similarity=similarity,
                interpretation=interpret_name_change(old.name, new.name, similarity),
            )
        )

    def no_reorder(summary: str) -> ParameterOrderAnalysis:
        return ParameterOrderAnalysis(False, "low", summary, tuple(positions))

    if len(old_params) != len(new_params):
        return no_reorder("Parameter count changed; not analyzing for reordering")
    if len(old_params) < 2:
        return no_reorder("Single parameter; reordering not applicable")

    old_pairs = [(p.name, p.type) for p in old_params]
    new_pairs = [(p.name, p.type) for p in new_params]
    if old_pairs == new_pairs:
        return no_reorder("No parameter changes detected")

    if Counter(old_pairs) == Counter(new_pairs):
        return ParameterOrderAnalysis(
            True,
            "high",
            f"Parameters reordered: ({_order(old_params)}) -> ({_order(new_params)}). "
            "The same parameters appear at different positions.",
            tuple(positions),
        )

    if any(old.type != new.type for old, new in zip(old_params, new_params, strict=True)):
        return no_reorder("Types differ at some positions; type analysis will handle this")

    dissimilar = [p for p in positions if p.old_name != p.new_name and p.similarity < _DISSIMILAR_BELOW]
    if len(dissimilar) >= 2:
        cross_matches: list[str] = []
        for pos in dissimilar:
            for i, old in enumerate(old_params):
                if i != pos.position and name_similarity(old.name, pos.new_name) >= _RESEMBLES_AT:
                    cross_matches.append(
                        f'"{pos.new_name}" at position {pos.position} resembles "{old.name}" '
                        f"which was at position {i}"
                    )
                    break
        if len(cross_matches) >= 2:
            return ParameterOrderAnalysis(
                True,
                "medium",
                f"Parameters appear reordered: ({_order(old_params)}) -> ({_order(new_params)}). "
                + "; ".join(cross_matches)
                + ".",
                tuple(positions),
            )

    renamed = [p for p in positions if p.old_name != p.new_name]
    if renamed:
        described = ", ".join(f'"{p.old_name}" -> "{p.new_name}" ({p.interpretation})' for p in renamed)
        return no_reorder(f"Parameter names changed but appear to be renames rather than reordering: {described}")
    return no_reorder("No parameter name changes detected")
