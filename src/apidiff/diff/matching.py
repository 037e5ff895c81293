"""Sibling matching and rename detection.

Matching is purely by name within one tree level. Rename detection scores
every same-kind (removed, added) pair and greedily accepts the best
candidates. The greedy pass is an approximation of an optimal bipartite
assignment: near-ties can pair differently than a global optimum would.
Ties are broken by first-seen order (removed order, then added order).
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field

import structlog

from apidiff.diff.models import DeclarationNode
from apidiff.diff.similarity import (
    children_similarity,
    modifier_similarity,
    name_similarity,
    signature_similarity,
)

log = structlog.get_logger(__name__)

NAME_WEIGHT = 0.4
SIGNATURE_WEIGHT = 0.4
MODIFIER_WEIGHT = 0.1
CHILDREN_WEIGHT = 0.1


@dataclass(slots=True)
class MatchResult:
    matched: list[tuple[DeclarationNode, DeclarationNode]] = field(default_factory=list)
    removed: list[DeclarationNode] = field(default_factory=list)
    added: list[DeclarationNode] = field(default_factory=list)


@dataclass(frozen=True, slots=True)
class RenameCandidate:
    old_node: DeclarationNode
    new_node: DeclarationNode
    confidence: float


def match_nodes(
    old_nodes: Mapping[str, DeclarationNode],
    new_nodes: Mapping[str, DeclarationNode],
) -> MatchResult:
    """Pair siblings by name.

    Matched pairs and removals follow old-tree order; additions follow
    new-tree order.
    """
    result = MatchResult()
    for name, old_node in old_nodes.items():
        new_node = new_nodes.get(name)
        if new_node is None:
            result.removed.append(old_node)
        else:
            result.matched.append((old_node, new_node))

    for name, new_node in new_nodes.items():
        if name not in old_nodes:
            result.added.append(new_node)

    return result


def rename_confidence(old_node: DeclarationNode, new_node: DeclarationNode) -> float:
    """Weighted similarity of a removed and an added node."""
    score = NAME_WEIGHT * name_similarity(old_node.name, new_node.name)
    score += SIGNATURE_WEIGHT * signature_similarity(old_node.signature, new_node.signature)
    score += MODIFIER_WEIGHT * modifier_similarity(old_node.modifiers, new_node.modifiers)
    score += CHILDREN_WEIGHT * children_similarity(len(old_node.children), len(new_node.children))
    return score


def detect_renames(
    removed: list[DeclarationNode],
    added: list[DeclarationNode],
    threshold: float,
) -> list[RenameCandidate]:
    """Detect probable renames among removed and added nodes.

    Each node participates in at most one rename.
    """
    candidates: list[RenameCandidate] = []
    for old_node in removed:
        for new_node in added:
            if old_node.kind != new_node.kind:
                continue
            confidence = rename_confidence(old_node, new_node)
            if confidence >= threshold:
                candidates.append(RenameCandidate(old_node, new_node, confidence))

    # sorted() is stable: equal confidences keep generation order
    candidates = sorted(candidates, key=lambda c: -c.confidence)

    used_old: set[str] = set()
    used_new: set[str] = set()
    accepted: list[RenameCandidate] = []
    for candidate in candidates:
        if candidate.old_node.path in used_old or candidate.new_node.path in used_new:
            continue
        accepted.append(candidate)
        used_old.add(candidate.old_node.path)
        used_new.add(candidate.new_node.path)

    if accepted:
        log.debug(
            "renames_detected",
            count=len(accepted),
            pairs=[(c.old_node.path, c.new_node.path) for c in accepted],
        )
    return accepted
