"""Tests for type impact (impact.py).

Tests cover:
- split_union bracket and quote handling
- String heuristic path
- Semantic path through UnionTypeRelation and a custom oracle
- Agreement of both paths on easy cases
"""

from __future__ import annotations

import pytest

from apidiff.diff.impact import TypeRelation, UnionTypeRelation, determine_type_impact, split_union
from apidiff.diff.models import ChangeImpact

# ============================================================================
# Tests: split_union
# ============================================================================


class TestSplitUnion:
    def test_simple_union(self) -> None:
        assert split_union("string | number") == ["string", "number"]

    def test_nested_separators_are_kept(self) -> None:
        assert split_union("Map<string, a | b> | (x | y)[] | null") == [
            "Map<string, a | b>",
            "(x | y)[]",
            "null",
        ]

    def test_quoted_separator(self) -> None:
        assert split_union("'a|b' | 'c'") == ["'a|b'", "'c'"]

    def test_arrow_function_is_not_split(self) -> None:
        assert split_union("(a: string) => void") == ["(a: string) => void"]

    def test_leading_pipe(self) -> None:
        assert split_union("| 'a' | 'b'") == ["'a'", "'b'"]


# ============================================================================
# Tests: string heuristic path
# ============================================================================


class TestStringHeuristics:
    @pytest.mark.parametrize(
        ("old", "new", "expected"),
        [
            ("string", "string", ChangeImpact.EQUIVALENT),
            ("string", "  string ", ChangeImpact.EQUIVALENT),
            ("string", "string | number", ChangeImpact.WIDENING),
            ("string | number", "string", ChangeImpact.NARROWING),
            ("(a: string) => void", "(a?: string) => void", ChangeImpact.WIDENING),
            ("(a?: string) => void", "(a: string) => void", ChangeImpact.NARROWING),
            ("string", "number", ChangeImpact.UNDETERMINED),
        ],
    )
    def test_without_relation(self, old: str, new: str, expected: ChangeImpact) -> None:
        assert determine_type_impact(old, new) == expected


# ============================================================================
# Tests: semantic path
# ============================================================================


class TestUnionTypeRelation:
    @pytest.fixture
    def relation(self) -> UnionTypeRelation:
        return UnionTypeRelation()

    def test_satisfies_protocol(self, relation: UnionTypeRelation) -> None:
        assert isinstance(relation, TypeRelation)

    def test_canonical_ignores_member_order(self, relation: UnionTypeRelation) -> None:
        assert relation.canonical("b | a") == relation.canonical("a |  b")

    @pytest.mark.parametrize(
        ("old", "new", "expected"),
        [
            ("string | number", "number | string", ChangeImpact.EQUIVALENT),
            ("'a' | 'b'", "'a' | 'b' | 'c'", ChangeImpact.WIDENING),
            ("'a' | 'b' | 'c'", "'a' | 'c'", ChangeImpact.NARROWING),
            ("'a' | 'b'", "'a' | 'c'", ChangeImpact.UNRELATED),
            ("string", "string | undefined", ChangeImpact.WIDENING),
            ("string | undefined", "string", ChangeImpact.NARROWING),
            ("string", "number", ChangeImpact.UNRELATED),
            ("string", "unknown", ChangeImpact.WIDENING),
            ("any", "string", ChangeImpact.NARROWING),
            ("never", "string", ChangeImpact.WIDENING),
        ],
    )
    def test_with_relation(self, relation: UnionTypeRelation, old: str, new: str, expected: ChangeImpact) -> None:
        assert determine_type_impact(old, new, relation) == expected

    @pytest.mark.parametrize(
        ("old", "new"),
        [
            ("string", "string"),
            ("string", "string | number"),
            ("string | number", "string"),
        ],
    )
    def test_paths_agree_on_easy_cases(self, relation: UnionTypeRelation, old: str, new: str) -> None:
        assert determine_type_impact(old, new) == determine_type_impact(old, new, relation)


class _NumericTower:
    """Oracle where int <: float <: complex."""

    _order = {"int": 0, "float": 1, "complex": 2}

    def canonical(self, type_text: str) -> str:
        return type_text.strip()

    def members(self, type_text: str) -> list[str]:
        return [type_text.strip()]

    def is_subtype_of(self, sub: str, sup: str) -> bool:
        return self._order[sub] <= self._order[sup]


class TestCustomRelation:
    def test_subtype_judgement_drives_impact(self) -> None:
        tower = _NumericTower()

        assert determine_type_impact("int", "float", tower) == ChangeImpact.WIDENING
        assert determine_type_impact("complex", "int", tower) == ChangeImpact.NARROWING
