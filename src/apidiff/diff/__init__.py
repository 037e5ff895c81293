"""API diff package: snapshot models, matching, classification, tree diff.

Public API re-exports for the diff subpackage.
"""

from apidiff.diff.classification import Classification, classify_pair, node_kind_to_target
from apidiff.diff.engine import DiffOptions, diff_members, diff_trees
from apidiff.diff.grouping import count_changes, flatten_changes, group_changes_by_descriptor
from apidiff.diff.impact import TypeRelation, UnionTypeRelation, determine_type_impact
from apidiff.diff.matching import MatchResult, RenameCandidate, detect_renames, match_nodes
from apidiff.diff.models import (
    ApiChange,
    ChangeAction,
    ChangeAspect,
    ChangeContext,
    ChangeDescriptor,
    ChangeImpact,
    ChangeTarget,
    DeclarationNode,
    Modifier,
    NodeKind,
    NodeMetadata,
    ParameterInfo,
    SignatureInfo,
    SourcePosition,
    SourceRange,
    TypeInfo,
    TypeParameterInfo,
)
from apidiff.diff.sources import node_from_mapping, tree_from_mapping

__all__ = [
    "ApiChange",
    "ChangeAction",
    "ChangeAspect",
    "ChangeContext",
    "ChangeDescriptor",
    "ChangeImpact",
    "ChangeTarget",
    "Classification",
    "DeclarationNode",
    "DiffOptions",
    "MatchResult",
    "Modifier",
    "NodeKind",
    "NodeMetadata",
    "ParameterInfo",
    "RenameCandidate",
    "SignatureInfo",
    "SourcePosition",
    "SourceRange",
    "TypeInfo",
    "TypeParameterInfo",
    "TypeRelation",
    "UnionTypeRelation",
    "classify_pair",
    "count_changes",
    "detect_renames",
    "determine_type_impact",
    "diff_members",
    "diff_trees",
    "flatten_changes",
    "group_changes_by_descriptor",
    "match_nodes",
    "node_from_mapping",
    "node_kind_to_target",
    "tree_from_mapping",
]
