"""Data models for API diffing.

All models are plain dataclasses / frozen dataclasses. Snapshot trees are
built once by a parser and never mutated here; change records are frozen
once their nested children are known.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass, field, replace
from enum import Enum

# ============================================================================
# Enumerations
# ============================================================================


class NodeKind(str, Enum):
    """Kind of declared construct in a snapshot."""

    FUNCTION = "function"
    CLASS = "class"
    INTERFACE = "interface"
    TYPE_ALIAS = "type-alias"
    ENUM = "enum"
    NAMESPACE = "namespace"
    VARIABLE = "variable"
    PROPERTY = "property"
    METHOD = "method"
    PARAMETER = "parameter"
    TYPE_PARAMETER = "type-parameter"
    ENUM_MEMBER = "enum-member"
    CALL_SIGNATURE = "call-signature"
    CONSTRUCT_SIGNATURE = "construct-signature"
    INDEX_SIGNATURE = "index-signature"
    GETTER = "getter"
    SETTER = "setter"


class Modifier(str, Enum):
    EXPORTED = "exported"
    DEFAULT_EXPORT = "default-export"
    DECLARE = "declare"
    CONST = "const"
    ABSTRACT = "abstract"
    READONLY = "readonly"
    OPTIONAL = "optional"
    STATIC = "static"
    PUBLIC = "public"
    PROTECTED = "protected"
    PRIVATE = "private"
    ASYNC = "async"


VISIBILITY_MODIFIERS: tuple[Modifier, ...] = (Modifier.PUBLIC, Modifier.PROTECTED, Modifier.PRIVATE)


class ChangeTarget(str, Enum):
    """Which API construct a change affects."""

    EXPORT = "export"
    PROPERTY = "property"
    METHOD = "method"
    PARAMETER = "parameter"
    TYPE_PARAMETER = "type-parameter"
    ENUM_MEMBER = "enum-member"
    INDEX_SIGNATURE = "index-signature"
    ACCESSOR = "accessor"
    CONSTRUCTOR = "constructor"


class ChangeAction(str, Enum):
    ADDED = "added"
    REMOVED = "removed"
    RENAMED = "renamed"
    REORDERED = "reordered"
    MODIFIED = "modified"


class ChangeAspect(str, Enum):
    """What changed about a construct. Only meaningful for MODIFIED."""

    TYPE = "type"
    OPTIONALITY = "optionality"
    READONLY = "readonly"
    VISIBILITY = "visibility"
    ABSTRACTNESS = "abstractness"
    STATICNESS = "staticness"
    EXTENDS_CLAUSE = "extends-clause"
    IMPLEMENTS_CLAUSE = "implements-clause"
    DEPRECATION = "deprecation"
    CONSTRAINT = "constraint"
    DEFAULT_TYPE = "default-type"
    ENUM_VALUE = "enum-value"


class ChangeImpact(str, Enum):
    """Direction of a modification from the caller's point of view."""

    WIDENING = "widening"  # accepts more values
    NARROWING = "narrowing"  # accepts fewer values
    EQUIVALENT = "equivalent"
    UNRELATED = "unrelated"  # neither sub- nor supertype
    UNDETERMINED = "undetermined"


# Tags are an open set of plain strings; these are the ones the differ emits.
TAG_WAS_REQUIRED = "was-required"
TAG_NOW_REQUIRED = "now-required"
TAG_WAS_OPTIONAL = "was-optional"
TAG_NOW_OPTIONAL = "now-optional"
TAG_IS_REST_PARAMETER = "is-rest-parameter"
TAG_HAS_DEFAULT = "has-default"
TAG_HAD_DEFAULT = "had-default"
TAG_HAS_NESTED_CHANGES = "has-nested-changes"
TAG_IS_NESTED_CHANGE = "is-nested-change"
TAG_AFFECTS_TYPE_PARAMETER = "affects-type-parameter"


# ============================================================================
# Snapshot nodes
# ============================================================================


@dataclass(frozen=True, slots=True)
class SourcePosition:
    line: int  # 1-based
    column: int  # 0-based
    offset: int = 0


@dataclass(frozen=True, slots=True)
class SourceRange:
    start: SourcePosition
    end: SourcePosition


@dataclass(frozen=True, slots=True)
class TypeParameterInfo:
    name: str
    constraint: str | None = None
    default: str | None = None
    location: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class ParameterInfo:
    name: str
    type: str
    optional: bool = False
    rest: bool = False
    default_value: str | None = None
    location: SourceRange | None = None


@dataclass(frozen=True, slots=True)
class SignatureInfo:
    """One call or construct signature."""

    parameters: tuple[ParameterInfo, ...] = ()
    return_type: str = ""
    type_parameters: tuple[TypeParameterInfo, ...] = ()
    normalized: str = ""


@dataclass(frozen=True, slots=True)
class PropertyInfo:
    name: str
    type: str
    optional: bool = False
    readonly: bool = False


@dataclass(frozen=True, slots=True)
class TypeInfo:
    """Normalized signature plus optional structured facets."""

    signature: str
    raw: str | None = None
    union_members: tuple[str, ...] | None = None
    intersection_members: tuple[str, ...] | None = None
    call_signatures: tuple[SignatureInfo, ...] = ()
    construct_signatures: tuple[SignatureInfo, ...] = ()
    properties: tuple[PropertyInfo, ...] = ()
    type_parameters: tuple[TypeParameterInfo, ...] = ()
    string_index_type: str | None = None
    number_index_type: str | None = None


@dataclass(frozen=True, slots=True)
class NodeMetadata:
    """Documentation metadata (deprecation, documented defaults)."""

    deprecated: bool = False
    deprecation_message: str | None = None
    default_value: str | None = None


@dataclass(frozen=True, slots=True)
class DeclarationNode:
    """One declared construct in an interface snapshot.

    Identity within a snapshot is ``path``. ``parent_path`` is a lookup key
    into the owning tree (see :func:`index_nodes`), never an owning link;
    children are owned by ``children``, keyed by member name.
    """

    path: str
    name: str
    kind: NodeKind
    type_info: TypeInfo = field(default_factory=lambda: TypeInfo(signature=""))
    modifiers: frozenset[Modifier] = frozenset()
    source_range: SourceRange | None = None
    parent_path: str | None = None
    metadata: NodeMetadata | None = None
    extends: tuple[str, ...] = ()
    implements: tuple[str, ...] = ()
    children: Mapping[str, DeclarationNode] = field(default_factory=dict)

    @property
    def signature(self) -> str:
        return self.type_info.signature

    @property
    def is_deprecated(self) -> bool:
        return self.metadata is not None and self.metadata.deprecated

    def has_modifier(self, modifier: Modifier) -> bool:
        return modifier in self.modifiers


def iter_nodes(tree: Mapping[str, DeclarationNode]) -> Iterator[DeclarationNode]:
    """Yield every node of a snapshot tree in pre-order."""
    for node in tree.values():
        yield node
        yield from iter_nodes(node.children)


def index_nodes(tree: Mapping[str, DeclarationNode]) -> dict[str, DeclarationNode]:
    """Build a path -> node lookup for a snapshot tree."""
    return {node.path: node for node in iter_nodes(tree)}


def parent_of(node: DeclarationNode, index: Mapping[str, DeclarationNode]) -> DeclarationNode | None:
    """Resolve a node's parent through a path index."""
    if node.parent_path is None:
        return None
    return index.get(node.parent_path)


# ============================================================================
# Change records
# ============================================================================


@dataclass(frozen=True, slots=True)
class ChangeDescriptor:
    """Multi-dimensional classification of one change.

    ``aspect`` and ``impact`` are set exactly when ``action`` is MODIFIED.
    """

    target: ChangeTarget
    action: ChangeAction
    aspect: ChangeAspect | None = None
    impact: ChangeImpact | None = None
    tags: frozenset[str] = frozenset()

    def __post_init__(self) -> None:
        is_modified = self.action == ChangeAction.MODIFIED
        if is_modified and (self.aspect is None or self.impact is None):
            raise ValueError("modified descriptors require both aspect and impact")
        if not is_modified and (self.aspect is not None or self.impact is not None):
            raise ValueError(f"{self.action.value} descriptors carry no aspect or impact")

    def has_tag(self, tag: str) -> bool:
        return tag in self.tags

    def with_tags(self, *tags: str) -> ChangeDescriptor:
        return replace(self, tags=self.tags.union(tags))

    @property
    def key(self) -> str:
        """Grouping key: ``target:action`` or ``target:action:aspect``."""
        if self.aspect is not None:
            return f"{self.target.value}:{self.action.value}:{self.aspect.value}"
        return f"{self.target.value}:{self.action.value}"


@dataclass(slots=True)
class DescriptorBuilder:
    """Pending descriptor; tags may still be added until :meth:`build`."""

    target: ChangeTarget
    action: ChangeAction
    aspect: ChangeAspect | None = None
    impact: ChangeImpact | None = None
    tags: set[str] = field(default_factory=set)

    @classmethod
    def simple(
        cls,
        target: ChangeTarget,
        action: ChangeAction,
        tags: Iterable[str] = (),
    ) -> DescriptorBuilder:
        return cls(target=target, action=action, tags=set(tags))

    @classmethod
    def modified(
        cls,
        target: ChangeTarget,
        aspect: ChangeAspect,
        impact: ChangeImpact,
        tags: Iterable[str] = (),
    ) -> DescriptorBuilder:
        return cls(
            target=target,
            action=ChangeAction.MODIFIED,
            aspect=aspect,
            impact=impact,
            tags=set(tags),
        )

    def add_tag(self, tag: str) -> DescriptorBuilder:
        self.tags.add(tag)
        return self

    @property
    def is_equivalent(self) -> bool:
        """True for the no-significant-change fallback classification."""
        return self.aspect == ChangeAspect.TYPE and self.impact == ChangeImpact.EQUIVALENT

    def build(self) -> ChangeDescriptor:
        return ChangeDescriptor(
            target=self.target,
            action=self.action,
            aspect=self.aspect,
            impact=self.impact,
            tags=frozenset(self.tags),
        )


@dataclass(frozen=True, slots=True)
class ChangeContext:
    is_nested: bool = False
    depth: int = 0  # 0 = top-level export
    ancestors: tuple[str, ...] = ()
    rename_confidence: float | None = None
    old_type: str | None = None
    new_type: str | None = None


@dataclass(frozen=True, slots=True)
class ApiChange:
    """One reported change, with its nested member changes."""

    descriptor: ChangeDescriptor
    path: str
    node_kind: NodeKind
    explanation: str
    old_range: SourceRange | None = None
    new_range: SourceRange | None = None
    old_node: DeclarationNode | None = None
    new_node: DeclarationNode | None = None
    nested_changes: tuple[ApiChange, ...] = ()
    context: ChangeContext = field(default_factory=ChangeContext)
