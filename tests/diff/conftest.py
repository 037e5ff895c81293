"""Shared fixtures for diff tests."""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import replace

import pytest

from apidiff.diff.models import (
    DeclarationNode,
    Modifier,
    NodeKind,
    NodeMetadata,
    ParameterInfo,
    SignatureInfo,
    TypeInfo,
    TypeParameterInfo,
)

NodeFactory = Callable[..., DeclarationNode]


def _attach(node: DeclarationNode, parent_path: str) -> DeclarationNode:
    path = f"{parent_path}.{node.name}"
    children = {name: _attach(child, path) for name, child in node.children.items()}
    return replace(node, path=path, parent_path=parent_path, children=children)


def build_node(
    name: str,
    kind: NodeKind | str = NodeKind.FUNCTION,
    signature: str = "",
    *,
    modifiers: Iterable[Modifier | str] = (),
    children: Sequence[DeclarationNode] = (),
    params: Sequence[tuple[str, str]] | None = None,
    type_params: Sequence[TypeParameterInfo] = (),
    extends: Sequence[str] = (),
    implements: Sequence[str] = (),
    deprecated: bool = False,
    deprecation_message: str | None = None,
    default_value: str | None = None,
) -> DeclarationNode:
    """Build a top-level node; children are re-pathed under it."""
    call_signatures: tuple[SignatureInfo, ...] = ()
    if params is not None:
        call_signatures = (SignatureInfo(parameters=tuple(ParameterInfo(n, t) for n, t in params)),)

    metadata = None
    if deprecated or default_value is not None:
        metadata = NodeMetadata(
            deprecated=deprecated,
            deprecation_message=deprecation_message,
            default_value=default_value,
        )

    return DeclarationNode(
        path=name,
        name=name,
        kind=NodeKind(kind),
        type_info=TypeInfo(
            signature=signature,
            call_signatures=call_signatures,
            type_parameters=tuple(type_params),
        ),
        modifiers=frozenset(Modifier(m) for m in modifiers),
        metadata=metadata,
        extends=tuple(extends),
        implements=tuple(implements),
        children={child.name: _attach(child, name) for child in children},
    )


def build_tree(*nodes: DeclarationNode) -> dict[str, DeclarationNode]:
    return {n.name: n for n in nodes}


@pytest.fixture
def node() -> NodeFactory:
    """Factory for DeclarationNodes: node(name, kind, signature, **facets)."""
    return build_node


@pytest.fixture
def tree() -> Callable[..., dict[str, DeclarationNode]]:
    """Factory for snapshot trees: tree(node_a, node_b, ...)."""
    return build_tree
