"""Build snapshot trees from plain mappings.

Parsers (or JSON dumps of their output) hand over nested dicts; this module
turns them into immutable DeclarationNode trees with correct dotted paths
and parent keys. Accepted node shape::

    {
        "kind": "interface",
        "signature": "...",            # or a full "type_info" mapping
        "modifiers": ["exported"],
        "extends": ["Base"],
        "implements": [],
        "metadata": {"deprecated": true, "deprecation_message": "..."},
        "source_range": {"start": {"line": 1, "column": 0}, "end": {...}},
        "children": {"member": {...}},
    }

Keys may be snake_case or camelCase. ``name`` defaults to the mapping key.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Any

from apidiff.diff.models import (
    DeclarationNode,
    Modifier,
    NodeKind,
    NodeMetadata,
    ParameterInfo,
    PropertyInfo,
    SignatureInfo,
    SourcePosition,
    SourceRange,
    TypeInfo,
    TypeParameterInfo,
)

_CAMEL_RE = re.compile(r"(?<!^)(?=[A-Z])")


def _snake_keys(data: Mapping[str, Any]) -> dict[str, Any]:
    return {_CAMEL_RE.sub("_", key).lower(): value for key, value in data.items()}


def _position(data: Mapping[str, Any]) -> SourcePosition:
    d = _snake_keys(data)
    return SourcePosition(line=int(d["line"]), column=int(d.get("column", 0)), offset=int(d.get("offset", 0)))


def _range(data: Mapping[str, Any] | None) -> SourceRange | None:
    if not data:
        return None
    return SourceRange(start=_position(data["start"]), end=_position(data["end"]))


def _type_parameter(data: Mapping[str, Any]) -> TypeParameterInfo:
    d = _snake_keys(data)
    return TypeParameterInfo(
        name=d["name"],
        constraint=d.get("constraint"),
        default=d.get("default"),
        location=_range(d.get("location")),
    )


def _parameter(data: Mapping[str, Any]) -> ParameterInfo:
    d = _snake_keys(data)
    return ParameterInfo(
        name=d["name"],
        type=d.get("type", ""),
        optional=bool(d.get("optional", False)),
        rest=bool(d.get("rest", False)),
        default_value=d.get("default_value"),
        location=_range(d.get("location")),
    )


def _signature(data: Mapping[str, Any]) -> SignatureInfo:
    d = _snake_keys(data)
    return SignatureInfo(
        parameters=tuple(_parameter(p) for p in d.get("parameters", ())),
        return_type=d.get("return_type", ""),
        type_parameters=tuple(_type_parameter(tp) for tp in d.get("type_parameters", ())),
        normalized=d.get("normalized", ""),
    )


def _property(data: Mapping[str, Any]) -> PropertyInfo:
    d = _snake_keys(data)
    return PropertyInfo(
        name=d["name"],
        type=d.get("type", ""),
        optional=bool(d.get("optional", False)),
        readonly=bool(d.get("readonly", False)),
    )


def _optional_tuple(value: Any) -> tuple[str, ...] | None:
    return tuple(value) if value is not None else None


def type_info_from_mapping(data: Mapping[str, Any]) -> TypeInfo:
    d = _snake_keys(data)
    return TypeInfo(
        signature=d.get("signature", ""),
        raw=d.get("raw"),
        union_members=_optional_tuple(d.get("union_members")),
        intersection_members=_optional_tuple(d.get("intersection_members")),
        call_signatures=tuple(_signature(s) for s in d.get("call_signatures", ())),
        construct_signatures=tuple(_signature(s) for s in d.get("construct_signatures", ())),
        properties=tuple(_property(p) for p in d.get("properties", ())),
        type_parameters=tuple(_type_parameter(tp) for tp in d.get("type_parameters", ())),
        string_index_type=d.get("string_index_type"),
        number_index_type=d.get("number_index_type"),
    )


def node_from_mapping(
    name: str,
    data: Mapping[str, Any],
    parent_path: str | None = None,
) -> DeclarationNode:
    """Build one node (and its subtree) from a mapping.

    Raises:
        ValueError: unknown ``kind`` or modifier.
        KeyError: ``kind`` missing.
    """
    d = _snake_keys(data)
    node_name = d.get("name", name)
    path = node_name if parent_path is None else f"{parent_path}.{node_name}"

    if "type_info" in d:
        type_info = type_info_from_mapping(d["type_info"])
    else:
        type_info = TypeInfo(signature=d.get("signature", ""))

    metadata = None
    if d.get("metadata"):
        m = _snake_keys(d["metadata"])
        metadata = NodeMetadata(
            deprecated=bool(m.get("deprecated", False)),
            deprecation_message=m.get("deprecation_message"),
            default_value=m.get("default_value"),
        )

    children = {
        child_name: node_from_mapping(child_name, child, parent_path=path)
        for child_name, child in (d.get("children") or {}).items()
    }

    return DeclarationNode(
        path=path,
        name=node_name,
        kind=NodeKind(d["kind"]),
        type_info=type_info,
        modifiers=frozenset(Modifier(m) for m in d.get("modifiers", ())),
        source_range=_range(d.get("source_range")),
        parent_path=parent_path,
        metadata=metadata,
        extends=tuple(d.get("extends", ())),
        implements=tuple(d.get("implements", ())),
        children=children,
    )


def tree_from_mapping(data: Mapping[str, Mapping[str, Any]]) -> dict[str, DeclarationNode]:
    """Build a snapshot tree (export name -> node) from a mapping of mappings."""
    return {name: node_from_mapping(name, node) for name, node in data.items()}
