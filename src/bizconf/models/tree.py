"""Typed attribute tree.

An attribute document is an arbitrarily nested structure of mappings and
sequences whose leaves may be Conf wrappers. ``to_node`` converts raw data
into an explicit sum type so traversal never probes for fields:

    LeafNode      a Conf wrapper (recursion stops here)
    MappingNode   named children
    SequenceNode  indexed children
    ScalarNode    anything else, contributes nothing

Persisted wrappers are recognized only by their ``node_type`` tag.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from typing import Any

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from bizconf.models.conf import CONF_NODE_TYPE, Conf

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class LeafNode:
    conf: Conf[Any]


@dataclass(frozen=True)
class MappingNode:
    children: dict[str, Node] = field(default_factory=dict)


@dataclass(frozen=True)
class SequenceNode:
    items: list[Node] = field(default_factory=list)


@dataclass(frozen=True)
class ScalarNode:
    value: Any = None


Node = LeafNode | MappingNode | SequenceNode | ScalarNode


def _is_tagged_conf(data: Mapping[Any, Any]) -> bool:
    return data.get("node_type") == CONF_NODE_TYPE


def to_node(obj: Any) -> Node:
    """Convert arbitrary data into a typed tree node.

    A mapping tagged ``node_type: "conf"`` that fails validation is logged
    and treated as a scalar rather than raising.
    """
    if isinstance(obj, LeafNode | MappingNode | SequenceNode | ScalarNode):
        return obj
    if isinstance(obj, Conf):
        return LeafNode(conf=obj)
    if isinstance(obj, BaseModel):
        return MappingNode(
            children={name: to_node(getattr(obj, name)) for name in type(obj).model_fields}
        )
    if isinstance(obj, Mapping):
        if _is_tagged_conf(obj):
            try:
                return LeafNode(conf=Conf.model_validate(dict(obj)))
            except PydanticValidationError as e:
                logger.warning(
                    "Ignoring malformed conf node (%d validation errors)", e.error_count()
                )
                return ScalarNode(value=obj)
        return MappingNode(children={str(k): to_node(v) for k, v in obj.items()})
    if isinstance(obj, list | tuple):
        return SequenceNode(items=[to_node(item) for item in obj])
    return ScalarNode(value=obj)


class TreeVisitor:
    """Depth-first visitor over a typed tree.

    Subclasses override ``visit_leaf``; paths are dotted for mapping keys
    and bracketed for sequence indices (``offerings.services[0]``).
    """

    def visit(self, node: Node, path: str = "") -> None:
        if isinstance(node, LeafNode):
            self.visit_leaf(node, path)
        elif isinstance(node, MappingNode):
            self.visit_mapping(node, path)
        elif isinstance(node, SequenceNode):
            self.visit_sequence(node, path)
        else:
            self.visit_scalar(node, path)

    def visit_leaf(self, node: LeafNode, path: str) -> None:
        pass

    def visit_mapping(self, node: MappingNode, path: str) -> None:
        for key, child in node.children.items():
            self.visit(child, f"{path}.{key}" if path else key)

    def visit_sequence(self, node: SequenceNode, path: str) -> None:
        for i, child in enumerate(node.items):
            self.visit(child, f"{path}[{i}]")

    def visit_scalar(self, node: ScalarNode, path: str) -> None:
        pass


@dataclass(frozen=True)
class LeafEntry:
    """A wrapper found in a tree, with its location."""

    path: str
    section: str
    conf: Conf[Any]


class _LeafCollector(TreeVisitor):
    def __init__(self) -> None:
        self.entries: list[LeafEntry] = []
        self._section_stack: list[str] = []

    def visit_leaf(self, node: LeafNode, path: str) -> None:
        section = self._section_stack[0] if self._section_stack else path
        self.entries.append(LeafEntry(path=path, section=section, conf=node.conf))

    def visit_mapping(self, node: MappingNode, path: str) -> None:
        if path:
            super().visit_mapping(node, path)
            return
        for key, child in node.children.items():
            self._section_stack.append(key)
            try:
                self.visit(child, key)
            finally:
                self._section_stack.pop()


def iter_leaves(tree: Any) -> Iterator[LeafEntry]:
    """Yield every wrapper in ``tree`` in traversal order.

    ``section`` is the root mapping key the leaf sits under, or the leaf's
    own path when the root is not a mapping.
    """
    collector = _LeafCollector()
    collector.visit(to_node(tree))
    yield from collector.entries
