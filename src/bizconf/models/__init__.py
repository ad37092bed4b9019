"""Data models for the confidence-weighted attribute model."""

from bizconf.models.conf import CONF_NODE_TYPE, Conf, is_empty_value
from bizconf.models.source_ref import SourceKind, SourceRef
from bizconf.models.tree import (
    LeafEntry,
    LeafNode,
    MappingNode,
    Node,
    ScalarNode,
    SequenceNode,
    TreeVisitor,
    iter_leaves,
    to_node,
)

__all__ = [
    "CONF_NODE_TYPE",
    "Conf",
    "LeafEntry",
    "LeafNode",
    "MappingNode",
    "Node",
    "ScalarNode",
    "SequenceNode",
    "SourceKind",
    "SourceRef",
    "TreeVisitor",
    "is_empty_value",
    "iter_leaves",
    "to_node",
]
