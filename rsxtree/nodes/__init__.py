"""Node tree produced by the parser."""

from rsxtree.nodes.flatten import FlatNode, flatten, walk
from rsxtree.nodes.model import (
    Attribute,
    AttributeValue,
    Block,
    CloseTag,
    Comment,
    Doctype,
    Element,
    Fragment,
    Node,
    NodeType,
    OpenTag,
    RawText,
    Text,
    node_children,
    to_token_trees,
)
from rsxtree.nodes.name import BlockName, IdentName, NodeName, PathName

__all__ = [
    "Attribute",
    "AttributeValue",
    "Block",
    "BlockName",
    "CloseTag",
    "Comment",
    "Doctype",
    "Element",
    "FlatNode",
    "Fragment",
    "IdentName",
    "Node",
    "NodeName",
    "NodeType",
    "OpenTag",
    "PathName",
    "RawText",
    "Text",
    "flatten",
    "node_children",
    "to_token_trees",
    "walk",
]
