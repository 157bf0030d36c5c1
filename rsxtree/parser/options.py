"""Parser modes and configuration options."""

from collections.abc import Iterable
from dataclasses import dataclass, field, replace
from enum import StrEnum

from rsxtree.nodes import NodeType
from rsxtree.parser.expression import BlockTransform, ExpressionParser, PythonExpressionParser

HTML_VOID_ELEMENTS: frozenset[str] = frozenset(
    {
        "area",
        "base",
        "br",
        "col",
        "embed",
        "hr",
        "img",
        "input",
        "link",
        "meta",
        "param",
        "source",
        "track",
        "wbr",
    }
)

HTML_RAW_TEXT_ELEMENTS: frozenset[str] = frozenset({"script", "style"})


class ParseMode(StrEnum):
    """Top-level parser behavior profile."""

    RECOVER = "recover"
    STRICT = "strict"


@dataclass(frozen=True, slots=True)
class ParserOptions:
    """Grammar configuration and recovery behavior, resolved once per parse call.

    Element names in `raw_text_elements` and `self_closing_elements` are compared
    against the rendered tag name, so path names are written as `my-tag` or `a::b`.
    """

    mode: ParseMode = ParseMode.RECOVER
    raw_text_elements: frozenset[str] = frozenset()
    self_closing_elements: frozenset[str] = frozenset()
    max_top_level_nodes: int | None = None
    max_nesting_depth: int = 128
    top_level_node_type: frozenset[NodeType] | None = None
    recover_block: bool = True
    flat_tree: bool = False
    transform_block: BlockTransform | None = field(default=None, compare=False)
    expression_parser: ExpressionParser = field(default_factory=PythonExpressionParser, compare=False)

    def __post_init__(self) -> None:
        if self.max_top_level_nodes is not None and self.max_top_level_nodes < 0:
            raise ValueError("max_top_level_nodes must not be negative")
        if self.max_nesting_depth < 1:
            raise ValueError("max_nesting_depth must be at least 1")

    @property
    def is_strict(self) -> bool:
        return self.mode == ParseMode.STRICT

    @staticmethod
    def for_mode(mode: ParseMode) -> "ParserOptions":
        if mode == ParseMode.STRICT:
            return ParserOptions(mode=mode, recover_block=False)
        return ParserOptions(mode=mode)

    @staticmethod
    def html() -> "ParserOptions":
        return ParserOptions(
            raw_text_elements=HTML_RAW_TEXT_ELEMENTS,
            self_closing_elements=HTML_VOID_ELEMENTS,
        )

    def with_mode(self, mode: ParseMode) -> "ParserOptions":
        return replace(self, mode=mode)

    def with_raw_text_elements(self, names: Iterable[str]) -> "ParserOptions":
        return replace(self, raw_text_elements=frozenset(names))

    def with_self_closing_elements(self, names: Iterable[str]) -> "ParserOptions":
        return replace(self, self_closing_elements=frozenset(names))

    def with_max_top_level_nodes(self, limit: int | None) -> "ParserOptions":
        return replace(self, max_top_level_nodes=limit)

    def with_max_nesting_depth(self, depth: int) -> "ParserOptions":
        return replace(self, max_nesting_depth=depth)

    def with_top_level_node_type(self, *node_types: NodeType) -> "ParserOptions":
        return replace(self, top_level_node_type=frozenset(node_types) if node_types else None)

    def with_recover_block(self, recover: bool) -> "ParserOptions":
        return replace(self, recover_block=recover)

    def with_transform_block(self, transform: BlockTransform | None) -> "ParserOptions":
        return replace(self, transform_block=transform)

    def with_expression_parser(self, expression_parser: ExpressionParser) -> "ParserOptions":
        return replace(self, expression_parser=expression_parser)

    def with_flat_tree(self, flat_tree: bool = True) -> "ParserOptions":
        return replace(self, flat_tree=flat_tree)
