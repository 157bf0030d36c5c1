"""Shared debug printers for lexer/parser tests."""

from __future__ import annotations

import os
from collections.abc import Sequence

from rsxtree.diagnostics import Diagnostic, format_diagnostic
from rsxtree.lexer import Group, Punct, TokenTree
from rsxtree.nodes import Attribute, Block, Comment, Doctype, Element, Fragment, Node, RawText, Text

_TRUTHY = {"1", "true", "yes", "on"}

PRINT_TOKENS = os.getenv("PRINT_TOKENS", "0").lower() in _TRUTHY
PRINT_TREE = os.getenv("PRINT_TREE", "0").lower() in _TRUTHY
PRINT_SOURCE = os.getenv("PRINT_SOURCE", "0").lower() in _TRUTHY
PRINT_DIAGNOSTICS = os.getenv("PRINT_DIAGNOSTICS", "0").lower() in _TRUTHY


def debug_print_source(test_name: str, source: str) -> None:
    if not PRINT_SOURCE:
        return
    print(f"\n===== {test_name} SOURCE =====")
    print(source)


def debug_dump_tokens(test_name: str, source: str, trees: Sequence[TokenTree]) -> None:
    if not PRINT_TOKENS:
        return
    debug_print_source(test_name, source)
    print(f"\n===== {test_name} TOKENS =====")
    print(_dump_tokens(trees))


def debug_dump_tree(test_name: str, source: str, nodes: Sequence[Node]) -> None:
    if not PRINT_TREE:
        return
    if not PRINT_SOURCE:
        print(f"\n===== {test_name} SOURCE =====")
        print(source)
    else:
        debug_print_source(test_name, source)
    print(f"===== {test_name} TREE =====")
    print(_dump_tree(nodes))


def debug_dump_diagnostics(test_name: str, diagnostics: list[Diagnostic], source: str | None = None) -> None:
    if not PRINT_DIAGNOSTICS:
        return
    if source is not None:
        debug_print_source(test_name, source)
    print(f"===== {test_name} DIAGNOSTICS =====")
    if not diagnostics:
        print("(none)")
        return
    for diagnostic in diagnostics:
        print(format_diagnostic(diagnostic, source))


def _dump_tokens(trees: Sequence[TokenTree]) -> str:
    lines: list[str] = []

    def walk(current: Sequence[TokenTree], depth: int) -> None:
        indent = "  " * depth
        for index, tree in enumerate(current):
            if isinstance(tree, Group):
                lines.append(f"{indent}{index:03d} Group({tree.delimiter}) span={tree.span.as_tuple()}")
                walk(tree.stream, depth + 1)
                continue
            spacing = f" spacing={tree.spacing}" if isinstance(tree, Punct) else ""
            lines.append(f"{indent}{index:03d} {type(tree).__name__:<8} span={tree.span.as_tuple()} text={tree.text!r}{spacing}")

    walk(trees, 0)
    return "\n".join(lines)


def _dump_tree(nodes: Sequence[Node]) -> str:
    lines: list[str] = []

    def walk(node: Node, depth: int) -> None:
        indent = "  " * depth
        match node:
            case Element():
                flags = " self_closing" if node.self_closing else ""
                closed = "" if node.close_tag is not None or node.self_closing else " (implicitly closed)"
                lines.append(f"{indent}Element <{node.name}>{flags}{closed}")
                for attribute in node.attributes:
                    lines.append(f"{indent}  {_format_attribute(attribute)}")
                for child in node.children:
                    walk(child, depth + 1)
            case Fragment():
                lines.append(f"{indent}Fragment")
                for child in node.children:
                    walk(child, depth + 1)
            case Text():
                lines.append(f"{indent}Text quoted={node.quoted} value={node.value!r}")
            case RawText():
                lines.append(f"{indent}RawText {node.to_string_best()!r}")
            case Block():
                lines.append(f"{indent}Block valid={node.valid} {node.group.text}")
            case Comment():
                lines.append(f"{indent}Comment {node.value!r}")
            case Doctype():
                lines.append(f"{indent}Doctype {node.value!r}")

    for node in nodes:
        walk(node, 0)
    return "\n".join(lines)


def _format_attribute(attribute: Attribute) -> str:
    if attribute.value is None:
        return f"@{attribute.key}"
    value = " ".join(token.text for token in attribute.value.value_tokens)
    return f"@{attribute.key}={value} valid={attribute.value.valid}"
