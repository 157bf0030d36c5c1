#!/usr/bin/env python
import sys
from pathlib import Path

from rsxtree.diagnostics import format_diagnostic
from rsxtree.lexer import Group, Literal, Punct, TokenTree, count_tokens, tokenize


def format_token(idx: int, token: TokenTree, depth: int) -> str:
    indent = "  " * depth
    base = f"{indent}[{idx}] {token.__class__.__name__} span=({token.span.start},{token.span.end})"

    if isinstance(token, Group):
        return base + f" delimiter={token.delimiter} len={len(token.stream)}"
    if isinstance(token, Punct):
        return base + f" char={token.char!r} spacing={token.spacing}"
    if isinstance(token, Literal):
        return base + f" kind={token.kind.name} text={token.text!r} str_value={token.string_value()!r}"
    return base + f" text={token.text!r}"


def write_tokens(f, trees: tuple[TokenTree, ...], depth: int = 0) -> None:
    for idx, token in enumerate(trees):
        f.write(format_token(idx, token, depth) + "\n")
        if isinstance(token, Group):
            write_tokens(f, token.stream, depth + 1)


def main() -> None:
    if len(sys.argv) != 2:
        raise SystemExit("usage: dump_tokens.py <markup file>")

    input_path = Path(sys.argv[1]).expanduser()
    output_path = Path("out") / f"{input_path.stem}_tokens.txt"

    text = input_path.read_text(encoding="utf-8")
    lexed = tokenize(text)

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", encoding="utf-8") as f:
        write_tokens(f, lexed.stream.trees)
        for diagnostic in lexed.diagnostics:
            f.write(format_diagnostic(diagnostic, text) + "\n")

    print(f"Wrote {count_tokens(lexed.stream.trees)} tokens to {output_path}")


if __name__ == "__main__":
    main()
