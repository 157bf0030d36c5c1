"""Markup grammar routines that build nodes from token trees."""

from rsxtree.diagnostics import Diagnostic, Label
from rsxtree.diagnostics.codes import (
    PARSER_EXPECTED_TOKEN,
    PARSER_INVALID_ATTRIBUTE_VALUE,
    PARSER_INVALID_EMBEDDED_CODE,
    PARSER_MISMATCHED_CLOSE_TAG,
    PARSER_NESTING_TOO_DEEP,
    PARSER_STRAY_CLOSE_TAG,
    PARSER_UNCLOSED_TAG,
    PARSER_UNEXPECTED_TOKEN,
    PARSER_UNTERMINATED_COMMENT,
    DiagnosticSpec,
)
from rsxtree.errors import EmbeddedCodeError, TransformBlockError
from rsxtree.lexer import Delimiter, Group, Ident, Literal, Punct, TokenTree, tokens_source_text
from rsxtree.nodes import (
    Attribute,
    AttributeValue,
    Block,
    BlockName,
    CloseTag,
    Comment,
    Doctype,
    Element,
    Fragment,
    IdentName,
    Node,
    NodeName,
    OpenTag,
    PathName,
    RawText,
    Text,
)
from rsxtree.parser.parse_lists import ParseNodeList
from rsxtree.parser.parse_recovery import NODE_START_SET, ParseRecoveryTokenSet
from rsxtree.parser.parser import Parser
from rsxtree.parser.tag_matcher import CloseMatch, OpenEntry
from rsxtree.text import Span

_NODE_RECOVERY = ParseRecoveryTokenSet(recovery_set=NODE_START_SET)


def parse_root(parser: Parser) -> list[Node]:
    """Parse top-level nodes until input is exhausted."""
    return ParseNodeList(
        is_at_list_end=lambda current: False,
        parse_element=parse_node,
        recover=_recover_node,
    ).parse_list(parser)


def parse_node(parser: Parser) -> Node | None:
    """Dispatch on the next tokens, most specific form first.

    Returns None after discarding an unmatched close tag, and without consuming
    anything at a `<` that starts no known form.
    """
    if parser.at_punct("<"):
        if parser.at_punct("!", 1):
            if parser.at_punct("-", 2) and parser.at_punct("-", 3):
                return parse_comment(parser)
            if _at_doctype_keyword(parser):
                return parse_doctype(parser)
        if parser.at_punct(">", 1):
            return parse_fragment(parser)
        if parser.at_punct("/", 1):
            _parse_stray_close_tag(parser)
            return None
        if parser.at_ident(1) or parser.at_brace_group(1):
            return parse_element(parser)
        return None

    if parser.at_brace_group():
        return parse_block(parser)

    if parser.at_string():
        return parse_quoted_text(parser)

    return parse_text(parser)


def _recover_node(parser: Parser, parsed: Node | None) -> bool:
    if parsed is not None or not parser.at_punct("<") or _at_tag_start(parser):
        return True

    parser.error(_expected_token(parser, "tag name", parser.nth_span(1)))
    parser.bump()
    _NODE_RECOVERY.recover(parser)
    return True


def _at_tag_start(parser: Parser) -> bool:
    if parser.at_punct("!", 1) and (
        (parser.at_punct("-", 2) and parser.at_punct("-", 3)) or _at_doctype_keyword(parser)
    ):
        return True
    return parser.at_punct(">", 1) or parser.at_punct("/", 1) or parser.at_ident(1) or parser.at_brace_group(1)


def _at_doctype_keyword(parser: Parser) -> bool:
    keyword = parser.nth(2)
    return isinstance(keyword, Ident) and keyword.text.lower() == "doctype"


def parse_element(parser: Parser) -> Element:
    lt = parser.bump()
    name = parse_node_name(parser)
    assert name is not None
    attributes, end = _parse_attributes(parser)
    open_tag = OpenTag(lt=lt, name=name, attributes=tuple(attributes), end=tuple(end))

    if not end:
        return Element(open_tag=open_tag, children=(), close_tag=None, self_closing=False)

    if open_tag.is_self_closed:
        return Element(open_tag=open_tag, children=(), close_tag=None, self_closing=True)

    tag_name = str(name)
    if tag_name in parser.options.self_closing_elements:
        return Element(open_tag=open_tag, children=(), close_tag=None, self_closing=True)

    if tag_name in parser.options.raw_text_elements:
        children, close_tag = _parse_raw_children(parser, name, open_tag.span)
        return Element(open_tag=open_tag, children=children, close_tag=close_tag, self_closing=False)

    if _at_nesting_limit(parser):
        children, close_tag = _parse_too_deep(parser, name, open_tag.span)
        return Element(open_tag=open_tag, children=children, close_tag=close_tag, self_closing=False)

    parser.matcher.push(name, open_tag.span)
    children, close_tag = _parse_children(parser)
    return Element(open_tag=open_tag, children=tuple(children), close_tag=close_tag, self_closing=False)


def parse_fragment(parser: Parser) -> Fragment:
    lt = parser.bump()
    gt = parser.bump()
    span = lt.span.cover(gt.span)

    if _at_nesting_limit(parser):
        children, close_tag = _parse_too_deep(parser, None, span)
        return Fragment(lt=lt, gt=gt, children=children, close_tag=close_tag)

    parser.matcher.push(None, span)
    children, close_tag = _parse_children(parser)
    return Fragment(lt=lt, gt=gt, children=tuple(children), close_tag=close_tag)


def _at_nesting_limit(parser: Parser) -> bool:
    return parser.matcher.depth >= parser.options.max_nesting_depth


def _parse_too_deep(
    parser: Parser,
    name: NodeName | None,
    open_span: Span,
) -> tuple[tuple[Node, ...], CloseTag | None]:
    """Content of an element opened past the nesting limit, kept as one raw text node."""
    parser.error(
        _diagnostic(
            PARSER_NESTING_TOO_DEEP,
            open_span,
            message=f"markup is nested deeper than {parser.options.max_nesting_depth} levels",
        )
    )
    return _parse_raw_children(parser, name, open_span, nested=True)


def _parse_children(parser: Parser) -> tuple[list[Node], CloseTag | None]:
    """Parse children of the entry on top of the tag stack until it is closed.

    Returns the close tag when one matched; None when the entry was closed implicitly.
    A close tag for an outer entry is parsed once: it closes every entry above that
    one, then waits in `parser.pending_close_tag` until the outer entry picks it up.
    """
    entry = parser.matcher.top
    children_list = ParseNodeList(
        is_at_list_end=Parser.at_children_end,
        parse_element=parse_node,
        recover=_recover_node,
    )
    children: list[Node] = []

    while True:
        children.extend(children_list.parse_list(parser))

        if parser.pending_close_tag is not None:
            if parser.matcher.top is not entry:
                return children, None
            parser.matcher.pop()
            return children, parser.take_pending_close_tag()

        if parser.is_eof:
            parser.error(_unclosed_tag(parser.matcher.pop(), Label(parser.current_span, "input ends here")))
            return children, None

        checkpoint = parser.checkpoint()
        with parser.speculative_parsing():
            close_tag = parse_close_tag(parser)

        if close_tag.is_malformed:
            # dropped; only `</>` closes a fragment
            parser.commit(checkpoint)
            continue

        match parser.matcher.match_close(close_tag.name):
            case CloseMatch.TOP:
                parser.matcher.pop()
                parser.commit(checkpoint)
                return children, close_tag
            case CloseMatch.DEEPER:
                parser.commit(checkpoint)
                note = Label(close_tag.span, f"closed implicitly by `{_close_text(close_tag)}`")
                while parser.matcher.top.name != close_tag.name:
                    parser.error(_unclosed_tag(parser.matcher.pop(), note))
                parser.defer_close_tag(close_tag)
                return children, None
            case _:
                parser.commit(checkpoint)
                parser.error(_mismatched_close_tag(close_tag, parser.matcher.top))


def _parse_stray_close_tag(parser: Parser) -> None:
    """Close tag at the top level; child lists stop before close tags, so nothing is open here."""
    close_tag = parse_close_tag(parser)
    if not close_tag.is_malformed:
        parser.error(_diagnostic(PARSER_STRAY_CLOSE_TAG, close_tag.span))


def parse_close_tag(parser: Parser) -> CloseTag:
    lt = parser.bump()
    slash = parser.bump()
    if parser.at_punct(">"):
        return CloseTag(lt=lt, slash=slash, name=None, gt=parser.bump())

    name = parse_node_name(parser)
    if name is None:
        parser.error(_expected_token(parser, "tag name or `>`"))
        return CloseTag(lt=lt, slash=slash, name=None, gt=None)

    if parser.at_punct(">"):
        gt = parser.bump()
    else:
        parser.error(_expected_token(parser, "`>`"))
        gt = None
    return CloseTag(lt=lt, slash=slash, name=name, gt=gt)


def _parse_raw_children(
    parser: Parser,
    name: NodeName | None,
    open_span: Span,
    *,
    nested: bool = False,
) -> tuple[tuple[Node, ...], CloseTag | None]:
    """Capture everything up to the matching close tag verbatim, without parsing it as markup.

    With `nested`, open tags of the same name inside the content are counted, so the
    content ends at the close tag that balances them.
    """
    tokens: list[TokenTree] = []
    close_tag: CloseTag | None = None
    level = 0

    while not parser.is_eof:
        if nested and _at_open_tag_named(parser, name):
            level += 1
        elif parser.at_close_tag():
            checkpoint = parser.checkpoint()
            with parser.speculative_parsing():
                candidate = parse_close_tag(parser)
            if candidate.gt is not None and candidate.name == name:
                if level == 0:
                    parser.commit(checkpoint)
                    close_tag = candidate
                    break
                level -= 1
            parser.rewind(checkpoint)
        tokens.append(parser.bump())

    if close_tag is None:
        end = parser.current_span.start
        entry = OpenEntry(name=name, span=open_span)
        parser.error(_unclosed_tag(entry, Label(parser.current_span, "input ends here")))
    else:
        end = close_tag.lt.span.start

    if not tokens:
        return (), close_tag
    context = Span(open_span.end, max(open_span.end, end))
    return (RawText(token_trees=tuple(tokens), context=context, source=parser.source_text),), close_tag


def _at_open_tag_named(parser: Parser, name: NodeName | None) -> bool:
    """Whether a non-self-closed open tag named `name` (a fragment for None) starts here."""
    if name is None:
        return parser.at_punct("<") and parser.at_punct(">", 1)
    if not parser.at_punct("<") or not (parser.at_ident(1) or parser.at_brace_group(1)):
        return False

    checkpoint = parser.checkpoint()
    with parser.speculative_parsing():
        parser.bump()
        candidate = parse_node_name(parser)
        _, end = _parse_attributes(parser)
    parser.rewind(checkpoint)
    return candidate == name and len(end) == 1


def parse_node_name(parser: Parser) -> NodeName | None:
    """`{block}`, `a`, or identifiers joined by `-`, `:` or `::`."""
    if parser.at_brace_group():
        return BlockName(parse_block(parser))

    if not parser.at_ident():
        return None

    segments: list[Ident] = [parser.bump()]
    separators: list[tuple[Punct, ...]] = []

    while True:
        checkpoint = parser.checkpoint()
        separator = _parse_name_separator(parser)
        if separator is None or not parser.at_ident():
            parser.rewind(checkpoint)
            break
        separators.append(separator)
        segments.append(parser.bump())

    if not separators:
        return IdentName(segments[0])
    return PathName(segments=tuple(segments), separators=tuple(separators))


def _parse_name_separator(parser: Parser) -> tuple[Punct, ...] | None:
    if parser.at_punct("-"):
        return (parser.bump(),)
    if parser.at_punct(":"):
        first = parser.bump()
        if first.is_joint and parser.at_punct(":"):
            return (first, parser.bump())
        return (first,)
    return None


def _parse_attributes(parser: Parser) -> tuple[list[Attribute], list[Punct]]:
    """Attributes up to `>` or `/>`; the end list is empty when the tag is cut short."""
    attributes: list[Attribute] = []

    while True:
        if parser.at_punct("/") and parser.at_punct(">", 1):
            return attributes, [parser.bump(), parser.bump()]
        if parser.at_punct(">"):
            return attributes, [parser.bump()]
        if parser.is_eof or parser.at_punct("<"):
            parser.error(_expected_token(parser, "`>` or `/>`"))
            return attributes, []
        if parser.at_brace_group():
            attributes.append(Attribute(key=BlockName(parse_block(parser))))
            continue
        if parser.at_ident():
            attributes.append(parse_attribute(parser))
            continue
        parser.error(_unexpected_token(parser, "inside tag"))
        parser.bump()


def parse_attribute(parser: Parser) -> Attribute:
    key = parse_node_name(parser)
    assert key is not None
    if not parser.at_punct("="):
        return Attribute(key=key)

    eq = parser.bump()

    if isinstance(parser.current, Literal):
        literal = parser.bump()
        return Attribute(key=key, value=_checked_attribute_value(parser, eq, (literal,)))

    if parser.at_brace_group():
        group = parser.bump()
        block = _check_block(parser, group)
        value = AttributeValue(eq=eq, value_tokens=(group,), valid=block.valid, expression=block.expression)
        return Attribute(key=key, value=value)

    if parser.at_ident():
        return Attribute(key=key, value=_checked_attribute_value(parser, eq, _parse_path_expression(parser)))

    parser.error(_diagnostic(PARSER_INVALID_ATTRIBUTE_VALUE, parser.current_span, message="missing attribute value"))
    return Attribute(key=key)


def _parse_path_expression(parser: Parser) -> tuple[TokenTree, ...]:
    """`ident ('.' ident | (...) | [...])*`"""
    tokens: list[TokenTree] = [parser.bump()]
    while True:
        if parser.at_punct(".") and parser.at_ident(1):
            tokens.append(parser.bump())
            tokens.append(parser.bump())
            continue
        current = parser.current
        if isinstance(current, Group) and current.delimiter != Delimiter.BRACE:
            tokens.append(parser.bump())
            continue
        return tuple(tokens)


def _checked_attribute_value(parser: Parser, eq: Punct, tokens: tuple[TokenTree, ...]) -> AttributeValue:
    result = parser.options.expression_parser.parse_expression(tokens, parser.source_text)
    if result.ok and result.consumed == len(tokens):
        return AttributeValue(eq=eq, value_tokens=tokens, valid=True, expression=result.expression)

    detail = result.error or "unexpected tokens after expression"
    span = Span(tokens[0].span.start, tokens[-1].span.end)
    parser.error(_diagnostic(PARSER_INVALID_ATTRIBUTE_VALUE, span, message=f"invalid attribute value: {detail}"))
    return AttributeValue(eq=eq, value_tokens=tokens, valid=False)


def parse_block(parser: Parser) -> Block:
    group = parser.bump()
    return _check_block(parser, group)


def _check_block(parser: Parser, group: Group) -> Block:
    """Run the block transform and the expression parser over a `{...}` group."""
    content: tuple[TokenTree, ...] = group.stream
    source = parser.source_text
    transformed: tuple[TokenTree, ...] | None = None

    transform = parser.options.transform_block
    if transform is not None:
        try:
            replacement = transform.transform_block(content)
        except TransformBlockError as exc:
            return _invalid_block(parser, group, str(exc) or "rejected by block transform", None)
        if replacement is not None:
            transformed = tuple(replacement)
            content = transformed
            # replacement tokens do not map onto the source text
            source = None

    result = parser.options.expression_parser.parse_expression(content, source)
    if result.ok and result.consumed == len(content):
        return Block(group=group, valid=True, expression=result.expression, transformed=transformed)
    return _invalid_block(parser, group, result.error or "unexpected tokens after expression", transformed)


def _invalid_block(
    parser: Parser,
    group: Group,
    detail: str,
    transformed: tuple[TokenTree, ...] | None,
) -> Block:
    diagnostic = _diagnostic(PARSER_INVALID_EMBEDDED_CODE, group.span, message=f"invalid embedded code: {detail}")
    if not parser.options.recover_block and not parser.is_speculative_parsing():
        raise EmbeddedCodeError(diagnostic)
    parser.error(diagnostic)
    return Block(group=group, valid=False, transformed=transformed)


def parse_quoted_text(parser: Parser) -> Text:
    literal = parser.bump()
    value = literal.string_value()
    if value is None:
        value = literal.text
    return Text(value=value, quoted=True, token_trees=(literal,))


def parse_text(parser: Parser) -> Text:
    """Fold contiguous tokens up to the next `<`, `{...}` or string literal into one text node.

    The value is the source slice when the source text is known, otherwise the token
    texts joined without whitespace.
    """
    tokens: list[TokenTree] = [parser.bump()]
    while not parser.is_eof and not parser.at_set(NODE_START_SET):
        tokens.append(parser.bump())

    value = tokens_source_text(tokens, parser.source_text)
    if value is None:
        value = "".join(token.text for token in tokens)
    return Text(value=value, quoted=False, token_trees=tuple(tokens))


def parse_comment(parser: Parser) -> Comment:
    start = tuple(parser.bump() for _ in range(4))
    value_tokens: list[TokenTree] = []
    while not parser.is_eof and not _at_comment_end(parser):
        value_tokens.append(parser.bump())

    if _at_comment_end(parser):
        end = tuple(parser.bump() for _ in range(3))
    else:
        parser.error(_diagnostic(PARSER_UNTERMINATED_COMMENT, Span(start[0].span.start, parser.current_span.end)))
        end = ()

    if len(value_tokens) == 1 and isinstance(value_tokens[0], Literal) and value_tokens[0].is_string:
        value = value_tokens[0].string_value() or ""
    else:
        if value_tokens:
            span = Span(value_tokens[0].span.start, value_tokens[-1].span.end)
            parser.error(_diagnostic(PARSER_EXPECTED_TOKEN, span, message="Expected a string literal as comment value"))
        value = _tokens_text(parser, value_tokens)

    return Comment(start=start, value=value, value_tokens=tuple(value_tokens), end=end)


def _at_comment_end(parser: Parser) -> bool:
    return parser.at_punct("-") and parser.at_punct("-", 1) and parser.at_punct(">", 2)


def parse_doctype(parser: Parser) -> Doctype:
    start = (parser.bump(), parser.bump())
    keyword = parser.bump()
    value_tokens: list[TokenTree] = []
    while not parser.is_eof and not parser.at_punct(">") and not parser.at_punct("<"):
        value_tokens.append(parser.bump())

    if parser.at_punct(">"):
        gt = parser.bump()
    else:
        parser.error(_expected_token(parser, "`>`"))
        gt = None

    return Doctype(
        start=start,
        keyword=keyword,
        value=_tokens_text(parser, value_tokens),
        value_tokens=tuple(value_tokens),
        gt=gt,
    )


def _tokens_text(parser: Parser, tokens: list[TokenTree]) -> str:
    text = tokens_source_text(tokens, parser.source_text)
    if text is None:
        return "".join(token.text for token in tokens)
    return text


def _close_text(close_tag: CloseTag) -> str:
    return "</>" if close_tag.name is None else f"</{close_tag.name}>"


def _diagnostic(
    spec: DiagnosticSpec,
    span: Span,
    *,
    message: str | None = None,
    secondary: tuple[Label, ...] = (),
) -> Diagnostic:
    return Diagnostic(
        code=spec.code,
        message=message or spec.message,
        span=span,
        severity=spec.severity,
        hint=spec.hint,
        category=spec.category,
        secondary=secondary,
    )


def _unclosed_tag(entry: OpenEntry, note: Label) -> Diagnostic:
    return _diagnostic(PARSER_UNCLOSED_TAG, entry.span, secondary=(note,))


def _mismatched_close_tag(close_tag: CloseTag, nearest: OpenEntry) -> Diagnostic:
    return _diagnostic(
        PARSER_MISMATCHED_CLOSE_TAG,
        close_tag.span,
        secondary=(Label(nearest.span, f"nearest open tag is `{nearest.display_name}`"),),
    )


def _expected_token(parser: Parser, expected: str, span: Span | None = None) -> Diagnostic:
    return _diagnostic(
        PARSER_EXPECTED_TOKEN,
        span if span is not None else parser.current_span,
        message=f"Expected {expected}",
    )


def _unexpected_token(parser: Parser, where: str) -> Diagnostic:
    current = parser.current
    text = current.text if current is not None else "end of input"
    return _diagnostic(PARSER_UNEXPECTED_TOKEN, parser.current_span, message=f"Unexpected token `{text}` {where}")
