import pytest

from rsxtree.diagnostics import (
    PARSER_EXPECTED_TOKEN,
    PARSER_INVALID_ATTRIBUTE_VALUE,
    PARSER_INVALID_EMBEDDED_CODE,
    PARSER_MISMATCHED_CLOSE_TAG,
    PARSER_NESTING_TOO_DEEP,
    PARSER_STRAY_CLOSE_TAG,
    PARSER_UNCLOSED_TAG,
    PARSER_UNEXPECTED_TOKEN,
    PARSER_UNTERMINATED_COMMENT,
)
from rsxtree.errors import EmbeddedCodeError, RsxParseError
from rsxtree.lexer import same_tokens, tokenize
from rsxtree.nodes import Block, Comment, Element, Fragment, RawText, Text
from rsxtree.parser import ExpressionResult, ParseMode, ParserOptions, parse
from rsxtree.pipeline import RsxParseResult

from tests._debug import debug_dump_diagnostics, debug_dump_tree
from tests._shared_cases import RECOVERY_CASES, RsxCase, case_id, case_source


def _parse(name: str, source: str, options: ParserOptions | None = None) -> RsxParseResult:
    result = parse(source, options)
    debug_dump_tree(name, source, result.nodes)
    debug_dump_diagnostics(name, result.diagnostics, source)
    return result


def _codes(result: RsxParseResult) -> list[str]:
    return [diagnostic.code for diagnostic in result.diagnostics]


@pytest.mark.parametrize("case", RECOVERY_CASES, ids=case_id)
def test_recovery_cases_report_errors_without_aborting(case: RsxCase) -> None:
    result = _parse(case.name, case.source)
    assert result.has_errors
    assert result.nodes


@pytest.mark.parametrize("case", RECOVERY_CASES, ids=case_id)
def test_recovery_cases_abort_in_strict_mode(case: RsxCase) -> None:
    with pytest.raises(RsxParseError):
        parse(case.source, mode=ParseMode.STRICT)


def test_mismatched_close_tag() -> None:
    result = _parse("mismatched_close_tag", case_source("mismatched_close_tag"))

    assert _codes(result).count(PARSER_MISMATCHED_CLOSE_TAG.code) == 1
    assert _codes(result) == [PARSER_MISMATCHED_CLOSE_TAG.code, PARSER_UNCLOSED_TAG.code]

    (div,) = result.nodes
    assert str(div.name) == "div"
    assert [child.value for child in div.children] == ["1"]
    assert div.close_tag is None

    mismatched = result.diagnostics[0]
    assert mismatched.message == "wrong close tag found"
    assert mismatched.span.as_tuple() == (8, 12)
    (note,) = mismatched.secondary
    assert note.span == div.open_tag.span


def test_mismatched_close_tag_is_discarded_and_parsing_continues() -> None:
    result = _parse("mismatched_then_close", '<div>"1"</x>"2"</div>')
    assert _codes(result) == [PARSER_MISMATCHED_CLOSE_TAG.code]
    (div,) = result.nodes
    assert [child.value for child in div.children] == ["1", "2"]
    assert div.close_tag is not None


def test_mismatched_close_tag_inside_fragment_points_at_fragment() -> None:
    result = _parse("mismatched_fragment", '<>"a"</div></>')
    assert _codes(result) == [PARSER_MISMATCHED_CLOSE_TAG.code]
    assert "`<>`" in result.diagnostics[0].secondary[0].message


def test_unclosed_tag() -> None:
    result = _parse("unclosed_tag", case_source("unclosed_tag"))
    assert _codes(result) == [PARSER_UNCLOSED_TAG.code]
    assert result.diagnostics[0].message == "open tag has no corresponding close tag and is not self-closing"
    (div,) = result.nodes
    assert isinstance(div, Element)
    assert str(div.name) == "div"
    assert div.close_tag is None


def test_every_open_entry_is_reported_at_end_of_input() -> None:
    result = _parse("nested_unclosed", "<a><b><>")
    assert _codes(result) == [PARSER_UNCLOSED_TAG.code] * 3
    (a,) = result.nodes
    (b,) = a.children
    (fragment,) = b.children
    assert fragment.children == ()


def test_close_tag_of_outer_element_closes_inner_elements() -> None:
    result = _parse("implicitly_closed_child", case_source("implicitly_closed_child"))
    assert _codes(result) == [PARSER_UNCLOSED_TAG.code]

    (a,) = result.nodes
    (b,) = a.children
    assert a.close_tag is not None
    assert b.close_tag is None
    assert [child.value for child in b.children] == ["x"]

    unclosed = result.diagnostics[0]
    assert unclosed.span == b.open_tag.span
    assert unclosed.secondary[0].span == a.close_tag.span


def test_one_unclosed_diagnostic_per_intervening_entry() -> None:
    result = _parse("two_intervening", "<a><b><c></a>")
    assert _codes(result) == [PARSER_UNCLOSED_TAG.code, PARSER_UNCLOSED_TAG.code]
    assert [d.span.start for d in result.diagnostics] == [6, 3]
    assert result.nodes[0].close_tag is not None


def test_stray_close_tag() -> None:
    result = _parse("stray_close_tag", case_source("stray_close_tag"))
    assert _codes(result) == [PARSER_STRAY_CLOSE_TAG.code]
    assert result.diagnostics[0].message == "closing tag with no corresponding open tag"
    (text,) = result.nodes
    assert text.value == "a"


def test_stray_close_tag_keeps_following_text() -> None:
    result = _parse("stray_then_text", "</p> after")
    assert _codes(result) == [PARSER_STRAY_CLOSE_TAG.code]
    assert [node.value for node in result.nodes] == ["after"]


def test_invalid_block_is_kept_as_invalid_block() -> None:
    result = _parse("invalid_block", case_source("invalid_block"))
    assert _codes(result) == [PARSER_INVALID_EMBEDDED_CODE.code]
    (block,) = result.nodes[0].children
    assert isinstance(block, Block)
    assert block.valid is False
    assert block.expression is None
    assert result.diagnostics[0].span == block.span


def test_invalid_block_raises_without_block_recovery() -> None:
    options = ParserOptions(recover_block=False)
    with pytest.raises(EmbeddedCodeError) as excinfo:
        parse(case_source("invalid_block"), options)
    assert excinfo.value.diagnostic.code == PARSER_INVALID_EMBEDDED_CODE.code


def test_strict_mode_raises_embedded_code_error_for_invalid_block() -> None:
    with pytest.raises(EmbeddedCodeError):
        parse(case_source("invalid_block"), mode=ParseMode.STRICT)


def test_invalid_block_attribute_value() -> None:
    result = _parse("invalid_block_attribute", "<a href={1 +} />")
    assert _codes(result) == [PARSER_INVALID_EMBEDDED_CODE.code]
    (href,) = result.nodes[0].attributes
    assert href.value.valid is False


def test_invalid_bare_attribute_value() -> None:
    result = _parse("invalid_bare_attribute", "<a href=if />")
    assert _codes(result) == [PARSER_INVALID_ATTRIBUTE_VALUE.code]
    (href,) = result.nodes[0].attributes
    assert href.value.valid is False


def test_missing_attribute_value_becomes_boolean_attribute() -> None:
    result = _parse("missing_attribute_value", case_source("missing_attribute_value"))
    assert _codes(result) == [PARSER_INVALID_ATTRIBUTE_VALUE.code]
    assert result.diagnostics[0].message == "missing attribute value"
    (href,) = result.nodes[0].attributes
    assert href.value is None
    assert [child.value for child in result.nodes[0].children] == ["x"]


def test_unexpected_token_inside_tag_is_skipped() -> None:
    result = _parse("unexpected_in_tag", '<a @ b>"x"</a>')
    assert _codes(result) == [PARSER_UNEXPECTED_TOKEN.code]
    assert [str(attribute.key) for attribute in result.nodes[0].attributes] == ["b"]


def test_open_tag_cut_short_by_end_of_input() -> None:
    result = _parse("cut_short", "<a b")
    assert _codes(result) == [PARSER_EXPECTED_TOKEN.code]
    (a,) = result.nodes
    assert a.open_tag.end == ()
    assert a.children == ()


def test_open_tag_cut_short_by_next_tag() -> None:
    result = _parse("cut_by_tag", "<a <b/>")
    assert _codes(result) == [PARSER_EXPECTED_TOKEN.code]
    assert [str(node.name) for node in result.nodes] == ["a", "b"]


def test_close_tag_without_gt_still_closes() -> None:
    result = _parse("close_without_gt", "<a></a")
    assert _codes(result) == [PARSER_EXPECTED_TOKEN.code]
    (a,) = result.nodes
    assert a.close_tag is not None
    assert a.close_tag.gt is None


def test_close_tag_without_gt_aborts_strict_mode() -> None:
    with pytest.raises(RsxParseError) as excinfo:
        parse("<a></a", mode=ParseMode.STRICT)
    assert excinfo.value.diagnostic.code == PARSER_EXPECTED_TOKEN.code


def test_unterminated_comment() -> None:
    result = _parse("unterminated_comment", case_source("unterminated_comment"))
    assert _codes(result) == [PARSER_UNTERMINATED_COMMENT.code]
    (comment,) = result.nodes
    assert isinstance(comment, Comment)
    assert comment.value == "x"
    assert comment.end == ()


def test_comment_without_string_literal() -> None:
    result = _parse("comment_without_string", "<!-- plain words -->")
    assert _codes(result) == [PARSER_EXPECTED_TOKEN.code]
    assert result.nodes[0].value == "plain words"


def test_bad_tag_start_skips_to_next_node() -> None:
    result = _parse("bad_tag_start", case_source("bad_tag_start"))
    assert _codes(result) == [PARSER_EXPECTED_TOKEN.code]
    (text,) = result.nodes
    assert isinstance(text, Text)
    assert text.value == "x"


def test_strict_mode_accepts_clean_input() -> None:
    result = parse(case_source("hello_world"), mode=ParseMode.STRICT)
    assert result.diagnostics == []


def test_strict_mode_reports_lexer_errors() -> None:
    with pytest.raises(RsxParseError) as excinfo:
        parse('<a>"oops</a>', mode=ParseMode.STRICT)
    assert excinfo.value.diagnostic.category == "lexer"


def test_deep_nesting_stops_descending_at_the_limit() -> None:
    depth = 300
    source = "<a>" * depth + "</a>" * depth
    result = parse(source)

    assert _codes(result) == [PARSER_NESTING_TOO_DEEP.code]
    assert same_tokens(result.to_token_trees(), tokenize(source).stream.trees)

    node = result.nodes[0]
    for _ in range(ParserOptions().max_nesting_depth - 1):
        assert node.close_tag is not None
        (node,) = node.children
    (too_deep,) = node.children
    assert result.diagnostics[0].span == too_deep.open_tag.span
    assert too_deep.close_tag is not None
    (raw,) = too_deep.children
    assert isinstance(raw, RawText)
    assert raw.to_source_text(True).count("<a>") == depth - ParserOptions().max_nesting_depth - 1


def test_nesting_limit_is_configurable() -> None:
    options = ParserOptions().with_max_nesting_depth(1)
    result = _parse("nesting_limit", '<a><b><c/>"x"</b></a>', options)

    assert _codes(result) == [PARSER_NESTING_TOO_DEEP.code]
    (a,) = result.nodes
    assert a.close_tag is not None
    (b,) = a.children
    assert str(b.name) == "b"
    assert b.close_tag is not None
    (raw,) = b.children
    assert raw.to_source_text(True) == '<c/>"x"'


def test_nesting_limit_balances_fragments() -> None:
    options = ParserOptions(max_nesting_depth=1)
    result = _parse("nesting_limit_fragments", '<><><>"x"</></></>', options)

    assert _codes(result) == [PARSER_NESTING_TOO_DEEP.code]
    (outer,) = result.nodes
    assert outer.close_tag is not None
    (inner,) = outer.children
    assert isinstance(inner, Fragment)
    assert inner.close_tag is not None
    assert inner.children[0].to_source_text(True) == '<>"x"</>'


def test_deep_nesting_aborts_strict_mode() -> None:
    options = ParserOptions(mode=ParseMode.STRICT, max_nesting_depth=2)
    with pytest.raises(RsxParseError) as excinfo:
        parse("<a><a><a></a></a></a>", options)
    assert excinfo.value.diagnostic.code == PARSER_NESTING_TOO_DEEP.code


def test_close_tag_without_name_does_not_close_fragment() -> None:
    result = _parse("nameless_close_in_fragment", '<>"x"</5>"y"</>')

    assert _codes(result) == [PARSER_EXPECTED_TOKEN.code]
    assert result.diagnostics[0].message == "Expected tag name or `>`"
    (fragment,) = result.nodes
    assert isinstance(fragment, Fragment)
    assert fragment.close_tag is not None
    assert [child.value for child in fragment.children] == ["x", "5>", "y"]


def test_dangling_close_tag_start_leaves_fragment_open() -> None:
    result = _parse("dangling_close_in_fragment", '<>"x"</')
    assert _codes(result) == [PARSER_EXPECTED_TOKEN.code, PARSER_UNCLOSED_TAG.code]
    (fragment,) = result.nodes
    assert fragment.close_tag is None


def test_close_tag_without_name_at_top_level_is_not_stray() -> None:
    result = _parse("nameless_close_top_level", '</5>"y"')
    assert _codes(result) == [PARSER_EXPECTED_TOKEN.code]


def test_invalid_block_in_close_tag_raises_without_block_recovery() -> None:
    options = ParserOptions().with_recover_block(False)
    with pytest.raises(EmbeddedCodeError) as excinfo:
        parse('<{a}>"x"</{a +}>', options)
    assert excinfo.value.diagnostic.code == PARSER_INVALID_EMBEDDED_CODE.code


def test_invalid_block_in_close_tag_is_reported_with_block_recovery() -> None:
    result = _parse("invalid_block_close_tag", '<{a}>"x"</{a +}>')
    assert _codes(result) == [
        PARSER_INVALID_EMBEDDED_CODE.code,
        PARSER_MISMATCHED_CLOSE_TAG.code,
        PARSER_UNCLOSED_TAG.code,
    ]


def test_block_holding_only_a_comment_is_invalid() -> None:
    result = _parse("comment_only_block", "<div>{# nothing}</div>")
    assert _codes(result) == [PARSER_INVALID_EMBEDDED_CODE.code]
    (block,) = result.nodes[0].children
    assert block.valid is False


class _CountingExpressionParser:
    def __init__(self) -> None:
        self.calls = 0

    def parse_expression(self, tokens, source) -> ExpressionResult:
        self.calls += 1
        return ExpressionResult(expression=None, consumed=len(tuple(tokens)))


def test_outer_close_tag_is_parsed_once_for_all_intervening_entries() -> None:
    counting = _CountingExpressionParser()
    options = ParserOptions().with_expression_parser(counting)
    result = _parse("outer_close_parsed_once", "<{x}><b><c></{x}>", options)

    assert _codes(result) == [PARSER_UNCLOSED_TAG.code] * 2
    # one call for the open tag name, one for the close tag name
    assert counting.calls == 2

    (x,) = result.nodes
    assert x.close_tag is not None
    assert {d.secondary[0].span for d in result.diagnostics} == {x.close_tag.span}
