import threading

import pytest

from dqdlpy.lexer import KEYWORDS, Lexer, Token, TokenKind, dump_tokens, lookup_ident, token_text
from dqdlpy.text import Pos
from tests._debug import debug_dump_tokens
from tests._shared_cases import LEXER_CASES, NOW_ERROR_CASES, LexCase


def lex(text: str) -> list[Token]:
    return Lexer("test", text).lex()


@pytest.mark.parametrize("case", LEXER_CASES, ids=lambda case: case.name)
def test_token_kinds_and_text(case: LexCase) -> None:
    tokens = lex(case.source)
    debug_dump_tokens(case.name, case.source, tokens)

    assert [(tok.kind, tok.text) for tok in tokens] == list(case.tokens)


@pytest.mark.parametrize("source", NOW_ERROR_CASES)
def test_now_requires_adjacent_parens(source: str) -> None:
    tokens = lex(f'ColumnValues "d" > {source}')

    assert tokens[-1].kind == TokenKind.ILLEGAL
    assert tokens[-1].text == "expected '()' after NOW"


def test_now_literal_includes_parens() -> None:
    tokens = lex("now()")

    assert tokens[0].kind == TokenKind.NOW
    assert tokens[0].text == "now()"
    assert tokens[0].end == Pos(5, 1, 6)


def test_stream_ends_with_exactly_one_terminal_token() -> None:
    for case in LEXER_CASES:
        tokens = lex(case.source)
        terminals = [tok for tok in tokens if tok.kind.is_terminal]
        assert terminals == [tokens[-1]], case.name


@pytest.mark.parametrize(
    "case",
    [case for case in LEXER_CASES if case.tokens[-1][0] == TokenKind.EOF],
    ids=lambda case: case.name,
)
def test_tokens_reconstruct_source_between_whitespace(case: LexCase) -> None:
    tokens = lex(case.source)

    cursor = 0
    for tok in tokens:
        gap = case.source[cursor : tok.start.index]
        assert gap.strip(" \t\n") == ""
        assert token_text(case.source, tok) == ("" if tok.kind == TokenKind.EOF else tok.text)
        cursor = tok.end.index
    assert cursor == len(case.source)


def test_positions_on_single_line() -> None:
    tokens = lex('IsUnique "col-A"')

    assert tokens[0].start == Pos(0, 1, 1)
    assert tokens[0].end == Pos(8, 1, 9)
    assert tokens[1].start == Pos(9, 1, 10)
    assert tokens[1].end == Pos(16, 1, 17)


def test_positions_across_lines() -> None:
    tokens = lex("a\n  b\n")

    assert tokens[0].start == Pos(0, 1, 1)
    assert tokens[1].start == Pos(4, 2, 3)
    assert tokens[2].kind == TokenKind.EOF
    assert tokens[2].start == Pos(6, 3, 1)


def test_backup_across_newline_restores_column() -> None:
    # The comment scanner reads the newline and then steps back over it.
    tokens = lex("# c\nx")

    assert tokens[0].kind == TokenKind.COMMENT
    assert tokens[0].end == Pos(3, 1, 4)
    assert tokens[1].start == Pos(4, 2, 1)


def test_eof_token_is_zero_width() -> None:
    tokens = lex("abc")

    assert tokens[-1].start == tokens[-1].end == Pos(3, 1, 4)


def test_index_counts_code_points() -> None:
    tokens = lex('IsUnique "é" "x"')

    assert tokens[1].text == '"é"'
    assert tokens[2].start == Pos(13, 1, 14)


def test_number_followed_by_letter_is_invalid() -> None:
    tokens = lex("RowCount > 10days")

    assert tokens[-1].kind == TokenKind.ILLEGAL
    assert tokens[-1].text == "invalid number"


def test_error_token_starts_at_offending_lexeme() -> None:
    tokens = lex('IsUnique "col-A')

    assert tokens[-1].kind == TokenKind.ILLEGAL
    assert tokens[-1].start == Pos(9, 1, 10)


def test_preset_cancel_yields_single_canceled_token() -> None:
    cancel = threading.Event()
    cancel.set()

    tokens = list(Lexer("test", 'IsUnique "col-A"').tokens(cancel))

    assert [(tok.kind, tok.text) for tok in tokens] == [(TokenKind.ILLEGAL, "canceled")]


def test_cancel_between_scan_steps_stops_lexing() -> None:
    cancel = threading.Event()
    stream = Lexer("test", 'IsUnique "col-A" "col-B"').tokens(cancel)

    first = next(stream)
    cancel.set()
    rest = list(stream)

    assert first.kind == TokenKind.IDENT
    assert [(tok.kind, tok.text) for tok in rest] == [(TokenKind.ILLEGAL, "canceled")]


def test_lexer_runs_only_once() -> None:
    lexer = Lexer("test", "abc")
    lexer.lex()

    with pytest.raises(RuntimeError):
        lexer.lex()


def test_keyword_lookup() -> None:
    assert lookup_ident("between") == TokenKind.BETWEEN
    assert lookup_ident("Rules") == TokenKind.RULES
    assert lookup_ident("rules") == TokenKind.IDENT
    assert lookup_ident("IsUnique") == TokenKind.IDENT
    assert set(KEYWORDS.values()) == {
        TokenKind.BETWEEN,
        TokenKind.AND,
        TokenKind.OR,
        TokenKind.IN,
        TokenKind.MATCHES,
        TokenKind.NOW,
        TokenKind.HOURS,
        TokenKind.DAYS,
        TokenKind.WITH,
        TokenKind.THRESHOLD,
        TokenKind.TRUE,
        TokenKind.FALSE,
        TokenKind.RULES,
    }


def test_token_kind_display() -> None:
    assert TokenKind.NOW.display == "now()"
    assert TokenKind.RIGHT_BRACKET.display == "]"
    assert TokenKind.IDENT.display == "IDENT"
    assert TokenKind.GREATER_EQUAL.display == ">="


def test_token_kind_groups() -> None:
    assert TokenKind.BETWEEN.is_expression_start
    assert TokenKind.LESS_EQUAL.is_expression_start
    assert not TokenKind.WITH.is_expression_start
    assert TokenKind.NOW.is_parameter_acceptable
    assert not TokenKind.IDENT.is_parameter_acceptable
    assert TokenKind.EQUAL.is_comparison
    assert not TokenKind.IN.is_comparison


def test_dump_tokens_prints_one_line_per_token(capsys: pytest.CaptureFixture[str]) -> None:
    dump_tokens(lex("RowCount > 10"))

    lines = capsys.readouterr().out.splitlines()
    assert len(lines) == 4
    assert lines[0].startswith("000 IDENT")
    assert "text='RowCount'" in lines[0]
