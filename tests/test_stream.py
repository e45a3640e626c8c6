import threading

import pytest

from dqdlpy.lexer import LexMode, Lexer, TokenKind, TokenStream

SOURCE = 'Rules = [ IsUnique "col-A", IsComplete "col-A" ]'


def _lexer_threads(name: str) -> list[threading.Thread]:
    return [thread for thread in threading.enumerate() if thread.name == f"dqdl-lexer-{name}" and thread.is_alive()]


@pytest.mark.parametrize("mode", list(LexMode))
def test_stream_delivers_tokens_in_source_order(mode: LexMode) -> None:
    expected = Lexer("expected", SOURCE).lex()

    stream = TokenStream(Lexer("ordered", SOURCE), mode).start()
    received = list(stream)
    stream.close()

    assert received == expected
    assert stream.is_closed
    assert stream.next() is None


@pytest.mark.parametrize("mode", list(LexMode))
def test_drain_discards_up_to_eof(mode: LexMode) -> None:
    stream = TokenStream(Lexer("drain", SOURCE), mode).start()

    first = stream.next()
    last = stream.drain()

    assert first is not None and first.kind == TokenKind.RULES
    assert last is not None and last.kind == TokenKind.EOF
    stream.close()


def test_close_joins_producer_thread() -> None:
    stream = TokenStream(Lexer("joined", SOURCE), LexMode.THREADED).start()
    stream.next()

    stream.close()

    assert stream.is_closed
    assert _lexer_threads("joined") == []


def test_cancel_threaded_stream_terminates() -> None:
    stream = TokenStream(Lexer("cancelled", SOURCE * 50), LexMode.THREADED).start()
    stream.next()

    stream.cancel()
    rest = list(stream)
    stream.close()

    assert stream.is_cancelled
    assert all(not tok.kind.is_terminal for tok in rest[:-1])
    assert _lexer_threads("cancelled") == []


def test_cancel_inline_stream_emits_canceled() -> None:
    stream = TokenStream(Lexer("inline", SOURCE), LexMode.INLINE).start()
    stream.next()

    stream.cancel()
    rest = list(stream)

    assert [(tok.kind, tok.text) for tok in rest] == [(TokenKind.ILLEGAL, "canceled")]


def test_next_before_start_raises() -> None:
    stream = TokenStream(Lexer("unstarted", SOURCE))

    with pytest.raises(RuntimeError):
        stream.next()


def test_start_twice_raises() -> None:
    stream = TokenStream(Lexer("twice", SOURCE), LexMode.INLINE).start()

    with pytest.raises(RuntimeError):
        stream.start()
