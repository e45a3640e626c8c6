"""High-level parse entrypoints for DQDL source text."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager
from typing import Protocol

from dqdlpy.ast import File, RuleDecl, Ruleset
from dqdlpy.lexer import LexMode, Lexer, TokenStream
from dqdlpy.parser import grammar
from dqdlpy.parser.comments import CommentBuffer
from dqdlpy.parser.options import ParserOptions
from dqdlpy.parser.parser import Parser
from dqdlpy.parser.token_source import TokenSource

logger = logging.getLogger(__name__)


class SupportsRead(Protocol):
    def read(self) -> str | bytes: ...


type FileSource = str | bytes | SupportsRead


def _resolve_options(
    options: ParserOptions | None,
    mode: LexMode | None,
) -> ParserOptions:
    if mode is not None and options is not None:
        raise ValueError("Pass either options or mode, not both")

    if options is not None:
        return options

    if mode is not None:
        return ParserOptions.for_mode(mode)

    return ParserOptions()


@contextmanager
def _open_parser(name: str, text: str, options: ParserOptions) -> Iterator[Parser]:
    """Run one parse session over `text`.

    The lexer is always drained and joined before returning. On failure it is
    cancelled first so it stops scanning the rest of the input.
    """
    stream = TokenStream(Lexer(name, text), options.lex_mode).start()
    parser = Parser(TokenSource(stream, snippet_width=options.snippet_width), options=options)
    try:
        yield parser
    except Exception as exc:
        logger.debug("Parse of %s failed: %s", name, exc)
        stream.cancel()
        raise
    finally:
        stream.close()


def parse_rule(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: LexMode | None = None,
) -> RuleDecl:
    """Parse a single rule, e.g. `ColumnValues "age" between 0 and 120`."""
    resolved_options = _resolve_options(options=options, mode=mode)
    name = resolved_options.name or "rule"
    with _open_parser(name, text, resolved_options) as parser:
        return grammar.parse_rule(parser, CommentBuffer([]), in_ruleset=False)


def parse_ruleset(
    text: str,
    options: ParserOptions | None = None,
    *,
    mode: LexMode | None = None,
) -> Ruleset:
    """Parse one `Rules = [ ... ]` block."""
    resolved_options = _resolve_options(options=options, mode=mode)
    name = resolved_options.name or "ruleset"
    with _open_parser(name, text, resolved_options) as parser:
        return grammar.parse_ruleset(parser, [])


def parse_file(
    name: str,
    source: FileSource,
    options: ParserOptions | None = None,
    *,
    mode: LexMode | None = None,
) -> File:
    """Parse every ruleset in `source`.

    `source` is text, UTF-8 bytes, or any object with a `read()` method returning
    either. `name` ends up as `File.filename`.
    """
    resolved_options = _resolve_options(options=options, mode=mode)
    text = _read_source(source)
    logger.debug("Parsing %s (%d chars)", name, len(text))
    with _open_parser(name, text, resolved_options) as parser:
        parsed = grammar.parse_file(parser, name)
    logger.debug("Parsed %d ruleset(s) from %s", len(parsed.rulesets), name)
    return parsed


def _read_source(source: FileSource) -> str:
    if isinstance(source, str):
        return source
    if isinstance(source, bytes):
        return source.decode("utf-8")
    data = source.read()
    if isinstance(data, bytes):
        return data.decode("utf-8")
    return data
