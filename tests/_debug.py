"""Shared debug printers for lexer/parser/ast tests."""

from __future__ import annotations

import os

from dqdlpy.ast import Comment, CommentGroup, Node, walk
from dqdlpy.diagnostics import Diagnostic
from dqdlpy.lexer import Token, token_text

PRINT_TOKENS = os.getenv("PRINT_TOKENS", "0").lower() in {"1", "true", "yes", "on"}
PRINT_AST = os.getenv("PRINT_AST", "0").lower() in {"1", "true", "yes", "on"}
PRINT_SOURCE = os.getenv("PRINT_SOURCE", "0").lower() in {"1", "true", "yes", "on"}
PRINT_DIAGNOSTICS = os.getenv("PRINT_DIAGNOSTICS", "0").lower() in {
    "1",
    "true",
    "yes",
    "on",
}


def debug_print_source(test_name: str, source: str) -> None:
    if not PRINT_SOURCE:
        return
    print(f"\n===== {test_name} SOURCE =====")
    print(source)


def debug_dump_tokens(test_name: str, source: str, tokens: list[Token]) -> None:
    if not PRINT_TOKENS:
        return
    debug_print_source(test_name, source)
    print(f"\n===== {test_name} TOKENS =====")
    for index, tok in enumerate(tokens):
        text = token_text(source, tok) or tok.text
        print(f"{index:03d} {tok.kind.name:<14} start={tok.start!r} end={tok.end!r} text={text!r}")


def debug_dump_ast(test_name: str, node: Node, source: str | None = None) -> None:
    if not PRINT_AST:
        return
    if source is not None:
        debug_print_source(test_name, source)
    print(f"\n===== {test_name} AST =====")
    print(_dump_ast(node))


def debug_dump_diagnostics(test_name: str, diagnostic: Diagnostic, source: str | None = None) -> None:
    if not PRINT_DIAGNOSTICS:
        return
    if source is not None:
        debug_print_source(test_name, source)
    print(f"===== {test_name} DIAGNOSTICS =====")
    print(f"{diagnostic.code}: {diagnostic.render()}")
    if diagnostic.hint:
        print(f"  hint: {diagnostic.hint}")


def _dump_ast(node: Node) -> str:
    lines: list[str] = []
    for current in walk(node):
        match current:
            case Comment():
                lines.append(f"Comment {current.pos!r} {current.text!r}")
            case CommentGroup():
                lines.append(f"CommentGroup len={len(current)}")
            case _:
                lines.append(f"{type(current).__name__} {current.pos!r}..{current.end!r}")
    return "\n".join(lines)
