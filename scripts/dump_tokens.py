#!/usr/bin/env python
import sys
from pathlib import Path

from dqdlpy.lexer import Lexer, Token, TokenKind


def format_token(idx: int, token: Token) -> str:
    base = f"[{idx}] kind={token.kind.name} text={token.text!r} start={token.start} end={token.end}"
    if token.kind == TokenKind.ILLEGAL:
        return base + " error=True"
    return base


def main() -> None:
    if len(sys.argv) not in (2, 3):
        print("usage: dump_tokens.py <input.dqdl> [output.txt]", file=sys.stderr)
        raise SystemExit(2)

    input_path = Path(sys.argv[1]).expanduser()
    output_path = Path(sys.argv[2]) if len(sys.argv) == 3 else Path("out") / f"{input_path.stem}_tokens.txt"

    text = input_path.read_text(encoding="utf-8")

    lexer = Lexer(str(input_path), text)
    tokens = lexer.lex()

    output_path.parent.mkdir(parents=True, exist_ok=True)

    with output_path.open("w", encoding="utf-8") as f:
        for idx, token in enumerate(tokens):
            f.write(format_token(idx, token) + "\n")

    print(f"Wrote {len(tokens)} tokens to {output_path}")


if __name__ == "__main__":
    main()
