"""Parser infrastructure (token source + recursive-descent grammar + entrypoints)."""

from dqdlpy.parser.comments import CommentBuffer
from dqdlpy.parser.dqdl import parse_file, parse_rule, parse_ruleset
from dqdlpy.parser.options import ParserOptions
from dqdlpy.parser.parser import Parser
from dqdlpy.parser.token_source import TokenSource

__all__ = [
    "CommentBuffer",
    "Parser",
    "ParserOptions",
    "TokenSource",
    "parse_file",
    "parse_rule",
    "parse_ruleset",
]
