"""DQDL rule-language front end: lexer, parser and AST."""

from dqdlpy.ast import CombinedRule, File, Rule, RuleDecl, Ruleset, walk
from dqdlpy.diagnostics import Diagnostic, DqdlSyntaxError, NoRulesFoundError, ParseError
from dqdlpy.lexer import LexMode, Lexer, Token, TokenKind
from dqdlpy.parser import ParserOptions, parse_file, parse_rule, parse_ruleset
from dqdlpy.text import Pos

__all__ = [
    "CombinedRule",
    "Diagnostic",
    "DqdlSyntaxError",
    "File",
    "LexMode",
    "Lexer",
    "NoRulesFoundError",
    "ParseError",
    "ParserOptions",
    "Pos",
    "Rule",
    "RuleDecl",
    "Ruleset",
    "Token",
    "TokenKind",
    "parse_file",
    "parse_rule",
    "parse_ruleset",
    "walk",
]
