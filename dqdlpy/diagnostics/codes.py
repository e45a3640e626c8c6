"""Diagnostic codes and messages."""

from dataclasses import dataclass
from typing import Final, Literal

Severity = Literal["error", "warning"]


@dataclass(frozen=True, slots=True)
class DiagnosticSpec:
    code: str
    message: str
    hint: str | None = None
    severity: Severity = "error"
    category: str | None = None

    def format(self, **values: object) -> str:
        """Render the message template with the given placeholder values."""
        if not values:
            return self.message
        return self.message.format(**values)


# -------------------------
# Lexer
# -------------------------

LEXER_SCAN_ERROR: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_SCAN_ERROR",
    message="{message}",
    severity="error",
    category="lexer",
)

LEXER_UNRECOGNIZED_CHARACTER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNRECOGNIZED_CHARACTER",
    message="unrecognized character: {char}",
    severity="error",
    category="lexer",
)

LEXER_UNTERMINATED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_UNTERMINATED_STRING",
    message="unterminated string",
    hint="Close the string with a double quote.",
    severity="error",
    category="lexer",
)

LEXER_INVALID_NUMBER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_INVALID_NUMBER",
    message="invalid number",
    hint="Numbers take at most one `.` and cannot be followed by a letter.",
    severity="error",
    category="lexer",
)

LEXER_MALFORMED_NOW: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_MALFORMED_NOW",
    message="expected '()' after NOW",
    hint="Write `now()` without spaces.",
    severity="error",
    category="lexer",
)

LEXER_CANCELED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="LEXER_CANCELED",
    message="canceled",
    severity="error",
    category="lexer",
)

# -------------------------
# Parser
# -------------------------

PARSER_UNEXPECTED_EOF: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_EOF",
    message="unexpected EOF",
    severity="error",
    category="parser",
)

PARSER_UNEXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_TOKEN",
    message="unexpected token `{found}`",
    severity="error",
    category="parser",
)

PARSER_UNEXPECTED_SYMBOL: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_UNEXPECTED_SYMBOL",
    message="unexpected `{found}`",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_TOKEN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_TOKEN",
    message="expected `{expected}` but got `{found}`",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_STRING: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_STRING",
    message="expected string but got `{found}`",
    severity="error",
    category="parser",
)

PARSER_RULE_TYPE_REQUIRED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_RULE_TYPE_REQUIRED",
    message="RuleType is required: unexpected {found}",
    hint="Start every rule with its rule type, e.g. `IsComplete`.",
    severity="error",
    category="parser",
)

PARSER_RULE_TYPE_ALREADY_DEFINED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_RULE_TYPE_ALREADY_DEFINED",
    message="RuleType is already defined",
    hint="Separate rules inside a ruleset with `,`.",
    severity="error",
    category="parser",
)

PARSER_PARAMETER_AFTER_EXPRESSION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_PARAMETER_AFTER_EXPRESSION",
    message="parameters must be before expression",
    severity="error",
    category="parser",
)

PARSER_EXPRESSION_ALREADY_DEFINED: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPRESSION_ALREADY_DEFINED",
    message="expression is already defined",
    severity="error",
    category="parser",
)

PARSER_SINGLE_RULE_MODE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_SINGLE_RULE_MODE",
    message="parse mode is single rule",
    hint="`,` and `]` are only allowed inside `Rules = [ ... ]`.",
    severity="error",
    category="parser",
)

PARSER_DEEP_NESTED_RULE: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_DEEP_NESTED_RULE",
    message="deep nested rule is not allowed",
    severity="error",
    category="parser",
)

PARSER_MISSING_RIGHT_PAREN: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_MISSING_RIGHT_PAREN",
    message="must close `)`",
    severity="error",
    category="parser",
)

PARSER_MIXED_OPERATORS: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_MIXED_OPERATORS",
    message="can not mixed `{previous}` and `{current}`",
    hint="Use a single operator within one combined rule.",
    severity="error",
    category="parser",
)

PARSER_DURATION_FLOAT: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_DURATION_FLOAT",
    message="duration parameter can not be float",
    severity="error",
    category="parser",
)

PARSER_NO_PARAMETER: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_NO_PARAMETER",
    message="no parameter",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_DURATION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_DURATION",
    message="expected duration parameter",
    hint="Write the date as `(now() - <integer> days)` or `(now() - <integer> hours)`.",
    severity="error",
    category="parser",
)

PARSER_EXPECTED_THRESHOLD_EXPRESSION: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_EXPECTED_THRESHOLD_EXPRESSION",
    message="expected threshold expression but got `{found}`",
    hint="A threshold is a comparison or a `between` expression.",
    severity="error",
    category="parser",
)

PARSER_MISSING_EQUAL: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_MISSING_EQUAL",
    message="must equal after Rules",
    severity="error",
    category="parser",
)

PARSER_MISSING_LEFT_BRACKET: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_MISSING_LEFT_BRACKET",
    message="missing `[`",
    severity="error",
    category="parser",
)

PARSER_MISSING_RIGHT_BRACKET: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_MISSING_RIGHT_BRACKET",
    message="missing `]`",
    severity="error",
    category="parser",
)

PARSER_NO_RULES_FOUND: Final[DiagnosticSpec] = DiagnosticSpec(
    code="PARSER_NO_RULES_FOUND",
    message="no rules found",
    severity="error",
    category="parser",
)
