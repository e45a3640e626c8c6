"""AST data model for DQDL source."""

from __future__ import annotations

from collections.abc import Iterator
from dataclasses import dataclass
from typing import Literal

from dqdlpy.text import NO_POS, Pos


@dataclass(frozen=True, slots=True)
class Comment:
    """A `#` comment, text includes the leading `#`."""

    sharp_pos: Pos
    text: str

    @property
    def pos(self) -> Pos:
        return self.sharp_pos

    @property
    def end(self) -> Pos:
        return self.sharp_pos.add_column(len(self.text))


@dataclass(frozen=True, slots=True)
class CommentGroup:
    """Run of comments with no other token in between. Never empty."""

    comments: tuple[Comment, ...]

    def __post_init__(self) -> None:
        if not self.comments:
            raise ValueError("CommentGroup cannot be empty")

    @staticmethod
    def of(comments: list[Comment] | tuple[Comment, ...]) -> CommentGroup | None:
        """Freeze a buffered run of comments, or None when there is nothing to keep."""
        if not comments:
            return None
        return CommentGroup(tuple(comments))

    @property
    def pos(self) -> Pos:
        return self.comments[0].pos

    @property
    def end(self) -> Pos:
        return self.comments[-1].end

    @property
    def texts(self) -> tuple[str, ...]:
        return tuple(comment.text for comment in self.comments)

    def __iter__(self) -> Iterator[Comment]:
        return iter(self.comments)

    def __len__(self) -> int:
        return len(self.comments)

    def __getitem__(self, index: int) -> Comment:
        return self.comments[index]


@dataclass(frozen=True, slots=True)
class Ident:
    """Rule type name with the comments trailing it."""

    name_pos: Pos
    name: str
    comments: CommentGroup | None = None

    @property
    def pos(self) -> Pos:
        return self.name_pos

    @property
    def end(self) -> Pos:
        return self.name_pos.add_column(len(self.name))


# -------------------------
# Parameters
# -------------------------


@dataclass(frozen=True, slots=True)
class StringParameter:
    left_quote_pos: Pos
    right_quote_pos: Pos
    value: str  # quotes stripped
    comments: CommentGroup | None = None

    @property
    def pos(self) -> Pos:
        return self.left_quote_pos

    @property
    def end(self) -> Pos:
        return self.right_quote_pos.add_column(1)


@dataclass(frozen=True, slots=True)
class NumberParameter:
    number_pos: Pos
    value: str  # literal text
    comments: CommentGroup | None = None

    @property
    def pos(self) -> Pos:
        return self.number_pos

    @property
    def end(self) -> Pos:
        return self.number_pos.add_column(len(self.value))

    @property
    def is_integer(self) -> bool:
        return "." not in self.value

    @property
    def number(self) -> int | float:
        return int(self.value) if self.is_integer else float(self.value)


@dataclass(frozen=True, slots=True)
class BoolParameter:
    bool_pos: Pos
    value: bool
    comments: CommentGroup | None = None

    @property
    def pos(self) -> Pos:
        return self.bool_pos

    @property
    def end(self) -> Pos:
        return self.bool_pos.add_column(4 if self.value else 5)


@dataclass(frozen=True, slots=True)
class DurationParameter:
    """Integer magnitude followed by `days` or `hours`."""

    number_pos: Pos
    unit_pos: Pos
    number: str
    unit: Literal["days", "hours"]
    comments: CommentGroup | None = None

    @property
    def pos(self) -> Pos:
        return self.number_pos

    @property
    def end(self) -> Pos:
        return self.unit_pos.add_column(len(self.unit))

    @property
    def value(self) -> str:
        return f"{self.number} {self.unit}"

    @property
    def magnitude(self) -> int:
        return int(self.number)


@dataclass(frozen=True, slots=True)
class DateParameter:
    """Either a bare `now()` or the relative form `(now() - N days)`."""

    now_pos: Pos
    left_paren_pos: Pos | None = None
    minus_pos: Pos | None = None
    duration: DurationParameter | None = None
    right_paren_pos: Pos | None = None
    comments: CommentGroup | None = None

    @property
    def pos(self) -> Pos:
        if self.left_paren_pos is not None:
            return self.left_paren_pos
        return self.now_pos

    @property
    def end(self) -> Pos:
        if self.right_paren_pos is not None:
            return self.right_paren_pos.add_column(1)
        return self.now_pos.add_column(len("now()"))

    @property
    def is_relative(self) -> bool:
        return self.duration is not None


# -------------------------
# Expressions
# -------------------------


@dataclass(frozen=True, slots=True)
class ComparisonExpression:
    expr_pos: Pos
    operator: Literal["=", ">", "<", ">=", "<="]
    right: Parameter
    comments: CommentGroup | None = None

    @property
    def pos(self) -> Pos:
        return self.expr_pos

    @property
    def end(self) -> Pos:
        return self.right.end


@dataclass(frozen=True, slots=True)
class BetweenExpression:
    expr_pos: Pos
    left: Parameter
    right: Parameter
    comments: CommentGroup | None = None

    @property
    def pos(self) -> Pos:
        return self.expr_pos

    @property
    def end(self) -> Pos:
        return self.right.end


@dataclass(frozen=True, slots=True)
class InExpression:
    """`in [v1, v2, ...]`"""

    expr_pos: Pos
    left_bracket_pos: Pos
    right_bracket_pos: Pos
    values: tuple[Parameter, ...]
    comments: CommentGroup | None = None

    @property
    def pos(self) -> Pos:
        return self.expr_pos

    @property
    def end(self) -> Pos:
        return self.right_bracket_pos.add_column(1)


@dataclass(frozen=True, slots=True)
class MatchesExpression:
    """`matches "<pattern>"`, the pattern is kept as text."""

    expr_pos: Pos
    regexp_pos: Pos
    value: str
    comments: CommentGroup | None = None

    @property
    def pos(self) -> Pos:
        return self.expr_pos

    @property
    def end(self) -> Pos:
        return self.regexp_pos.add_column(len(self.value) + 2)


@dataclass(frozen=True, slots=True)
class WithThresholdExpression:
    with_pos: Pos
    target: ThresholdTarget
    threshold: ThresholdExpression
    comments: CommentGroup | None = None

    @property
    def pos(self) -> Pos:
        return self.target.pos

    @property
    def end(self) -> Pos:
        return self.threshold.end


# -------------------------
# Rules
# -------------------------


@dataclass(frozen=True, slots=True)
class Rule:
    rule_type: Ident
    parameters: tuple[Parameter, ...] = ()
    expression: Expression | None = None
    description: CommentGroup | None = None
    comments: CommentGroup | None = None

    @property
    def pos(self) -> Pos:
        return self.rule_type.pos

    @property
    def end(self) -> Pos:
        if self.expression is not None:
            return self.expression.end
        if self.parameters:
            return self.parameters[-1].end
        return self.rule_type.end


@dataclass(frozen=True, slots=True)
class CombinedRule:
    """Parenthesized rules joined by a single operator."""

    first_lparen_pos: Pos
    last_rparen_pos: Pos
    rules: tuple[Rule, ...]
    operator: Literal["and", "or"]
    description: CommentGroup | None = None
    comments: CommentGroup | None = None

    @property
    def pos(self) -> Pos:
        return self.first_lparen_pos

    @property
    def end(self) -> Pos:
        return self.last_rparen_pos.add_column(1)


@dataclass(frozen=True, slots=True)
class Ruleset:
    decl_pos: Pos
    left_bracket_pos: Pos
    right_bracket_pos: Pos
    rules: tuple[RuleDecl, ...] = ()
    inner_comments: tuple[CommentGroup, ...] = ()
    description: CommentGroup | None = None
    header_comments: CommentGroup | None = None  # trailing the `[`
    comments: CommentGroup | None = None

    @property
    def pos(self) -> Pos:
        return self.decl_pos

    @property
    def end(self) -> Pos:
        if self.comments is not None:
            return self.comments.end
        return self.right_bracket_pos.add_column(1)


@dataclass(frozen=True, slots=True)
class File:
    filename: str
    comment_groups: tuple[CommentGroup, ...] = ()
    rulesets: tuple[Ruleset, ...] = ()

    @property
    def pos(self) -> Pos:
        starts = [group.pos for group in self.comment_groups[:1]] + [ruleset.pos for ruleset in self.rulesets[:1]]
        return min(starts, default=NO_POS)

    @property
    def end(self) -> Pos:
        ends = [group.end for group in self.comment_groups[-1:]] + [ruleset.end for ruleset in self.rulesets[-1:]]
        return max(ends, default=NO_POS)


type Parameter = StringParameter | NumberParameter | BoolParameter | DurationParameter | DateParameter
type ThresholdExpression = ComparisonExpression | BetweenExpression
type ThresholdTarget = InExpression | MatchesExpression
type Expression = ThresholdExpression | ThresholdTarget | WithThresholdExpression
type RuleDecl = Rule | CombinedRule
type Node = (
    File
    | Ruleset
    | RuleDecl
    | Ident
    | Parameter
    | Expression
    | CommentGroup
    | Comment
)


__all__ = [
    "BetweenExpression",
    "BoolParameter",
    "CombinedRule",
    "Comment",
    "CommentGroup",
    "ComparisonExpression",
    "DateParameter",
    "DurationParameter",
    "Expression",
    "File",
    "Ident",
    "InExpression",
    "MatchesExpression",
    "Node",
    "NumberParameter",
    "Parameter",
    "Rule",
    "RuleDecl",
    "Ruleset",
    "StringParameter",
    "ThresholdExpression",
    "ThresholdTarget",
    "WithThresholdExpression",
]
