"""Typed AST for DQDL rules."""

from dqdlpy.ast.model import (
    BetweenExpression,
    BoolParameter,
    CombinedRule,
    Comment,
    CommentGroup,
    ComparisonExpression,
    DateParameter,
    DurationParameter,
    Expression,
    File,
    Ident,
    InExpression,
    MatchesExpression,
    Node,
    NumberParameter,
    Parameter,
    Rule,
    RuleDecl,
    Ruleset,
    StringParameter,
    ThresholdExpression,
    ThresholdTarget,
    WithThresholdExpression,
)
from dqdlpy.ast.traversal import (
    children,
    is_expression,
    is_parameter,
    is_rule_decl,
    is_threshold_expression,
    is_threshold_target,
    walk,
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
    "children",
    "is_expression",
    "is_parameter",
    "is_rule_decl",
    "is_threshold_expression",
    "is_threshold_target",
    "walk",
]
