"""Capability checks and traversal over AST nodes."""

from __future__ import annotations

from collections.abc import Iterator
from typing import TypeGuard

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


def is_parameter(node: object) -> TypeGuard[Parameter]:
    match node:
        case StringParameter() | NumberParameter() | BoolParameter() | DurationParameter() | DateParameter():
            return True
        case _:
            return False


def is_expression(node: object) -> TypeGuard[Expression]:
    return is_threshold_expression(node) or is_threshold_target(node) or isinstance(node, WithThresholdExpression)


def is_threshold_expression(node: object) -> TypeGuard[ThresholdExpression]:
    """Usable on the right-hand side of `with threshold`."""
    match node:
        case ComparisonExpression() | BetweenExpression():
            return True
        case _:
            return False


def is_threshold_target(node: object) -> TypeGuard[ThresholdTarget]:
    """Usable on the left-hand side of `with threshold`."""
    match node:
        case InExpression() | MatchesExpression():
            return True
        case _:
            return False


def is_rule_decl(node: object) -> TypeGuard[RuleDecl]:
    return isinstance(node, (Rule, CombinedRule))


def children(node: Node) -> Iterator[Node]:
    """Yield direct child nodes in source order. Comments come before what they describe."""
    match node:
        case File(comment_groups=groups, rulesets=rulesets):
            # Top-level comments interleave with rulesets by position.
            yield from sorted([*groups, *rulesets], key=lambda child: child.pos)
        case Ruleset():
            yield from _present(node.description)
            yield from _present(node.header_comments)
            yield from sorted([*node.rules, *node.inner_comments], key=lambda child: child.pos)
            yield from _present(node.comments)
        case Rule():
            yield from _present(node.description)
            yield node.rule_type
            yield from node.parameters
            yield from _present(node.expression)
            yield from _present(node.comments)
        case CombinedRule():
            yield from _present(node.description)
            yield from node.rules
            yield from _present(node.comments)
        case Ident() | StringParameter() | NumberParameter() | BoolParameter() | DurationParameter() | MatchesExpression():
            yield from _present(node.comments)
        case DateParameter():
            yield from _present(node.duration)
            yield from _present(node.comments)
        case ComparisonExpression():
            yield node.right
            yield from _present(node.comments)
        case BetweenExpression():
            yield node.left
            yield node.right
            yield from _present(node.comments)
        case InExpression():
            yield from node.values
            yield from _present(node.comments)
        case WithThresholdExpression():
            yield node.target
            yield node.threshold
            yield from _present(node.comments)
        case CommentGroup():
            yield from node.comments
        case Comment():
            return
        case _:
            raise TypeError(f"Not an AST node: {node!r}")


def walk(node: Node) -> Iterator[Node]:
    """Depth-first, pre-order traversal starting at `node`."""
    yield node
    for child in children(node):
        yield from walk(child)


def _present[T](value: T | None) -> Iterator[T]:
    if value is not None:
        yield value
