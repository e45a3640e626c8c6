import pytest

from dqdlpy import parse_rule
from dqdlpy.ast import (
    BetweenExpression,
    BoolParameter,
    CombinedRule,
    Comment,
    CommentGroup,
    ComparisonExpression,
    DateParameter,
    DurationParameter,
    File,
    Ident,
    InExpression,
    MatchesExpression,
    NumberParameter,
    Rule,
    Ruleset,
    StringParameter,
    WithThresholdExpression,
    children,
    is_expression,
    is_parameter,
    is_rule_decl,
    is_threshold_expression,
    is_threshold_target,
    walk,
)
from dqdlpy.text import NO_POS, Pos


def test_comment_group_cannot_be_empty() -> None:
    with pytest.raises(ValueError):
        CommentGroup(())

    assert CommentGroup.of([]) is None


def test_comment_group_span() -> None:
    group = CommentGroup((Comment(Pos(0, 1, 1), "# a"), Comment(Pos(4, 2, 1), "# bc")))

    assert group.pos == Pos(0, 1, 1)
    assert group.end == Pos(8, 2, 5)
    assert group.texts == ("# a", "# bc")
    assert len(group) == 2
    assert group[1].text == "# bc"


def test_parameter_ends() -> None:
    assert StringParameter(Pos(9, 1, 10), Pos(15, 1, 16), "col-A").end == Pos(16, 1, 17)
    assert NumberParameter(Pos(0, 1, 1), "0.25").end == Pos(4, 1, 5)
    assert BoolParameter(Pos(0, 1, 1), True).end == Pos(4, 1, 5)
    assert BoolParameter(Pos(0, 1, 1), False).end == Pos(5, 1, 6)
    assert DurationParameter(Pos(0, 1, 1), Pos(3, 1, 4), "24", "hours").end == Pos(8, 1, 9)
    assert DateParameter(now_pos=Pos(2, 1, 3)).end == Pos(7, 1, 8)


def test_relative_date_span() -> None:
    date = DateParameter(
        now_pos=Pos(1, 1, 2),
        left_paren_pos=Pos(0, 1, 1),
        minus_pos=Pos(7, 1, 8),
        duration=DurationParameter(Pos(9, 1, 10), Pos(11, 1, 12), "3", "days"),
        right_paren_pos=Pos(15, 1, 16),
    )

    assert date.pos == Pos(0, 1, 1)
    assert date.end == Pos(16, 1, 17)
    assert date.is_relative
    assert not DateParameter(now_pos=Pos(0, 1, 1)).is_relative


def test_number_parameter_decoding() -> None:
    assert NumberParameter(NO_POS, "10").is_integer
    assert NumberParameter(NO_POS, "10").number == 10
    assert not NumberParameter(NO_POS, "0.5").is_integer
    assert NumberParameter(NO_POS, "0.5").number == 0.5


def test_expression_ends_follow_last_child() -> None:
    parsed = parse_rule('ColumnValues "colA" matches "[a-z]*" with threshold between 0.2 and 0.9')

    assert isinstance(parsed, Rule)
    expression = parsed.expression
    assert isinstance(expression, WithThresholdExpression)
    assert expression.pos == expression.target.pos == Pos(20, 1, 21)
    assert expression.end == expression.threshold.end == Pos(71, 1, 72)
    assert isinstance(expression.target, MatchesExpression)
    assert expression.target.end == Pos(36, 1, 37)
    assert parsed.end == expression.end


def test_rule_end_without_parameters() -> None:
    rule = Rule(rule_type=Ident(Pos(0, 1, 1), "RowCount"))

    assert rule.end == Pos(8, 1, 9)


def test_ruleset_end_prefers_trailing_comments() -> None:
    bare = Ruleset(decl_pos=Pos(0, 1, 1), left_bracket_pos=Pos(8, 1, 9), right_bracket_pos=Pos(10, 1, 11))
    commented = Ruleset(
        decl_pos=Pos(0, 1, 1),
        left_bracket_pos=Pos(8, 1, 9),
        right_bracket_pos=Pos(10, 1, 11),
        comments=CommentGroup((Comment(Pos(12, 1, 13), "# x"),)),
    )

    assert bare.end == Pos(11, 1, 12)
    assert commented.end == Pos(15, 1, 16)


def test_ruleset_end_ignores_header_comments() -> None:
    ruleset = Ruleset(
        decl_pos=Pos(0, 1, 1),
        left_bracket_pos=Pos(8, 1, 9),
        right_bracket_pos=Pos(30, 3, 1),
        header_comments=CommentGroup((Comment(Pos(10, 1, 11), "# header"),)),
    )

    assert ruleset.end == Pos(31, 3, 2)


def test_empty_file_has_no_position() -> None:
    empty = File("empty.dqdl")

    assert empty.pos == NO_POS
    assert empty.end == NO_POS


def test_capability_predicates() -> None:
    comparison = ComparisonExpression(NO_POS, ">", NumberParameter(NO_POS, "1"))
    between = BetweenExpression(NO_POS, NumberParameter(NO_POS, "1"), NumberParameter(NO_POS, "2"))
    membership = InExpression(NO_POS, NO_POS, NO_POS, ())
    pattern = MatchesExpression(NO_POS, NO_POS, "x")
    wrapped = WithThresholdExpression(NO_POS, pattern, comparison)

    assert is_threshold_expression(comparison) and is_threshold_expression(between)
    assert not is_threshold_expression(membership)
    assert is_threshold_target(membership) and is_threshold_target(pattern)
    assert not is_threshold_target(wrapped)
    assert all(is_expression(node) for node in (comparison, between, membership, pattern, wrapped))
    assert not is_expression(NumberParameter(NO_POS, "1"))
    assert is_parameter(DateParameter(NO_POS))
    assert not is_parameter(comparison)
    assert is_rule_decl(Rule(Ident(NO_POS, "IsUnique")))
    assert not is_rule_decl(Ident(NO_POS, "IsUnique"))


def test_walk_is_preorder_in_source_order() -> None:
    parsed = parse_rule('# about\n(IsUnique "a") or (IsComplete "b") # tail')

    kinds = [type(node).__name__ for node in walk(parsed)]

    assert isinstance(parsed, CombinedRule)
    assert kinds == [
        "CombinedRule",
        "CommentGroup",
        "Comment",
        "Rule",
        "Ident",
        "StringParameter",
        "Rule",
        "Ident",
        "StringParameter",
        "CommentGroup",
        "Comment",
    ]


def test_children_rejects_foreign_objects() -> None:
    with pytest.raises(TypeError):
        list(children("not a node"))  # type: ignore[arg-type]
