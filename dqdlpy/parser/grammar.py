"""DQDL grammar routines that build AST nodes."""

from typing import Literal, cast

from dqdlpy.ast import (
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
    NumberParameter,
    Parameter,
    Rule,
    RuleDecl,
    Ruleset,
    StringParameter,
    WithThresholdExpression,
    is_threshold_expression,
)
from dqdlpy.diagnostics import NoRulesFoundError
from dqdlpy.diagnostics.codes import (
    PARSER_DEEP_NESTED_RULE,
    PARSER_DURATION_FLOAT,
    PARSER_EXPECTED_DURATION,
    PARSER_EXPECTED_STRING,
    PARSER_EXPECTED_THRESHOLD_EXPRESSION,
    PARSER_EXPECTED_TOKEN,
    PARSER_EXPRESSION_ALREADY_DEFINED,
    PARSER_MISSING_EQUAL,
    PARSER_MISSING_LEFT_BRACKET,
    PARSER_MISSING_RIGHT_BRACKET,
    PARSER_MISSING_RIGHT_PAREN,
    PARSER_MIXED_OPERATORS,
    PARSER_NO_PARAMETER,
    PARSER_PARAMETER_AFTER_EXPRESSION,
    PARSER_RULE_TYPE_ALREADY_DEFINED,
    PARSER_RULE_TYPE_REQUIRED,
    PARSER_SINGLE_RULE_MODE,
    PARSER_UNEXPECTED_EOF,
    PARSER_UNEXPECTED_SYMBOL,
    PARSER_UNEXPECTED_TOKEN,
)
from dqdlpy.lexer import Token, TokenKind
from dqdlpy.parser.comments import CommentBuffer
from dqdlpy.parser.parser import Parser
from dqdlpy.text import Pos

type ComparisonOperator = Literal["=", ">", "<", ">=", "<="]
type CombinedOperator = Literal["and", "or"]


# -------------------------
# File / ruleset
# -------------------------


def parse_file(parser: Parser, filename: str) -> File:
    """Parse consecutive rulesets up to EOF.

    Comment groups outside any ruleset are collected on the file in source order.
    """
    file_comments: list[CommentGroup] = []
    rulesets: list[Ruleset] = []
    while True:
        try:
            rulesets.append(parse_ruleset(parser, file_comments))
        except NoRulesFoundError:
            if rulesets:
                break
            raise

        token = parser.pop()
        if token.kind == TokenKind.EOF:
            break
        parser.push(token)

    return File(filename, tuple(file_comments), tuple(rulesets))


def parse_ruleset(parser: Parser, outer_comments: list[CommentGroup]) -> Ruleset:
    """Parse `Rules = [ rule, rule, ... ]`.

    Comments ahead of `Rules` that are not its description are filed into
    `outer_comments`. Raises `NoRulesFoundError` when EOF comes before `Rules`.
    """
    buffer = CommentBuffer(outer_comments)
    decl_pos: Pos | None = None
    left_bracket_pos: Pos | None = None
    description: CommentGroup | None = None
    header_comments: CommentGroup | None = None

    rules: list[RuleDecl] = []
    inner_comments: list[CommentGroup] = []
    pending = CommentBuffer(inner_comments)

    while True:
        token = parser.pop()
        match token.kind:
            case TokenKind.EOF:
                if decl_pos is None:
                    buffer.spill()
                    raise NoRulesFoundError()
                raise parser.error(PARSER_MISSING_RIGHT_BRACKET, token.start)

            case TokenKind.RIGHT_BRACKET:
                if decl_pos is None or left_bracket_pos is None:
                    raise parser.error(PARSER_UNEXPECTED_SYMBOL, token.start, found="]")
                pending.spill()
                trailing = parser.parse_line_comments(token.start)
                return Ruleset(
                    decl_pos=decl_pos,
                    left_bracket_pos=left_bracket_pos,
                    right_bracket_pos=token.start,
                    rules=tuple(rules),
                    inner_comments=tuple(inner_comments),
                    description=description,
                    header_comments=header_comments,
                    comments=trailing,
                )

            case TokenKind.RULES:
                if decl_pos is not None:
                    raise parser.error(PARSER_UNEXPECTED_SYMBOL, token.start, found=token.kind.display)
                equal = parser.pop()
                if equal.kind != TokenKind.EQUAL:
                    raise parser.error(PARSER_MISSING_EQUAL, token.start)
                left_bracket, header_comments = parser.pop_with_line_comments()
                if left_bracket.kind != TokenKind.LEFT_BRACKET:
                    raise parser.error(PARSER_MISSING_LEFT_BRACKET, token.start)

                decl_pos = token.start
                left_bracket_pos = left_bracket.start
                description = buffer.take_description(token.start)

            case TokenKind.COMMENT:
                comment = Comment(token.start, token.text)
                if decl_pos is None:
                    buffer.add(comment)
                else:
                    pending.add(comment)

            case _:
                if decl_pos is None:
                    raise parser.error(PARSER_UNEXPECTED_SYMBOL, token.start, found=token.kind.display)
                parser.push(token)
                rules.append(parse_rule(parser, pending, in_ruleset=True))


# -------------------------
# Rules
# -------------------------


def parse_rule(
    parser: Parser,
    comments: CommentBuffer,
    *,
    in_ruleset: bool,
    nested: bool = False,
) -> RuleDecl:
    """Parse one rule, or a combined rule when it opens with `(`.

    `comments` holds the comment run read so far. It may become the rule's description,
    otherwise it is spilled into the enclosing container. Outside a ruleset `,` and `]`
    are errors. Inside a ruleset `,` is consumed and `]` is left for the caller.
    """
    rule_type: Ident | None = None
    parameters: list[Parameter] = []
    expression: Expression | None = None
    description: CommentGroup | None = None
    rule_comments: list[Comment] = []

    while True:
        token = parser.pop()
        match token.kind:
            case TokenKind.LEFT_PAREN:
                if nested:
                    raise parser.error(PARSER_DEEP_NESTED_RULE, token.start)
                if rule_type is not None:
                    raise parser.error(PARSER_UNEXPECTED_TOKEN, token.start, found=token.kind.display)
                combined_description = comments.take_description(token.start)
                parser.push(token)
                return parse_combined_rule(
                    parser,
                    comments.child(),
                    description=combined_description,
                    in_ruleset=in_ruleset,
                )

            case TokenKind.EOF:
                comments.spill()
                if rule_type is None:
                    raise parser.error(PARSER_RULE_TYPE_REQUIRED, token.start, found="EOF")
                break

            case TokenKind.COMMA | TokenKind.RIGHT_BRACKET:
                comments.spill()
                if rule_type is None:
                    raise parser.error(PARSER_RULE_TYPE_REQUIRED, token.start, found=f"`{token.text}`")
                if not in_ruleset:
                    raise parser.error(PARSER_SINGLE_RULE_MODE, token.start)
                if token.kind == TokenKind.RIGHT_BRACKET:
                    parser.push(token)
                break

            case TokenKind.RIGHT_PAREN:
                if not nested:
                    raise parser.error(PARSER_UNEXPECTED_SYMBOL, token.start, found=")")
                parser.push(token)
                break

            case TokenKind.IDENT:
                if rule_type is not None:
                    raise parser.error(PARSER_RULE_TYPE_ALREADY_DEFINED, token.start)
                description = comments.take_description(token.start)
                rule_type = Ident(token.start, token.text, parser.parse_line_comments(token.start))

            case TokenKind.COMMENT:
                comments.add(Comment(token.start, token.text))

            case kind if kind.is_parameter_acceptable:
                if rule_type is None:
                    raise parser.error(PARSER_RULE_TYPE_REQUIRED, token.start, found="<Parameter>")
                if expression is not None:
                    raise parser.error(PARSER_PARAMETER_AFTER_EXPRESSION, token.start)
                parameter, line_comments = parse_parameter(parser, token, rule_type.pos)
                parameters.append(parameter)
                _extend(rule_comments, line_comments)

            case kind if kind.is_expression_start:
                if rule_type is None:
                    raise parser.error(PARSER_RULE_TYPE_REQUIRED, token.start, found="<Expression>")
                if expression is not None:
                    raise parser.error(PARSER_EXPRESSION_ALREADY_DEFINED, token.start)
                expression, line_comments = parse_expression(parser, token, rule_type.pos)
                _extend(rule_comments, line_comments)

            case _:
                raise parser.error(PARSER_UNEXPECTED_TOKEN, token.start, found=token.kind.display)

    if rule_type is None:
        # Only reachable when a nested rule is closed before its type, e.g. `()`.
        raise parser.error(PARSER_RULE_TYPE_REQUIRED, token.start, found=f"`{token.text}`")

    return Rule(
        rule_type=rule_type,
        parameters=tuple(parameters),
        expression=expression,
        description=description,
        comments=CommentGroup.of(rule_comments),
    )


def parse_combined_rule(
    parser: Parser,
    comments: CommentBuffer,
    *,
    description: CommentGroup | None,
    in_ruleset: bool,
) -> RuleDecl:
    """Parse `(rule) op (rule) ...` with a single operator.

    A single parenthesized rule collapses to that rule, keeping `description`.
    """
    rules: list[Rule] = []
    operator: CombinedOperator | None = None
    expects_operand = True
    parens: list[tuple[Pos, Pos]] = []
    trailing: list[Comment] = []

    while True:
        token = parser.pop()
        match token.kind:
            case TokenKind.LEFT_PAREN:
                if not expects_operand:
                    raise parser.error(PARSER_UNEXPECTED_SYMBOL, token.start, found="(")
                rule = parse_rule(parser, comments.child(), in_ruleset=in_ruleset, nested=True)
                closing = parser.pop()
                if closing.kind != TokenKind.RIGHT_PAREN:
                    raise parser.error(PARSER_MISSING_RIGHT_PAREN, closing.start)

                rules.append(cast(Rule, rule))
                parens.append((token.start, closing.start))
                expects_operand = False

            case TokenKind.AND | TokenKind.OR:
                if expects_operand:
                    raise parser.error(PARSER_UNEXPECTED_SYMBOL, token.start, found=token.text)
                current = cast(CombinedOperator, token.text)
                if operator is not None and operator != current:
                    raise parser.error(PARSER_MIXED_OPERATORS, token.start, previous=operator, current=current)
                operator = current
                expects_operand = True

            case TokenKind.EOF:
                if expects_operand:
                    raise parser.error(PARSER_UNEXPECTED_EOF, token.start)
                break

            case TokenKind.COMMA | TokenKind.RIGHT_BRACKET:
                if expects_operand:
                    raise parser.error(PARSER_UNEXPECTED_SYMBOL, token.start, found=token.text)
                if not in_ruleset:
                    raise parser.error(PARSER_SINGLE_RULE_MODE, token.start)
                if token.kind == TokenKind.RIGHT_BRACKET:
                    parser.push(token)
                break

            case TokenKind.COMMENT:
                trailing.append(Comment(token.start, token.text))

            case _:
                raise parser.error(PARSER_UNEXPECTED_TOKEN, token.start, found=token.kind.display)

    if operator is None:
        # No operator means a single member.
        (rule,) = rules
        merged = [*(rule.comments or ()), *trailing]
        return Rule(
            rule_type=rule.rule_type,
            parameters=rule.parameters,
            expression=rule.expression,
            description=description,
            comments=CommentGroup.of(merged),
        )

    return CombinedRule(
        first_lparen_pos=parens[0][0],
        last_rparen_pos=parens[-1][1],
        rules=tuple(rules),
        operator=operator,
        description=description,
        comments=CommentGroup.of(trailing),
    )


# -------------------------
# Parameters
# -------------------------


def parse_parameter(parser: Parser, token: Token, rule_pos: Pos) -> tuple[Parameter, CommentGroup | None]:
    """Parse the parameter starting at `token`.

    Trailing comments stay on the parameter unless it sits on the rule-type line, in
    which case they are returned for the rule.
    """
    match token.kind:
        case TokenKind.STRING:
            own, for_rule = _line_comments(parser, token.start, rule_pos)
            end_quote = token.start.add_column(len(token.text) - 1)
            return StringParameter(token.start, end_quote, token.text[1:-1], own), for_rule

        case TokenKind.NUMBER:
            unit = parser.pop()
            if unit.kind not in (TokenKind.DAYS, TokenKind.HOURS):
                parser.push(unit)
                own, for_rule = _line_comments(parser, token.start, rule_pos)
                return NumberParameter(token.start, token.text, own), for_rule

            if "." in token.text:
                raise parser.error(PARSER_DURATION_FLOAT, token.start)
            own, for_rule = _line_comments(parser, token.start, rule_pos)
            unit_name = cast(Literal["days", "hours"], unit.text)
            return DurationParameter(token.start, unit.start, token.text, unit_name, own), for_rule

        case TokenKind.TRUE | TokenKind.FALSE:
            own, for_rule = _line_comments(parser, token.start, rule_pos)
            return BoolParameter(token.start, token.kind == TokenKind.TRUE, own), for_rule

        case TokenKind.NOW:
            own, for_rule = _line_comments(parser, token.start, rule_pos)
            return DateParameter(token.start, comments=own), for_rule

        case _:
            raise parser.error(PARSER_NO_PARAMETER, token.start)


def parse_relative_date(parser: Parser, left_paren: Token, rule_pos: Pos) -> tuple[DateParameter, CommentGroup | None]:
    """Parse `( now() - <duration> )` after its opening parenthesis."""
    own: list[Comment] = []
    for_rule: list[Comment] = []

    now, line_comments = parser.pop_with_line_comments()
    if now.kind != TokenKind.NOW:
        raise parser.error(PARSER_EXPECTED_TOKEN, now.start, expected=TokenKind.NOW.display, found=_found(now))
    _route(line_comments, now.start, rule_pos, own=own, for_rule=for_rule)

    minus, line_comments = parser.pop_with_line_comments()
    if minus.kind != TokenKind.MINUS:
        raise parser.error(PARSER_EXPECTED_TOKEN, minus.start, expected="-", found=_found(minus))
    _route(line_comments, minus.start, rule_pos, own=own, for_rule=for_rule)

    amount = parser.pop()
    duration, line_comments = parse_parameter(parser, amount, rule_pos)
    if not isinstance(duration, DurationParameter):
        raise parser.error(PARSER_EXPECTED_DURATION, amount.start)
    _extend(for_rule, line_comments)

    right_paren, line_comments = parser.pop_with_line_comments()
    if right_paren.kind != TokenKind.RIGHT_PAREN:
        raise parser.error(PARSER_EXPECTED_TOKEN, right_paren.start, expected=")", found=_found(right_paren))
    _route(line_comments, right_paren.start, rule_pos, own=own, for_rule=for_rule)

    date = DateParameter(
        now_pos=now.start,
        left_paren_pos=left_paren.start,
        minus_pos=minus.start,
        duration=duration,
        right_paren_pos=right_paren.start,
        comments=CommentGroup.of(own),
    )
    return date, CommentGroup.of(for_rule)


# -------------------------
# Expressions
# -------------------------


def parse_expression(parser: Parser, token: Token, rule_pos: Pos) -> tuple[Expression, CommentGroup | None]:
    """Parse the expression introduced by `token`.

    Returns the expression and the comments that belong to the enclosing rule.
    """
    own: list[Comment] = []
    for_rule: list[Comment] = []

    match token.kind:
        case kind if kind.is_comparison:
            value, line_comments = parser.pop_with_line_comments()
            _route(line_comments, token.start, rule_pos, own=own, for_rule=for_rule)

            right: Parameter
            if value.kind.is_parameter_acceptable:
                right, line_comments = parse_parameter(parser, value, rule_pos)
            elif value.kind == TokenKind.LEFT_PAREN:
                right, line_comments = parse_relative_date(parser, value, rule_pos)
            else:
                raise parser.error(PARSER_UNEXPECTED_TOKEN, value.start, found=value.kind.display)
            _extend(for_rule, line_comments)

            operator = cast(ComparisonOperator, token.text)
            return ComparisonExpression(token.start, operator, right, CommentGroup.of(own)), CommentGroup.of(for_rule)

        case TokenKind.BETWEEN:
            lower = _parse_operand(parser, rule_pos, for_rule)

            conjunction, line_comments = parser.pop_with_line_comments()
            if conjunction.kind != TokenKind.AND:
                raise parser.error(
                    PARSER_EXPECTED_TOKEN,
                    conjunction.start,
                    expected=TokenKind.AND.display,
                    found=_found(conjunction),
                )
            _route(line_comments, conjunction.start, rule_pos, own=own, for_rule=for_rule)

            upper = _parse_operand(parser, rule_pos, for_rule)
            return BetweenExpression(token.start, lower, upper, CommentGroup.of(own)), CommentGroup.of(for_rule)

        case TokenKind.IN:
            target = _parse_in_list(parser, token, rule_pos, own, for_rule)
            return parse_with_threshold(parser, target, rule_pos, for_rule)

        case TokenKind.MATCHES:
            pattern, line_comments = parser.pop_with_line_comments()
            if pattern.kind != TokenKind.STRING:
                raise parser.error(PARSER_EXPECTED_STRING, pattern.start, found=_found(pattern))
            _route(line_comments, pattern.start, rule_pos, own=own, for_rule=for_rule)

            target = MatchesExpression(token.start, pattern.start, pattern.text[1:-1], CommentGroup.of(own))
            return parse_with_threshold(parser, target, rule_pos, for_rule)

        case _:
            raise parser.error(PARSER_UNEXPECTED_TOKEN, token.start, found=token.kind.display)


def parse_with_threshold(
    parser: Parser,
    target: InExpression | MatchesExpression,
    rule_pos: Pos,
    for_rule: list[Comment] | None = None,
) -> tuple[Expression, CommentGroup | None]:
    """Wrap `target` in `with threshold <expr>` when the suffix follows."""
    rule_comments = list(for_rule or ())

    with_token = parser.pop()
    if with_token.kind != TokenKind.WITH:
        parser.push(with_token)
        return target, CommentGroup.of(rule_comments)

    own: list[Comment] = []
    threshold_token, line_comments = parser.pop_with_line_comments()
    if threshold_token.kind != TokenKind.THRESHOLD:
        raise parser.error(
            PARSER_EXPECTED_TOKEN,
            threshold_token.start,
            expected=TokenKind.THRESHOLD.display,
            found=_found(threshold_token),
        )
    _route(line_comments, with_token.start, rule_pos, own=own, for_rule=rule_comments)

    start = parser.pop()
    if not start.kind.is_expression_start:
        raise parser.error(PARSER_UNEXPECTED_TOKEN, start.start, found=start.kind.display)
    threshold, line_comments = parse_expression(parser, start, rule_pos)
    if not is_threshold_expression(threshold):
        raise parser.error(PARSER_EXPECTED_THRESHOLD_EXPRESSION, start.start, found=start.kind.display)
    _extend(rule_comments, line_comments)

    expression = WithThresholdExpression(with_token.start, target, threshold, CommentGroup.of(own))
    return expression, CommentGroup.of(rule_comments)


def _parse_operand(parser: Parser, rule_pos: Pos, for_rule: list[Comment]) -> Parameter:
    token = parser.pop()
    if not _is_operand(token):
        raise parser.error(PARSER_UNEXPECTED_TOKEN, token.start, found=token.kind.display)
    parameter, line_comments = parse_parameter(parser, token, rule_pos)
    _extend(for_rule, line_comments)
    return parameter


def _parse_in_list(
    parser: Parser,
    token: Token,
    rule_pos: Pos,
    own: list[Comment],
    for_rule: list[Comment],
) -> InExpression:
    left_bracket, line_comments = parser.pop_with_line_comments()
    if left_bracket.kind != TokenKind.LEFT_BRACKET:
        raise parser.error(PARSER_EXPECTED_TOKEN, left_bracket.start, expected="[", found=_found(left_bracket))
    _route(line_comments, left_bracket.start, rule_pos, own=own, for_rule=for_rule)

    values: list[Parameter] = []
    while True:
        item = _pop_skipping_comments(parser, own)
        if item.kind == TokenKind.RIGHT_BRACKET and not values:
            closing = item
            break
        if not _is_operand(item):
            raise parser.error(PARSER_UNEXPECTED_TOKEN, item.start, found=item.kind.display)
        value, line_comments = parse_parameter(parser, item, rule_pos)
        values.append(value)
        _extend(for_rule, line_comments)

        separator = _pop_skipping_comments(parser, own)
        if separator.kind == TokenKind.RIGHT_BRACKET:
            closing = separator
            break
        if separator.kind != TokenKind.COMMA:
            raise parser.error(PARSER_EXPECTED_TOKEN, separator.start, expected=",", found=_found(separator))

    line_comments = parser.parse_line_comments(closing.start)
    _route(line_comments, closing.start, rule_pos, own=own, for_rule=for_rule)
    return InExpression(token.start, left_bracket.start, closing.start, tuple(values), CommentGroup.of(own))


def _pop_skipping_comments(parser: Parser, into: list[Comment]) -> Token:
    token = parser.pop()
    while token.kind == TokenKind.COMMENT:
        into.append(Comment(token.start, token.text))
        token = parser.pop()
    return token


# -------------------------
# Helpers
# -------------------------


def _line_comments(parser: Parser, anchor: Pos, rule_pos: Pos) -> tuple[CommentGroup | None, CommentGroup | None]:
    """Split trailing comments into (node's own, rule's)."""
    group = parser.parse_line_comments(anchor)
    if anchor.line == rule_pos.line:
        return None, group
    return group, None


def _route(
    group: CommentGroup | None,
    anchor: Pos,
    rule_pos: Pos,
    *,
    own: list[Comment],
    for_rule: list[Comment],
) -> None:
    if group is None:
        return
    if anchor.line == rule_pos.line:
        for_rule.extend(group)
    else:
        own.extend(group)


def _extend(comments: list[Comment], group: CommentGroup | None) -> None:
    if group is not None:
        comments.extend(group)


def _found(token: Token) -> str:
    return token.text or token.kind.display


def _is_operand(token: Token) -> bool:
    # `now()` is only accepted as the right side of a comparison.
    return token.kind.is_parameter_acceptable and token.kind != TokenKind.NOW
