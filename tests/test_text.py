import pytest

from dqdlpy.text import NO_POS, Pos, near_snippet


def test_pos_str() -> None:
    assert str(NO_POS) == "-"
    assert str(Pos(0, 3, 0)) == "3"
    assert str(Pos(10, 2, 5)) == "2:5"


def test_pos_validity() -> None:
    assert not NO_POS.is_valid
    assert Pos(0, 1, 1).is_valid


def test_pos_rejects_negative_index() -> None:
    with pytest.raises(ValueError):
        Pos(-1, 1, 1)


def test_pos_advance_does_not_mutate() -> None:
    start = Pos(4, 2, 3)

    assert start.add_column(2) == Pos(6, 2, 5)
    assert start.add_line(1) == Pos(5, 3, 1)
    assert start == Pos(4, 2, 3)


def test_pos_ordering_follows_index() -> None:
    assert Pos(1, 1, 2) < Pos(5, 2, 1)
    assert max([Pos(3, 1, 4), Pos(9, 2, 2)]) == Pos(9, 2, 2)


def test_near_snippet_starts_one_before() -> None:
    assert near_snippet('IsUnique "col-A"', Pos(9, 1, 10)) == ' "col-A"'


def test_near_snippet_at_start_uses_whole_input() -> None:
    assert near_snippet("Rules =", Pos(0, 1, 1)) == "Rules ="


def test_near_snippet_stops_at_newline() -> None:
    assert near_snippet("a b\nc d", Pos(2, 1, 3)) == " b"


def test_near_snippet_truncates() -> None:
    source = "x" * 30

    assert near_snippet(source, Pos(0, 1, 1)) == "x" * 20 + "..."
    assert near_snippet(source, Pos(0, 1, 1), width=5) == "xxxxx..."
