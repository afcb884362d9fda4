"""
Lexer tests: tokens, comments and the two static checks.
"""

import pytest

from bfasm import InternalError, Lexer, PointerUnderflowError, Token, UnmatchedBracketError, tokenize

T = Token


def test_all_symbols():
    assert tokenize("><+-.,[]") == [
        T.MOVE_FORWARD, T.MOVE_BACK, T.ADD, T.SUB, T.STDOUT, T.STDIN, T.LOOP_START, T.LOOP_END,
    ]


def test_whitespace_is_skipped():
    assert tokenize(" +\t+ \n  - ") == [T.ADD, T.ADD, T.SUB]


def test_comment_runs_to_end_of_line():
    # 'h' starts a comment, the '++' after it on the same line are ignored
    assert tokenize("+ hello ++\n-") == [T.ADD, T.SUB]


def test_brackets_inside_comment_are_ignored():
    assert tokenize("+ this is a [ comment\n.") == [T.ADD, T.STDOUT]


def test_empty_source():
    assert tokenize("") == []


def test_lone_loop_end_fails_at_offset_zero():
    with pytest.raises(UnmatchedBracketError) as exc:
        tokenize("]")
    err = exc.value
    assert err.position.offset == 0
    assert err.position.line == 1
    assert err.position.column == 0
    assert err.excess == 1


def test_premature_loop_end_reports_exact_index():
    with pytest.raises(UnmatchedBracketError) as exc:
        tokenize("+[]]+")
    assert exc.value.position.offset == 3


def test_premature_loop_end_on_later_line():
    with pytest.raises(UnmatchedBracketError) as exc:
        tokenize("++\n+]")
    pos = exc.value.position
    assert (pos.line, pos.column, pos.offset) == (2, 1, 4)


def test_crlf_offsets():
    with pytest.raises(UnmatchedBracketError) as exc:
        tokenize("+\r\n]")
    pos = exc.value.position
    assert (pos.line, pos.column, pos.offset) == (2, 0, 3)


@pytest.mark.parametrize("source, excess", [("[", 1), ("[[+]", 1), ("[[[", 3), ("[][[-", 2)])
def test_unclosed_loops_report_excess(source, excess):
    with pytest.raises(UnmatchedBracketError) as exc:
        tokenize(source)
    assert exc.value.excess == excess
    assert f"{excess} '['" in exc.value.message


def test_unclosed_loop_points_at_first_open_bracket():
    with pytest.raises(UnmatchedBracketError) as exc:
        tokenize("+[]\n [[-]")
    pos = exc.value.position
    assert (pos.line, pos.column) == (2, 1)


def test_pointer_underflow():
    with pytest.raises(PointerUnderflowError) as exc:
        tokenize("><<")
    assert exc.value.position.offset == 2


def test_pointer_back_to_zero_is_fine():
    assert tokenize("><>>><<<") == [T.MOVE_FORWARD, T.MOVE_BACK] + [T.MOVE_FORWARD] * 3 + [T.MOVE_BACK] * 3


def test_pointer_check_is_static():
    # the simulation does not know how often a loop runs
    tokenize(">+[<]")
    with pytest.raises(PointerUnderflowError):
        tokenize("+[<]")


def test_excerpt_is_bounded_to_the_line():
    line = "+" * 20 + "]" + "-" * 20
    with pytest.raises(UnmatchedBracketError) as exc:
        tokenize(">\n" + line)
    err = exc.value
    assert err.excerpt == "+" * 9 + "]" + "-" * 9
    assert err.marker_offset == 9
    assert err.marker == " " * 9 + "^"


def test_excerpt_near_line_start():
    with pytest.raises(UnmatchedBracketError) as exc:
        tokenize("+]\n+++")
    assert exc.value.excerpt == "+]"
    assert exc.value.marker_offset == 1


def test_render_contains_message_and_marker():
    with pytest.raises(UnmatchedBracketError) as exc:
        tokenize("]")
    text = exc.value.render()
    assert "Line=1 | Col=0" in text
    assert "^" in text
    assert "Not enough matches for ']'" in text


def test_take_tokens_only_once():
    lexer = Lexer("+-")
    assert lexer.take_tokens() == [T.ADD, T.SUB]
    with pytest.raises(InternalError):
        lexer.take_tokens()


def test_tokenize_is_cached_until_taken():
    lexer = Lexer("[+]")
    assert lexer.tokenize() is lexer.tokenize()
    assert lexer.bracket_balance == 0


def test_retry_after_unclosed_bracket_starts_fresh():
    lexer = Lexer("[")
    for _ in range(2):
        with pytest.raises(UnmatchedBracketError) as exc:
            lexer.tokenize()
        assert exc.value.excess == 1
        assert lexer.bracket_balance == 1


def test_retry_after_underflow_starts_fresh():
    lexer = Lexer("><<")
    columns = []
    for _ in range(2):
        with pytest.raises(PointerUnderflowError) as exc:
            lexer.tokenize()
        columns.append(exc.value.position.column)
    assert columns == [2, 2]


def test_render_follows_report_layout():
    with pytest.raises(UnmatchedBracketError) as exc:
        tokenize("+++]")
    err = exc.value
    assert err.render("prog.bf").splitlines() == [
        "Error: prog.bf Line=1 | Col=3",
        "    +++]",
        "       ^",
        "       |----- Not enough matches for ']'",
    ]
    assert [part for _, part in err.report()[0]] == ['label', 'marker', 'where']
