"""
Parser tests: tree shape, instruction counting and the internal guards.
"""

import pytest

from bfasm import InternalError, Loop, Operator, Parser, Token, count_instructions, count_loops, parse, tokenize

T = Token


def _parse(source):
    return parse(tokenize(source))


def test_flat_program():
    assert _parse("+>.") == [Operator(T.ADD, 1), Operator(T.MOVE_FORWARD, 1), Operator(T.STDOUT, 1)]


def test_loop():
    assert _parse("+[-]") == [Operator(T.ADD, 1), Loop([Operator(T.SUB, 1)])]


def test_nested_loops():
    assert _parse("[[+]>]") == [
        Loop([Loop([Operator(T.ADD, 1)]), Operator(T.MOVE_FORWARD, 1)]),
    ]


def test_empty_loop_is_kept():
    assert _parse("[]+") == [Loop([]), Operator(T.ADD, 1)]


def test_every_operator_starts_with_count_one():
    ast = _parse("+++")
    assert [op.count for op in ast] == [1, 1, 1]


@pytest.mark.parametrize(
    "source, expected",
    [
        ("", 0),
        ("+-><.,", 6),
        ("+[->+<].", 7),
        ("[[]]", 2),
        ("++ comment +++\n[-]", 4),
    ],
)
def test_instruction_count(source, expected):
    parser = Parser(tokenize(source))
    parser.parse()
    assert parser.instruction_count == expected
    assert count_instructions(parser.syntax_tree) == expected


def test_count_loops():
    assert count_loops(_parse("[[][+]]>[-]")) == 4


def test_parse_is_cached():
    parser = Parser(tokenize("+[-]"))
    assert parser.parse() is parser.parse()


def test_deep_nesting():
    depth = 200
    ast = _parse("[" * depth + "+" + "]" * depth)
    node = ast[0]
    for _ in range(depth - 1):
        node = node.body[0]
    assert node.body == [Operator(T.ADD, 1)]


def test_stray_loop_end_is_internal_error():
    with pytest.raises(InternalError):
        parse([T.ADD, T.LOOP_END])


def test_missing_loop_end_is_internal_error():
    with pytest.raises(InternalError):
        parse([T.LOOP_START, T.ADD])
