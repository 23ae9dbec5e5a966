import pytest
from hypothesis import given, settings
from hypothesis import strategies as st

from climb.climb_ast import Binop, Expr, FnCall, LetIn, Literal, Negate, Paren, Var
from climb.climb_constants import OPERATORS
from climb.climb_errors import LexicalError, ParseError, SpanError
from climb.climb_parser import Parser, parse
from climb.climb_span import Span

NAMES = ["x", "y", "foo", "bar2"]


@pytest.mark.parametrize(
    "source,expected",
    [
        ("1 - 2 - 3", "[[1.0 - 2.0] - 3.0]"),
        ("2 ** 3 ** 2", "[2.0 ** [3.0 ** 2.0]]"),
        ("1 + 2 * 3", "[1.0 + [2.0 * 3.0]]"),
        ("1 * 2 + 3", "[[1.0 * 2.0] + 3.0]"),
        ("a - b + c", "[[a - b] + c]"),
        ("8 / 4 / 2", "[[8.0 / 4.0] / 2.0]"),
        ("1 < 2 + 3", "[1.0 < [2.0 + 3.0]]"),
        ("2 * 3 ** 2", "[2.0 * [3.0 ** 2.0]]"),
        ("-2 ** 2", "[-2.0 ** 2.0]"),
        ("2 ** -1", "[2.0 ** -1.0]"),
        ("2 * -3", "[2.0 * -3.0]"),
        ("- -2", "--2.0"),
        ("+x", "x"),
        ("-(1 + 2)", "-([1.0 + 2.0])"),
        ("(1 + 2) * 3", "[([1.0 + 2.0]) * 3.0]"),
        ("((x))", "((x))"),
        ("f(1 + 2)", "f([1.0 + 2.0])"),
        ("sin(x) * 2", "[sin(x) * 2.0]"),
        ("let x = 3 in x + 1", "let x = 3.0 in [x + 1.0]"),
        ("1 + let x = 2 in x * 3", "[1.0 + let x = 2.0 in [x * 3.0]]"),
        ("let x = let y = 1 in y in x", "let x = let y = 1.0 in y in x"),
        ("let x = 1 in (let x = 2 in x) + x", "let x = 1.0 in [(let x = 2.0 in x) + x]"),
    ],
)  # type: ignore[misc]
def test_parse_renders(source: str, expected: str) -> None:
    assert str(parse(source)) == expected


def test_binop_structure() -> None:
    assert parse("1 + 2") == Binop(OPERATORS["+"], Literal(1.0), Literal(2.0))


def test_left_associative_structure() -> None:
    minus = OPERATORS["-"]
    assert parse("1 - 2 - 3") == Binop(
        minus, Binop(minus, Literal(1.0), Literal(2.0)), Literal(3.0)
    )


def test_right_associative_structure() -> None:
    power = OPERATORS["**"]
    assert parse("2 ** 3 ** 2") == Binop(
        power, Literal(2.0), Binop(power, Literal(3.0), Literal(2.0))
    )


def test_paren_is_kept() -> None:
    assert parse("(1)") == Paren(Literal(1.0))
    assert parse("(1)") != Literal(1.0)


def test_unary_plus_adds_no_node() -> None:
    assert parse("+7") == Literal(7.0)


def test_unary_minus_wraps_operand() -> None:
    assert parse("-x") == Negate(Var("x"))


def test_call_and_variable() -> None:
    assert parse("f(x)") == FnCall("f", Var("x"))
    assert parse("f") == Var("f")


def test_let_structure() -> None:
    assert parse("let n = 2 in n") == LetIn("n", Literal(2.0), Var("n"))


@pytest.mark.parametrize(
    "source,message,span",
    [
        ("(1 + 2", "expected RPAREN, got eof", Span(6, 0)),
        ("f(1", "expected RPAREN, got eof", Span(3, 0)),
        ("(1 in", "expected RPAREN, got IN", Span(3, 2)),
        ("", "illegal eof", Span(0, 0)),
        ("1 +", "illegal eof", Span(3, 0)),
        ("-", "illegal eof", Span(1, 0)),
        ("1 2", "unexpected token NUMBER, expected eof", Span(2, 1)),
        ("(1) (2)", "unexpected token LPAREN, expected eof", Span(4, 1)),
        (")", "unexpected token: RPAREN", Span(0, 1)),
        ("in", "unexpected token: IN", Span(0, 2)),
        ("= 1", "unexpected token: EQUALS", Span(0, 1)),
        ("* 2", "unexpected binary operator: *", Span(0, 1)),
        ("1 + ** 2", "unexpected binary operator: **", Span(4, 2)),
        ("let 1 = 2 in 3", "expected IDENT, got NUMBER", Span(4, 1)),
        ("let x 2", "expected EQUALS, got NUMBER", Span(6, 1)),
        ("let x = 2", "expected IN, got eof", Span(9, 0)),
        ("let x = 2 x", "expected IN, got IDENT", Span(10, 1)),
        ("let", "expected IDENT, got eof", Span(3, 0)),
    ],
)  # type: ignore[misc]
def test_syntax_errors(source: str, message: str, span: Span) -> None:
    with pytest.raises(ParseError) as exc:
        parse(source)
    assert exc.value.message == message
    assert exc.value.span == span
    assert exc.value.kind == "syntax"


@pytest.mark.parametrize(
    "source,message,span",
    [
        ("1.", "illegal end of input after decimal point", Span(0, 2)),
        ("1 !! 2", "unknown binary operator: !!", Span(2, 2)),
        ("(1 + 2) $", "unknown binary operator: $", Span(8, 1)),
        ("let x_1 = 2 in x", "illegal start of token: '_'", Span(5, 1)),
    ],
)  # type: ignore[misc]
def test_lexical_errors_surface_through_parser(
    source: str, message: str, span: Span
) -> None:
    with pytest.raises(LexicalError) as exc:
        parse(source)
    assert exc.value.message == message
    assert exc.value.span == span


def test_span_errors_share_base_class() -> None:
    for source in ("1 !! 2", "(1"):
        with pytest.raises(SpanError):
            parse(source)


def test_parser_reads_one_token_ahead() -> None:
    parser = Parser("1 + 2")
    assert parser.current is not None
    assert parser.current.type == "NUMBER"
    assert parser.parse() == Binop(OPERATORS["+"], Literal(1.0), Literal(2.0))
    assert parser.current is None


# Hypothesis strategies producing well-formed source text

numbers = st.one_of(
    st.integers(min_value=0, max_value=10**20).map(str),
    st.tuples(st.integers(0, 999), st.integers(0, 999)).map(
        lambda p: f"{p[0]}.{p[1]}"
    ),
)
names = st.sampled_from(NAMES)
atoms = st.one_of(numbers, names)


def _extend(children: st.SearchStrategy[str]) -> st.SearchStrategy[str]:
    return st.one_of(
        st.builds(lambda a: f"({a})", children),
        st.builds(lambda a: f"- {a}", children),
        st.builds(lambda a: f"+ {a}", children),
        st.builds(lambda n, a: f"{n}({a})", names, children),
        st.builds(
            lambda a, op, b: f"{a} {op} {b}",
            children,
            st.sampled_from(sorted(OPERATORS)),
            children,
        ),
        st.builds(
            lambda n, a, b: f"let {n} = {a} in {b}", names, children, children
        ),
    )


sources = st.recursive(atoms, _extend, max_leaves=12)


@settings(deadline=None)  # type: ignore[misc]
@given(sources)  # type: ignore[misc]
def test_round_trip_through_source(source: str) -> None:
    tree = parse(source)
    again = parse(tree.to_source())
    assert again == tree
    assert str(again) == str(tree)


@settings(deadline=None)  # type: ignore[misc]
@given(sources)  # type: ignore[misc]
def test_generated_sources_evaluate_to_float(source: str) -> None:
    tree = parse(source)
    result = tree.evaluate({name: 1.5 for name in NAMES})
    assert isinstance(result, float)


@given(st.text(alphabet="0123456789 +-*/()<>=!letinxy.", max_size=30))  # type: ignore[misc]
def test_arbitrary_input_parses_or_raises_span_error(source: str) -> None:
    try:
        tree = parse(source)
    except SpanError as e:
        assert 0 <= e.span.begin <= len(source)
        assert e.span.end <= len(source)
    else:
        assert isinstance(tree, Expr)
