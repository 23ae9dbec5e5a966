"""
climb CLI Entrypoint.

This module provides the command-line interface for evaluating one climb
expression.

Features:
    - Parse and evaluate an expression given on the command line.
    - Print the AST (bracketed echo or JSON) followed by the result.
    - Dump the token stream with each token's span underlined.
    - Seed variables with `-D name=value`.
    - Render lexical and syntax errors with a caret underline.
    - Launch an interactive REPL.

Example usage:
    climb "1 + 2 * 3"
    climb -D x=4 "let y = 2 in x ** y"
    climb --tokens "(1 + 2"
    climb --repl

Functions:
    run_climb(source: str, env: dict[str, float] | None = None, show_tokens: bool = False,
              as_json: bool = False) -> int:
        Runs the pipeline (tokenize → parse → evaluate) and prints the outcome.

    main(argv: list[str] | None = None) -> int:
        Parses CLI arguments and invokes the appropriate action (REPL or evaluation).
"""

import argparse
import json
import logging
import sys

from climb.climb_errors import EvalError, SpanError
from climb.climb_eval import Environment, evaluate
from climb.climb_lexer import Tokenizer
from climb.climb_parser import parse
from climb.climb_span import format_error

logger = logging.getLogger("climb.cli")


def print_tokens(source: str) -> None:
    """Prints every token of `source` with its underlined span, then any lexical error."""
    tokenizer = Tokenizer(source)
    for tok in tokenizer:
        print(tok.describe(source))
    error = tokenizer.pop_error()
    if error is not None:
        print(format_error(source, error))


def run_climb(
    source: str,
    env: Environment | None = None,
    show_tokens: bool = False,
    as_json: bool = False,
) -> int:
    """
    Run the climb pipeline on one expression and print the outcome.

    Args:
        source (str): The expression text.
        env (Environment | None): Initial variable bindings. Defaults to none.
        show_tokens (bool): If True, dumps the token stream first.
        as_json (bool): If True, prints the AST as JSON instead of the bracketed echo.

    Returns:
        int: 0 on success, 1 if the expression could not be parsed or evaluated.

    Side Effects:
        Prints the AST and result, or a formatted error, to stdout.
    """
    if show_tokens:
        print_tokens(source)

    try:
        expr = parse(source)
    except SpanError as e:
        logger.debug("%s error in %r", e.kind, source)
        print(format_error(source, e))
        return 1

    if as_json:
        print(json.dumps(expr.to_dict(), indent=2))
    else:
        print(expr)

    try:
        result = evaluate(expr, dict(env) if env else None)
    except EvalError as e:
        print(f"error: {e}")
        return 1
    print(result)
    return 0


def parse_define(text: str) -> tuple[str, float]:
    """argparse type for `-D name=value`."""
    name, sep, value = text.partition("=")
    name = name.strip()
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"expected NAME=VALUE, got {text!r}")
    try:
        return name, float(value)
    except ValueError:
        raise argparse.ArgumentTypeError(
            f"value for {name!r} is not a number: {value!r}"
        ) from None


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="climb", description="Parse and evaluate an arithmetic expression."
    )
    parser.add_argument("source", nargs="?", help="Expression to evaluate")
    parser.add_argument(
        "-D",
        "--define",
        metavar="NAME=VALUE",
        action="append",
        type=parse_define,
        default=[],
        help="Bind a variable before evaluating (repeatable)",
    )
    parser.add_argument(
        "--tokens", action="store_true", help="Print the token stream first"
    )
    parser.add_argument(
        "--json", dest="as_json", action="store_true", help="Print the AST as JSON"
    )
    parser.add_argument(
        "--repl",
        action="store_true",
        help="Launch interactive REPL instead of evaluating one expression",
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Log debug output to stderr"
    )
    return parser


def main(argv: list[str] | None = None) -> int:
    """
    Entry point for the climb CLI.

    Launches the REPL if no expression is given or `--repl` is specified,
    otherwise evaluates the expression and returns the exit status.
    """
    args = build_arg_parser().parse_args(argv)

    if args.verbose:
        logging.basicConfig(
            level=logging.DEBUG, format="%(name)s: %(message)s", stream=sys.stderr
        )

    env: Environment = dict(args.define)

    if args.repl or args.source is None:
        from climb.climb_repl import start_repl

        start_repl(env=env, show_tokens=args.tokens, as_json=args.as_json)
        return 0

    return run_climb(
        args.source, env=env, show_tokens=args.tokens, as_json=args.as_json
    )


if __name__ == "__main__":
    sys.exit(main())
