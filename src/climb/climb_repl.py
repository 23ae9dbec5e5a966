"""
Interactive read-eval-print loop for climb.

Each line is an independent expression: bindings made with `let` do not
outlive the line. Variables given with `-D` on the command line are visible on
every line.

Commands:
    :quit, :q    leave the REPL
    :tokens      toggle the token dump
    :json        toggle JSON AST output
"""

from climb.climb_cli import run_climb
from climb.climb_eval import Environment

PROMPT = "climb> "


def start_repl(
    env: Environment | None = None,
    show_tokens: bool = False,
    as_json: bool = False,
) -> None:
    print("climb REPL. Type :quit to exit.")
    while True:
        try:
            src = input(PROMPT)
        except (KeyboardInterrupt, EOFError):
            print("\nExiting climb REPL.")
            break

        src = src.strip()
        if not src:
            continue
        if src in (":quit", ":q"):
            break
        if src == ":tokens":
            show_tokens = not show_tokens
            print(f"[ok] >>> token dump {'on' if show_tokens else 'off'}")
            continue
        if src == ":json":
            as_json = not as_json
            print(f"[ok] >>> JSON output {'on' if as_json else 'off'}")
            continue

        run_climb(src, env=env, show_tokens=show_tokens, as_json=as_json)
