"""
Interactive read-parse-print loop for niftel.

Each entry is scanned and parsed on its own and the resulting statements are
printed with the selected renderer. Input continues on `... ` lines while
braces are unbalanced.

Commands:
    exit, quit        Leave the REPL.
    :tokens           Toggle printing of the token stream before the AST.
    :format <name>    Switch the renderer ('tree', 'json' or 'source').
"""

import logging

from niftel.niftel_constants import ERROR, LBRACE, RBRACE
from niftel.niftel_lexer import scan
from niftel.niftel_parser import ParseError, parse
from niftel.niftel_printer import PRINTERS, render

logger = logging.getLogger(__name__)

FORMATS = (*PRINTERS, "json")


def read_entry() -> str | None:
    """Reads one entry, continuing while braces are unbalanced.

    Returns:
        str | None: The entered source, or None when the user asked to leave.
    """
    src_lines: list[str] = []
    while True:
        prompt = ">>> " if not src_lines else "... "
        line = input(prompt)
        if line.strip() in ("exit", "quit") and not src_lines:
            return None
        src_lines.append(line)
        src = "\n".join(src_lines)
        # Braces inside string literals do not count; a scan error ends the entry.
        kinds = [tok.kind for tok in scan(src)]
        if ERROR in kinds or kinds.count(LBRACE) <= kinds.count(RBRACE):
            return src.strip()


def handle_command(src: str, state: dict[str, object]) -> bool:
    """Applies a `:`-prefixed REPL command. Returns False if `src` is not one."""
    if not src.startswith(":"):
        return False
    name, _, arg = src[1:].partition(" ")
    arg = arg.strip()
    if name == "tokens":
        state["tokens"] = not state["tokens"]
        print(f"[mode] >>> Token display {'ON' if state['tokens'] else 'OFF'}")
    elif name == "format" and arg in FORMATS:
        state["fmt"] = arg
        print(f"[mode] >>> Format {arg}")
    elif name == "format":
        print(f"[error] >>> Unknown format {arg!r}; choose from {', '.join(FORMATS)}")
    else:
        print(f"[error] >>> Unknown command :{name}")
    return True


def start_repl(fmt: str = "tree", verbose: bool = False) -> None:
    print(f"niftel REPL [format={fmt}]. Type 'exit' or 'quit' to leave.")
    state: dict[str, object] = {"fmt": fmt, "tokens": verbose}

    while True:
        try:
            src = read_entry()
        except (KeyboardInterrupt, EOFError):
            print("\nExiting niftel REPL.")
            return
        if src is None:
            print("Exiting niftel REPL.")
            return
        if not src or handle_command(src, state):
            continue

        tokens = scan(src)
        if state["tokens"]:
            print(" ".join(f"{tok.kind}:{tok.lexeme!r}" for tok in tokens))

        try:
            statements = parse(tokens)
        except ParseError as e:
            logger.debug("parse failed: %s", e)
            print(f"[error] >>> {e}")
            continue

        if not statements:
            continue
        try:
            print(render(statements, str(state["fmt"])))
        except ValueError as e:
            print(f"[error] >>> {e}")
