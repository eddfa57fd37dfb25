"""
niftel CLI Entrypoint.

This module provides the command-line interface for checking niftel scripts.
It reads a `.nif` file (or an inline string), runs the scanner and parser, and
prints the resulting AST. It can also start an interactive REPL.

Features:
    - Read source from `.nif` files or inline strings.
    - Print the token stream, or the AST as a tree, JSON or canonical source.
    - Output to console or file.
    - Report syntax errors as `Parsing error: <message> at line <line>`.
    - Launch an interactive REPL.

Example usage:
    niftel deploy.nif
    niftel -s "var x = 1 + 2" -f json
    niftel deploy.nif -f source -o formatted.nif
    niftel --tokens deploy.nif
    niftel --repl

Functions:
    run_niftel(source: str, is_string: bool = False, fmt: str = "tree", out: str | None = None,
               show_tokens: bool = False, pretty: bool = False) -> None:
        Executes the front-end pipeline (read → scan → parse → render/output).

    main(argv: list[str] | None = None) -> None:
        Parses CLI arguments and invokes the appropriate action.
"""

import argparse
import logging
import sys

from niftel.niftel_constants import ERROR
from niftel.niftel_lexer import scan
from niftel.niftel_parser import ParseError, parse
from niftel.niftel_printer import render

logger = logging.getLogger(__name__)

SOURCE_SUFFIX = ".nif"


def run_niftel(
    source: str,
    is_string: bool = False,
    fmt: str = "tree",
    out: str | None = None,
    show_tokens: bool = False,
    pretty: bool = False,
) -> None:
    """
    Run the niftel front end: read, scan, parse, and render or write output.

    Args:
        source (str): niftel source code or a path to a `.nif` file.
        is_string (bool): If True, treats `source` as raw code instead of a file path.
        fmt (str): AST rendering, one of 'tree', 'json' or 'source'. Defaults to 'tree'.
        out (str | None): Optional path to write the rendering to. If None, prints to stdout.
        show_tokens (bool): If True, prints the token stream and skips parsing.
        pretty (bool): If True, prints a banner around the rendering.

    Raises:
        ValueError: If `is_string` is False and the source does not end with '.nif',
            or if `fmt` is not a supported rendering.
        OSError: If the source file cannot be read or the output cannot be written.
        ParseError: If the source is not a valid niftel program.
    """
    if not is_string and not source.endswith(SOURCE_SUFFIX):
        raise ValueError(f"Only {SOURCE_SUFFIX} files are supported.")
    # 1. Read source
    if not is_string:
        logger.info("Reading source code from %s", source)
        with open(source, encoding="utf-8") as f:
            source = f.read()

    # 2. Scanning
    tokens = scan(source)
    if show_tokens:
        for tok in tokens:
            row = f"{tok.line:>4}  {tok.kind:<14} {tok.lexeme!r}"
            print(f"{row}  {tok.message}" if tok.kind == ERROR else row)
        return

    # 3. Parsing
    statements = parse(tokens)
    logger.debug("parsed %d statements", len(statements))

    # 4. Rendering
    text = render(statements, fmt)

    # 5. Output result
    if out:
        with open(out, "w", encoding="utf-8") as f:
            f.write(text + "\n")
        if pretty:
            print(f"(wrote to {out})")
        return

    if pretty:
        banner = "=" * 20
        print(f"{banner}\nParsed {len(statements)} statements\n{banner}")
    else:
        print(f"Parsed {len(statements)} statements:")
    print(text)


def build_arg_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="niftel", description="Scan and parse niftel scripts."
    )
    parser.add_argument(
        "source", nargs="?", help="Filename or raw source (with -s)"
    )
    parser.add_argument(
        "-s", "--string", action="store_true", help="Interpret source as literal string"
    )
    parser.add_argument(
        "-f",
        "--format",
        dest="fmt",
        choices=("tree", "json", "source"),
        default="tree",
        help="AST rendering (default: tree)",
    )
    parser.add_argument("-o", "--out", metavar="OUTFILE", help="Output to file")
    parser.add_argument(
        "--tokens", action="store_true", help="Print the token stream instead of the AST"
    )
    parser.add_argument(
        "-p", "--pretty", action="store_true", help="Show output with banners"
    )
    parser.add_argument(
        "--repl", action="store_true", help="Launch interactive REPL"
    )
    parser.add_argument(
        "-v", "--verbose", action="store_true", help="Enable debug logging"
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    """
    Entry point for the niftel CLI.

    Launches the REPL when no source is given or `--repl` is passed; otherwise
    runs the front end on the given file or string. Errors are reported on
    stderr and end the process with status 1.
    """
    args = build_arg_parser().parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    if args.repl or args.source is None:
        from niftel.niftel_repl import start_repl

        start_repl(fmt=args.fmt, verbose=args.verbose)
        return

    try:
        run_niftel(
            source=args.source,
            is_string=args.string,
            fmt=args.fmt,
            out=args.out,
            show_tokens=args.tokens,
            pretty=args.pretty,
        )
    except ParseError as e:
        print(f"Parsing error: {e}", file=sys.stderr)
        sys.exit(1)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    except OSError as e:
        action = "write" if args.out and e.filename == args.out else "read"
        print(f"Failed to {action} file {e.filename}: {e}", file=sys.stderr)
        sys.exit(1)


if __name__ == "__main__":
    main()
