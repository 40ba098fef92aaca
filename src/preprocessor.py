#!/usr/bin/env python3
"""
mdbook-mathdown - mdBook preprocessor entry point

mdBook calls the preprocessor twice:

    mdbook-mathdown supports <renderer>
        Exit 0 if the renderer can take our output, 1 otherwise.

    mdbook-mathdown [--macros FILE]
        Read [context, book] JSON from stdin, write the book with every
        chapter's math rendered to stdout.

Enable it in book.toml:

    [preprocessor.mathdown]
    command = "mdbook-mathdown"
    macros = "macros.txt"   # optional, relative to the book root
"""

import sys
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter
from pathlib import Path
from typing import List, Optional

from .config import appsettings
from .lib import (
    MathRenderer,
    macros_load,
    renderer_supports,
    book_read,
    book_write,
    book_render,
    context_macrosPath,
    __version__,
    LOG,
    state_connectToLogger,
)
from .models import ProgramState, pipeline, MathdownError


parser = ArgumentParser(
    prog="mdbook-mathdown",
    description="mdBook preprocessor rendering $$block$$ and $inline$ TeX math to MathML",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--macros",
    default=None,
    type=str,
    help="File of '\\name:body' macro definitions (overrides book.toml)",
)

parser.add_argument(
    "--strict",
    action="store_true",
    default=False,
    help="Keep text after an unmatched delimiter as-is instead of rendering it",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase log output on stderr (can be repeated)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")

subparsers = parser.add_subparsers(dest="command")
supports_parser = subparsers.add_parser(
    "supports", help="Check whether a renderer is supported by this preprocessor"
)
supports_parser.add_argument("renderer", type=str)


def supports_handle(renderer: str) -> int:
    """Exit status for ``supports <renderer>``: 0 if supported, 1 otherwise."""
    return 0 if renderer_supports(renderer) else 1


def payload_read(inputstate: ProgramState) -> ProgramState:
    """
    Read the [context, book] payload from stdin.

    Returns:
        ProgramState with context and book set

    Raises:
        HostProtocolError: On a malformed payload
    """
    state = inputstate.copy()
    state.context, state.book = book_read(sys.stdin)
    LOG(f"Received book from mdBook {state.context.get('mdbook_version', '?')}", level=2)
    return state


def macros_resolve(inputstate: ProgramState) -> ProgramState:
    """
    Pick the macro file (CLI, then book.toml, then settings) and load it.

    Raises:
        MacroSourceError: If the chosen file cannot be read
    """
    state = inputstate.copy()
    if state.macros:
        state.macrosFile = Path(state.macros)
    else:
        state.macrosFile = context_macrosPath(state.context or {})
        if state.macrosFile is None and appsettings.macros_path:
            state.macrosFile = Path(appsettings.macros_path)
    LOG(f"Macro file: {state.macrosFile}", level=2)
    state.macroTable = macros_load(state.macrosFile)
    return state


def chapters_render(inputstate: ProgramState) -> ProgramState:
    """Render math in every chapter of the book."""
    state = inputstate.copy()
    renderer = MathRenderer(
        macros=state.macroTable,
        strict=state.strict or appsettings.strict_delimiters,
    )
    state.processedBook = book_render(state.book, renderer)
    return state


def payload_write(inputstate: ProgramState) -> ProgramState:
    """Write the processed book to stdout (terminal pipeline stage)."""
    state = inputstate.copy()
    book_write(state.processedBook, sys.stdout)
    return state


def preprocess(options: Namespace) -> int:
    """
    Run the stdin -> stdout preprocessing pipeline.

    Nothing is written to stdout unless every stage succeeds.

    Returns:
        Process exit status
    """
    state = ProgramState.state_createFromNamespace(options)
    state_connectToLogger(state)

    try:
        pipeline(state, payload_read, macros_resolve, chapters_render, payload_write)
    except MathdownError as e:
        print(f"Error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        return 1
    return 0


def main(argv: Optional[List[str]] = None) -> None:
    """
    Console entry point for ``mdbook-mathdown``.

    Args:
        argv: Argument list (defaults to sys.argv[1:])
    """
    options = parser.parse_args(argv)
    if options.command == "supports":
        sys.exit(supports_handle(options.renderer))
    sys.exit(preprocess(options))


if __name__ == "__main__":
    main()
