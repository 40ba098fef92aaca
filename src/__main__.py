#!/usr/bin/env python3
"""
mathdown - batch math renderer

Renders every document below an input directory, replacing $$block$$ and
$inline$ TeX math with MathML, and writes the results to the same relative
paths below an output directory.

This entry point follows the ChRIS "plugin" pattern (inputdir, outputdir
positional arguments); the mdBook preprocessor lives in
``mathdown.preprocessor``.

Usage:
    mathdown inputdir/ outputdir/ [--pattern GLOB] [--macros FILE] [--strict]

Examples:
    # Render all Markdown files
    mathdown docs/ build/

    # With a macro file and a custom pattern, verbose
    mathdown docs/ build/ --macros docs/macros.txt --pattern "**/*.markdown" -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, Namespace, ArgumentDefaultsHelpFormatter

from chris_plugin import chris_plugin
from .config import appsettings
from .lib import MathRenderer, macros_load, __version__, LOG, state_connectToLogger
from .models import ProgramState, pipeline, MacroSourceError


# Define CLI arguments
parser = ArgumentParser(
    description="mathdown - render delimited TeX math in documents to MathML",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument(
    "--pattern",
    default=None,
    type=str,
    help=f"Glob selecting documents below inputdir (default from settings: {appsettings.document_pattern})",
)

parser.add_argument(
    "--macros",
    default=None,
    type=str,
    help="File of '\\name:body' macro definitions, one per line",
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
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate the input directory and resolve the macro file path.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - macrosFile: Macro file path, or None for no macros
            - envOK: True if environment is valid

    Exits:
        1 if the input directory does not exist
    """
    state = inputstate.copy()
    LOG("Checking environment...", level=2)

    if state.inputdir is None or not state.inputdir.is_dir():
        print(f"Error: Input directory not found: {state.inputdir}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    macros = state.macros or appsettings.macros_path
    state.macrosFile = Path(macros) if macros else None
    LOG(f"Macro file: {state.macrosFile}", level=2)

    state.envOK = True
    return state


def macros_read(inputstate: ProgramState) -> ProgramState:
    """
    Load the macro table once for the whole run.

    Returns:
        ProgramState with added field:
            - macroTable: read-only macro table

    Exits:
        1 if the macro file is configured but unreadable
    """
    state = inputstate.copy()
    try:
        state.macroTable = macros_load(state.macrosFile)
    except MacroSourceError as e:
        print(f"Error: {e}", file=sys.stderr)
        sys.exit(1)
    LOG(f"{len(state.macroTable)} macros available", level=2)
    return state


def documents_read(inputstate: ProgramState) -> ProgramState:
    """
    Collect every document matching the glob pattern.

    Returns:
        ProgramState with added field:
            - documents: relative POSIX path -> document text

    Exits:
        1 if a matching file cannot be read
    """
    state = inputstate.copy()
    pattern = state.pattern or appsettings.document_pattern
    LOG(f"Collecting documents matching {pattern}", level=1)

    documents = {}
    for path in sorted(state.inputdir.glob(pattern)):
        if not path.is_file():
            continue
        try:
            documents[path.relative_to(state.inputdir).as_posix()] = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            print(f"Error reading {path}: {e}", file=sys.stderr)
            sys.exit(1)

    LOG(f"Found {len(documents)} documents", level=2)
    state.documents = documents
    return state


def documents_render(inputstate: ProgramState) -> ProgramState:
    """
    Render math in every collected document.

    Returns:
        ProgramState with added field:
            - rendered: relative path -> rendered text
    """
    state = inputstate.copy()
    renderer = MathRenderer(
        macros=state.macroTable,
        strict=state.strict or appsettings.strict_delimiters,
    )
    state.rendered = renderer.documents_render(state.documents or {})
    return state


def documents_write(inputstate: ProgramState) -> ProgramState:
    """
    Write rendered documents below outputdir, mirroring their input paths.

    Returns:
        ProgramState with added field:
            - writtenFiles: number of files written

    Exits:
        1 if a file cannot be written
    """
    state = inputstate.copy()
    written = 0
    for name, content in (state.rendered or {}).items():
        target = state.outputdir / name
        try:
            target.parent.mkdir(parents=True, exist_ok=True)
            target.write_text(content, encoding="utf-8")
        except OSError as e:
            print(f"Error writing {target}: {e}", file=sys.stderr)
            sys.exit(1)
        LOG(f"Wrote {target}", level=2)
        written += 1
    state.writtenFiles = written
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """Summarise the run (terminal pipeline stage)."""
    state = inputstate.copy()
    LOG(f"Rendered {state.writtenFiles} documents into {state.outputdir}", level=1)
    if not state.writtenFiles:
        LOG("No documents matched; nothing written", level=1, severity="WARNING")
    return state


@chris_plugin(
    parser=parser,
    title="mathdown - TeX math to MathML renderer",
    category="Utility",
    min_memory_limit="100Mi",
    min_cpu_limit="500m",
)
def main(options: Namespace, inputdir: Path, outputdir: Path):
    """
    Main entry point - render math in every document of inputdir.

    Orchestrates the pipeline:
        1. env_check: validate paths
        2. macros_read: load the macro table once
        3. documents_read: collect matching documents
        4. documents_render: substitute math
        5. documents_write: write results to outputdir
        6. results_report: summary

    Args:
        options: CLI arguments from argparse
        inputdir: Directory containing source documents
        outputdir: Directory where rendered documents are written
    """
    state: ProgramState = ProgramState.state_createFromNamespace(
        options=options, inputdir=inputdir, outputdir=outputdir
    )

    state_connectToLogger(state)

    pipeline(
        state,
        env_check,
        macros_read,
        documents_read,
        documents_render,
        documents_write,
        results_report,
    )


if __name__ == "__main__":
    main()  # type: ignore  # @chris_plugin decorator transforms signature
