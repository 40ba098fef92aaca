r"""
Macro table loader

Reads user-defined math macros from a plain text source, one definition
per line:

    \R:\mathbb{R}
    \norm:\left\lVert #1 \right\rVert

Lines that are empty or do not start with a backslash are ignored. The
name keeps its backslash; everything after the first colon is the body.
"""

from pathlib import Path
from types import MappingProxyType
from typing import Dict, Optional, Tuple, Union

from ..models.segments import MacroTable, EMPTY_MACROS
from ..models.errors import MacroSourceError
from .log import LOG

MACRO_ESCAPE = "\\"


def macroLine_parse(line: str) -> Optional[Tuple[str, str]]:
    r"""
    Parse one ``\name:body`` line into a (name, body) pair

    Returns None for lines that carry no definition: empty lines, lines not
    starting with the escape character, and escape lines with no colon.
    """
    if not line.startswith(MACRO_ESCAPE):
        return None
    name, separator, body = line.partition(":")
    if not separator:
        return None
    return name, body


def macros_parse(source: str) -> MacroTable:
    r"""
    Build a read-only macro table from definition source text

    Args:
        source: Newline separated ``\name:body`` definitions

    Returns:
        Mapping of macro name (with backslash) to body. A later definition
        of the same name replaces the earlier one.

    Example:
        >>> dict(macros_parse("\\foo:bar\n\\baz:qux\nignored line\n"))
        {'\\foo': 'bar', '\\baz': 'qux'}
    """
    table: Dict[str, str] = {}

    for line_number, line in enumerate(source.split("\n"), start=1):
        line = line.rstrip("\r")
        pair = macroLine_parse(line)
        if pair is None:
            if line.startswith(MACRO_ESCAPE):
                LOG(
                    f"Skipping macro line {line_number}: no ':' separator in {line!r}",
                    level=1,
                    severity="WARNING",
                )
            continue
        name, body = pair
        if name in table:
            LOG(f"Macro {name} redefined on line {line_number}", level=2)
        table[name] = body

    LOG(f"Loaded {len(table)} macros", level=2)
    return MappingProxyType(table)


def macros_load(path: Optional[Union[str, Path]]) -> MacroTable:
    """
    Read and parse a macro file

    Args:
        path: Macro file location, or None when no file is configured

    Returns:
        Macro table; empty when ``path`` is None

    Raises:
        MacroSourceError: If the file cannot be opened or decoded
    """
    if path is None:
        return EMPTY_MACROS

    macro_file = Path(path)
    try:
        source = macro_file.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise MacroSourceError(str(macro_file), e) from e

    LOG(f"Read {len(source)} characters from {macro_file}", level=2)
    return macros_parse(source)
