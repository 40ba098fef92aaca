"""
Default render backend: TeX math to MathML

Wraps latex2mathml behind the ``render(expression, options) -> markup``
contract used by MathRenderer. Macros from the options are expanded
textually before conversion. Every failure surfaces as RenderError so the
renderer can fall back to the raw expression.
"""

import re
from typing import Callable, Optional

import latex2mathml.converter

from ..models.segments import MacroTable, RenderOptions
from ..models.errors import RenderError
from ..config import appsettings

OUTPUT_MATHML = "mathml"

# Signature every render backend follows
RenderFunction = Callable[[str, RenderOptions], str]


def macroPattern_build(macros: MacroTable) -> Optional[re.Pattern[str]]:
    r"""
    Compile a single regex matching any macro name in ``macros``

    Longer names are tried first. A name ending in a letter only matches
    when not followed by another letter, so ``\R`` leaves ``\Re`` alone.

    A name only matches where its backslash starts a control sequence:
    after an even run of backslashes (group ``escapes``), never as the
    second half of ``\\``. Group ``name`` holds the macro name.
    """
    if not macros:
        return None
    alternatives = []
    for name in sorted(macros, key=len, reverse=True):
        alternative = re.escape(name)
        if name[-1:].isalpha():
            alternative += r"(?![A-Za-z])"
        alternatives.append(alternative)
    return re.compile(r"(?<!\\)(?P<escapes>(?:\\\\)*)(?P<name>" + "|".join(alternatives) + ")")


def macros_expand(expression: str, macros: MacroTable, limit: Optional[int] = None) -> str:
    r"""
    Expand macro names in ``expression`` until none are left

    Args:
        expression: Raw TeX expression
        macros: Macro name -> body table
        limit: Maximum number of single macro expansions (defaults to settings)

    Returns:
        Expression with every macro replaced by its body

    Raises:
        RenderError: If more than ``limit`` expansions are needed, which
                     means a macro refers to itself

    Example:
        >>> macros_expand(r"x \in \R", {"\\R": r"\mathbb{R}"})
        'x \\in \\mathbb{R}'
    """
    pattern = macroPattern_build(macros)
    if pattern is None:
        return expression

    maximum = limit if limit is not None else appsettings.macro_expansion_limit
    expansions = 0

    def body_substitute(match: re.Match[str]) -> str:
        nonlocal expansions
        expansions += 1
        if expansions > maximum:
            raise RenderError(f"too many macro expansions (limit {maximum})")
        return match.group("escapes") + macros[match.group("name")]

    while pattern.search(expression):
        expression = pattern.sub(body_substitute, expression)
    return expression


def latex_render(expression: str, options: RenderOptions) -> str:
    """
    Render a TeX expression to a MathML element

    Args:
        expression: Raw expression text without delimiters
        options: Display mode, output format and macros

    Returns:
        ``<math>`` markup string

    Raises:
        RenderError: On unsupported output format, runaway macros, or any
                     conversion failure
    """
    if options.output_format != OUTPUT_MATHML:
        raise RenderError(f"unsupported output format: {options.output_format}")

    source = macros_expand(expression, options.macros)
    display = "block" if options.display_mode else "inline"
    try:
        return latex2mathml.converter.convert(source, display=display)
    except Exception as e:
        raise RenderError(f"cannot convert {expression!r}: {e}") from e
