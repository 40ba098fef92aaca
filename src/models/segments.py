"""
Segment and render-option models

Type-safe structures passed between the delimiter splitter, the
substitution renderer and the render backend.
"""

from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Union


# Read-only macro name -> body mapping, shared by every render call of a run
MacroTable = Mapping[str, str]

EMPTY_MACROS: MacroTable = MappingProxyType({})


@dataclass(frozen=True)
class Literal:
    """
    Plain text run found between delimiter pairs

    Attributes:
        text: Source text, copied to the output unchanged

    Example:
        For "a $x$ b" split on "$":
        [Literal("a "), Expression("x"), Literal(" b")]
    """
    text: str


@dataclass(frozen=True)
class Expression:
    """
    Raw math expression found between an opening and closing delimiter

    The delimiters themselves are not part of ``raw``. An expression that
    ran to the end of the input without a closing delimiter has
    ``unmatched`` set.

    Attributes:
        raw: Expression text exactly as written in the source
        unmatched: True if no closing delimiter followed the expression
    """
    raw: str
    unmatched: bool = False


Segment = Union[Literal, Expression]


@dataclass(frozen=True)
class RenderOptions:
    """
    Options for a single render call

    Built fresh for every expression; never mutated.

    Attributes:
        display_mode: True for block math, False for inline math
        output_format: Markup kind produced by the backend (only "mathml")
        macros: Read-only macro table applied to the expression
    """
    display_mode: bool
    output_format: str = "mathml"
    macros: MacroTable = field(default_factory=lambda: EMPTY_MACROS)
