"""
Models package for mathdown

Contains data structures, exceptions and type definitions for the
rendering pipeline.
"""

from .state import ProgramState, pipeline
from .segments import Literal, Expression, Segment, RenderOptions, MacroTable, EMPTY_MACROS
from .errors import MathdownError, MacroSourceError, RenderError, HostProtocolError

__all__ = [
    "ProgramState",
    "pipeline",
    "Literal",
    "Expression",
    "Segment",
    "RenderOptions",
    "MacroTable",
    "EMPTY_MACROS",
    "MathdownError",
    "MacroSourceError",
    "RenderError",
    "HostProtocolError",
]
