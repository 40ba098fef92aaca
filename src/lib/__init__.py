"""
mathdown - Math delimiter substitution for documentation builds

Renders $$block$$ and $inline$ math inside prose documents.
"""

__version__ = "1.0.0"

from .splitter import delimiters_split, delimiters_count, segments_join
from .macros import macros_parse, macros_load
from .backend import latex_render, macros_expand
from .renderer import MathRenderer, renderer_supports
from .book import book_read, book_write, book_render, chapters_walk, context_macrosPath
from .log import LOG, state_connectToLogger

__all__ = [
    "delimiters_split",
    "delimiters_count",
    "segments_join",
    "macros_parse",
    "macros_load",
    "latex_render",
    "macros_expand",
    "MathRenderer",
    "renderer_supports",
    "book_read",
    "book_write",
    "book_render",
    "chapters_walk",
    "context_macrosPath",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
