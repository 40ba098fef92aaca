"""
mathdown - Math delimiter substitution for documentation builds

Replaces $$block$$ and $inline$ TeX math in prose documents with rendered
MathML, as an mdBook preprocessor or as a batch directory renderer.
"""

__version__ = "1.0.0"

from .lib import MathRenderer, macros_load, renderer_supports, LOG, state_connectToLogger

__all__ = ["MathRenderer", "macros_load", "renderer_supports", "LOG", "state_connectToLogger", "__version__"]
