"""
Substitution renderer

Replaces delimited math in a document with rendered markup.

Rendering runs as a two-stage pipeline:
1. Block pass: split the whole document on the block delimiter ($$).
   Expressions are rendered in display mode and are opaque from here on.
2. Inline pass: split each literal segment of the block pass on the inline
   delimiter ($). Expressions are rendered in inline mode.

A failing expression is emitted as its raw text, so one bad expression
never aborts the document. The stylesheet header is prepended exactly once.
"""

from typing import Dict, List, Mapping, Optional

from ..models.segments import Expression, MacroTable, RenderOptions, EMPTY_MACROS
from ..config import appsettings
from .backend import RenderFunction, latex_render, OUTPUT_MATHML
from .splitter import delimiters_split
from .log import LOG


def renderer_supports(renderer: str) -> bool:
    """
    Check whether the host output target can take our markup

    Args:
        renderer: Host renderer name (e.g. "html", "pdf")

    Returns:
        True only for the configured supported renderer ("html")
    """
    return renderer == appsettings.supported_renderer


class MathRenderer:
    """
    Renders every math expression of a document

    Responsibilities:
    - Run the block pass, then the inline pass on block literals only
    - Build RenderOptions per expression with the shared macro table
    - Fall back to raw expression text on any render failure
    - Prefix the static stylesheet header
    """

    def __init__(
        self,
        macros: MacroTable = EMPTY_MACROS,
        render: Optional[RenderFunction] = None,
        header: Optional[str] = None,
        block_delimiter: Optional[str] = None,
        inline_delimiter: Optional[str] = None,
        strict: Optional[bool] = None,
    ) -> None:
        """
        Initialize renderer

        Unset arguments come from appsettings.

        Args:
            macros: Read-only macro table shared by every expression
            render: Render function (expression, options) -> markup; raises on failure
            header: Text emitted once before each document
            block_delimiter: Display math marker
            inline_delimiter: Inline math marker
            strict: Keep unmatched delimiter runs as literal text
        """
        self.macros = macros
        self.render = render or latex_render
        self.header = appsettings.stylesheet_header if header is None else header
        self.block_delimiter = block_delimiter or appsettings.block_delimiter
        self.inline_delimiter = inline_delimiter or appsettings.inline_delimiter
        self.strict = appsettings.strict_delimiters if strict is None else strict

        self.counters_reset()

    def counters_reset(self) -> None:
        """Zero the per-run expression statistics."""
        self.rendered_count = 0
        self.fallback_count = 0
        self.unmatched_count = 0

    def document_render(self, content: str) -> str:
        """
        Render all math in one document

        Args:
            content: Document source text

        Returns:
            Header followed by the document with every expression substituted
        """
        return self.header + self.blocks_render(content)

    def blocks_render(self, content: str) -> str:
        """
        Block pass: split on the block delimiter, hand literals to the inline pass
        """
        parts: List[str] = []
        for segment in delimiters_split(content, self.block_delimiter):
            if not isinstance(segment, Expression):
                parts.append(self.inlines_render(segment.text))
            elif segment.unmatched and self.strict:
                # the dangling marker stays; what follows is still prose
                self.unmatched_warn(self.block_delimiter, segment.raw, "keeping it as text")
                parts.append(self.block_delimiter + self.inlines_render(segment.raw))
            else:
                if segment.unmatched:
                    self.unmatched_warn(self.block_delimiter, segment.raw, "rendering the remainder")
                parts.append(self.expression_render(segment.raw, display=True))
        return "".join(parts)

    def inlines_render(self, text: str) -> str:
        """
        Inline pass: split literal text on the inline delimiter

        Only ever called with literal text from the block pass.
        """
        parts: List[str] = []
        for segment in delimiters_split(text, self.inline_delimiter):
            if not isinstance(segment, Expression):
                parts.append(segment.text)
            elif segment.unmatched and self.strict:
                self.unmatched_warn(self.inline_delimiter, segment.raw, "keeping it as text")
                parts.append(self.inline_delimiter + segment.raw)
            else:
                if segment.unmatched:
                    self.unmatched_warn(self.inline_delimiter, segment.raw, "rendering the remainder")
                parts.append(self.expression_render(segment.raw, display=False))
        return "".join(parts)

    def unmatched_warn(self, delimiter: str, tail: str, action: str) -> None:
        """Report a delimiter with no closing partner."""
        self.unmatched_count += 1
        LOG(f"Unmatched '{delimiter}' before {tail[:40]!r}; {action}", level=1, severity="WARNING")

    def expression_render(self, raw: str, display: bool) -> str:
        """
        Render a single expression, falling back to its raw text

        Args:
            raw: Expression text without delimiters
            display: True for block math

        Returns:
            Rendered markup, or ``raw`` unchanged if rendering failed
        """
        options = RenderOptions(
            display_mode=display,
            output_format=OUTPUT_MATHML,
            macros=self.macros,
        )
        try:
            markup = self.render(raw, options)
        except Exception as e:
            self.fallback_count += 1
            LOG(f"Leaving {raw!r} unrendered: {e}", level=2, severity="WARNING")
            return raw

        self.rendered_count += 1
        return markup

    def documents_render(self, documents: Mapping[str, str]) -> Dict[str, str]:
        """
        Render a set of documents as one run

        Expression statistics are reset first, so the counters and the
        summary describe this call only.

        Args:
            documents: Document id -> source text

        Returns:
            Document id -> rendered text, in the same order
        """
        self.counters_reset()
        rendered = {}
        for name, content in documents.items():
            LOG(f"Rendering {name}", level=2)
            rendered[name] = self.document_render(content)
        LOG(
            f"Rendered {self.rendered_count} expressions, {self.fallback_count} left as text",
            level=1,
        )
        return rendered
