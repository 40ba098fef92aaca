"""
Render backend tests - macro expansion and MathML conversion
"""

import pytest

import latex2mathml.converter

from mathdown.lib.backend import latex_render, macros_expand, macroPattern_build
from mathdown.lib.macros import macros_parse
from mathdown.lib.renderer import MathRenderer
from mathdown.models import RenderOptions, RenderError


class TestMacroExpansion:
    """Textual macro substitution"""

    def test_no_macros(self):
        assert macros_expand("x + y", {}) == "x + y"
        assert macroPattern_build({}) is None

    def test_simple_expansion(self):
        macros = macros_parse("\\R:\\mathbb{R}\n")
        assert macros_expand("x \\in \\R", macros) == "x \\in \\mathbb{R}"

    def test_name_boundary(self):
        """\\R does not match the start of \\Re"""
        macros = {"\\R": "\\mathbb{R}"}
        assert macros_expand("\\Re z, \\R^n", macros) == "\\Re z, \\mathbb{R}^n"

    def test_longest_name_first(self):
        macros = {"\\v": "V", "\\vv": "W"}
        assert macros_expand("\\vv \\v", macros) == "W V"

    def test_nested_macros(self):
        """Bodies may use other macros"""
        macros = {"\\RR": "\\R^2", "\\R": "\\mathbb{R}"}
        assert macros_expand("\\RR", macros) == "\\mathbb{R}^2"

    def test_recursive_macro_rejected(self):
        """A self-referencing macro stops with RenderError"""
        with pytest.raises(RenderError):
            macros_expand("\\loop", {"\\loop": "x \\loop"}, limit=5)

    def test_body_with_backslashes_literal(self):
        """Bodies are inserted verbatim, not treated as regex templates"""
        macros = {"\\g": "\\1\\0"}
        assert macros_expand("\\g", macros, limit=1) == "\\1\\0"

    def test_double_backslash_is_not_a_macro(self):
        """The second backslash of a \\\\ line break never starts a macro"""
        macros = {"\\R": "\\mathbb{R}"}
        assert macros_expand(r"a \\R", macros) == r"a \\R"

    def test_macro_after_line_break(self):
        """A macro right after \\\\ is still expanded"""
        macros = {"\\R": "\\mathbb{R}"}
        assert macros_expand(r"a \\\R", macros) == r"a \\\mathbb{R}"

    def test_matrix_rows_untouched(self):
        """Short macro names do not rewrite row separators in matrices"""
        macros = {"\\c": "C"}
        source = r"\begin{pmatrix} a \\c \end{pmatrix} \c"
        assert macros_expand(source, macros) == r"\begin{pmatrix} a \\c \end{pmatrix} C"


class TestLatexRender:
    """latex2mathml-backed rendering"""

    def test_inline_mathml(self):
        markup = latex_render("x^2", RenderOptions(display_mode=False))
        assert markup.startswith("<math")
        assert 'display="inline"' in markup

    def test_block_mathml(self):
        markup = latex_render("x^2", RenderOptions(display_mode=True))
        assert 'display="block"' in markup

    def test_unsupported_output_format(self):
        with pytest.raises(RenderError):
            latex_render("x", RenderOptions(display_mode=False, output_format="html"))

    def test_converter_error_wrapped(self, monkeypatch):
        """Any converter exception surfaces as RenderError"""

        def broken_convert(latex, **kwargs):
            raise ValueError("bad token")

        monkeypatch.setattr(latex2mathml.converter, "convert", broken_convert)
        with pytest.raises(RenderError) as excinfo:
            latex_render("x", RenderOptions(display_mode=False))
        assert "bad token" in str(excinfo.value)

    def test_macros_applied_before_conversion(self, monkeypatch):
        seen = []

        def recording_convert(latex, **kwargs):
            seen.append((latex, kwargs.get("display")))
            return "<math/>"

        monkeypatch.setattr(latex2mathml.converter, "convert", recording_convert)
        options = RenderOptions(display_mode=True, macros=macros_parse("\\N:\\mathbb{N}\n"))
        assert latex_render("n \\in \\N", options) == "<math/>"
        assert seen == [("n \\in \\mathbb{N}", "block")]


class TestRendererWithBackend:
    """MathRenderer using the default backend"""

    def test_default_backend_renders_mathml(self):
        output = MathRenderer(header="").document_render("Area $\\pi r^2$ here")
        assert output.startswith("Area <math")
        assert output.endswith("</math> here")

    def test_recursive_macro_falls_back(self):
        """A runaway macro leaves the raw expression in place"""
        macros = macros_parse("\\loop:\\loop\\loop\n")
        output = MathRenderer(macros=macros, header="").document_render("a $\\loop$ b")
        assert output == "a \\loop b"
