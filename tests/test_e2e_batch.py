"""
End-to-end batch rendering tests

Runs the directory pipeline stages (env_check -> macros_read ->
documents_read -> documents_render -> documents_write -> results_report)
against temporary directories.
"""

from argparse import Namespace

import pytest

from mathdown.__main__ import (
    env_check,
    macros_read,
    documents_read,
    documents_render,
    documents_write,
    results_report,
)
from mathdown.config import STYLESHEET_HEADER
from mathdown.models import ProgramState, pipeline


def make_state(inputdir, outputdir, **options):
    defaults = {"macros": None, "pattern": None, "strict": False, "verbosity": 1}
    defaults.update(options)
    return ProgramState.state_createFromNamespace(
        Namespace(**defaults), inputdir=inputdir, outputdir=outputdir
    )


def run_all(state):
    return pipeline(
        state,
        env_check,
        macros_read,
        documents_read,
        documents_render,
        documents_write,
        results_report,
    )


@pytest.fixture
def book_dirs(tmp_path):
    inputdir = tmp_path / "in"
    outputdir = tmp_path / "out"
    (inputdir / "chapter").mkdir(parents=True)
    (inputdir / "intro.md").write_text("No math here.\n", encoding="utf-8")
    (inputdir / "chapter" / "one.md").write_text("Energy $E = mc^2$.\n", encoding="utf-8")
    (inputdir / "notes.txt").write_text("$x$", encoding="utf-8")
    return inputdir, outputdir


class TestProgramState:
    """State bus helpers"""

    def test_namespace_filters_unknown_options(self, tmp_path):
        state = ProgramState.state_createFromNamespace(
            Namespace(macros="m.txt", verbosity=2, unrelated=True), inputdir=tmp_path
        )
        assert state.macros == "m.txt"
        assert state.verbosity == 2
        assert state.inputdir == tmp_path
        assert not hasattr(state, "unrelated")

    def test_copy_is_independent(self):
        state = ProgramState(verbosity=1)
        copied = state.copy()
        copied.verbosity = 3
        assert state.verbosity == 1


class TestBatchPipeline:
    """Full directory rendering"""

    def test_documents_written(self, book_dirs):
        inputdir, outputdir = book_dirs
        state = run_all(make_state(inputdir, outputdir))

        assert state.writtenFiles == 2
        assert sorted(state.documents) == ["chapter/one.md", "intro.md"]

        intro = (outputdir / "intro.md").read_text(encoding="utf-8")
        assert intro == STYLESHEET_HEADER + "No math here.\n"

        one = (outputdir / "chapter" / "one.md").read_text(encoding="utf-8")
        assert one.startswith(STYLESHEET_HEADER + "Energy <math")
        assert one.endswith("</math>.\n")

        assert not (outputdir / "notes.txt").exists()

    def test_custom_pattern(self, book_dirs):
        inputdir, outputdir = book_dirs
        state = run_all(make_state(inputdir, outputdir, pattern="*.txt"))
        assert list(state.rendered) == ["notes.txt"]
        assert (outputdir / "notes.txt").exists()

    def test_strict_option(self, book_dirs):
        inputdir, outputdir = book_dirs
        (inputdir / "price.md").write_text("Only $5 today", encoding="utf-8")
        state = run_all(make_state(inputdir, outputdir, strict=True))
        assert state.rendered["price.md"] == STYLESHEET_HEADER + "Only $5 today"

    def test_macro_file(self, book_dirs, tmp_path):
        inputdir, outputdir = book_dirs
        macro_file = tmp_path / "macros.txt"
        macro_file.write_text("\\E:E\n\\broken line\n", encoding="utf-8")
        state = run_all(make_state(inputdir, outputdir, macros=str(macro_file)))
        assert dict(state.macroTable) == {"\\E": "E"}

    def test_missing_input_dir_exits(self, tmp_path):
        with pytest.raises(SystemExit) as excinfo:
            env_check(make_state(tmp_path / "absent", tmp_path / "out"))
        assert excinfo.value.code == 1

    def test_missing_macro_file_exits(self, book_dirs, tmp_path, capsys):
        inputdir, outputdir = book_dirs
        missing = tmp_path / "missing.txt"
        with pytest.raises(SystemExit) as excinfo:
            run_all(make_state(inputdir, outputdir, macros=str(missing)))
        assert excinfo.value.code == 1
        assert str(missing) in capsys.readouterr().err
        assert not outputdir.exists()
