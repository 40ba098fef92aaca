"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

from pathlib import Path
from argparse import Namespace
from typing import Any, Optional, Type, TypeVar, Dict, Callable
from dataclasses import dataclass, field
from functools import reduce

from .segments import MacroTable, EMPTY_MACROS


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the rendering pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as processing progresses.

    Pipeline stages and their state additions (batch mode):
        - Initial: inputdir, outputdir, verbosity, macros, pattern, strict
        - env_check: macrosFile, envOK
        - macros_read: macroTable
        - documents_read: documents
        - documents_render: rendered
        - documents_write: writtenFiles
        - results_report: (no additions, terminal stage)

    The mdBook preprocessor reuses the same bus with the context, book and
    processedBook fields.

    Attributes:
        inputdir: Directory containing source documents
        outputdir: Directory receiving rendered documents
        verbosity: Logging verbosity level (1-3)
        macros: Macro file given on the command line, if any
        pattern: Glob selecting documents below inputdir
        strict: Keep unmatched delimiter runs as literal text
        envOK: Environment validation passed
        macrosFile: Resolved macro file path (None means no macros)
        macroTable: Loaded read-only macro table
        documents: Document id -> source text
        rendered: Document id -> rendered text
        writtenFiles: Number of documents written to outputdir
        context: mdBook preprocessor context object
        book: mdBook book object as received
        processedBook: mdBook book object with chapters rendered
    """

    # CLI arguments
    inputdir: Optional[Path] = field(default=None)
    outputdir: Optional[Path] = field(default=None)
    verbosity: int = field(default=1)
    macros: Optional[str] = field(default=None)
    pattern: Optional[str] = field(default=None)
    strict: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    macrosFile: Optional[Path] = field(default=None)
    macroTable: MacroTable = field(default_factory=lambda: EMPTY_MACROS)
    documents: Optional[Dict[str, str]] = field(default=None)
    rendered: Optional[Dict[str, str]] = field(default=None)
    writtenFiles: int = field(default=0)
    context: Optional[Dict[str, Any]] = field(default=None)
    book: Optional[Dict[str, Any]] = field(default=None)
    processedBook: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"],
        options: Namespace,
        inputdir: Optional[Path] = None,
        outputdir: Optional[Path] = None,
    ) -> "ProgramState":
        """
        Create ProgramState from argparse Namespace and directory paths.

        Args:
            options: Parsed CLI arguments (macros, pattern, verbosity, etc.)
            inputdir: Directory containing source files
            outputdir: Directory for rendered output

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        import dataclasses

        options_dict = vars(options)
        valid_fields = {f.name for f in dataclasses.fields(cls)}

        # Only keep options that map onto ProgramState fields
        filtered_options = {k: v for k, v in options_dict.items() if k in valid_fields}

        merged_args = {**filtered_options, "inputdir": inputdir, "outputdir": outputdir}
        return cls(**merged_args)

    def copy(self: PS) -> PS:
        """
        Creates a shallow copy of the ProgramState instance.

        Returns:
            A new ProgramState instance.
        """
        return type(self)(**self.__dict__)


def pipeline(
    initial_state: ProgramState, *stages: Callable[[ProgramState], ProgramState]
) -> ProgramState:
    """
    Execute a functional pipeline of state transformations.

    Each stage is a function (ProgramState) -> ProgramState that receives
    the output of the previous stage and returns a new state.

    Args:
        initial_state: Starting ProgramState
        *stages: Variable number of stage functions to execute in order

    Returns:
        Final ProgramState after all transformations

    Example:
        final_state = pipeline(
            initial_state,
            env_check,
            macros_read,
            documents_render,
        )
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
