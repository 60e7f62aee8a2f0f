"""
Program state model and pipeline helper

Defines ProgramState dataclass for the functional pipeline pattern and
the pipeline() helper for composing transformation stages.
"""

import dataclasses
from pathlib import Path
from argparse import Namespace
from functools import reduce
from typing import Any, Optional, Type, TypeVar, Dict, Callable
from dataclasses import dataclass, field


PS = TypeVar("PS", bound="ProgramState")


@dataclass
class ProgramState:
    """
    Central state container for the run pipeline (state bus pattern).

    This dataclass carries all program state through the functional pipeline,
    with each stage adding new fields as the run progresses.

    Pipeline stages and their state additions:
        - Initial: inputFile, verbosity, dryRun, strict, exitStatus
        - env_check: inputSourceFile, envOK
        - directives_run: runResult
        - results_report: (no additions, terminal stage)

    Attributes:
        inputFile: Markdown file to read, as given on the command line
        verbosity: Logging verbosity level (1-3)
        dryRun: List directives instead of executing them
        strict: Raise on malformed directives instead of stopping silently
        exitStatus: Abort when an executed block exits non-zero
        envOK: Environment validation passed
        inputSourceFile: Resolved path to the markdown file
        runResult: Run results (directive_count, executed_count, skipped_count,
                   stop_reason)
    """

    # CLI arguments
    inputFile: str = field(default="")
    verbosity: int = field(default=1)
    dryRun: bool = field(default=False)
    strict: bool = field(default=False)
    exitStatus: bool = field(default=False)

    # Pipeline state
    envOK: bool = field(default=False)
    inputSourceFile: Path = field(default=Path("/"))
    runResult: Optional[Dict[str, Any]] = field(default=None)

    @classmethod
    def state_createFromNamespace(
        cls: Type["ProgramState"], options: Namespace
    ) -> "ProgramState":
        """
        Create ProgramState from an argparse Namespace.

        Options that are not ProgramState fields are ignored.

        Args:
            options: Parsed CLI arguments (inputFile, verbosity, etc.)

        Returns:
            ProgramState instance with all CLI options as attributes
        """
        valid_fields = {f.name for f in dataclasses.fields(cls)}
        filtered_options = {k: v for k, v in vars(options).items() if k in valid_fields}
        return cls(**filtered_options)

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
        final_state = pipeline(initial_state, env_check, directives_run, results_report)

    This is equivalent to:
        results_report(directives_run(env_check(initial_state)))
    """
    return reduce(lambda state, stage: stage(state), stages, initial_state)
