#!/usr/bin/env python3
"""
mdbabel - Execute markdown code blocks

Runs the fenced code blocks of a markdown document that are tagged with a
directive comment, turning prose documentation into a runnable script.

Philosophy:
    - Runnable documentation: the document stays plain markdown
    - Opt-in execution: only blocks tagged with a directive comment run
    - Source order: blocks run one at a time, top to bottom

Document syntax:

    <!-- mdbabel :name greet -->
    ```sh
    echo 'hello world'
    ```

The language tag selects the interpreter: 'sh' and 'shell' run with sh,
'bash' with bash. Blocks with no or another language tag are skipped.

Reading stops at the first malformed directive, exactly as if the document
had ended there; use --strict to turn that into an error.

Usage:
    mdbabel README.md

Examples:
    # Run every tagged block
    mdbabel docs/setup.md

    # Show what would run, without running it
    mdbabel docs/setup.md --dryRun

    # Fail on broken directives or failing blocks
    mdbabel docs/setup.md --strict --exitStatus -vv
"""

import sys
from pathlib import Path
from argparse import ArgumentParser, ArgumentDefaultsHelpFormatter
from typing import List, Optional

from .config import appsettings
from .lib import (
    DirectiveStream,
    Dispatcher,
    ExecutorRegistry,
    MdbabelError,
    directive_render,
    __version__,
    LOG,
    state_connectToLogger,
)
from .models import ProgramState, pipeline


# Define CLI arguments
parser = ArgumentParser(
    prog="mdbabel",
    description="mdbabel - Execute markdown code blocks",
    formatter_class=ArgumentDefaultsHelpFormatter,
)

parser.add_argument("inputFile", type=str, help="Markdown file to read")

parser.add_argument(
    "--dryRun",
    action="store_true",
    default=False,
    help="List the code blocks that would run instead of running them",
)

parser.add_argument(
    "--strict",
    action="store_true",
    default=appsettings.strict_mode,
    help="Fail on a malformed directive instead of silently stopping",
)

parser.add_argument(
    "--exitStatus",
    action="store_true",
    default=appsettings.propagate_exit_status,
    help="Fail when a code block exits with a non-zero status",
)

parser.add_argument(
    "-v",
    "--verbosity",
    action="count",
    default=1,
    help="Increase output verbosity (can be repeated: -v, -vv)",
)

parser.add_argument("-V", "--version", action="version", version=f"%(prog)s {__version__}")


def env_check(inputstate: ProgramState) -> ProgramState:
    """
    Validate environment and resolve the input path.

    Args:
        inputstate: Initial program state with CLI options

    Returns:
        ProgramState with added fields:
            - inputSourceFile: Resolved path to the markdown file
            - envOK: True if environment is valid

    Exits:
        1 if the input file is not found
    """
    state = inputstate.copy()

    LOG("Checking environment...", level=2)

    input_file = Path(state.inputFile)
    if not input_file.is_file():
        print(f"Error: Input file not found: {input_file}", file=sys.stderr)
        state.envOK = False
        sys.exit(1)

    state.inputSourceFile = input_file
    LOG(f"Input file: {input_file}", level=2)

    state.envOK = True
    return state


def directives_run(inputstate: ProgramState) -> ProgramState:
    """
    Read directives from the input file and run (or list) each in order.

    Each code block is run to completion before the next directive is read.

    Args:
        inputstate: Program state with inputSourceFile set

    Returns:
        ProgramState with added field:
            - runResult: Dict containing:
                - directive_count: int (directives read)
                - executed_count: int (blocks run through an executor)
                - skipped_count: int (blocks with no executor)
                - stop_reason: str | None (why reading stopped early)

    Exits:
        1 if the file cannot be opened, a directive is malformed in strict
        mode, or a code block cannot be run
    """
    state = inputstate.copy()

    registry = ExecutorRegistry.default(appsettings)
    dispatcher = Dispatcher(registry, propagate_exit_status=state.exitStatus)
    seen_names = set()
    result = {"directive_count": 0, "executed_count": 0, "skipped_count": 0, "stop_reason": None}

    LOG(f"Reading directives from {state.inputSourceFile.name}...", level=1)
    try:
        with state.inputSourceFile.open("rb") as stream:
            directives = DirectiveStream(
                stream, encoding=appsettings.input_encoding, strict=state.strict
            )
            for directive in directives:
                result["directive_count"] += 1
                name = directive.header.name
                if name in seen_names:
                    LOG(f"Directive name '{name}' is used more than once", level=1)
                seen_names.add(name)

                if state.dryRun:
                    print(
                        directive_render(
                            directive,
                            result["directive_count"],
                            registry,
                            style=appsettings.listing_style,
                        )
                    )
                    continue

                if registry.resolve(directive.body.lang) is None:
                    result["skipped_count"] += 1
                else:
                    result["executed_count"] += 1
                dispatcher.dispatch(directive)

            if directives.stop_reason is not None:
                result["stop_reason"] = str(directives.stop_reason)
    except OSError as e:
        print(f"Error reading input file: {e}", file=sys.stderr)
        sys.exit(1)
    except MdbabelError as e:
        print(f"Error: {e}", file=sys.stderr)
        if state.verbosity >= 3:
            import traceback

            traceback.print_exc()
        sys.exit(1)

    state.runResult = result
    return state


def results_report(inputstate: ProgramState) -> ProgramState:
    """
    Display a summary of the run.

    Args:
        inputstate: Program state with runResult populated

    Returns:
        ProgramState unchanged (terminal pipeline stage)

    Exits:
        1 if runResult is None
    """
    state: ProgramState = inputstate.copy()
    if state.runResult is None:
        print("Error: Run failed", file=sys.stderr)
        sys.exit(1)

    LOG(f"Directives read: {state.runResult['directive_count']}", level=1)
    if not state.dryRun:
        LOG(f"  Executed: {state.runResult['executed_count']}", level=2)
        LOG(f"  Skipped:  {state.runResult['skipped_count']}", level=2)
    if state.runResult["stop_reason"]:
        LOG(f"Stopped early: {state.runResult['stop_reason']}", level=1)
    return state


def run(argv: Optional[List[str]] = None) -> ProgramState:
    """
    Run the tagged code blocks of a markdown file.

    Orchestrates the run pipeline:
        1. env_check: Validate the input path
        2. directives_run: Parse directives and dispatch each in order
        3. results_report: Display results to user

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])

    Returns:
        Final ProgramState
    """
    options = parser.parse_args(argv)
    state: ProgramState = ProgramState.state_createFromNamespace(options=options)

    # Connect state to logger for entire pipeline
    state_connectToLogger(state)

    return pipeline(state, env_check, directives_run, results_report)


def main(argv: Optional[List[str]] = None) -> None:
    """
    Main entry point for the mdbabel console script.

    Returns None so the script exits with status 0 after a clean run;
    failing stages exit with status 1 themselves.

    Args:
        argv: Command line arguments (defaults to sys.argv[1:])
    """
    run(argv)


if __name__ == "__main__":
    main()
