"""
Run logging for mdbabel, built on Loguru.

LOG() writes to stderr only when the verbosity of the connected
ProgramState allows it, so stages and library code never pass the state
around. mdbabel uses the levels as follows:

    1  run summary, stop reason, duplicate directive names   (default)
    2  executor invocations, why the directive stream stopped  (-v)
    3  each directive found, skipped blocks, exit statuses     (-vv)

Usage:
    from mdbabel.lib.log import LOG, state_connectToLogger

    state_connectToLogger(state)           # once, in the CLI entry point
    LOG("Directives read: 3", level=1)
    LOG("Running 'setup' with sh -c", level=2)
    LOG("'setup' finished with status 0", level=3)

With no connected state (library use, unit tests) LOG() is silent.
"""

from loguru import logger
from typing import Any, Optional
from contextvars import ContextVar
import sys

# Context variable to hold current ProgramState
_program_state: ContextVar[Optional[Any]] = ContextVar('program_state', default=None)

# Configure loguru with mdbabel-specific format
logger_format = (
    "<green>{time:HH:mm:ss}</green> │ "
    "<level>{level: <5}</level> │ "
    "<cyan>{function: <20}</cyan> @ "
    "<cyan>{line: <4}</cyan> ║ "
    "<level>{message}</level>"
)

logger.remove()  # Remove default handler
logger.add(sys.stderr, format=logger_format, level="DEBUG")


def state_connectToLogger(state: Any) -> None:
    """
    Connect a ProgramState to the logging context.

    Args:
        state: ProgramState instance with verbosity attribute
    """
    _program_state.set(state)


def LOG(message: str, level: int = 1, **kwargs: Any) -> None:
    """
    Log message if current state's verbosity allows.

    Args:
        message: Log message to display
        level: Minimum verbosity level required (1=summary, 2=-v, 3=-vv)
        **kwargs: Additional loguru metadata

    Example:
        LOG("Stopped early: No value for ':name' parameter (line 12)", level=1)
        LOG("Skipping 'notes': no executor for 'python'", level=3)
    """
    state = _program_state.get()

    if state and hasattr(state, 'verbosity') and state.verbosity >= level:
        # depth=1 reports the caller's function/line instead of LOG itself
        logger.opt(depth=1).debug(message, **kwargs)
