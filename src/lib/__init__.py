"""
mdbabel - Execute markdown code blocks

Parses directive-tagged code blocks out of markdown and runs them.
"""

__version__ = "0.1.0"

from .document import DirectiveStream
from .executors import Dispatcher, ExecutorRegistry, process_run
from .errors import MdbabelError, DirectiveError, ExecutorError
from .listing import directive_render
from .log import LOG, state_connectToLogger

__all__ = [
    "DirectiveStream",
    "Dispatcher",
    "ExecutorRegistry",
    "process_run",
    "MdbabelError",
    "DirectiveError",
    "ExecutorError",
    "directive_render",
    "LOG",
    "state_connectToLogger",
    "__version__",
]
