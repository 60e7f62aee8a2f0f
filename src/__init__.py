"""
mdbabel - Execute markdown code blocks

Runs the fenced code blocks of a markdown document that are tagged with a
directive comment ("runnable documentation").
"""

__version__ = "0.1.0"

from .lib import DirectiveStream, Dispatcher, ExecutorRegistry, LOG, state_connectToLogger

__all__ = ["DirectiveStream", "Dispatcher", "ExecutorRegistry", "LOG", "state_connectToLogger", "__version__"]
