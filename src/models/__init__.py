"""
Models package for mdbabel

Contains data structures and type definitions for the parse/run pipeline.
"""

from .state import ProgramState, pipeline
from .directives import DirectiveKind, DirectiveHeader, CodeBlockBody, CodeBlock, Directive
from .executors import ExecutorSpec, ProcessRunner

__all__ = [
    "ProgramState",
    "pipeline",
    "DirectiveKind",
    "DirectiveHeader",
    "CodeBlockBody",
    "CodeBlock",
    "Directive",
    "ExecutorSpec",
    "ProcessRunner",
]
