"""
Exception hierarchy for mdbabel

Parse-side errors (DirectiveError) are raised by the scanner and line
parsers. DirectiveStream turns them into ordinary end-of-iteration unless it
runs in strict mode. Execution-side errors (ExecutorError) always propagate
and abort the run.
"""

from typing import Optional


class MdbabelError(Exception):
    """Base class for all mdbabel errors"""
    pass


class DirectiveError(MdbabelError):
    """
    Raised when a directive cannot be read from the document

    Attributes:
        line_number: Physical line where the problem was found, if known
    """

    def __init__(self, message: str, line_number: Optional[int] = None) -> None:
        self.line_number = line_number
        if line_number is not None:
            message = f"{message} (line {line_number})"
        super().__init__(message)


class IOFailure(DirectiveError):
    """Raised when the underlying stream cannot be read or decoded"""
    pass


class ExhaustedInput(DirectiveError):
    """Raised when the end of input is reached"""
    pass


class HeaderMalformed(DirectiveError):
    """Raised when a comment is not a valid 'mdbabel :name NAME' header"""
    pass


class FenceMissing(DirectiveError):
    """Raised when a header is not immediately followed by an opening fence"""
    pass


class ExecutorError(MdbabelError):
    """Base class for failures while running a code block"""
    pass


class ExecutorSpawnFailure(ExecutorError):
    """Raised when the interpreter program cannot be started"""
    pass


class ExecutorWaitFailure(ExecutorError):
    """Raised when a started interpreter cannot be waited on"""
    pass


class ExecutorExitStatus(ExecutorError):
    """
    Raised when a code block exits non-zero and exit status propagation is on

    Attributes:
        name: Directive name of the failing block
        returncode: Exit status of the child process
    """

    def __init__(self, name: str, returncode: int) -> None:
        self.name = name
        self.returncode = returncode
        super().__init__(f"Code block '{name}' exited with status {returncode}")
