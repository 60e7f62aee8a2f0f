"""
Executor specification model

An ExecutorSpec is an invocation template: the program to start and the
fixed leading arguments. The code of a block is appended as the final
argument when it runs.
"""

from dataclasses import dataclass
from typing import Callable, Optional, Sequence, Tuple


@dataclass(frozen=True)
class ExecutorSpec:
    """
    How to run code written in one language

    Attributes:
        program: Program to start (looked up on PATH)
        base_args: Arguments placed before the code

    Example:
        ExecutorSpec(program="bash", base_args=("-c",))
        runs a block as: bash -c '<code>'
    """
    program: str
    base_args: Tuple[str, ...] = ()

    def argv_build(self, code: str) -> Tuple[str, ...]:
        """
        Build the full argument vector for running ``code``.

        Args:
            code: Code block contents, passed as the last argument

        Returns:
            (program, *base_args, code)
        """
        return (self.program, *self.base_args, code)


# Process-spawning capability: (program, base_args, code) -> exit status.
# Implementations start the child with inherited standard streams and block
# until it terminates. Returning None means "status not observed".
ProcessRunner = Callable[[str, Sequence[str], str], Optional[int]]
