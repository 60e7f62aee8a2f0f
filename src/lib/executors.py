"""
Executor registry and directive dispatch

Maps language tags to ExecutorSpecs and runs code blocks through them.
Process spawning is a capability (ProcessRunner) handed to the Dispatcher,
so the registry and dispatch rules can be exercised without starting real
processes.
"""

import subprocess
from types import MappingProxyType
from typing import Dict, Iterator, Mapping, Optional, Sequence

from ..config import AppSettings, appsettings
from ..models.directives import Directive, DirectiveKind
from ..models.executors import ExecutorSpec, ProcessRunner
from .errors import ExecutorExitStatus, ExecutorSpawnFailure, ExecutorWaitFailure
from .log import LOG


def process_run(program: str, base_args: Sequence[str], code: str) -> int:
    """
    Start ``program`` with ``base_args`` and ``code`` and wait for it

    The child inherits stdin/stdout/stderr; nothing is captured.

    Args:
        program: Interpreter to start (looked up on PATH)
        base_args: Leading arguments (e.g. ["-c"])
        code: Code block contents, passed as the final argument

    Returns:
        Exit status of the child

    Raises:
        ExecutorSpawnFailure: If the program cannot be started
        ExecutorWaitFailure: If the child cannot be waited on
    """
    argv = ExecutorSpec(program=program, base_args=tuple(base_args)).argv_build(code)
    try:
        process = subprocess.Popen(list(argv))
    except (OSError, ValueError) as e:
        raise ExecutorSpawnFailure(f"Cannot start '{program}': {e}") from e

    try:
        return process.wait()
    except OSError as e:
        raise ExecutorWaitFailure(f"Cannot wait for '{program}' (pid {process.pid}): {e}") from e


class ExecutorRegistry(Mapping[str, ExecutorSpec]):
    """
    Immutable mapping of language tag to ExecutorSpec

    Built once and read-only afterwards; pass it to a Dispatcher.

    Example:
        >>> registry = ExecutorRegistry.default()
        >>> registry["shell"]
        ExecutorSpec(program='sh', base_args=('-c',))
    """

    def __init__(self, specs: Mapping[str, ExecutorSpec]) -> None:
        """
        Initialize registry from a mapping (copied)

        Args:
            specs: Language tag -> ExecutorSpec
        """
        self._specs: Mapping[str, ExecutorSpec] = MappingProxyType(dict(specs))

    @classmethod
    def default(cls, settings: Optional[AppSettings] = None) -> "ExecutorRegistry":
        """
        Build the default registry: 'sh' and 'shell' run sh, 'bash' runs bash

        Args:
            settings: Settings providing interpreter names and inline flag
                      (module-level appsettings if omitted)

        Returns:
            ExecutorRegistry with the three default tags
        """
        settings = settings or appsettings
        base_args = settings.baseArgs_make()
        sh = ExecutorSpec(program=settings.sh_program, base_args=base_args)
        bash = ExecutorSpec(program=settings.bash_program, base_args=base_args)
        return cls({"sh": sh, "shell": sh, "bash": bash})

    @classmethod
    def from_mapping(cls, specs: Mapping[str, Sequence[str]]) -> "ExecutorRegistry":
        """
        Build a registry from tag -> [program, *base_args] lists

        Example:
            >>> ExecutorRegistry.from_mapping({"python": ["python3", "-c"]})["python"]
            ExecutorSpec(program='python3', base_args=('-c',))
        """
        built: Dict[str, ExecutorSpec] = {}
        for lang, argv in specs.items():
            if not argv:
                raise ValueError(f"Executor for '{lang}' has no program")
            built[lang] = ExecutorSpec(program=argv[0], base_args=tuple(argv[1:]))
        return cls(built)

    def __getitem__(self, lang: str) -> ExecutorSpec:
        return self._specs[lang]

    def __iter__(self) -> Iterator[str]:
        return iter(self._specs)

    def __len__(self) -> int:
        return len(self._specs)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({dict(self._specs)!r})"

    def resolve(self, lang: Optional[str]) -> Optional[ExecutorSpec]:
        """Return the spec for a language tag, None if absent or unknown"""
        if lang is None:
            return None
        return self._specs.get(lang)


class Dispatcher:
    """
    Runs directives through the executor registered for their language

    Responsibilities:
    - Resolve a code block's language tag against the registry
    - Invoke the process runner synchronously
    - Ignore blocks without a (known) language tag
    - Optionally turn non-zero exit status into ExecutorExitStatus
    """

    def __init__(
        self,
        registry: ExecutorRegistry,
        runner: ProcessRunner = process_run,
        propagate_exit_status: bool = False,
    ) -> None:
        """
        Initialize dispatcher

        Args:
            registry: Language tag -> ExecutorSpec mapping
            runner: Process-spawning capability (default: subprocess)
            propagate_exit_status: Raise ExecutorExitStatus on non-zero exit
        """
        self.registry = registry
        self.runner = runner
        self.propagate_exit_status = propagate_exit_status

    def dispatch(self, directive: Directive) -> Optional[int]:
        """
        Execute one directive

        Args:
            directive: Directive produced by DirectiveStream

        Returns:
            Child exit status, or None if nothing was run (or the runner
            did not report a status)

        Raises:
            ExecutorSpawnFailure: If the interpreter cannot be started
            ExecutorWaitFailure: If the interpreter cannot be waited on
            ExecutorExitStatus: If propagation is on and the block failed
        """
        if directive.kind is DirectiveKind.CODE_BLOCK:
            return self.codeBlock_run(directive)
        raise TypeError(f"Unhandled directive kind: {directive.kind}")

    def codeBlock_run(self, directive: Directive) -> Optional[int]:
        """Run a CodeBlock directive (see dispatch())"""
        name = directive.header.name
        lang = directive.body.lang

        spec = self.registry.resolve(lang)
        if spec is None:
            LOG(f"Skipping '{name}': no executor for language {lang!r}", level=3)
            return None

        LOG(f"Running '{name}' with {spec.program} {' '.join(spec.base_args)}", level=2)
        returncode = self.runner(spec.program, spec.base_args, directive.body.code)
        LOG(f"'{name}' finished with status {returncode}", level=3)

        if self.propagate_exit_status and returncode:
            raise ExecutorExitStatus(name, returncode)
        return returncode
