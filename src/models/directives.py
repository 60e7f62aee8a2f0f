"""
Directive data models

Defines the typed directives produced by DirectiveStream. A directive is a
tagged union over its kinds: every variant carries a ``kind`` discriminator
so consumers can branch on it exhaustively, and new kinds are added by
extending DirectiveKind and the Directive alias.
"""

from enum import Enum
from dataclasses import dataclass, field
from typing import Optional, Union


class DirectiveKind(Enum):
    """
    Kinds of mdbabel directives

    Only code blocks exist today.
    """
    CODE_BLOCK = "code_block"    # <!-- mdbabel :name x --> followed by a fence


@dataclass(frozen=True)
class DirectiveHeader:
    """
    Parsed contents of a directive header comment

    Attributes:
        name: Value of the ':name' parameter (e.g., "test-block")

    Example:
        For comment "<!-- mdbabel :name setup -->":
        DirectiveHeader(name="setup")
    """
    name: str


@dataclass(frozen=True)
class CodeBlockBody:
    """
    Contents of a fenced code block

    Attributes:
        lang: Language tag from the opening fence, None when absent
        code: Every body line verbatim, including line terminators. Fence
              lines are never part of the code.

    Example:
        For the block "```sh\\necho hi\\n```\\n":
        CodeBlockBody(lang="sh", code="echo hi\\n")
    """
    lang: Optional[str]
    code: str


@dataclass(frozen=True)
class CodeBlock:
    """
    A header comment immediately followed by a fenced code block

    Attributes:
        header: Parsed header comment
        body: Language tag and code of the block
        kind: Discriminator, always DirectiveKind.CODE_BLOCK
    """
    header: DirectiveHeader
    body: CodeBlockBody
    kind: DirectiveKind = field(default=DirectiveKind.CODE_BLOCK, init=False)


# Tagged union of every directive kind
Directive = Union[CodeBlock]
