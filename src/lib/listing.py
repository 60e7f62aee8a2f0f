"""
Dry-run listing of directives

Renders directives for the terminal instead of executing them, with the
code highlighted by Pygments using the block's language tag.
"""

from pygments import highlight
from pygments.formatters import Terminal256Formatter
from pygments.lexer import Lexer
from pygments.lexers import get_lexer_by_name, TextLexer
from pygments.util import ClassNotFound

from ..models.directives import Directive, DirectiveKind
from .executors import ExecutorRegistry


def lexer_get(lang: str | None) -> Lexer:
    """
    Get a Pygments lexer for a language tag

    Falls back to plain text for a missing or unknown tag.
    """
    if not lang:
        return TextLexer()
    try:
        return get_lexer_by_name(lang)
    except ClassNotFound:
        return TextLexer()


def directive_render(
    directive: Directive,
    index: int,
    registry: ExecutorRegistry,
    style: str = "default",
) -> str:
    """
    Render one directive as a highlighted listing

    Args:
        directive: Directive to render
        index: One-based position of the directive in the document
        registry: Used to show which program would run the block
        style: Pygments style name

    Returns:
        Header line followed by the highlighted code

    Example:
        [1] test-block (sh -> sh -c)
        echo 'hello world'
    """
    if directive.kind is not DirectiveKind.CODE_BLOCK:
        raise TypeError(f"Unhandled directive kind: {directive.kind}")

    lang = directive.body.lang
    spec = registry.resolve(lang)
    if spec is None:
        target = "not executed"
    else:
        target = " ".join((spec.program, *spec.base_args))

    header = f"[{index}] {directive.header.name} ({lang or 'no language'} -> {target})\n"
    code = highlight(directive.body.code, lexer_get(lang), Terminal256Formatter(style=style))
    return header + code
