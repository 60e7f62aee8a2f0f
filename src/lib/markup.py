"""
Line-level parsers for mdbabel markup

Recognizes the three kinds of line a directive is built from:

    <!-- mdbabel :name setup -->     header comment
    ```sh                           opening fence (language tag "sh")
    ```                             closing fence

All functions work on a single line and never read ahead.
"""

from typing import Optional

from ..models.directives import DirectiveHeader
from .errors import HeaderMalformed


# A comment must start with this prefix to be treated as a directive header
DIRECTIVE_PREFIX = "mdbabel"

# Name is always the first parameter of a header
NAME_PARAMETER = ":name"

COMMENT_OPEN = "<!--"
COMMENT_CLOSE = "-->"
FENCE_MARKER = "```"


def comment_extract(line: str) -> Optional[str]:
    """
    Return the trimmed text inside the first comment on a line

    Only the first "<!--" and the first "-->" are considered. A line that
    lacks either marker, or where the closing marker does not come after
    the opening one, is not a comment line.

    Args:
        line: One physical line

    Returns:
        Comment contents with surrounding whitespace removed, or None

    Example:
        >>> comment_extract("abc <!-- x --> def")
        'x'
        >>> comment_extract("<!---->")
        ''
        >>> comment_extract("# heading") is None
        True
    """
    begin = line.find(COMMENT_OPEN)
    end = line.find(COMMENT_CLOSE)
    if begin == -1 or end == -1:
        return None

    content_start = begin + len(COMMENT_OPEN)
    if content_start > end:
        return None

    return line[content_start:end].strip()


def header_parse(content: str, line_number: Optional[int] = None) -> DirectiveHeader:
    """
    Parse comment contents into a directive header

    Grammar: ``mdbabel :name NAME [ignored...]`` separated by whitespace.

    Args:
        content: Text returned by comment_extract()
        line_number: Source line of the comment (for error reporting)

    Returns:
        DirectiveHeader with the parsed name

    Raises:
        HeaderMalformed: If the prefix is wrong or missing, or ':name' is not
                         the first parameter, or the name value is missing

    Example:
        >>> header_parse("mdbabel :name test-block")
        DirectiveHeader(name='test-block')
    """
    tokens = content.split()

    if not tokens:
        raise HeaderMalformed("Header contains nothing useful", line_number)
    if tokens[0] != DIRECTIVE_PREFIX:
        raise HeaderMalformed(f"Header does not start with '{DIRECTIVE_PREFIX}'", line_number)

    if len(tokens) < 2 or tokens[1] != NAME_PARAMETER:
        raise HeaderMalformed(
            f"Header does not have '{NAME_PARAMETER}' as first parameter", line_number
        )
    if len(tokens) < 3:
        raise HeaderMalformed(f"No value for '{NAME_PARAMETER}' parameter", line_number)

    # Tokens after the name are reserved for future key/value parameters
    return DirectiveHeader(name=tokens[2])


def fence_is(line: str) -> bool:
    """Check if a line opens or closes a fenced code block"""
    return line.startswith(FENCE_MARKER)


def lang_extract(line: str) -> Optional[str]:
    """
    Extract the language tag from an opening fence line

    Args:
        line: A line for which fence_is() is True

    Returns:
        Trimmed text after the fence marker, or None if it is blank

    Example:
        >>> lang_extract("```bash\\n")
        'bash'
        >>> lang_extract("``` sh ")
        'sh'
        >>> lang_extract("```\\n") is None
        True
    """
    if not fence_is(line):
        return None
    lang = line[len(FENCE_MARKER):].strip()
    return lang or None
