"""
DirectiveStream: lazy sequence of directives read from a markdown document

A directive is a header comment followed, on the very next line, by a fenced
code block:

    <!-- mdbabel :name test-block -->
    ```sh
    echo 'hello world'
    ```

The stream is a single-pass state machine over a Scanner:

1. SEEK_DIRECTIVE    skip lines until one carries a comment
2. PARSE_HEADER      parse the comment as 'mdbabel :name NAME'
3. EXPECT_FENCE_OPEN the next physical line must open a fence
4. COLLECT_BODY      append lines verbatim until a fence line (not appended)
5. EMIT              yield a CodeBlock and restart at 1

Termination semantics:
    The stream never resynchronizes. The first malformed header (including
    any unrelated HTML comment), missing opening fence, unterminated fence or
    read error ends it. By default such failures look exactly like the
    natural end of the document: iteration simply stops. ``stop_reason``
    keeps the error that ended iteration (None for a clean end), and
    ``strict=True`` makes the iterator raise it instead.

Example:
    >>> stream = DirectiveStream(io.BytesIO(source))
    >>> for directive in stream:
    ...     print(directive.header.name, directive.body.lang)
"""

from typing import IO, Iterator, List, Optional

from ..models.directives import CodeBlock, CodeBlockBody, Directive
from .errors import DirectiveError, ExhaustedInput, FenceMissing
from .log import LOG
from .markup import comment_extract, fence_is, header_parse, lang_extract
from .scanner import Scanner


class DirectiveStream:
    """
    Iterator of Directive values parsed from a stream

    Handles:
    - Skipping prose between directives
    - Verbatim, newline-preserving body collection
    - Collapsing every failure into end-of-iteration (default)
    - Raising the failure instead (strict mode)
    """

    def __init__(self, stream: IO, encoding: str = "utf-8", strict: bool = False) -> None:
        """
        Initialize stream over an open document

        Args:
            stream: Binary or text stream of markdown
            encoding: Encoding used when the stream yields bytes
            strict: Raise DirectiveError on parse failures instead of stopping

        Attributes:
            scanner: Line reader over the stream
            strict: Strict mode flag
            stopped: True once iteration has ended
            stop_reason: Error that ended iteration, None for a clean end
        """
        self.scanner = Scanner(stream, encoding=encoding)
        self.strict = strict
        self.stopped = False
        self.stop_reason: Optional[DirectiveError] = None

    def __iter__(self) -> Iterator[Directive]:
        return self

    def __next__(self) -> Directive:
        if self.stopped:
            raise StopIteration

        try:
            directive = self.directive_read()
        except DirectiveError as e:
            self.stopped = True
            self.stop_reason = e
            LOG(f"Directive stream stopped: {e}", level=2)
            if self.strict:
                raise
            raise StopIteration

        if directive is None:
            self.stopped = True
            LOG(f"End of document after {self.scanner.line_number} lines", level=3)
            raise StopIteration

        return directive

    def directive_read(self) -> Optional[Directive]:
        """
        Run the state machine once

        Returns:
            Next directive, or None if the document ends while seeking one

        Raises:
            HeaderMalformed: If the comment is not a valid header
            FenceMissing: If the header is not followed by an opening fence
            ExhaustedInput: If the document ends inside a directive
            IOFailure: If reading fails
        """
        # SEEK_DIRECTIVE
        try:
            line = self.scanner.lines_readWhile(lambda line: comment_extract(line) is None)
        except ExhaustedInput:
            return None

        # PARSE_HEADER
        header = header_parse(comment_extract(line), self.scanner.line_number)
        LOG(f"Found directive '{header.name}' at line {self.scanner.line_number}", level=3)

        # EXPECT_FENCE_OPEN
        line = self.scanner.line_readNext()
        if not fence_is(line):
            raise FenceMissing(
                f"Directive '{header.name}' is not followed by a code fence",
                self.scanner.line_number,
            )
        lang = lang_extract(line)

        # COLLECT_BODY
        code_lines: List[str] = []

        def line_collect(line: str) -> bool:
            if fence_is(line):
                return False
            code_lines.append(line)
            return True

        self.scanner.lines_readWhile(line_collect)

        # EMIT
        body = CodeBlockBody(lang=lang, code="".join(code_lines))
        return CodeBlock(header=header, body=body)
