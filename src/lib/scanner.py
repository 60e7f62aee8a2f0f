"""
Single-line buffered reader over a markdown document

The Scanner reads one physical line at a time. Each read overwrites the
scanner's buffer (``Scanner.line``); the value returned to the caller is an
owned string and stays valid, but the buffer itself only ever reflects the
most recent read.
"""

from typing import IO, Callable, Optional, Union

from .errors import ExhaustedInput, IOFailure


LinePredicate = Callable[[str], bool]


class Scanner:
    """
    Line reader with "read next" and "skip while" operations

    Accepts binary streams (decoded with ``encoding``) or text streams.
    Lines keep their terminator; only the final line of a document may lack
    one.
    """

    def __init__(self, stream: IO, encoding: str = "utf-8") -> None:
        """
        Initialize scanner over an open stream

        Args:
            stream: Binary or text stream positioned at the start of the document
            encoding: Encoding used when the stream yields bytes

        Attributes:
            line: Buffer holding the most recently read line ("" before the
                  first read and after end of input)
            line_number: Number of physical lines read so far
        """
        self.stream = stream
        self.encoding = encoding
        self.line: str = ""
        self.line_number: int = 0

    def line_fill(self) -> Optional[str]:
        """
        Refill the buffer with the next physical line

        Returns:
            The line, or None at end of input

        Raises:
            IOFailure: If the stream read fails or the bytes cannot be decoded
        """
        self.line = ""
        try:
            raw: Union[str, bytes] = self.stream.readline()
            text = raw.decode(self.encoding) if isinstance(raw, bytes) else raw
        except (OSError, UnicodeDecodeError, ValueError) as e:
            raise IOFailure(f"Cannot read input: {e}", self.line_number + 1) from e

        if not text:
            return None

        self.line = text
        self.line_number += 1
        return text

    def lines_readWhile(self, predicate: LinePredicate) -> str:
        """
        Discard lines while ``predicate`` holds, return the first that fails it

        Args:
            predicate: Called with each line; True means "skip this line"

        Returns:
            First line for which predicate returned False

        Raises:
            ExhaustedInput: If input ends before such a line is found,
                            including when no lines were left at all
            IOFailure: If reading fails

        Example:
            >>> scanner = Scanner(io.StringIO("a\\n\\nb\\n"))
            >>> scanner.lines_readWhile(lambda line: line != "b\\n")
            'b\\n'
        """
        while True:
            line = self.line_fill()
            if line is None:
                raise ExhaustedInput("End of input", self.line_number)
            if not predicate(line):
                return line

    def line_readNext(self) -> str:
        """
        Read exactly one physical line

        Raises:
            ExhaustedInput: At end of input
            IOFailure: If reading fails
        """
        return self.lines_readWhile(lambda _line: False)
