"""
DirectiveStream tests - turning documents into directives

Covers the state machine (seek, header, fence open, body, emit) and its
termination semantics.
"""

import io

import pytest

from mdbabel.lib.document import DirectiveStream
from mdbabel.lib.errors import ExhaustedInput, FenceMissing, HeaderMalformed, IOFailure
from mdbabel.models.directives import CodeBlock, CodeBlockBody, DirectiveHeader, DirectiveKind


def stream_make(source: str, **kwargs) -> DirectiveStream:
    return DirectiveStream(io.BytesIO(source.encode("utf-8")), **kwargs)


BASIC_DOCUMENT = (
    "# Document\n"
    "\n"
    "Some text\n"
    "\n"
    "<!-- mdbabel :name test-block -->\n"
    "```sh\n"
    "echo 'hello world'\n"
    "```\n"
    "\n"
    "More text.\n"
)


class TestSingleDirective:
    """Test documents with one directive"""

    def test_basic_document(self):
        """Prose around a single directive"""
        stream = stream_make(BASIC_DOCUMENT)

        directive = next(stream)
        assert directive == CodeBlock(
            header=DirectiveHeader(name="test-block"),
            body=CodeBlockBody(lang="sh", code="echo 'hello world'\n"),
        )
        assert directive.kind is DirectiveKind.CODE_BLOCK

        with pytest.raises(StopIteration):
            next(stream)
        assert stream.stop_reason is None

    def test_body_is_verbatim(self):
        """Indentation, blank lines and comments in the body are kept"""
        source = (
            "<!-- mdbabel :name verbatim -->\n"
            "```bash\n"
            "if true; then\n"
            "    echo '<!-- not a header -->'\n"
            "\n"
            "fi\n"
            "```\n"
        )
        directives = list(stream_make(source))
        assert len(directives) == 1
        assert directives[0].body.code == (
            "if true; then\n"
            "    echo '<!-- not a header -->'\n"
            "\n"
            "fi\n"
        )

    def test_empty_body(self):
        """Fence closing right after opening gives empty code"""
        directives = list(stream_make("<!-- mdbabel :name empty -->\n```sh\n```\n"))
        assert directives[0].body.code == ""

    def test_no_language(self):
        """Bare opening fence gives no language"""
        directives = list(stream_make("<!-- mdbabel :name plain -->\n```\nls\n```\n"))
        assert directives[0].body == CodeBlockBody(lang=None, code="ls\n")

    def test_closing_fence_trailer_ignored(self):
        """Text after the closing fence marker is not part of anything"""
        source = "<!-- mdbabel :name a -->\n```sh\necho a\n``` trailing\n"
        directives = list(stream_make(source))
        assert directives[0].body.code == "echo a\n"

    def test_closing_fence_at_eof_without_newline(self):
        """Final fence line may lack a newline"""
        directives = list(stream_make("<!-- mdbabel :name a -->\n```sh\necho a\n```"))
        assert directives[0].body.code == "echo a\n"

    def test_text_stream(self):
        """Text streams are accepted as well as byte streams"""
        directives = list(DirectiveStream(io.StringIO(BASIC_DOCUMENT)))
        assert directives[0].header.name == "test-block"


class TestMultipleDirectives:
    """Test ordering across several directives"""

    def test_two_directives_in_order(self):
        """Each directive keeps its own name, language and code"""
        source = (
            "Intro\n"
            "<!-- mdbabel :name first -->\n"
            "```sh\n"
            "echo 1\n"
            "```\n"
            "Between\n"
            "\n"
            "<!-- mdbabel :name second -->\n"
            "```bash\n"
            "echo 2\n"
            "echo 3\n"
            "```\n"
        )
        directives = list(stream_make(source))
        assert [(d.header.name, d.body.lang, d.body.code) for d in directives] == [
            ("first", "sh", "echo 1\n"),
            ("second", "bash", "echo 2\necho 3\n"),
        ]

    def test_untagged_fences_are_skipped(self):
        """Fenced blocks without a header comment are prose"""
        source = (
            "```sh\n"
            "echo ignored\n"
            "```\n"
            "<!-- mdbabel :name tagged -->\n"
            "```sh\n"
            "echo run\n"
            "```\n"
        )
        directives = list(stream_make(source))
        assert len(directives) == 1
        assert directives[0].body.code == "echo run\n"

    def test_duplicate_names_allowed(self):
        """Name uniqueness is not enforced by the parser"""
        block = "<!-- mdbabel :name same -->\n```sh\ntrue\n```\n"
        assert len(list(stream_make(block + block))) == 2


class TestEarlyTermination:
    """Test that failures end the stream like a normal end of document"""

    def test_empty_document(self):
        """No lines at all"""
        stream = stream_make("")
        assert list(stream) == []
        assert stream.stop_reason is None

    def test_no_directives(self):
        """Plain prose yields nothing"""
        assert list(stream_make("# Title\n\nJust text.\n")) == []

    def test_malformed_header_stops_stream(self):
        """Directives before the malformed one survive, later ones do not"""
        source = (
            "<!-- mdbabel :name before -->\n"
            "```sh\n"
            "echo before\n"
            "```\n"
            "<!-- mdbabel :title broken -->\n"
            "```sh\n"
            "echo broken\n"
            "```\n"
            "<!-- mdbabel :name after -->\n"
            "```sh\n"
            "echo after\n"
            "```\n"
        )
        stream = stream_make(source)
        assert [d.header.name for d in stream] == ["before"]
        assert isinstance(stream.stop_reason, HeaderMalformed)
        assert stream.stop_reason.line_number == 5

    def test_unrelated_comment_stops_stream(self):
        """Any other HTML comment counts as a malformed header"""
        source = (
            "<!-- prettier-ignore -->\n"
            "<!-- mdbabel :name never -->\n"
            "```sh\n"
            "echo never\n"
            "```\n"
        )
        assert list(stream_make(source)) == []

    def test_blank_line_before_fence(self):
        """The fence must be on the very next line"""
        source = "<!-- mdbabel :name gap -->\n\n```sh\necho gap\n```\n"
        stream = stream_make(source)
        assert list(stream) == []
        assert isinstance(stream.stop_reason, FenceMissing)

    def test_header_at_end_of_document(self):
        """Header on the last line"""
        stream = stream_make("<!-- mdbabel :name last -->\n")
        assert list(stream) == []
        assert isinstance(stream.stop_reason, ExhaustedInput)

    def test_unterminated_fence(self):
        """A block without a closing fence is dropped"""
        stream = stream_make("<!-- mdbabel :name open -->\n```sh\necho open\n")
        assert list(stream) == []
        assert isinstance(stream.stop_reason, ExhaustedInput)

    def test_stays_stopped(self):
        """Pulling again after the end keeps yielding nothing"""
        stream = stream_make(BASIC_DOCUMENT)
        list(stream)
        with pytest.raises(StopIteration):
            next(stream)
        with pytest.raises(StopIteration):
            next(stream)


class TestStrictMode:
    """Test raising instead of silently stopping"""

    def test_strict_raises_header_error(self):
        """Malformed header is raised after earlier directives"""
        source = (
            "<!-- mdbabel :name ok -->\n"
            "```sh\n"
            "true\n"
            "```\n"
            "<!-- mdbabel -->\n"
        )
        stream = stream_make(source, strict=True)
        assert next(stream).header.name == "ok"
        with pytest.raises(HeaderMalformed):
            next(stream)
        with pytest.raises(StopIteration):
            next(stream)

    def test_strict_raises_missing_fence(self):
        """Header followed by prose"""
        stream = stream_make("<!-- mdbabel :name x -->\ntext\n", strict=True)
        with pytest.raises(FenceMissing, match="line 2"):
            next(stream)

    def test_strict_clean_end(self):
        """End of document while seeking is still a clean stop"""
        stream = stream_make(BASIC_DOCUMENT, strict=True)
        assert len(list(stream)) == 1
        assert stream.stop_reason is None


class FailingStream(io.BytesIO):
    """Byte stream that raises OSError once its content is used up"""

    def readline(self, size=-1):
        line = super().readline(size)
        if not line:
            raise OSError("device went away")
        return line


GOOD_DIRECTIVE = "<!-- mdbabel :name good -->\n```sh\necho good\n```\n"


class TestReadFailures:
    """Test that read errors end the stream after earlier directives"""

    def test_os_error_stops_stream(self):
        """Directive before the failure is emitted, then iteration stops"""
        stream = DirectiveStream(FailingStream(GOOD_DIRECTIVE.encode("utf-8")))
        assert [d.header.name for d in stream] == ["good"]
        assert isinstance(stream.stop_reason, IOFailure)
        assert "device went away" in str(stream.stop_reason)

    def test_undecodable_bytes_stop_stream(self):
        """Bad bytes after a directive stop the stream"""
        source = GOOD_DIRECTIVE.encode("utf-8") + b"\xff\xfe\n" + GOOD_DIRECTIVE.encode("utf-8")
        stream = DirectiveStream(io.BytesIO(source))
        assert [d.header.name for d in stream] == ["good"]
        assert isinstance(stream.stop_reason, IOFailure)
        assert stream.stop_reason.line_number == 5

    def test_strict_raises_os_error(self):
        """Strict mode raises the IOFailure after earlier directives"""
        stream = DirectiveStream(FailingStream(GOOD_DIRECTIVE.encode("utf-8")), strict=True)
        assert next(stream).header.name == "good"
        with pytest.raises(IOFailure, match="device went away"):
            next(stream)
        with pytest.raises(StopIteration):
            next(stream)

    def test_strict_raises_decode_error(self):
        """Strict mode raises on undecodable bytes inside a body"""
        source = b"<!-- mdbabel :name bad -->\n```sh\n\xff\n```\n"
        stream = DirectiveStream(io.BytesIO(source), strict=True)
        with pytest.raises(IOFailure):
            next(stream)
