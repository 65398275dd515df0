"""
Unit tests for HTTP request parsing and the request context.
"""

import pytest

from httpreply import RequestContext
from httpreply.http.request import (
    HTTPRequest,
    RequestParser,
    HTTPParseError,
    parse_request,
)


class TestRequestParser:
    """Tests for RequestParser class."""

    def test_parse_simple_get(self, sample_get_request: bytes):
        """Test parsing a simple GET request."""
        parser = RequestParser()
        request = parser.parse(sample_get_request, ("127.0.0.1", 12345))

        assert request.method == "GET"
        assert request.path == "/media/sample.bin"
        assert request.version == "HTTP/1.1"
        assert request.client_address == ("127.0.0.1", 12345)

    def test_parse_headers(self, sample_get_request: bytes):
        """Test that headers are parsed correctly."""
        request = parse_request(sample_get_request)

        assert request.headers["host"] == "localhost:8080"
        assert request.headers["user-agent"] == "pytest"
        assert request.headers["accept"] == "*/*"
        assert request.range is None

    def test_parse_query_params(self, sample_get_request: bytes):
        """Repeated query keys keep every value in order."""
        request = parse_request(sample_get_request)

        assert request.query_params == {"quality": ["high"], "tag": ["a", "b"]}

    def test_parse_range_header(self):
        raw = b"GET /a HTTP/1.1\r\nRANGE: bytes=0-499\r\n\r\n"
        request = parse_request(raw)

        assert request.range == "bytes=0-499"

    def test_repeated_headers_joined(self):
        """Repeated headers are joined with a comma, as RFC 7230 allows."""
        raw = b"GET /a HTTP/1.1\r\nRange: bytes=0-1\r\nRange: bytes=5-6\r\n\r\n"
        request = parse_request(raw)

        assert request.range == "bytes=0-1, bytes=5-6"

    def test_folded_header(self):
        raw = b"GET / HTTP/1.1\r\nX-Long: first\r\n  second\r\n\r\n"
        request = parse_request(raw)

        assert request.headers["x-long"] == "first second"

    def test_parse_path_with_special_chars(self):
        """Test URL-encoded path parsing."""
        raw = b"GET /files/my%20song.ogg?q=hello%20world HTTP/1.1\r\nHost: test\r\n\r\n"
        request = parse_request(raw)

        assert request.path == "/files/my song.ogg"
        assert request.query_params["q"] == ["hello world"]

    def test_blank_query_values_kept(self):
        raw = b"GET /?flag=&x=1 HTTP/1.1\r\n\r\n"
        request = parse_request(raw)

        assert request.query_params == {"flag": [""], "x": ["1"]}

    def test_parse_invalid_method(self):
        """Test that invalid methods are rejected."""
        raw = b"INVALID /path HTTP/1.1\r\nHost: test\r\n\r\n"

        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw)

        assert exc_info.value.status_code == 405

    def test_parse_invalid_request_line(self):
        """Test handling of malformed request line."""
        raw = b"GET\r\nHost: test\r\n\r\n"

        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw)

        assert exc_info.value.status_code == 400

    def test_parse_unsupported_version(self):
        raw = b"GET / HTTP/2.0\r\n\r\n"

        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw)

        assert exc_info.value.status_code == 505

    def test_parse_incomplete_headers(self):
        """Requests without the blank line are incomplete."""
        with pytest.raises(HTTPParseError):
            parse_request(b"GET / HTTP/1.1\r\nHost: test\r\n")

    def test_parse_missing_headers(self):
        """Test parsing request with no headers."""
        raw = b"GET / HTTP/1.1\r\n\r\n"
        request = parse_request(raw)

        assert request.method == "GET"
        assert request.path == "/"
        assert len(request.headers) == 0

    def test_parse_request_too_large(self):
        """Test that oversized requests are rejected."""
        parser = RequestParser(max_request_size=100)
        raw = b"GET / HTTP/1.1\r\n" + b"X-Large: " + b"A" * 200 + b"\r\n\r\n"

        with pytest.raises(HTTPParseError) as exc_info:
            parser.parse(raw)

        assert exc_info.value.status_code == 413

    def test_body_kept_raw(self):
        """Bytes after the header block are kept as the body."""
        body = b"test body"
        raw = (
            b"POST / HTTP/1.1\r\n"
            b"Content-Length: 9\r\n"
            b"\r\n"
        ) + body

        request = parse_request(raw)
        assert request.body == body

    def test_content_length_not_enforced(self):
        """A short or invalid Content-Length does not reject the request."""
        short = parse_request(b"POST / HTTP/1.1\r\nContent-Length: 100\r\n\r\nabc")
        invalid = parse_request(b"POST / HTTP/1.1\r\nContent-Length: ten\r\n\r\n")

        assert short.body == b"abc"
        assert invalid.body == b""

    def test_bare_newline_in_header_name(self):
        """A lone LF inside a header line is a 400, not a crash."""
        raw = b"GET / HTTP/1.1\r\nX-A\nSet-Cookie: evil\r\n\r\n"

        with pytest.raises(HTTPParseError) as exc_info:
            parse_request(raw)

        assert exc_info.value.status_code == 400

    def test_case_insensitive_headers(self):
        """Test that header names are case-insensitive."""
        raw = b"GET / HTTP/1.1\r\nCONTENT-TYPE: text/html\r\n\r\n"
        request = parse_request(raw)

        assert request.get_header("Content-Type") == "text/html"
        assert request.get_header("content-type") == "text/html"


class TestHTTPRequest:
    """Tests for HTTPRequest dataclass."""

    def test_get_header_default(self):
        """Test get_header with default value."""
        request = HTTPRequest(method="GET", path="/")

        assert request.get_header("X-Missing") == ""
        assert request.get_header("X-Missing", "default") == "default"

    def test_plain_dict_headers_wrapped(self):
        """Headers given as a dict become case-insensitive."""
        request = HTTPRequest(method="GET", path="/", headers={"Range": "bytes=0-1"})

        assert request.range == "bytes=0-1"


class TestRequestContext:
    """Tests for RequestContext."""

    def test_query_defaults_to_request(self, sample_get_request: bytes):
        context = RequestContext.from_bytes(sample_get_request)

        assert context.query_value("quality") == "high"
        assert context.query_value("tag") == "a"
        assert context.query_values("tag") == ["a", "b"]
        assert context.query_value("missing") is None
        assert context.query_value("missing", "default") == "default"
        assert context.query_values("missing") == []

    def test_params_and_match(self, sample_get_request: bytes):
        context = RequestContext.from_bytes(
            sample_get_request,
            params={"name": "sample.bin"},
            match=["sample", "bin"],
        )

        assert context.params == {"name": "sample.bin"}
        assert context.match == ("sample", "bin")

    def test_explicit_query_wins(self):
        request = HTTPRequest(method="GET", path="/", query_params={"a": ["1"]})
        context = RequestContext(request, query={"b": ["2"]})

        assert context.query_value("a") is None
        assert context.query_value("b") == "2"

    def test_header_lookup(self, sample_get_request: bytes):
        context = RequestContext.from_bytes(sample_get_request)

        assert context.header("User-Agent") == "pytest"
        assert context.header("X-Missing") is None
