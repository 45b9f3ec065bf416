"""
=============================================================================
HTTP REQUEST PARSING
=============================================================================

Turns the raw bytes read off a connection into an HTTPRequest.

    ┌─────────────────────────────────────────────────────────────────────┐
    │                      HTTP REQUEST STRUCTURE                         │
    ├─────────────────────────────────────────────────────────────────────┤
    │                                                                      │
    │    POST /movie/ HTTP/1.1\r\n                  ← request line        │
    │    Host: localhost:8080\r\n                   ← headers             │
    │    Content-Type: application/json\r\n                               │
    │    Content-Length: 51\r\n                                           │
    │    \r\n                                       ← blank line          │
    │    {"name": "Inception", "year": 2010, ...}   ← body                │
    │                                                                      │
    └─────────────────────────────────────────────────────────────────────┘

Framing problems (bad request line, unsupported version, oversize input)
raise HTTPParseError, which carries the status the server answers with.
Whether the *body* matches a schema is not decided here; that belongs to
the handler that owns the schema.

=============================================================================
"""

from dataclasses import dataclass, field
from typing import Optional, Dict
from urllib.parse import parse_qs, urlparse
import re

from .errors import HTTPError
from .status_codes import HTTPStatus


class HTTPParseError(HTTPError):
    """
    Raised when the request itself cannot be parsed.

        400 Bad Request                - malformed syntax
        405 Method Not Allowed         - unknown method token
        413 Payload Too Large          - over the size limit
        505 HTTP Version Not Supported - not HTTP/1.0 or HTTP/1.1
    """

    status = HTTPStatus.BAD_REQUEST

    def __init__(self, message: str, status_code: int = 400):
        super().__init__(message, status_code)


@dataclass
class HTTPRequest:
    """
    A parsed HTTP request.

    Header names are stored lowercase (RFC 7230 makes them
    case-insensitive), so lookups never need to normalize.

    path_params is empty after parsing; the router fills it in when a
    pattern such as /movie/:id matches.
    """

    method: str
    path: str
    version: str = "HTTP/1.1"

    headers: Dict[str, str] = field(default_factory=dict)
    query_params: Dict[str, list[str]] = field(default_factory=dict)
    body: bytes = b""

    path_params: Dict[str, str] = field(default_factory=dict)

    client_address: tuple[str, int] = ("", 0)

    _content_type: Optional[str] = field(default=None, repr=False)

    @property
    def content_type(self) -> Optional[str]:
        """
        Media type of the body without parameters.

        "application/json; charset=utf-8" → "application/json"
        """
        if self._content_type is None:
            ct = self.headers.get("content-type", "")
            self._content_type = ct.split(";")[0].strip().lower()
        return self._content_type or None

    @property
    def user_agent(self) -> str:
        return self.headers.get("user-agent", "")

    @property
    def is_json(self) -> bool:
        """True when Content-Type says application/json."""
        return self.content_type == "application/json"

    @property
    def is_keep_alive(self) -> bool:
        """
        Whether the connection should stay open after the response.

            HTTP/1.1: open unless "Connection: close"
            HTTP/1.0: closed unless "Connection: keep-alive"
        """
        connection = self.headers.get("connection", "").lower()

        if self.version == "HTTP/1.1":
            return connection != "close"
        return connection == "keep-alive"

    def get_header(self, name: str, default: str = "") -> str:
        """Case-insensitive header lookup."""
        return self.headers.get(name.lower(), default)


class RequestParser:
    """
    Parses raw request bytes into HTTPRequest objects.

        1. size check                     → 413
        2. split at \\r\\n\\r\\n            → 400 if missing
        3. request line                   → 400 / 405 / 505
        4. headers (lowercased)
        5. body, exactly Content-Length bytes
    """

    VALID_METHODS = {
        "GET",
        "POST",
        "PUT",
        "DELETE",
        "PATCH",
        "HEAD",
        "OPTIONS",
        "TRACE",
        "CONNECT",
    }

    REQUEST_LINE_PATTERN = re.compile(r"^([A-Z]+) ([^ ]+) (HTTP/\d\.\d)$")
    HEADER_PATTERN = re.compile(r"^([^:]+):\s*(.*)$")

    def __init__(self, max_request_size: int = 10 * 1024 * 1024):
        """
        Args:
            max_request_size: Largest accepted request in bytes.
        """
        self.max_request_size = max_request_size

    def parse(
        self,
        data: bytes,
        client_address: tuple[str, int] = ("", 0)
    ) -> HTTPRequest:
        """
        Parse one complete request.

        Args:
            data: Raw bytes from the connection.
            client_address: (ip, port) of the peer, for logging.

        Returns:
            The parsed request.

        Raises:
            HTTPParseError: If the request is malformed.
        """
        if len(data) > self.max_request_size:
            raise HTTPParseError(
                f"Request too large: {len(data)} bytes",
                status_code=413
            )

        header_end = data.find(b"\r\n\r\n")
        if header_end == -1:
            raise HTTPParseError("Incomplete request: no header terminator")

        header_section = data[:header_end].decode("utf-8", errors="replace")
        body = data[header_end + 4:]

        lines = header_section.split("\r\n")
        method, path, query_params, version = self._parse_request_line(lines[0])
        headers = self._parse_headers(lines[1:])

        try:
            content_length = int(headers.get("content-length", 0))
        except ValueError:
            raise HTTPParseError(f"Invalid Content-Length: {headers['content-length']}")
        if content_length < 0:
            raise HTTPParseError(f"Invalid Content-Length: {content_length}")

        if len(body) < content_length:
            raise HTTPParseError(
                f"Incomplete body: expected {content_length} bytes, got {len(body)}"
            )

        # Anything past Content-Length belongs to the next pipelined request.
        body = body[:content_length]

        return HTTPRequest(
            method=method,
            path=path,
            version=version,
            headers=headers,
            query_params=query_params,
            body=body,
            client_address=client_address,
        )

    def _parse_request_line(
        self,
        line: str
    ) -> tuple[str, str, Dict[str, list[str]], str]:
        """
        Split "METHOD SP REQUEST-URI SP HTTP-VERSION".

        Returns:
            (method, path, query params, version)

        The path stays percent-encoded; the router decodes captured
        parameters after matching, so %2F never splits a segment.
        """
        match = self.REQUEST_LINE_PATTERN.match(line)
        if not match:
            raise HTTPParseError(f"Invalid request line: {line}")

        method, uri, version = match.groups()

        if method not in self.VALID_METHODS:
            raise HTTPParseError(f"Invalid method: {method}", status_code=405)

        if version not in ("HTTP/1.0", "HTTP/1.1"):
            raise HTTPParseError(
                f"Unsupported HTTP version: {version}",
                status_code=505
            )

        parsed = urlparse(uri)
        path = parsed.path or "/"
        query_params = parse_qs(parsed.query, keep_blank_values=True)

        return method, path, query_params, version

    def _parse_headers(self, lines: list[str]) -> Dict[str, str]:
        """
        Parse "Name: value" lines into a dict with lowercase names.

        Repeated headers are joined with ", " and obsolete line folding
        (a line starting with whitespace) continues the previous header.
        Lines without a colon are skipped.
        """
        headers: Dict[str, str] = {}
        current_name = None

        for line in lines:
            if not line:
                continue

            if line[0] in (" ", "\t"):
                if current_name is not None:
                    headers[current_name] += " " + line.strip()
                continue

            match = self.HEADER_PATTERN.match(line)
            if not match:
                continue

            name, value = match.groups()
            name = name.strip().lower()
            value = value.strip()
            current_name = name

            if name in headers:
                headers[name] += ", " + value
            else:
                headers[name] = value

        return headers


def parse_request(
    data: bytes,
    client_address: tuple[str, int] = ("", 0),
    max_size: int = 10 * 1024 * 1024
) -> HTTPRequest:
    """One-shot helper around RequestParser.parse()."""
    parser = RequestParser(max_request_size=max_size)
    return parser.parse(data, client_address)
