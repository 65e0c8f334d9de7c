"""
HTTP Client for Docker Unix Socket
Raw HTTP/1.1 framing and parsing on top of UnixSocketTransport
"""

import json
import re
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from .exceptions import DecodeError, MalformedResponse, RequestFailed
from .transport import DEFAULT_TIMEOUT, OpenConnection, UnixSocketTransport, default_socket_path, run_with_timeout

logger = logging.getLogger(__name__)

USER_AGENT = 'TidyDock'

HEADER_SEPARATOR = b'\r\n\r\n'
FALLBACK_HEADER_SEPARATOR = b'\n\n'
CRLF = b'\r\n'
CHUNK_SIZE = re.compile(rb'[0-9a-fA-F]+')


@dataclass(frozen=True)
class HTTPResponse:
    """Parsed HTTP response"""
    status_code: int
    headers: Dict[str, str] = field(default_factory=dict)
    body: bytes = b''

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300


def build_request(method: str, path: str, body: Optional[bytes] = None) -> bytes:
    """
    Frame an HTTP/1.1 request

    The path is written verbatim; callers quote identifiers themselves.
    """
    body = body or b''
    head = (
        f"{method} {path} HTTP/1.1\r\n"
        f"Host: docker\r\n"
        f"User-Agent: {USER_AGENT}\r\n"
        f"Connection: close\r\n"
        f"Content-Length: {len(body)}\r\n"
        f"\r\n"
    )
    return head.encode('utf-8') + body


def parse_response(data: bytes) -> HTTPResponse:
    """
    Split raw response bytes into status code, headers and body

    Raises:
        MalformedResponse: Missing separator, undecodable headers or bad status line
    """
    separator = HEADER_SEPARATOR
    index = data.find(separator)
    if index < 0:
        separator = FALLBACK_HEADER_SEPARATOR
        index = data.find(separator)
    if index < 0:
        raise MalformedResponse("Missing header separator")

    header_data = data[:index]
    body = data[index + len(separator):]

    try:
        header_text = header_data.decode('utf-8')
    except UnicodeDecodeError as e:
        raise MalformedResponse("Invalid header encoding") from e

    lines = [line for line in header_text.splitlines() if line]
    if not lines:
        raise MalformedResponse("Missing status line")

    status_parts = lines[0].split()
    if len(status_parts) < 2:
        raise MalformedResponse(f"Invalid status line: {lines[0]!r}")
    try:
        status_code = int(status_parts[1])
    except ValueError as e:
        raise MalformedResponse(f"Invalid status line: {lines[0]!r}") from e

    headers: Dict[str, str] = {}
    for line in lines[1:]:
        if ':' not in line:
            continue
        key, value = line.split(':', 1)
        headers[key.strip().lower()] = value.strip()

    if 'chunked' in headers.get('transfer-encoding', '').lower():
        body = decode_chunked_body(body)

    logger.debug(f"HTTP status={status_code} headers={len(headers)} body-bytes={len(body)}")
    return HTTPResponse(status_code=status_code, headers=headers, body=body)


def decode_chunked_body(data: bytes) -> bytes:
    """
    Reassemble a chunked transfer-encoded body

    Missing delimiters or a short final chunk end decoding with what was
    read so far. A size line that is not hexadecimal is a MalformedResponse.
    """
    output = bytearray()
    cursor = 0

    while cursor < len(data):
        line_end = data.find(CRLF, cursor)
        if line_end < 0:
            logger.warning(f"Chunked body truncated: missing size line terminator at offset {cursor}")
            break

        size_line = data[cursor:line_end].split(b';', 1)[0].strip()
        if not CHUNK_SIZE.fullmatch(size_line):
            raise MalformedResponse(f"Invalid chunk size: {size_line!r}")
        size = int(size_line, 16)
        cursor = line_end + len(CRLF)

        if size == 0:
            break

        chunk = data[cursor:cursor + size]
        output += chunk
        cursor += len(chunk)
        if len(chunk) < size:
            logger.warning(f"Chunked body truncated: expected {size} bytes, got {len(chunk)}")
            break

        if data[cursor:cursor + len(CRLF)] != CRLF:
            logger.warning(f"Chunked body truncated: missing chunk terminator at offset {cursor}")
            break
        cursor += len(CRLF)

    return bytes(output)


def error_message(response: HTTPResponse) -> str:
    """Caller-facing message for a failed response"""
    try:
        message = response.body.decode('utf-8').strip()
    except UnicodeDecodeError:
        message = ''
    return message or f"HTTP {response.status_code}"


class DockerHTTPClient:
    """HTTP client for Docker daemon"""

    def __init__(self, socket_path: Optional[str] = None, timeout: float = DEFAULT_TIMEOUT,
                 open_connection: Optional[OpenConnection] = None):
        """
        Initialize Docker HTTP client

        Args:
            socket_path: Docker socket path (default: default_socket_path())
            timeout: Deadline in seconds for each request
            open_connection: Connection factory override, used by tests
        """
        if socket_path is None:
            socket_path = default_socket_path()
        else:
            # Remove unix:// prefix if present
            socket_path = socket_path.replace('unix://', '', 1)

        self.socket_path = socket_path
        self.timeout = timeout
        self.transport = UnixSocketTransport(socket_path, open_connection=open_connection)

    async def request(self, method: str, path: str, body: Optional[bytes] = None) -> bytes:
        """
        Make HTTP request to Docker daemon

        Args:
            method: HTTP method (GET, POST, DELETE)
            path: API path including any query string
            body: Optional raw request body

        Returns:
            Response body bytes
        """
        response = await run_with_timeout(self._round_trip(method, path, body), self.timeout)
        if not response.ok:
            raise RequestFailed(error_message(response), status_code=response.status_code)
        return response.body

    async def _round_trip(self, method: str, path: str, body: Optional[bytes]) -> HTTPResponse:
        raw = await self.transport.send(build_request(method, path, body))
        return parse_response(raw)

    async def get_json(self, path: str) -> Any:
        """GET a path and decode its JSON body"""
        data = await self.request('GET', path)
        try:
            return json.loads(data.decode('utf-8'))
        except ValueError as e:
            raise DecodeError(f"Invalid JSON from {path}: {e}") from e

    async def get(self, path: str) -> bytes:
        """Make GET request"""
        return await self.request('GET', path)

    async def post(self, path: str, body: Optional[bytes] = None) -> bytes:
        """Make POST request"""
        return await self.request('POST', path, body)

    async def delete(self, path: str) -> bytes:
        """Make DELETE request"""
        return await self.request('DELETE', path)
