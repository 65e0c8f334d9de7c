import asyncio
import contextlib
import json
import os
import shutil
import tempfile

import pytest

from tidydock.docker_api import DockerClient

FIXTURES_DIR = os.path.join(os.path.dirname(__file__), 'fixtures')


def http_response(status: int, body: bytes = b'', reason: str = 'OK', headers=None) -> bytes:
    lines = [f'HTTP/1.1 {status} {reason}', 'Api-Version: 1.45', 'Content-Type: application/json']
    for key, value in (headers or {}).items():
        lines.append(f'{key}: {value}')
    if not headers or 'Transfer-Encoding' not in headers:
        lines.append(f'Content-Length: {len(body)}')
    return ('\r\n'.join(lines) + '\r\n\r\n').encode() + body


def chunked(payload: bytes, sizes) -> bytes:
    """Encode payload as chunks of the given sizes, then the terminating chunk"""
    out = b''
    offset = 0
    for size in sizes:
        piece = payload[offset:offset + size]
        out += f'{len(piece):x}\r\n'.encode() + piece + b'\r\n'
        offset += size
    if offset < len(payload):
        rest = payload[offset:]
        out += f'{len(rest):x}\r\n'.encode() + rest + b'\r\n'
    return out + b'0\r\n\r\n'


class RecordingWriter:
    """StreamWriter double that records what was written and whether it was closed"""

    def __init__(self, drain_error=None):
        self.data = b''
        self.closed = False
        self.drain_error = drain_error

    def write(self, data):
        self.data += data

    async def drain(self):
        if self.drain_error is not None:
            raise self.drain_error

    def close(self):
        self.closed = True

    async def wait_closed(self):
        pass


class FakeEngine:
    """Connection factory serving one canned response per connection"""

    def __init__(self, response=None, hang=False, read_error=None, drain_error=None):
        self.response = response
        self.hang = hang
        self.read_error = read_error
        self.drain_error = drain_error
        self.writers = []

    async def open_connection(self, socket_path):
        reader = asyncio.StreamReader()
        if self.read_error is not None:
            reader.set_exception(self.read_error)
        elif not self.hang:
            reader.feed_data(self.response or b'')
            reader.feed_eof()
        writer = RecordingWriter(drain_error=self.drain_error)
        self.writers.append(writer)
        return reader, writer

    @property
    def request_lines(self):
        return [w.data.split(b'\r\n', 1)[0].decode() for w in self.writers]


@pytest.fixture
def load_fixture():
    def _load(name):
        with open(os.path.join(FIXTURES_DIR, name), 'r', encoding='utf-8') as f:
            return json.load(f)
    return _load


@pytest.fixture
def fixture_bytes():
    def _read(name):
        with open(os.path.join(FIXTURES_DIR, name), 'rb') as f:
            return f.read()
    return _read


@pytest.fixture
def fake_engine():
    """Build a DockerClient wired to a FakeEngine"""
    def _make(response=None, timeout=3.0, **kwargs):
        engine = FakeEngine(response=response, **kwargs)
        client = DockerClient(socket_path='/tmp/fake-docker.sock', timeout=timeout,
                              open_connection=engine.open_connection)
        return client, engine
    return _make


@pytest.fixture
def socket_path():
    # AF_UNIX paths are limited to ~104 bytes, keep the directory short
    directory = tempfile.mkdtemp(prefix='td-', dir='/tmp')
    yield os.path.join(directory, 'engine.sock')
    shutil.rmtree(directory, ignore_errors=True)


@pytest.fixture
def unix_engine(socket_path):
    """Real Unix socket server answering every request with a canned response"""
    @contextlib.asynccontextmanager
    async def _serve(response: bytes, requests=None):
        async def handle(reader, writer):
            head = await reader.readuntil(b'\r\n\r\n')
            if requests is not None:
                requests.append(head)
            writer.write(response)
            await writer.drain()
            writer.close()

        server = await asyncio.start_unix_server(handle, path=socket_path)
        try:
            yield socket_path
        finally:
            server.close()
            await server.wait_closed()
    return _serve
