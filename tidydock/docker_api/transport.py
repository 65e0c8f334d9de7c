"""
Unix socket transport for the Docker engine API
One connection per request, closed on every exit path
"""

import asyncio
import logging
import os
import platform
from typing import Awaitable, Callable, Optional, Tuple, TypeVar

from .exceptions import EngineConnectionError, EngineIOError, RequestTimedOut

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT = 3.0
READ_CHUNK_SIZE = 64 * 1024

LINUX_SOCKET_PATH = '/var/run/docker.sock'
MACOS_SOCKET_CANDIDATES = (
    '~/.docker/run/docker.sock',
    '~/.colima/default/docker.sock',
)

T = TypeVar('T')

OpenConnection = Callable[[str], Awaitable[Tuple[asyncio.StreamReader, asyncio.StreamWriter]]]


def default_socket_path() -> str:
    """
    Resolve the Docker socket path

    Order: TIDYDOCK_SOCKET, DOCKER_HOST (unix:// only), the per-user
    sockets of Docker Desktop and Colima on macOS, /var/run/docker.sock.
    """
    explicit = os.environ.get('TIDYDOCK_SOCKET')
    if explicit:
        return explicit

    docker_host = os.environ.get('DOCKER_HOST', '')
    if docker_host.startswith('unix://'):
        return docker_host[len('unix://'):]

    if platform.system() == "Darwin":  # macOS
        for candidate in MACOS_SOCKET_CANDIDATES:
            path = os.path.expanduser(candidate)
            if os.path.exists(path):
                return path

    return LINUX_SOCKET_PATH


class UnixSocketTransport:
    """Performs a single HTTP exchange over a Unix domain socket"""

    def __init__(self, socket_path: str, open_connection: Optional[OpenConnection] = None):
        """
        Args:
            socket_path: Path to the engine control socket
            open_connection: Coroutine returning (reader, writer); defaults to
                asyncio.open_unix_connection
        """
        self.socket_path = socket_path
        self._open_connection = open_connection or asyncio.open_unix_connection

    async def send(self, request: bytes) -> bytes:
        """
        Write one framed request and read until the peer closes

        Args:
            request: Complete HTTP request bytes

        Returns:
            Raw response bytes
        """
        try:
            reader, writer = await self._open_connection(self.socket_path)
        except OSError as e:
            raise EngineConnectionError(self.socket_path, str(e) or type(e).__name__) from e

        logger.debug(f"Connected to {self.socket_path}")
        try:
            writer.write(request)
            await writer.drain()

            chunks = []
            while True:
                chunk = await reader.read(READ_CHUNK_SIZE)
                if not chunk:
                    break
                chunks.append(chunk)
        except (ConnectionResetError, BrokenPipeError) as e:
            raise EngineConnectionError(self.socket_path, str(e) or type(e).__name__) from e
        except OSError as e:
            raise EngineIOError(f"I/O error on {self.socket_path}: {e}") from e
        finally:
            writer.close()
            try:
                await writer.wait_closed()
            except OSError as e:
                logger.debug(f"Error while closing {self.socket_path}: {e}")
            logger.debug(f"Closed connection to {self.socket_path}")

        if not chunks:
            raise EngineConnectionError(self.socket_path, "connection closed before a response was received")
        return b''.join(chunks)


async def run_with_timeout(operation: Awaitable[T], timeout: float = DEFAULT_TIMEOUT) -> T:
    """
    Race an operation against a deadline

    The operation is cancelled if the deadline fires first, so its
    connection is torn down before RequestTimedOut reaches the caller.
    """
    try:
        return await asyncio.wait_for(operation, timeout)
    except asyncio.TimeoutError as e:
        raise RequestTimedOut(timeout) from e
