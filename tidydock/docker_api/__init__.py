"""
Docker engine API over the local Unix socket
Raw HTTP/1.1 on asyncio streams, no HTTP library involved
"""

from .client import DockerClient, DockerService
from .fixtures import FixtureDockerService
from .exceptions import (
    DecodeError,
    DockerException,
    EngineConnectionError,
    EngineIOError,
    ErrorKind,
    MalformedResponse,
    RequestFailed,
    RequestTimedOut,
)
from .models import (
    ContainerRecord,
    DiskUsageSnapshot,
    ImageRecord,
    NetworkRecord,
    UsageSummary,
)

__all__ = [
    'DockerClient',
    'DockerService',
    'FixtureDockerService',
    'DockerException',
    'ErrorKind',
    'EngineConnectionError',
    'EngineIOError',
    'MalformedResponse',
    'RequestFailed',
    'RequestTimedOut',
    'DecodeError',
    'ImageRecord',
    'ContainerRecord',
    'NetworkRecord',
    'DiskUsageSnapshot',
    'UsageSummary',
]

__version__ = '1.0.0'
