"""
Docker API Exceptions

Every failure raised by the engine client is one of the classes below.
Each carries a ``kind`` tag so callers can either catch a concrete class
or branch on ``error.kind``.
"""

import json
from enum import Enum
from typing import Optional


class ErrorKind(Enum):
    """Tag identifying which failure an engine error represents"""
    CONNECTION = 'connection'
    IO = 'io'
    MALFORMED_RESPONSE = 'malformed_response'
    REQUEST_FAILED = 'request_failed'
    TIMED_OUT = 'timed_out'
    DECODE = 'decode'


class DockerException(Exception):
    """Base Docker exception"""
    kind: ErrorKind


class EngineConnectionError(DockerException):
    """Socket could not be opened, or the peer went away before responding"""
    kind = ErrorKind.CONNECTION

    def __init__(self, socket_path: str, reason: str):
        super().__init__(f"Cannot connect to Docker engine at {socket_path}: {reason}")
        self.socket_path = socket_path
        self.reason = reason


class EngineIOError(DockerException):
    """I/O failure while writing the request or reading the response"""
    kind = ErrorKind.IO


class MalformedResponse(DockerException):
    """Response bytes could not be parsed as HTTP"""
    kind = ErrorKind.MALFORMED_RESPONSE


class RequestFailed(DockerException):
    """Docker engine answered with a non-2xx status"""
    kind = ErrorKind.REQUEST_FAILED

    def __init__(self, message: str, status_code: Optional[int] = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code

    @property
    def engine_message(self) -> str:
        """The engine's ``message`` field when the body is a JSON error object"""
        try:
            data = json.loads(self.message)
        except ValueError:
            return self.message
        if isinstance(data, dict) and isinstance(data.get('message'), str):
            return data['message']
        return self.message


class RequestTimedOut(DockerException):
    """Deadline elapsed before the request completed"""
    kind = ErrorKind.TIMED_OUT

    def __init__(self, timeout: float):
        super().__init__(f"Request timed out after {timeout:g}s.")
        self.timeout = timeout


class DecodeError(DockerException):
    """Successful response body did not have the expected JSON shape"""
    kind = ErrorKind.DECODE
