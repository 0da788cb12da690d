"""Map network and protocol errors to failure kinds."""

import socket

import aiohttp

from http_latency.models.result import Failure, FailureKind


def classify(error: BaseException, *, status_received: bool = False) -> FailureKind:
    """Classify a request error.

    Args:
        error: Exception raised while sending the request or reading the response
        status_received: Whether the status line had arrived when it was raised

    Returns:
        The failure kind. Errors that happen after the connection is up but
        before a status line are ``ServerRefusedRequest``; once a status line
        is in, any transport break is a ``ProtocolError``.

    """
    # TLS errors subclass ClientConnectorError, so they are checked first.
    if isinstance(error, aiohttp.ClientSSLError):
        return "ProtocolError"

    if isinstance(error, aiohttp.ClientConnectorError):
        if isinstance(error.os_error, socket.gaierror):
            return "DnsResolutionFailure"
        return "ConnectionRefused"
    if isinstance(error, socket.gaierror):
        return "DnsResolutionFailure"
    if isinstance(error, ConnectionRefusedError):
        return "ConnectionRefused"

    if isinstance(error, TimeoutError):
        return "Timeout"

    if isinstance(error, aiohttp.InvalidURL):
        return "MalformedTarget"
    if isinstance(error, aiohttp.TooManyRedirects):
        return "ProtocolError"

    if not status_received and isinstance(
        error, aiohttp.ServerDisconnectedError | aiohttp.ClientResponseError
    ):
        return "ServerRefusedRequest"

    return "ProtocolError"


def describe(error: BaseException) -> str:
    """Human-readable message for a failure."""
    return str(error) or type(error).__name__


def to_failure(error: BaseException, *, status_received: bool = False) -> Failure:
    """Build the Failure outcome for ``error``."""
    return Failure(
        kind=classify(error, status_received=status_received),
        message=describe(error),
    )
