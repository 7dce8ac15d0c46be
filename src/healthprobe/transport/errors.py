from __future__ import annotations


class TransportError(Exception):
    """Base error for anything a transport could not deliver."""


class ConnectionFailed(TransportError):
    """Connection refused/reset, DNS failure, TLS handshake failure or timeout."""


class RequestFailed(TransportError):
    """The HTTP library rejected or aborted the request for another reason."""
