from __future__ import annotations

from healthprobe.transport.base import FileField, JsonResponse, PageResponse, Transport
from healthprobe.transport.errors import ConnectionFailed, RequestFailed, TransportError
from healthprobe.transport.http import RequestsTransport, decode_json_response

__all__ = [
    "FileField",
    "JsonResponse",
    "PageResponse",
    "Transport",
    "ConnectionFailed",
    "RequestFailed",
    "TransportError",
    "RequestsTransport",
    "decode_json_response",
]
