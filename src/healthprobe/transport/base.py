from __future__ import annotations

from dataclasses import dataclass
from typing import Any, BinaryIO, Mapping, Optional, Protocol, Union


@dataclass(frozen=True)
class JsonResponse:
    """
    Result of a JSON-oriented request.

    `body` is the decoded JSON document, or None when the text did not parse;
    `text` always carries the raw body.
    """

    status_code: int
    text: str
    body: Any = None
    parsed: bool = False


@dataclass(frozen=True)
class PageResponse:
    status_code: int
    text: str
    transport_used: str


@dataclass(frozen=True)
class FileField:
    name: str
    filename: str
    content: Union[bytes, BinaryIO]
    content_type: str = "text/plain"


class Transport(Protocol):
    """
    Capabilities the probe executor needs from an HTTP client.

    Implementations raise TransportError subclasses for delivery failures and
    return a response object for every HTTP status, including 4xx/5xx.
    """

    def request(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> JsonResponse: ...

    def fetch_page(self, path: str) -> PageResponse: ...

    def submit_multipart(
        self,
        path: str,
        fields: Mapping[str, str],
        file_field: FileField,
    ) -> JsonResponse: ...
