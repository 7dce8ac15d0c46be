"""
http.py

requests-backed transport for the service under test.

Responsibilities:
- JSON request/response cycle against the API base URL
- Page fetches with a single secure -> insecure failover
- Multipart document submission
- requests exception -> TransportError translation

Does NOT:
- Validate responses (the probe executor owns that)
- Retry anything except the page failover
"""

from __future__ import annotations

import json
from typing import Any, Mapping, Optional

import requests
import urllib3
from urllib3.exceptions import InsecureRequestWarning

from healthprobe.env import Environment
from healthprobe.logger import get_logger
from healthprobe.transport.base import FileField, JsonResponse, PageResponse
from healthprobe.transport.errors import ConnectionFailed, RequestFailed

log = get_logger("healthprobe.transport")

SECURE = "https"
INSECURE = "http"


def decode_json_response(status_code: int, text: str) -> JsonResponse:
    """Decode a body as JSON, keeping the raw text when it is not JSON."""
    try:
        body = json.loads(text)
    except ValueError:
        return JsonResponse(status_code=status_code, text=text)
    return JsonResponse(status_code=status_code, text=text, body=body, parsed=True)


class RequestsTransport:
    def __init__(
        self,
        *,
        api_url: str,
        secure_page_url: str,
        insecure_page_url: str,
        timeout: float = 30.0,
        verify_tls: bool = False,
        session: Optional[requests.Session] = None,
    ) -> None:
        self.api_url = api_url.rstrip("/")
        self.secure_page_url = secure_page_url.rstrip("/")
        self.insecure_page_url = insecure_page_url.rstrip("/")
        self.timeout = timeout
        self.verify_tls = verify_tls
        self._session = session or requests.Session()

        if not verify_tls:
            # Local deployments serve a self-signed certificate.
            urllib3.disable_warnings(InsecureRequestWarning)

    @classmethod
    def from_env(cls, env: Environment) -> "RequestsTransport":
        return cls(
            api_url=env.api_url,
            secure_page_url=env.secure_page_url,
            insecure_page_url=env.insecure_page_url,
            timeout=env.request_timeout,
            verify_tls=env.verify_tls,
        )

    def close(self) -> None:
        self._session.close()

    # -----------------------------------------------------------------
    # Transport protocol
    # -----------------------------------------------------------------

    def request(
        self,
        method: str,
        path: str,
        body: Optional[Any] = None,
        headers: Optional[Mapping[str, str]] = None,
    ) -> JsonResponse:
        url = f"{self.api_url}{path}"
        merged = {"Content-Type": "application/json", **dict(headers or {})}
        log.debug(f"{method} {url}")

        resp = self._send(method, url, json=body, headers=merged)
        return decode_json_response(resp.status_code, resp.text)

    def fetch_page(self, path: str) -> PageResponse:
        secure_url = f"{self.secure_page_url}{path}"
        try:
            resp = self._send("GET", secure_url, verify=self.verify_tls)
            return PageResponse(resp.status_code, resp.text, transport_used=SECURE)
        except ConnectionFailed as secure_error:
            log.warning(f"{SECURE.upper()} failed for {path}, trying {INSECURE.upper()}...")
            log.debug(f"{SECURE} error: {secure_error}")

            insecure_url = f"{self.insecure_page_url}{path}"
            try:
                resp = self._send("GET", insecure_url)
            except ConnectionFailed as insecure_error:
                raise ConnectionFailed(
                    f"Both {SECURE.upper()} and {INSECURE.upper()} failed: {insecure_error}"
                ) from insecure_error

            return PageResponse(resp.status_code, resp.text, transport_used=INSECURE)

    def submit_multipart(
        self,
        path: str,
        fields: Mapping[str, str],
        file_field: FileField,
    ) -> JsonResponse:
        url = f"{self.api_url}{path}"
        files = {
            file_field.name: (
                file_field.filename,
                file_field.content,
                file_field.content_type,
            )
        }
        log.debug(f"POST (multipart) {url}")

        resp = self._send("POST", url, data=dict(fields), files=files)
        return decode_json_response(resp.status_code, resp.text)

    # -----------------------------------------------------------------
    # Internals
    # -----------------------------------------------------------------

    def _send(self, method: str, url: str, **kwargs: Any) -> requests.Response:
        kwargs.setdefault("timeout", self.timeout)
        try:
            return self._session.request(method, url, **kwargs)
        except (requests.ConnectionError, requests.Timeout) as e:
            raise ConnectionFailed(str(e)) from e
        except requests.RequestException as e:
            raise RequestFailed(str(e)) from e
