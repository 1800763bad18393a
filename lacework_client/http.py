from __future__ import annotations

from dataclasses import dataclass
from http import HTTPStatus
import logging
from typing import Any, Callable, Mapping

import requests

from lacework_client.config import ClientSettings
from lacework_client.logging_utils import get_logger
from lacework_client.models import to_json_dict
from lacework_client.version import __version__


logger = get_logger("http")

USER_AGENT = f"lacework-client-python/{__version__}"
SNIFF_LIMIT = 500


class ApiHttpError(RuntimeError):
    def __init__(self, status_code: int, message: str, method: str = "", url: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.method = method
        self.url = url


@dataclass(frozen=True)
class LifecycleCallbacks:
    """Hooks observing every HTTP response.

    ``on_response`` receives the status code and the response headers before
    any error mapping happens.
    """

    on_response: Callable[[int, Mapping[str, str]], None] | None = None


def api_path(path: str, version: str) -> str:
    return f"/api/{version}/{path.lstrip('/')}"


class HttpClient:
    def __init__(
        self,
        settings: ClientSettings,
        session: requests.Session | None = None,
        callbacks: LifecycleCallbacks | None = None,
    ):
        self._settings = settings
        self._callbacks = callbacks or LifecycleCallbacks()
        self._session = session or requests.Session()
        self._session.headers.update(
            {
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            }
        )

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def session(self) -> requests.Session:
        return self._session

    @property
    def callbacks(self) -> LifecycleCallbacks:
        return self._callbacks

    def update_settings(self, settings: ClientSettings) -> None:
        self._settings = settings

    def use_session(self, session: requests.Session) -> None:
        session.headers.update(
            {
                "Accept": "application/json",
                "User-Agent": USER_AGENT,
            }
        )
        self._session = session

    def use_callbacks(self, callbacks: LifecycleCallbacks) -> None:
        self._callbacks = callbacks

    def url_for(self, path: str, version: str | None = None) -> str:
        return f"{self._settings.base_url.rstrip('/')}{api_path(path, version or self._settings.api_version)}"

    def request(
        self,
        method: str,
        path: str,
        token: str | None = None,
        payload: Any = None,
        params: dict[str, Any] | None = None,
        headers: dict[str, str] | None = None,
        version: str | None = None,
    ) -> Any:
        url = self.url_for(path, version)

        request_headers = dict(self._settings.headers)
        if headers:
            request_headers.update(headers)
        if token:
            request_headers["Authorization"] = token

        body = None
        if payload is not None:
            body = to_json_dict(payload)
            request_headers["Content-Type"] = "application/json"

        logger.debug(
            "request %s %s",
            method,
            url,
            extra={"fields": {"method": method, "url": url, "body": _sniff_payload(body)}},
        )

        response = self._session.request(
            method,
            url,
            headers=request_headers,
            json=body,
            params=params,
            timeout=self._settings.timeout_seconds,
        )
        self._observe(method, url, response)

        if not response.ok:
            raise build_api_error(method, url, response)

        if response.status_code == 204 or not response.content:
            return {}
        return response.json()

    def put_absolute_bytes(self, url: str, content: bytes) -> requests.Response:
        """Uploads raw bytes to a pre-signed URL outside of the API."""
        response = self._session.put(
            url,
            data=content,
            timeout=self._settings.timeout_seconds,
        )
        self._observe("PUT", url, response)
        return response

    def _observe(self, method: str, url: str, response: requests.Response) -> None:
        logger.debug(
            "response %s %s [%s]",
            method,
            url,
            response.status_code,
            extra={"fields": {"code": response.status_code, "body": _sniff_response(response)}},
        )
        if self._callbacks.on_response is not None:
            self._callbacks.on_response(response.status_code, dict(response.headers))


def build_api_error(method: str, url: str, response: requests.Response) -> ApiHttpError:
    message = _error_message(response)
    return ApiHttpError(
        status_code=response.status_code,
        method=method,
        url=url,
        message=f"[{method}] {url}\n  [{response.status_code}] {message}",
    )


def _error_message(response: requests.Response) -> str:
    try:
        body = response.json()
    except ValueError:
        body = None

    if isinstance(body, dict):
        message = body.get("message")
        if isinstance(message, str) and message and message != "SUCCESS":
            return message

        data = body.get("data")
        if isinstance(data, dict):
            for key in ("statusMessage", "message", "Message", "ErrorMsg"):
                value = data.get(key)
                if isinstance(value, str) and value:
                    return value

    try:
        return HTTPStatus(response.status_code).phrase
    except ValueError:
        return "Unknown status code"


def _sniff_payload(body: Any) -> str:
    if body is None or not logger.isEnabledFor(logging.DEBUG):
        return ""
    return str(body)[:SNIFF_LIMIT]


def _sniff_response(response: requests.Response) -> str:
    if not logger.isEnabledFor(logging.DEBUG) or not response.content:
        return ""
    return response.text[:SNIFF_LIMIT]
