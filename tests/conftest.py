"""Shared fixtures: a scripted stand-in for ``requests.Session``."""

from __future__ import annotations

from collections import defaultdict, deque
from dataclasses import dataclass, field
from http import HTTPStatus
import json
from typing import Any
from urllib.parse import urlsplit

import pytest
import requests
from requests.structures import CaseInsensitiveDict

from lacework_client.client import Client, with_api_v2, with_token, with_url


BASE_URL = "http://lacework.test"


def make_response(status: int = 200, body: Any = None, url: str = "", headers: dict[str, str] | None = None) -> requests.Response:
    response = requests.Response()
    response.status_code = status
    response.url = url
    response.encoding = "utf-8"
    if isinstance(body, (bytes, str)):
        response._content = body.encode() if isinstance(body, str) else body
    elif body is None:
        response._content = b""
    else:
        response._content = json.dumps(body).encode()
    response.headers = CaseInsensitiveDict(headers or {"Content-Type": "application/json"})
    try:
        response.reason = HTTPStatus(status).phrase
    except ValueError:
        response.reason = ""
    return response


@dataclass
class Call:
    method: str
    url: str
    path: str
    headers: dict[str, str] = field(default_factory=dict)
    json: Any = None
    data: Any = None
    params: Any = None


class FakeSession:
    """Answers requests from scripted responses keyed by method and URL path.

    Queued responses are consumed in order; the last one keeps answering.
    Every request is recorded in ``calls``.
    """

    def __init__(self):
        self.headers: dict[str, str] = {}
        self.calls: list[Call] = []
        self._routes: dict[tuple[str, str], deque] = defaultdict(deque)

    def add(self, method: str, path: str, status: int = 200, body: Any = None, headers: dict[str, str] | None = None):
        self._routes[(method.upper(), path)].append((status, body, headers))
        return self

    def add_error(self, method: str, path: str, error: Exception):
        self._routes[(method.upper(), path)].append(error)
        return self

    def request(self, method, url, headers=None, json=None, params=None, timeout=None, data=None):
        return self._answer(method, url, headers=headers, json=json, params=params, data=data)

    def put(self, url, data=None, timeout=None):
        return self._answer("PUT", url, data=data)

    def calls_to(self, method: str, path: str) -> list[Call]:
        return [call for call in self.calls if call.method == method.upper() and call.path == path]

    def _answer(self, method, url, headers=None, json=None, params=None, data=None):
        path = urlsplit(url).path
        self.calls.append(
            Call(
                method=method.upper(),
                url=url,
                path=path,
                headers=dict(headers or {}),
                json=json,
                data=data,
                params=params,
            )
        )
        queue = self._routes.get((method.upper(), path))
        if not queue:
            raise AssertionError(f"unexpected request {method} {url}")
        answer = queue[0] if len(queue) == 1 else queue.popleft()
        if isinstance(answer, Exception):
            raise answer
        status, body, response_headers = answer
        return make_response(status, body, url=url, headers=response_headers)


@pytest.fixture
def session() -> FakeSession:
    return FakeSession()


@pytest.fixture
def client(session: FakeSession) -> Client:
    return Client("test", with_url(BASE_URL), with_token("TOKEN"), with_api_v2(), session=session)
