from __future__ import annotations

import os
import time
from typing import Any, Callable, Iterable, TypeVar

from lacework_client.apis.resource_api import ServiceApi
from lacework_client.auth import AuthManager
from lacework_client.config import ConfigurationError
from lacework_client.http import ApiHttpError, HttpClient
from lacework_client.logging_utils import get_logger


logger = get_logger("component_data")

T = TypeVar("T")

URL_TYPE_DEFAULT = "Default"
URL_TYPE_SAST_TABLES = "SastTables"
URL_TYPES = (URL_TYPE_DEFAULT, URL_TYPE_SAST_TABLES)

UPLOAD_METHOD_AWS_S3 = "AwsS3"
REQUEST_UPLOAD_PATH = "ComponentData/requestUpload"
COMPLETE_UPLOAD_PATH = "ComponentData/completeUpload"

FIRST_WAIT_SECONDS = 2
MAX_WAIT_SECONDS = 60


class UploadProtocolError(RuntimeError):
    pass


RETRYABLE_ERRORS = (OSError, ApiHttpError, UploadProtocolError)


def do_with_exponential_backoff(fn: Callable[[], T], wait: Callable[[int], Any] = time.sleep) -> T:
    """Calls ``fn`` once, then retries it after waiting 2, 4, 8, 16 and 32 seconds.

    Returns the first successful result. When every attempt fails the error
    from the last attempt is raised.
    """
    try:
        return fn()
    except RETRYABLE_ERRORS as error:
        last_error = error
    wait_seconds = FIRST_WAIT_SECONDS
    while wait_seconds < MAX_WAIT_SECONDS:
        logger.debug("retrying in %ss after error: %s", wait_seconds, last_error)
        wait(wait_seconds)
        try:
            return fn()
        except RETRYABLE_ERRORS as error:
            last_error = error
        wait_seconds *= 2
    raise last_error


def build_upload_request(name: str, tags: Iterable[str], paths: Iterable[str], url_type: str) -> dict[str, Any]:
    documents = [
        {"name": os.path.basename(path), "size": os.lstat(path).st_size}
        for path in paths
    ]
    return {
        "name": name,
        "tags": list(tags),
        "supportedMethods": [UPLOAD_METHOD_AWS_S3],
        "documents": documents,
        "urlType": url_type,
    }


class ComponentDataApi(ServiceApi):
    def __init__(
        self,
        http_client: HttpClient,
        auth_manager: AuthManager,
        wait: Callable[[int], Any] = time.sleep,
    ):
        super().__init__(http_client, auth_manager)
        self._wait = wait

    def upload_files(self, name: str, tags: Iterable[str], paths: list[str]) -> str:
        return self._do_upload(name, list(tags), paths, URL_TYPE_DEFAULT)

    def upload_sast_tables(self, name: str, paths: list[str]) -> str:
        return self._do_upload(name, ["sast"], paths, URL_TYPE_SAST_TABLES)

    def _do_upload(self, name: str, tags: list[str], paths: list[str], url_type: str) -> str:
        if url_type not in URL_TYPES:
            raise ConfigurationError(f"Invalid URL type: ({url_type})")

        initial_request = build_upload_request(name, tags, paths, url_type)
        initial = self._backoff(
            lambda: self._request("POST", REQUEST_UPLOAD_PATH, payload=initial_request)
        )
        data = initial.get("data") or {}
        upload_guid = str(data.get("guid") or "")
        logger.debug("requested upload %s for %d document(s)", upload_guid, len(paths))

        targets = None
        for method in data.get("uploadMethods") or []:
            if method.get("method") == UPLOAD_METHOD_AWS_S3:
                targets = method.get("info") or {}
        if targets is None:
            raise UploadProtocolError("couldn't find a supported upload method in the upload request response")

        for path in paths:
            self._backoff(lambda path=path: self._put_file(path, targets))

        completed = self._backoff(
            lambda: self._request(
                "POST",
                COMPLETE_UPLOAD_PATH,
                payload={"uploadGuid": upload_guid, "urlType": url_type},
            )
        )
        completed_guid = str((completed.get("data") or {}).get("guid") or "")
        if completed_guid != upload_guid:
            raise UploadProtocolError("expected the initial GUID and the one returned on completion to match")
        return upload_guid

    def _put_file(self, path: str, targets: dict[str, str]) -> None:
        with open(path, "rb") as handle:
            contents = handle.read()
        target = targets.get(os.path.basename(path))
        if not target:
            raise UploadProtocolError(f"no upload URL for {os.path.basename(path)}")
        response = self._http_client.put_absolute_bytes(target, contents)
        if response.status_code != 200:
            status = f"{response.status_code} {response.reason or ''}".strip()
            raise UploadProtocolError(f"Upload to S3 failed ({status}): {response.text}")

    def _backoff(self, fn: Callable[[], T]) -> T:
        return do_with_exponential_backoff(fn, self._wait)
