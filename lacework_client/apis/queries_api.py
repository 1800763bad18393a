from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any

from lacework_client.apis.resource_api import ResourceApi, ResourceDescriptor
from lacework_client.config import ConfigurationError


START_TIME_RANGE = "StartTimeRange"
END_TIME_RANGE = "EndTimeRange"
TIME_ARGUMENT_FORMAT = "%Y-%m-%dT%H:%M:%S.%fZ"


@dataclass(frozen=True)
class Query:
    query_id: str
    query_text: str = ""
    query_language: str = ""
    evaluator_id: str = ""
    owner: str = ""
    last_update_time: str = ""
    last_update_user: str = ""
    result_schema: list[dict[str, Any]] | None = None

    @property
    def guid(self) -> str:
        return self.query_id

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "Query":
        return Query(
            query_id=str(raw.get("queryId") or ""),
            query_text=str(raw.get("queryText") or ""),
            query_language=str(raw.get("queryLanguage") or ""),
            evaluator_id=str(raw.get("evaluatorId") or ""),
            owner=str(raw.get("owner") or ""),
            last_update_time=str(raw.get("lastUpdateTime") or ""),
            last_update_user=str(raw.get("lastUpdateUser") or ""),
            result_schema=raw.get("resultSchema"),
        )

    def to_dict(self) -> dict[str, Any]:
        body = {"queryId": self.query_id, "queryText": self.query_text}
        if self.query_language:
            body["queryLanguage"] = self.query_language
        if self.evaluator_id:
            body["evaluatorId"] = self.evaluator_id
        return body


def new_query(query_id: str, query_text: str, query_language: str = "", evaluator_id: str = "") -> Query:
    return Query(
        query_id=query_id,
        query_text=query_text,
        query_language=query_language,
        evaluator_id=evaluator_id,
    )


def validate_query_arguments(arguments: dict[str, str]) -> None:
    """Checks the time range arguments before a query is sent for execution.

    Both bounds must be UTC timestamps like ``2021-07-12T00:00:00.000Z`` and
    the start must come before the end.
    """
    bounds = {}
    for name in (START_TIME_RANGE, END_TIME_RANGE):
        if name not in arguments:
            continue
        try:
            bounds[name] = datetime.strptime(arguments[name], TIME_ARGUMENT_FORMAT)
        except ValueError as error:
            raise ConfigurationError(f"invalid {name} argument: {error}") from error

    start = bounds.get(START_TIME_RANGE)
    end = bounds.get(END_TIME_RANGE)
    if start is not None and end is not None and start >= end:
        raise ConfigurationError("date range should have a start time before the end time")


def _arguments_body(arguments: dict[str, str]) -> list[dict[str, str]]:
    return [{"name": name, "value": value} for name, value in arguments.items()]


class QueriesApi(ResourceApi):
    descriptor = ResourceDescriptor(path="Queries", guid_field="queryId", model=Query)

    def update_query(self, query: Query) -> Query:
        """Replaces the text of an existing query."""
        return self.update(query.query_id, {"queryText": query.query_text})

    def validate(self, query_text: str, evaluator_id: str = "") -> Any:
        body = {"queryText": query_text}
        if evaluator_id:
            body["evaluatorId"] = evaluator_id
        return self._request("POST", f"{self.descriptor.path}/validate", payload=body)

    def execute(
        self,
        query_text: str,
        arguments: dict[str, str] | None = None,
        evaluator_id: str = "",
        limit: int | None = None,
    ) -> list[dict[str, Any]]:
        """Runs an ad-hoc query and returns its result rows."""
        arguments = arguments or {}
        validate_query_arguments(arguments)
        if limit is not None and limit < 1:
            raise ConfigurationError("limit must be at least 1")

        query: dict[str, Any] = {"queryText": query_text}
        if evaluator_id:
            query["evaluatorId"] = evaluator_id
        body: dict[str, Any] = {"query": query, "arguments": _arguments_body(arguments)}
        if limit is not None:
            body["options"] = {"limit": limit}

        response = self._request("POST", f"{self.descriptor.path}/execute", payload=body)
        return _rows(response)

    def execute_by_id(self, query_id: str, arguments: dict[str, str] | None = None) -> list[dict[str, Any]]:
        arguments = arguments or {}
        validate_query_arguments(arguments)
        response = self._request(
            "POST",
            f"{self._item_path(query_id)}/execute",
            payload={"arguments": _arguments_body(arguments)},
        )
        return _rows(response)


def _rows(response: Any) -> list[dict[str, Any]]:
    data = response.get("data") if isinstance(response, dict) else response
    return data if isinstance(data, list) else []
