from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, Mapping

from lacework_client.auth import AuthManager
from lacework_client.config import ConfigurationError
from lacework_client.http import HttpClient
from lacework_client.models import (
    COMMON_KEYS,
    RawResource,
    Record,
    ResourceCommon,
    TypedResource,
    UnknownResource,
    to_json_dict,
)


@dataclass(frozen=True)
class ResourceFamily:
    """Decodes one family of polymorphic resources into a closed union.

    Known discriminators become ``TypedResource`` (with a payload dataclass
    when one is registered, otherwise the raw payload dict). Anything else
    becomes ``UnknownResource``.
    """

    type_enum: type[Enum]
    guid_field: str = "intgGuid"
    name_field: str = "name"
    type_field: str = "type"
    data_field: str | None = "data"
    payload_types: Mapping[Enum, type] = field(default_factory=dict)
    discriminator: Callable[[dict[str, Any]], str] | None = None
    read_only_fields: tuple[str, ...] = ()
    normalize: Callable[[dict[str, Any]], dict[str, Any]] | None = None

    def type_name_of(self, raw: dict[str, Any]) -> str:
        if self.discriminator is not None:
            return self.discriminator(raw)
        return str(raw.get(self.type_field) or "")

    def find_type(self, type_name: str) -> Enum | None:
        try:
            return self.type_enum(type_name)
        except ValueError:
            return None

    def decode(self, raw: dict[str, Any]) -> TypedResource | UnknownResource:
        raw = self._normalized(raw)
        kind = self.find_type(self.type_name_of(raw))
        if kind is None:
            return UnknownResource(
                common=self._common_of(raw),
                type_name=self.type_name_of(raw),
                raw=raw,
            )
        return self.decode_as(raw, kind)

    def decode_as(self, raw: dict[str, Any], kind: Enum) -> TypedResource:
        raw = self._normalized(raw)
        payload_raw = self._payload_of(raw)
        payload_type = self.payload_types.get(kind)
        payload = payload_type.from_dict(payload_raw) if payload_type else payload_raw
        return TypedResource(
            common=self._common_of(raw),
            kind=kind,
            payload=payload,
        )

    def encode(self, resource: Any) -> Any:
        if isinstance(resource, (RawResource, TypedResource)):
            data = resource.data if isinstance(resource, RawResource) else resource.payload
            body = resource.common.to_dict(
                self.guid_field,
                name_field=self.name_field,
                type_field=self.type_field,
            )
            encoded = to_json_dict(data)
            if self.data_field is None:
                if isinstance(encoded, dict):
                    body.update(encoded)
            elif encoded is not None:
                body[self.data_field] = encoded
            return self._strip_read_only(body)
        if isinstance(resource, UnknownResource):
            body = dict(resource.raw)
            body.pop(self.guid_field, None)
            return self._strip_read_only(body)
        return to_json_dict(resource)

    def _payload_of(self, raw: dict[str, Any]) -> dict[str, Any]:
        if self.data_field is None:
            return {
                key: value
                for key, value in raw.items()
                if key not in COMMON_KEYS
                and key not in (self.guid_field, self.name_field, self.type_field)
            }
        payload = raw.get(self.data_field)
        return payload if isinstance(payload, dict) else {}

    def _normalized(self, raw: dict[str, Any]) -> dict[str, Any]:
        if self.normalize is None:
            return raw
        return self.normalize(raw)

    def _common_of(self, raw: dict[str, Any]) -> ResourceCommon:
        return ResourceCommon.from_dict(raw, self.guid_field, self.name_field, self.type_field)

    def _strip_read_only(self, body: dict[str, Any]) -> dict[str, Any]:
        for key in self.read_only_fields:
            body.pop(key, None)
        return body


@dataclass(frozen=True)
class ResourceDescriptor:
    """Everything the generic CRUD verbs need to know about one endpoint."""

    path: str
    version: str = "v2"
    guid_field: str = "guid"
    family: ResourceFamily | None = None
    model: type | None = None

    def decode(self, raw: Any) -> Any:
        if not isinstance(raw, dict):
            return raw
        if self.family is not None:
            return self.family.decode(raw)
        if self.model is not None:
            return self.model.from_dict(raw)
        return Record(guid=str(raw.get(self.guid_field) or ""), raw=raw)

    def encode(self, payload: Any) -> Any:
        if self.family is not None:
            return self.family.encode(payload)
        if isinstance(payload, Record):
            body = payload.to_dict()
            body.pop(self.guid_field, None)
            return body
        return to_json_dict(payload)


class ServiceApi:
    """Authenticated calls against one API version, with no CRUD verbs."""

    version = "v2"

    def __init__(self, http_client: HttpClient, auth_manager: AuthManager):
        self._http_client = http_client
        self._auth_manager = auth_manager

    def _request(self, method: str, path: str, payload: Any = None, params: dict[str, Any] | None = None) -> Any:
        token = self._auth_manager.acquire_access_token()
        return self._http_client.request(
            method,
            path,
            token=token,
            payload=payload,
            params=params,
            version=self.version,
        )


class ResourceApi(ServiceApi):
    """Generic list/get/create/update/delete against one endpoint."""

    descriptor: ResourceDescriptor

    @property
    def version(self) -> str:  # type: ignore[override]
        return self.descriptor.version

    def list(self) -> list[Any]:
        response = self._request("GET", self.descriptor.path)
        return self._decode_many(response)

    def get(self, guid: str) -> Any:
        return self.descriptor.decode(self._get_raw(guid))

    def create(self, payload: Any) -> Any:
        response = self._request("POST", self.descriptor.path, payload=self.descriptor.encode(payload))
        return self.descriptor.decode(_single(response))

    def update(self, guid: str, payload: Any) -> Any:
        response = self._request(
            "PATCH",
            self._item_path(guid),
            payload=self.descriptor.encode(payload),
        )
        return self.descriptor.decode(_single(response))

    def delete(self, guid: str) -> None:
        self._request("DELETE", self._item_path(guid))

    def _get_raw(self, guid: str) -> Any:
        return _single(self._request("GET", self._item_path(guid)))

    def _get_typed(self, guid: str, kind: Enum) -> TypedResource:
        return self.descriptor.family.decode_as(self._get_raw(guid), kind)

    def _update_typed(self, resource: TypedResource | RawResource, kind: Enum) -> TypedResource:
        response = self._request(
            "PATCH",
            self._item_path(resource.guid),
            payload=self.descriptor.encode(resource),
        )
        return self.descriptor.family.decode_as(_single(response), kind)

    def _item_path(self, guid: str) -> str:
        if not guid:
            raise ConfigurationError(f"specify a guid ({self.descriptor.guid_field})")
        return f"{self.descriptor.path}/{guid}"

    def _decode_many(self, response: Any) -> list[Any]:
        items = response.get("data") if isinstance(response, dict) else response
        if items is None:
            return []
        if not isinstance(items, list):
            items = [items]
        return [self.descriptor.decode(item) for item in items]


def _single(response: Any) -> Any:
    data = response.get("data") if isinstance(response, dict) else response
    if isinstance(data, list):
        return data[0] if data else {}
    return data if data is not None else {}
