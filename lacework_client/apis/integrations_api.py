from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from lacework_client.apis.resource_api import ResourceApi, ResourceDescriptor
from lacework_client.models import V1Response


class IntegrationType(str, Enum):
    AWS_CFG = "AWS_CFG"
    AWS_CT_SQS = "AWS_CT_SQS"
    GCP_CFG = "GCP_CFG"
    GCP_AT_SES = "GCP_AT_SES"
    AZURE_CFG = "AZURE_CFG"
    AZURE_AL_SEQ = "AZURE_AL_SEQ"
    AWS_S3 = "AWS_S3"
    CLOUDWATCH_EB = "CLOUDWATCH_EB"
    DATADOG = "DATADOG"
    SLACK_CHANNEL = "SLACK_CHANNEL"
    WEBHOOK = "WEBHOOK"


@dataclass(frozen=True)
class V1Integration:
    """Integration record in the legacy upper-case envelope."""

    name: str
    type: str
    enabled: int = 1
    guid: str = ""
    is_org: int = 0
    type_name: str = ""
    state: dict[str, Any] = field(default_factory=dict)
    data: dict[str, Any] = field(default_factory=dict)
    created_or_updated_time: str = ""
    created_or_updated_by: str = ""

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "V1Integration":
        return V1Integration(
            name=str(raw.get("NAME") or ""),
            type=str(raw.get("TYPE") or ""),
            enabled=int(raw.get("ENABLED", 1) or 0),
            guid=str(raw.get("INTG_GUID") or ""),
            is_org=int(raw.get("IS_ORG", 0) or 0),
            type_name=str(raw.get("TYPE_NAME") or ""),
            state=dict(raw.get("STATE") or {}),
            data=dict(raw.get("DATA") or {}),
            created_or_updated_time=str(raw.get("CREATED_OR_UPDATED_TIME") or ""),
            created_or_updated_by=str(raw.get("CREATED_OR_UPDATED_BY") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "NAME": self.name,
            "TYPE": self.type,
            "ENABLED": self.enabled,
        }
        if self.is_org:
            body["IS_ORG"] = self.is_org
        if self.data:
            body["DATA"] = self.data
        return body

    def status(self) -> str:
        return "Enabled" if self.enabled == 1 else "Disabled"

    def state_string(self) -> str:
        return "Ok" if self.state.get("ok") else "Pending"


def new_v1_integration(name: str, kind: IntegrationType | str, data: dict[str, Any]) -> V1Integration:
    kind = kind.value if isinstance(kind, IntegrationType) else str(kind)
    return V1Integration(name=name, type=kind, enabled=1, data=dict(data))


class IntegrationsApi(ResourceApi):
    """Legacy v1 integrations; every response is a ``{data, ok, message}`` envelope."""

    descriptor = ResourceDescriptor(
        path="external/integrations",
        version="v1",
        guid_field="INTG_GUID",
        model=V1Integration,
    )

    def list(self) -> V1Response:  # type: ignore[override]
        return self._envelope(self._request("GET", self.descriptor.path))

    def list_by_type(self, kind: IntegrationType | str) -> V1Response:
        kind = kind.value if isinstance(kind, IntegrationType) else str(kind)
        return self._envelope(self._request("GET", f"{self.descriptor.path}/type/{kind}"))

    def get(self, guid: str) -> V1Response:
        return self._envelope(self._request("GET", self._item_path(guid)))

    def create(self, payload: Any) -> V1Response:
        return self._envelope(
            self._request("POST", self.descriptor.path, payload=self.descriptor.encode(payload))
        )

    def update(self, guid: str, payload: Any) -> V1Response:
        return self._envelope(
            self._request("PATCH", self._item_path(guid), payload=self.descriptor.encode(payload))
        )

    def delete(self, guid: str) -> V1Response:  # type: ignore[override]
        return self._envelope(self._request("DELETE", self._item_path(guid)))

    def get_schema(self, kind: IntegrationType | str) -> dict[str, Any]:
        kind = kind.value if isinstance(kind, IntegrationType) else str(kind)
        return self._request("GET", f"{self.descriptor.path}/schema/{kind}")

    def _envelope(self, response: Any) -> V1Response:
        if not isinstance(response, dict):
            return V1Response()
        items = response.get("data") or []
        if not isinstance(items, list):
            items = [items]
        return V1Response(
            data=[self.descriptor.decode(item) for item in items],
            ok=bool(response.get("ok", False)),
            message=str(response.get("message") or ""),
        )
