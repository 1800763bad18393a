from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lacework_client.apis.resource_api import ResourceApi, ResourceDescriptor
from lacework_client.config import ConfigurationError


@dataclass(frozen=True)
class AgentAccessToken:
    access_token: str = ""
    token_alias: str = ""
    enabled: int = 1
    description: str = ""
    version: str = ""
    created_time: str = ""

    @property
    def guid(self) -> str:
        return self.access_token

    def state(self) -> bool:
        return self.enabled == 1

    def pretty_state(self) -> str:
        return "Enabled" if self.state() else "Disabled"

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "AgentAccessToken":
        props = raw.get("props") or {}
        return AgentAccessToken(
            access_token=str(raw.get("accessToken") or ""),
            token_alias=str(raw.get("tokenAlias") or ""),
            enabled=int(raw.get("tokenEnabled") or 0),
            description=str(props.get("description") or ""),
            version=str(raw.get("version") or ""),
            created_time=str(raw.get("createdTime") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"tokenEnabled": self.enabled}
        if self.token_alias:
            body["tokenAlias"] = self.token_alias
        if self.description:
            body["props"] = {"description": self.description}
        return body


class AgentAccessTokensApi(ResourceApi):
    descriptor = ResourceDescriptor(path="AgentAccessTokens", guid_field="accessToken", model=AgentAccessToken)

    def create_token(self, alias: str, description: str = "") -> AgentAccessToken:
        if not alias:
            raise ConfigurationError("token alias is required")
        return self.create(AgentAccessToken(token_alias=alias, enabled=1, description=description))

    def update_state(self, token: str, enable: bool) -> AgentAccessToken:
        """Enables or disables a token without touching its alias or props."""
        return self.update(token, {"tokenEnabled": 1 if enable else 0})

    def search_alias(self, alias: str) -> list[AgentAccessToken]:
        if not alias:
            raise ConfigurationError("specify a token alias to search")
        response = self._request(
            "POST",
            f"{self.descriptor.path}/search",
            payload={"filters": [{"field": "tokenAlias", "expression": "eq", "value": alias}]},
        )
        return self._decode_many(response)
