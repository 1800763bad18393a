from __future__ import annotations

from dataclasses import dataclass, field, is_dataclass, asdict
from datetime import datetime, timezone
from enum import Enum
from typing import Any, Generic, TypeVar


P = TypeVar("P")


def to_json_dict(value: Any) -> Any:
    """Converts payload objects into JSON-ready structures."""
    to_dict = getattr(value, "to_dict", None)
    if callable(to_dict):
        return to_dict()
    if is_dataclass(value) and not isinstance(value, type):
        return {key: to_json_dict(item) for key, item in asdict(value).items()}
    if isinstance(value, Enum):
        return value.value
    if isinstance(value, dict):
        return {key: to_json_dict(item) for key, item in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_json_dict(item) for item in value]
    return value


def epoch_millis_to_datetime(value: Any) -> datetime | None:
    if value in (None, "", 0):
        return None
    return datetime.fromtimestamp(int(value) / 1000, tz=timezone.utc)


def datetime_to_epoch_millis(value: datetime | None) -> int | None:
    if value is None:
        return None
    return int(value.timestamp() * 1000)


@dataclass(frozen=True)
class AuthState:
    account: str
    has_keys: bool
    has_token: bool
    token_expired: bool


@dataclass(frozen=True)
class TokenData:
    token: str
    expires_at: str = ""


@dataclass(frozen=True)
class TokenResponse:
    data: tuple[TokenData, ...] = ()
    ok: bool = False
    message: str = ""

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "TokenResponse":
        entries = raw.get("data") or []
        if isinstance(entries, dict):
            entries = [entries]
        return TokenResponse(
            data=tuple(
                TokenData(
                    token=str(entry.get("token", "")),
                    expires_at=str(entry.get("expiresAt", "")),
                )
                for entry in entries
                if isinstance(entry, dict)
            ),
            ok=bool(raw.get("ok", False)),
            message=str(raw.get("message", "")),
        )

    @property
    def token(self) -> str:
        if self.data:
            return self.data[0].token
        return ""


@dataclass(frozen=True)
class IntegrationState:
    ok: bool = False
    details: dict[str, Any] = field(default_factory=dict)
    last_updated_time: datetime | None = None
    last_successful_time: datetime | None = None

    @staticmethod
    def from_dict(raw: dict[str, Any] | None) -> "IntegrationState | None":
        if not isinstance(raw, dict):
            return None
        return IntegrationState(
            ok=bool(raw.get("ok", False)),
            details=dict(raw.get("details") or {}),
            last_updated_time=epoch_millis_to_datetime(raw.get("lastUpdatedTime")),
            last_successful_time=epoch_millis_to_datetime(raw.get("lastSuccessfulTime")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "ok": self.ok,
            "details": self.details,
            "lastUpdatedTime": datetime_to_epoch_millis(self.last_updated_time),
            "lastSuccessfulTime": datetime_to_epoch_millis(self.last_successful_time),
        }


COMMON_KEYS = (
    "name",
    "type",
    "enabled",
    "isOrg",
    "state",
    "createdOrUpdatedTime",
    "createdOrUpdatedBy",
)


@dataclass(frozen=True)
class ResourceCommon:
    """Envelope fields shared by every resource representation."""

    guid: str = ""
    name: str = ""
    type: str = ""
    enabled: int = 1
    is_org: int = 0
    state: IntegrationState | None = None
    created_or_updated_time: str = ""
    created_or_updated_by: str = ""

    @staticmethod
    def from_dict(
        raw: dict[str, Any],
        guid_field: str = "intgGuid",
        name_field: str = "name",
        type_field: str = "type",
    ) -> "ResourceCommon":
        return ResourceCommon(
            guid=str(raw.get(guid_field) or ""),
            name=str(raw.get(name_field) or ""),
            type=str(raw.get(type_field) or ""),
            enabled=int(raw.get("enabled", 1) or 0),
            is_org=int(raw.get("isOrg", 0) or 0),
            state=IntegrationState.from_dict(raw.get("state")),
            created_or_updated_time=str(raw.get("createdOrUpdatedTime") or ""),
            created_or_updated_by=str(raw.get("createdOrUpdatedBy") or ""),
        )

    def to_dict(
        self,
        guid_field: str = "intgGuid",
        include_guid: bool = False,
        name_field: str = "name",
        type_field: str = "type",
    ) -> dict[str, Any]:
        result: dict[str, Any] = {
            name_field: self.name,
            type_field: self.type,
            "enabled": self.enabled,
        }
        if include_guid and self.guid:
            result[guid_field] = self.guid
        if self.is_org:
            result["isOrg"] = self.is_org
        return result

    def status(self) -> str:
        if self.enabled == 1:
            return "Enabled"
        return "Disabled"

    def state_string(self) -> str:
        if self.state is not None and self.state.ok:
            return "Ok"
        return "Pending"


class _ResourceAccessors:
    common: ResourceCommon

    @property
    def guid(self) -> str:
        return self.common.guid

    @property
    def name(self) -> str:
        return self.common.name

    def status(self) -> str:
        return self.common.status()

    def state_string(self) -> str:
        return self.common.state_string()


@dataclass(frozen=True)
class TypedResource(_ResourceAccessors, Generic[P]):
    """A resource whose discriminator matched a known member of its family."""

    common: ResourceCommon
    kind: Enum
    payload: P


@dataclass(frozen=True)
class UnknownResource(_ResourceAccessors):
    """A resource whose discriminator is not known to this client.

    ``raw`` keeps the undecoded object so nothing the server sent is lost.
    """

    common: ResourceCommon
    type_name: str
    raw: dict[str, Any]


@dataclass(frozen=True)
class RawResource(_ResourceAccessors):
    """Write-side representation: envelope plus an untyped payload."""

    common: ResourceCommon
    data: Any = None

    @property
    def type(self) -> str:
        return self.common.type


@dataclass(frozen=True)
class Record:
    """A non-polymorphic resource kept as its raw JSON object."""

    guid: str
    raw: dict[str, Any]

    def get(self, key: str, default: Any = None) -> Any:
        return self.raw.get(key, default)

    def to_dict(self) -> dict[str, Any]:
        return dict(self.raw)


@dataclass(frozen=True)
class V1Response:
    data: list[Any] = field(default_factory=list)
    ok: bool = False
    message: str = ""
