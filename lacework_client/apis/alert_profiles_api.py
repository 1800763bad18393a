from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from lacework_client.apis.resource_api import ResourceApi, ResourceDescriptor


@dataclass(frozen=True)
class AlertProfileAlert:
    name: str
    event_name: str = ""
    description: str = ""
    subject: str = ""

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "AlertProfileAlert":
        return AlertProfileAlert(
            name=str(raw.get("name") or ""),
            event_name=str(raw.get("eventName") or ""),
            description=str(raw.get("description") or ""),
            subject=str(raw.get("subject") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "eventName": self.event_name,
            "description": self.description,
            "subject": self.subject,
        }


@dataclass(frozen=True)
class AlertProfile:
    guid: str
    extends: str = ""
    alerts: list[AlertProfileAlert] = field(default_factory=list)
    fields: list[str] = field(default_factory=list)
    description_keys: list[dict[str, str]] = field(default_factory=list)

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "AlertProfile":
        return AlertProfile(
            guid=str(raw.get("alertProfileId") or ""),
            extends=str(raw.get("extends") or ""),
            alerts=[AlertProfileAlert.from_dict(item) for item in raw.get("alerts") or []],
            fields=[str(item.get("name", "")) for item in raw.get("fields") or []],
            description_keys=list(raw.get("descriptionKeys") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "alertProfileId": self.guid,
            "extends": self.extends,
            "alerts": [alert.to_dict() for alert in self.alerts],
        }


def new_alert_profile(guid: str, extends: str, alerts: list[AlertProfileAlert]) -> AlertProfile:
    return AlertProfile(guid=guid, extends=extends, alerts=list(alerts))


class AlertProfilesApi(ResourceApi):
    descriptor = ResourceDescriptor(path="AlertProfiles", guid_field="alertProfileId", model=AlertProfile)

    def update_alerts(self, guid: str, alerts: list[AlertProfileAlert]) -> AlertProfile:
        """Only the alert templates of an existing profile can be changed."""
        return self.update(guid, {"alerts": [alert.to_dict() for alert in alerts]})
