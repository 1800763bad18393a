from __future__ import annotations

from dataclasses import dataclass, field
from enum import IntEnum
from typing import Any, Iterable

from lacework_client.apis.resource_api import ResourceApi, ResourceDescriptor


ALERT_RULE_EVENT_TYPE = "Event"
ALERT_RULE_SOURCES = ("Agent", "Aws", "Azure", "Gcp", "K8s")
ALERT_RULE_CATEGORIES = ("Anomaly", "Policy", "Composite")


class AlertRuleSeverity(IntEnum):
    UNKNOWN = 0
    CRITICAL = 1
    HIGH = 2
    MEDIUM = 3
    LOW = 4
    INFO = 5

    @classmethod
    def from_name(cls, name: str) -> "AlertRuleSeverity":
        try:
            return cls[name.strip().upper()]
        except KeyError:
            return cls.UNKNOWN

    @classmethod
    def from_value(cls, value: int) -> "AlertRuleSeverity":
        try:
            return cls(int(value))
        except ValueError:
            return cls.UNKNOWN

    def label(self) -> str:
        return self.name.capitalize()


def severities_from_names(names: Iterable[str]) -> list[AlertRuleSeverity]:
    """Converts ``["critical", "High"]`` style input, dropping unknown names."""
    result = [AlertRuleSeverity.from_name(name) for name in names]
    return [severity for severity in result if severity is not AlertRuleSeverity.UNKNOWN]


def severities_from_ints(values: Iterable[int]) -> list[AlertRuleSeverity]:
    result = [AlertRuleSeverity.from_value(value) for value in values]
    return [severity for severity in result if severity is not AlertRuleSeverity.UNKNOWN]


def severity_labels(severities: Iterable[AlertRuleSeverity]) -> list[str]:
    return [AlertRuleSeverity(severity).label() for severity in severities]


@dataclass(frozen=True)
class AlertRuleFilter:
    name: str
    enabled: int = 1
    description: str = ""
    severity: list[int] = field(default_factory=list)
    resource_groups: list[str] = field(default_factory=list)
    event_categories: list[str] = field(default_factory=list)
    sources: list[str] = field(default_factory=list)
    alert_categories: list[str] = field(default_factory=list)
    created_or_updated_time: str = ""
    created_or_updated_by: str = ""

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "AlertRuleFilter":
        return AlertRuleFilter(
            name=str(raw.get("name") or ""),
            enabled=int(raw.get("enabled", 1) or 0),
            description=str(raw.get("description") or ""),
            severity=[int(value) for value in raw.get("severity") or []],
            resource_groups=list(raw.get("resourceGroups") or []),
            event_categories=list(raw.get("eventCategory") or []),
            sources=list(raw.get("sources") or []),
            alert_categories=list(raw.get("category") or []),
            created_or_updated_time=str(raw.get("createdOrUpdatedTime") or ""),
            created_or_updated_by=str(raw.get("createdOrUpdatedBy") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "name": self.name,
            "enabled": self.enabled,
            "severity": list(self.severity),
        }
        optional = {
            "description": self.description,
            "resourceGroups": self.resource_groups,
            "eventCategory": self.event_categories,
            "sources": self.sources,
            "category": self.alert_categories,
        }
        body.update({key: value for key, value in optional.items() if value})
        return body

    def status(self) -> str:
        return "Enabled" if self.enabled == 1 else "Disabled"


@dataclass(frozen=True)
class AlertRule:
    filter: AlertRuleFilter
    channels: list[str] = field(default_factory=list)
    type: str = ALERT_RULE_EVENT_TYPE
    guid: str = ""

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "AlertRule":
        return AlertRule(
            filter=AlertRuleFilter.from_dict(raw.get("filters") or {}),
            channels=list(raw.get("intgGuidList") or []),
            type=str(raw.get("type") or ALERT_RULE_EVENT_TYPE),
            guid=str(raw.get("mcGuid") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "type": self.type,
            "intgGuidList": list(self.channels),
            "filters": self.filter.to_dict(),
        }
        if self.guid:
            body["mcGuid"] = self.guid
        return body

    def severities(self) -> list[AlertRuleSeverity]:
        return severities_from_ints(self.filter.severity)


def new_alert_rule(
    name: str,
    channels: Iterable[str] = (),
    severities: Iterable[AlertRuleSeverity] = (),
    description: str = "",
    resource_groups: Iterable[str] = (),
    event_categories: Iterable[str] = (),
    sources: Iterable[str] = (),
    alert_categories: Iterable[str] = (),
) -> AlertRule:
    """Builds an enabled event alert rule ready to be passed to ``create``."""
    return AlertRule(
        channels=list(channels),
        filter=AlertRuleFilter(
            name=name,
            enabled=1,
            description=description,
            severity=[int(severity) for severity in severities],
            resource_groups=list(resource_groups),
            event_categories=list(event_categories),
            sources=list(sources),
            alert_categories=list(alert_categories),
        ),
    )


class AlertRulesApi(ResourceApi):
    descriptor = ResourceDescriptor(path="AlertRules", guid_field="mcGuid", model=AlertRule)

    def update_rule(self, rule: AlertRule) -> AlertRule:
        return self.update(rule.guid, rule)
