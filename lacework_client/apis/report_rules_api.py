from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Iterable

from lacework_client.apis.alert_rules_api import AlertRuleSeverity, severities_from_ints
from lacework_client.apis.resource_api import ResourceApi, ResourceDescriptor


REPORT_RULE_EVENT_TYPE = "Report"


@dataclass(frozen=True)
class ReportRuleFilter:
    name: str
    enabled: int = 1
    description: str = ""
    severity: list[int] = field(default_factory=list)
    resource_groups: list[str] = field(default_factory=list)
    created_or_updated_time: str = ""
    created_or_updated_by: str = ""

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "ReportRuleFilter":
        return ReportRuleFilter(
            name=str(raw.get("name") or ""),
            enabled=int(raw.get("enabled", 1) or 0),
            description=str(raw.get("description") or ""),
            severity=[int(value) for value in raw.get("severity") or []],
            resource_groups=list(raw.get("resourceGroups") or []),
            created_or_updated_time=str(raw.get("createdOrUpdatedTime") or ""),
            created_or_updated_by=str(raw.get("createdOrUpdatedBy") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "name": self.name,
            "enabled": self.enabled,
            "severity": list(self.severity),
        }
        if self.description:
            body["description"] = self.description
        if self.resource_groups:
            body["resourceGroups"] = list(self.resource_groups)
        return body


@dataclass(frozen=True)
class ReportRule:
    """A scheduled report delivered to email alert channels.

    ``notification_types`` maps report names such as ``agentEvents`` or
    ``awsCisS3`` to whether the report is sent.
    """

    filter: ReportRuleFilter
    email_alert_channels: list[str] = field(default_factory=list)
    notification_types: dict[str, bool] = field(default_factory=dict)
    type: str = REPORT_RULE_EVENT_TYPE
    guid: str = ""

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "ReportRule":
        return ReportRule(
            filter=ReportRuleFilter.from_dict(raw.get("filters") or {}),
            email_alert_channels=list(raw.get("intgGuidList") or []),
            notification_types={
                key: bool(value) for key, value in (raw.get("reportNotificationTypes") or {}).items()
            },
            type=str(raw.get("type") or REPORT_RULE_EVENT_TYPE),
            guid=str(raw.get("mcGuid") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "type": self.type,
            "intgGuidList": list(self.email_alert_channels),
            "filters": self.filter.to_dict(),
            "reportNotificationTypes": dict(self.notification_types),
        }
        if self.guid:
            body["mcGuid"] = self.guid
        return body

    def severities(self) -> list[AlertRuleSeverity]:
        return severities_from_ints(self.filter.severity)


def new_report_rule(
    name: str,
    email_alert_channels: Iterable[str],
    notification_types: dict[str, bool],
    severities: Iterable[AlertRuleSeverity] = (),
    description: str = "",
    resource_groups: Iterable[str] = (),
) -> ReportRule:
    return ReportRule(
        filter=ReportRuleFilter(
            name=name,
            enabled=1,
            description=description,
            severity=[int(severity) for severity in severities],
            resource_groups=list(resource_groups),
        ),
        email_alert_channels=list(email_alert_channels),
        notification_types=dict(notification_types),
    )


class ReportRulesApi(ResourceApi):
    descriptor = ResourceDescriptor(path="ReportRules", guid_field="mcGuid", model=ReportRule)

    def update_rule(self, rule: ReportRule) -> ReportRule:
        return self.update(rule.guid, rule)
