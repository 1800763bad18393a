from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from lacework_client.apis.resource_api import ResourceApi, ResourceDescriptor, ResourceFamily
from lacework_client.models import RawResource, ResourceCommon, TypedResource


class AlertChannelType(str, Enum):
    EMAIL_USER = "EmailUser"
    SLACK_CHANNEL = "SlackChannel"
    AWS_S3 = "AwsS3"
    CLOUDWATCH_EB = "CloudwatchEb"
    DATADOG = "Datadog"
    WEBHOOK = "Webhook"
    VICTOR_OPS = "VictorOps"
    CISCO_SPARK_WEBHOOK = "CiscoSparkWebhook"
    MICROSOFT_TEAMS = "MicrosoftTeams"
    SPLUNK_HEC = "SplunkHec"
    GCP_PUB_SUB = "GcpPubsub"
    IBM_QRADAR = "IbmQRadar"
    JIRA = "Jira"
    NEW_RELIC_INSIGHTS = "NewRelicInsights"
    PAGER_DUTY_API = "PagerDutyApi"
    SERVICE_NOW_REST = "ServiceNowRest"


def normalize_recipients(value: Any) -> list[str]:
    """Normalizes the email ``recipients`` field to a list.

    Some server versions return ``"a@x.com,b@x.com"`` instead of
    ``["a@x.com", "b@x.com"]``. Only those two shapes are accepted.
    """
    if isinstance(value, str):
        return value.split(",")
    if isinstance(value, list):
        return value
    raise TypeError(f"unexpected recipients shape: {type(value).__name__}")


@dataclass(frozen=True)
class EmailUserData:
    recipients: list[str] = field(default_factory=list)
    notification_types: dict[str, Any] = field(default_factory=dict)

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "EmailUserData":
        props = raw.get("channelProps") or {}
        return EmailUserData(
            recipients=list(normalize_recipients(props.get("recipients") or [])),
            notification_types=dict(raw.get("notificationTypes") or {}),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "channelProps": {"recipients": list(self.recipients)},
            "notificationTypes": self.notification_types,
        }


@dataclass(frozen=True)
class SlackChannelData:
    slack_url: str = ""

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "SlackChannelData":
        return SlackChannelData(slack_url=str(raw.get("slackUrl") or ""))

    def to_dict(self) -> dict[str, Any]:
        return {"slackUrl": self.slack_url}


@dataclass(frozen=True)
class DatadogData:
    api_key: str = ""
    datadog_site: str = "com"
    datadog_service: str = "Logs Detail"

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "DatadogData":
        return DatadogData(
            api_key=str(raw.get("apiKey") or ""),
            datadog_site=str(raw.get("datadogSite") or "com"),
            datadog_service=str(raw.get("datadogService") or "Logs Detail"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "apiKey": self.api_key,
            "datadogSite": self.datadog_site,
            "datadogService": self.datadog_service,
        }


@dataclass(frozen=True)
class WebhookData:
    webhook_url: str = ""

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "WebhookData":
        return WebhookData(webhook_url=str(raw.get("webhookUrl") or ""))

    def to_dict(self) -> dict[str, Any]:
        return {"webhookUrl": self.webhook_url}


ALERT_CHANNELS = ResourceFamily(
    type_enum=AlertChannelType,
    guid_field="intgGuid",
    payload_types={
        AlertChannelType.EMAIL_USER: EmailUserData,
        AlertChannelType.SLACK_CHANNEL: SlackChannelData,
        AlertChannelType.DATADOG: DatadogData,
        AlertChannelType.WEBHOOK: WebhookData,
    },
)


def new_alert_channel(name: str, kind: AlertChannelType, data: Any) -> RawResource:
    """Builds an enabled alert channel ready to be passed to ``create``."""
    return RawResource(
        common=ResourceCommon(name=name, type=AlertChannelType(kind).value, enabled=1),
        data=data,
    )


class AlertChannelsApi(ResourceApi):
    descriptor = ResourceDescriptor(path="AlertChannels", guid_field="intgGuid", family=ALERT_CHANNELS)

    def test(self, guid: str) -> None:
        """Asks the server to send a test alert through the channel."""
        self._request("POST", f"{self._item_path(guid)}/test")

    def get_email_user(self, guid: str) -> TypedResource[EmailUserData]:
        return self._get_typed(guid, AlertChannelType.EMAIL_USER)

    def update_email_user(self, channel: TypedResource[EmailUserData] | RawResource) -> TypedResource[EmailUserData]:
        return self._update_typed(channel, AlertChannelType.EMAIL_USER)

    def get_slack_channel(self, guid: str) -> TypedResource[SlackChannelData]:
        return self._get_typed(guid, AlertChannelType.SLACK_CHANNEL)

    def update_slack_channel(self, channel: TypedResource[SlackChannelData] | RawResource) -> TypedResource[SlackChannelData]:
        return self._update_typed(channel, AlertChannelType.SLACK_CHANNEL)

    def get_datadog(self, guid: str) -> TypedResource[DatadogData]:
        return self._get_typed(guid, AlertChannelType.DATADOG)

    def update_datadog(self, channel: TypedResource[DatadogData] | RawResource) -> TypedResource[DatadogData]:
        return self._update_typed(channel, AlertChannelType.DATADOG)

    def get_webhook(self, guid: str) -> TypedResource[WebhookData]:
        return self._get_typed(guid, AlertChannelType.WEBHOOK)

    def update_webhook(self, channel: TypedResource[WebhookData] | RawResource) -> TypedResource[WebhookData]:
        return self._update_typed(channel, AlertChannelType.WEBHOOK)

