import pytest

from lacework_client.apis.alert_channels_api import (
    AlertChannelType,
    DatadogData,
    EmailUserData,
    WebhookData,
    new_alert_channel,
    normalize_recipients,
)
from lacework_client.models import TypedResource


def _email_channel(recipients):
    return {
        "data": {
            "intgGuid": "EMAIL1",
            "name": "email",
            "type": "EmailUser",
            "enabled": 1,
            "data": {"channelProps": {"recipients": recipients}, "notificationTypes": {"properties": None}},
        }
    }


def test_recipients_string_is_split():
    assert normalize_recipients("a@x.com,b@x.com") == ["a@x.com", "b@x.com"]


def test_recipients_list_is_returned_unchanged():
    recipients = ["a@x.com", "b@x.com"]
    assert normalize_recipients(recipients) is recipients
    assert normalize_recipients(normalize_recipients("a@x.com,b@x.com")) == recipients


@pytest.mark.parametrize("value", [None, 42, {"a": 1}])
def test_recipients_other_shapes_are_rejected(value):
    with pytest.raises(TypeError):
        normalize_recipients(value)


@pytest.mark.parametrize("recipients", ["a@x.com,b@x.com", ["a@x.com", "b@x.com"]])
def test_get_email_user_normalizes_recipients(client, session, recipients):
    session.add("GET", "/api/v2/AlertChannels/EMAIL1", body=_email_channel(recipients))

    channel = client.v2.alert_channels.get_email_user("EMAIL1")

    assert isinstance(channel, TypedResource)
    assert channel.kind is AlertChannelType.EMAIL_USER
    assert channel.payload.recipients == ["a@x.com", "b@x.com"]


def test_list_splits_string_recipients(client, session):
    channel = _email_channel("a@x.com,b@x.com")["data"]
    session.add("GET", "/api/v2/AlertChannels", body={"data": [channel]})

    channels = client.v2.alert_channels.list()

    assert channels[0].payload.recipients == ["a@x.com", "b@x.com"]


def test_generic_get_splits_string_recipients(client, session):
    session.add("GET", "/api/v2/AlertChannels/EMAIL1", body=_email_channel("a@x.com,b@x.com"))

    channel = client.v2.alert_channels.get("EMAIL1")

    assert channel.payload.recipients == ["a@x.com", "b@x.com"]


def test_update_response_splits_string_recipients(client, session):
    session.add("PATCH", "/api/v2/AlertChannels/EMAIL1", body=_email_channel("c@x.com,d@x.com"))
    channel = new_alert_channel("email", AlertChannelType.EMAIL_USER, EmailUserData(recipients=["c@x.com"]))

    updated = client.v2.alert_channels.update("EMAIL1", channel)
    typed = client.v2.alert_channels.update_email_user(updated)

    assert updated.payload.recipients == ["c@x.com", "d@x.com"]
    assert typed.payload.recipients == ["c@x.com", "d@x.com"]


def test_update_email_user(client, session):
    session.add("PATCH", "/api/v2/AlertChannels/EMAIL1", body=_email_channel(["c@x.com"]))
    session.add("GET", "/api/v2/AlertChannels/EMAIL1", body=_email_channel("a@x.com"))
    api = client.v2.alert_channels

    channel = api.get_email_user("EMAIL1")
    updated = api.update_email_user(channel)

    assert updated.payload == EmailUserData(recipients=["c@x.com"], notification_types={"properties": None})
    patch = session.calls_to("PATCH", "/api/v2/AlertChannels/EMAIL1")[0]
    assert patch.json["data"]["channelProps"] == {"recipients": ["a@x.com"]}


def test_typed_wrappers_decode_their_payloads(client, session):
    session.add(
        "GET",
        "/api/v2/AlertChannels/DD",
        body={"data": {"intgGuid": "DD", "type": "Datadog", "data": {"apiKey": "k", "datadogSite": "eu"}}},
    )
    session.add(
        "GET",
        "/api/v2/AlertChannels/WH",
        body={"data": {"intgGuid": "WH", "type": "Webhook", "data": {"webhookUrl": "https://hook"}}},
    )
    api = client.v2.alert_channels

    assert api.get_datadog("DD").payload == DatadogData(api_key="k", datadog_site="eu")
    assert api.get_webhook("WH").payload == WebhookData(webhook_url="https://hook")


def test_channel_test_endpoint(client, session):
    session.add("POST", "/api/v2/AlertChannels/G/test", status=204)
    client.v2.alert_channels.test("G")
    assert session.calls[0].path == "/api/v2/AlertChannels/G/test"


def test_new_alert_channel_rejects_unknown_types():
    with pytest.raises(ValueError):
        new_alert_channel("x", "NotAChannel", {})
