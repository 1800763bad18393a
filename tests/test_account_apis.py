"""User profile, feature flags, metrics and the legacy v1 integrations."""

import pytest

from lacework_client.apis.integrations_api import IntegrationType, V1Integration, new_v1_integration
from lacework_client.apis.metrics_api import Honeyvent, new_honeyvent
from lacework_client.apis.user_profile_api import UserProfile
from lacework_client.models import V1Response


def test_user_profile(client, session):
    session.add(
        "GET",
        "/api/v2/UserProfile",
        body={
            "data": [
                {
                    "username": "jo@example.com",
                    "orgAccount": True,
                    "url": "acme.lacework.net",
                    "orgAdmin": False,
                    "orgUser": True,
                    "accounts": [
                        {"accountName": "ACME", "admin": True, "custGuid": "C", "userGuid": "U", "userEnabled": 1},
                        {"accountName": "TEAM", "admin": False, "custGuid": "C2", "userGuid": "U", "userEnabled": 1},
                    ],
                }
            ]
        },
    )

    profile = client.v2.user_profile.get()

    assert isinstance(profile, UserProfile)
    assert profile.org_account
    assert profile.sub_accounts() == ["ACME", "TEAM"]
    assert profile.accounts[0].admin


def test_feature_flags_matching_prefix(client, session):
    session.add(
        "GET",
        "/api/v2/FeatureFlags/PUBLIC.cli",
        body={"data": {"flags": ["PUBLIC.cli.rgv2", "PUBLIC.cli.other"]}},
    )
    api = client.v2.feature_flags

    assert api.get_feature_flags_matching_prefix("PUBLIC.cli") == ["PUBLIC.cli.rgv2", "PUBLIC.cli.other"]


def test_feature_flag_missing(client, session):
    session.add("GET", "/api/v2/FeatureFlags/PUBLIC.none", body={"data": {"flags": []}})
    assert not client.v2.feature_flags.is_enabled("PUBLIC.none")


def test_new_honeyvent_prefills_platform_and_trace():
    event = new_honeyvent(account="acme", feature="upload")
    assert event.os
    assert len(event.trace_id) == 32
    assert event.account == "acme"
    assert event.feature == "upload"


def test_send_metrics_posts_a_single_event_list(client, session):
    session.add("POST", "/api/v2/Metrics", body={"data": [{"ok": True}]})
    event = Honeyvent(os="linux", arch="amd64", command="api", duration_ms=12, trace_id="T", feature_data={"k": "v"})

    client.v2.metrics.send(event)

    body = session.calls[0].json
    assert isinstance(body, list) and len(body) == 1
    assert body[0]["os"] == "linux"
    assert body[0]["duration_ms"] == 12
    assert body[0]["feature.data"] == {"k": "v"}
    assert "error" not in body[0]


V1_RESPONSE = {
    "data": [
        {
            "INTG_GUID": "V1G",
            "NAME": "aws",
            "TYPE": "AWS_CFG",
            "ENABLED": 1,
            "STATE": {"ok": True},
            "DATA": {"ROLE_ARN": "arn"},
        }
    ],
    "ok": True,
    "message": "SUCCESS",
}


def test_v1_list_and_list_by_type(client, session):
    session.add("GET", "/api/v1/external/integrations", body=V1_RESPONSE)
    session.add("GET", "/api/v1/external/integrations/type/AWS_CFG", body=V1_RESPONSE)

    listed = client.integrations.list()
    by_type = client.integrations.list_by_type(IntegrationType.AWS_CFG)

    assert isinstance(listed, V1Response)
    assert listed.ok
    assert listed.message == "SUCCESS"
    assert listed.data[0] == by_type.data[0]
    integration = listed.data[0]
    assert isinstance(integration, V1Integration)
    assert integration.guid == "V1G"
    assert integration.status() == "Enabled"
    assert integration.state_string() == "Ok"


def test_v1_create_update_delete(client, session):
    session.add("POST", "/api/v1/external/integrations", body=V1_RESPONSE)
    session.add("PATCH", "/api/v1/external/integrations/V1G", body=V1_RESPONSE)
    session.add("DELETE", "/api/v1/external/integrations/V1G", body={"data": [], "ok": True, "message": "SUCCESS"})
    api = client.integrations

    created = api.create(new_v1_integration("aws", IntegrationType.AWS_CFG, {"ROLE_ARN": "arn"}))
    api.update("V1G", created.data[0])
    deleted = api.delete("V1G")

    assert session.calls[0].json == {"NAME": "aws", "TYPE": "AWS_CFG", "ENABLED": 1, "DATA": {"ROLE_ARN": "arn"}}
    assert session.calls[1].path == "/api/v1/external/integrations/V1G"
    assert deleted.ok
    assert deleted.data == []


@pytest.mark.parametrize("name", ["metrics", "feature_flags", "user_profile", "component_data"])
def test_single_purpose_apis_have_no_crud_verbs(client, name):
    api = getattr(client.v2, name)
    for verb in ("list", "create", "update", "delete"):
        assert not hasattr(api, verb)
