import pytest

from lacework_client.client import (
    Client,
    copy_client,
    with_api_keys,
    with_api_v2,
    with_expiration_time,
    with_header,
    with_lifecycle_callbacks,
    with_log_level,
    with_org_access,
    with_session,
    with_subaccount,
    with_timeout,
    with_token,
    with_token_from_keys,
    with_url,
)
from lacework_client.config import ClientSettings, ConfigurationError
from lacework_client.http import LifecycleCallbacks

from conftest import BASE_URL, FakeSession


def test_empty_account_is_rejected():
    with pytest.raises(ConfigurationError, match="account cannot be empty"):
        Client("")


def test_defaults(session):
    client = Client("acme.lacework.net", session=session)
    assert client.account == "acme"
    assert client.url == "https://acme.lacework.net"
    assert client.api_version == "v1"
    assert not client.valid_auth()
    assert not client.org_access()
    assert client.settings.timeout_seconds == 60
    assert client.settings.token_expiry_seconds == 3600


def test_options_are_applied(session):
    client = Client(
        "acme",
        with_url(BASE_URL),
        with_api_v2(),
        with_timeout(5),
        with_expiration_time(120),
        with_api_keys("KEY", "SECRET"),
        with_subaccount("team"),
        with_org_access(),
        with_header("X-Custom", "1"),
        with_header("X-Ignored", ""),
        session=session,
    )

    assert client.url == BASE_URL
    assert client.api_version == "v2"
    assert client.subaccount == "team"
    assert client.org_access()
    assert client.settings.timeout_seconds == 5
    assert client.settings.token_expiry_seconds == 120
    assert client.settings.headers == {"Account-Name": "team", "Org-Access": "true", "X-Custom": "1"}
    assert client.auth_state().has_keys


def test_with_url_rejects_non_http(session):
    with pytest.raises(ConfigurationError, match="invalid base url"):
        Client("acme", with_url("localhost:8080"), session=session)


def test_with_log_level(session):
    client = Client("acme", with_log_level("debug"), session=session)
    assert client.settings.log_level == "DEBUG"
    with_log_level("")(client)


def test_logging_is_configured_once_after_options(session, monkeypatch):
    levels = []
    monkeypatch.setattr("lacework_client.client.configure_logging", levels.append)
    monkeypatch.delenv("LW_LOG", raising=False)

    Client("acme", with_log_level("info"), with_log_level("debug"), session=session)

    assert levels == ["DEBUG"]


def test_client_without_log_level_leaves_logging_alone(session, monkeypatch):
    levels = []
    monkeypatch.setattr("lacework_client.client.configure_logging", levels.append)
    monkeypatch.delenv("LW_LOG", raising=False)

    Client("acme", session=session)

    assert levels == []


def test_with_log_level_rejects_unknown_levels(session):
    with pytest.raises(ConfigurationError, match="invalid log level 'LOUD'"):
        Client("acme", with_log_level("LOUD"), session=session)


def test_with_token_marks_auth_valid(session):
    client = Client("acme", with_token("TOKEN"), session=session)
    assert client.valid_auth()
    assert not client.token_expired()


def test_with_token_from_keys_generates_immediately(session):
    session.add("POST", "/api/v1/access/tokens", body={"data": [{"token": "T1"}], "ok": True})
    client = Client("acme", with_url(BASE_URL), with_token_from_keys("KEY", "SECRET"), session=session)
    assert client.valid_auth()
    assert session.calls[0].json == {"keyId": "KEY", "expiryTime": 3600}


def test_generate_token_with_keys(client, session):
    session.add("POST", "/api/v2/access/tokens", body={"data": [{"token": "T9"}]})
    response = client.generate_token_with_keys("KEY", "SECRET")
    assert response.token == "T9"
    assert client.auth_state().has_keys


def test_requests_carry_configured_headers(session):
    session.add("GET", "/api/v2/AlertRules", body={"data": []})
    client = Client(
        "acme",
        with_url(BASE_URL),
        with_api_v2(),
        with_token("TOKEN"),
        with_subaccount("team"),
        session=session,
    )

    client.v2.alert_rules.list()

    headers = session.calls[0].headers
    assert headers["Authorization"] == "TOKEN"
    assert headers["Account-Name"] == "team"


def test_generic_request(client, session):
    session.add("GET", "/api/v1/external/integrations", body={"data": [], "ok": True})
    assert client.request("GET", "external/integrations", version="v1") == {"data": [], "ok": True}


def test_lifecycle_callbacks_option(session):
    seen = []
    session.add("GET", "/api/v2/Metrics", body={})
    client = Client(
        "acme",
        with_url(BASE_URL),
        with_api_v2(),
        with_token("TOKEN"),
        with_lifecycle_callbacks(LifecycleCallbacks(on_response=lambda code, headers: seen.append(code))),
        session=session,
    )
    client.request("GET", "Metrics")
    assert seen == [200]


def test_with_session_replaces_transport():
    replacement = FakeSession()
    replacement.add("GET", "/api/v2/Metrics", body={})
    client = Client("acme", with_url(BASE_URL), with_api_v2(), with_token("T"), with_session(replacement))
    client.request("GET", "Metrics")
    assert client.session is replacement
    assert len(replacement.calls) == 1


def test_copy_client_gets_new_id_and_keeps_state(client):
    copy = copy_client(client, with_subaccount("other"))

    assert copy.id != client.id
    assert copy.url == client.url
    assert copy.api_version == "v2"
    assert copy.valid_auth()
    assert copy.session is client.session
    assert copy.subaccount == "other"
    assert "Account-Name" not in client.settings.headers


def test_from_settings(session):
    settings = ClientSettings(account="acme", base_url=BASE_URL, api_version="v2", token="T")
    client = Client.from_settings(settings, with_timeout(9), session=session)
    assert client.url == BASE_URL
    assert client.api_version == "v2"
    assert client.valid_auth()
    assert client.settings.timeout_seconds == 9
