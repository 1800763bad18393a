import pytest

from lacework_client.config import ClientSettings, ConfigurationError, build_base_url, normalize_account


ENV_KEYS = (
    "LW_ACCOUNT",
    "LW_SUBACCOUNT",
    "LW_API_KEY",
    "LW_API_SECRET",
    "LW_API_TOKEN",
    "LW_API_VERSION",
    "LW_LOG",
    "LW_TIMEOUT_SECONDS",
    "LW_TOKEN_EXPIRY_SECONDS",
    "LW_ENV_FILE",
)


@pytest.fixture
def clean_env(monkeypatch, tmp_path):
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)
    monkeypatch.chdir(tmp_path)
    yield monkeypatch
    # the dotenv loader writes straight into os.environ
    for key in ENV_KEYS:
        monkeypatch.delenv(key, raising=False)


@pytest.mark.parametrize(
    "account, expected",
    [
        ("my-account", "my-account"),
        ("my-account.lacework.net", "my-account"),
        ("sub.account.corp.lacework.net", "sub.account.corp"),
        ("https://my-account.lacework.net/ui", "my-account"),
    ],
)
def test_normalize_account(account, expected):
    assert normalize_account(account) == expected


def test_base_url_is_derived_from_account():
    assert build_base_url("acme") == "https://acme.lacework.net"
    assert ClientSettings(account="acme.lacework.net").base_url == "https://acme.lacework.net"
    assert ClientSettings(account="acme", base_url="http://localhost:8080").base_url == "http://localhost:8080"


def test_from_env_reads_lw_variables(clean_env):
    clean_env.setenv("LW_ACCOUNT", "acme.lacework.net")
    clean_env.setenv("LW_SUBACCOUNT", "team")
    clean_env.setenv("LW_API_KEY", "KEY")
    clean_env.setenv("LW_API_SECRET", "SECRET")
    clean_env.setenv("LW_API_VERSION", "V2")
    clean_env.setenv("LW_LOG", "debug")
    clean_env.setenv("LW_TIMEOUT_SECONDS", "15")

    settings = ClientSettings.from_env()

    assert settings.account == "acme"
    assert settings.subaccount == "team"
    assert settings.api_key == "KEY"
    assert settings.api_secret == "SECRET"
    assert settings.api_version == "v2"
    assert settings.log_level == "DEBUG"
    assert settings.timeout_seconds == 15.0
    assert settings.token_expiry_seconds == 3600


def test_from_env_loads_dotenv_file(clean_env, tmp_path):
    env_file = tmp_path / "custom.env"
    env_file.write_text("# comment\nLW_ACCOUNT='from-file'\nLW_API_TOKEN=abc\n", encoding="utf-8")
    clean_env.setenv("LW_ENV_FILE", str(env_file))

    settings = ClientSettings.from_env()

    assert settings.account == "from-file"
    assert settings.token == "abc"


def test_from_env_requires_account(clean_env):
    with pytest.raises(ConfigurationError, match="LW_ACCOUNT"):
        ClientSettings.from_env()


def test_from_env_rejects_bad_numbers(clean_env):
    clean_env.setenv("LW_ACCOUNT", "acme")
    clean_env.setenv("LW_TIMEOUT_SECONDS", "soon")
    with pytest.raises(ConfigurationError, match="LW_TIMEOUT_SECONDS"):
        ClientSettings.from_env()


@pytest.mark.parametrize(
    "changes, message",
    [
        ({"api_version": "v3"}, "api version"),
        ({"timeout_seconds": 0}, "timeout"),
        ({"token_expiry_seconds": -1}, "expiry"),
        ({"log_level": "TRACE"}, "invalid log level 'TRACE'"),
        ({"api_key": "KEY"}, "together"),
        ({"base_url": "ftp://nope"}, "invalid base url"),
    ],
)
def test_validate_rejects_bad_settings(changes, message):
    with pytest.raises(ConfigurationError, match=message):
        ClientSettings(account="acme", **changes).validate()


def test_with_changes_returns_a_new_instance():
    settings = ClientSettings(account="acme")
    changed = settings.with_changes(api_version="v2")
    assert settings.api_version == "v1"
    assert changed.api_version == "v2"
