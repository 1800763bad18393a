from __future__ import annotations

from dataclasses import dataclass, field, replace
import os
from pathlib import Path


DEFAULT_DOMAIN = "lacework.net"
DEFAULT_TIMEOUT_SECONDS = 60
DEFAULT_TOKEN_EXPIRY_SECONDS = 3600
SUPPORTED_API_VERSIONS = ("v1", "v2")
SUPPORTED_LOG_LEVELS = ("", "INFO", "DEBUG")


class ConfigurationError(ValueError):
    pass


@dataclass(frozen=True)
class ClientSettings:
    account: str
    base_url: str = ""
    subaccount: str = ""
    api_version: str = "v1"
    api_key: str = ""
    api_secret: str = ""
    token: str = ""
    token_expiry_seconds: int = DEFAULT_TOKEN_EXPIRY_SECONDS
    timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS
    log_level: str = ""
    headers: dict[str, str] = field(default_factory=dict)

    def __post_init__(self):
        if not self.base_url and self.account:
            object.__setattr__(self, "base_url", build_base_url(self.account))

    @staticmethod
    def from_env() -> "ClientSettings":
        _load_dotenv_if_present()

        account = normalize_account(os.getenv("LW_ACCOUNT", "").strip())
        subaccount = os.getenv("LW_SUBACCOUNT", "").strip()
        api_key = os.getenv("LW_API_KEY", "").strip()
        api_secret = os.getenv("LW_API_SECRET", "").strip()
        token = os.getenv("LW_API_TOKEN", "").strip()
        api_version = os.getenv("LW_API_VERSION", "v1").strip().lower()
        log_level = os.getenv("LW_LOG", "").strip().upper()

        try:
            timeout_seconds = float(os.getenv("LW_TIMEOUT_SECONDS", str(DEFAULT_TIMEOUT_SECONDS)))
        except ValueError as exc:
            raise ConfigurationError("LW_TIMEOUT_SECONDS must be a number") from exc

        try:
            token_expiry_seconds = int(
                os.getenv("LW_TOKEN_EXPIRY_SECONDS", str(DEFAULT_TOKEN_EXPIRY_SECONDS))
            )
        except ValueError as exc:
            raise ConfigurationError("LW_TOKEN_EXPIRY_SECONDS must be an integer") from exc

        settings = ClientSettings(
            account=account,
            subaccount=subaccount,
            api_version=api_version,
            api_key=api_key,
            api_secret=api_secret,
            token=token,
            token_expiry_seconds=token_expiry_seconds,
            timeout_seconds=timeout_seconds,
            log_level=log_level,
        )
        settings.validate()
        return settings

    def with_changes(self, **changes) -> "ClientSettings":
        return replace(self, **changes)

    def validate(self) -> None:
        missing = []
        if not self.account:
            missing.append("LW_ACCOUNT")
        if missing:
            raise ConfigurationError("Missing required settings: " + ", ".join(missing))

        if not self.base_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"invalid base url '{self.base_url}'")

        if self.api_version not in SUPPORTED_API_VERSIONS:
            raise ConfigurationError(
                "api version must be one of: " + ", ".join(SUPPORTED_API_VERSIONS)
            )

        if self.timeout_seconds <= 0:
            raise ConfigurationError("timeout must be greater than 0")

        if self.token_expiry_seconds <= 0:
            raise ConfigurationError("token expiry time must be greater than 0")

        if self.log_level not in SUPPORTED_LOG_LEVELS:
            raise ConfigurationError(f"invalid log level '{self.log_level}'")

        if bool(self.api_key) != bool(self.api_secret):
            raise ConfigurationError("LW_API_KEY and LW_API_SECRET must be provided together")


def normalize_account(account: str) -> str:
    """Reduce a fully qualified domain to the account prefix.

    ``account.lacework.net`` becomes ``account`` and
    ``sub.account.corp.lacework.net`` becomes ``sub.account.corp``.
    """
    account = account.strip()
    if "://" in account:
        account = account.split("://", 1)[1]
    account = account.split("/", 1)[0]

    suffix = f".{DEFAULT_DOMAIN}"
    if account.endswith(suffix):
        account = account[: -len(suffix)]
    return account


def build_base_url(account: str) -> str:
    return f"https://{normalize_account(account)}.{DEFAULT_DOMAIN}"


ENV_FILE_VARIABLE = "LW_ENV_FILE"


def _load_dotenv_if_present(file_name: str = ".env") -> None:
    """Copies KEY=VALUE pairs from env files into ``os.environ``.

    Variables already present in the environment win.
    """
    for path in _env_files(file_name):
        for key, value in read_env_file(path).items():
            os.environ.setdefault(key, value)


def _env_files(file_name: str) -> list[Path]:
    files = []
    explicit = os.getenv(ENV_FILE_VARIABLE, "").strip()
    if explicit:
        files.append(Path(explicit).expanduser())
    local = Path.cwd() / file_name
    if local not in files:
        files.append(local)
    return [path for path in files if path.is_file()]


def read_env_file(path: Path) -> dict[str, str]:
    values: dict[str, str] = {}
    for line in path.read_text(encoding="utf-8").splitlines():
        line = line.strip()
        if line.startswith("export "):
            line = line[len("export "):]
        name, sep, value = line.partition("=")
        name = name.strip()
        if not sep or not name or name.startswith("#"):
            continue
        values[name] = value.strip().strip("\"'")
    return values
