from __future__ import annotations

import logging
import secrets
import time
from typing import Any, Callable, MutableMapping

import requests

from lacework_client.apis import (
    AgentAccessTokensApi,
    AlertChannelsApi,
    AlertProfilesApi,
    AlertRulesApi,
    CloudAccountsApi,
    ComponentDataApi,
    ContainerRegistriesApi,
    FeatureFlagsApi,
    IntegrationsApi,
    MetricsApi,
    PoliciesApi,
    QueriesApi,
    ReportRulesApi,
    ResourceGroupsApi,
    TeamMembersApi,
    UserProfileApi,
)
from lacework_client.auth import AuthManager
from lacework_client.config import ClientSettings, ConfigurationError, normalize_account
from lacework_client.http import HttpClient, LifecycleCallbacks
from lacework_client.logging_utils import configure_logging, get_logger, log_level_from_environment, valid_level
from lacework_client.models import AuthState, TokenResponse


Option = Callable[["Client"], None]


class _ClientLogAdapter(logging.LoggerAdapter):
    def process(self, msg: str, kwargs: MutableMapping[str, Any]) -> tuple[str, MutableMapping[str, Any]]:
        extra = dict(kwargs.get("extra") or {})
        extra["fields"] = {**self.extra, **(extra.get("fields") or {})}
        kwargs["extra"] = extra
        return msg, kwargs


def new_id() -> str:
    return secrets.token_hex(8)


class V2Endpoints:
    """The v2 services, reachable as ``client.v2``."""

    def __init__(self, http_client: HttpClient, auth_manager: AuthManager):
        self.agent_access_tokens = AgentAccessTokensApi(http_client, auth_manager)
        self.alert_channels = AlertChannelsApi(http_client, auth_manager)
        self.alert_profiles = AlertProfilesApi(http_client, auth_manager)
        self.alert_rules = AlertRulesApi(http_client, auth_manager)
        self.cloud_accounts = CloudAccountsApi(http_client, auth_manager)
        self.component_data = ComponentDataApi(http_client, auth_manager)
        self.container_registries = ContainerRegistriesApi(http_client, auth_manager)
        self.feature_flags = FeatureFlagsApi(http_client, auth_manager)
        self.metrics = MetricsApi(http_client, auth_manager)
        self.policies = PoliciesApi(http_client, auth_manager)
        self.queries = QueriesApi(http_client, auth_manager)
        self.report_rules = ReportRulesApi(http_client, auth_manager)
        self.resource_groups = ResourceGroupsApi(http_client, auth_manager)
        self.team_members = TeamMembersApi(http_client, auth_manager)
        self.user_profile = UserProfileApi(http_client, auth_manager)


class Client:
    """One logical connection to a Lacework account.

    Built from an account name and any number of options::

        client = Client("my-account", with_api_keys(key, secret), with_api_v2())
        channels = client.v2.alert_channels.list()
    """

    def __init__(
        self,
        account: str,
        *options: Option,
        session: requests.Session | None = None,
        settings: ClientSettings | None = None,
        callbacks: LifecycleCallbacks | None = None,
        clock: Callable[[], float] = time.time,
    ):
        if not account:
            raise ConfigurationError("account cannot be empty")

        self.id = new_id()
        if settings is None:
            settings = ClientSettings(
                account=normalize_account(account),
                log_level=log_level_from_environment(),
            )
        self._settings = settings
        self._http_client = HttpClient(settings, session=session, callbacks=callbacks)
        self._auth_manager = AuthManager(settings, self._http_client, clock=clock)
        self.v2 = V2Endpoints(self._http_client, self._auth_manager)
        self.integrations = IntegrationsApi(self._http_client, self._auth_manager)
        self.log = _ClientLogAdapter(get_logger("client"), {"id": self.id, "account": settings.account})

        for option in options:
            option(self)
        self._settings.validate()
        if self._settings.log_level:
            configure_logging(self._settings.log_level)

        self.log.info(
            "api client created",
            extra={
                "fields": {
                    "url": self.url,
                    "version": self.api_version,
                    "log_level": self._settings.log_level or "WARNING",
                    "timeout": self._settings.timeout_seconds,
                }
            },
        )

    @classmethod
    def from_settings(cls, settings: ClientSettings, *options: Option, session: requests.Session | None = None) -> "Client":
        settings.validate()
        return cls(settings.account, *options, session=session, settings=settings)

    @property
    def settings(self) -> ClientSettings:
        return self._settings

    @property
    def account(self) -> str:
        return self._settings.account

    @property
    def subaccount(self) -> str:
        return self._settings.subaccount

    @property
    def url(self) -> str:
        return self._settings.base_url

    @property
    def api_version(self) -> str:
        return self._settings.api_version

    @property
    def session(self) -> requests.Session:
        return self._http_client.session

    def valid_auth(self) -> bool:
        return self._auth_manager.valid_auth()

    def org_access(self) -> bool:
        return self._settings.headers.get("Org-Access") == "true"

    def auth_state(self) -> AuthState:
        return self._auth_manager.get_auth_state()

    def token_expired(self) -> bool:
        return self._auth_manager.token_expired()

    def generate_token(self) -> TokenResponse:
        return self._auth_manager.generate_token()

    def generate_token_with_keys(self, key_id: str, secret: str) -> TokenResponse:
        self.update_settings(api_key=key_id, api_secret=secret)
        return self.generate_token()

    def request(self, method: str, path: str, payload: Any = None, version: str | None = None) -> Any:
        """Sends an authenticated request to any API path and returns the decoded JSON."""
        token = self._auth_manager.acquire_access_token()
        return self._http_client.request(method, path, token=token, payload=payload, version=version)

    def update_settings(self, **changes: Any) -> None:
        self._settings = self._settings.with_changes(**changes)
        self._http_client.update_settings(self._settings)
        self._auth_manager.update_settings(self._settings)


def copy_client(origin: Client, *options: Option) -> Client:
    """Duplicates ``origin`` with a new id, sharing its session and current token."""
    dest = Client(
        origin.account,
        session=origin.session,
        settings=origin.settings.with_changes(headers=dict(origin.settings.headers)),
        callbacks=origin._http_client.callbacks,
    )
    dest._auth_manager.use_snapshot(origin._auth_manager.snapshot)
    for option in options:
        option(dest)
    dest._settings.validate()
    if dest._settings.log_level != origin.settings.log_level:
        configure_logging(dest._settings.log_level)
    return dest


def with_api_keys(key_id: str, secret: str) -> Option:
    def apply(client: Client) -> None:
        client.log.debug("setting up auth", extra={"fields": {"key": key_id}})
        client.update_settings(api_key=key_id, api_secret=secret)

    return apply


def with_token_from_keys(key_id: str, secret: str) -> Option:
    """Sets the keys and generates a token right away."""

    def apply(client: Client) -> None:
        client.generate_token_with_keys(key_id, secret)

    return apply


def with_token(token: str) -> Option:
    def apply(client: Client) -> None:
        client.log.debug("setting up auth", extra={"fields": {"token": "*****"}})
        client.update_settings(token=token)

    return apply


def with_expiration_time(seconds: int) -> Option:
    def apply(client: Client) -> None:
        client.log.debug("setting up auth", extra={"fields": {"expiration": seconds}})
        client.update_settings(token_expiry_seconds=seconds)

    return apply


def with_url(base_url: str) -> Option:
    def apply(client: Client) -> None:
        if not base_url.startswith(("http://", "https://")):
            raise ConfigurationError(f"invalid base url '{base_url}'")
        client.log.debug("setting up client", extra={"fields": {"url": base_url}})
        client.update_settings(base_url=base_url)

    return apply


def with_api_v2() -> Option:
    def apply(client: Client) -> None:
        client.log.debug("setting up client", extra={"fields": {"version": "v2"}})
        client.update_settings(api_version="v2")

    return apply


def with_timeout(seconds: float) -> Option:
    def apply(client: Client) -> None:
        client.log.debug("setting up client", extra={"fields": {"timeout": seconds}})
        client.update_settings(timeout_seconds=seconds)

    return apply


def with_header(header: str, value: str) -> Option:
    def apply(client: Client) -> None:
        if header and value:
            client.log.debug("setting up header", extra={"fields": {header: value}})
            client.update_settings(headers={**client.settings.headers, header: value})

    return apply


def with_org_access() -> Option:
    return with_header("Org-Access", "true")


def with_subaccount(subaccount: str) -> Option:
    def apply(client: Client) -> None:
        if subaccount:
            client.update_settings(subaccount=subaccount)
            with_header("Account-Name", subaccount)(client)

    return apply


def with_log_level(level: str) -> Option:
    def apply(client: Client) -> None:
        if not valid_level(level):
            raise ConfigurationError(f"invalid log level '{level}'")
        client.update_settings(log_level=level.upper())

    return apply


def with_lifecycle_callbacks(callbacks: LifecycleCallbacks) -> Option:
    def apply(client: Client) -> None:
        client._http_client.use_callbacks(callbacks)

    return apply


def with_session(session: requests.Session) -> Option:
    def apply(client: Client) -> None:
        client._http_client.use_session(session)

    return apply
