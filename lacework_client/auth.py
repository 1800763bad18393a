from __future__ import annotations

from dataclasses import dataclass
import threading
import time
from typing import Callable

from lacework_client.config import ClientSettings
from lacework_client.http import HttpClient
from lacework_client.logging_utils import get_logger
from lacework_client.models import AuthState, TokenResponse


logger = get_logger("auth")

TOKEN_PATH = "access/tokens"
SECRET_HEADER = "X-LW-UAKS"


class AuthenticationError(RuntimeError):
    pass


@dataclass(frozen=True)
class AccessToken:
    """Immutable token snapshot; a refresh replaces it as a whole.

    ``expires_in`` is ``None`` for tokens handed in by the caller, whose
    lifetime is unknown and which are therefore never considered expired.
    """

    value: str
    issued_at: float
    expires_in: int | None = None
    expires_at: str = ""

    def expired(self, now: float) -> bool:
        if self.expires_in is None:
            return False
        return now >= self.issued_at + self.expires_in


class AuthManager:
    def __init__(
        self,
        settings: ClientSettings,
        http_client: HttpClient,
        clock: Callable[[], float] = time.time,
    ):
        self._settings = settings
        self._http_client = http_client
        self._clock = clock
        self._lock = threading.Lock()
        self._token: AccessToken | None = None
        if settings.token:
            self._token = AccessToken(value=settings.token, issued_at=clock())

    def update_settings(self, settings: ClientSettings) -> None:
        with self._lock:
            previous = self._settings
            self._settings = settings
            if settings.token and settings.token != previous.token:
                self._token = AccessToken(value=settings.token, issued_at=self._clock())

    def use_snapshot(self, snapshot: AccessToken | None) -> None:
        with self._lock:
            self._token = snapshot

    @property
    def token(self) -> str:
        snapshot = self._token
        return snapshot.value if snapshot else ""

    @property
    def snapshot(self) -> AccessToken | None:
        return self._token

    def has_keys(self) -> bool:
        return bool(self._settings.api_key and self._settings.api_secret)

    def valid_auth(self) -> bool:
        return bool(self.token)

    def token_expired(self) -> bool:
        snapshot = self._token
        if snapshot is None:
            return True
        return snapshot.expired(self._clock())

    def acquire_access_token(self) -> str:
        with self._lock:
            snapshot = self._token
            if snapshot is not None and not snapshot.expired(self._clock()):
                return snapshot.value

            if snapshot is not None:
                logger.info("access token expired, generating a new one")
            self._token = self._mint()
            return self._token.value

    def generate_token(self) -> TokenResponse:
        with self._lock:
            response = self._exchange_keys()
            self._token = self._snapshot_from(response)
            return response

    def get_auth_state(self) -> AuthState:
        return AuthState(
            account=self._settings.account,
            has_keys=self.has_keys(),
            has_token=self.valid_auth(),
            token_expired=self.token_expired(),
        )

    def _mint(self) -> AccessToken:
        return self._snapshot_from(self._exchange_keys())

    def _exchange_keys(self) -> TokenResponse:
        if not self.has_keys():
            raise AuthenticationError("unable to generate access token: auth keys missing")

        expiry = self._settings.token_expiry_seconds
        logger.debug("generating access token", extra={"fields": {"expiry": expiry}})
        raw = self._http_client.request(
            "POST",
            TOKEN_PATH,
            payload={"keyId": self._settings.api_key, "expiryTime": expiry},
            headers={SECRET_HEADER: self._settings.api_secret},
        )
        response = TokenResponse.from_dict(raw if isinstance(raw, dict) else {})
        if not response.token:
            raise AuthenticationError("unable to generate access token: empty token in response")
        return response

    def _snapshot_from(self, response: TokenResponse) -> AccessToken:
        return AccessToken(
            value=response.token,
            issued_at=self._clock(),
            expires_in=self._settings.token_expiry_seconds,
            expires_at=response.data[0].expires_at,
        )
