from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from lacework_client.apis.resource_api import ServiceApi, _single


@dataclass(frozen=True)
class UserAccount:
    account_name: str
    admin: bool = False
    cust_guid: str = ""
    user_guid: str = ""
    user_enabled: int = 1

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "UserAccount":
        return UserAccount(
            account_name=str(raw.get("accountName") or ""),
            admin=bool(raw.get("admin", False)),
            cust_guid=str(raw.get("custGuid") or ""),
            user_guid=str(raw.get("userGuid") or ""),
            user_enabled=int(raw.get("userEnabled", 1) or 0),
        )


@dataclass(frozen=True)
class UserProfile:
    username: str = ""
    org_account: bool = False
    url: str = ""
    org_admin: bool = False
    org_user: bool = False
    accounts: list[UserAccount] = field(default_factory=list)

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "UserProfile":
        return UserProfile(
            username=str(raw.get("username") or ""),
            org_account=bool(raw.get("orgAccount", False)),
            url=str(raw.get("url") or ""),
            org_admin=bool(raw.get("orgAdmin", False)),
            org_user=bool(raw.get("orgUser", False)),
            accounts=[UserAccount.from_dict(item) for item in raw.get("accounts") or []],
        )

    def sub_accounts(self) -> list[str]:
        return [account.account_name for account in self.accounts]


class UserProfileApi(ServiceApi):
    def get(self) -> UserProfile:
        """Returns the profile of the user the current token belongs to."""
        return UserProfile.from_dict(_single(self._request("GET", "UserProfile")))
