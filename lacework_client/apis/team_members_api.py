from __future__ import annotations

from dataclasses import dataclass
from typing import Any

from lacework_client.apis.resource_api import ResourceApi, ResourceDescriptor


@dataclass(frozen=True)
class TeamMemberProps:
    first_name: str = ""
    last_name: str = ""
    company: str = ""
    account_admin: bool = False
    org_admin: bool = False
    org_user: bool = False
    created_time: str = ""
    last_login_time: str = ""

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "TeamMemberProps":
        return TeamMemberProps(
            first_name=str(raw.get("firstName") or ""),
            last_name=str(raw.get("lastName") or ""),
            company=str(raw.get("company") or ""),
            account_admin=bool(raw.get("accountAdmin", False)),
            org_admin=bool(raw.get("orgAdmin", False)),
            org_user=bool(raw.get("orgUser", False)),
            created_time=str(raw.get("createdTime") or ""),
            last_login_time=str(raw.get("lastLoginTime") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "company": self.company,
        }
        for key, value in (
            ("accountAdmin", self.account_admin),
            ("orgAdmin", self.org_admin),
            ("orgUser", self.org_user),
        ):
            if value:
                body[key] = value
        return body


@dataclass(frozen=True)
class TeamMember:
    user_name: str
    props: TeamMemberProps = TeamMemberProps()
    user_enabled: int = 1
    guid: str = ""
    cust_guid: str = ""

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "TeamMember":
        return TeamMember(
            user_name=str(raw.get("userName") or ""),
            props=TeamMemberProps.from_dict(raw.get("props") or {}),
            user_enabled=int(raw.get("userEnabled", 1) or 0),
            guid=str(raw.get("userGuid") or ""),
            cust_guid=str(raw.get("custGuid") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "userName": self.user_name,
            "userEnabled": self.user_enabled,
            "props": self.props.to_dict(),
        }
        if self.cust_guid:
            body["custGuid"] = self.cust_guid
        return body


def new_team_member(user_name: str, props: TeamMemberProps) -> TeamMember:
    return TeamMember(user_name=user_name, props=props, user_enabled=1)


class TeamMembersApi(ResourceApi):
    descriptor = ResourceDescriptor(path="TeamMembers", guid_field="userGuid", model=TeamMember)

    def update_member(self, member: TeamMember) -> TeamMember:
        return self.update(member.guid, member)
