from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from lacework_client.apis.resource_api import ResourceApi, ResourceDescriptor, ResourceFamily
from lacework_client.models import RawResource, ResourceCommon, TypedResource


READ_ONLY_FIELDS = (
    "updatedBy",
    "updatedTime",
    "createdBy",
    "lastUpdated",
    "isDefaultBoolean",
    "resourceGuid",
)


class ResourceGroupType(str, Enum):
    AWS = "AWS"
    AZURE = "AZURE"
    CONTAINER = "CONTAINER"
    GCP = "GCP"
    LW_ACCOUNT = "LW_ACCOUNT"
    MACHINE = "MACHINE"


@dataclass(frozen=True)
class ResourceGroupData:
    """Body of a resource group: the query selecting its members."""

    query: dict[str, Any] = field(default_factory=dict)
    description: str = ""
    props: dict[str, Any] = field(default_factory=dict)
    is_default: bool = False

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "ResourceGroupData":
        return ResourceGroupData(
            query=dict(raw.get("query") or {}),
            description=str(raw.get("description") or ""),
            props=dict(raw.get("props") or {}),
            is_default=bool(raw.get("isDefaultBoolean", False)),
        )

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"query": self.query}
        if self.description:
            body["description"] = self.description
        if self.props:
            body["props"] = self.props
        return body


def _normalize_group(raw: dict[str, Any]) -> dict[str, Any]:
    # legacy groups use resourceGuid/resourceName
    if "resourceGroupGuid" in raw and "name" in raw:
        return raw
    group = dict(raw)
    if not group.get("resourceGroupGuid") and group.get("resourceGuid"):
        group["resourceGroupGuid"] = group["resourceGuid"]
    if not group.get("name") and group.get("resourceName"):
        group["name"] = group.pop("resourceName")
    return group


RESOURCE_GROUPS = ResourceFamily(
    type_enum=ResourceGroupType,
    guid_field="resourceGroupGuid",
    type_field="resourceType",
    data_field=None,
    payload_types={kind: ResourceGroupData for kind in ResourceGroupType},
    read_only_fields=READ_ONLY_FIELDS,
    normalize=_normalize_group,
)


def new_resource_group(
    name: str,
    kind: ResourceGroupType,
    query: dict[str, Any] | None = None,
    description: str = "",
) -> RawResource:
    return RawResource(
        common=ResourceCommon(name=name, type=ResourceGroupType(kind).value, enabled=1),
        data=ResourceGroupData(query=query or {}, description=description),
    )


class ResourceGroupsApi(ResourceApi):
    descriptor = ResourceDescriptor(
        path="ResourceGroups",
        guid_field="resourceGroupGuid",
        family=RESOURCE_GROUPS,
    )

    def get_group(self, guid: str, kind: ResourceGroupType) -> TypedResource[ResourceGroupData]:
        return self._get_typed(guid, ResourceGroupType(kind))

    def update_group(self, group: TypedResource[ResourceGroupData] | RawResource) -> TypedResource[ResourceGroupData]:
        kind = RESOURCE_GROUPS.find_type(group.common.type)
        if kind is None:
            return self.update(group.guid, group)
        return self._update_typed(group, kind)
