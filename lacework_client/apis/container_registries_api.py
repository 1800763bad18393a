from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from lacework_client.apis.resource_api import ResourceApi, ResourceDescriptor, ResourceFamily
from lacework_client.models import RawResource, ResourceCommon, TypedResource


CONTAINER_REGISTRY_INTEGRATION_TYPE = "ContVulnCfg"


class ContainerRegistryType(str, Enum):
    GCP_GAR = "GCP_GAR"
    GHCR = "GHCR"
    INLINE_SCANNER = "INLINE_SCANNER"
    PROXY_SCANNER = "PROXY_SCANNER"
    AWS_ECR = "AWS_ECR"
    DOCKERHUB = "DOCKERHUB"
    DOCKERHUB_V2 = "V2_REGISTRY"
    GCP_GCR = "GCP_GCR"


def _registry_type(raw: dict[str, Any]) -> str:
    data = raw.get("data")
    if isinstance(data, dict):
        return str(data.get("registryType") or "")
    return ""


@dataclass(frozen=True)
class GhcrData:
    username: str = ""
    password: str = ""
    ssl: bool = True
    registry_domain: str = "ghcr.io"
    limit_num_imgs: int = 5
    limit_by_tag: list[str] = field(default_factory=list)
    limit_by_label: list[dict[str, str]] = field(default_factory=list)

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "GhcrData":
        credentials = raw.get("credentials") or {}
        return GhcrData(
            username=str(credentials.get("username") or ""),
            password=str(credentials.get("password") or ""),
            ssl=bool(credentials.get("ssl", True)),
            registry_domain=str(raw.get("registryDomain") or "ghcr.io"),
            limit_num_imgs=int(raw.get("limitNumImg") or 5),
            limit_by_tag=list(raw.get("limitByTag") or []),
            limit_by_label=list(raw.get("limitByLabel") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "registryType": ContainerRegistryType.GHCR.value,
            "registryDomain": self.registry_domain,
            "credentials": {"username": self.username, "password": self.password, "ssl": self.ssl},
            "limitNumImg": self.limit_num_imgs,
            "limitByTag": self.limit_by_tag,
            "limitByLabel": self.limit_by_label,
        }


@dataclass(frozen=True)
class DockerhubData:
    username: str = ""
    password: str = ""
    registry_domain: str = "index.docker.io"
    limit_num_imgs: int = 5
    limit_by_tag: list[str] = field(default_factory=list)
    limit_by_label: list[dict[str, str]] = field(default_factory=list)

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "DockerhubData":
        credentials = raw.get("credentials") or {}
        return DockerhubData(
            username=str(credentials.get("username") or ""),
            password=str(credentials.get("password") or ""),
            registry_domain=str(raw.get("registryDomain") or "index.docker.io"),
            limit_num_imgs=int(raw.get("limitNumImg") or 5),
            limit_by_tag=list(raw.get("limitByTag") or []),
            limit_by_label=list(raw.get("limitByLabel") or []),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "registryType": ContainerRegistryType.DOCKERHUB.value,
            "registryDomain": self.registry_domain,
            "credentials": {"username": self.username, "password": self.password},
            "limitNumImg": self.limit_num_imgs,
            "limitByTag": self.limit_by_tag,
            "limitByLabel": self.limit_by_label,
        }


CONTAINER_REGISTRIES = ResourceFamily(
    type_enum=ContainerRegistryType,
    guid_field="intgGuid",
    payload_types={
        ContainerRegistryType.GHCR: GhcrData,
        ContainerRegistryType.DOCKERHUB: DockerhubData,
    },
    discriminator=_registry_type,
)


def new_container_registry(name: str, kind: ContainerRegistryType, data: Any) -> RawResource:
    """Builds a registry integration; the envelope type is always ``ContVulnCfg``.

    When ``data`` is a plain dict its ``registryType`` is filled in from
    ``kind`` so the server can tell the registries apart.
    """
    kind = ContainerRegistryType(kind)
    if isinstance(data, dict):
        data = {**data, "registryType": kind.value}
    return RawResource(
        common=ResourceCommon(name=name, type=CONTAINER_REGISTRY_INTEGRATION_TYPE, enabled=1),
        data=data,
    )


def registry_state_string(registry: TypedResource | Any) -> str:
    # scanner registries report no health state
    if getattr(registry, "kind", None) in (
        ContainerRegistryType.INLINE_SCANNER,
        ContainerRegistryType.PROXY_SCANNER,
    ):
        return "Ok"
    return registry.state_string()


class ContainerRegistriesApi(ResourceApi):
    descriptor = ResourceDescriptor(
        path="ContainerRegistries",
        guid_field="intgGuid",
        family=CONTAINER_REGISTRIES,
    )

    def get_ghcr(self, guid: str) -> TypedResource[GhcrData]:
        return self._get_typed(guid, ContainerRegistryType.GHCR)

    def update_ghcr(self, registry: TypedResource[GhcrData] | RawResource) -> TypedResource[GhcrData]:
        return self._update_typed(registry, ContainerRegistryType.GHCR)

    def get_dockerhub(self, guid: str) -> TypedResource[DockerhubData]:
        return self._get_typed(guid, ContainerRegistryType.DOCKERHUB)

    def update_dockerhub(self, registry: TypedResource[DockerhubData] | RawResource) -> TypedResource[DockerhubData]:
        return self._update_typed(registry, ContainerRegistryType.DOCKERHUB)
