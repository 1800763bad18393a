from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from lacework_client.apis.resource_api import ResourceApi, ResourceDescriptor, ResourceFamily
from lacework_client.models import RawResource, ResourceCommon, TypedResource


class CloudAccountType(str, Enum):
    AWS_CFG = "AwsCfg"
    AWS_CT_SQS = "AwsCtSqs"
    AWS_EKS_AUDIT = "AwsEksAudit"
    AWS_SIDEKICK = "AwsSidekick"
    AWS_SIDEKICK_ORG = "AwsSidekickOrg"
    AWS_US_GOV_CFG = "AwsUsGovCfg"
    AWS_US_GOV_CT_SQS = "AwsUsGovCtSqs"
    AZURE_AL_SEQ = "AzureAlSeq"
    AZURE_CFG = "AzureCfg"
    AZURE_SIDEKICK = "AzureSidekick"
    GCP_AT_SES = "GcpAtSes"
    GCP_CFG = "GcpCfg"
    GCP_GKE_AUDIT = "GcpGkeAudit"
    GCP_SIDEKICK = "GcpSidekick"
    GCP_AL_PUB_SUB = "GcpAlPubSub"
    OCI_CFG = "OciCfg"


@dataclass(frozen=True)
class AwsCredentials:
    role_arn: str = ""
    external_id: str = ""

    @staticmethod
    def from_dict(raw: dict[str, Any] | None) -> "AwsCredentials":
        raw = raw or {}
        return AwsCredentials(
            role_arn=str(raw.get("roleArn") or ""),
            external_id=str(raw.get("externalId") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        return {"roleArn": self.role_arn, "externalId": self.external_id}


@dataclass(frozen=True)
class AwsCfgData:
    credentials: AwsCredentials = AwsCredentials()
    aws_account_id: str = ""

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "AwsCfgData":
        return AwsCfgData(
            credentials=AwsCredentials.from_dict(raw.get("crossAccountCredentials")),
            aws_account_id=str(raw.get("awsAccountId") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {"crossAccountCredentials": self.credentials.to_dict()}
        if self.aws_account_id:
            body["awsAccountId"] = self.aws_account_id
        return body


@dataclass(frozen=True)
class AwsCtSqsData:
    queue_url: str = ""
    credentials: AwsCredentials = AwsCredentials()
    aws_account_id: str = ""

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "AwsCtSqsData":
        return AwsCtSqsData(
            queue_url=str(raw.get("queueUrl") or ""),
            credentials=AwsCredentials.from_dict(raw.get("crossAccountCredentials")),
            aws_account_id=str(raw.get("awsAccountId") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "queueUrl": self.queue_url,
            "crossAccountCredentials": self.credentials.to_dict(),
        }
        if self.aws_account_id:
            body["awsAccountId"] = self.aws_account_id
        return body


CLOUD_ACCOUNTS = ResourceFamily(
    type_enum=CloudAccountType,
    guid_field="intgGuid",
    payload_types={
        CloudAccountType.AWS_CFG: AwsCfgData,
        CloudAccountType.AWS_CT_SQS: AwsCtSqsData,
    },
)


def new_cloud_account(name: str, kind: CloudAccountType, data: Any) -> RawResource:
    return RawResource(
        common=ResourceCommon(name=name, type=CloudAccountType(kind).value, enabled=1),
        data=data,
    )


class CloudAccountsApi(ResourceApi):
    descriptor = ResourceDescriptor(path="CloudAccounts", guid_field="intgGuid", family=CLOUD_ACCOUNTS)

    def list_by_type(self, kind: CloudAccountType) -> list[Any]:
        response = self._request("GET", f"{self.descriptor.path}/{CloudAccountType(kind).value}")
        return self._decode_many(response)

    def get_aws_cfg(self, guid: str) -> TypedResource[AwsCfgData]:
        return self._get_typed(guid, CloudAccountType.AWS_CFG)

    def update_aws_cfg(self, account: TypedResource[AwsCfgData] | RawResource) -> TypedResource[AwsCfgData]:
        return self._update_typed(account, CloudAccountType.AWS_CFG)

    def get_aws_ct_sqs(self, guid: str) -> TypedResource[AwsCtSqsData]:
        return self._get_typed(guid, CloudAccountType.AWS_CT_SQS)

    def update_aws_ct_sqs(self, account: TypedResource[AwsCtSqsData] | RawResource) -> TypedResource[AwsCtSqsData]:
        return self._update_typed(account, CloudAccountType.AWS_CT_SQS)
