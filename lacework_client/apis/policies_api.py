from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from lacework_client.apis.resource_api import ResourceApi, ResourceDescriptor, ServiceApi, _single
from lacework_client.auth import AuthManager
from lacework_client.config import ConfigurationError
from lacework_client.http import HttpClient


POLICY_SEVERITIES = ("critical", "high", "medium", "low", "info")


@dataclass(frozen=True)
class Policy:
    policy_id: str = ""
    policy_type: str = "Violation"
    query_id: str = ""
    title: str = ""
    enabled: bool = False
    description: str = ""
    remediation: str = ""
    severity: str = "medium"
    eval_frequency: str = "Hourly"
    limit: int = 1000
    alert_enabled: bool = False
    alert_profile: str = ""
    tags: list[str] = field(default_factory=list)
    evaluator_id: str = ""
    query_text: str = ""
    owner: str = ""
    last_update_time: str = ""
    last_update_user: str = ""

    @property
    def guid(self) -> str:
        return self.policy_id

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "Policy":
        return Policy(
            policy_id=str(raw.get("policyId") or ""),
            policy_type=str(raw.get("policyType") or ""),
            query_id=str(raw.get("queryId") or ""),
            title=str(raw.get("title") or ""),
            enabled=bool(raw.get("enabled", False)),
            description=str(raw.get("description") or ""),
            remediation=str(raw.get("remediation") or ""),
            severity=str(raw.get("severity") or ""),
            eval_frequency=str(raw.get("evalFrequency") or ""),
            limit=int(raw.get("limit") or 0),
            alert_enabled=bool(raw.get("alertEnabled", False)),
            alert_profile=str(raw.get("alertProfile") or ""),
            tags=list(raw.get("tags") or []),
            evaluator_id=str(raw.get("evaluatorId") or ""),
            query_text=str(raw.get("queryText") or ""),
            owner=str(raw.get("owner") or ""),
            last_update_time=str(raw.get("lastUpdateTime") or ""),
            last_update_user=str(raw.get("lastUpdateUser") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        body: dict[str, Any] = {
            "policyType": self.policy_type,
            "queryId": self.query_id,
            "title": self.title,
            "enabled": self.enabled,
            "description": self.description,
            "remediation": self.remediation,
            "severity": self.severity,
            "evalFrequency": self.eval_frequency,
            "limit": self.limit,
            "alertEnabled": self.alert_enabled,
            "alertProfile": self.alert_profile,
        }
        if self.policy_id:
            body["policyId"] = self.policy_id
        if self.tags:
            body["tags"] = list(self.tags)
        return body


def new_policy(
    query_id: str,
    title: str,
    severity: str,
    description: str = "",
    remediation: str = "",
    policy_id: str = "",
    **fields: Any,
) -> Policy:
    if severity.lower() not in POLICY_SEVERITIES:
        raise ConfigurationError(f"invalid severity '{severity}'")
    return Policy(
        policy_id=policy_id,
        query_id=query_id,
        title=title,
        severity=severity.lower(),
        description=description,
        remediation=remediation,
        **fields,
    )


@dataclass(frozen=True)
class PolicyExceptionConstraint:
    field_key: str
    field_values: list[str] = field(default_factory=list)

    def to_dict(self) -> dict[str, Any]:
        return {"fieldKey": self.field_key, "fieldValues": list(self.field_values)}


@dataclass(frozen=True)
class PolicyException:
    description: str = ""
    constraints: list[PolicyExceptionConstraint] = field(default_factory=list)
    exception_id: str = ""
    last_update_time: str = ""
    last_update_user: str = ""

    @staticmethod
    def from_dict(raw: dict[str, Any]) -> "PolicyException":
        return PolicyException(
            description=str(raw.get("description") or ""),
            constraints=[
                PolicyExceptionConstraint(
                    field_key=str(item.get("fieldKey") or ""),
                    field_values=list(item.get("fieldValues") or []),
                )
                for item in raw.get("constraints") or []
            ],
            exception_id=str(raw.get("exceptionId") or ""),
            last_update_time=str(raw.get("lastUpdateTime") or ""),
            last_update_user=str(raw.get("lastUpdateUser") or ""),
        )

    def to_dict(self) -> dict[str, Any]:
        # the server rejects exceptionId and the lastUpdate fields
        return {
            "description": self.description,
            "constraints": [constraint.to_dict() for constraint in self.constraints],
        }


class PolicyExceptionsApi(ServiceApi):
    """Exceptions attached to a single policy, reachable as ``policies.exceptions``."""

    path = "Exceptions"

    def list(self, policy_id: str) -> list[PolicyException]:
        _require(policy_id, "specify a policy ID")
        response = self._request("GET", self.path, params={"policyId": policy_id})
        items = response.get("data") if isinstance(response, dict) else None
        return [PolicyException.from_dict(item) for item in items or []]

    def get(self, policy_id: str, exception_id: str) -> PolicyException:
        _require(policy_id and exception_id, "specify exception and policy IDs")
        response = self._request("GET", f"{self.path}/{exception_id}", params={"policyId": policy_id})
        return PolicyException.from_dict(_single(response))

    def create(self, policy_id: str, exception: PolicyException) -> PolicyException:
        _require(policy_id, "specify a policy ID")
        response = self._request("POST", self.path, payload=exception, params={"policyId": policy_id})
        return PolicyException.from_dict(_single(response))

    def update(self, policy_id: str, exception: PolicyException) -> PolicyException:
        _require(policy_id and exception.exception_id, "specify exception and policy IDs")
        response = self._request(
            "PATCH",
            f"{self.path}/{exception.exception_id}",
            payload=exception,
            params={"policyId": policy_id},
        )
        return PolicyException.from_dict(_single(response))

    def delete(self, policy_id: str, exception_id: str) -> None:
        _require(policy_id and exception_id, "specify exception and policy IDs")
        self._request("DELETE", f"{self.path}/{exception_id}", params={"policyId": policy_id})


def _require(value: Any, message: str) -> None:
    if not value:
        raise ConfigurationError(message)


class PoliciesApi(ResourceApi):
    descriptor = ResourceDescriptor(path="Policies", guid_field="policyId", model=Policy)

    def __init__(self, http_client: HttpClient, auth_manager: AuthManager):
        super().__init__(http_client, auth_manager)
        self.exceptions = PolicyExceptionsApi(http_client, auth_manager)

    def update_policy(self, policy: Policy) -> Policy:
        return self.update(policy.policy_id, policy)

    def bulk_update(self, changes: list[dict[str, Any]]) -> list[Policy]:
        """Applies partial updates (each with a ``policyId``) to many policies at once."""
        for change in changes:
            _require(change.get("policyId"), "specify a policy ID")
        response = self._request("PATCH", self.descriptor.path, payload=changes)
        return self._decode_many(response)
