from __future__ import annotations

import platform
import uuid
from dataclasses import dataclass, field
from typing import Any

from lacework_client.apis.resource_api import ServiceApi
from lacework_client.models import to_json_dict
from lacework_client.version import __version__


@dataclass
class Honeyvent:
    """A usage event reported to the platform's metrics endpoint."""

    os: str = ""
    arch: str = ""
    version: str = ""
    command: str = ""
    args: list[str] = field(default_factory=list)
    flags: list[str] = field(default_factory=list)
    duration_ms: int = 0
    error: str = ""
    trace_id: str = ""
    span_id: str = ""
    account: str = ""
    subaccount: str = ""
    profile: str = ""
    feature: str = ""
    feature_data: Any = None
    install_method: str = ""
    cfg_version: int = 0

    def to_dict(self) -> dict[str, Any]:
        body = {
            "os": self.os,
            "arch": self.arch,
            "version": self.version,
            "command": self.command,
            "args": list(self.args),
            "flags": list(self.flags),
            "duration_ms": self.duration_ms,
            "error": self.error,
            "trace_id": self.trace_id,
            "span_id": self.span_id,
            "account": self.account,
            "subaccount": self.subaccount,
            "profile": self.profile,
            "feature": self.feature,
            "feature.data": to_json_dict(self.feature_data),
            "install_method": self.install_method,
            "cfg_version": self.cfg_version,
        }
        return {key: value for key, value in body.items() if value not in ("", None, [])}


def new_id() -> str:
    return uuid.uuid4().hex


def new_honeyvent(account: str = "", subaccount: str = "", feature: str = "") -> Honeyvent:
    return Honeyvent(
        os=platform.system().lower(),
        arch=platform.machine().lower(),
        version=__version__,
        trace_id=new_id(),
        span_id=new_id()[:16],
        account=account,
        subaccount=subaccount,
        feature=feature,
    )


METRICS_PATH = "Metrics"


class MetricsApi(ServiceApi):

    def send(self, event: Honeyvent) -> Any:
        return self._request("POST", METRICS_PATH, payload=[event.to_dict()])
