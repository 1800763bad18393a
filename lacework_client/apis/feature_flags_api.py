from __future__ import annotations

from lacework_client.apis.resource_api import ServiceApi


FEATURE_FLAGS_PATH = "FeatureFlags"


class FeatureFlagsApi(ServiceApi):

    def get_feature_flags_matching_prefix(self, prefix: str) -> list[str]:
        response = self._request("GET", f"{FEATURE_FLAGS_PATH}/{prefix}")
        data = response.get("data") if isinstance(response, dict) else None
        if not isinstance(data, dict):
            return []
        return [str(flag) for flag in data.get("flags") or []]

    def is_enabled(self, flag: str) -> bool:
        return flag in self.get_feature_flags_matching_prefix(flag)
