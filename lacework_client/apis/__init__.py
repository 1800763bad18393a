from .agent_access_tokens_api import AgentAccessTokensApi
from .alert_channels_api import AlertChannelsApi
from .alert_profiles_api import AlertProfilesApi
from .alert_rules_api import AlertRulesApi
from .cloud_accounts_api import CloudAccountsApi
from .component_data_api import ComponentDataApi
from .container_registries_api import ContainerRegistriesApi
from .feature_flags_api import FeatureFlagsApi
from .integrations_api import IntegrationsApi
from .metrics_api import MetricsApi
from .policies_api import PoliciesApi
from .queries_api import QueriesApi
from .report_rules_api import ReportRulesApi
from .resource_api import ResourceApi, ResourceDescriptor, ResourceFamily, ServiceApi
from .resource_groups_api import ResourceGroupsApi
from .team_members_api import TeamMembersApi
from .user_profile_api import UserProfileApi

__all__ = [
    "AgentAccessTokensApi",
    "AlertChannelsApi",
    "AlertProfilesApi",
    "AlertRulesApi",
    "CloudAccountsApi",
    "ComponentDataApi",
    "ContainerRegistriesApi",
    "FeatureFlagsApi",
    "IntegrationsApi",
    "MetricsApi",
    "PoliciesApi",
    "QueriesApi",
    "ReportRulesApi",
    "ResourceApi",
    "ResourceDescriptor",
    "ResourceFamily",
    "ResourceGroupsApi",
    "ServiceApi",
    "TeamMembersApi",
    "UserProfileApi",
]
