from insurance_features.adapter import (
    FetchedResult,
    FlagAdapter,
    OpenFeatureAdapter,
    offline_provider,
)
from insurance_features.definitions import (
    INSURANCE_FLAGS,
    NAMESPACE,
    FlagContainer,
    FlagDefinition,
)
from insurance_features.errors import (
    FeatureFlagError,
    FlagRegistrationError,
    FlagSetupError,
)
from insurance_features.queries import FlagQueries
from insurance_features.runtime import FeatureFlagRuntime, FlagRuntimeConfig
from insurance_features.snapshot import SnapshotStore, SubscriptionRegistry

__all__ = [
    "FeatureFlagError",
    "FeatureFlagRuntime",
    "FetchedResult",
    "FlagAdapter",
    "FlagContainer",
    "FlagDefinition",
    "FlagQueries",
    "FlagRegistrationError",
    "FlagRuntimeConfig",
    "FlagSetupError",
    "INSURANCE_FLAGS",
    "NAMESPACE",
    "OpenFeatureAdapter",
    "SnapshotStore",
    "SubscriptionRegistry",
    "offline_provider",
]
