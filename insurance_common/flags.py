"""
Process-wide feature flags for the insurance UI.

Importing this module builds the default runtime without any I/O. Call
``initialize_feature_flags()`` once at startup; until it completes every flag
reads as its declared default.
"""

from insurance_common.global_config import global_config
from insurance_features import FeatureFlagRuntime, FlagQueries
from insurance_features.runtime import FlagRuntimeConfig
from insurance_features.snapshot import Listener, Snapshot
from insurance_utils.logging_config import setup_logging

runtime = FeatureFlagRuntime(
    settings=global_config.feature_flags,
    environment_key=global_config.ROX_API_KEY,
)
queries = FlagQueries(runtime)


async def initialize_feature_flags(config: FlagRuntimeConfig | dict | None = None) -> None:
    """Install process logging, then resolve the key and connect the flag provider."""
    setup_logging()
    await runtime.initialize(config)


is_alerts_banner_enabled = queries.is_alerts_banner_enabled
is_claims_filters_enabled = queries.is_claims_filters_enabled
is_payments_filters_enabled = queries.is_payments_filters_enabled
is_enhanced_policy_view_enabled = queries.is_enhanced_policy_view_enabled
is_quick_claim_filing_enabled = queries.is_quick_claim_filing_enabled


def get_flags_snapshot() -> Snapshot:
    return runtime.snapshot()


def set_flags_snapshot(reason: str) -> Snapshot:
    """Rebuild the snapshot from live flag values and notify subscribers."""
    return runtime.rebuild(reason)


def subscribe_flags(callback: Listener):
    """Register ``callback(reason, snapshot)``; returns a function that unsubscribes it."""
    return runtime.subscribe(callback)


def use_feature_flags() -> dict[str, bool]:
    return queries.all()
