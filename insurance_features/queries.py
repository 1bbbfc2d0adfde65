from insurance_features.definitions import (
    ALERTS_BANNER,
    CLAIMS_FILTERS,
    ENHANCED_POLICY_VIEW,
    PAYMENTS_FILTERS,
    QUICK_CLAIM_FILING,
)
from insurance_features.runtime import FeatureFlagRuntime


class FlagQueries:
    """Live per-flag lookups. Values come from the adapter, not the snapshot."""

    def __init__(self, runtime: FeatureFlagRuntime):
        self.runtime = runtime

    def is_alerts_banner_enabled(self) -> bool:
        return self.runtime.is_enabled(ALERTS_BANNER.name)

    def is_claims_filters_enabled(self) -> bool:
        return self.runtime.is_enabled(CLAIMS_FILTERS.name)

    def is_payments_filters_enabled(self) -> bool:
        return self.runtime.is_enabled(PAYMENTS_FILTERS.name)

    def is_enhanced_policy_view_enabled(self) -> bool:
        return self.runtime.is_enabled(ENHANCED_POLICY_VIEW.name)

    def is_quick_claim_filing_enabled(self) -> bool:
        return self.runtime.is_enabled(QUICK_CLAIM_FILING.name)

    def all(self) -> dict[str, bool]:
        """One-shot read of every declared flag."""
        return self.runtime.read_flags()
