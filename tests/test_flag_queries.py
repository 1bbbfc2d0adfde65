import asyncio

import pytest

from insurance_common import flags
from insurance_features import FeatureFlagRuntime, FlagQueries
from insurance_features.definitions import INSURANCE_FLAGS
from insurance_utils import logging_config as logging_module
from tests.fakes import RecordingAdapter, unique_settings
from tests.test_template import TestTemplate


class TestFlagQueries(TestTemplate):
    @pytest.fixture(autouse=True)
    def setup_shared_variables(self, setup):
        self.adapter = RecordingAdapter()
        self.runtime = FeatureFlagRuntime(adapter=self.adapter, settings=unique_settings())
        self.queries = FlagQueries(self.runtime)

    def test_per_flag_accessors_return_defaults(self):
        assert self.queries.is_alerts_banner_enabled() is True
        assert self.queries.is_claims_filters_enabled() is True
        assert self.queries.is_payments_filters_enabled() is True
        assert self.queries.is_enhanced_policy_view_enabled() is False
        assert self.queries.is_quick_claim_filing_enabled() is True

    def test_accessors_read_live_values_not_the_snapshot(self):
        self.runtime.rebuild("custom")
        self.adapter.values["quick_claim_filing"] = False

        assert self.queries.is_quick_claim_filing_enabled() is False
        assert self.runtime.snapshot()["quick_claim_filing"] is True

    def test_all_returns_one_value_per_declared_flag(self):
        self.adapter.values["alerts_banner"] = False
        values = self.queries.all()
        assert list(values) == list(INSURANCE_FLAGS)
        assert values["alerts_banner"] is False

    def test_unknown_flag_raises_key_error(self):
        with pytest.raises(KeyError):
            self.runtime.is_enabled("not_a_flag")


class TestProcessFlags(TestTemplate):
    """The module-level API backed by the process-wide runtime."""

    def test_defaults_before_initialization(self):
        assert flags.is_alerts_banner_enabled() is True
        assert flags.is_enhanced_policy_view_enabled() is False
        assert flags.use_feature_flags() == INSURANCE_FLAGS.defaults()

    def test_set_snapshot_notifies_subscribers_until_unsubscribed(self):
        received = []
        unsubscribe = flags.subscribe_flags(lambda reason, snapshot: received.append(reason))

        snapshot = flags.set_flags_snapshot("manual")
        unsubscribe()
        flags.set_flags_snapshot("after")

        assert received == ["manual"]
        assert flags.get_flags_snapshot() is not snapshot
        assert dict(flags.get_flags_snapshot()) == INSURANCE_FLAGS.defaults()

    def test_initialize_with_explicit_key(self, monkeypatch):
        monkeypatch.setattr(logging_module, "_logging_initialized", False)
        received = []
        unsubscribe = flags.subscribe_flags(lambda reason, snapshot: received.append(reason))
        try:
            asyncio.run(flags.initialize_feature_flags({"apiKey": "explicit-key"}))
        finally:
            unsubscribe()

        assert received == ["initialized"]
        assert dict(flags.get_flags_snapshot()) == INSURANCE_FLAGS.defaults()
        assert logging_module._logging_initialized is True
