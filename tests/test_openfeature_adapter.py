import asyncio

import pytest

from insurance_features import FlagRegistrationError, FlagSetupError, OpenFeatureAdapter
from insurance_features.definitions import ALERTS_BANNER, ENHANCED_POLICY_VIEW, INSURANCE_FLAGS
from tests.fakes import FailingProvider, ProviderFactory, unique_settings
from tests.test_template import TestTemplate


class TestOpenFeatureAdapter(TestTemplate):
    @pytest.fixture(autouse=True)
    def setup_shared_variables(self, setup):
        self.namespace = unique_settings().namespace
        self.factory = ProviderFactory()
        self.adapter = OpenFeatureAdapter(self.factory)
        self.fetched = []
        yield
        self.adapter.close()

    def test_unregistered_adapter_returns_defaults(self):
        assert self.adapter.is_enabled(ALERTS_BANNER) is True
        assert self.adapter.is_enabled(ENHANCED_POLICY_VIEW) is False

    def test_registered_adapter_returns_defaults_before_setup(self):
        self.adapter.register(self.namespace, INSURANCE_FLAGS)
        assert self.adapter.is_enabled(ALERTS_BANNER) is True
        assert self.adapter.is_enabled(ENHANCED_POLICY_VIEW) is False

    def test_setup_before_register_is_rejected(self):
        with pytest.raises(FlagRegistrationError):
            asyncio.run(self.adapter.setup("key", self.fetched.append))

    def test_provider_is_seeded_with_namespaced_defaults(self):
        self.adapter.register(self.namespace, INSURANCE_FLAGS)
        asyncio.run(self.adapter.setup("key", self.fetched.append))
        assert self.factory.keys == ["key"]
        assert self.adapter.flag_key("alerts_banner") == f"{self.namespace}.alerts_banner"
        assert self.adapter.is_enabled(ENHANCED_POLICY_VIEW) is False

    def test_configuration_change_reaches_handler(self):
        self.adapter.register(self.namespace, INSURANCE_FLAGS)
        asyncio.run(self.adapter.setup("key", self.fetched.append))

        flag_key = self.adapter.flag_key("enhanced_policy_view")
        self.factory.provider.push({flag_key: True})

        assert len(self.fetched) == 1
        assert self.fetched[0].has_changes is True
        assert self.fetched[0].flags_changed == [flag_key]
        assert self.adapter.is_enabled(ENHANCED_POLICY_VIEW) is True

    def test_failed_provider_raises_setup_error(self):
        adapter = OpenFeatureAdapter(ProviderFactory(FailingProvider))
        adapter.register(self.namespace, INSURANCE_FLAGS)
        try:
            with pytest.raises(FlagSetupError):
                asyncio.run(adapter.setup("key", self.fetched.append))
        finally:
            adapter.close()

    def test_close_detaches_change_handler(self):
        self.adapter.register(self.namespace, INSURANCE_FLAGS)
        asyncio.run(self.adapter.setup("key", self.fetched.append))
        provider = self.factory.provider
        self.adapter.close()

        provider.push({self.adapter.flag_key("alerts_banner"): False})

        assert self.fetched == []
        assert self.adapter.is_enabled(ALERTS_BANNER) is True
