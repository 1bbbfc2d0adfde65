import pytest

from insurance_features.definitions import (
    ENHANCED_POLICY_VIEW,
    INSURANCE_FLAGS,
    FlagContainer,
    FlagDefinition,
)
from tests.test_template import TestTemplate


class TestFlagDefinitions(TestTemplate):
    def test_declared_flags_and_defaults(self):
        assert INSURANCE_FLAGS.defaults() == {
            "alerts_banner": True,
            "claims_filters": True,
            "payments_filters": True,
            "enhanced_policy_view": False,
            "quick_claim_filing": True,
        }

    def test_container_preserves_declaration_order(self):
        container = FlagContainer([FlagDefinition("b", True), FlagDefinition("a", False)])
        assert list(container) == ["b", "a"]

    def test_duplicate_names_are_rejected(self):
        with pytest.raises(ValueError, match="Duplicate"):
            FlagContainer([FlagDefinition("a", True), FlagDefinition("a", False)])

    def test_container_is_read_only(self):
        with pytest.raises(TypeError):
            INSURANCE_FLAGS["new_flag"] = FlagDefinition("new_flag", True)  # type: ignore[index]

    def test_definitions_are_frozen(self):
        with pytest.raises(AttributeError):
            ENHANCED_POLICY_VIEW.default = True  # type: ignore[misc]
