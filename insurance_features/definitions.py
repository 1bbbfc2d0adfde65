"""
Declared feature flags and their compile-time defaults.

Defaults are what every query returns until the flag provider is set up, and
what the application keeps using when the remote service is unreachable.
"""

from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from types import MappingProxyType

NAMESPACE = "insurancestack"


@dataclass(frozen=True)
class FlagDefinition:
    name: str
    default: bool
    description: str = ""


class FlagContainer(Mapping[str, FlagDefinition]):
    """Ordered, read-only collection of flag definitions keyed by name."""

    def __init__(self, definitions: Iterable[FlagDefinition]):
        flags: dict[str, FlagDefinition] = {}
        for definition in definitions:
            if definition.name in flags:
                raise ValueError(f"Duplicate feature flag name: {definition.name!r}")
            flags[definition.name] = definition
        self._flags = MappingProxyType(flags)

    def __getitem__(self, name: str) -> FlagDefinition:
        return self._flags[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._flags)

    def __len__(self) -> int:
        return len(self._flags)

    def __repr__(self) -> str:
        return f"FlagContainer({list(self._flags)})"

    def defaults(self) -> dict[str, bool]:
        return {name: definition.default for name, definition in self._flags.items()}


ALERTS_BANNER = FlagDefinition(
    "alerts_banner", True, "Top banner for important alerts and notifications"
)
CLAIMS_FILTERS = FlagDefinition(
    "claims_filters", True, "Advanced filtering for the claims list"
)
PAYMENTS_FILTERS = FlagDefinition(
    "payments_filters", True, "Advanced filtering for the payments list"
)
ENHANCED_POLICY_VIEW = FlagDefinition(
    "enhanced_policy_view", False, "Enhanced policy detail view with additional information"
)
QUICK_CLAIM_FILING = FlagDefinition(
    "quick_claim_filing", True, "Streamlined claim filing process"
)

INSURANCE_FLAGS = FlagContainer(
    [
        ALERTS_BANNER,
        CLAIMS_FILTERS,
        PAYMENTS_FILTERS,
        ENHANCED_POLICY_VIEW,
        QUICK_CLAIM_FILING,
    ]
)
