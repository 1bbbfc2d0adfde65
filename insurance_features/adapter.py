"""
Remote flag client adapter.

The runtime only depends on the ``FlagAdapter`` shape. ``OpenFeatureAdapter``
implements it on top of the OpenFeature SDK: the container namespace becomes an
OpenFeature domain, and the resolved key is turned into a provider by a
pluggable factory. Without a vendor factory the adapter serves the declared
defaults from an ``InMemoryProvider``.
"""

import asyncio
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from typing import Protocol

from loguru import logger as log
from openfeature import api
from openfeature.event import EventDetails, ProviderEvent
from openfeature.provider import FeatureProvider, ProviderStatus
from openfeature.provider.in_memory_provider import InMemoryFlag, InMemoryProvider
from openfeature.provider.no_op_provider import NoOpProvider

from insurance_features.definitions import FlagContainer, FlagDefinition
from insurance_features.errors import FlagRegistrationError, FlagSetupError


@dataclass(frozen=True)
class FetchedResult:
    """Describes a configuration update pushed by the flag provider."""

    has_changes: bool
    source: str | None = None
    flags_changed: list[str] = field(default_factory=list)


FetchedHandler = Callable[[FetchedResult], None]

# (key, defaults by flag key) -> provider
ProviderFactory = Callable[[str, Mapping[str, bool]], FeatureProvider]


class FlagAdapter(Protocol):
    def register(self, namespace: str, container: FlagContainer) -> None: ...

    async def setup(self, key: str, on_fetched: FetchedHandler) -> None: ...

    def is_enabled(self, flag: FlagDefinition) -> bool: ...


def _boolean_flag(value: bool) -> InMemoryFlag:
    return InMemoryFlag(
        default_variant="on" if value else "off",
        variants={"on": True, "off": False},
    )


def offline_provider(key: str, defaults: Mapping[str, bool]) -> FeatureProvider:
    """Provider that serves the declared defaults, ignoring the key."""
    return InMemoryProvider({name: _boolean_flag(value) for name, value in defaults.items()})


class OpenFeatureAdapter:
    def __init__(self, provider_factory: ProviderFactory | None = None):
        self._provider_factory = provider_factory or offline_provider
        self._namespace: str | None = None
        self._container: FlagContainer | None = None
        self._client = None
        self._handler: Callable[[EventDetails], None] | None = None

    @property
    def namespace(self) -> str | None:
        return self._namespace

    def flag_key(self, name: str) -> str:
        return f"{self._namespace}.{name}"

    def register(self, namespace: str, container: FlagContainer) -> None:
        if self._container is not None:
            log.warning("Feature flag container re-registered under '{}'", namespace)
            self._detach_handler()
        self._namespace = namespace
        self._container = container
        self._client = api.get_client(domain=namespace)
        log.debug("Registered {} feature flags under '{}'", len(container), namespace)

    async def setup(self, key: str, on_fetched: FetchedHandler) -> None:
        if self._container is None or self._client is None:
            raise FlagRegistrationError("register() must be called before setup()")

        defaults = {
            self.flag_key(name): definition.default
            for name, definition in self._container.items()
        }
        provider = self._provider_factory(key, defaults)

        def handle_configuration_changed(details: EventDetails) -> None:
            on_fetched(
                FetchedResult(
                    has_changes=details.flags_changed is None or bool(details.flags_changed),
                    source=details.provider_name,
                    flags_changed=list(details.flags_changed or []),
                )
            )

        self._detach_handler()
        self._handler = handle_configuration_changed
        self._client.add_handler(
            ProviderEvent.PROVIDER_CONFIGURATION_CHANGED, handle_configuration_changed
        )

        # Provider initialization may block on network I/O
        try:
            await asyncio.to_thread(api.set_provider, provider, self._namespace)
        except Exception as e:
            raise FlagSetupError(f"Flag provider setup failed: {e}") from e

        status = self._client.get_provider_status()
        if status in (ProviderStatus.ERROR, ProviderStatus.FATAL):
            raise FlagSetupError(
                f"Flag provider {provider.get_metadata().name!r} failed to initialize "
                f"(status: {status.value})"
            )

    def is_enabled(self, flag: FlagDefinition) -> bool:
        if self._client is None:
            return flag.default
        return self._client.get_boolean_value(self.flag_key(flag.name), flag.default)

    def close(self) -> None:
        """Detach the change handler and drop the provider for this namespace."""
        self._detach_handler()
        if self._namespace is not None:
            api.set_provider(NoOpProvider(), self._namespace)

    def _detach_handler(self) -> None:
        if self._handler is not None and self._client is not None:
            self._client.remove_handler(
                ProviderEvent.PROVIDER_CONFIGURATION_CHANGED, self._handler
            )
        self._handler = None
