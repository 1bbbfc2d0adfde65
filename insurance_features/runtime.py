from typing import Any

import httpx
from loguru import logger as log
from pydantic import BaseModel, ConfigDict
from pydantic.alias_generators import to_camel

from insurance_common.config_models import FeatureFlagSettings
from insurance_features.adapter import FetchedResult, FlagAdapter, OpenFeatureAdapter
from insurance_features.definitions import INSURANCE_FLAGS, NAMESPACE, FlagContainer
from insurance_features.key_resolution import (
    KeySource,
    resolve_key,
    runtime_config_source,
    static_source,
)
from insurance_features.snapshot import (
    ERROR,
    FETCHED,
    INITIALIZED,
    Listener,
    Snapshot,
    SnapshotStore,
    SubscriptionRegistry,
)
from insurance_utils.logging_config import register_secret


class FlagRuntimeConfig(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    api_key: str | None = None
    # Accepted for parity with the flag management SDK options; not used
    dev_mode_secret: str | None = None


class FeatureFlagRuntime:
    """
    Owns one flag container, its adapter, the snapshot store and its listeners.

    ``initialize`` is meant to run once per runtime. Calling it again registers
    the container and runs provider setup a second time.
    """

    def __init__(
        self,
        adapter: FlagAdapter | None = None,
        container: FlagContainer = INSURANCE_FLAGS,
        settings: FeatureFlagSettings | None = None,
        environment_key: str | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.adapter = adapter or OpenFeatureAdapter()
        self.container = container
        self.settings = settings or FeatureFlagSettings(namespace=NAMESPACE)
        self.environment_key = environment_key
        self.transport = transport
        self.store = SnapshotStore(self.read_flags, SubscriptionRegistry())

    def key_sources(self, explicit_key: str | None) -> list[KeySource]:
        return [
            static_source("config", explicit_key),
            static_source("environment", self.environment_key),
            runtime_config_source(self.settings, self.transport),
        ]

    async def initialize(self, config: FlagRuntimeConfig | dict[str, Any] | None = None) -> None:
        try:
            if not isinstance(config, FlagRuntimeConfig):
                config = FlagRuntimeConfig.model_validate(config or {})

            self.adapter.register(self.settings.namespace, self.container)

            key = await resolve_key(self.key_sources(config.api_key))
            if key:
                register_secret(key.value)
                await self.adapter.setup(key.value, self._on_fetched)
                log.info("Feature flag provider initialized (key from {})", key.source)
            else:
                log.warning(
                    "No flag management key provided, using default flag values. "
                    "Set ROX_API_KEY to connect to the flag management service."
                )
                await self.adapter.setup("", self._on_fetched)

            self.rebuild(INITIALIZED)
        except Exception as e:
            log.opt(exception=e).error("Failed to initialize feature flags")
            self.rebuild(ERROR)

    def _on_fetched(self, result: FetchedResult) -> None:
        log.info(
            "Flag configuration fetched (has_changes={}, source={})",
            result.has_changes,
            result.source,
        )
        self.rebuild(FETCHED)

    def is_enabled(self, name: str) -> bool:
        return self.adapter.is_enabled(self.container[name])

    def read_flags(self) -> dict[str, bool]:
        return {
            name: self.adapter.is_enabled(definition)
            for name, definition in self.container.items()
        }

    def snapshot(self) -> Snapshot:
        return self.store.current()

    def rebuild(self, reason: str) -> Snapshot:
        return self.store.rebuild(reason)

    def subscribe(self, callback: Listener):
        return self.store.registry.subscribe(callback)

    def close(self) -> None:
        close = getattr(self.adapter, "close", None)
        if close is not None:
            close()
