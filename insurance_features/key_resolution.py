"""
Access key resolution for the flag management service.

Sources are tried in order and the first non-empty key wins:
explicit argument > build-time environment constant > runtime config document.
Finding no key at all is a valid outcome; callers fall back to default flags.
"""

from collections.abc import Awaitable, Callable, Sequence
from dataclasses import dataclass

import httpx
from loguru import logger as log

from insurance_common.config_models import FeatureFlagSettings


@dataclass(frozen=True)
class KeySource:
    name: str
    resolve: Callable[[], Awaitable[str]]


@dataclass(frozen=True)
class ResolvedKey:
    value: str = ""
    source: str | None = None

    def __bool__(self) -> bool:
        return bool(self.value)


def static_source(name: str, value: str | None) -> KeySource:
    async def resolve() -> str:
        return value or ""

    return KeySource(name, resolve)


async def fetch_runtime_key(
    client: httpx.AsyncClient, path: str, field_name: str
) -> str:
    """Read the key from the runtime config document, or return "" if unavailable."""
    try:
        response = await client.get(path)
    except httpx.HTTPError as e:
        log.info("No runtime config found at {}, using defaults ({})", path, type(e).__name__)
        return ""

    if response.status_code != 200:
        log.info("Runtime config {} returned HTTP {}", path, response.status_code)
        return ""

    try:
        document = response.json()
    except ValueError:
        log.info("Runtime config {} is not valid JSON", path)
        return ""

    if not isinstance(document, dict):
        log.info("Runtime config {} is not a JSON object", path)
        return ""

    value = document.get(field_name)
    if not isinstance(value, str):
        return ""
    return value


def runtime_config_source(
    settings: FeatureFlagSettings,
    transport: httpx.AsyncBaseTransport | None = None,
) -> KeySource:
    async def resolve() -> str:
        async with httpx.AsyncClient(
            base_url=settings.base_url, transport=transport, follow_redirects=True
        ) as client:
            return await fetch_runtime_key(
                client, settings.runtime_config_path, settings.runtime_config_field
            )

    return KeySource("runtime_config", resolve)


async def resolve_key(sources: Sequence[KeySource]) -> ResolvedKey:
    for source in sources:
        value = await source.resolve()
        if value:
            log.info("Loaded flag management key from {}", source.name)
            return ResolvedKey(value, source.name)
    return ResolvedKey()
