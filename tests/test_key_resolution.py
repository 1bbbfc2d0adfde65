import asyncio

import httpx
import pytest

from insurance_features.key_resolution import (
    KeySource,
    ResolvedKey,
    fetch_runtime_key,
    resolve_key,
    runtime_config_source,
    static_source,
)
from tests.fakes import (
    failing_transport,
    json_transport,
    redirecting_transport,
    unique_settings,
)
from tests.test_template import TestTemplate


def _sources(explicit=None, environment=None, transport=None):
    return [
        static_source("config", explicit),
        static_source("environment", environment),
        runtime_config_source(unique_settings(), transport),
    ]


class TestKeyResolution(TestTemplate):
    @pytest.fixture(autouse=True)
    def setup_shared_variables(self, setup):
        self.requests = []
        self.document = json_transport({"envKey": "runtime-key"}, calls=self.requests)

    def test_explicit_key_wins_over_every_other_source(self):
        key = asyncio.run(resolve_key(_sources("explicit-key", "env-key", self.document)))
        assert key == ResolvedKey("explicit-key", "config")
        assert self.requests == []

    def test_environment_key_used_when_no_explicit_key(self):
        key = asyncio.run(resolve_key(_sources("", "env-key", self.document)))
        assert key == ResolvedKey("env-key", "environment")
        assert self.requests == []

    def test_runtime_document_used_last(self):
        key = asyncio.run(resolve_key(_sources(None, None, self.document)))
        assert key == ResolvedKey("runtime-key", "runtime_config")
        assert self.requests == ["http://flags.test/config/fm.json"]

    def test_priority_holds_for_every_permutation(self):
        for explicit in ("", "explicit-key"):
            for environment in ("", "env-key"):
                key = asyncio.run(
                    resolve_key(_sources(explicit, environment, self.document))
                )
                expected = explicit or environment or "runtime-key"
                assert key.value == expected

    def test_no_key_anywhere_resolves_to_empty(self):
        key = asyncio.run(resolve_key(_sources(transport=json_transport({}))))
        assert key == ResolvedKey()
        assert not key
        assert key.value == ""

    def test_sources_after_first_hit_are_not_tried(self):
        tried = []

        def source(name, value):
            async def resolve():
                tried.append(name)
                return value

            return KeySource(name, resolve)

        key = asyncio.run(resolve_key([source("a", ""), source("b", "k"), source("c", "x")]))
        assert key.value == "k"
        assert tried == ["a", "b"]


class TestRuntimeConfigFetch(TestTemplate):
    def _fetch(self, transport):
        async def run():
            async with httpx.AsyncClient(
                base_url="http://flags.test/", transport=transport
            ) as client:
                return await fetch_runtime_key(client, "config/fm.json", "envKey")

        return asyncio.run(run())

    def test_reads_designated_field(self):
        assert self._fetch(json_transport({"envKey": "abc123"})) == "abc123"

    def test_non_200_is_treated_as_missing(self):
        assert self._fetch(json_transport({"envKey": "abc123"}, status_code=404)) == ""

    def test_malformed_json_is_treated_as_missing(self):
        assert self._fetch(json_transport("{not json")) == ""

    def test_non_object_document_is_treated_as_missing(self):
        assert self._fetch(json_transport(["envKey"])) == ""

    def test_non_string_field_is_treated_as_missing(self):
        assert self._fetch(json_transport({"envKey": 42})) == ""

    def test_network_failure_is_treated_as_missing(self):
        assert self._fetch(failing_transport()) == ""

    def test_redirected_runtime_document_is_followed(self):
        requests = []
        for status_code in (301, 302, 307):
            requests.clear()
            source = runtime_config_source(
                unique_settings(),
                redirecting_transport({"envKey": "abc123"}, requests, status_code),
            )
            assert asyncio.run(source.resolve()) == "abc123"
            assert requests == [
                "http://flags.test/config/fm.json",
                "http://flags.test/v2/config/fm.json",
            ]
