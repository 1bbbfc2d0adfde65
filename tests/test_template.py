import pytest

from insurance_common import global_config


class TestTemplate:
    """Base class for test suites; exposes the loaded config as ``self.config``."""

    @pytest.fixture(autouse=True)
    def setup(self):
        self.config = global_config
        yield
