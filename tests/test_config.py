# ABOUTME: Tests for environment-driven application configuration
# ABOUTME: Validates defaults, ALCHEMY_SCRIBE_ overrides and the cached global instance

import pytest
from pydantic import ValidationError

from alchemy_scribe.config import DEFAULT_SOURCE_URL, Config, get_config, reload_config


@pytest.fixture(autouse=True)
def fresh_config():
    yield
    reload_config()


class TestConfig:
    """Test configuration loading."""

    def test_defaults(self, monkeypatch):
        monkeypatch.delenv("ALCHEMY_SCRIBE_SOURCE_URL", raising=False)
        config = Config()

        assert config.source_url == DEFAULT_SOURCE_URL
        assert config.heading_level == "h3"
        assert config.table_class == "list-table"
        assert config.output_path.name == "elements.json"
        assert config.icon_extension == "svg"
        assert config.request_delay == 0.1
        assert config.max_redirects == 5
        assert config.fetch_attempts == 3

    def test_environment_overrides(self, monkeypatch):
        monkeypatch.setenv("ALCHEMY_SCRIBE_SOURCE_URL", "https://mirror.example/Elements")
        monkeypatch.setenv("ALCHEMY_SCRIBE_REQUEST_DELAY", "0")
        monkeypatch.setenv("ALCHEMY_SCRIBE_ICONS_DIR", "/tmp/icons")

        config = reload_config()

        assert config.source_url == "https://mirror.example/Elements"
        assert config.request_delay == 0
        assert str(config.icons_dir) == "/tmp/icons"

    def test_invalid_values_rejected(self):
        with pytest.raises(ValidationError):
            Config(request_delay=-1)
        with pytest.raises(ValidationError):
            Config(fetch_attempts=0)
        with pytest.raises(ValidationError):
            Config(log_level="VERBOSE")

    def test_get_config_is_cached(self):
        assert get_config() is get_config()

    def test_reload_config_replaces_instance(self):
        first = get_config()
        assert reload_config() is not first
