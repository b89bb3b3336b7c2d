"""
Unit tests for configuration loading.
"""

import pytest
import tempfile
import sys
from pathlib import Path

# Add project root to path
sys.path.append(str(Path(__file__).parent.parent))

from linkverify.config import (
    get_default_config,
    load_config,
    merge_configs,
    save_config,
    validate_config,
)
from linkverify.match.pprl_service import PPRLConfig


class TestConfig:
    """Test cases for configuration utilities."""

    def setup_method(self):
        """Setup test fixtures."""
        self.temp_dir = tempfile.mkdtemp()

    def test_missing_file_uses_defaults(self):
        """Test fallback when the file does not exist."""
        config = load_config(str(Path(self.temp_dir) / "missing.yaml"))
        assert config == get_default_config()

    def test_load_merges_defaults(self):
        """Test that partial files are completed from defaults."""
        config_path = Path(self.temp_dir) / "partial.yaml"
        config_path.write_text("pprl:\n  bloom_filter_size: 2048\n  salt: \"s3cret\"\n")

        config = load_config(str(config_path))

        assert config["pprl"]["bloom_filter_size"] == 2048
        assert config["pprl"]["salt"] == "s3cret"
        assert config["pprl"]["bloom_filter_hash_count"] == 7
        assert config["normalization"]["honorifics"] == ["mr", "mrs", "ms", "dr"]

    def test_invalid_yaml_uses_defaults(self):
        """Test fallback on unparseable YAML."""
        config_path = Path(self.temp_dir) / "broken.yaml"
        config_path.write_text("pprl: [unclosed\n")

        assert load_config(str(config_path)) == get_default_config()

    def test_save_and_reload(self):
        """Test saving configuration to YAML."""
        config_path = Path(self.temp_dir) / "nested" / "saved.yaml"
        config = merge_configs(get_default_config(), {"pprl": {"salt": "abc"}})

        assert save_config(config, str(config_path))
        assert load_config(str(config_path)) == config

    def test_validate_defaults(self):
        """Test that defaults are valid."""
        assert validate_config(get_default_config())

    @pytest.mark.parametrize("override", [
        {"pprl": {"bloom_filter_size": 0}},
        {"pprl": {"bloom_filter_hash_count": "7"}},
        {"pprl": {"bloom_filter_false_positive_rate": 1.5}},
        {"pprl": {"salt": 42}},
        {"normalization": {"honorifics": "mr"}},
    ])
    def test_validate_rejects(self, override):
        """Test rejection of invalid values."""
        assert not validate_config(merge_configs(get_default_config(), override))

    def test_validate_missing_section(self):
        """Test rejection of missing sections."""
        assert not validate_config({"pprl": get_default_config()["pprl"]})

    def test_merge_configs(self):
        """Test deep merge."""
        merged = merge_configs({"a": {"b": 1, "c": 2}, "d": 3}, {"a": {"b": 10}, "e": 5})
        assert merged == {"a": {"b": 10, "c": 2}, "d": 3, "e": 5}

    def test_pprl_config_from_dict(self):
        """Test building PPRLConfig from full or sectional config."""
        config = merge_configs(get_default_config(), {"pprl": {"salt": "abc", "bloom_filter_size": 512}})

        pprl_config = PPRLConfig.from_dict(config)
        assert pprl_config.salt == "abc"
        assert pprl_config.bloom_filter_size == 512
        assert pprl_config.bloom_filter_hash_count == 7

        assert PPRLConfig.from_dict(config["pprl"]) == pprl_config
        assert PPRLConfig.from_dict({}) == PPRLConfig()


if __name__ == "__main__":
    pytest.main([__file__])
