"""
Configuration utilities for LinkVerify.

Provides configuration loading, validation, and merging for the PPRL
engine and its normalization components.
"""

import logging
import yaml
from typing import Dict, Any
from pathlib import Path

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = "config/linkverify.yaml"


def load_config(config_path: str = DEFAULT_CONFIG_PATH) -> Dict[str, Any]:
    """
    Load LinkVerify configuration from YAML file.

    Sections missing from the file are filled in from the defaults.

    Args:
        config_path: Path to configuration file

    Returns:
        Configuration dictionary
    """
    try:
        config_file = Path(config_path)
        if not config_file.exists():
            logger.warning(f"Configuration file {config_path} not found, using defaults")
            return get_default_config()

        with open(config_file, 'r') as f:
            config = yaml.safe_load(f) or {}

        config = merge_configs(get_default_config(), config)

        logger.info(f"Loaded configuration from {config_path}")
        return config

    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to load configuration from {config_path}: {e}")
        return get_default_config()


def get_default_config() -> Dict[str, Any]:
    """
    Get default LinkVerify configuration.

    Returns:
        Default configuration dictionary
    """
    return {
        "pprl": {
            "bloom_filter_size": 1000000,
            "bloom_filter_hash_count": 7,
            "bloom_filter_false_positive_rate": 0.01,
            "hash_algorithm": "SHA-256",
            "salt": ""
        },
        "normalization": {
            "honorifics": ["mr", "mrs", "ms", "dr"]
        }
    }


def validate_config(config: Dict[str, Any]) -> bool:
    """
    Validate LinkVerify configuration.

    Args:
        config: Configuration dictionary

    Returns:
        True if configuration is valid, False otherwise
    """
    required_sections = ["pprl", "normalization"]

    for section in required_sections:
        if section not in config:
            logger.error(f"Missing required configuration section: {section}")
            return False

    # Validate PPRL configuration
    pprl_config = config.get("pprl", {})
    for key in ["bloom_filter_size", "bloom_filter_hash_count"]:
        value = pprl_config.get(key)
        if not isinstance(value, int) or isinstance(value, bool) or value <= 0:
            logger.error(f"pprl.{key} must be a positive integer")
            return False

    fp_rate = pprl_config.get("bloom_filter_false_positive_rate", 0.01)
    if not isinstance(fp_rate, (int, float)) or not 0 < fp_rate < 1:
        logger.error("pprl.bloom_filter_false_positive_rate must be a number between 0 and 1")
        return False

    if not isinstance(pprl_config.get("salt", ""), str):
        logger.error("pprl.salt must be a string")
        return False

    if not pprl_config.get("salt"):
        logger.warning("pprl.salt is empty; digests are open to dictionary attacks")

    # Validate normalization configuration
    honorifics = config.get("normalization", {}).get("honorifics", [])
    if not isinstance(honorifics, list) or not all(isinstance(h, str) for h in honorifics):
        logger.error("normalization.honorifics must be a list of strings")
        return False

    logger.info("Configuration validation passed")
    return True


def merge_configs(base_config: Dict[str, Any], override_config: Dict[str, Any]) -> Dict[str, Any]:
    """
    Merge two configuration dictionaries.

    Args:
        base_config: Base configuration
        override_config: Override configuration

    Returns:
        Merged configuration
    """
    merged = base_config.copy()

    for key, value in override_config.items():
        if key in merged and isinstance(merged[key], dict) and isinstance(value, dict):
            merged[key] = merge_configs(merged[key], value)
        else:
            merged[key] = value

    return merged


def save_config(config: Dict[str, Any], config_path: str) -> bool:
    """
    Save LinkVerify configuration to YAML file.

    Args:
        config: Configuration dictionary
        config_path: Path to save configuration

    Returns:
        True if successful, False otherwise
    """
    try:
        config_file = Path(config_path)
        config_file.parent.mkdir(parents=True, exist_ok=True)

        with open(config_file, 'w') as f:
            yaml.dump(config, f, default_flow_style=False, indent=2)

        logger.info(f"Saved configuration to {config_path}")
        return True

    except (OSError, yaml.YAMLError) as e:
        logger.error(f"Failed to save configuration to {config_path}: {e}")
        return False
