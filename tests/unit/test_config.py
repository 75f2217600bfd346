"""Tests for configuration loading."""

import os
import tempfile
from pathlib import Path

import yaml

from metacid.config import DEFAULT_GATEWAY, MetaCIDConfig, _interpolate_env, load_config


def test_default_config():
    config = MetaCIDConfig()
    assert config.rpc.url is None
    assert config.gateway.url == DEFAULT_GATEWAY
    assert config.logging.level == "WARNING"


def test_env_interpolation():
    os.environ["TEST_VAR_METACID"] = "hello"
    assert _interpolate_env("${TEST_VAR_METACID}") == "hello"
    del os.environ["TEST_VAR_METACID"]


def test_env_interpolation_default():
    assert _interpolate_env("${NONEXISTENT_VAR_METACID:fallback}") == "fallback"


def test_load_config_from_file():
    config_data = {
        "rpc": {"url": "${NONEXISTENT_VAR_METACID:https://rpc.example}", "timeout": 3},
        "gateway": {"url": "https://dweb.link"},
    }
    with tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False) as f:
        yaml.dump(config_data, f)
        path = f.name

    try:
        config = load_config(path)
        assert config.rpc.url == "https://rpc.example"
        assert config.rpc.timeout == 3.0
        assert config.gateway.url == "https://dweb.link"
        assert config.logging.json_output is False
    finally:
        Path(path).unlink()


def test_load_config_missing_file_uses_defaults():
    config = load_config("/nonexistent/metacid.yaml")
    assert config == MetaCIDConfig()
