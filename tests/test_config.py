"""Tests for the configuration module."""

import os
import tempfile

import pytest
import yaml

from generic_sink.config import (
    AppConfig,
    ConfigError,
    GenericSinkConfig,
    SinkSettings,
    load_config,
)


def test_load_config_defaults():
    """Loading from a non-existent file returns defaults."""
    cfg = load_config("/tmp/nonexistent_generic_sink.yaml")
    assert isinstance(cfg, AppConfig)
    assert cfg.sink.endpoint == "http://localhost:8080/metrics"
    assert cfg.sink.batch_size == 1000
    assert cfg.sink.tags == []
    assert cfg.http.timeout_seconds == 10.0
    assert cfg.http.retries == 0
    assert cfg.tracing.enabled is False
    assert cfg.tracing.endpoint == "http://localhost:4318"


def test_load_config_from_yaml():
    """Loading from a YAML file populates values."""
    data = {
        "sink": {
            "endpoint": "https://collector.example.com/v1/metrics",
            "batch_size": 250,
            "tags": ["region:us-east-1", "host:web-1"],
            "source": "web-1",
            "environment": "production",
            "namespace": "frontend",
            "unknown_key": "ignored",
        },
        "http": {"timeout_seconds": 2.5, "retries": 3},
        "tracing": {"enabled": True, "service_name": "my-sink"},
    }
    with tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False) as fh:
        yaml.dump(data, fh)
        path = fh.name

    try:
        cfg = load_config(path)
        assert cfg.sink.batch_size == 250
        assert cfg.sink.tags == ["region:us-east-1", "host:web-1"]
        assert cfg.http.retries == 3
        assert cfg.tracing.enabled is True
        assert cfg.tracing.service_name == "my-sink"

        sink_cfg = cfg.sink.to_sink_config()
        assert isinstance(sink_cfg, GenericSinkConfig)
        assert sink_cfg.tags == ("region:us-east-1", "host:web-1")
        assert sink_cfg.environment == "production"
        assert sink_cfg.namespace == "frontend"
    finally:
        os.unlink(path)


def test_env_override(monkeypatch):
    """Environment variables override YAML values."""
    data = {"sink": {"batch_size": 10, "source": "from-yaml"}}
    with tempfile.NamedTemporaryFile("w", suffix=".yaml", delete=False) as fh:
        yaml.dump(data, fh)
        path = fh.name

    try:
        monkeypatch.setenv("GENERIC_SINK_BATCH_SIZE", "50")
        monkeypatch.setenv("GENERIC_SINK_SOURCE", "from-env")
        monkeypatch.setenv("GENERIC_SINK_TAGS", "a:1, b:2,,")
        monkeypatch.setenv("GENERIC_SINK_HTTP_TIMEOUT", "0.5")
        cfg = load_config(path)
        assert cfg.sink.batch_size == 50
        assert cfg.sink.source == "from-env"
        assert cfg.sink.tags == ["a:1", "b:2"]
        assert cfg.http.timeout_seconds == 0.5
    finally:
        os.unlink(path)


def test_bad_env_value(monkeypatch):
    """A non-numeric batch size override is a configuration error."""
    monkeypatch.setenv("GENERIC_SINK_BATCH_SIZE", "lots")
    with pytest.raises(ConfigError):
        load_config("/tmp/nonexistent_generic_sink.yaml")


def test_malformed_yaml(tmp_path):
    """Unparseable YAML is a configuration error."""
    path = tmp_path / "bad.yaml"
    path.write_text("sink: [unclosed\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


def test_section_must_be_mapping(tmp_path):
    """Config sections must be mappings."""
    path = tmp_path / "bad.yaml"
    path.write_text("sink: 12\n", encoding="utf-8")
    with pytest.raises(ConfigError):
        load_config(path)


@pytest.mark.parametrize("batch_size", [0, -5])
def test_sink_settings_reject_non_positive_batch(batch_size):
    """Settings with a batch size below 1 cannot build a sink."""
    with pytest.raises(ConfigError):
        SinkSettings(batch_size=batch_size).to_sink_config()


def test_batch_size_must_be_int():
    """The batch size must be a real integer."""
    with pytest.raises(ConfigError):
        GenericSinkConfig(endpoint="http://localhost/x", batch_size="10")  # type: ignore[arg-type]
    with pytest.raises(ConfigError):
        GenericSinkConfig(endpoint="http://localhost/x", batch_size=True)


@pytest.mark.parametrize("tags", ["region:us", ["a:b", 5], 5, None])
def test_tags_must_be_list_of_strings(tags):
    """Strings, scalars and non-string elements are rejected as tags."""
    with pytest.raises(ConfigError):
        GenericSinkConfig(endpoint="http://localhost/x", batch_size=10, tags=tags)  # type: ignore[arg-type]


def test_scalar_tags_in_yaml_rejected(tmp_path):
    """A scalar tags value in YAML is not split into characters."""
    path = tmp_path / "tags.yaml"
    path.write_text("sink:\n  tags: region:us\n", encoding="utf-8")
    cfg = load_config(path)
    with pytest.raises(ConfigError):
        cfg.sink.to_sink_config()
