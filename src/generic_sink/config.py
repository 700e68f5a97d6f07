"""Configuration loading and validation for generic_sink."""

from __future__ import annotations

import os
from dataclasses import asdict, dataclass, field
from pathlib import Path
from typing import Any

import httpx
import yaml


class ConfigError(ValueError):
    """Raised when the sink cannot be built from the given configuration."""


@dataclass(frozen=True)
class GenericSinkConfig:
    """Immutable settings of a :class:`~generic_sink.sinks.generic.GenericMetricSink`.

    Validated on construction: the endpoint must be an absolute http(s) URL
    ``batch_size`` must be at least 1 and
    ``tags`` must be a list or tuple of strings.
    """

    endpoint: str
    batch_size: int
    tags: tuple[str, ...] = ()
    source: str = ""
    environment: str = ""
    namespace: str = ""

    def __post_init__(self) -> None:
        object.__setattr__(self, "tags", _validate_tags(self.tags))
        _validate_endpoint(self.endpoint)
        if isinstance(self.batch_size, bool) or not isinstance(self.batch_size, int):
            raise ConfigError(f"batch_size must be an integer, got {self.batch_size!r}")
        if self.batch_size < 1:
            raise ConfigError(f"batch_size must be at least 1, got {self.batch_size}")


def _validate_tags(tags: Any) -> tuple[str, ...]:
    # a bare string would otherwise be split into one tag per character
    if isinstance(tags, str) or not isinstance(tags, (list, tuple)):
        raise ConfigError(f"tags must be a list of strings, got {tags!r}")
    for tag in tags:
        if not isinstance(tag, str):
            raise ConfigError(f"tags must be strings, got {tag!r}")
    return tuple(tags)


def _validate_endpoint(endpoint: str) -> None:
    try:
        url = httpx.URL(endpoint)
    except (httpx.InvalidURL, TypeError) as exc:
        raise ConfigError(f"invalid endpoint {endpoint!r}: {exc}") from exc
    if url.scheme not in ("http", "https") or not url.host:
        raise ConfigError(f"endpoint must be an absolute http(s) URL, got {endpoint!r}")


@dataclass
class SinkSettings:
    """Generic sink settings."""

    endpoint: str = "http://localhost:8080/metrics"
    batch_size: int = 1000
    tags: list[str] = field(default_factory=list)
    source: str = ""
    environment: str = ""
    namespace: str = ""

    def to_sink_config(self) -> GenericSinkConfig:
        return GenericSinkConfig(
            endpoint=self.endpoint,
            batch_size=self.batch_size,
            tags=self.tags,
            source=self.source,
            environment=self.environment,
            namespace=self.namespace,
        )


@dataclass
class HttpSettings:
    """HTTP client settings."""

    timeout_seconds: float = 10.0
    retries: int = 0
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class TracingSettings:
    """OpenTelemetry tracing settings."""

    enabled: bool = False
    endpoint: str = "http://localhost:4318"
    service_name: str = "generic-sink"
    headers: dict[str, str] = field(default_factory=dict)


@dataclass
class AppConfig:
    """Top-level generic_sink configuration."""

    sink: SinkSettings = field(default_factory=SinkSettings)
    http: HttpSettings = field(default_factory=HttpSettings)
    tracing: TracingSettings = field(default_factory=TracingSettings)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)


def _split_tags(value: str) -> list[str]:
    return [t.strip() for t in value.split(",") if t.strip()]


_ENV_MAP: dict[str, tuple[tuple[str, ...], Any]] = {
    "GENERIC_SINK_ENDPOINT": (("sink", "endpoint"), str),
    "GENERIC_SINK_BATCH_SIZE": (("sink", "batch_size"), int),
    "GENERIC_SINK_SOURCE": (("sink", "source"), str),
    "GENERIC_SINK_ENVIRONMENT": (("sink", "environment"), str),
    "GENERIC_SINK_NAMESPACE": (("sink", "namespace"), str),
    "GENERIC_SINK_TAGS": (("sink", "tags"), _split_tags),
    "GENERIC_SINK_HTTP_TIMEOUT": (("http", "timeout_seconds"), float),
    "GENERIC_SINK_TRACING_ENDPOINT": (("tracing", "endpoint"), str),
}


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply environment variable overrides using the GENERIC_SINK_ prefix."""
    for env_key, (path, coerce) in _ENV_MAP.items():
        value = os.environ.get(env_key)
        if value is None:
            continue
        obj = data
        for part in path[:-1]:
            obj = obj.setdefault(part, {})
        try:
            obj[path[-1]] = coerce(value)
        except ValueError as exc:
            raise ConfigError(f"invalid value for {env_key}: {value!r}") from exc
    return data


def _section(data: dict[str, Any], name: str, cls: type) -> Any:
    raw = data.get(name) or {}
    if not isinstance(raw, dict):
        raise ConfigError(f"section {name!r} must be a mapping")
    return cls(**{k: v for k, v in raw.items() if k in cls.__dataclass_fields__})


def _dict_to_config(data: dict[str, Any]) -> AppConfig:
    """Convert a raw dictionary to an AppConfig dataclass."""
    return AppConfig(
        sink=_section(data, "sink", SinkSettings),
        http=_section(data, "http", HttpSettings),
        tracing=_section(data, "tracing", TracingSettings),
    )


def load_config(path: str | Path | None = None) -> AppConfig:
    """Load configuration from a YAML file with environment overrides.

    Looks for ``generic_sink.yaml`` in the current directory if *path* is None.
    A missing file yields the defaults.
    """
    data: dict[str, Any] = {}
    if path is None:
        path = Path("generic_sink.yaml")
    else:
        path = Path(path)

    if path.exists():
        with open(path, encoding="utf-8") as fh:
            try:
                loaded = yaml.safe_load(fh)
            except yaml.YAMLError as exc:
                raise ConfigError(f"could not parse {path}: {exc}") from exc
            if isinstance(loaded, dict):
                data = loaded

    data = _apply_env_overrides(data)
    return _dict_to_config(data)
