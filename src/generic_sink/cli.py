"""CLI interface for generic_sink."""

from __future__ import annotations

import argparse
import logging
import sys

import httpx
import yaml

from . import __version__
from .config import AppConfig, ConfigError, load_config

logger = logging.getLogger(__name__)


def build_http_client(cfg: AppConfig) -> httpx.Client:
    """Create the HTTP client used for delivery."""
    return httpx.Client(
        transport=httpx.HTTPTransport(retries=cfg.http.retries),
        timeout=cfg.http.timeout_seconds,
        headers=cfg.http.headers,
    )


def _cmd_flush(args: argparse.Namespace) -> int:
    """Flush samples from a file to the configured collector."""
    cfg = load_config(args.config)
    sink_config = cfg.sink.to_sink_config()

    from .samplers.reader import load_samples
    from .sinks.generic import GenericMetricSink
    from .tracing import build_tracer

    samples = load_samples(args.file)
    if not samples:
        print(f"No samples found in {args.file}")
        return 0

    tracer, provider = build_tracer(cfg.tracing)
    client = build_http_client(cfg)
    try:
        sink = GenericMetricSink(sink_config, client)
        sink.start(tracer)
        results = sink.flush_batches(samples)
    finally:
        client.close()
        if provider is not None:
            provider.shutdown()

    failed = [r for r in results if not r.ok]
    delivered = sum(r.metrics for r in results if r.ok)
    print(f"Flushed {delivered}/{len(samples)} samples in {len(results)} batches to {cfg.sink.endpoint}")
    if failed:
        print(f"{len(failed)} batches failed", file=sys.stderr)
        return 1
    return 0


def _cmd_show_config(args: argparse.Namespace) -> int:
    cfg = load_config(args.config)
    print(yaml.safe_dump(cfg.to_dict(), sort_keys=False), end="")
    return 0


def _cmd_version(_args: argparse.Namespace) -> int:
    print(f"generic-sink {__version__}")
    return 0


def main(argv: list[str] | None = None) -> int:
    """Entry point for the generic-sink CLI."""
    parser = argparse.ArgumentParser(
        prog="generic-sink",
        description="Deliver aggregated metrics as JSON batches to an HTTP collector",
    )
    parser.add_argument("--config", "-c", default=None, help="Path to generic_sink.yaml")
    parser.add_argument("--verbose", "-v", action="store_true", help="Enable debug logging")
    sub = parser.add_subparsers(dest="command")

    # flush
    flush_p = sub.add_parser("flush", help="Flush samples from a JSON or JSONL file")
    flush_p.add_argument("file", help="Sample file (.json list or .jsonl)")
    flush_p.set_defaults(func=_cmd_flush)

    # show-config
    show_p = sub.add_parser("show-config", help="Print the effective configuration")
    show_p.set_defaults(func=_cmd_show_config)

    # version
    ver_p = sub.add_parser("version", help="Print version")
    ver_p.set_defaults(func=_cmd_version)

    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.INFO,
        format="%(asctime)s [%(levelname)s] %(name)s: %(message)s",
    )

    if not hasattr(args, "func"):
        parser.print_help()
        return 1

    try:
        return args.func(args)
    except ConfigError as exc:
        logger.error("Invalid configuration: %s", exc)
        return 2


if __name__ == "__main__":
    sys.exit(main())
