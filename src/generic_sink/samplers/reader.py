"""Load aggregated samples from JSON or JSONL files."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from .base import InterMetric, MetricType

logger = logging.getLogger(__name__)


def sample_from_dict(obj: dict[str, Any]) -> InterMetric:
    """Build an :class:`InterMetric` from a decoded record.

    Raises ``ValueError`` (or ``KeyError``/``TypeError``) for records that
    cannot be interpreted as a sample.
    """
    tags = obj.get("tags") or []
    if isinstance(tags, str):
        tags = [tags]
    return InterMetric(
        name=str(obj["name"]),
        timestamp=int(obj["timestamp"]),
        value=float(obj["value"]),
        tags=tuple(str(t) for t in tags),
        type=MetricType(obj.get("type", MetricType.GAUGE.value)),
    )


def _convert_records(records: list[Any], path: Path) -> list[InterMetric]:
    samples: list[InterMetric] = []
    for idx, obj in enumerate(records):
        if not isinstance(obj, dict):
            logger.warning("Skipping non-object record %d in %s", idx, path)
            continue
        try:
            samples.append(sample_from_dict(obj))
        except (KeyError, TypeError, ValueError) as exc:
            logger.warning("Skipping malformed record %d in %s: %s", idx, path, exc)
    return samples


def load_samples(path: str | Path) -> list[InterMetric]:
    """Read samples from *path*, preserving file order.

    ``.json`` files hold a list of records; anything else is read as JSONL,
    one record per line.
    """
    path = Path(path)
    if not path.exists():
        logger.warning("Sample file not found: %s", path)
        return []

    if path.suffix.lower() == ".json":
        with open(path, encoding="utf-8") as fh:
            try:
                loaded = json.load(fh)
            except json.JSONDecodeError as exc:
                logger.warning("Could not decode %s: %s", path, exc)
                return []
        if not isinstance(loaded, list):
            logger.warning("Expected a list of samples in %s", path)
            return []
        return _convert_records(loaded, path)

    records: list[Any] = []
    with open(path, encoding="utf-8") as fh:
        for line in fh:
            line = line.strip()
            if not line:
                continue
            try:
                records.append(json.loads(line))
            except json.JSONDecodeError:
                logger.warning("Skipping undecodable line in %s", path)
                continue
    return _convert_records(records, path)
