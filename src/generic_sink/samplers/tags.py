"""Tag parsing helpers."""

from __future__ import annotations

from typing import Iterable


def parse_tag_slice_to_map(tags: Iterable[str]) -> dict[str, str]:
    """Turn ``key:value`` strings into a mapping.

    Each tag is split on its first ``:``; a tag without one becomes a key with
    an empty value. When a key repeats, the later tag wins.
    """
    out: dict[str, str] = {}
    for tag in tags:
        key, _, value = tag.partition(":")
        out[key] = value
    return out
