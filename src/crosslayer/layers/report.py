"""Render LayerStats as key/value text or JSON-ready dicts."""

from __future__ import annotations

from collections import Counter
from dataclasses import fields
from typing import Any

from .aggregate import LayerStats

# Printed separately as the raw count of commits per issue kind.
_KINDS_FIELD = "kinds"


def _label(name: str) -> str:
    return "".join(part.capitalize() for part in name.split("_"))


def _sort_key(key: Any) -> tuple:
    # ints numerically, strings alphabetically, "" (unclassified) first
    return (isinstance(key, str), key)


def _format_counter(counter: Counter) -> str:
    items = ", ".join(f"{k!s}: {counter[k]}" for k in sorted(counter, key=_sort_key))
    return "{" + items + "}"


def stats_to_dict(stats: LayerStats) -> dict[str, Any]:
    """JSON-ready view; histogram keys become strings."""
    out: dict[str, Any] = {}
    for f in fields(stats):
        value = getattr(stats, f.name)
        if isinstance(value, Counter):
            value = {str(k): value[k] for k in sorted(value, key=_sort_key)}
        out[f.name] = value
    return out


def format_report(stats: LayerStats) -> str:
    """One "Label: value" line per statistic, then the per-kind commit counts."""
    lines = []
    for f in fields(stats):
        if f.name == _KINDS_FIELD:
            continue
        value = getattr(stats, f.name)
        if isinstance(value, Counter):
            value = _format_counter(value)
        lines.append(f"{_label(f.name)}: {value}")
    lines.append(f"{_label(_KINDS_FIELD)}: {_format_counter(stats.kinds)}")
    return "\n".join(lines)
