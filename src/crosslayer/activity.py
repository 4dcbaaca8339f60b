"""Commit activity: change size, commit cadence and per-author volume."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Sequence

import numpy as np

from .exceptions import MalformedTimestampError
from .linkage.models import Commit

# Consolidated commits carry "dd/mm/yyyy HH:MM"; git commits carry iso dates.
TIME_FORMATS = ("%d/%m/%Y %H:%M", "%Y-%m-%d %H:%M:%S %z")


def parse_modified(value: str) -> datetime:
    """Parse a commit modification time; naive values are taken as UTC."""
    for fmt in TIME_FORMATS:
        try:
            parsed = datetime.strptime(value.strip(), fmt)
        except ValueError:
            continue
        if parsed.tzinfo is None:
            parsed = parsed.replace(tzinfo=timezone.utc)
        return parsed
    raise MalformedTimestampError(value, source="commit")


@dataclass
class ActivityReport:
    commits: int = 0
    mean_files_per_commit: float = 0.0
    mean_hours_between_commits: float = 0.0  # 0 with fewer than two commits
    commits_per_author: list[tuple[str, int]] = field(default_factory=list)  # ascending


def analyze_activity(commits: Sequence[Commit]) -> ActivityReport:
    if not commits:
        return ActivityReport()

    ordered = sorted(commits, key=lambda c: parse_modified(c.change.modified))
    files = np.array([len(c.files) for c in ordered], dtype=float)
    stamps = np.array([parse_modified(c.change.modified).timestamp() for c in ordered])
    intervals = np.diff(stamps) / 3600.0

    authors = Counter(c.author for c in ordered)
    per_author = sorted(authors.items(), key=lambda item: (item[1], item[0]))

    return ActivityReport(
        commits=len(ordered),
        mean_files_per_commit=float(files.mean()),
        mean_hours_between_commits=float(intervals.mean()) if intervals.size else 0.0,
        commits_per_author=per_author,
    )


def format_activity(report: ActivityReport) -> str:
    lines = [f"{report.mean_files_per_commit:g} {report.mean_hours_between_commits:g}"]
    lines.extend(f"{count} {author}" for author, count in report.commits_per_author)
    return "\n".join(lines)
