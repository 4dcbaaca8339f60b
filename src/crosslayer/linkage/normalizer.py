"""Canonical lookup keys for changesets.

The version-control export and the issue tracker share no identifier. Both
describe a changeset by its comment, author and modification time, so that
triple, normalized, is the join key:

    "<comment[:56]> - <author> - <dd/mm/yyyy HH:MM>"   (lowercased)

The export writes timestamps in a pt-BR locale ("15-mar-2010 02:30 PM")
while the tracker embeds the already canonical form.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional

from ..exceptions import MalformedTimestampError

# The tracker truncates changeset comments at this length.
COMMENT_LIMIT = 56

DESCRIPTOR_SEPARATOR = " - "


def _frozen(mapping: dict[str, str]) -> Mapping[str, str]:
    return MappingProxyType(dict(mapping))


@dataclass(frozen=True)
class LocaleTables:
    """Lookup tables for the exporter's locale."""

    months: Mapping[str, str] = field(
        default_factory=lambda: _frozen(
            {
                "jan": "01", "fev": "02", "mar": "03", "abr": "04",
                "mai": "05", "jun": "06", "jul": "07", "ago": "08",
                "set": "09", "out": "10", "nov": "11", "dez": "12",
            }
        )
    )
    # Monthly dump files may be named after the English month instead.
    month_names: Mapping[str, str] = field(
        default_factory=lambda: _frozen(
            {
                "jan": "January", "fev": "February", "mar": "March", "abr": "April",
                "mai": "May", "jun": "June", "jul": "July", "ago": "August",
                "set": "September", "out": "October", "nov": "November", "dez": "December",
            }
        )
    )
    pm_hours: Mapping[str, str] = field(
        default_factory=lambda: _frozen(
            {
                "01": "13", "02": "14", "03": "15", "04": "16", "05": "17", "06": "18",
                "07": "19", "08": "20", "09": "21", "10": "22", "11": "23", "12": "12",
            }
        )
    )
    no_comment: str = "<nenhum comentário>"


DEFAULT_LOCALE = LocaleTables()

_DAY_FIRST = re.compile(
    r"^(?P<day>\d{1,2})-(?P<month>[^\W\d_]+)-(?P<year>\d{4})"
    r" (?P<hour>\d{1,2}):(?P<minute>\d{2}) (?P<meridiem>[AP]M)$",
    re.IGNORECASE,
)
_YEAR_FIRST = re.compile(
    r"^(?P<year>\d{4})-(?P<month>[^\W\d_]+)-(?P<day>\d{1,2})"
    r" (?P<hour>\d{1,2}):(?P<minute>\d{2}) (?P<meridiem>[AP]M)$",
    re.IGNORECASE,
)


class KeyNormalizer:
    """Derive the join key from (comment, author, timestamp) triples."""

    def __init__(self, tables: LocaleTables = DEFAULT_LOCALE):
        self.tables = tables

    def normalize_comment(self, comment: str) -> str:
        comment = comment[:COMMENT_LIMIT]
        if comment.lower() == self.tables.no_comment.lower():
            return ""
        return comment

    def _match(self, timestamp: str) -> re.Match:
        text = timestamp.strip()
        m = _DAY_FIRST.match(text) or _YEAR_FIRST.match(text)
        if m is None or m.group("month").lower() not in self.tables.months:
            raise MalformedTimestampError(timestamp)
        return m

    def month_token(self, timestamp: str) -> str:
        """Lowercase month abbreviation of an export timestamp."""
        return self._match(timestamp).group("month").lower()

    def canonical_timestamp(self, timestamp: str) -> str:
        """Convert an export timestamp to "dd/mm/yyyy HH:MM" (24-hour clock).

        Raises:
            MalformedTimestampError: If the timestamp has neither expected shape
        """
        m = self._match(timestamp)
        hour = m.group("hour").zfill(2)
        minute = m.group("minute")
        if not 1 <= int(hour) <= 12 or int(minute) > 59:
            raise MalformedTimestampError(timestamp)

        meridiem = m.group("meridiem").upper()
        if meridiem == "PM":
            hour = self.tables.pm_hours[hour]
        elif hour == "12":
            hour = "00"

        day = m.group("day").zfill(2)
        month = self.tables.months[m.group("month").lower()]
        return f"{day}/{month}/{m.group('year')} {hour}:{minute}"

    def key_for(self, comment: str, author: str, canonical_time: str) -> str:
        """Build the key from an already canonical timestamp."""
        comment = self.normalize_comment(comment)
        return f"{comment}{DESCRIPTOR_SEPARATOR}{author}{DESCRIPTOR_SEPARATOR}{canonical_time}".lower()

    def key(self, comment: str, author: str, timestamp: str) -> str:
        """Build the key for a raw export record."""
        return self.key_for(comment, author, self.canonical_timestamp(timestamp))

    def key_from_descriptor(self, descriptor: str) -> Optional[str]:
        """Rebuild the key from a tracker changeset descriptor.

        Descriptors look like "<prefix> - <comment> - <author> - <time>" where
        the comment may itself contain " - ". Everything between the first
        and the last two segments is the comment.

        Returns None when the descriptor has fewer than three segments.
        """
        parts = descriptor.strip().split(DESCRIPTOR_SEPARATOR)
        if len(parts) < 3:
            return None
        comment = DESCRIPTOR_SEPARATOR.join(parts[1:-2])
        return self.key_for(comment, parts[-2], parts[-1])
