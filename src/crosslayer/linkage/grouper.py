"""Group raw export records into changesets by normalized key."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Iterable, Sequence

from ..exceptions import MalformedTimestampError
from ..logging_config import get_logger
from .models import ChangesetGroup, RawChange
from .normalizer import KeyNormalizer

logger = get_logger(__name__)


@dataclass
class GroupingResult:
    groups: dict[str, ChangesetGroup] = field(default_factory=dict)  # key -> group
    by_uuid: dict[str, ChangesetGroup] = field(default_factory=dict)
    skipped: int = 0  # records dropped as cross-month duplicates

    @property
    def change_count(self) -> int:
        return len(self.by_uuid)


class ChangesetGrouper:
    """Collapse raw changes sharing a key into ChangesetGroups.

    Monthly dumps overlap at their edges, so a record is only taken from
    the file named after its own month.
    """

    def __init__(self, normalizer: KeyNormalizer | None = None):
        self.normalizer = normalizer or KeyNormalizer()

    def belongs_to(self, file_name: str, change: RawChange) -> bool:
        """True if ``file_name`` is the dump for the month ``change`` was made in."""
        month = self.normalizer.month_token(change.modified)
        suffixes = (f"{month}.json", f"{self.normalizer.tables.month_names[month]}.json")
        return file_name.endswith(suffixes)

    def group(self, batches: Iterable[tuple[str, Sequence[RawChange]]]) -> GroupingResult:
        result = GroupingResult()
        for file_name, changes in batches:
            accepted = 0
            for change in changes:
                try:
                    if not self.belongs_to(file_name, change):
                        result.skipped += 1
                        continue
                    self._add(result, change)
                except MalformedTimestampError as e:
                    raise MalformedTimestampError(e.timestamp, source=file_name) from e
                accepted += 1
            logger.debug("%s: %d of %d changes accepted", file_name, accepted, len(changes))

        logger.info(
            "Grouped %d changes into %d changesets (%d cross-month duplicates skipped)",
            result.change_count,
            len(result.groups),
            result.skipped,
        )
        return result

    def _add(self, result: GroupingResult, change: RawChange) -> None:
        # The same record may sit in both the abbreviated and the English dump of a month.
        if change.uuid in result.by_uuid:
            logger.debug("%s already grouped", change.uuid)
            return

        modified = self.normalizer.canonical_timestamp(change.modified)
        key = self.normalizer.key_for(change.comment, change.author, modified)

        group = result.groups.get(key)
        if group is None:
            group = ChangesetGroup(
                key=key,
                comment=self.normalizer.normalize_comment(change.comment),
                author=change.author,
                modified=modified,
            )
            result.groups[key] = group
        group.add_uuid(change.uuid)
        result.by_uuid[change.uuid] = group
