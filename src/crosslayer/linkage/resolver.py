"""Attach tracker attributions (feature, bug/story) to changeset groups.

Tracker rows are consumed positionally. Relevant columns (0-based):

    defects   1: id        3: "<feature>: ..."   4: changeset descriptors
    stories   8: "<marker><id>"                  9: changeset descriptors
    features  1: story id  10: "<feature>: ..."
    issues    0: id        1: "1" for bugs, anything else for stories

Descriptor cells hold one changeset per line.
"""

from __future__ import annotations

import re
from dataclasses import dataclass, field
from typing import Iterable, Mapping, Optional, Sequence

from ..exceptions import MalformedInputError, UnresolvedReferenceError
from ..logging_config import get_logger
from .grouper import GroupingResult
from .models import (
    Attribution,
    ChangeInfo,
    ChangesetGroup,
    Commit,
    Conflict,
    Issue,
    IssueKind,
    UnresolvedReference,
)
from .normalizer import KeyNormalizer

logger = get_logger(__name__)

DEFAULT_TICKET_PATTERN = r"#\d+"

Row = Sequence[str]


def _column(row: Row, index: int, source: str) -> str:
    if len(row) <= index:
        raise MalformedInputError(
            source, f"row has {len(row)} columns, column {index} required: {list(row)[:3]}"
        )
    return row[index]


def _feature_name(cell: str) -> str:
    return cell.split(":", 1)[0]


def issue_kind_index(rows: Iterable[Row], source: str = "issues") -> dict[str, IssueKind]:
    """Map issue id to kind from the flat issue list."""
    kinds: dict[str, IssueKind] = {}
    for row in rows:
        flag = _column(row, 1, source)
        kinds[row[0]] = IssueKind.BUG if flag == "1" else IssueKind.STORY
    return kinds


@dataclass
class ResolutionResult:
    attributed: list[Commit] = field(default_factory=list)
    unattributed: list[Commit] = field(default_factory=list)
    unresolved: list[UnresolvedReference] = field(default_factory=list)
    conflicts: list[Conflict] = field(default_factory=list)

    @property
    def commits(self) -> list[Commit]:
        return self.attributed + self.unattributed


class AttributionResolver:
    """Match tracker rows to changeset groups and attribute every group.

    Usage::

        resolver = AttributionResolver(grouping, issue_kinds=kinds)
        resolver.claim_defects(defect_rows)
        resolver.load_features(feature_rows)
        resolver.claim_stories(story_rows)
        result = resolver.resolve()
    """

    def __init__(
        self,
        grouping: GroupingResult,
        normalizer: Optional[KeyNormalizer] = None,
        ticket_matcher: Optional[re.Pattern] = None,
        issue_kinds: Optional[Mapping[str, IssueKind]] = None,
        fail_on_unresolved: bool = False,
    ):
        self.grouping = grouping
        self.normalizer = normalizer or KeyNormalizer()
        self.ticket_matcher = ticket_matcher or re.compile(DEFAULT_TICKET_PATTERN)
        self.issue_kinds: Mapping[str, IssueKind] = issue_kinds or {}
        self.fail_on_unresolved = fail_on_unresolved

        self._claims: dict[str, tuple[ChangesetGroup, Attribution]] = {}
        self._remaining: dict[str, ChangesetGroup] = dict(grouping.by_uuid)
        self._story_features: dict[str, str] = {}
        self._unresolved: list[UnresolvedReference] = []
        self._conflicts: list[Conflict] = []

    # ------------------------------------------------------------------
    # Tracker rows
    # ------------------------------------------------------------------

    def claim_defects(self, rows: Iterable[Row]) -> None:
        for row in rows:
            defect_id = _column(row, 1, "defects")
            feature = _feature_name(_column(row, 3, "defects"))
            attribution = Attribution(feature=feature, issue=Issue(defect_id, IssueKind.BUG))
            self._claim_descriptors(_column(row, 4, "defects"), attribution, "defects", defect_id)

    def load_features(self, rows: Iterable[Row]) -> None:
        for row in rows:
            story_id = _column(row, 1, "features")
            self._story_features[story_id] = _feature_name(_column(row, 10, "features"))

    def claim_stories(self, rows: Iterable[Row]) -> None:
        for row in rows:
            story_id = _column(row, 8, "stories")[1:]
            attribution = Attribution(
                feature=self._story_features.get(story_id, ""),
                issue=Issue(story_id, IssueKind.STORY),
            )
            self._claim_descriptors(_column(row, 9, "stories"), attribution, "stories", story_id)

    def _claim_descriptors(
        self, cell: str, attribution: Attribution, source: str, row_id: str
    ) -> None:
        for descriptor in cell.splitlines():
            if not descriptor.strip():
                continue
            key = self.normalizer.key_from_descriptor(descriptor)
            group = self.grouping.groups.get(key) if key is not None else None
            if group is None:
                self._report_unresolved(key or descriptor.strip(), source, row_id)
                continue
            self._claim(group, attribution)

    def _claim(self, group: ChangesetGroup, attribution: Attribution) -> None:
        previous = self._claims.get(group.key)
        if previous is not None and previous[1] != attribution:
            logger.warning(
                "Conflicting attribution for %r: %s %s replaced by %s %s",
                group.key,
                previous[1].issue.kind.value,
                previous[1].issue.id,
                attribution.issue.kind.value,
                attribution.issue.id,
            )
            self._conflicts.append(Conflict(group.key, previous[1], attribution))
        self._claims[group.key] = (group, attribution)
        for uuid in group.uuids:
            self._remaining.pop(uuid, None)

    def _report_unresolved(self, key: str, source: str, row_id: str) -> None:
        if self.fail_on_unresolved:
            raise UnresolvedReferenceError(key, source, row_id)
        logger.warning("Key not found: %r (%s %s)", key, source, row_id)
        self._unresolved.append(UnresolvedReference(source, row_id, key))

    # ------------------------------------------------------------------
    # Unclaimed groups
    # ------------------------------------------------------------------

    def attribution_from_comment(self, comment: str) -> Attribution:
        """Attribution for a group no tracker row claimed."""
        m = self.ticket_matcher.search(comment)
        if m is None:
            return Attribution()
        issue_id = m.group(0).lstrip("#")
        return Attribution(issue=Issue(issue_id, self.issue_kinds.get(issue_id, IssueKind.UNKNOWN)))

    def resolve(self) -> ResolutionResult:
        result = ResolutionResult(
            unresolved=list(self._unresolved), conflicts=list(self._conflicts)
        )
        for group, attribution in self._claims.values():
            result.attributed.append(_commit(group, attribution))

        seen: set[str] = set()
        for group in self._remaining.values():
            if group.key in seen or group.key in self._claims:
                continue
            seen.add(group.key)
            result.unattributed.append(_commit(group, self.attribution_from_comment(group.comment)))

        logger.info(
            "Attributed %d commits, %d unattributed, %d unresolved references, %d conflicts",
            len(result.attributed),
            len(result.unattributed),
            len(result.unresolved),
            len(result.conflicts),
        )
        return result


def _commit(group: ChangesetGroup, attribution: Attribution) -> Commit:
    return Commit(
        feature=attribution.feature,
        issue=attribution.issue,
        change=ChangeInfo.from_group(group),
    )
