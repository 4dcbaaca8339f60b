"""Data models for cross-source changeset linkage."""

from __future__ import annotations

from dataclasses import dataclass, field, replace
from enum import Enum


class IssueKind(str, Enum):
    """Kind of tracker item a commit is attributed to."""

    BUG = "bug"
    STORY = "story"
    UNKNOWN = "unknown"


@dataclass(frozen=True)
class RawChange:
    """One change record from a monthly version-control export."""

    author: str
    comment: str
    modified: str  # locale formatted, e.g. "15-mar-2010 02:30 PM"
    uuid: str


@dataclass
class ChangesetGroup:
    """Raw changes that collapse to one logical commit.

    Uuids only ever grow while the monthly exports are scanned.
    """

    key: str
    comment: str  # truncated, sentinel normalized
    author: str
    modified: str  # canonical "dd/mm/yyyy HH:MM"
    uuids: list[str] = field(default_factory=list)

    def add_uuid(self, uuid: str) -> None:
        if uuid not in self.uuids:
            self.uuids.append(uuid)


@dataclass(frozen=True)
class Issue:
    id: str = ""  # empty = unattributed
    kind: IssueKind = IssueKind.UNKNOWN


@dataclass(frozen=True)
class Attribution:
    feature: str = ""
    issue: Issue = field(default_factory=Issue)


@dataclass(frozen=True)
class ChangeInfo:
    """Immutable snapshot of a changeset group carried by a Commit."""

    author: str
    comment: str
    modified: str
    uuids: tuple[str, ...] = ()

    @classmethod
    def from_group(cls, group: ChangesetGroup) -> ChangeInfo:
        return cls(
            author=group.author,
            comment=group.comment,
            modified=group.modified,
            uuids=tuple(group.uuids),
        )


@dataclass(frozen=True)
class Commit:
    """Final unit of analysis: a changeset, its attribution and its files."""

    feature: str
    issue: Issue
    change: ChangeInfo
    files: tuple[str, ...] = ()

    @property
    def author(self) -> str:
        return self.change.author

    @property
    def has_issue(self) -> bool:
        return self.issue.id != ""

    def with_files(self, files: list[str] | tuple[str, ...]) -> Commit:
        return replace(self, files=tuple(files))


@dataclass(frozen=True)
class UnresolvedReference:
    """A tracker row descriptor whose key matched no exported changeset."""

    source: str  # "defects" or "stories"
    row_id: str
    key: str


@dataclass(frozen=True)
class Conflict:
    """A changeset group claimed by two tracker rows with different attributions."""

    key: str
    previous: Attribution
    current: Attribution  # wins
