"""JSON encoding of consolidated commits.

Element shape::

    {"feature": "...", "issue": {"id": "...", "kind": "bug"},
     "change": {"author": "...", "comment": "...", "modified": "...", "uuids": [...]},
     "files": [...]}

Keys are read case-insensitively, so dumps written with capitalized keys
("Feature", "Issue", "Id", ...) load as well.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import IO, Any, Iterable

from ..exceptions import MalformedInputError
from .models import ChangeInfo, Commit, Issue, IssueKind
from .readers import lower_keys


def commit_to_dict(commit: Commit) -> dict[str, Any]:
    return {
        "feature": commit.feature,
        "issue": {"id": commit.issue.id, "kind": commit.issue.kind.value},
        "change": {
            "author": commit.change.author,
            "comment": commit.change.comment,
            "modified": commit.change.modified,
            "uuids": list(commit.change.uuids),
        },
        "files": list(commit.files),
    }


def _kind(value: Any) -> IssueKind:
    try:
        return IssueKind(str(value or "unknown").lower())
    except ValueError:
        return IssueKind.UNKNOWN


def commit_from_dict(data: dict[str, Any]) -> Commit:
    fields = lower_keys(data)
    issue = lower_keys(fields.get("issue") or {})
    change = lower_keys(fields.get("change") or {})
    uuids = change.get("uuids") or ([change["uuid"]] if change.get("uuid") else [])
    return Commit(
        feature=str(fields.get("feature") or ""),
        issue=Issue(id=str(issue.get("id") or ""), kind=_kind(issue.get("kind"))),
        change=ChangeInfo(
            author=str(change.get("author") or ""),
            comment=str(change.get("comment") or ""),
            modified=str(change.get("modified") or ""),
            uuids=tuple(str(u) for u in uuids),
        ),
        files=tuple(fields.get("files") or ()),
    )


def dump_commits(commits: Iterable[Commit], fp: IO[str]) -> None:
    json.dump([commit_to_dict(c) for c in commits], fp, ensure_ascii=False)
    fp.write("\n")


def load_commits(path: Path) -> list[Commit]:
    try:
        with open(path, encoding="utf-8") as f:
            data = json.load(f)
    except (OSError, UnicodeDecodeError, json.JSONDecodeError) as e:
        raise MalformedInputError(path, str(e))
    if not isinstance(data, list):
        raise MalformedInputError(path, "expected a JSON array of commits")
    try:
        return [commit_from_dict(item) for item in data]
    except (AttributeError, TypeError) as e:
        raise MalformedInputError(path, f"bad commit record: {e}")
