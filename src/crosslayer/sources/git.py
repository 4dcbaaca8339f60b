"""Commits read straight from a git repository plus a flat tracker issue list."""

from __future__ import annotations

import re
import subprocess
from pathlib import Path
from typing import Iterable, Optional, Sequence

from ..exceptions import InvalidPathError, MalformedInputError, ServiceError
from ..linkage.files import FileResolver
from ..linkage.models import ChangeInfo, Commit, Issue, IssueKind
from ..logging_config import get_logger

logger = get_logger(__name__)

# sha, author, iso date, subject
LOG_FORMAT = "%H%x09%an%x09%ad%x09%s"

# Tracker type that marks a defect; every other type counts as a story.
BUG_TYPE = "Bug"


def _run_git(repo_path: str, args: Sequence[str], timeout: float, identifier: Optional[str] = None) -> str:
    argv = ["git", "-C", repo_path, *args]
    try:
        proc = subprocess.run(
            argv, capture_output=True, text=True, errors="replace", timeout=timeout
        )
    except FileNotFoundError:
        raise ServiceError(argv, "git not found", identifier=identifier)
    except subprocess.TimeoutExpired:
        raise ServiceError(argv, f"timed out after {timeout}s", identifier=identifier)
    if proc.returncode != 0:
        raise ServiceError(
            argv, f"exit status {proc.returncode}", identifier=identifier, output=proc.stderr
        )
    return proc.stdout


class GitTreeLister:
    """ChangeLister listing the paths touched by one git commit."""

    def __init__(self, repo_path: str, timeout: float = 60.0):
        self.repo_path = repo_path
        self.timeout = timeout

    def list_files(self, uuid: str) -> list[str]:
        out = _run_git(
            self.repo_path,
            ["diff-tree", "--root", "--no-commit-id", "--name-only", "-r", uuid],
            self.timeout,
            identifier=uuid,
        )
        return [line for line in out.splitlines() if line]


def issue_types(rows: Iterable[Sequence[str]], source: str = "issues") -> dict[str, str]:
    """Map ticket key to tracker type from ``key,type`` rows."""
    types: dict[str, str] = {}
    for row in rows:
        if len(row) < 2:
            raise MalformedInputError(source, f"expected key,type row, got {list(row)}")
        types[row[0]] = row[1]
    return types


class GitCommitSource:
    """Build commits from ``git log`` in chronological order.

    The issue id is the first ticket reference in the subject; the kind
    comes from the tracker type of that ticket.
    """

    def __init__(
        self,
        repo_path: Path,
        ticket_pattern: str,
        issue_types: dict[str, str],
        timeout: float = 60.0,
        workers: int = 4,
    ):
        if not repo_path.is_dir():
            raise InvalidPathError(repo_path, "not a directory")
        self.repo_path = str(repo_path.resolve())
        self.ticket_matcher = re.compile(ticket_pattern)
        self.issue_types = issue_types
        self.timeout = timeout
        self.workers = workers

    def _issue(self, subject: str) -> Issue:
        match = self.ticket_matcher.search(subject)
        issue_id = match.group(0) if match else ""
        kind = IssueKind.BUG if self.issue_types.get(issue_id) == BUG_TYPE else IssueKind.STORY
        return Issue(id=issue_id, kind=kind)

    def parse_log(self, raw: str) -> list[Commit]:
        commits = []
        for line in raw.splitlines():
            if not line.strip():
                continue
            parts = line.split("\t", 3)
            if len(parts) < 3:
                logger.warning("Skipping unparseable git log line: %r", line)
                continue
            sha, author, date = parts[0], parts[1], parts[2]
            subject = parts[3] if len(parts) > 3 else ""
            commits.append(
                Commit(
                    feature="",
                    issue=self._issue(subject),
                    change=ChangeInfo(author=author, comment=subject, modified=date, uuids=(sha,)),
                )
            )
        return commits

    def commits(self) -> list[Commit]:
        raw = _run_git(
            self.repo_path,
            ["--no-pager", "log", "--date=iso", "--reverse", f"--pretty=format:{LOG_FORMAT}"],
            self.timeout,
        )
        commits = self.parse_log(raw)
        logger.info("Read %d commits from %s", len(commits), self.repo_path)
        lister = GitTreeLister(self.repo_path, timeout=self.timeout)
        return FileResolver(lister, workers=self.workers).resolve(commits)
