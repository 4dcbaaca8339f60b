"""Expand commits into the file paths their raw changes touched."""

from __future__ import annotations

import json
import subprocess
from concurrent.futures import ThreadPoolExecutor
from typing import Protocol, Sequence

from ..exceptions import ServiceError
from ..logging_config import get_logger
from .models import Commit

logger = get_logger(__name__)


class ChangeLister(Protocol):
    """Lists the file paths recorded under one raw change identifier.

    Implementations raise ServiceError on any failure.
    """

    def list_files(self, uuid: str) -> list[str]: ...


def paths_from_listing(document: dict) -> list[str]:
    """Extract paths from a listing shaped like the monthly exports.

    ``{"changes": [{"changes": [{"path": ...}, ...]}, ...]}``
    """
    paths: list[str] = []
    for change in document.get("changes") or []:
        for entry in change.get("changes") or []:
            path = entry.get("path")
            if path:
                paths.append(path)
    return paths


class LscmChangeLister:
    """ChangeLister backed by the Jazz SCM command line client."""

    def __init__(self, repository: str, command: str = "lscm", timeout: float = 60.0):
        self.repository = repository
        self.command = command
        self.timeout = timeout

    def _argv(self, uuid: str) -> list[str]:
        return [self.command, "list", "changes", "-r", self.repository, uuid, "-j"]

    def list_files(self, uuid: str) -> list[str]:
        argv = self._argv(uuid)
        try:
            proc = subprocess.run(
                argv, capture_output=True, text=True, errors="replace", timeout=self.timeout
            )
        except FileNotFoundError:
            raise ServiceError(argv, "command not found", identifier=uuid)
        except subprocess.TimeoutExpired:
            raise ServiceError(argv, f"timed out after {self.timeout}s", identifier=uuid)

        if proc.returncode != 0:
            raise ServiceError(
                argv,
                f"exit status {proc.returncode}",
                identifier=uuid,
                output=proc.stderr or proc.stdout,
            )
        try:
            document = json.loads(proc.stdout)
        except json.JSONDecodeError as e:
            raise ServiceError(argv, f"invalid JSON: {e}", identifier=uuid, output=proc.stdout)
        if not isinstance(document, dict):
            raise ServiceError(argv, "unexpected JSON document", identifier=uuid)
        return paths_from_listing(document)


class FileResolver:
    """Attach file lists to commits using a ChangeLister.

    Each commit is independent, so commits are resolved on a bounded thread
    pool. Results keep input order, so output does not depend on ``workers``.
    The first ServiceError aborts the run.
    """

    def __init__(self, lister: ChangeLister, workers: int = 4):
        self.lister = lister
        self.workers = max(1, workers)

    def files_for(self, commit: Commit) -> list[str]:
        files: list[str] = []
        for uuid in commit.change.uuids:
            found = self.lister.list_files(uuid)
            logger.debug("%s: %d files", uuid, len(found))
            files.extend(found)
        return files

    def resolve(self, commits: Sequence[Commit]) -> list[Commit]:
        if self.workers == 1 or len(commits) < 2:
            return [c.with_files(self.files_for(c)) for c in commits]

        with ThreadPoolExecutor(max_workers=self.workers) as executor:
            futures = [executor.submit(self.files_for, c) for c in commits]
            try:
                file_lists = [f.result() for f in futures]
            except ServiceError:
                for f in futures:
                    f.cancel()
                raise
        return [c.with_files(files) for c, files in zip(commits, file_lists)]
