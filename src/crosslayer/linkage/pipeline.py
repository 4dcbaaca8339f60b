"""Consolidation pipeline.

dumps + tracker CSVs -> keys -> changeset groups -> attributed commits
-> commits with files.
"""

from __future__ import annotations

import re
from dataclasses import dataclass
from pathlib import Path
from typing import Optional

from ..config import PipelineConfig
from ..exceptions import InvalidPathError, MalformedInputError
from ..logging_config import get_logger
from .files import ChangeLister, FileResolver, LscmChangeLister
from .grouper import ChangesetGrouper, GroupingResult
from .models import Commit, IssueKind
from .normalizer import KeyNormalizer
from .readers import read_exports, read_rows
from .resolver import AttributionResolver, ResolutionResult, issue_kind_index

logger = get_logger(__name__)

DEFECTS_FILE = "defects.csv"
STORIES_FILE = "stories.csv"
FEATURES_FILE = "features.csv"


def issues_file_name(repository: str) -> str:
    return f"{repository}-issues.csv"


@dataclass
class ConsolidationResult:
    commits: list[Commit]
    grouping: GroupingResult
    resolution: ResolutionResult


def _required(directory: Path, name: str) -> Path:
    path = directory / name
    if not path.is_file():
        raise MalformedInputError(path, "required export file is missing")
    return path


def load_issue_kinds(directory: Path, repository: str) -> dict[str, IssueKind]:
    path = directory / issues_file_name(repository)
    if not path.is_file():
        logger.warning("No issue list at %s; ticket kinds will be unknown", path)
        return {}
    return issue_kind_index(read_rows(path), source=path.name)


def attribute(
    directory: Path,
    config: PipelineConfig,
    normalizer: Optional[KeyNormalizer] = None,
) -> tuple[GroupingResult, ResolutionResult]:
    """Group the monthly dumps and attribute every changeset (no files yet)."""
    if not directory.is_dir():
        raise InvalidPathError(directory, "not a directory")
    normalizer = normalizer or KeyNormalizer()

    grouping = ChangesetGrouper(normalizer).group(read_exports(directory))

    resolver = AttributionResolver(
        grouping,
        normalizer=normalizer,
        ticket_matcher=re.compile(config.ticket_pattern),
        issue_kinds=load_issue_kinds(directory, config.repository),
        fail_on_unresolved=config.fail_on_unresolved,
    )
    resolver.claim_defects(read_rows(_required(directory, DEFECTS_FILE)))
    resolver.load_features(read_rows(_required(directory, FEATURES_FILE)))
    resolver.claim_stories(read_rows(_required(directory, STORIES_FILE)))
    return grouping, resolver.resolve()


def consolidate(
    directory: Path,
    config: PipelineConfig,
    lister: Optional[ChangeLister] = None,
) -> ConsolidationResult:
    """Run the whole pipeline over an export directory.

    Raises:
        InvalidPathError: If ``directory`` does not exist
        InputError: On malformed dumps, CSVs or timestamps
        ServiceError: If listing the files of any change fails
    """
    grouping, resolution = attribute(directory, config)

    lister = lister or LscmChangeLister(
        config.repository, command=config.lister_command, timeout=config.service_timeout_seconds
    )
    commits = FileResolver(lister, workers=config.workers).resolve(resolution.commits)
    result = ConsolidationResult(commits=commits, grouping=grouping, resolution=resolution)
    log_summary(result)
    return result


def log_summary(result: ConsolidationResult) -> None:
    grouping, resolution = result.grouping, result.resolution
    logger.info(
        "Consolidated %d commits from %d changes in %d groups (%d cross-month duplicates skipped)",
        len(result.commits),
        grouping.change_count,
        len(grouping.groups),
        grouping.skipped,
    )
    logger.info(
        "%d attributed, %d unattributed",
        len(resolution.attributed),
        len(resolution.unattributed),
    )
    if resolution.unresolved or resolution.conflicts:
        logger.warning(
            "%d unresolved tracker references, %d conflicting attributions",
            len(resolution.unresolved),
            len(resolution.conflicts),
        )
