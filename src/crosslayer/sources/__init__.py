"""Per-project commit sources.

siop commits come from the consolidation output; ofbiz and openmrs are
read from a git checkout plus a ``key,type`` issue list exported from
their tracker.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence

from ..config import PipelineConfig
from ..exceptions import ConfigurationError, UnknownRepositoryError
from ..layers.rules import OFBIZ_RULES, OPENMRS_RULES, SIOP_RULES, LayerRules
from ..linkage.codec import load_commits
from ..linkage.models import Commit
from ..linkage.readers import read_rows
from ..logging_config import get_logger
from .git import GitCommitSource, GitTreeLister, issue_types

logger = get_logger(__name__)

COMMIT_FILE = "commits"
GIT = "git"


@dataclass(frozen=True)
class ProjectProfile:
    name: str
    rules: LayerRules
    source: str  # COMMIT_FILE or GIT
    ticket_pattern: Optional[str] = None

    @property
    def usage(self) -> str:
        if self.source == GIT:
            return "<git repository> <issues file>"
        return "<commits file>..."


PROJECTS: dict[str, ProjectProfile] = {
    "siop": ProjectProfile("siop", SIOP_RULES, COMMIT_FILE),
    "ofbiz": ProjectProfile("ofbiz", OFBIZ_RULES, GIT, ticket_pattern=r"OFBIZ-\d+"),
    "openmrs": ProjectProfile("openmrs", OPENMRS_RULES, GIT, ticket_pattern=r"TRUNK-\d+"),
}


def project(name: str) -> ProjectProfile:
    try:
        return PROJECTS[name]
    except KeyError:
        raise UnknownRepositoryError(name, PROJECTS)


def load_project_commits(
    profile: ProjectProfile,
    paths: Sequence[Path],
    config: Optional[PipelineConfig] = None,
) -> list[Commit]:
    """Read the commits of one project from the inputs its profile expects.

    Raises:
        ConfigurationError: If the number of paths does not fit the profile
        InputError: On malformed commit or issue files
        ServiceError: If git fails
    """
    config = config or PipelineConfig(repository=profile.name)

    if profile.source == COMMIT_FILE:
        if not paths:
            raise ConfigurationError(
                f"{profile.name} expects {profile.usage}", details={"paths": "none"}
            )
        commits: list[Commit] = []
        for path in paths:
            commits.extend(load_commits(path))
        logger.info("Loaded %d commits from %d file(s)", len(commits), len(paths))
        return commits

    if len(paths) != 2:
        raise ConfigurationError(
            f"{profile.name} expects {profile.usage}",
            details={"paths": ", ".join(str(p) for p in paths) or "none"},
        )
    repo_path, issues_path = paths
    source = GitCommitSource(
        repo_path,
        ticket_pattern=profile.ticket_pattern or config.ticket_pattern,
        issue_types=issue_types(read_rows(issues_path), source=issues_path.name),
        timeout=config.service_timeout_seconds,
        workers=config.workers,
    )
    return source.commits()


__all__ = [
    "COMMIT_FILE",
    "GIT",
    "GitCommitSource",
    "GitTreeLister",
    "PROJECTS",
    "ProjectProfile",
    "issue_types",
    "load_project_commits",
    "project",
]
