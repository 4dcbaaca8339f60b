"""Cross-source linkage: version-control dumps + tracker exports -> attributed commits."""

from .codec import commit_from_dict, commit_to_dict, dump_commits, load_commits
from .files import ChangeLister, FileResolver, LscmChangeLister
from .grouper import ChangesetGrouper, GroupingResult
from .models import (
    Attribution,
    ChangeInfo,
    ChangesetGroup,
    Commit,
    Conflict,
    Issue,
    IssueKind,
    RawChange,
    UnresolvedReference,
)
from .normalizer import COMMENT_LIMIT, DEFAULT_LOCALE, KeyNormalizer, LocaleTables
from .pipeline import ConsolidationResult, attribute, consolidate, log_summary
from .resolver import AttributionResolver, ResolutionResult, issue_kind_index

__all__ = [
    "Attribution",
    "AttributionResolver",
    "COMMENT_LIMIT",
    "ChangeInfo",
    "ChangeLister",
    "ChangesetGroup",
    "ChangesetGrouper",
    "Commit",
    "Conflict",
    "ConsolidationResult",
    "DEFAULT_LOCALE",
    "FileResolver",
    "GroupingResult",
    "Issue",
    "IssueKind",
    "KeyNormalizer",
    "LocaleTables",
    "LscmChangeLister",
    "RawChange",
    "ResolutionResult",
    "UnresolvedReference",
    "attribute",
    "commit_from_dict",
    "commit_to_dict",
    "consolidate",
    "dump_commits",
    "issue_kind_index",
    "load_commits",
    "log_summary",
]
