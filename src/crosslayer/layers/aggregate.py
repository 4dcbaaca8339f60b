"""Fold commits into per-feature / per-issue layer statistics."""

from __future__ import annotations

from collections import Counter
from dataclasses import dataclass, field
from typing import Iterable, Optional

from ..linkage.models import Commit, IssueKind
from ..logging_config import get_logger
from .models import combination
from .rules import LayerRules

logger = get_logger(__name__)


@dataclass(frozen=True)
class AggregationFilters:
    issue_kind: Optional[IssueKind] = None  # keep only commits of this kind
    with_issues_only: bool = False  # drop commits without an issue id
    min_files: int = 0  # drop features/issues touching fewer files (0 = keep all)

    def accepts(self, commit: Commit) -> bool:
        if self.issue_kind is not None and commit.issue.kind != self.issue_kind:
            return False
        if self.with_issues_only and not commit.has_issue:
            return False
        return True


@dataclass
class EntityAggregate:
    """Running totals for one feature or one issue."""

    commits: int = 0
    authors: set[str] = field(default_factory=set)
    layers: set[str] = field(default_factory=set)
    files: set[str] = field(default_factory=set)  # classified files only
    issues: set[str] = field(default_factory=set)  # features only


@dataclass
class LayerStats:
    commits: int = 0
    commits_with_issues: int = 0
    features: int = 0
    issues: int = 0
    files_per_layer: Counter = field(default_factory=Counter)
    commits_per_combination: Counter = field(default_factory=Counter)
    layers_per_commit: Counter = field(default_factory=Counter)
    authors_per_issue: Counter = field(default_factory=Counter)
    commits_per_issue: Counter = field(default_factory=Counter)
    layers_per_issue: Counter = field(default_factory=Counter)
    issues_per_combination: Counter = field(default_factory=Counter)
    authors_per_feature: Counter = field(default_factory=Counter)
    commits_per_feature: Counter = field(default_factory=Counter)
    layers_per_feature: Counter = field(default_factory=Counter)
    issues_per_feature: Counter = field(default_factory=Counter)
    features_per_combination: Counter = field(default_factory=Counter)
    kinds: Counter = field(default_factory=Counter)  # commits per issue kind


class LayerAggregator:
    """Single-pass aggregation of a finalized commit set."""

    def __init__(self, rules: LayerRules, filters: Optional[AggregationFilters] = None):
        self.rules = rules
        self.filters = filters or AggregationFilters()
        self.stats = LayerStats()
        self.feature_aggregates: dict[str, EntityAggregate] = {}
        self.issue_aggregates: dict[str, EntityAggregate] = {}

    def add(self, commit: Commit) -> bool:
        """Fold one commit in. Returns False if the filters rejected it."""
        if not self.filters.accepts(commit):
            return False

        stats = self.stats
        stats.kinds[commit.issue.kind.value] += 1
        stats.commits += 1
        if commit.has_issue:
            stats.commits_with_issues += 1

        feature = self.feature_aggregates.setdefault(commit.feature, EntityAggregate())
        issue = self.issue_aggregates.setdefault(commit.issue.id, EntityAggregate())
        feature.commits += 1
        issue.commits += 1
        feature.issues.add(commit.issue.id)
        feature.authors.add(commit.author)
        issue.authors.add(commit.author)

        layers: set[str] = set()
        for path in commit.files:
            layer = self.rules.classify(path)
            if not layer:
                continue
            layers.add(layer)
            stats.files_per_layer[layer] += 1
            for entity in (feature, issue):
                entity.layers.add(layer)
                entity.files.add(path)

        stats.layers_per_commit[len(layers)] += 1
        stats.commits_per_combination[combination(layers)] += 1
        return True

    def _retained(self, aggregates: dict[str, EntityAggregate]) -> list[EntityAggregate]:
        min_files = self.filters.min_files
        return [a for a in aggregates.values() if min_files == 0 or len(a.files) >= min_files]

    def finish(self) -> LayerStats:
        """Fold feature and issue aggregates into the per-entity histograms."""
        stats = self.stats

        features = self._retained(self.feature_aggregates)
        for f in features:
            stats.commits_per_feature[f.commits] += 1
            stats.authors_per_feature[len(f.authors)] += 1
            stats.layers_per_feature[len(f.layers)] += 1
            stats.issues_per_feature[len(f.issues)] += 1
            stats.features_per_combination[combination(f.layers)] += 1

        issues = self._retained(self.issue_aggregates)
        for i in issues:
            stats.commits_per_issue[i.commits] += 1
            stats.authors_per_issue[len(i.authors)] += 1
            stats.layers_per_issue[len(i.layers)] += 1
            stats.issues_per_combination[combination(i.layers)] += 1

        stats.features = len(features)
        stats.issues = len(issues)
        logger.info(
            "Aggregated %d commits into %d features and %d issues",
            stats.commits,
            stats.features,
            stats.issues,
        )
        return stats


def aggregate(
    commits: Iterable[Commit],
    rules: LayerRules,
    filters: Optional[AggregationFilters] = None,
) -> LayerStats:
    aggregator = LayerAggregator(rules, filters)
    for commit in commits:
        aggregator.add(commit)
    return aggregator.finish()
