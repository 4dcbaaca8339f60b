"""Tests for layers/aggregate.py and layers/report.py - per-feature and per-issue statistics."""

import json

import pytest

from crosslayer.layers import (
    SIOP_RULES,
    AggregationFilters,
    LayerAggregator,
    aggregate,
    format_report,
    stats_to_dict,
)
from crosslayer.linkage import ChangeInfo, Commit, Issue, IssueKind


def commit(feature, issue_id, kind, author, *files):
    return Commit(
        feature=feature,
        issue=Issue(issue_id, kind),
        change=ChangeInfo(author=author, comment="", modified="01/01/2010 10:00", uuids=("u",)),
        files=files,
    )


M1, M2 = "/siop-jpa/A.java", "/siop-jpa/B.java"
V1 = "/siop-war/a.xhtml"
C1 = "/siop-ejb/S.java"
DOC = "/docs/readme.txt"

COMMITS = [
    commit("Login", "101", IssueKind.BUG, "alice", M1, V1),
    commit("Login", "101", IssueKind.BUG, "bob", C1),
    commit("Login", "55", IssueKind.STORY, "alice", M1, M2),
    commit("Reports", "56", IssueKind.STORY, "carol", V1, DOC),
    commit("", "", IssueKind.UNKNOWN, "dave", DOC),
]


@pytest.fixture
def stats():
    return aggregate(COMMITS, SIOP_RULES)


class TestTotals:
    def test_counts(self, stats):
        assert stats.commits == 5
        assert stats.commits_with_issues == 4
        assert stats.features == 3  # Login, Reports, ""
        assert stats.issues == 4  # 101, 55, 56, ""

    def test_kinds(self, stats):
        assert stats.kinds == {"bug": 2, "story": 2, "unknown": 1}

    def test_files_per_layer_counts_classified_occurrences(self, stats):
        assert stats.files_per_layer == {"m": 3, "v": 2, "c": 1}

    def test_per_commit_histograms(self, stats):
        assert stats.layers_per_commit == {2: 1, 1: 3, 0: 1}
        assert stats.commits_per_combination == {"mv": 1, "c": 1, "m": 1, "v": 1, "": 1}


class TestEntityHistograms:
    def test_features(self, stats):
        assert stats.commits_per_feature == {3: 1, 1: 2}
        assert stats.authors_per_feature == {2: 1, 1: 2}
        assert stats.layers_per_feature == {3: 1, 1: 1, 0: 1}
        assert stats.issues_per_feature == {2: 1, 1: 2}
        assert stats.features_per_combination == {"mvc": 1, "v": 1, "": 1}

    def test_issues(self, stats):
        assert stats.commits_per_issue == {2: 1, 1: 3}
        assert stats.authors_per_issue == {2: 1, 1: 3}
        assert stats.layers_per_issue == {3: 1, 1: 2, 0: 1}
        assert stats.issues_per_combination == {"mvc": 1, "m": 1, "v": 1, "": 1}

    def test_feature_histogram_sums_to_commit_total(self, stats):
        total = sum(count * features for count, features in stats.commits_per_feature.items())
        assert total == stats.commits

    def test_issue_histogram_sums_to_commit_total(self, stats):
        total = sum(count * issues for count, issues in stats.commits_per_issue.items())
        assert total == stats.commits


class TestFilters:
    def test_issue_kind(self):
        stats = aggregate(COMMITS, SIOP_RULES, AggregationFilters(issue_kind=IssueKind.BUG))
        assert stats.commits == 2
        assert stats.kinds == {"bug": 2}
        assert stats.features == 1

    def test_with_issues_only(self):
        stats = aggregate(COMMITS, SIOP_RULES, AggregationFilters(with_issues_only=True))
        assert stats.commits == 4
        assert stats.commits == stats.commits_with_issues

    def test_min_files_counts_distinct_classified_files(self):
        # Login: M1, V1, C1, M2 (4 files); Reports: V1 (DOC is unclassified)
        stats = aggregate(COMMITS, SIOP_RULES, AggregationFilters(min_files=2))
        assert stats.features == 1
        assert stats.commits_per_feature == {3: 1}
        # 101: M1, V1, C1; 55: M1, M2
        assert stats.issues == 2
        assert stats.commits == 5  # per-commit totals are unaffected

    def test_min_files_zero_keeps_everything(self):
        stats = aggregate(COMMITS, SIOP_RULES, AggregationFilters(min_files=0))
        assert stats.features == 3

    def test_add_reports_rejection(self):
        aggregator = LayerAggregator(SIOP_RULES, AggregationFilters(with_issues_only=True))
        assert aggregator.add(COMMITS[0])
        assert not aggregator.add(COMMITS[-1])

    def test_empty_input(self):
        stats = aggregate([], SIOP_RULES)
        assert stats.commits == 0
        assert stats.features == 0
        assert not stats.commits_per_feature


class TestReport:
    def test_text_lines(self, stats):
        lines = format_report(stats).splitlines()
        assert lines[0] == "Commits: 5"
        assert "CommitsWithIssues: 4" in lines
        assert "FilesPerLayer: {c: 1, m: 3, v: 2}" in lines
        assert "LayersPerCommit: {0: 1, 1: 3, 2: 1}" in lines
        assert lines[-1] == "Kinds: {bug: 2, story: 2, unknown: 1}"

    def test_empty_combination_sorted_first(self, stats):
        line = next(
            text for text in format_report(stats).splitlines() if text.startswith("CommitsPerCombination")
        )
        assert line == "CommitsPerCombination: {: 1, c: 1, m: 1, mv: 1, v: 1}"

    def test_json_ready(self, stats):
        data = json.loads(json.dumps(stats_to_dict(stats)))
        assert data["commits"] == 5
        assert data["layers_per_commit"] == {"0": 1, "1": 3, "2": 1}
        assert data["kinds"] == {"bug": 2, "story": 2, "unknown": 1}
