"""Tests for activity.py - commit size, cadence and author volume."""

import pytest

from crosslayer.activity import analyze_activity, format_activity, parse_modified
from crosslayer.exceptions import MalformedTimestampError
from crosslayer.linkage import ChangeInfo, Commit, Issue


def commit(author, modified, n_files):
    return Commit(
        feature="",
        issue=Issue(),
        change=ChangeInfo(author=author, comment="", modified=modified, uuids=("u",)),
        files=tuple(f"/f{i}" for i in range(n_files)),
    )


class TestParseModified:
    def test_consolidated_format(self):
        parsed = parse_modified("15/03/2010 14:30")
        assert (parsed.year, parsed.month, parsed.day, parsed.hour, parsed.minute) == (2010, 3, 15, 14, 30)

    def test_git_iso_format(self):
        parsed = parse_modified("2014-03-01 10:00:00 -0300")
        assert parsed.utcoffset().total_seconds() == -3 * 3600

    def test_unrecognized(self):
        with pytest.raises(MalformedTimestampError):
            parse_modified("15-mar-2010 02:30 PM")


class TestAnalyzeActivity:
    def test_means(self):
        commits = [
            commit("bob", "01/01/2010 16:00", 3),
            commit("alice", "01/01/2010 10:00", 1),
            commit("alice", "01/01/2010 12:00", 2),
        ]
        report = analyze_activity(commits)
        assert report.commits == 3
        assert report.mean_files_per_commit == pytest.approx(2.0)
        # sorted: 10:00, 12:00, 16:00 -> intervals 2h and 4h
        assert report.mean_hours_between_commits == pytest.approx(3.0)

    def test_authors_ascending(self):
        commits = [
            commit("alice", "01/01/2010 10:00", 1),
            commit("alice", "02/01/2010 10:00", 1),
            commit("bob", "03/01/2010 10:00", 1),
        ]
        assert analyze_activity(commits).commits_per_author == [("bob", 1), ("alice", 2)]

    def test_git_offsets_respected(self):
        commits = [
            commit("a", "2014-03-01 10:00:00 -0300", 0),
            commit("b", "2014-03-01 14:00:00 +0000", 0),
        ]
        # 10:00 -0300 is 13:00 UTC
        assert analyze_activity(commits).mean_hours_between_commits == pytest.approx(1.0)

    def test_single_commit_has_no_interval(self):
        report = analyze_activity([commit("a", "01/01/2010 10:00", 4)])
        assert report.mean_hours_between_commits == 0.0
        assert report.mean_files_per_commit == pytest.approx(4.0)

    def test_empty(self):
        report = analyze_activity([])
        assert report.commits == 0
        assert report.commits_per_author == []

    def test_format(self):
        commits = [commit("alice", "01/01/2010 10:00", 1), commit("bob", "01/01/2010 13:00", 2)]
        assert format_activity(analyze_activity(commits)).splitlines() == ["1.5 3", "1 alice", "1 bob"]
