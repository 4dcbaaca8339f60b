"""Tests for linkage/normalizer.py - join keys from comment, author and time."""

import pytest

from crosslayer.exceptions import MalformedTimestampError
from crosslayer.linkage import COMMENT_LIMIT, KeyNormalizer, LocaleTables


class TestCanonicalTimestamp:
    def test_year_first_pm(self, normalizer):
        assert normalizer.canonical_timestamp("2010-mar-15 02:30 PM") == "15/03/2010 14:30"

    def test_day_first_as_exported(self, normalizer):
        assert normalizer.canonical_timestamp("15-mar-2010 02:30 PM") == "15/03/2010 14:30"

    def test_midnight(self, normalizer):
        assert normalizer.canonical_timestamp("2010-jan-01 12:15 AM") == "01/01/2010 00:15"

    def test_noon_stays_twelve(self, normalizer):
        assert normalizer.canonical_timestamp("01-jan-2010 12:15 PM") == "01/01/2010 12:15"

    def test_morning_hour_unchanged(self, normalizer):
        assert normalizer.canonical_timestamp("05-dez-2011 09:05 AM") == "05/12/2011 09:05"

    def test_single_digit_day_and_hour_padded(self, normalizer):
        assert normalizer.canonical_timestamp("5-set-2011 9:05 PM") == "05/09/2011 21:05"

    def test_month_case_insensitive(self, normalizer):
        assert normalizer.canonical_timestamp("15-MAR-2010 02:30 pm") == "15/03/2010 14:30"

    @pytest.mark.parametrize(
        "month, number",
        [("jan", "01"), ("fev", "02"), ("abr", "04"), ("mai", "05"), ("ago", "08"), ("out", "10")],
    )
    def test_portuguese_months(self, normalizer, month, number):
        assert normalizer.canonical_timestamp(f"01-{month}-2012 10:00 AM") == f"01/{number}/2012 10:00"

    @pytest.mark.parametrize(
        "timestamp",
        [
            "2010-xyz-15 02:30 PM",
            "15-feb-2010 02:30 PM",  # English abbreviation
            "15/03/2010 14:30",
            "15-mar-2010 13:30 PM",
            "15-mar-2010 00:30 AM",
            "15-mar-2010 02:75 PM",
            "",
        ],
    )
    def test_malformed(self, normalizer, timestamp):
        with pytest.raises(MalformedTimestampError) as exc:
            normalizer.canonical_timestamp(timestamp)
        assert exc.value.timestamp == timestamp


class TestKey:
    def test_spec_example(self, normalizer):
        key = normalizer.key("Fix bug", "Alice", "2010-mar-15 02:30 PM")
        assert key == "fix bug - alice - 15/03/2010 14:30"

    def test_comment_truncated(self, normalizer):
        comment = "x" * (COMMENT_LIMIT + 10)
        key = normalizer.key(comment, "a", "15-mar-2010 02:30 PM")
        assert key.startswith("x" * COMMENT_LIMIT + " - a - ")

    def test_truncation_makes_long_comments_collide(self, normalizer):
        base = "y" * COMMENT_LIMIT
        k1 = normalizer.key(base + " first", "a", "15-mar-2010 02:30 PM")
        k2 = normalizer.key(base + " second", "a", "15-mar-2010 02:30 PM")
        assert k1 == k2

    def test_no_comment_sentinel_blanked(self, normalizer):
        key = normalizer.key("<nenhum comentário>", "bob", "15-mar-2010 02:30 PM")
        assert key == " - bob - 15/03/2010 14:30"

    def test_sentinel_case_insensitive(self, normalizer):
        assert normalizer.normalize_comment("<NENHUM COMENTÁRIO>") == ""

    def test_sentinel_only_when_whole_comment(self, normalizer):
        assert normalizer.normalize_comment("<nenhum comentário> extra") != ""

    def test_deterministic(self, normalizer):
        args = ("Same", "Author", "15-mar-2010 02:30 PM")
        assert normalizer.key(*args) == KeyNormalizer().key(*args)

    def test_custom_sentinel(self):
        tables = LocaleTables(no_comment="<no comment>")
        assert KeyNormalizer(tables).normalize_comment("<No Comment>") == ""

    def test_custom_sentinel_with_capitals(self):
        tables = LocaleTables(no_comment="<Sem Comentário>")
        assert KeyNormalizer(tables).normalize_comment("<sem comentário>") == ""
        assert KeyNormalizer(tables).normalize_comment("<Sem Comentário>") == ""


class TestDescriptor:
    def test_matches_export_key(self, normalizer):
        exported = normalizer.key("Fix bug", "Alice", "15-mar-2010 02:30 PM")
        assert normalizer.key_from_descriptor("cs1 - Fix bug - Alice - 15/03/2010 14:30") == exported

    def test_comment_with_separator(self, normalizer):
        exported = normalizer.key("Tweak - layout - again", "carol", "17-mar-2010 12:10 PM")
        descriptor = "cs3 - Tweak - layout - again - carol - 17/03/2010 12:10"
        assert normalizer.key_from_descriptor(descriptor) == exported

    def test_empty_comment(self, normalizer):
        exported = normalizer.key("<nenhum comentário>", "bob", "15-mar-2010 02:30 PM")
        assert normalizer.key_from_descriptor("cs - bob - 15/03/2010 14:30") == exported

    def test_descriptor_comment_truncated(self, normalizer):
        comment = "z" * 70
        exported = normalizer.key(comment, "bob", "15-mar-2010 02:30 PM")
        assert normalizer.key_from_descriptor(f"cs - {comment} - bob - 15/03/2010 14:30") == exported

    def test_surrounding_whitespace_ignored(self, normalizer):
        assert normalizer.key_from_descriptor("  cs - c - a - 01/01/2010 00:00\r ") == (
            "c - a - 01/01/2010 00:00"
        )

    def test_too_few_segments(self, normalizer):
        assert normalizer.key_from_descriptor("just text") is None
        assert normalizer.key_from_descriptor("a - b") is None
