"""Tests for date-string helpers."""
import math
from datetime import date

import pytest

from research_tracker.utils.dates import date_sort_key, parse_date_input, parse_date_or_none, utc_now_iso

TODAY = date(2026, 5, 20)


class TestParseDateInput:
    @pytest.mark.parametrize("text, expected", [
        ("01052026", "01/05/2026"),
        ("1/5/2026", "01/05/2026"),
        ("1/5", "01/05/2026"),
        ("0105", "01/05/2026"),
        ("2026-01-05", "01/05/2026"),
        ("", ""),
    ])
    def test_accepted_forms(self, text, expected):
        assert parse_date_input(text, today=TODAY) == expected

    @pytest.mark.parametrize("text", ["next week", "13/45/2026", "TBD"])
    def test_unparsable_returned_as_typed(self, text):
        assert parse_date_input(text, today=TODAY) == text


class TestParseDateOrNone:
    def test_formats(self):
        assert parse_date_or_none("2026-01-05") == date(2026, 1, 5)
        assert parse_date_or_none("01/05/2026") == date(2026, 1, 5)
        assert parse_date_or_none("2026-01-05T09:30:00.000Z") == date(2026, 1, 5)

    def test_junk(self):
        assert parse_date_or_none("") is None
        assert parse_date_or_none("soon") is None


class TestSortKey:
    def test_unparsable_sorts_last(self):
        keys = sorted(["soon", "03/01/2026", "2026-01-10"], key=date_sort_key)
        assert keys == ["2026-01-10", "03/01/2026", "soon"]
        assert date_sort_key("") == math.inf


def test_utc_now_iso_shape():
    stamp = utc_now_iso()
    assert stamp.endswith("Z")
    assert len(stamp) == len("2026-01-05T09:30:00.000Z")
