"""
Tests for the date and text helpers used by both export formats
"""
from datetime import date, datetime

from careerforge.schemas.resume import LanguageProficiency, SkillLevel
from careerforge.services.rendering.formatting import (
    bullet,
    format_date_range,
    format_month_year,
    join_present,
    labelled,
    rated_item,
)


def test_format_month_year():
    assert format_month_year(datetime(2022, 1, 15)) == "Jan 2022"
    assert format_month_year(date(2019, 12, 1)) == "Dec 2019"
    assert format_month_year(None) == ""


def test_format_month_year_ignores_host_locale():
    """Labels stay English whatever LC_TIME the process runs under"""

    class FrenchLocaleDate(date):
        def strftime(self, fmt):
            return "janv. 2022"

    assert format_month_year(FrenchLocaleDate(2022, 1, 5)) == "Jan 2022"
    labels = [format_month_year(date(2024, month, 1)) for month in range(1, 13)]
    assert labels == [
        "Jan 2024", "Feb 2024", "Mar 2024", "Apr 2024", "May 2024", "Jun 2024",
        "Jul 2024", "Aug 2024", "Sep 2024", "Oct 2024", "Nov 2024", "Dec 2024",
    ]


def test_date_range_with_both_ends():
    assert format_date_range(datetime(2020, 3, 1), datetime(2021, 6, 1)) == "Mar 2020 - Jun 2021"


def test_date_range_current_overrides_end_date():
    """An entry flagged current shows Present even when an end date is stored"""
    assert format_date_range(datetime(2022, 1, 1), datetime(2023, 1, 1), current=True) == "Jan 2022 - Present"
    assert format_date_range(datetime(2022, 1, 1), None, current=True) == "Jan 2022 - Present"


def test_date_range_partial_and_empty():
    assert format_date_range(datetime(2022, 1, 1), None) == "Jan 2022"
    assert format_date_range(None, datetime(2022, 1, 1)) == ""
    assert format_date_range(None, None) == ""
    assert format_date_range(None, None, current=True) == ""


def test_join_present_skips_missing_parts():
    assert join_present(["a@b.c", None, "Berlin"]) == "a@b.c | Berlin"
    assert join_present([None, "", None]) == ""
    assert join_present(["x", "y"], " • ") == "x • y"


def test_labels_and_items():
    assert labelled("GitHub", "https://github.com/x") == "GitHub: https://github.com/x"
    assert labelled("GitHub", None) is None
    assert bullet("Shipped it") == "• Shipped it"
    assert rated_item("Python", SkillLevel.EXPERT) == "Python (Expert)"
    assert rated_item("German", LanguageProficiency.FLUENT) == "German (Fluent)"
