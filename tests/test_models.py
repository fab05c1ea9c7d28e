from datetime import date

import pytest

from backlog_app.core.config import parse_cutoff
from backlog_app.core.models import BacklogSeries, DailyPoint, Policy, parse_month


def test_parse_cutoff():
    assert parse_cutoff("08:00") == (8, 0)
    assert parse_cutoff("17:45") == (17, 45)
    assert parse_cutoff("9") == (9, 0)
    assert parse_cutoff("") == (8, 0)
    for bad in ("25:00", "08:61", "ab:cd"):
        with pytest.raises(ValueError):
            parse_cutoff(bad)


def test_parse_month():
    assert parse_month("2024-03") == (2024, 3)
    for bad in ("2024-13", "March", ""):
        with pytest.raises(ValueError):
            parse_month(bad)


def test_policy_from_inputs():
    policy = Policy.from_inputs("2024-03", "07:30", business_days_only=False, fill_weekends=False)
    assert (policy.year, policy.month) == (2024, 3)
    assert policy.cutoff_label == "07:30"
    assert policy.month_label == "2024-03"
    assert not policy.business_days_only and not policy.fill_weekends


def test_series_to_frame():
    series = BacklogSeries((DailyPoint(date(2024, 3, 1), 3, 1, 0),))
    df = series.to_frame()
    assert list(df.columns) == ["date", "backlog_stock", "opened_volume", "closed_volume", "filled"]
    assert df.loc[0, "backlog_stock"] == 3
    assert BacklogSeries().to_frame().empty
