from datetime import date, datetime

import pandas as pd
import pytz

from backlog_app.analytics.business_days import BusinessCalendar
from backlog_app.core.clock import fixed_clock
from backlog_app.core.config import TIMEZONE
from backlog_app.core.models import Policy, TicketRecord
from backlog_app.core.service import BacklogService

TZ = pytz.timezone(TIMEZONE)


def _records(n):
    return [
        TicketRecord(id=f"INC{i}", opened_at=pd.Timestamp("2024-03-01 07:00").tz_localize(TZ))
        for i in range(n)
    ]


def test_snapshot_is_capped():
    svc = BacklogService(_records(5), clock=fixed_clock(datetime(2024, 3, 5)), max_records=3)
    assert [r.id for r in svc.records] == ["INC0", "INC1", "INC2"]
    uncapped = BacklogService(_records(5), clock=fixed_clock(datetime(2024, 3, 5)), max_records=None)
    assert len(uncapped.records) == 5


def test_compute_returns_series_and_summary():
    svc = BacklogService(_records(4), clock=fixed_clock(datetime(2024, 3, 5, 12, 0)))
    result = svc.compute(Policy.from_inputs("2024-03", fill_weekends=False), threshold=3)
    assert len(result.series) == 5
    assert result.summary.mean == 4
    assert result.summary.days_above_threshold == 5


def test_superseded_results_are_not_current():
    svc = BacklogService(_records(2), clock=fixed_clock(datetime(2024, 3, 5, 12, 0)))
    first = svc.compute(Policy.from_inputs("2024-03", "08:00"))
    second = svc.compute(Policy.from_inputs("2024-03", "09:00"))
    assert second.generation > first.generation
    assert not svc.is_current(first)
    assert svc.is_current(second)
    assert svc.latest_generation == second.generation


def test_compute_accepts_calendar_override():
    svc = BacklogService(_records(1), clock=fixed_clock(datetime(2024, 3, 5, 12, 0)))
    policy = Policy.from_inputs("2024-03", fill_weekends=True)
    plain = svc.compute(policy)
    holiday = svc.compute(policy, calendar=BusinessCalendar.with_holidays([date(2024, 3, 4)]))
    assert not plain.series[3].filled
    assert holiday.series[3].filled


def test_from_dataframe():
    df = pd.DataFrame(
        {
            "Number": ["INC1", "INC2"],
            "Opened": ["2024-03-01 07:30", "bad"],
            "State": ["New", "New"],
        }
    )
    svc = BacklogService.from_dataframe(df, clock=fixed_clock(datetime(2024, 3, 5)))
    assert len(svc.records) == 1
    assert list(svc.records_frame()["id"]) == ["INC1"]
