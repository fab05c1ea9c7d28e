import logging

import pandas as pd
import pytest
import pytz

from backlog_app.analytics.metrics.timestamps import parse_timestamp
from backlog_app.core.config import TIMEZONE
from backlog_app.core.mappers import (
    TicketImportError,
    dataframe_to_records,
    map_row,
    read_ticket_file,
    records_to_dataframe,
    resolve_columns,
    rows_to_records,
)
from backlog_app.core.models import TicketStatus
from backlog_app.core.status import is_excluded_state, normalize_state

TZ = pytz.timezone(TIMEZONE)


def test_normalize_state():
    assert normalize_state("Closed") is TicketStatus.CLOSED
    assert normalize_state(" fechado ") is TicketStatus.CLOSED
    assert normalize_state("Resolved") is TicketStatus.CLOSED
    assert normalize_state("Cancelado") is TicketStatus.CLOSED
    assert normalize_state("Work in Progress") is TicketStatus.OPEN
    assert normalize_state(None) is TicketStatus.OPEN
    assert normalize_state("nan") is TicketStatus.OPEN


def test_excluded_states():
    assert is_excluded_state("On Hold")
    assert is_excluded_state("Pending Vendor")
    assert is_excluded_state("Aguardando Usuário")
    assert not is_excluded_state("In Progress")
    assert not is_excluded_state(None)


def test_parse_timestamp_naive_is_local_time():
    ts = parse_timestamp("2024-03-01T07:30", TZ)
    assert (ts.hour, ts.minute) == (7, 30)
    assert str(ts.tz) == TIMEZONE


def test_parse_timestamp_aware_is_converted():
    ts = parse_timestamp("2024-03-01T10:30:00+00:00", TZ)
    assert (ts.day, ts.hour, ts.minute) == (1, 7, 30)


def test_parse_timestamp_excel_serial():
    ts = parse_timestamp(45352.5, TZ)
    assert (ts.year, ts.month, ts.day, ts.hour) == (2024, 3, 1, 12)


def test_parse_timestamp_invalid_values():
    for value in (None, "", "   ", "not a date", float("nan"), True):
        assert parse_timestamp(value, TZ) is None


def test_map_row_closed_uses_updated():
    record = map_row({"id": "INC1", "opened": "2024-03-01 09:00", "updated": "2024-03-04 10:00", "state": "Closed"})
    assert record.status is TicketStatus.CLOSED
    assert record.closed_at == pd.Timestamp("2024-03-04 10:00").tz_localize(TZ)
    assert not record.excluded


def test_map_row_missing_updated_falls_back_to_opened():
    record = map_row({"id": "INC1", "opened": "2024-03-01 09:00", "updated": None, "state": "Fechado"})
    assert record.closed_at == record.opened_at


def test_map_row_open_ticket_ignores_updated():
    record = map_row({"id": "INC1", "opened": "2024-03-01 09:00", "updated": "2024-03-02", "state": "On Hold"})
    assert record.status is TicketStatus.OPEN
    assert record.closed_at is None
    assert record.excluded
    assert record.state == "On Hold"


def test_map_row_drops_unparseable_timestamps():
    assert map_row({"id": "INC1", "opened": "garbage", "state": "New"}) is None
    assert map_row({"id": "INC2", "opened": "2024-03-01", "updated": "garbage", "state": "Closed"}) is None


def test_rows_to_records_logs_dropped(caplog):
    rows = [
        {"Number": "INC1", "Opened": "2024-03-01 09:00", "State": "New"},
        {"Number": "INC2", "Opened": "??", "State": "New"},
    ]
    with caplog.at_level(logging.WARNING):
        records = rows_to_records(rows)
    assert [r.id for r in records] == ["INC1"]
    assert "Dropped 1 ticket row(s)" in caplog.text


def test_resolve_columns_aliases():
    columns = resolve_columns(["Número", "Aberto", "Atualizado", "Estado", "Priority"])
    assert columns == {"id": "Número", "opened": "Aberto", "updated": "Atualizado", "state": "Estado"}


def test_dataframe_to_records():
    df = pd.DataFrame(
        {
            "Number": ["INC1", "INC2", "INC3"],
            "Opened": ["2024-03-01 07:30", "2024-03-01 09:00", None],
            "Updated": ["2024-03-01 07:30", "2024-03-04 10:00", "2024-03-04 10:00"],
            "State": ["New", "Closed", "Closed"],
            "Priority": ["P1", "P2", "P3"],
        }
    )
    records = dataframe_to_records(df)
    assert [r.id for r in records] == ["INC1", "INC2"]
    assert records[1].is_closed


def test_dataframe_to_records_requires_columns():
    df = pd.DataFrame({"Number": ["INC1"], "Opened": ["2024-03-01"]})
    with pytest.raises(TicketImportError, match="state"):
        dataframe_to_records(df)
    assert dataframe_to_records(pd.DataFrame()) == []


def test_read_ticket_file_csv(tmp_path):
    path = tmp_path / "tickets.csv"
    path.write_text(
        "Number,Opened,Updated,State\n"
        "INC1,2024-03-01 07:30,2024-03-01 07:30,New\n"
        "INC2,2024-03-01 09:00,2024-03-04 10:00,Closed\n",
        encoding="utf-8",
    )
    df = read_ticket_file(path)
    records = dataframe_to_records(df)
    assert len(records) == 2


def test_read_ticket_file_rejects_unknown_type(tmp_path):
    path = tmp_path / "tickets.json"
    path.write_text("{}", encoding="utf-8")
    with pytest.raises(TicketImportError, match="Unsupported"):
        read_ticket_file(path)


def test_records_to_dataframe():
    records = rows_to_records([{"id": "INC1", "opened": "2024-03-01 07:30", "state": "Pending"}])
    df = records_to_dataframe(records)
    assert list(df["id"]) == ["INC1"]
    assert bool(df.loc[0, "excluded"]) is True
    assert df.loc[0, "status"] == "open"
    assert records_to_dataframe([]).empty
