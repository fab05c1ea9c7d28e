"""Data import page: upload a ticket export and build the BacklogService."""

from __future__ import annotations

import streamlit as st

from backlog_app.app import register_page
from backlog_app.core.config import MAX_INPUT_RECORDS, SETTINGS, SUPPORTED_UPLOAD_TYPES
from backlog_app.core.mappers import TicketImportError, dataframe_to_records, read_ticket_file
from backlog_app.core.service import BacklogService
from backlog_app.visual.progress import ProgressReporter

IMPORT_STEPS = ("Reading file", "Normalizing tickets", "Preparing backlog engine")


@register_page("Data Import")
def data_import_page():
    st.title("Ticket Import")
    st.caption("Upload an incident/request export (Number, Opened, Updated, State columns).")
    uploaded = st.file_uploader("Ticket export", type=list(SUPPORTED_UPLOAD_TYPES))
    dayfirst = st.checkbox("Dates are day-first (DD/MM/YYYY)", value=False)
    load = st.button("Load Tickets", type="primary", disabled=uploaded is None)

    if load and uploaded is not None:
        reporter = ProgressReporter(f"Importing {uploaded.name}", IMPORT_STEPS)
        try:
            reporter.advance(uploaded.name)
            raw = read_ticket_file(uploaded, uploaded.name)
            reporter.advance(f"{len(raw)} row(s)")
            records = dataframe_to_records(raw, dayfirst=dayfirst)
            reporter.advance()
            service = BacklogService(records, max_records=MAX_INPUT_RECORDS)
        except TicketImportError as exc:
            reporter.error(str(exc))
            return
        st.session_state["backlog_service"] = service
        st.session_state["import_stats"] = {
            "rows": len(raw),
            "usable": len(records),
            "used": len(service.records),
        }
        reporter.complete(f"Loaded {len(service.records)} ticket(s).")

    service: BacklogService | None = st.session_state.get("backlog_service")
    if service is None:
        st.info("No tickets loaded yet.")
        return

    stats = st.session_state.get("import_stats", {})
    c1, c2, c3 = st.columns(3)
    c1.metric("Rows in file", stats.get("rows", len(service.records)))
    c2.metric("Usable tickets", stats.get("usable", len(service.records)))
    c3.metric("Excluded (hold/pending)", sum(1 for r in service.records if r.excluded))
    if stats.get("usable", 0) > stats.get("used", 0):
        st.warning(f"Only the first {MAX_INPUT_RECORDS} tickets are used for backlog calculations.")
    if stats.get("rows", 0) > stats.get("usable", 0):
        st.caption("Rows with unreadable Opened/Updated dates were skipped.")

    st.markdown("---")
    st.dataframe(service.records_frame().head(SETTINGS.max_table_rows), hide_index=True)
