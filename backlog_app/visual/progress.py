"""Step-based progress banner for Streamlit pages."""

from __future__ import annotations

from collections.abc import Sequence

import streamlit as st


class ProgressReporter:
    """Banner + progress bar advancing through a fixed list of named steps."""

    def __init__(self, title: str, steps: Sequence[str]):
        self._steps = tuple(steps)
        self._container = st.container()
        self._container.info(title)
        self._message_placeholder = self._container.empty()
        self._progress_placeholder = self._container.progress(0.0)
        self._done = 0
        self._finalized = False

    def advance(self, detail: str | None = None) -> None:
        if self._finalized or self._done >= len(self._steps):
            return
        label = self._steps[self._done]
        self._message_placeholder.write(f"{label}: {detail}" if detail else label)
        self._done += 1
        self._progress_placeholder.progress(self._done / len(self._steps))

    def complete(self, message: str) -> None:
        if self._finalized:
            return
        self._progress_placeholder.progress(1.0)
        self._container.success(message)
        self._finalized = True

    def error(self, message: str) -> None:
        if self._finalized:
            return
        self._container.error(message)
        self._finalized = True
