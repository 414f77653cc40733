"""
Filter panel for the file catalog.

Widgets write into the session's FilterSynchronizer through ``on_change``
callbacks; the synchronizer decides when the committed filters change. A
fragment re-runs on a short interval to fire due debounce timers, and
triggers a full rerun when that committed a new filter value.
"""

import logging
from datetime import date
from typing import Any, Dict, List, Optional

import streamlit as st

from config.settings import Settings
from ui.filters.model import FileFilters, format_size_input
from ui.filters.query_params import describe_filters
from ui.filters.synchronizer import FilterSynchronizer
from ui.state.session_manager import SessionStateManager

# Filter field -> Streamlit widget key
WIDGET_KEYS: Dict[str, str] = {
    "search": "filter_search",
    "file_type": "filter_file_type",
    "size_min": "filter_size_min",
    "size_max": "filter_size_max",
    "date_start": "filter_date_start",
    "date_end": "filter_date_end",
}

ALL_TYPES_OPTION = ""


def _parse_iso_date(text: str) -> Optional[date]:
    if not text:
        return None
    try:
        return date.fromisoformat(text)
    except ValueError:
        return None


def widget_values_from_filters(filters: FileFilters) -> Dict[str, Any]:
    """Widget values that display ``filters`` (neutral bounds show as empty)."""
    return {
        "search": filters.search,
        "file_type": filters.file_type,
        "size_min": format_size_input("min", filters.size_range.min),
        "size_max": format_size_input("max", filters.size_range.max),
        "date_start": _parse_iso_date(filters.date_range.start),
        "date_end": _parse_iso_date(filters.date_range.end),
    }


class FilterPanelRenderer:
    """Renders the filter widgets bound to a FilterSynchronizer."""

    def __init__(self, synchronizer: FilterSynchronizer, logger_obj: Optional[logging.Logger] = None):
        self.synchronizer = synchronizer
        self.logger = logger_obj or logging.getLogger(__name__)

    def sync_widgets_from_local(self, only_missing: bool = False) -> None:
        """Write the synchronizer's local value into the widget keys.

        Must run before the widgets are instantiated in the current script run.
        """
        for field, value in widget_values_from_filters(self.synchronizer.local).items():
            key = WIDGET_KEYS[field]
            if only_missing and key in st.session_state:
                continue
            st.session_state[key] = value

    def reconcile(self, committed: FileFilters) -> bool:
        """Feed the owner's filters to the synchronizer and refresh widgets if adopted."""
        adopted = self.synchronizer.reconcile_external(committed)
        if adopted:
            self.logger.info("Filter widgets replaced by externally committed filters")
            self.sync_widgets_from_local()
        else:
            self.sync_widgets_from_local(only_missing=True)
        return adopted

    def _on_widget_change(self, field: str) -> None:
        value = st.session_state.get(WIDGET_KEYS[field])
        self.synchronizer.edit(field, value)

    @staticmethod
    def _on_reset() -> None:
        SessionStateManager.reset_filter_state()

    def render(self, file_types: List[str]) -> None:
        """Render the filter widgets."""
        local = self.synchronizer.local
        options = [ALL_TYPES_OPTION] + [t for t in file_types if t]
        if local.file_type and local.file_type not in options:
            options.append(local.file_type)

        col1, col2, col3, col4 = st.columns(4)

        with col1:
            st.text_input(
                "Search by filename",
                key=WIDGET_KEYS["search"],
                placeholder="Search files...",
                on_change=self._on_widget_change,
                args=("search",),
            )

        with col2:
            st.selectbox(
                "File type",
                options=options,
                key=WIDGET_KEYS["file_type"],
                format_func=lambda value: "All types" if value == ALL_TYPES_OPTION else value,
                on_change=self._on_widget_change,
                args=("file_type",),
            )

        with col3:
            st.markdown("Size range (bytes)")
            min_col, max_col = st.columns(2)
            with min_col:
                st.text_input(
                    "Min",
                    key=WIDGET_KEYS["size_min"],
                    placeholder="Min",
                    label_visibility="collapsed",
                    on_change=self._on_widget_change,
                    args=("size_min",),
                )
            with max_col:
                st.text_input(
                    "Max",
                    key=WIDGET_KEYS["size_max"],
                    placeholder="Max",
                    label_visibility="collapsed",
                    on_change=self._on_widget_change,
                    args=("size_max",),
                )

        with col4:
            st.markdown("Upload date range")
            start_col, end_col = st.columns(2)
            with start_col:
                st.date_input(
                    "From",
                    key=WIDGET_KEYS["date_start"],
                    label_visibility="collapsed",
                    on_change=self._on_widget_change,
                    args=("date_start",),
                )
            with end_col:
                st.date_input(
                    "Until",
                    key=WIDGET_KEYS["date_end"],
                    label_visibility="collapsed",
                    on_change=self._on_widget_change,
                    args=("date_end",),
                )

        committed = SessionStateManager.get_committed_filters()
        labels = describe_filters(committed)
        info_col, reset_col = st.columns([5, 1])
        with info_col:
            if labels:
                st.caption("Applied filters: " + " · ".join(labels))
            if self.synchronizer.is_pending:
                st.caption("Updating results...")
        with reset_col:
            st.button("Reset filters", on_click=self._on_reset, disabled=committed.is_default and local.is_default)


def run_due_filter_timers() -> bool:
    """Fire due debounce timers; True when that committed a new filter value."""
    scheduler = st.session_state.get("filter_scheduler")
    if scheduler is None:
        return False
    before = SessionStateManager.get_committed_filters()
    return bool(scheduler.run_due()) and SessionStateManager.get_committed_filters() != before


@st.fragment(run_every=Settings.TIMER_PUMP_INTERVAL_SECONDS)
def pump_filter_timers() -> None:
    if run_due_filter_timers():
        st.rerun()
