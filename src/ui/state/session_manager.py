"""
Centralized session state management for the FileHub dashboard.

Streamlit reruns the page script on every interaction, so everything that
must outlive a rerun (committed filters, the filter synchronizer and its
timer queue, the last action result) lives in ``st.session_state`` and is
accessed through this class.
"""

import logging
from typing import Any, Callable, Dict, Optional, Union

import streamlit as st

from api.models import StorageStats
from config.settings import Settings
from ui.filters.model import DEFAULT_FILTERS, FileFilters
from ui.filters.scheduling import CooperativeScheduler
from ui.filters.synchronizer import FilterSynchronizer


def _apply_defaults(key_defaults: Dict[str, Any], overwrite: bool) -> None:
    for key, default_value in key_defaults.items():
        if overwrite or key not in st.session_state:
            st.session_state[key] = default_value() if callable(default_value) else default_value


class SessionStateManager:
    """Manages Streamlit session state with type-safe accessors."""

    # Committed filters drive the catalog query; the synchronizer owns local edits
    FILTER_KEYS: Dict[str, Union[None, FileFilters, Callable]] = {
        "committed_filters": DEFAULT_FILTERS,
        "filter_synchronizer": None,
        "filter_scheduler": None,
        "filters_restored_from_url": False,
    }

    CATALOG_KEYS: Dict[str, Union[None, str, Callable]] = {
        "action_message": None,
        "action_error": None,
        "download_payload": None,
    }

    STATS_KEYS: Dict[str, Union[None, float]] = {
        "storage_stats": None,
        "stats_error": None,
        "stats_fetched_at": 0.0,
    }

    # Widget keys owned by the filter panel; cleared when filters are reset
    FILTER_WIDGET_KEYS = (
        "filter_search",
        "filter_file_type",
        "filter_size_min",
        "filter_size_max",
        "filter_date_start",
        "filter_date_end",
    )

    @classmethod
    def initialize_all_session_state(cls) -> None:
        """Initialize all session state variables with their default values."""
        _apply_defaults({**cls.FILTER_KEYS, **cls.CATALOG_KEYS, **cls.STATS_KEYS}, overwrite=False)

    # --- Filters ---------------------------------------------------------

    @classmethod
    def get_committed_filters(cls) -> FileFilters:
        """Get the filters currently applied to the catalog query."""
        return st.session_state.get("committed_filters", DEFAULT_FILTERS)

    @classmethod
    def set_committed_filters(cls, filters: FileFilters) -> None:
        """Commit filters emitted by the synchronizer or restored from the URL."""
        st.session_state["committed_filters"] = filters

    @classmethod
    def get_scheduler(cls) -> CooperativeScheduler:
        """Get (or create) the session's timer queue."""
        scheduler = st.session_state.get("filter_scheduler")
        if scheduler is None:
            scheduler = CooperativeScheduler()
            st.session_state["filter_scheduler"] = scheduler
        return scheduler

    @classmethod
    def get_synchronizer(cls, logger_obj: Optional[logging.Logger] = None) -> FilterSynchronizer:
        """Get (or create) the session's filter synchronizer."""
        synchronizer = st.session_state.get("filter_synchronizer")
        if synchronizer is None or synchronizer.closed:
            synchronizer = FilterSynchronizer(
                initial=cls.get_committed_filters(),
                on_change=cls.set_committed_filters,
                scheduler=cls.get_scheduler(),
                debounce_ms=Settings.FILTER_DEBOUNCE_MS,
                logger_obj=logger_obj,
            )
            st.session_state["filter_synchronizer"] = synchronizer
        return synchronizer

    @classmethod
    def reset_filter_state(cls) -> None:
        """Tear down the synchronizer and return every filter to neutral."""
        synchronizer = st.session_state.get("filter_synchronizer")
        if synchronizer is not None:
            synchronizer.teardown()
        scheduler = st.session_state.get("filter_scheduler")
        if scheduler is not None:
            scheduler.cancel_all()
        for key in cls.FILTER_WIDGET_KEYS:
            if key in st.session_state:
                del st.session_state[key]
        _apply_defaults({k: v for k, v in cls.FILTER_KEYS.items() if k != "filters_restored_from_url"}, overwrite=True)

    # --- Catalog actions -------------------------------------------------

    @classmethod
    def set_action_result(cls, message: Optional[str] = None, error: Optional[str] = None) -> None:
        """Remember the outcome of an upload/delete/download for the next rerun."""
        st.session_state["action_message"] = message
        st.session_state["action_error"] = error

    @classmethod
    def pop_action_result(cls) -> tuple:
        """Return and clear the last (message, error) pair."""
        message = st.session_state.get("action_message")
        error = st.session_state.get("action_error")
        st.session_state["action_message"] = None
        st.session_state["action_error"] = None
        return message, error

    # --- Stats -----------------------------------------------------------

    @classmethod
    def get_storage_stats(cls) -> Optional[StorageStats]:
        """Get the last fetched storage statistics."""
        return st.session_state.get("storage_stats")

    @classmethod
    def set_storage_stats(cls, stats: Optional[StorageStats], error: Optional[str], fetched_at: float) -> None:
        """Store a stats fetch result; a failed fetch keeps the previous numbers."""
        if stats is not None:
            st.session_state["storage_stats"] = stats
        st.session_state["stats_error"] = error
        st.session_state["stats_fetched_at"] = fetched_at

    @classmethod
    def stats_are_stale(cls, now: float) -> bool:
        """Check whether stats are older than the refresh interval."""
        return now - st.session_state.get("stats_fetched_at", 0.0) >= Settings.STATS_REFRESH_SECONDS

    @classmethod
    def invalidate_stats(cls) -> None:
        """Force a stats refresh on the next rerun (after uploads and deletes)."""
        st.session_state["stats_fetched_at"] = 0.0
