"""
Storage Statistics Renderer

Renders the deduplication summary: upload counts, storage used and saved.
"""

import logging
import time
from datetime import datetime, timezone
from typing import Optional

import plotly.graph_objects as go
import streamlit as st

from api.models import StorageStats
from ui.services.file_service import FileCatalogService
from ui.state.session_manager import SessionStateManager
from ui.ui_utils import format_percentage, format_size, human_readable_timestamp

STORAGE_COLORS = {
    "Stored": "#636EFA",
    "Saved": "#00CC96",
}


def build_storage_breakdown_figure(stats: StorageStats) -> go.Figure:
    """
    Build a horizontal bar comparing uploaded volume with what is actually stored.

    Args:
        stats: Aggregate counters from the storage service

    Returns:
        Plotly figure with one stacked bar (stored + saved = uploaded)
    """
    fig = go.Figure()
    for label, value in (("Stored", stats.actual_storage_used), ("Saved", stats.storage_saved)):
        fig.add_trace(go.Bar(
            x=[value],
            y=["Uploaded"],
            name=label,
            orientation="h",
            marker_color=STORAGE_COLORS[label],
            text=[format_size(value)],
            textposition="inside",
            hovertemplate=f"{label}: %{{text}}<extra></extra>",
        ))

    fig.update_layout(
        barmode="stack",
        xaxis_title="Bytes",
        yaxis_title="",
        height=180,
        margin=dict(l=20, r=20, t=20, b=40),
        legend=dict(orientation="h", yanchor="bottom", y=1.02, x=0),
    )
    return fig


class StorageStatsRenderer:
    """Renders storage statistics, refreshing them on a fixed interval."""

    def __init__(self, service: FileCatalogService, logger_obj: Optional[logging.Logger] = None):
        """Initialize with the catalog service."""
        self.service = service
        self.logger = logger_obj or logging.getLogger(__name__)

    def refresh_if_stale(self, now: Optional[float] = None) -> None:
        """Fetch stats when the cached copy is older than the refresh interval."""
        now = time.time() if now is None else now
        if not SessionStateManager.stats_are_stale(now):
            return
        stats, error = self.service.fetch_stats()
        if error:
            self.logger.warning(f"Stats refresh failed: {error}")
        SessionStateManager.set_storage_stats(stats, error, now)

    def render(self) -> None:
        """Render the statistics section."""
        self.refresh_if_stale()
        stats = SessionStateManager.get_storage_stats()
        error = st.session_state.get("stats_error")

        st.subheader("Storage Statistics")
        if error:
            st.warning(error)
        if stats is None:
            if not error:
                st.info("No statistics available yet")
            return

        self._render_summary_metrics(stats)
        st.plotly_chart(build_storage_breakdown_figure(stats), use_container_width=True)

        fetched_at = st.session_state.get("stats_fetched_at")
        if fetched_at:
            st.caption(f"Last updated {human_readable_timestamp(datetime.fromtimestamp(fetched_at, tz=timezone.utc))}")

    def _render_summary_metrics(self, stats: StorageStats):
        col1, col2, col3, col4 = st.columns(4)

        with col1:
            st.metric("Total Uploads", stats.total_uploads)
            st.caption(f"{stats.unique_files} unique files")

        with col2:
            st.metric("Storage Used", format_size(stats.actual_storage_used))
            st.caption(f"of {format_size(stats.total_upload_size)} uploaded")

        with col3:
            st.metric("Storage Saved", format_size(stats.storage_saved))
            st.caption(f"{format_percentage(stats.storage_saved_percentage)} reduction")

        with col4:
            st.metric("Duplicates Prevented", stats.duplicates_prevented)

