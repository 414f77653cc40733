"""
File Catalog Renderer

Renders the filtered file table together with upload, download and delete
actions. Actions run inside widget callbacks and leave their outcome in
session state, so the message survives the rerun that follows.
"""

import logging
from typing import Optional

import pandas as pd
import streamlit as st

from config.settings import Settings
from ui.services.file_service import FileCatalogService
from ui.state.session_manager import SessionStateManager
from ui.ui_utils import human_readable_timestamp

DISPLAY_COLUMNS = {
    "original_filename": "Filename",
    "mime_type": "Type",
    "size_display": "Size",
    "upload_count": "Uploads",
    "created_at": "Uploaded",
}


class CatalogRenderer:
    """Renders the catalog table and file actions."""

    def __init__(self, service: FileCatalogService, logger_obj: Optional[logging.Logger] = None):
        """Initialize with the catalog service."""
        self.service = service
        self.logger = logger_obj or logging.getLogger(__name__)

    # --- Action callbacks ------------------------------------------------

    def _on_upload(self) -> None:
        uploaded = st.session_state.get("catalog_upload")
        if uploaded is None:
            return
        content = uploaded.getvalue()
        if len(content) > Settings.MAX_UPLOAD_SIZE_MB * 1024 * 1024:
            SessionStateManager.set_action_result(
                error=f"{uploaded.name} exceeds the {Settings.MAX_UPLOAD_SIZE_MB} MB upload limit"
            )
            return
        record, error = self.service.upload(uploaded.name, content, uploaded.type or None)
        if error:
            SessionStateManager.set_action_result(error=error)
            return
        if record.upload_count > 1:
            message = f"{record.original_filename} is a duplicate; existing copy reused ({record.upload_count} uploads)"
        else:
            message = f"Uploaded {record.original_filename}"
        self.logger.info(message)
        SessionStateManager.set_action_result(message=message)
        SessionStateManager.invalidate_stats()

    def _on_delete(self, file_id: str, filename: str) -> None:
        error = self.service.delete(file_id)
        if error:
            SessionStateManager.set_action_result(error=error)
            return
        self.logger.info(f"Deleted {filename} ({file_id})")
        SessionStateManager.set_action_result(message=f"Deleted {filename}")
        SessionStateManager.invalidate_stats()

    def _on_prepare_download(self, file_url: str, filename: str, mime_type: str) -> None:
        content, error = self.service.download(file_url)
        if error:
            SessionStateManager.set_action_result(error=error)
            st.session_state["download_payload"] = None
            return
        st.session_state["download_payload"] = {
            "data": content,
            "file_name": filename,
            "mime": mime_type or "application/octet-stream",
        }

    # --- Rendering -------------------------------------------------------

    def render_action_result(self) -> None:
        """Show (and clear) the outcome of the last action."""
        message, error = SessionStateManager.pop_action_result()
        if message:
            st.success(message)
        if error:
            st.error(error)

    def render_upload(self) -> None:
        """Render the upload widget."""
        with st.expander("Upload a file", expanded=False):
            st.file_uploader(
                "Choose a file",
                key="catalog_upload",
                on_change=self._on_upload,
                help="Identical content is stored once; re-uploads only increase the upload count.",
            )

    def render_table(self, files_df: pd.DataFrame, error: Optional[str] = None) -> None:
        """Render the result table and per-file actions."""
        if error:
            st.error(error)
            return
        if files_df.empty:
            st.info("No files match the current filters")
            return

        st.caption(f"{len(files_df)} file(s)")
        display_df = files_df[list(DISPLAY_COLUMNS)].rename(columns=DISPLAY_COLUMNS)
        display_df["Uploaded"] = display_df["Uploaded"].apply(human_readable_timestamp)
        st.dataframe(display_df, use_container_width=True, hide_index=True)

        self._render_row_actions(files_df)

    def _render_row_actions(self, files_df: pd.DataFrame) -> None:
        labels = {
            row["uuid"]: f"{row['original_filename']} ({row['size_display']})"
            for _, row in files_df.iterrows()
        }
        selected_id = st.selectbox(
            "Select a file",
            options=list(labels),
            format_func=lambda file_id: labels[file_id],
            key="catalog_selected_file",
        )
        if selected_id is None:
            return
        row = files_df.loc[files_df["uuid"] == selected_id].iloc[0]

        col1, col2, _ = st.columns([1, 1, 4])
        with col1:
            st.button(
                "Prepare download",
                key="catalog_prepare_download",
                disabled=not row["file"],
                on_click=self._on_prepare_download,
                args=(row["file"], row["original_filename"], row["mime_type"]),
            )
        with col2:
            st.button(
                "Delete",
                key="catalog_delete",
                type="primary",
                on_click=self._on_delete,
                args=(row["uuid"], row["original_filename"]),
            )

        payload = st.session_state.get("download_payload")
        if payload and payload["file_name"] == row["original_filename"]:
            st.download_button(
                f"Save {payload['file_name']}",
                data=payload["data"],
                file_name=payload["file_name"],
                mime=payload["mime"],
                key="catalog_download",
            )
