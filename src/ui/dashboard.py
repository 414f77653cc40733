from __future__ import annotations

# Standard Library Imports
import logging
import sys
from pathlib import Path

# Third-Party Imports
import streamlit as st

# Add the 'src' directory to sys.path when launched with `streamlit run`
_CURRENT_FILE_DIR = Path(__file__).resolve().parent
_SRC_DIR = _CURRENT_FILE_DIR.parent

if str(_SRC_DIR) not in sys.path:
    sys.path.insert(0, str(_SRC_DIR))

# Local Application Imports
from core.dependencies import DependencyContainer
from ui.filters.query_params import filters_from_query_params, serialize_filters
from ui.renderers.catalog_renderer import CatalogRenderer
from ui.renderers.filter_panel import FilterPanelRenderer, pump_filter_timers
from ui.renderers.stats_renderer import StorageStatsRenderer
from ui.state.session_manager import SessionStateManager
from ui.ui_utils import available_file_types


@st.cache_resource
def get_container() -> DependencyContainer:
    """One container per server process; Streamlit reruns reuse it."""
    return DependencyContainer(logger_name="filehub.ui")


container = get_container()
ui_logger: logging.Logger = container.get_logger()

st.set_page_config(
    page_title="FileHub - Deduplicated File Storage",
    layout="wide",
    initial_sidebar_state="collapsed",
)

SessionStateManager.initialize_all_session_state()

# Restore filters from a shared URL on first load
if not st.session_state["filters_restored_from_url"]:
    restored = filters_from_query_params(st.query_params)
    if not restored.is_default:
        ui_logger.info(f"Restoring filters from URL: {serialize_filters(restored)}")
    SessionStateManager.set_committed_filters(restored)
    st.session_state["filters_restored_from_url"] = True

committed = SessionStateManager.get_committed_filters()
synchronizer = SessionStateManager.get_synchronizer(logger_obj=ui_logger)
filter_panel = FilterPanelRenderer(synchronizer, logger_obj=ui_logger)
filter_panel.reconcile(committed)

service = container.catalog_service
catalog_renderer = CatalogRenderer(service, logger_obj=ui_logger)
stats_renderer = StorageStatsRenderer(service, logger_obj=ui_logger)

st.title("FileHub")
st.caption("Files with identical content are stored once.")

catalog_renderer.render_action_result()
stats_renderer.render()

st.divider()
st.subheader("Files")
catalog_renderer.render_upload()

files_df, files_error = service.fetch_files(committed)
filter_panel.render(available_file_types(files_df, committed.file_type))
pump_filter_timers()
catalog_renderer.render_table(files_df, files_error)

# Keep the address bar shareable
query_params = serialize_filters(committed)
if dict(st.query_params) != query_params:
    st.query_params.clear()
    st.query_params.update(query_params)
