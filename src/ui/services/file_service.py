"""
File Catalog Service - UI-facing wrapper around the storage API client

Every call returns its result together with an error message instead of
raising, so a failed request can be shown in the dashboard without losing
the current filters or page state.
"""

import asyncio
import logging
from typing import Optional, Tuple

import pandas as pd

from api.error_handling import ErrorCategory, FileServiceError
from api.file_client import FileServiceClient
from api.models import FileRecord, StorageStats
from ui.filters.model import FileFilters
from ui.ui_utils import files_to_dataframe, format_exception_for_ui


class FileCatalogService:
    """Synchronous facade over ``FileServiceClient`` for Streamlit and the CLI."""

    # Error messages
    ERROR_TIMEOUT = "The storage service did not respond in time. Please try again."
    ERROR_NETWORK = "Cannot reach the storage service: {details}"
    ERROR_SERVER = "The storage service reported an error: {details}"
    ERROR_CLIENT = "The request was rejected: {details}"
    ERROR_DATA = "The storage service returned unexpected data: {details}"
    ERROR_UNEXPECTED = "Unexpected error: {details}"

    _MESSAGES = {
        ErrorCategory.TIMEOUT: ERROR_TIMEOUT,
        ErrorCategory.NETWORK: ERROR_NETWORK,
        ErrorCategory.SERVER: ERROR_SERVER,
        ErrorCategory.CLIENT: ERROR_CLIENT,
        ErrorCategory.DATA: ERROR_DATA,
        ErrorCategory.UNKNOWN: ERROR_UNEXPECTED,
    }

    def __init__(self, client: Optional[FileServiceClient] = None, logger_obj: Optional[logging.Logger] = None):
        """Initialize the catalog service."""
        self.logger = logger_obj or logging.getLogger(__name__)
        self.client = client or FileServiceClient(logger_obj=self.logger)

    def _describe(self, error: Exception) -> str:
        if isinstance(error, FileServiceError):
            return self._MESSAGES[error.category].format(details=error.message)
        return self.ERROR_UNEXPECTED.format(details=format_exception_for_ui(error))

    def _run(self, operation: str, coro):
        """Run a client coroutine, returning (result, error_message)."""
        try:
            return asyncio.run(coro), None
        except FileServiceError as e:
            self.logger.error(f"{operation} failed ({e.category.value}): {e.message}")
            return None, self._describe(e)
        except Exception as e:
            self.logger.error(f"{operation} failed unexpectedly: {e}", exc_info=True)
            return None, self._describe(e)

    def fetch_files(self, filters: Optional[FileFilters] = None) -> Tuple[pd.DataFrame, Optional[str]]:
        """
        Fetch the catalog as a display table.

        Returns:
            Tuple of (dataframe, error_message).
            - On success: (files_df, None)
            - On error: (empty_df, "Error description")
        """
        records, error = self._run("Listing files", self.client.list_files(filters))
        if error:
            return files_to_dataframe([]), error
        return files_to_dataframe(records), None

    def fetch_stats(self) -> Tuple[Optional[StorageStats], Optional[str]]:
        """Fetch storage statistics."""
        return self._run("Fetching stats", self.client.get_stats())

    def upload(
        self, filename: str, content: bytes, content_type: Optional[str] = None
    ) -> Tuple[Optional[FileRecord], Optional[str]]:
        """Upload one file."""
        return self._run(f"Uploading {filename}", self.client.upload_file(filename, content, content_type))

    def delete(self, file_id: str) -> Optional[str]:
        """Delete a file; returns an error message or None on success."""
        _, error = self._run(f"Deleting {file_id}", self.client.delete_file(file_id))
        return error

    def download(self, file_url: str) -> Tuple[Optional[bytes], Optional[str]]:
        """Download file content for the browser's save dialog."""
        return self._run("Downloading file", self.client.download_file(file_url))
