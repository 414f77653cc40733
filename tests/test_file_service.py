"""Tests for the synchronous catalog service used by the dashboard."""

from unittest.mock import AsyncMock, MagicMock

import pytest

from api.error_handling import ErrorCategory, FileServiceError
from api.file_client import FileServiceClient
from ui.filters.model import FileFilters
from ui.services.file_service import FileCatalogService
from ui.ui_utils import CATALOG_COLUMNS


@pytest.fixture
def mock_client():
    return MagicMock(spec=FileServiceClient)


@pytest.fixture
def service(mock_client, mock_logger):
    return FileCatalogService(client=mock_client, logger_obj=mock_logger)


class TestFetchFiles:
    def test_success_returns_table(self, service, mock_client, file_record):
        mock_client.list_files = AsyncMock(return_value=[file_record])
        filters = FileFilters(search="invoice")

        df, error = service.fetch_files(filters)

        assert error is None
        assert list(df.columns) == CATALOG_COLUMNS
        assert df.iloc[0]["original_filename"] == "invoice-2024-03.pdf"
        mock_client.list_files.assert_awaited_once_with(filters)

    def test_failure_returns_empty_table_and_message(self, service, mock_client, mock_logger):
        mock_client.list_files = AsyncMock(
            side_effect=FileServiceError("Listing files failed: 503", ErrorCategory.SERVER, status=503)
        )

        df, error = service.fetch_files()

        assert df.empty
        assert list(df.columns) == CATALOG_COLUMNS
        assert error == FileCatalogService.ERROR_SERVER.format(details="Listing files failed: 503")
        mock_logger.error.assert_called_once()

    def test_timeout_message(self, service, mock_client):
        mock_client.list_files = AsyncMock(side_effect=FileServiceError("slow", ErrorCategory.TIMEOUT))
        _, error = service.fetch_files()
        assert error == FileCatalogService.ERROR_TIMEOUT

    def test_unexpected_exception_is_reported(self, service, mock_client, mock_logger):
        mock_client.list_files = AsyncMock(side_effect=RuntimeError("boom"))
        _, error = service.fetch_files()
        assert error == "Unexpected error: RuntimeError: boom"
        assert mock_logger.error.call_args.kwargs.get("exc_info") is True


class TestOtherOperations:
    def test_fetch_stats(self, service, mock_client, storage_stats):
        mock_client.get_stats = AsyncMock(return_value=storage_stats)
        assert service.fetch_stats() == (storage_stats, None)

    def test_upload(self, service, mock_client, file_record):
        mock_client.upload_file = AsyncMock(return_value=file_record)
        record, error = service.upload("invoice.pdf", b"data", "application/pdf")
        assert record is file_record
        assert error is None
        mock_client.upload_file.assert_awaited_once_with("invoice.pdf", b"data", "application/pdf")

    def test_delete_success(self, service, mock_client):
        mock_client.delete_file = AsyncMock(return_value=None)
        assert service.delete("abc") is None

    def test_delete_failure(self, service, mock_client):
        mock_client.delete_file = AsyncMock(side_effect=FileServiceError("Not found", ErrorCategory.CLIENT, 404))
        assert service.delete("abc") == "The request was rejected: Not found"

    def test_download(self, service, mock_client):
        mock_client.download_file = AsyncMock(return_value=b"bytes")
        assert service.download("/media/a") == (b"bytes", None)

    def test_network_error_message(self, service, mock_client):
        mock_client.get_stats = AsyncMock(side_effect=FileServiceError("refused", ErrorCategory.NETWORK))
        stats, error = service.fetch_stats()
        assert stats is None
        assert error == "Cannot reach the storage service: refused"
