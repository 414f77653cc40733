import json
from unittest import mock

import pytest
from typer.testing import CliRunner

from api.error_handling import ErrorCategory, FileServiceError
from api.file_client import FileServiceClient
from cli import app

runner = CliRunner()


@pytest.fixture(autouse=True)
def no_log_files():
    with mock.patch("cli.setup_logging") as mock_setup:
        yield mock_setup


def test_query_params_prints_serialized_filters():
    result = runner.invoke(app, ["query-params", "--search", "invoice"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"search": "invoice"}


def test_query_params_omits_cleared_bounds():
    result = runner.invoke(app, ["query-params", "--min-size", "", "--max-size", "4096", "--type", "text/plain"])

    assert result.exit_code == 0
    assert json.loads(result.stdout) == {"fileType": "text/plain", "maxSize": "4096"}


@mock.patch.object(FileServiceClient, "list_files", new_callable=mock.AsyncMock)
def test_files_lists_records(mock_list_files, file_record):
    mock_list_files.return_value = [file_record]

    result = runner.invoke(app, ["files", "--search", "invoice", "--min-size", "1024"])

    assert result.exit_code == 0
    filters = mock_list_files.call_args[0][0]
    assert filters.search == "invoice"
    assert filters.size_range.min == 1024
    assert "invoice-2024-03.pdf" in result.stdout
    assert "1 file(s)" in result.stdout


@mock.patch.object(FileServiceClient, "list_files", new_callable=mock.AsyncMock)
def test_files_json_output(mock_list_files, file_record):
    mock_list_files.return_value = [file_record]

    result = runner.invoke(app, ["files", "--json"])

    assert result.exit_code == 0
    assert json.loads(result.stdout)[0]["uuid"] == file_record.uuid


@mock.patch.object(FileServiceClient, "list_files", new_callable=mock.AsyncMock)
def test_files_error_exits_nonzero(mock_list_files):
    mock_list_files.side_effect = FileServiceError("Listing files failed: refused", ErrorCategory.NETWORK)

    result = runner.invoke(app, ["files"])

    assert result.exit_code == 1
    assert "Listing files failed: refused (network)" in result.output


@mock.patch.object(FileServiceClient, "get_stats", new_callable=mock.AsyncMock)
def test_stats(mock_get_stats, storage_stats):
    mock_get_stats.return_value = storage_stats

    result = runner.invoke(app, ["stats"])

    assert result.exit_code == 0
    assert "Duplicates prevented: 3" in result.stdout
    assert "3.00 KB (30.0%)" in result.stdout


@mock.patch.object(FileServiceClient, "upload_path", new_callable=mock.AsyncMock)
def test_upload_reports_duplicate(mock_upload_path, file_record, tmp_path):
    path = tmp_path / "invoice.pdf"
    path.write_bytes(b"%PDF")
    mock_upload_path.return_value = file_record

    result = runner.invoke(app, ["upload", str(path)])

    assert result.exit_code == 0
    assert "Duplicate content" in result.stdout
    mock_upload_path.assert_awaited_once_with(path)


@mock.patch.object(FileServiceClient, "delete_file", new_callable=mock.AsyncMock)
def test_delete_with_confirmation_flag(mock_delete_file):
    result = runner.invoke(app, ["delete", "abc-123", "--yes"])

    assert result.exit_code == 0
    mock_delete_file.assert_awaited_once_with("abc-123")
    assert "Deleted abc-123" in result.stdout


@mock.patch.object(FileServiceClient, "delete_file", new_callable=mock.AsyncMock)
def test_delete_aborted(mock_delete_file):
    result = runner.invoke(app, ["delete", "abc-123"], input="n\n")

    assert result.exit_code == 1
    mock_delete_file.assert_not_awaited()


def test_base_url_option_is_used():
    with mock.patch.object(FileServiceClient, "get_stats", new_callable=mock.AsyncMock) as mock_get_stats, \
            mock.patch("cli.FileServiceClient", wraps=FileServiceClient) as mock_client_cls:
        mock_get_stats.side_effect = FileServiceError("down", ErrorCategory.NETWORK)
        runner.invoke(app, ["--base-url", "http://other:9000/api", "stats"])

    mock_client_cls.assert_called_once_with(base_url="http://other:9000/api")
