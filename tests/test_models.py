"""Tests for backend payload records."""

import pytest

from api.models import FileRecord, StorageStats


class TestFileRecord:
    def test_from_dict(self, file_payload):
        record = FileRecord.from_dict(file_payload)
        assert record.uuid == file_payload["uuid"]
        assert record.file_size == 48213
        assert record.upload_count == 3
        assert record.to_dict() == file_payload

    def test_optional_fields_default(self):
        record = FileRecord.from_dict({"uuid": "u", "original_filename": "a.bin", "mime_type": None})
        assert record.mime_type == ""
        assert record.file_size == 0
        assert record.upload_count == 1

    @pytest.mark.parametrize("missing", ["uuid", "original_filename"])
    def test_required_fields(self, file_payload, missing):
        del file_payload[missing]
        with pytest.raises(ValueError, match=missing):
            FileRecord.from_dict(file_payload)


class TestStorageStats:
    def test_from_dict(self, stats_payload):
        stats = StorageStats.from_dict(stats_payload)
        assert stats.total_uploads == 10
        assert stats.storage_saved_percentage == 30.0

    def test_duplicates_prevented(self, storage_stats):
        assert storage_stats.duplicates_prevented == 3

    def test_every_counter_required(self, stats_payload):
        del stats_payload["storage_saved"]
        with pytest.raises(ValueError, match="storage_saved"):
            StorageStats.from_dict(stats_payload)
