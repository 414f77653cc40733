"""Typed records returned by the storage backend."""

from __future__ import annotations

from dataclasses import asdict, dataclass
from typing import Any, Mapping


def _require(payload: Mapping[str, Any], key: str) -> Any:
    if key not in payload:
        raise ValueError(f"Missing required field '{key}' in backend payload")
    return payload[key]


@dataclass(frozen=True)
class FileRecord:
    """One deduplicated catalog entry."""

    uuid: str
    original_filename: str
    sha256_hash: str = ""
    file_size: int = 0
    mime_type: str = ""
    upload_count: int = 1
    created_at: str = ""
    last_accessed: str = ""
    file: str = ""

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "FileRecord":
        """Build a record from backend JSON; ``uuid`` and ``original_filename`` are required."""
        return cls(
            uuid=str(_require(payload, "uuid")),
            original_filename=str(_require(payload, "original_filename")),
            sha256_hash=payload.get("sha256_hash") or "",
            file_size=int(payload.get("file_size") or 0),
            mime_type=payload.get("mime_type") or "",
            upload_count=int(payload.get("upload_count") or 1),
            created_at=payload.get("created_at") or "",
            last_accessed=payload.get("last_accessed") or "",
            file=payload.get("file") or "",
        )

    def to_dict(self) -> dict:
        return asdict(self)


@dataclass(frozen=True)
class StorageStats:
    """Aggregate counters computed by the backend."""

    total_uploads: int
    unique_files: int
    total_upload_size: int
    actual_storage_used: int
    storage_saved: int
    storage_saved_percentage: float

    @classmethod
    def from_dict(cls, payload: Mapping[str, Any]) -> "StorageStats":
        return cls(
            total_uploads=int(_require(payload, "total_uploads")),
            unique_files=int(_require(payload, "unique_files")),
            total_upload_size=int(_require(payload, "total_upload_size")),
            actual_storage_used=int(_require(payload, "actual_storage_used")),
            storage_saved=int(_require(payload, "storage_saved")),
            storage_saved_percentage=float(_require(payload, "storage_saved_percentage")),
        )

    @property
    def duplicates_prevented(self) -> int:
        return self.total_uploads - self.unique_files
