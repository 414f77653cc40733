"""UI service layer for decoupling UI from the storage backend."""

from .file_service import FileCatalogService

__all__ = ["FileCatalogService"]
