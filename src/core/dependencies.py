"""Dependency injection container for the application."""

from typing import Optional
import logging

from api.file_client import FileServiceClient
from config.settings import Settings
from ui.services.file_service import FileCatalogService
from utils.logger_setup import setup_logging


class DependencyContainer:
    """Container for managing application dependencies."""

    def __init__(self, base_url: Optional[str] = None, logger_name: str = "filehub"):
        self.base_url = base_url
        self.logger = setup_logging(logger_name)
        Settings.ensure_directories()

        # Initialize services lazily
        self._client = None
        self._catalog_service = None

    @property
    def client(self) -> FileServiceClient:
        """Get or create the storage API client."""
        if self._client is None:
            self._client = FileServiceClient(base_url=self.base_url, logger_obj=self.logger)
        return self._client

    @property
    def catalog_service(self) -> FileCatalogService:
        """Get or create the synchronous catalog service."""
        if self._catalog_service is None:
            self._catalog_service = FileCatalogService(client=self.client, logger_obj=self.logger)
        return self._catalog_service

    def get_logger(self, name: Optional[str] = None) -> logging.Logger:
        """Get a logger instance."""
        if name:
            return logging.getLogger(name)
        return self.logger
