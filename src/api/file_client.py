"""REST client for the deduplicating file-storage backend."""

import asyncio
import logging
import mimetypes
from pathlib import Path
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin, urlsplit

import aiohttp
import backoff

from config.api import APIConfig
from ui.filters.model import FileFilters
from ui.filters.query_params import serialize_filters

from .circuit_breaker import CircuitBreakerManager, circuit_breaker_manager
from .error_handling import CircuitBreakerOpenException, FileServiceError, categorize_error
from .models import FileRecord, StorageStats

_module_logger = logging.getLogger(__name__)


def _backoff_handler(details):
    """Log a retry of an idempotent request with its error category."""
    exception = details["exception"]
    error_category = categorize_error(exception)
    _module_logger.warning(
        f"Backing off {details['wait']:.1f}s after {error_category.value} error "
        f"(attempt {details['tries']}/{APIConfig.MAX_RETRIES}): {exception}"
    )


def _is_permanent_error(exception: Exception) -> bool:
    """Client errors (4xx) will not succeed on retry."""
    return isinstance(exception, aiohttp.ClientResponseError) and 400 <= exception.status < 500


class FileServiceClient:
    """Client for the catalog, upload, delete and stats endpoints.

    Reads (list, stats, download) are retried with exponential backoff;
    writes (upload, delete) are attempted once. Every failure is raised as a
    ``FileServiceError`` carrying its ``ErrorCategory``.
    """

    def __init__(
        self,
        base_url: Optional[str] = None,
        logger_obj: Optional[logging.Logger] = None,
        breaker_manager: Optional[CircuitBreakerManager] = None,
    ):
        self.logger = logger_obj or logging.getLogger(__name__)
        self.config = APIConfig()
        self.base_url = (base_url or APIConfig.BASE_URL).rstrip("/")
        self._breakers = breaker_manager or circuit_breaker_manager

    @staticmethod
    def _endpoint_key(url: str) -> str:
        parts = urlsplit(url)
        return f"{parts.scheme}://{parts.netloc}"

    async def _request(
        self,
        session: aiohttp.ClientSession,
        method: str,
        url: str,
        *,
        params: Optional[Dict[str, str]] = None,
        data: Any = None,
        body: str = "json",
        timeout: Optional[float] = None,
    ) -> Any:
        """Perform one HTTP request guarded by the host's circuit breaker.

        Args:
            body: "json" to decode the response, "bytes" for the raw payload,
                "none" to discard it.
        """
        endpoint = self._endpoint_key(url)
        if not self._breakers.can_attempt(endpoint):
            raise CircuitBreakerOpenException(f"Circuit breaker is open for {endpoint}")

        try:
            client_timeout = aiohttp.ClientTimeout(total=timeout or self.config.REQUEST_TIMEOUT)
            async with session.request(method, url, params=params, data=data, timeout=client_timeout) as resp:
                resp.raise_for_status()
                if body == "json":
                    result = await resp.json(content_type=None)
                elif body == "bytes":
                    result = await resp.read()
                else:
                    result = None
        except aiohttp.ClientResponseError as e:
            # The host answered; only server-side errors count against it
            if e.status >= 500:
                self._breakers.record_failure(endpoint)
            else:
                self._breakers.record_success(endpoint)
            self.logger.error(f"{method} {url} failed with {categorize_error(e).value} error: {e.status} {e.message}")
            raise
        except Exception as e:
            self._breakers.record_failure(endpoint)
            self.logger.error(f"{method} {url} failed with {categorize_error(e).value} error: {e}")
            raise

        self._breakers.record_success(endpoint)
        return result

    @backoff.on_exception(
        backoff.expo,
        (aiohttp.ClientError, asyncio.TimeoutError),
        max_tries=APIConfig.MAX_RETRIES,
        giveup=_is_permanent_error,
        on_backoff=_backoff_handler,
        jitter=backoff.full_jitter,
        base=APIConfig.RETRY_BASE_DELAY,
        max_value=APIConfig.RETRY_MAX_DELAY,
    )
    async def _get(
        self, session: aiohttp.ClientSession, url: str, params: Optional[Dict[str, str]] = None, body: str = "json"
    ) -> Any:
        """Idempotent GET with retries."""
        return await self._request(session, "GET", url, params=params, body=body)

    def _service_error(self, operation: str, exception: Exception) -> FileServiceError:
        error = FileServiceError.from_exception(operation, exception)
        self.logger.error(f"{error.message} ({error.category.value})")
        return error

    async def list_files(self, filters: Optional[FileFilters] = None) -> List[FileRecord]:
        """Fetch catalog entries matching ``filters`` (all entries when None)."""
        params = serialize_filters(filters)
        url = APIConfig.get_files_url(self.base_url)
        self.logger.info(f"Listing files with params: {params or 'none'}")

        try:
            async with aiohttp.ClientSession() as session:
                payload = await self._get(session, url, params=params)
            if isinstance(payload, dict) and "results" in payload:
                payload = payload["results"]
            if not isinstance(payload, list):
                raise ValueError(f"Expected a list of files, got {type(payload).__name__}")
            records = [FileRecord.from_dict(item) for item in payload]
        except FileServiceError:
            raise
        except Exception as e:
            raise self._service_error("Listing files", e) from e

        self.logger.info(f"Fetched {len(records)} files")
        return records

    async def upload_file(self, filename: str, content: bytes, content_type: Optional[str] = None) -> FileRecord:
        """Upload one file; the backend returns the (possibly pre-existing) entry."""
        url = APIConfig.get_files_url(self.base_url)
        content_type = content_type or mimetypes.guess_type(filename)[0] or "application/octet-stream"
        self.logger.info(f"Uploading {filename} ({len(content):,} bytes, {content_type})")

        form = aiohttp.FormData()
        form.add_field(APIConfig.UPLOAD_FIELD_NAME, content, filename=filename, content_type=content_type)

        try:
            async with aiohttp.ClientSession() as session:
                payload = await self._request(session, "POST", url, data=form, timeout=self.config.UPLOAD_TIMEOUT)
            record = FileRecord.from_dict(payload)
        except FileServiceError:
            raise
        except Exception as e:
            raise self._service_error(f"Uploading {filename}", e) from e

        self.logger.info(f"Uploaded {filename} as {record.uuid} (upload count {record.upload_count})")
        return record

    async def upload_path(self, path: Path) -> FileRecord:
        """Upload a file from disk."""
        path = Path(path)
        try:
            content = path.read_bytes()
        except OSError as e:
            raise FileServiceError(f"Cannot read {path}: {e}", category=categorize_error(e)) from e
        return await self.upload_file(path.name, content)

    async def delete_file(self, file_id: str) -> None:
        """Delete a catalog entry."""
        url = APIConfig.get_file_url(file_id, self.base_url)
        self.logger.info(f"Deleting file {file_id}")
        try:
            async with aiohttp.ClientSession() as session:
                await self._request(session, "DELETE", url, body="none")
        except FileServiceError:
            raise
        except Exception as e:
            raise self._service_error(f"Deleting {file_id}", e) from e

    async def get_stats(self) -> StorageStats:
        """Fetch the backend's deduplication statistics."""
        url = APIConfig.get_stats_url(self.base_url)
        try:
            async with aiohttp.ClientSession() as session:
                payload = await self._get(session, url)
            return StorageStats.from_dict(payload)
        except FileServiceError:
            raise
        except Exception as e:
            raise self._service_error("Fetching storage stats", e) from e

    async def download_file(self, file_url: str) -> bytes:
        """Download a stored file; relative URLs resolve against the API host."""
        if not urlsplit(file_url).scheme:
            file_url = urljoin(f"{self.base_url}/", file_url)
        try:
            async with aiohttp.ClientSession() as session:
                content = await self._get(session, file_url, body="bytes")
        except FileServiceError:
            raise
        except Exception as e:
            raise self._service_error("Downloading file", e) from e

        self.logger.info(f"Downloaded {len(content):,} bytes from {file_url}")
        return content
