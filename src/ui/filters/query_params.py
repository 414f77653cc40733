"""Translation of filter values into backend query parameters.

This module provides the QueryParamBuilder class for building the query
string of ``GET /files/`` in the same fluent style used elsewhere in the UI.
Only constrained fields are emitted; neutral sentinels are left out.
"""

import math
from typing import Dict, List, Mapping, Optional

from .model import SIZE_MIN_UNBOUNDED, DateRange, FileFilters, SizeBound, SizeRange, parse_size_input


class QueryParamBuilder:
    """Fluent builder for catalog query parameters.

    Example:
        builder = QueryParamBuilder()
        builder.add_search("invoice").add_size_range(minimum=1024)
        params = builder.build()  # {"search": "invoice", "minSize": "1024"}
    """

    # Wire names understood by the backend
    PARAM_SEARCH = "search"
    PARAM_FILE_TYPE = "fileType"
    PARAM_MIN_SIZE = "minSize"
    PARAM_MAX_SIZE = "maxSize"
    PARAM_START_DATE = "startDate"
    PARAM_END_DATE = "endDate"

    def __init__(self):
        self._search: str = ""
        self._file_type: str = ""
        self._min_size: Optional[SizeBound] = None
        self._max_size: Optional[SizeBound] = None
        self._start_date: str = ""
        self._end_date: str = ""

    def add_search(self, search: str) -> 'QueryParamBuilder':
        """Add filename substring filter."""
        self._search = search or ""
        return self

    def add_file_type(self, file_type: str) -> 'QueryParamBuilder':
        """Add exact file type filter."""
        self._file_type = file_type or ""
        return self

    def add_size_range(
        self, minimum: Optional[SizeBound] = None, maximum: Optional[SizeBound] = None
    ) -> 'QueryParamBuilder':
        """Add inclusive byte bounds."""
        self._min_size = minimum
        self._max_size = maximum
        return self

    def add_date_range(self, start: str = "", end: str = "") -> 'QueryParamBuilder':
        """Add upload date bounds (ISO dates, passed through unchanged)."""
        self._start_date = start or ""
        self._end_date = end or ""
        return self

    def from_filters(self, filters: FileFilters) -> 'QueryParamBuilder':
        """Populate every constraint from a filter value."""
        return (
            self.add_search(filters.search)
            .add_file_type(filters.file_type)
            .add_size_range(filters.size_range.min, filters.size_range.max)
            .add_date_range(filters.date_range.start, filters.date_range.end)
        )

    @staticmethod
    def _format_size(value: SizeBound) -> str:
        return str(int(value))

    def build(self) -> Dict[str, str]:
        """Build the parameter dictionary, omitting unconstrained fields."""
        params: Dict[str, str] = {}

        if self._search:
            params[self.PARAM_SEARCH] = self._search
        if self._file_type:
            params[self.PARAM_FILE_TYPE] = self._file_type

        if self._min_size is not None and self._min_size > SIZE_MIN_UNBOUNDED:
            params[self.PARAM_MIN_SIZE] = self._format_size(self._min_size)
        if self._max_size is not None and math.isfinite(self._max_size):
            params[self.PARAM_MAX_SIZE] = self._format_size(self._max_size)

        if self._start_date:
            params[self.PARAM_START_DATE] = self._start_date
        if self._end_date:
            params[self.PARAM_END_DATE] = self._end_date

        return params


def serialize_filters(filters: Optional[FileFilters]) -> Dict[str, str]:
    """Map a filter value to the query parameters of ``GET /files/``.

    Pure: equal inputs always produce equal dictionaries. No ordering
    validation is performed on the size or date bounds.
    """
    if filters is None:
        return {}
    return QueryParamBuilder().from_filters(filters).build()


def describe_filters(filters: FileFilters) -> List[str]:
    """Human-readable labels for the active constraints."""
    labels: List[str] = []
    if filters.search:
        labels.append(f"Filename contains '{filters.search}'")
    if filters.file_type:
        labels.append(f"Type: {filters.file_type}")
    if filters.size_range.has_min:
        labels.append(f"Size >= {int(filters.size_range.min):,} B")
    if filters.size_range.has_max:
        labels.append(f"Size <= {int(filters.size_range.max):,} B")
    if filters.date_range.start:
        labels.append(f"Uploaded from {filters.date_range.start}")
    if filters.date_range.end:
        labels.append(f"Uploaded until {filters.date_range.end}")
    return labels


def filters_from_query_params(params: Mapping[str, str]) -> FileFilters:
    """Rebuild a filter value from query parameters (e.g. a shared dashboard URL).

    Missing or malformed parameters fall back to their neutral sentinel.
    """
    return FileFilters(
        search=params.get(QueryParamBuilder.PARAM_SEARCH, "") or "",
        file_type=params.get(QueryParamBuilder.PARAM_FILE_TYPE, "") or "",
        size_range=SizeRange(
            min=parse_size_input("min", params.get(QueryParamBuilder.PARAM_MIN_SIZE)),
            max=parse_size_input("max", params.get(QueryParamBuilder.PARAM_MAX_SIZE)),
        ),
        date_range=DateRange(
            start=params.get(QueryParamBuilder.PARAM_START_DATE, "") or "",
            end=params.get(QueryParamBuilder.PARAM_END_DATE, "") or "",
        ),
    )
