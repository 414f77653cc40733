"""Catalog filter model, query translation and input synchronization."""

from .model import (
    DEFAULT_FILTERS,
    SIZE_MAX_UNBOUNDED,
    SIZE_MIN_UNBOUNDED,
    DateRange,
    FileFilters,
    SizeRange,
    default_filters,
    filters_equal,
    format_size_input,
    parse_size_input,
)
from .query_params import QueryParamBuilder, describe_filters, filters_from_query_params, serialize_filters
from .scheduling import CooperativeScheduler, EventLoopScheduler, ManualClock
from .synchronizer import FilterSynchronizer, SynchronizerState

__all__ = [
    "DEFAULT_FILTERS",
    "SIZE_MAX_UNBOUNDED",
    "SIZE_MIN_UNBOUNDED",
    "DateRange",
    "FileFilters",
    "SizeRange",
    "default_filters",
    "filters_equal",
    "format_size_input",
    "parse_size_input",
    "QueryParamBuilder",
    "describe_filters",
    "filters_from_query_params",
    "serialize_filters",
    "CooperativeScheduler",
    "EventLoopScheduler",
    "ManualClock",
    "FilterSynchronizer",
    "SynchronizerState",
]
