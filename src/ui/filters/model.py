"""Canonical filter value for the file catalog.

A ``FileFilters`` value is always fully populated. "No constraint" is
expressed with a per-field sentinel rather than by leaving a field out:

- ``search`` / ``file_type``: the empty string
- ``size_range.min``: ``0`` (``SIZE_MIN_UNBOUNDED``)
- ``size_range.max``: ``math.inf`` (``SIZE_MAX_UNBOUNDED``)
- ``date_range.start`` / ``date_range.end``: the empty string

Sizes are byte counts, so a minimum of zero bytes and "no minimum" select the
same files and share one representation.
"""

from __future__ import annotations

import math
from dataclasses import dataclass, field, replace
from typing import Union

SIZE_MIN_UNBOUNDED = 0
SIZE_MAX_UNBOUNDED = math.inf

SizeBound = Union[int, float]

EDITABLE_FIELDS = ("search", "file_type", "size_min", "size_max", "date_start", "date_end")


@dataclass(frozen=True)
class SizeRange:
    """Inclusive byte bounds."""

    min: SizeBound = SIZE_MIN_UNBOUNDED
    max: SizeBound = SIZE_MAX_UNBOUNDED

    @property
    def has_min(self) -> bool:
        return self.min > SIZE_MIN_UNBOUNDED

    @property
    def has_max(self) -> bool:
        return not math.isinf(self.max)


@dataclass(frozen=True)
class DateRange:
    """ISO calendar dates (YYYY-MM-DD); an empty side is open."""

    start: str = ""
    end: str = ""


@dataclass(frozen=True)
class FileFilters:
    """Immutable snapshot of every catalog query constraint."""

    search: str = ""
    file_type: str = ""
    size_range: SizeRange = field(default_factory=SizeRange)
    date_range: DateRange = field(default_factory=DateRange)

    def replace_field(self, name: str, value) -> "FileFilters":
        """Return a copy with one editable field changed.

        Args:
            name: One of ``EDITABLE_FIELDS``.
            value: The new value. Size bounds must already be numeric.

        Raises:
            KeyError: If ``name`` is not an editable field.
        """
        if name == "search":
            return replace(self, search=value)
        if name == "file_type":
            return replace(self, file_type=value)
        if name == "size_min":
            return replace(self, size_range=replace(self.size_range, min=value))
        if name == "size_max":
            return replace(self, size_range=replace(self.size_range, max=value))
        if name == "date_start":
            return replace(self, date_range=replace(self.date_range, start=value))
        if name == "date_end":
            return replace(self, date_range=replace(self.date_range, end=value))
        raise KeyError(f"Unknown filter field: {name}")

    def active_field_count(self) -> int:
        """Number of editable fields holding a constraint."""
        return sum(
            [
                bool(self.search),
                bool(self.file_type),
                self.size_range.has_min,
                self.size_range.has_max,
                bool(self.date_range.start),
                bool(self.date_range.end),
            ]
        )

    @property
    def is_default(self) -> bool:
        return self.active_field_count() == 0


DEFAULT_FILTERS = FileFilters()


def default_filters() -> FileFilters:
    """Return the neutral filter value (every field unconstrained)."""
    return DEFAULT_FILTERS


def filters_equal(left: FileFilters, right: FileFilters) -> bool:
    """Field-by-field comparison, including the nested range bounds."""
    return (
        left.search == right.search
        and left.file_type == right.file_type
        and left.size_range.min == right.size_range.min
        and left.size_range.max == right.size_range.max
        and left.date_range.start == right.date_range.start
        and left.date_range.end == right.date_range.end
    )


def _neutral_bound(bound: str) -> SizeBound:
    if bound == "min":
        return SIZE_MIN_UNBOUNDED
    if bound == "max":
        return SIZE_MAX_UNBOUNDED
    raise ValueError(f"Size bound must be 'min' or 'max', got {bound!r}")


def parse_size_input(bound: str, text) -> SizeBound:
    """Convert text typed into a size box to a bound value.

    Empty or unparseable input maps to the bound's neutral sentinel, so a
    cleared box means "no constraint" rather than zero. A decimal part is
    truncated.
    """
    neutral = _neutral_bound(bound)
    if text is None:
        return neutral
    if isinstance(text, (int, float)) and not isinstance(text, bool):
        return int(text) if math.isfinite(text) else neutral

    stripped = str(text).strip()
    if not stripped:
        return neutral
    try:
        return int(stripped)
    except ValueError:
        pass
    try:
        as_float = float(stripped)
    except ValueError:
        return neutral
    return int(as_float) if math.isfinite(as_float) else neutral


def format_size_input(bound: str, value: SizeBound) -> str:
    """Display text for a size box; the neutral sentinel shows as empty."""
    if value == _neutral_bound(bound):
        return ""
    return str(int(value))
