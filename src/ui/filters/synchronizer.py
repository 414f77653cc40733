"""
Filter state synchronization between an owner and locally edited input.

The owner (the dashboard session) holds the committed filters that drive the
catalog query. The synchronizer holds ``local``, which follows every keystroke
and selection, and decides when ``local`` is handed back to the owner:

- discrete selections (file type, date bounds) are emitted immediately
- continuous typing (search text, size bounds) is emitted once every typed
  field has been quiet for the debounce period (one shared trailing-edge
  timer, so a half-typed size bound never rides along with a search)

Owner changes arrive through ``reconcile_external``. A value the owner merely
echoes back after an emission is ignored, so in-flight edits are never reset
by their own earlier output. A genuinely different value wins over pending
edits. The echo check cannot tell an owner that deliberately returns to the
last emitted value from a plain echo; while a typed edit is pending such a
value is treated as an echo and the pending edit is kept.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from typing import Callable, Optional, Tuple

from .model import DEFAULT_FILTERS, FileFilters, filters_equal, parse_size_input
from .scheduling import ScheduledCall, Scheduler

DEFAULT_DEBOUNCE_MS = 500

# Typed fields sharing one trailing-edge timer
DEBOUNCED_FIELDS = ("search", "size_min", "size_max")
IMMEDIATE_FIELDS = ("file_type", "date_start", "date_end")


@dataclass(frozen=True)
class SynchronizerState:
    """Point-in-time view of a synchronizer."""

    external: FileFilters
    local: FileFilters
    pending_emission: Optional[FileFilters]


class FilterSynchronizer:
    """Reconciles owner-driven filters with debounced local edits.

    Example:
        sync = FilterSynchronizer(DEFAULT_FILTERS, on_change=apply, scheduler=CooperativeScheduler())
        sync.edit_debounced("search", "inv")   # emitted 500 ms after the last keystroke
        sync.edit_immediate("file_type", "application/pdf")  # emitted now
    """

    def __init__(
        self,
        initial: FileFilters = DEFAULT_FILTERS,
        on_change: Optional[Callable[[FileFilters], None]] = None,
        scheduler: Optional[Scheduler] = None,
        debounce_ms: float = DEFAULT_DEBOUNCE_MS,
        logger_obj: Optional[logging.Logger] = None,
    ):
        """
        Initialize the synchronizer.

        Args:
            initial: Owner's current filters; ``local`` starts equal to it.
            on_change: Called with the complete filter value on every emission.
            scheduler: Source of cancellable deferred callbacks.
            debounce_ms: Quiet period for debounced fields, fixed for the
                lifetime of the instance.
            logger_obj: Logger for state transitions.
        """
        if scheduler is None:
            raise ValueError("A scheduler is required")
        if debounce_ms <= 0:
            raise ValueError("debounce_ms must be positive")

        self.logger = logger_obj or logging.getLogger(__name__)
        self._on_change = on_change or (lambda _filters: None)
        self._scheduler = scheduler
        self._debounce_ms = debounce_ms

        self._external = initial
        self._local = initial
        # Last value both sides agree on: the latest emission or adopted owner value
        self._shared = initial
        self._pending: Optional[Tuple[object, ScheduledCall]] = None
        self._closed = False

    # --- Read-only views -------------------------------------------------

    @property
    def local(self) -> FileFilters:
        return self._local

    @property
    def external(self) -> FileFilters:
        return self._external

    @property
    def debounce_ms(self) -> float:
        return self._debounce_ms

    @property
    def is_pending(self) -> bool:
        return self._pending is not None

    @property
    def pending_emission(self) -> Optional[FileFilters]:
        """Value the next scheduled emission would deliver, if any."""
        return self._local if self._pending is not None else None

    @property
    def closed(self) -> bool:
        return self._closed

    @property
    def state(self) -> SynchronizerState:
        return SynchronizerState(external=self._external, local=self._local, pending_emission=self.pending_emission)

    # --- Owner side ------------------------------------------------------

    def reconcile_external(self, new_external: FileFilters) -> bool:
        """Merge the owner's filters into local state.

        Returns:
            True if the owner's value was adopted (local replaced and pending
            emissions dropped), False if it matched local or was an echo of
            this synchronizer's own output.

        A value equal to the last emitted (or adopted) filters always counts
        as an echo, even if the owner set it on purpose. With a typed edit
        pending, that edit is kept and will overwrite the owner's value when
        its timer fires.
        """
        if filters_equal(new_external, self._local):
            return False
        if filters_equal(new_external, self._shared):
            self.logger.debug("Ignoring echo of emitted filters; local edits still in flight")
            return False
        self._adopt(new_external)
        return True

    def _adopt(self, value: FileFilters) -> None:
        dropped = self._cancel_pending()
        self._external = value
        self._local = value
        self._shared = value
        if dropped:
            self.logger.info("External filters adopted; dropped pending typed edits")
        else:
            self.logger.debug("External filters adopted")

    # --- Editing side ----------------------------------------------------

    def edit(self, field: str, value) -> None:
        """Apply an edit using the field's propagation mode."""
        if field in DEBOUNCED_FIELDS:
            self.edit_debounced(field, value)
        else:
            self.edit_immediate(field, value)

    def edit_immediate(self, field: str, value) -> None:
        """Update a discrete field and emit right away.

        The emitted value carries any not-yet-delivered debounced edits too.
        """
        if field not in IMMEDIATE_FIELDS:
            raise ValueError(f"{field!r} is not an immediate field; expected one of {IMMEDIATE_FIELDS}")
        self._local = self._local.replace_field(field, self._normalize_text(value))
        if self._closed:
            self.logger.debug(f"Edit to {field} after teardown; not emitting")
            return
        self._emit()

    def edit_debounced(self, field: str, value) -> None:
        """Update a typed field now and emit after the quiet period.

        A further typed edit (to any debounced field) before the period
        elapses replaces the scheduled emission with one timed from the
        latest edit.
        """
        if field not in DEBOUNCED_FIELDS:
            raise ValueError(f"{field!r} is not a debounced field; expected one of {DEBOUNCED_FIELDS}")
        if field == "search":
            new_value = self._normalize_text(value)
        else:
            new_value = parse_size_input("min" if field == "size_min" else "max", value)

        self._local = self._local.replace_field(field, new_value)
        if self._closed:
            self.logger.debug(f"Edit to {field} after teardown; not scheduling")
            return
        self._schedule()

    def teardown(self) -> None:
        """Cancel every pending emission; nothing is emitted afterwards."""
        dropped = self._cancel_pending()
        self._closed = True
        if dropped:
            self.logger.debug("Teardown cancelled the pending emission")

    # --- Internals -------------------------------------------------------

    @staticmethod
    def _normalize_text(value) -> str:
        if value is None:
            return ""
        if isinstance(value, date):
            return value.isoformat()
        return str(value)

    def _schedule(self) -> None:
        self._cancel_pending()
        token = object()
        handle = self._scheduler.call_later(self._debounce_ms, lambda: self._fire(token))
        self._pending = (token, handle)

    def _fire(self, token: object) -> None:
        if self._closed or self._pending is None or self._pending[0] is not token:
            return
        self._pending = None
        self._emit()

    def _cancel_pending(self) -> bool:
        if self._pending is None:
            return False
        self._pending[1].cancel()
        self._pending = None
        return True

    def _emit(self) -> None:
        value = self._local
        if filters_equal(value, self._shared):
            return
        self._shared = value
        self.logger.debug(f"Emitting filters: {value}")
        self._on_change(value)
