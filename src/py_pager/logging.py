"""Simulation event log.

Every policy run writes to an append-only log — the simulator's
equivalent of ``dmesg``.  The run driver records:

- **INFO** — run boundaries (start and final fault count).
- **DEBUG** — one entry per page fault, tagged with the trace position,
  the faulting page and the evicted page (if any), plus a page table
  dump after each fault when verbose output is on.

``source`` is the name of the policy that produced the entry and
``step`` is the trace position being handled (-1 outside a replay).
Callers slice the log by policy, by severity, or by a window of trace
positions, and pull the eviction history of a run with ``evictions``.
"""

from dataclasses import dataclass
from enum import IntEnum
from typing import NamedTuple


class LogLevel(IntEnum):
    """Severity of a log entry; run boundaries outrank per-fault detail."""

    DEBUG = 0
    INFO = 1


@dataclass(frozen=True)
class LogEntry:
    """A single structured log record.

    Attributes:
        level: The severity of this event.
        message: A human-readable description of what happened.
        source: The policy that generated the event.
        step: The trace position being handled (-1 if not in a replay).
        page: The faulting page, for fault events.
        evicted: The page evicted to make room, if any.

    """

    level: LogLevel
    message: str
    source: str
    step: int = -1
    page: int | None = None
    evicted: int | None = None

    def __str__(self) -> str:
        """Format as ``[LEVEL] source#step: message`` (no ``#step`` outside a replay)."""
        where = self.source if self.step < 0 else f"{self.source}#{self.step}"
        return f"[{self.level.name}] {where}: {self.message}"


class Eviction(NamedTuple):
    """One replacement decision: at ``step``, ``page`` displaced ``evicted``."""

    step: int
    page: int
    evicted: int


class Logger:
    """Append-only log of simulation events."""

    def __init__(self) -> None:
        """Create an empty logger."""
        self._entries: list[LogEntry] = []

    @property
    def entries(self) -> list[LogEntry]:
        """Return all log entries in chronological order."""
        return list(self._entries)

    def log(
        self,
        level: LogLevel,
        message: str,
        *,
        source: str,
        step: int = -1,
        page: int | None = None,
        evicted: int | None = None,
    ) -> None:
        """Append a new entry to the log."""
        self._entries.append(
            LogEntry(
                level=level,
                message=message,
                source=source,
                step=step,
                page=page,
                evicted=evicted,
            )
        )

    def filter(
        self,
        *,
        min_level: LogLevel | None = None,
        source: str | None = None,
        steps: range | None = None,
    ) -> list[LogEntry]:
        """Return entries matching the given criteria.

        Args:
            min_level: If set, only return entries at or above this level.
            source: If set, only return entries from this policy.
            steps: If set, only return entries whose trace position falls
                in this range.  Run boundary entries have no position and
                are excluded.

        Returns:
            A filtered list of log entries.

        """
        return [
            e
            for e in self._entries
            if (min_level is None or e.level >= min_level)
            and (source is None or e.source == source)
            and (steps is None or e.step in steps)
        ]

    def evictions(self, *, source: str) -> list[Eviction]:
        """Return the replacement decisions one policy made, in order."""
        return [
            Eviction(step=e.step, page=e.page, evicted=e.evicted)
            for e in self._entries
            if e.source == source and e.page is not None and e.evicted is not None
        ]
