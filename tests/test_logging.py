"""Tests for the simulation event log."""

from py_pager.logging import Eviction, LogEntry, Logger, LogLevel


def _fault(logger: Logger, step: int, page: int, evicted: int | None, source: str = "LRU") -> None:
    """Record a fault the way the run driver does."""
    logger.log(
        LogLevel.DEBUG,
        f"Fault on page {page}",
        source=source,
        step=step,
        page=page,
        evicted=evicted,
    )


class TestLogLevel:
    """Verify log level ordering."""

    def test_run_boundaries_outrank_faults(self) -> None:
        """DEBUG (per-fault) < INFO (run boundaries)."""
        assert LogLevel.DEBUG < LogLevel.INFO
        assert [level.name for level in LogLevel] == ["DEBUG", "INFO"]


class TestLogEntry:
    """Verify log entry structure."""

    def test_entry_has_fields(self) -> None:
        """A fault entry stores its position, page and victim."""
        entry = LogEntry(
            level=LogLevel.DEBUG,
            message="Fault on page 7",
            source="LRU",
            step=4,
            page=7,
            evicted=2,
        )
        assert entry.level is LogLevel.DEBUG
        assert entry.source == "LRU"
        expected_step = 4
        expected_page = 7
        expected_evicted = 2
        assert entry.step == expected_step
        assert entry.page == expected_page
        assert entry.evicted == expected_evicted

    def test_defaults_outside_replay(self) -> None:
        """Run boundary entries have no position, page or victim."""
        entry = LogEntry(level=LogLevel.INFO, message="x", source="OPT")
        assert entry.step == -1
        assert entry.page is None
        assert entry.evicted is None

    def test_str_without_step(self) -> None:
        """Boundary entries render as ``[LEVEL] source: message``."""
        entry = LogEntry(level=LogLevel.INFO, message="Run finished: 7 faults", source="OPT")
        assert str(entry) == "[INFO] OPT: Run finished: 7 faults"

    def test_str_with_step(self) -> None:
        """Replay entries carry the trace position after the policy."""
        entry = LogEntry(level=LogLevel.DEBUG, message="Fault on page 3", source="RAN2", step=0)
        assert str(entry) == "[DEBUG] RAN2#0: Fault on page 3"


class TestLogger:
    """Verify the append-only logger."""

    def test_starts_empty(self) -> None:
        """A new logger has no entries."""
        assert Logger().entries == []

    def test_log_appends_in_order(self) -> None:
        """Entries are kept chronologically."""
        logger = Logger()
        logger.log(LogLevel.INFO, "first", source="FIFO")
        logger.log(LogLevel.DEBUG, "second", source="FIFO", step=1)
        assert [e.message for e in logger.entries] == ["first", "second"]

    def test_entries_returns_copy(self) -> None:
        """Mutating the returned list does not touch the log."""
        logger = Logger()
        logger.log(LogLevel.INFO, "x", source="FIFO")
        logger.entries.clear()
        assert len(logger.entries) == 1

    def test_filter_by_level_and_source(self) -> None:
        """Filters combine minimum level and source."""
        logger = Logger()
        logger.log(LogLevel.DEBUG, "fault", source="LRU", step=0)
        logger.log(LogLevel.INFO, "done", source="LRU")
        logger.log(LogLevel.INFO, "done", source="MRU")
        assert len(logger.filter(min_level=LogLevel.INFO)) == 2  # noqa: PLR2004
        only = logger.filter(min_level=LogLevel.INFO, source="LRU")
        assert [e.message for e in only] == ["done"]


class TestStepWindow:
    """Verify slicing the log by trace position."""

    def test_window_keeps_positions_in_range(self) -> None:
        """Only entries whose step lies in the range are returned."""
        logger = Logger()
        for step in range(6):
            _fault(logger, step, page=step, evicted=None)
        window = logger.filter(steps=range(2, 4))
        assert [e.step for e in window] == [2, 3]

    def test_window_drops_run_boundaries(self) -> None:
        """Entries outside a replay (step -1) never fall in a window."""
        logger = Logger()
        logger.log(LogLevel.INFO, "Run started", source="OPT")
        _fault(logger, 0, page=1, evicted=None, source="OPT")
        assert [e.step for e in logger.filter(steps=range(10))] == [0]

    def test_empty_window(self) -> None:
        """An empty range selects nothing."""
        logger = Logger()
        _fault(logger, 3, page=1, evicted=None)
        assert logger.filter(steps=range(3, 3)) == []

    def test_window_combines_with_source(self) -> None:
        """The position window and the policy filter both apply."""
        logger = Logger()
        _fault(logger, 1, page=1, evicted=None, source="LRU")
        _fault(logger, 1, page=1, evicted=None, source="MRU")
        assert [e.source for e in logger.filter(source="MRU", steps=range(2))] == ["MRU"]


class TestEvictions:
    """Verify the eviction history view."""

    def test_only_replacements_are_listed(self) -> None:
        """Cold-start faults that claimed a free frame are not evictions."""
        logger = Logger()
        _fault(logger, 0, page=0, evicted=None)
        _fault(logger, 1, page=1, evicted=None)
        _fault(logger, 2, page=2, evicted=0)
        _fault(logger, 4, page=3, evicted=1)
        assert logger.evictions(source="LRU") == [
            Eviction(step=2, page=2, evicted=0),
            Eviction(step=4, page=3, evicted=1),
        ]

    def test_evictions_are_per_policy(self) -> None:
        """Another policy's replacements are not mixed in."""
        logger = Logger()
        _fault(logger, 2, page=2, evicted=0, source="FIFO")
        _fault(logger, 2, page=2, evicted=1, source="MRU")
        assert logger.evictions(source="MRU") == [Eviction(step=2, page=2, evicted=1)]

    def test_page_table_dumps_are_ignored(self) -> None:
        """Entries without a faulting page never count as evictions."""
        logger = Logger()
        logger.log(LogLevel.DEBUG, "table", source="LRU", step=2)
        assert logger.evictions(source="LRU") == []
