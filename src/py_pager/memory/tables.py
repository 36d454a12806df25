"""Page table, frame pool, and free-frame registry.

Three tables describe the memory of the simulated process:

- The **page table** has one entry per page identifier.  An entry is
  *valid* when the page is resident, in which case ``frame`` names the
  physical frame holding it.
- The **frame pool** has one entry per physical frame, recording which
  page occupies it (``EMPTY`` if none) and a recency counter that only
  the LRU/MRU policies touch.
- The **free-frame registry** lists frames that have never been handed
  out during this run.  It only ever shrinks: once a frame has been
  used, reusing it is the replacement policy's decision.

``MemoryState`` bundles the tables with the fault and hit counters and
the trace cursor.  A fresh state is built for every policy run, so no
two runs can observe each other's tables.

Invariants (checked by ``MemoryState.check_invariants``):
    - If a page entry is valid, its frame's occupant is that page.
    - No page occupies two frames.
    - Occupied frames never exceed the pool size.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from py_pager.errors import SimulationError, TraceError

if TYPE_CHECKING:
    from collections.abc import Iterator

    from py_pager.config import SimulationConfig

EMPTY = -1


@dataclass(slots=True)
class PageTableEntry:
    """Mapping state for one page identifier.

    Attributes:
        frame: Frame holding the page; meaningful only if ``valid``.
        valid: True iff the page is currently resident.
        auxiliary: Policy-private scalar (recency for LRU/MRU).

    """

    frame: int = 0
    valid: bool = False
    auxiliary: int = 0


@dataclass(slots=True)
class FrameEntry:
    """Occupancy of one physical frame."""

    occupant: int = EMPTY
    recency: int = 0

    @property
    def occupied(self) -> bool:
        """Return True if a page lives in this frame."""
        return self.occupant != EMPTY


class PageTable:
    """Bounded mapping from page identifier to ``PageTableEntry``.

    Entries are created lazily on first lookup, but every identifier is
    checked against ``max_pages`` so an out-of-range reference is an
    input error rather than a silent new slot.
    """

    def __init__(self, *, max_pages: int) -> None:
        """Create an all-invalid page table for ``[0, max_pages)``."""
        self._max_pages = max_pages
        self._entries: dict[int, PageTableEntry] = {}

    @property
    def max_pages(self) -> int:
        """Return the size of the page identifier range."""
        return self._max_pages

    def entry(self, page: int) -> PageTableEntry:
        """Return the entry for ``page``.

        Raises:
            TraceError: If ``page`` is outside ``[0, max_pages)``.

        """
        if not 0 <= page < self._max_pages:
            msg = f"Page {page} outside range [0, {self._max_pages})"
            raise TraceError(msg)
        found = self._entries.get(page)
        if found is None:
            found = PageTableEntry()
            self._entries[page] = found
        return found

    def invalidate(self, page: int) -> None:
        """Mark ``page`` as no longer resident."""
        self.entry(page).valid = False

    def rows(self) -> Iterator[tuple[int, PageTableEntry]]:
        """Yield ``(page, entry)`` for every page identifier in range."""
        blank = PageTableEntry()
        for page in range(self._max_pages):
            yield page, self._entries.get(page, blank)

    def resident(self) -> dict[int, int]:
        """Return ``{page: frame}`` for every valid entry."""
        return {page: e.frame for page, e in self._entries.items() if e.valid}

    def reset(self) -> None:
        """Return every entry to the invalid state."""
        self._entries.clear()


class FramePool:
    """Fixed-size inventory of physical frames."""

    def __init__(self, *, num_frames: int) -> None:
        """Create ``num_frames`` empty frames."""
        self._frames = [FrameEntry() for _ in range(num_frames)]

    def __len__(self) -> int:
        """Return the number of frames in the pool."""
        return len(self._frames)

    def __getitem__(self, index: int) -> FrameEntry:
        """Return the entry for frame ``index``."""
        return self._frames[index]

    def __iter__(self) -> Iterator[FrameEntry]:
        """Iterate over frames in ascending index order."""
        return iter(self._frames)

    def occupied(self) -> list[int]:
        """Return indices of frames holding a page, ascending."""
        return [i for i, f in enumerate(self._frames) if f.occupied]

    def occupants(self) -> list[int]:
        """Return the occupant of every frame (``EMPTY`` for none)."""
        return [f.occupant for f in self._frames]

    def reset(self) -> None:
        """Empty every frame and zero its recency counter."""
        for frame in self._frames:
            frame.occupant = EMPTY
            frame.recency = 0


class FreeFrameRegistry:
    """Frames not yet handed out during the current run.

    Frames are popped from the highest index down.  Nothing is ever
    pushed back: eviction, not this registry, decides frame reuse.
    """

    def __init__(self, *, num_frames: int) -> None:
        """Create a registry holding every frame index."""
        self._num_frames = num_frames
        self._free: list[int] = list(range(num_frames))

    def __len__(self) -> int:
        """Return the number of never-allocated frames."""
        return len(self._free)

    def __bool__(self) -> bool:
        """Return True while unallocated frames remain."""
        return bool(self._free)

    def pop(self) -> int:
        """Hand out one never-allocated frame.

        Raises:
            IndexError: If the registry is exhausted.

        """
        if not self._free:
            msg = "No free frames left"
            raise IndexError(msg)
        return self._free.pop()

    def reset(self) -> None:
        """Refill the registry with every frame index."""
        self._free = list(range(self._num_frames))


@dataclass
class MemoryState:
    """Everything one policy run mutates.

    Attributes:
        page_table: Per-page residency.
        frames: Per-frame occupancy and recency.
        free: Never-allocated frames.
        faults: Faults seen so far in this run.
        hits: Hits seen so far in this run.
        cursor: Trace position of the reference being handled.

    """

    page_table: PageTable
    frames: FramePool
    free: FreeFrameRegistry
    faults: int = 0
    hits: int = 0
    cursor: int = field(default=0)

    @classmethod
    def fresh(cls, config: SimulationConfig) -> MemoryState:
        """Build an all-invalid, all-empty state sized by ``config``."""
        return cls(
            page_table=PageTable(max_pages=config.max_pages),
            frames=FramePool(num_frames=config.num_frames),
            free=FreeFrameRegistry(num_frames=config.num_frames),
        )

    def reset(self) -> None:
        """Return all tables and counters to their initial state."""
        self.page_table.reset()
        self.frames.reset()
        self.free.reset()
        self.faults = 0
        self.hits = 0
        self.cursor = 0

    def check_invariants(self) -> None:
        """Verify the tables agree with each other.

        Raises:
            SimulationError: If a valid page points at a frame it does not
                occupy, or a page occupies more than one frame.

        """
        resident = self.page_table.resident()
        for page, frame in resident.items():
            if self.frames[frame].occupant != page:
                msg = f"Page {page} maps to frame {frame} occupied by {self.frames[frame].occupant}"
                raise SimulationError(msg)
        if len(set(resident.values())) != len(resident):
            msg = "Two valid pages share a frame"
            raise SimulationError(msg)
        occupants = [p for p in self.frames.occupants() if p != EMPTY]
        if len(set(occupants)) != len(occupants):
            msg = "A page occupies more than one frame"
            raise SimulationError(msg)
