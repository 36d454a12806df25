"""Victim selectors — the page replacement policies.

When a page fault finds the free-frame registry empty, the fault
handler asks the active policy which frame to reclaim.  Six policies
ship, always run in this order:

- **FIFO** — evict the frame whose page has been resident longest.
  ``FrameCursorFIFOSelector`` is the historical variant: it rotates a
  cursor down the frame indices and wraps on reaching index 1, so it
  ignores arrival order and never reclaims frame 0 once memory fills.
- **LRU** — evict the frame touched least recently.
- **MRU** — evict the frame touched most recently.
- **OPT** — Belady's optimal oracle: evict the frame whose page is
  next referenced farthest in the future (or never again).
- **RAN** — uniformly random frame, scaling a float draw into range.
- **RAN2** — random frame by modulo reduction of a 31-bit integer draw.

LRU and MRU share ``RecencySelector``: every frame carries a counter of
references since it was last touched.  After each reference the
touched frame's counter resets to 0 and every other occupied frame's
counter grows by 1.  LRU picks the largest counter, MRU the smallest.

Design: Strategy pattern
    ``FaultHandler`` is the context; ``VictimSelector`` is the strategy.
    Every selector is built fresh for one run by ``make_selector``.

Ties are always broken by the lowest frame index.
"""

from __future__ import annotations

import random
from bisect import bisect_left
from collections import defaultdict, deque
from enum import StrEnum
from typing import TYPE_CHECKING, Protocol

from py_pager.config import FIFOMode, SimulationConfig
from py_pager.errors import SelectorError

if TYPE_CHECKING:
    from collections.abc import Sequence

    from py_pager.memory.tables import MemoryState

# Draws for RAN2 mimic a C ``rand()`` with RAND_MAX = 2**31 - 1.
_RAND_BITS = 31


class VictimSelector(Protocol):
    """Interface every replacement policy must satisfy.

    The fault handler calls ``record_load`` when a page is placed into a
    frame, ``record_access`` after every reference (hit or fault), and
    ``select_victim`` only once no never-allocated frame remains.
    """

    @property
    def name(self) -> str:
        """Return the policy label used in logs and reports."""
        ...  # pragma: no cover

    def record_load(self, state: MemoryState, frame: int) -> None:
        """Note that a page was just placed into ``frame``."""
        ...  # pragma: no cover

    def record_access(self, state: MemoryState, frame: int) -> None:
        """Note that the page in ``frame`` was just referenced."""
        ...  # pragma: no cover

    def select_victim(self, state: MemoryState) -> int:
        """Return the index of the frame to reclaim.

        Raises:
            SelectorError: If no frame is occupied.

        """
        ...  # pragma: no cover


def _require_occupied(state: MemoryState) -> list[int]:
    """Return occupied frame indices, refusing an empty pool."""
    occupied = state.frames.occupied()
    if not occupied:
        msg = "No occupied frames to evict"
        raise SelectorError(msg)
    return occupied


# ---------------------------------------------------------------------------
# FIFO
# ---------------------------------------------------------------------------


class FIFOSelector:
    """First In, First Out — evict the frame loaded earliest.

    Keeps frame indices in load order.  The front of the queue is the
    frame whose current page arrived first.
    """

    def __init__(self) -> None:
        """Create an empty FIFO queue."""
        self._queue: deque[int] = deque()

    @property
    def name(self) -> str:
        """Return the policy label used in logs and reports."""
        return "FIFO"

    def record_load(self, state: MemoryState, frame: int) -> None:
        """Append the freshly loaded frame to the back of the queue."""
        self._queue.append(frame)

    def record_access(self, state: MemoryState, frame: int) -> None:
        """FIFO ignores accesses — order is purely by load time."""

    def select_victim(self, state: MemoryState) -> int:
        """Pop the frame at the front of the queue."""
        _require_occupied(state)
        if not self._queue:
            msg = "FIFO queue is empty"
            raise SelectorError(msg)
        return self._queue.popleft()


class FrameCursorFIFOSelector:
    """Rotating frame-cursor FIFO, as the historical simulator did it.

    The cursor starts at the last frame and moves down by one on every
    eviction.  When it reaches index 1 it wraps straight back to the
    last frame, so with more than one frame, frame 0 is never chosen.
    Selection is oblivious to which page sits in which frame.
    """

    def __init__(self, *, num_frames: int) -> None:
        """Create a cursor positioned on the last frame."""
        self._num_frames = num_frames
        self._cursor = num_frames - 1

    @property
    def cursor(self) -> int:
        """Return the frame the next eviction will reclaim."""
        return self._cursor

    @property
    def name(self) -> str:
        """Return the policy label used in logs and reports."""
        return "FIFO"

    def record_load(self, state: MemoryState, frame: int) -> None:
        """Loads do not move the cursor."""

    def record_access(self, state: MemoryState, frame: int) -> None:
        """Accesses do not move the cursor."""

    def select_victim(self, state: MemoryState) -> int:
        """Return the cursor's frame, then step the cursor down."""
        _require_occupied(state)
        victim = self._cursor
        self._cursor -= 1
        if self._cursor <= 0:
            self._cursor = self._num_frames - 1
        return victim


# ---------------------------------------------------------------------------
# LRU / MRU
# ---------------------------------------------------------------------------


class RecencySelector:
    """Shared recency bookkeeping for LRU and MRU.

    Counters live on the frame pool entries and are mirrored into the
    ``auxiliary`` field of the resident page's table entry so page table
    dumps show them.

    Args:
        least_recent: True selects the largest counter (LRU), False the
            smallest (MRU).

    """

    def __init__(self, *, least_recent: bool) -> None:
        """Create a recency selector for one direction."""
        self._least_recent = least_recent

    @property
    def name(self) -> str:
        """Return the policy label used in logs and reports."""
        return "LRU" if self._least_recent else "MRU"

    def record_load(self, state: MemoryState, frame: int) -> None:
        """Loads are followed by an access, which resets the counter."""

    def record_access(self, state: MemoryState, frame: int) -> None:
        """Reset ``frame``'s counter and age every other occupied frame."""
        for index, entry in enumerate(state.frames):
            if not entry.occupied:
                continue
            if index == frame:
                entry.recency = 0
            else:
                entry.recency += 1
            state.page_table.entry(entry.occupant).auxiliary = entry.recency

    def select_victim(self, state: MemoryState) -> int:
        """Scan frames in ascending order; first extreme counter wins."""
        occupied = _require_occupied(state)
        victim = occupied[0]
        best = state.frames[victim].recency
        for index in occupied[1:]:
            recency = state.frames[index].recency
            better = recency > best if self._least_recent else recency < best
            if better:
                victim, best = index, recency
        return victim


class LRUSelector(RecencySelector):
    """Least Recently Used — evict the frame untouched for longest."""

    def __init__(self) -> None:
        """Create an LRU selector."""
        super().__init__(least_recent=True)


class MRUSelector(RecencySelector):
    """Most Recently Used — evict the frame touched last."""

    def __init__(self) -> None:
        """Create an MRU selector."""
        super().__init__(least_recent=False)


# ---------------------------------------------------------------------------
# OPT
# ---------------------------------------------------------------------------


class OPTSelector:
    """Belady's optimal policy — evict the page needed farthest ahead.

    The full trace is indexed once: for each page, the sorted list of
    positions where it is referenced.  At eviction time, the next use of
    each resident page is found by bisecting that list from the current
    trace cursor, so only references not yet consumed are considered.
    A page that is never referenced again counts as infinitely far
    away and beats any finite distance.
    """

    def __init__(self, trace: Sequence[int]) -> None:
        """Index the positions of every page in ``trace``."""
        self._length = len(trace)
        positions: defaultdict[int, list[int]] = defaultdict(list)
        for position, page in enumerate(trace):
            positions[page].append(position)
        self._positions = dict(positions)

    @property
    def never(self) -> int:
        """Return the distance used for pages with no future reference."""
        return self._length + 1

    def next_use(self, page: int, position: int) -> int:
        """Return the offset from ``position`` to ``page``'s next reference.

        The reference at ``position`` itself counts (offset 0).  Returns
        ``never`` if the page does not appear at or after ``position``.
        """
        found = self._positions.get(page)
        if not found:
            return self.never
        i = bisect_left(found, position)
        if i == len(found):
            return self.never
        return found[i] - position

    @property
    def name(self) -> str:
        """Return the policy label used in logs and reports."""
        return "OPT"

    def record_load(self, state: MemoryState, frame: int) -> None:
        """OPT keeps no per-frame state."""

    def record_access(self, state: MemoryState, frame: int) -> None:
        """OPT keeps no per-frame state."""

    def select_victim(self, state: MemoryState) -> int:
        """Return the occupied frame with the farthest next use."""
        occupied = _require_occupied(state)
        victim = occupied[0]
        farthest = -1
        for index in occupied:
            distance = self.next_use(state.frames[index].occupant, state.cursor)
            if distance > farthest:
                victim, farthest = index, distance
        return victim


# ---------------------------------------------------------------------------
# Random
# ---------------------------------------------------------------------------


class UniformRandomSelector:
    """Random eviction by scaling a uniform ``[0, 1)`` draw to a frame."""

    def __init__(self, *, num_frames: int, seed: int | None = None) -> None:
        """Create a selector with its own seeded generator."""
        self._num_frames = num_frames
        self._rng = random.Random(seed)  # noqa: S311

    @property
    def name(self) -> str:
        """Return the policy label used in logs and reports."""
        return "RAN"

    def record_load(self, state: MemoryState, frame: int) -> None:
        """Random eviction keeps no per-frame state."""

    def record_access(self, state: MemoryState, frame: int) -> None:
        """Random eviction keeps no per-frame state."""

    def select_victim(self, state: MemoryState) -> int:
        """Return ``floor(u * num_frames)`` for a uniform draw ``u``."""
        _require_occupied(state)
        return int(self._rng.random() * self._num_frames)


class ModuloRandomSelector:
    """Random eviction by ``draw % num_frames`` on a 31-bit integer draw.

    Slightly biased toward low frame indices whenever ``num_frames``
    does not divide ``2**31``.
    """

    def __init__(self, *, num_frames: int, seed: int | None = None) -> None:
        """Create a selector with its own seeded generator."""
        self._num_frames = num_frames
        self._rng = random.Random(seed)  # noqa: S311

    @property
    def name(self) -> str:
        """Return the policy label used in logs and reports."""
        return "RAN2"

    def record_load(self, state: MemoryState, frame: int) -> None:
        """Random eviction keeps no per-frame state."""

    def record_access(self, state: MemoryState, frame: int) -> None:
        """Random eviction keeps no per-frame state."""

    def select_victim(self, state: MemoryState) -> int:
        """Return a 31-bit draw reduced modulo the frame count."""
        _require_occupied(state)
        return self._rng.getrandbits(_RAND_BITS) % self._num_frames


# ---------------------------------------------------------------------------
# Policy registry
# ---------------------------------------------------------------------------


class Policy(StrEnum):
    """The closed set of policies, in run order."""

    FIFO = "FIFO"
    LRU = "LRU"
    MRU = "MRU"
    OPT = "OPT"
    RAN = "RAN"
    RAN2 = "RAN2"

    @classmethod
    def ordered(cls) -> tuple[Policy, ...]:
        """Return every policy in the fixed run order."""
        return tuple(cls)

    @classmethod
    def parse(cls, name: str) -> Policy:
        """Look up a policy by case-insensitive name.

        Raises:
            ValueError: If no policy has that name.

        """
        try:
            return cls(name.strip().upper())
        except ValueError:
            choices = ", ".join(p.value for p in cls)
            msg = f"Unknown policy {name!r} (choose from {choices})"
            raise ValueError(msg) from None

    @property
    def uses_recency(self) -> bool:
        """Return True for policies that maintain recency counters."""
        return self in {Policy.LRU, Policy.MRU}


def make_selector(
    policy: Policy,
    *,
    trace: Sequence[int],
    config: SimulationConfig,
) -> VictimSelector:
    """Build a fresh selector for one run of ``policy``.

    Args:
        policy: Which policy to build.
        trace: The full reference trace (needed by OPT only).
        config: Run configuration (frame count, FIFO mode, seed).

    Returns:
        A selector with no state carried over from any earlier run.

    """
    match policy:
        case Policy.FIFO:
            if config.fifo_mode is FIFOMode.CURSOR:
                return FrameCursorFIFOSelector(num_frames=config.num_frames)
            return FIFOSelector()
        case Policy.LRU:
            return LRUSelector()
        case Policy.MRU:
            return MRUSelector()
        case Policy.OPT:
            return OPTSelector(trace)
        case Policy.RAN:
            return UniformRandomSelector(
                num_frames=config.num_frames, seed=config.seed_for(policy.value)
            )
        case Policy.RAN2:
            return ModuloRandomSelector(
                num_frames=config.num_frames, seed=config.seed_for(policy.value)
            )
