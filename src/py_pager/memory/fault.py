"""Fault handler — the per-reference protocol shared by every policy.

For each reference, in trace order:

1. If the page's table entry is invalid, it is a **fault**.  Take a
   never-allocated frame from the free-frame registry if one is left;
   otherwise ask the active selector for a victim frame, invalidate the
   page that lived there, and reuse the frame.
2. If the entry is valid but its frame holds some other page, the
   bookkeeping has diverged.  Treat it as a fault through the same
   reclaim path.
3. Otherwise it is a **hit**; only recency bookkeeping changes.

On a fault the page entry becomes valid and points at the claimed
frame, the frame's occupant becomes the page, and the fault counter is
incremented.  The handler performs no I/O.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from py_pager.errors import SelectorError
from py_pager.memory.tables import EMPTY

if TYPE_CHECKING:
    from py_pager.memory.policies import VictimSelector
    from py_pager.memory.tables import MemoryState


class Access(Enum):
    """Outcome of handling one reference."""

    HIT = "hit"
    FAULT = "fault"


class FaultHandler:
    """Apply references to a ``MemoryState`` using one selector.

    The handler advances ``state.cursor`` after each reference, so the
    cursor always names the trace position currently being handled.
    """

    def __init__(self, *, state: MemoryState, selector: VictimSelector) -> None:
        """Bind the handler to a run's state and policy."""
        self._state = state
        self._selector = selector
        self._evicted: int | None = None

    @property
    def state(self) -> MemoryState:
        """Return the state this handler mutates."""
        return self._state

    @property
    def evicted(self) -> int | None:
        """Return the page evicted by the last reference, if any."""
        return self._evicted

    def handle(self, reference: int) -> Access:
        """Process one reference and return whether it hit or faulted.

        Raises:
            TraceError: If ``reference`` is outside the page range.
            SelectorError: If the selector returns an invalid frame.

        """
        state = self._state
        self._evicted = None
        entry = state.page_table.entry(reference)

        if entry.valid and state.frames[entry.frame].occupant == reference:
            state.hits += 1
            self._selector.record_access(state, entry.frame)
            state.cursor += 1
            return Access.HIT

        if entry.valid:
            # Displaced: the frame was reused without invalidating this page.
            entry.valid = False

        frame = self._claim_frame()
        entry.frame = frame
        entry.valid = True
        entry.auxiliary = 0
        slot = state.frames[frame]
        slot.occupant = reference
        slot.recency = 0
        state.faults += 1

        self._selector.record_load(state, frame)
        self._selector.record_access(state, frame)
        state.cursor += 1
        return Access.FAULT

    def _claim_frame(self) -> int:
        """Return a frame for a faulting page, evicting if necessary."""
        state = self._state
        if state.free:
            return state.free.pop()

        victim = self._selector.select_victim(state)
        if not 0 <= victim < len(state.frames):
            msg = f"Selector chose frame {victim} outside [0, {len(state.frames)})"
            raise SelectorError(msg)

        evicted = state.frames[victim].occupant
        if evicted != EMPTY:
            state.page_table.invalidate(evicted)
            self._evicted = evicted
        return victim
