"""Memory subsystem — tables, fault handling, and replacement policies.

Re-exports public symbols so callers can write::

    from py_pager.memory import FaultHandler, MemoryState, Policy
"""

from py_pager.memory.fault import Access, FaultHandler
from py_pager.memory.policies import (
    FIFOSelector,
    FrameCursorFIFOSelector,
    LRUSelector,
    ModuloRandomSelector,
    MRUSelector,
    OPTSelector,
    Policy,
    RecencySelector,
    UniformRandomSelector,
    VictimSelector,
    make_selector,
)
from py_pager.memory.tables import (
    EMPTY,
    FrameEntry,
    FramePool,
    FreeFrameRegistry,
    MemoryState,
    PageTable,
    PageTableEntry,
)

__all__ = [
    "EMPTY",
    "Access",
    "FIFOSelector",
    "FaultHandler",
    "FrameCursorFIFOSelector",
    "FrameEntry",
    "FramePool",
    "FreeFrameRegistry",
    "LRUSelector",
    "MRUSelector",
    "MemoryState",
    "ModuloRandomSelector",
    "OPTSelector",
    "PageTable",
    "PageTableEntry",
    "Policy",
    "RecencySelector",
    "UniformRandomSelector",
    "VictimSelector",
    "make_selector",
]
