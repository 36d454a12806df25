"""Plain-text rendering of results, page tables, and traces.

Pure functions that return strings; the caller decides where to print.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from collections.abc import Sequence

    from py_pager.memory.policies import Policy
    from py_pager.memory.tables import MemoryState
    from py_pager.simulator import RunResult

_HEADERS = ("Policy", "Faults", "Hits", "Fault rate")


def format_results(results: Sequence[RunResult]) -> str:
    """Render run results as an aligned ASCII table."""
    rows = [
        (r.policy.value, str(r.faults), str(r.hits), f"{r.fault_rate:.2%}") for r in results
    ]
    widths = [len(h) for h in _HEADERS]
    for row in rows:
        widths = [max(w, len(cell)) for w, cell in zip(widths, row, strict=True)]

    def line(cells: Sequence[str]) -> str:
        first = cells[0].ljust(widths[0])
        rest = [cell.rjust(width) for cell, width in zip(cells[1:], widths[1:], strict=True)]
        return "  ".join([first, *rest])

    separator = "  ".join("-" * w for w in widths)
    return "\n".join([line(_HEADERS), separator, *(line(row) for row in rows)])


def format_page_table(state: MemoryState, policy: Policy) -> str:
    """Dump every page table entry.

    The auxiliary column is shown only for policies that keep recency
    counters (LRU and MRU).
    """
    lines = [f"Page Replacement Algorithm: {policy.value}"]
    if policy.uses_recency:
        lines.append("Page\tFrame\tValid\tAuxiliary")
        lines.extend(
            f"{page}\t{e.frame}\t{int(e.valid)}\t{e.auxiliary}"
            for page, e in state.page_table.rows()
        )
    else:
        lines.append("Page\tFrame\tValid")
        lines.extend(f"{page}\t{e.frame}\t{int(e.valid)}" for page, e in state.page_table.rows())
    return "\n".join(lines)


def format_trace(trace: Sequence[int]) -> str:
    """Render a trace in row order, tab separated."""
    return "Reference string (in row order):\n" + "\t".join(str(page) for page in trace)
