"""Run driver — replay one trace under every replacement policy.

For each policy, in the fixed order FIFO, LRU, MRU, OPT, RAN, RAN2, the
driver builds a brand-new ``MemoryState`` and selector, replays the full
trace through a ``FaultHandler``, and reports the fault count.  Runs
share nothing but the (immutable) trace and configuration, so their
results are directly comparable and re-running with the same seed
reproduces them exactly.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

from py_pager.logging import Logger, LogLevel
from py_pager.memory.fault import Access, FaultHandler
from py_pager.memory.policies import Policy, make_selector
from py_pager.memory.tables import MemoryState
from py_pager.report import format_page_table
from py_pager.trace import validate_trace

if TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

    from py_pager.config import SimulationConfig


@dataclass(frozen=True)
class RunResult:
    """Outcome of replaying a trace under one policy.

    Attributes:
        policy: The policy that was run.
        faults: Number of page faults.
        hits: Number of references satisfied without a fault.
        references: Total references replayed.

    """

    policy: Policy
    faults: int
    hits: int
    references: int

    @property
    def fault_rate(self) -> float:
        """Return faults per reference (0.0 for an empty trace)."""
        if self.references == 0:
            return 0.0
        return self.faults / self.references

    def to_dict(self) -> dict[str, object]:
        """Return a JSON-friendly summary."""
        return {
            "policy": self.policy.value,
            "faults": self.faults,
            "hits": self.hits,
            "references": self.references,
            "fault_rate": round(self.fault_rate, 4),
        }


def run_policy(
    policy: Policy,
    trace: Sequence[int],
    config: SimulationConfig,
    *,
    logger: Logger | None = None,
) -> RunResult:
    """Replay ``trace`` under ``policy`` from an empty memory state.

    Args:
        policy: The replacement policy to use.
        trace: The reference trace.
        config: Table bounds and switches.
        logger: Optional event log.

    Returns:
        The run's fault and hit counts.

    Raises:
        TraceError: If the trace holds an out-of-range page or more than
            ``config.trace_length`` references; raised before any
            reference is replayed.

    """
    trace = validate_trace(trace, max_pages=config.max_pages, max_length=config.trace_length)
    state = MemoryState.fresh(config)
    selector = make_selector(policy, trace=trace, config=config)
    handler = FaultHandler(state=state, selector=selector)
    source = selector.name

    if logger is not None:
        logger.log(
            LogLevel.INFO,
            f"Run started: {len(trace)} references, {config.num_frames} frames",
            source=source,
        )

    for position, reference in enumerate(trace):
        if handler.handle(reference) is Access.HIT or logger is None:
            continue
        frame = state.page_table.entry(reference).frame
        message = f"Fault on page {reference} -> frame {frame}"
        if handler.evicted is not None:
            message += f" (evicted page {handler.evicted})"
        logger.log(
            LogLevel.DEBUG,
            message,
            source=source,
            step=position,
            page=reference,
            evicted=handler.evicted,
        )
        if config.verbose:
            logger.log(
                LogLevel.DEBUG,
                format_page_table(state, policy),
                source=source,
                step=position,
            )

    result = RunResult(
        policy=policy,
        faults=state.faults,
        hits=state.hits,
        references=len(trace),
    )
    if logger is not None:
        logger.log(LogLevel.INFO, f"Run finished: {result.faults} faults", source=source)
    return result


def run_all(
    trace: Sequence[int],
    config: SimulationConfig,
    *,
    logger: Logger | None = None,
    policies: Iterable[Policy] | None = None,
) -> list[RunResult]:
    """Replay ``trace`` under each policy in turn.

    Args:
        trace: The reference trace, replayed in full for every policy.
        config: Table bounds and switches.
        logger: Optional event log shared by all runs.
        policies: Subset to run; defaults to every policy in run order.

    Returns:
        One result per policy, in the order run.

    Raises:
        TraceError: If any trace entry is outside the page range; raised
            before the first run starts.

    """
    selected = Policy.ordered() if policies is None else tuple(policies)
    return [run_policy(policy, trace, config, logger=logger) for policy in selected]
