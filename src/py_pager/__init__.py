"""py-pager — a demand paging simulator.

Replays a page reference trace against a fixed pool of physical frames
and counts page faults under six replacement policies: FIFO, LRU, MRU,
Belady's optimal (OPT), and two random-eviction variants.

Quick start::

    from py_pager import SimulationConfig, generate_trace, run_all

    config = SimulationConfig(num_frames=8, seed=1)
    trace = generate_trace(length=200, max_pages=64)
    for result in run_all(trace, config):
        print(result.policy, result.faults)
"""

from py_pager.config import FIFOMode, SimulationConfig
from py_pager.errors import ConfigurationError, SelectorError, SimulationError, TraceError
from py_pager.memory import Policy
from py_pager.simulator import RunResult, run_all, run_policy
from py_pager.trace import generate_trace, load_trace, parse_trace, write_trace

__all__ = [
    "ConfigurationError",
    "FIFOMode",
    "Policy",
    "RunResult",
    "SelectorError",
    "SimulationConfig",
    "SimulationError",
    "TraceError",
    "generate_trace",
    "load_trace",
    "parse_trace",
    "run_all",
    "run_policy",
    "write_trace",
]
