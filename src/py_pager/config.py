"""Run configuration — the knobs that bound every table.

The original simulator hard-wired three constants: the page identifier
range, the number of physical frames, and the length of the generated
trace.  Here they live in one frozen ``SimulationConfig`` that is
validated once, before any policy runs.

The interactive "show the page table after this fault?" prompt is
replaced by the ``verbose`` flag, read once per run.
"""

from __future__ import annotations

import hashlib
from collections.abc import Mapping
from dataclasses import dataclass, fields
from enum import StrEnum

from py_pager.errors import ConfigurationError

DEFAULT_MAX_PAGES = 1024
DEFAULT_NUM_FRAMES = 48
DEFAULT_TRACE_LENGTH = 500
MAX_TRACE_LENGTH = 100_000

_TRUE_WORDS = frozenset({"1", "true", "yes", "y", "on"})
_FALSE_WORDS = frozenset({"0", "false", "no", "n", "off", ""})


class FIFOMode(StrEnum):
    """Which FIFO flavour the FIFO run uses.

    - ``QUEUE`` evicts the page resident longest (textbook FIFO).
    - ``CURSOR`` rotates a frame-index cursor downward and wraps when it
      reaches index 1, so frame 0 is never reclaimed once memory fills.
      This reproduces the historical fault counts.
    """

    QUEUE = "queue"
    CURSOR = "cursor"


@dataclass(frozen=True)
class SimulationConfig:
    """Bounds and switches shared by every policy run.

    Attributes:
        max_pages: Page identifiers must lie in ``[0, max_pages)``.
        num_frames: Number of physical frames in the pool.
        trace_length: Cap on trace length; also the length of generated
            traces.  At most ``MAX_TRACE_LENGTH``.
        seed: Session seed for trace generation and random selectors.
        verbose: Dump the page table to the log after every fault.
        fifo_mode: FIFO flavour (see ``FIFOMode``).

    """

    max_pages: int = DEFAULT_MAX_PAGES
    num_frames: int = DEFAULT_NUM_FRAMES
    trace_length: int = DEFAULT_TRACE_LENGTH
    seed: int | None = None
    verbose: bool = False
    fifo_mode: FIFOMode = FIFOMode.QUEUE

    def __post_init__(self) -> None:
        """Reject impossible bounds before anything is allocated."""
        if self.max_pages <= 0:
            msg = f"max_pages must be positive, got {self.max_pages}"
            raise ConfigurationError(msg)
        if self.num_frames <= 0:
            msg = f"num_frames must be positive, got {self.num_frames}"
            raise ConfigurationError(msg)
        if self.trace_length < 0:
            msg = f"trace_length must not be negative, got {self.trace_length}"
            raise ConfigurationError(msg)
        if self.trace_length > MAX_TRACE_LENGTH:
            msg = f"trace_length must be at most {MAX_TRACE_LENGTH}, got {self.trace_length}"
            raise ConfigurationError(msg)
        if not isinstance(self.fifo_mode, FIFOMode):
            object.__setattr__(self, "fifo_mode", _parse_fifo_mode(self.fifo_mode))

    @classmethod
    def from_mapping(cls, values: Mapping[str, object]) -> SimulationConfig:
        """Build a config from loosely typed key/value pairs.

        Accepts the strings a command line, a JSON body, or ``KEY=VALUE``
        pairs would produce.  Keys are matched case-insensitively and
        ``None`` values fall back to the defaults.

        Raises:
            ConfigurationError: On unknown keys or unparseable values.

        """
        known = {f.name for f in fields(cls)}
        kwargs: dict[str, object] = {}
        for raw_key, value in values.items():
            key = raw_key.lower()
            if key not in known:
                msg = f"Unknown configuration key: {raw_key!r}"
                raise ConfigurationError(msg)
            if value is None:
                continue
            kwargs[key] = _coerce(key, value)
        return cls(**kwargs)  # type: ignore[arg-type]

    def seed_for(self, label: str) -> int | None:
        """Derive a reproducible per-consumer seed from the session seed.

        Each random consumer (the trace generator, each random selector)
        gets its own stream, so adding draws to one never shifts another.
        Returns ``None`` when the session is unseeded.
        """
        if self.seed is None:
            return None
        digest = hashlib.sha256(f"{self.seed}:{label}".encode()).digest()
        return int.from_bytes(digest[:8], "big")


def _coerce(key: str, value: object) -> object:
    """Convert a raw option value to the field's type."""
    if key == "verbose":
        return _parse_bool(value)
    if key == "fifo_mode":
        return _parse_fifo_mode(value)
    if isinstance(value, bool):
        msg = f"{key} must be an integer, got {value!r}"
        raise ConfigurationError(msg)
    if isinstance(value, int):
        return value
    try:
        return int(str(value).strip())
    except ValueError:
        msg = f"{key} must be an integer, got {value!r}"
        raise ConfigurationError(msg) from None


def _parse_bool(value: object) -> bool:
    if isinstance(value, bool):
        return value
    word = str(value).strip().lower()
    if word in _TRUE_WORDS:
        return True
    if word in _FALSE_WORDS:
        return False
    msg = f"verbose must be a yes/no value, got {value!r}"
    raise ConfigurationError(msg)


def _parse_fifo_mode(value: object) -> FIFOMode:
    try:
        return FIFOMode(str(value).strip().lower())
    except ValueError:
        choices = ", ".join(m.value for m in FIFOMode)
        msg = f"fifo_mode must be one of {choices}, got {value!r}"
        raise ConfigurationError(msg) from None
