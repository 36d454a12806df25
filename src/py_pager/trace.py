"""Reference traces — reading, writing, and generating page sequences.

A trace is the ordered list of page identifiers a simulated process
touches.  The simulator replays the same trace once per policy, so it is
held as a tuple: immutable and re-iterable.

On disk a trace is plain text, one identifier per line (the historical
``reference_string.txt`` format).  Any whitespace works as a separator.

Generated traces imitate program locality: the first reference is
always page 0, then each newly drawn page is repeated a random number
of times (uniform over 1..5) before the next page is drawn.
"""

from __future__ import annotations

import random
from collections.abc import Iterable
from pathlib import Path
from typing import TypeAlias

from py_pager.config import MAX_TRACE_LENGTH
from py_pager.errors import ConfigurationError, TraceError

Trace: TypeAlias = tuple[int, ...]

MIN_REPEAT = 1
MAX_REPEAT = 5


def parse_trace(text: str, *, max_pages: int, max_length: int = MAX_TRACE_LENGTH) -> Trace:
    """Parse whitespace-delimited page identifiers.

    Args:
        text: Trace contents.
        max_pages: Identifiers must lie in ``[0, max_pages)``.
        max_length: Most references the trace may hold.

    Returns:
        The trace as a tuple of ints.

    Raises:
        TraceError: On a non-numeric or out-of-range entry, or when the
            trace holds more than ``max_length`` references.

    """
    pages: list[int] = []
    for line_number, line in enumerate(text.splitlines(), start=1):
        for token in line.split():
            try:
                page = int(token)
            except ValueError:
                msg = f"not a page number: {token!r}"
                raise TraceError(msg, line=line_number) from None
            if not 0 <= page < max_pages:
                msg = f"page {page} outside range [0, {max_pages})"
                raise TraceError(msg, line=line_number)
            if len(pages) == max_length:
                msg = f"trace longer than {max_length} references"
                raise TraceError(msg, line=line_number)
            pages.append(page)
    return tuple(pages)


def validate_trace(
    pages: Iterable[int], *, max_pages: int, max_length: int = MAX_TRACE_LENGTH
) -> Trace:
    """Check already-parsed identifiers and freeze them into a trace.

    Raises:
        TraceError: If an entry is not an int or lies outside
            ``[0, max_pages)`` (the error names the 1-based position), or
            if there are more than ``max_length`` entries.

    """
    checked: list[int] = []
    for position, page in enumerate(pages, start=1):
        if position > max_length:
            msg = f"trace longer than {max_length} references"
            raise TraceError(msg, line=position)
        if isinstance(page, bool) or not isinstance(page, int):
            msg = f"not a page number: {page!r}"
            raise TraceError(msg, line=position)
        if not 0 <= page < max_pages:
            msg = f"page {page} outside range [0, {max_pages})"
            raise TraceError(msg, line=position)
        checked.append(page)
    return tuple(checked)


def load_trace(path: str | Path, *, max_pages: int, max_length: int = MAX_TRACE_LENGTH) -> Trace:
    """Read and validate a trace file.

    Raises:
        TraceError: On a malformed entry or an over-long trace.
        OSError: If the file cannot be read.

    """
    text = Path(path).read_text(encoding="utf-8")
    return parse_trace(text, max_pages=max_pages, max_length=max_length)


def write_trace(path: str | Path, trace: Trace) -> None:
    """Write a trace one identifier per line."""
    body = "".join(f"{page}\n" for page in trace)
    Path(path).write_text(body, encoding="utf-8")


def generate_trace(*, length: int, max_pages: int, rng: random.Random | None = None) -> Trace:
    """Generate a locality-biased trace of exactly ``length`` references.

    Args:
        length: Number of references to produce.
        max_pages: Drawn identifiers lie in ``[0, max_pages)``.
        rng: Random source; a fresh unseeded one if omitted.

    Returns:
        A trace starting with page 0 (empty if ``length`` is 0).

    Raises:
        ConfigurationError: If ``length`` exceeds ``MAX_TRACE_LENGTH``.

    """
    if length > MAX_TRACE_LENGTH:
        msg = f"length must be at most {MAX_TRACE_LENGTH}, got {length}"
        raise ConfigurationError(msg)
    if length <= 0:
        return ()
    rng = rng if rng is not None else random.Random()  # noqa: S311
    pages = [0]
    while len(pages) < length:
        page = int(rng.random() * max_pages)
        repeat = rng.randint(MIN_REPEAT, MAX_REPEAT)
        pages.extend([page] * repeat)
    return tuple(pages[:length])
