"""Error taxonomy for the paging simulator.

Every failure the simulator can report is a ``SimulationError``.  None
of them is recoverable mid-run: a bad trace or a bad configuration is
rejected before the first reference is replayed, and a selector that
cannot find a victim means the tables are corrupt.

Running out of free frames is *not* an error — it is the normal
trigger for asking the replacement policy for a victim.
"""


class SimulationError(Exception):
    """Base class for all simulator failures."""


class ConfigurationError(SimulationError):
    """Raise when the simulator is configured with impossible bounds."""


class TraceError(ConfigurationError):
    """Raise when a reference trace contains a malformed page identifier.

    Attributes:
        line: 1-based line number of the offending entry, if known.

    """

    def __init__(self, message: str, *, line: int | None = None) -> None:
        """Create a trace error, optionally tagged with a line number."""
        if line is not None:
            message = f"line {line}: {message}"
        super().__init__(message)
        self.line = line


class SelectorError(SimulationError):
    """Raise when a victim selector has no occupied frame to choose from."""
