from typing import Sequence


class SnapshotError(Exception):
    """Base class for dirsnap-specific errors."""


# Caller input
class InvalidArgumentError(SnapshotError, ValueError):
    pass


class DirectoryNotFoundError(SnapshotError, FileNotFoundError):
    pass


# Creation
class NameSpaceExhaustedError(SnapshotError):
    pass


class RetriesExceededError(SnapshotError):
    """Raised when files stay locked for every copy pass.

    The archive written so far is left on disk.
    """

    def __init__(self, pending: Sequence[str], attempts: int):
        self.pending = tuple(pending)
        self.attempts = attempts
        super().__init__(
            f"{len(self.pending)} file(s) still locked after {attempts} attempt(s): "
            + ", ".join(self.pending[:5])
            + (" ..." if len(self.pending) > 5 else "")
        )


class BuildCancelledError(SnapshotError):
    pass


# Enumeration (never surfaced by the catalog)
class CorruptEntryError(SnapshotError):
    pass
