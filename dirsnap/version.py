from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True, order=True)
class FormatVersion:
    """Three-part version tag of the snapshot metadata layout."""

    major: int
    minor: int
    patch: int = 0

    def __post_init__(self):
        for part in (self.major, self.minor, self.patch):
            if not isinstance(part, int) or part < 0:
                raise ValueError(f"version components must be non-negative integers: {part!r}")

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    @classmethod
    def parse(cls, text: str) -> "FormatVersion":
        """Parse ``major.minor[.patch]``; a missing patch reads as 0."""
        parts = text.strip().split(".")
        if not 2 <= len(parts) <= 3:
            raise ValueError(f"Invalid version string: {text!r}")
        nums = []
        for q in parts:
            if not q.isdigit():
                raise ValueError(f"Invalid version string: {text!r}")
            nums.append(int(q))
        return cls(*nums)
