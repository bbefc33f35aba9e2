"""Vote types, action labels and the result of applying a vote."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

from stackstudy.core.errors import InvalidArgumentError


class VoteType(IntEnum):
    """Direction of a vote; the value is the rating weight."""

    UP = 1
    DOWN = -1

    @classmethod
    def parse(cls, raw: object) -> VoteType:
        """Parse a vote type from its name (any case) or its weight.

        Raises:
            InvalidArgumentError: If ``raw`` is not a recognised vote type.
        """
        if isinstance(raw, cls):
            return raw
        if isinstance(raw, str):
            try:
                return cls[raw.strip().upper()]
            except KeyError:
                pass
        elif isinstance(raw, int) and not isinstance(raw, bool):
            try:
                return cls(raw)
            except ValueError:
                pass
        raise InvalidArgumentError(f"Invalid vote type: {raw!r}")

    @property
    def label(self) -> str:
        return self.name.lower()


class VoteAction:
    """Labels describing what a cast vote did."""

    ADDED = "added vote"
    CHANGED = "changed vote"
    REMOVED = "removed vote"


@dataclass(frozen=True, slots=True)
class VoteOutcome:
    action: str
    new_rating: int
    delta: int
