# rules/game.py
from __future__ import annotations

from dataclasses import asdict, dataclass, field
from typing import Any, List, Optional

from rules.challenge import Challenge


@dataclass
class RoundState:
    """One round of play: what's left to find and how the player is doing."""

    description: str
    remaining: List[str] = field(default_factory=list)
    total: int = 0
    correct_count: int = 0
    has_guessed: bool = False
    last_correct: Optional[bool] = None

    @property
    def is_complete(self) -> bool:
        return self.total > 0 and not self.remaining

    def to_dict(self) -> dict:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: Any) -> Optional["RoundState"]:
        """Rebuild from session data. Anything malformed is treated as no round."""
        if not isinstance(data, dict):
            return None
        description = data.get("description")
        remaining = data.get("remaining")
        if not isinstance(description, str) or not isinstance(remaining, list):
            return None
        if not all(isinstance(r, str) for r in remaining):
            return None
        try:
            total = int(data.get("total") or 0)
            correct_count = int(data.get("correct_count") or 0)
        except (TypeError, ValueError):
            return None
        last_correct = data.get("last_correct")
        return cls(
            description=description,
            remaining=list(remaining),
            total=total,
            correct_count=correct_count,
            has_guessed=bool(data.get("has_guessed")),
            last_correct=last_correct if isinstance(last_correct, bool) else None,
        )


@dataclass(frozen=True)
class GuessResult:
    correct: bool
    remaining: int


def new_round(challenge: Challenge) -> RoundState:
    return RoundState(
        description=challenge.description,
        remaining=list(challenge.answers),
        total=len(challenge.answers),
    )


def submit_guess(state: Optional[RoundState], guess: str) -> GuessResult:
    """
    Case-sensitive exact match against what's left.

    A hit removes that one entry and bumps the correct count; a miss leaves
    the answers alone. Guessing with no round (or a finished one) is a miss.
    """
    if state is None:
        return GuessResult(correct=False, remaining=0)

    state.has_guessed = True

    if guess in state.remaining:
        state.remaining.remove(guess)
        state.correct_count += 1
        state.last_correct = True
    else:
        state.last_correct = False

    return GuessResult(correct=bool(state.last_correct), remaining=len(state.remaining))
