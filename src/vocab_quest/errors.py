"""Errors raised by the game rules and the store."""

from __future__ import annotations


class GameRuleError(ValueError):
    """Deterministic rejection of a request; retrying with the same input fails again."""


class InsufficientWordsError(GameRuleError):
    def __init__(self, required: int, available: int) -> None:
        self.required = required
        self.available = available
        super().__init__(
            f"At least {required} words are needed to build the quiz, "
            f"but only {available} are available ({required - available} short)"
        )


class InsufficientDistractorsError(GameRuleError):
    def __init__(self, word_id: int, found: int) -> None:
        self.word_id = word_id
        self.found = found
        super().__init__(
            f"Only {found} distinct distractors found for word {word_id}, 3 required"
        )


class CorrectAnswerExhaustedError(GameRuleError):
    def __init__(self, slot: int, count: int) -> None:
        self.slot = slot
        self.count = count
        super().__init__(
            f"No unused word left for question {slot + 1} of {count}"
        )


class InvalidSessionStateError(GameRuleError):
    def __init__(self, session_id: int, status: str) -> None:
        self.session_id = session_id
        self.status = status
        super().__init__(
            f"Quest session {session_id} is '{status}', expected 'ongoing'"
        )


class UnknownDifficultyTierError(GameRuleError):
    def __init__(self, tier: int) -> None:
        self.tier = tier
        super().__init__(f"Experience setting for difficulty tier {tier} not found")


class NotFoundError(LookupError):
    """A stored record does not exist."""
