"""MCP tools for quiz generation and difficulty grading."""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from vocab_quest.difficulty import classify
from vocab_quest.service import QuestService


def register(mcp: FastMCP, service: QuestService) -> None:
    @mcp.tool()
    def generate_quiz(user_id: int) -> dict:
        """Generate a multiple-choice vocabulary quiz for a user.

        Questions are drawn from the user's own words plus the shared word
        list. Each question shows a meaning and four candidate words; no word
        is the correct answer of more than one question.

        Args:
            user_id: The learner's user ID
        """
        return service.generate_quiz(user_id).model_dump()

    @mcp.tool()
    def classify_difficulty(accuracy_rate: float) -> int:
        """Map an accuracy percentage (0-100) to a difficulty tier.

        Tier 1 is easiest, tier 5 hardest. Words answered correctly less
        often are graded harder: >=80 -> 1, >=60 -> 2, >=40 -> 3, >=20 -> 4,
        otherwise 5.

        Args:
            accuracy_rate: Percentage of correct answers for a word
        """
        return classify(accuracy_rate)

    @mcp.tool()
    def regrade_words(user_id: int, word_ids: list[int]) -> list[dict]:
        """Recompute and store difficulty tiers from a user's answer history.

        Args:
            user_id: Whose answer history to use
            word_ids: Words to regrade
        """
        return [w.model_dump() for w in service.regrade(user_id, word_ids)]
