"""MCP tools for character progression."""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP

from vocab_quest.service import QuestService


def register(mcp: FastMCP, service: QuestService) -> None:
    @mcp.tool()
    def complete_quiz(user_id: int, correct_difficulties: list[int]) -> dict:
        """Award experience for correct answers and apply any level-up.

        Every entry counts, so five correct tier-1 answers earn five times
        the tier-1 experience. Large gains can skip levels.

        Args:
            user_id: The learner's user ID
            correct_difficulties: Difficulty tier of each correct answer
        """
        return service.complete_quiz(user_id, correct_difficulties).model_dump()

    @mcp.tool()
    def get_game_status(user_id: int) -> dict:
        """Get a user's level, experience, currency and level stats.

        Args:
            user_id: The learner's user ID
        """
        status = service.game_status(user_id)
        if status["status"] is not None:
            status["status"] = status["status"].model_dump()
        return status
