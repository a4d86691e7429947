"""MCP tools for boss quests."""

from __future__ import annotations

from mcp.server.fastmcp import FastMCP
from pydantic import BaseModel

from vocab_quest.service import QuestService


def _dump(result: dict) -> dict:
    return {
        key: value.model_dump(mode="json") if isinstance(value, BaseModel) else value
        for key, value in result.items()
    }


def register(mcp: FastMCP, service: QuestService) -> None:
    @mcp.tool()
    def start_quest(user_id: int, boss_id: int | None = None) -> dict:
        """Start a boss quest, or resume the user's ongoing one.

        Returns the quest session, the boss, the user's combat stats and the
        first question.

        Args:
            user_id: The learner's user ID
            boss_id: Boss to fight (default: the first boss)
        """
        return _dump(service.start_quest(user_id, boss_id))

    @mcp.tool()
    def answer_quest(user_id: int, session_id: int, word_id: int, is_correct: bool) -> dict:
        """Submit one answer in a quest and resolve the combat turn.

        A correct answer damages the boss (more for harder words); a wrong
        answer lets the boss strike back. The quest is completed when the
        boss reaches 0 HP and failed when the user does.

        Args:
            user_id: The learner's user ID
            session_id: Quest session ID from start_quest
            word_id: ID of the word that was asked
            is_correct: Whether the learner chose the right option
        """
        return _dump(service.answer_quest(user_id, session_id, word_id, is_correct))
