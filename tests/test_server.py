"""Tests for the MCP tool registration."""

import asyncio

import pytest

from vocab_quest.config import GameSettings
from vocab_quest.server import create_server
from vocab_quest.service import QuestService
from vocab_quest.store import GameStore


@pytest.fixture
def mcp(tmp_path):
    settings = GameSettings()
    store = GameStore(directory=tmp_path, bosses=settings.bosses)
    return create_server(QuestService(store, settings))


class TestTools:
    def test_registered_tools(self, mcp):
        names = {tool.name for tool in asyncio.run(mcp.list_tools())}
        assert names == {
            "generate_quiz",
            "classify_difficulty",
            "regrade_words",
            "start_quest",
            "answer_quest",
            "complete_quiz",
            "get_game_status",
        }
