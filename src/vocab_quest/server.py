"""MCP Server: exposes the vocabulary quest game as tools.

Registered tools:
- generate_quiz / classify_difficulty / regrade_words  (quizzes and grading)
- start_quest / answer_quest                           (boss battles)
- complete_quiz / get_game_status                      (progression)
"""

from __future__ import annotations

import argparse
import logging

from mcp.server.fastmcp import FastMCP

from vocab_quest.config import DATA_DIR, load_settings
from vocab_quest.service import QuestService
from vocab_quest.store import GameStore
from vocab_quest.tools import progress, quest, quiz

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)


def create_server(service: QuestService) -> FastMCP:
    mcp = FastMCP("vocab-quest")
    quiz.register(mcp, service)
    quest.register(mcp, service)
    progress.register(mcp, service)
    return mcp


def main():
    """Run the MCP server."""
    parser = argparse.ArgumentParser(description="Vocab Quest MCP Server")
    parser.add_argument(
        "--sse",
        type=int,
        metavar="PORT",
        help="Run with SSE transport on specified port",
    )
    parser.add_argument(
        "--http",
        type=int,
        metavar="PORT",
        help="Run with Streamable HTTP transport on specified port",
    )
    parser.add_argument(
        "--verbose",
        "-v",
        action="store_true",
        help="Enable verbose logging",
    )
    args = parser.parse_args()

    if args.verbose:
        logging.getLogger().setLevel(logging.DEBUG)

    if args.sse:
        transport = "sse"
        port = args.sse
    elif args.http:
        transport = "http"
        port = args.http
    else:
        transport = "stdio"
        port = None

    settings = load_settings()
    store = GameStore(DATA_DIR, bosses=settings.bosses)
    mcp = create_server(QuestService(store, settings))
    logger.info("Starting Vocab Quest MCP server (transport: %s)...", transport)

    if transport == "stdio":
        mcp.run(transport="stdio")
    elif transport == "sse":
        mcp.settings.host = "0.0.0.0"
        mcp.settings.port = port
        mcp.run(transport="sse")
    elif transport == "http":
        mcp.settings.host = "0.0.0.0"
        mcp.settings.port = port
        mcp.run(transport="streamable-http")


if __name__ == "__main__":
    main()
