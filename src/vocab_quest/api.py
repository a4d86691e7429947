"""FastAPI HTTP layer wrapping QuestService."""

from __future__ import annotations

import hmac
import logging
import os

from fastapi import FastAPI, Header, HTTPException, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel, Field

from vocab_quest.config import DATA_DIR, load_settings
from vocab_quest.errors import GameRuleError, NotFoundError, UnknownDifficultyTierError
from vocab_quest.service import QuestService
from vocab_quest.store import GameStore

logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Vocab Quest API",
    description="Vocabulary quizzes, boss quests and character progression",
    version="0.1.0",
)

API_KEY = os.getenv("API_KEY")
if not API_KEY:
    logger.warning("API_KEY not set. All requests will be allowed.")


@app.middleware("http")
async def verify_api_key(request: Request, call_next):
    if API_KEY and request.url.path != "/health":
        key = request.headers.get("x-api-key", "")
        if not hmac.compare_digest(key, API_KEY):
            return JSONResponse(status_code=401, content={"detail": "Invalid API key"})
    return await call_next(request)


@app.get("/health")
def health():
    """Unauthenticated health check."""
    return {"status": "ok"}


settings = load_settings()
store = GameStore(DATA_DIR, bosses=settings.bosses)
service = QuestService(store, settings)


def _http_error(e: Exception) -> HTTPException:
    if isinstance(e, UnknownDifficultyTierError):
        logger.error("Configuration defect: %s", e)
        return HTTPException(status_code=500, detail=str(e))
    if isinstance(e, NotFoundError):
        return HTTPException(status_code=404, detail=str(e))
    if isinstance(e, PermissionError):
        return HTTPException(status_code=403, detail=str(e))
    return HTTPException(status_code=400, detail=str(e))


# --- Request models ---


class AnswerRequest(BaseModel):
    word_id: int
    is_correct: bool


class CompleteQuizRequest(BaseModel):
    correct_difficulties: list[int]


class RegradeRequest(BaseModel):
    word_ids: list[int]


class WordCreateRequest(BaseModel):
    text: str = Field(min_length=1)
    meaning: str = Field(min_length=1)
    difficulty_tier: int = Field(default=1, ge=1, le=5)


class QuestStartRequest(BaseModel):
    boss_id: int | None = None


class QuestAnswerRequest(BaseModel):
    session_id: int
    word_id: int
    is_correct: bool


# --- Quiz endpoints ---


@app.get("/api/quiz")
def get_quiz(x_user_id: int = Header()):
    """Generate a quiz batch from the user's words and the shared words."""
    try:
        return service.generate_quiz(x_user_id).model_dump()
    except (GameRuleError, ValueError) as e:
        raise _http_error(e)


@app.post("/api/quiz/answers")
def record_answer(req: AnswerRequest, x_user_id: int = Header()):
    """Record one quiz answer in the history."""
    try:
        return service.record_answer(x_user_id, req.word_id, req.is_correct).model_dump()
    except NotFoundError as e:
        raise _http_error(e)


@app.post("/api/quiz/complete")
def complete_quiz(req: CompleteQuizRequest, x_user_id: int = Header()):
    """Award experience for correctly answered difficulties."""
    try:
        return service.complete_quiz(x_user_id, req.correct_difficulties).model_dump()
    except GameRuleError as e:
        raise _http_error(e)


@app.get("/api/accuracy")
def get_accuracy(x_user_id: int = Header()):
    """Per-word accuracy rates for the user."""
    return [a.model_dump() for a in service.accuracy_rates(x_user_id)]


# --- Word endpoints ---


@app.post("/api/words")
def create_word(req: WordCreateRequest, x_user_id: int = Header()):
    """Register a word owned by the user."""
    word = store.add_word(req.text, req.meaning, x_user_id, req.difficulty_tier)
    return word.model_dump()


@app.delete("/api/words/{word_id}")
def delete_word(word_id: int, x_user_id: int = Header()):
    """Delete one of the user's words."""
    try:
        store.delete_word(word_id, x_user_id)
    except (NotFoundError, PermissionError) as e:
        raise _http_error(e)
    return {"status": "deleted"}


@app.post("/api/words/regrade")
def regrade_words(req: RegradeRequest, x_user_id: int = Header()):
    """Recompute word difficulty from the user's answer history."""
    try:
        return [w.model_dump() for w in service.regrade(x_user_id, req.word_ids)]
    except ValueError as e:
        raise _http_error(e)


# --- Quest endpoints ---


@app.post("/api/quest/start")
def start_quest(req: QuestStartRequest, x_user_id: int = Header()):
    """Start a quest, or resume the ongoing one against the same boss."""
    try:
        result = service.start_quest(x_user_id, req.boss_id)
    except (NotFoundError, GameRuleError) as e:
        raise _http_error(e)
    return {key: _dump(value) for key, value in result.items()}


@app.post("/api/quest/answer")
def answer_quest(req: QuestAnswerRequest, x_user_id: int = Header()):
    """Resolve one answer against the boss."""
    try:
        result = service.answer_quest(x_user_id, req.session_id, req.word_id, req.is_correct)
    except (NotFoundError, PermissionError, GameRuleError) as e:
        raise _http_error(e)
    return {key: _dump(value) for key, value in result.items()}


@app.get("/api/quest/{session_id}/result")
def quest_result(session_id: int, x_user_id: int = Header()):
    """Final state of a quest session."""
    try:
        result = service.quest_result(x_user_id, session_id)
    except (NotFoundError, PermissionError) as e:
        raise _http_error(e)
    return result


# --- Character endpoints ---


@app.get("/api/status")
def game_status(x_user_id: int = Header()):
    """Level, experience and currency of the user's character."""
    return service.game_status(x_user_id)


@app.get("/api/ranking")
def ranking():
    """Top characters by level."""
    return service.ranking()


def _dump(value):
    return value.model_dump(mode="json") if isinstance(value, BaseModel) else value


def main():
    """Run the API server."""
    import uvicorn

    port = int(os.environ.get("PORT", 8000))
    uvicorn.run(app, host="0.0.0.0", port=port)


if __name__ == "__main__":
    main()
