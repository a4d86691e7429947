"""Quest service: wires the game rules to storage for each request."""

from __future__ import annotations

import logging
import random
from typing import Any, Sequence

from vocab_quest.battle import apply_turn, resolve_turn
from vocab_quest.config import GameSettings
from vocab_quest.difficulty import regrade_words, summarize_accuracy
from vocab_quest.models import (
    AnswerRecord,
    ProgressionResult,
    QuestStatus,
    QuizBatch,
    RewardNotice,
    Word,
    WordAccuracy,
)
from vocab_quest.progression import apply_correct_answers, level_status, stats_for_level
from vocab_quest.quiz_engine import assemble_quiz, next_question
from vocab_quest.store import GameStore

logger = logging.getLogger(__name__)


class QuestService:
    """Request-level operations for one store and one set of settings.

    Each call draws from its own `random.Random` unless `rng` is given, so
    concurrent requests never share a seed.
    """

    def __init__(
        self,
        store: GameStore,
        settings: GameSettings,
        rng: random.Random | None = None,
    ) -> None:
        self.store = store
        self.settings = settings
        self._rng = rng

    def _random(self) -> random.Random:
        return self._rng if self._rng is not None else random.Random()

    # --- quiz ---

    def generate_quiz(self, user_id: int) -> QuizBatch:
        pool = self.store.fetch_words(user_id)
        return assemble_quiz(pool, self.settings.quiz_size, self._random())

    def record_answer(self, user_id: int, word_id: int, is_correct: bool) -> AnswerRecord:
        self.store.load_word(word_id)
        return self.store.append_answer(
            AnswerRecord(user_id=user_id, word_id=word_id, is_correct=is_correct)
        )

    def complete_quiz(self, user_id: int, difficulties: Sequence[int]) -> ProgressionResult:
        """Apply experience for a finished quiz or quest."""
        with self.store.locked("character", user_id):
            character = self.store.load_character(user_id)
            result = apply_correct_answers(
                character,
                difficulties,
                self.settings.experience_table,
                self.settings.level_table,
            )
            self.store.save_character(
                character.model_copy(
                    update={"level": result.new_level, "experience": result.new_experience}
                )
            )
        return result

    # --- difficulty ---

    def accuracy_rates(self, user_id: int) -> list[WordAccuracy]:
        records = self.store.answers_for(user_id)
        words = self.store.fetch_words_by_ids({r.word_id for r in records})
        return summarize_accuracy(words, records)

    def regrade(self, user_id: int, word_ids: Sequence[int]) -> list[Word]:
        if not word_ids:
            raise ValueError("No word ids given")
        words = self.store.fetch_words_by_ids(word_ids)
        updated = regrade_words(words, self.store.answers_for(user_id, word_ids))
        self.store.save_words(updated)
        return updated

    # --- quests ---

    def start_quest(self, user_id: int, boss_id: int | None = None) -> dict[str, Any]:
        """Resume the user's ongoing quest against the boss or start a new one."""
        boss = self.store.first_boss() if boss_id is None else self.store.load_boss(boss_id)
        character = self.store.load_character(user_id)
        user_stats = stats_for_level(self.settings.level_table, character.level)
        # A pool too small for a question fails here, before any session exists.
        question = next_question(self.store.fetch_words(user_id), self._random())

        with self.store.locked("quest", (user_id, boss.id)):
            session = self.store.find_ongoing_session(user_id, boss.id)
            if session is not None:
                logger.info("Resuming quest session %d for user %d", session.id, user_id)
            else:
                session = self.store.create_session(
                    user_id, boss.id, user_stats.max_hp, boss.initial_hp
                )
                logger.info("Started quest session %d for user %d", session.id, user_id)

        user_stats.current_hp = session.user_current_hp
        return {
            "session": session,
            "boss": boss,
            "user_status": user_stats,
            "character_image": _image_for(self.settings, character.level),
            "current_question": question,
        }

    def answer_quest(
        self, user_id: int, session_id: int, word_id: int, is_correct: bool
    ) -> dict[str, Any]:
        """Resolve one answer within a quest.

        Raises:
            NotFoundError: unknown session or word.
            PermissionError: the session belongs to another user.
            InvalidSessionStateError: the quest is already over.
        """
        with self.store.locked("session", session_id):
            session = self.store.load_session(session_id)
            if session.user_id != user_id:
                raise PermissionError(
                    f"Quest session {session_id} does not belong to user {user_id}"
                )
            word = self.store.load_word(word_id)
            boss = self.store.load_boss(session.boss_id)
            character = self.store.load_character(user_id)

            result = resolve_turn(
                session,
                word,
                is_correct,
                stats_for_level(self.settings.level_table, character.level),
                boss.stats(),
                self._random(),
                reward_amount=self.settings.quest_reward,
                bonus_factor=self.settings.difficulty_bonus_factor,
                random_factor=self.settings.random_factor,
            )
            # Nothing is written until the follow-up question is in hand.
            question = None
            if result.new_status == QuestStatus.ongoing:
                question = next_question(self.store.fetch_words(user_id), self._random())

            self.store.append_answer(
                AnswerRecord(user_id=user_id, word_id=word_id, is_correct=is_correct)
            )
            session = self.store.save_session(apply_turn(session, result))
            if result.reward is not None:
                self._deliver_reward(result.reward)

        if result.new_status != QuestStatus.ongoing:
            logger.info("Quest session %d ended: %s", session_id, result.new_status.value)

        return {"session": session, "turn": result, "next_question": question}

    def _deliver_reward(self, notice: RewardNotice) -> None:
        balance = self.store.grant_currency(notice.user_id, notice.amount)
        logger.info(
            "Granted %d currency to user %d for quest %d (balance %d)",
            notice.amount, notice.user_id, notice.session_id, balance,
        )

    def quest_result(self, user_id: int, session_id: int) -> dict[str, Any]:
        session = self.store.load_session(session_id)
        if session.user_id != user_id:
            raise PermissionError(
                f"Quest session {session_id} does not belong to user {user_id}"
            )
        boss = self.store.load_boss(session.boss_id)
        return {
            "session_id": session.id,
            "status": session.status,
            "final_boss_hp": session.boss_current_hp,
            "final_user_hp": session.user_current_hp,
            "boss_name": boss.name,
            "character": self.game_status(user_id),
        }

    # --- character ---

    def game_status(self, user_id: int) -> dict[str, Any]:
        character = self.store.load_character(user_id)
        return {
            "user_id": character.user_id,
            "level": character.level,
            "experience": character.experience,
            "currency": self.store.currency_balance(user_id),
            "status": level_status(self.settings.level_table, character.level),
        }

    def ranking(self) -> list[dict[str, Any]]:
        """Top characters by level, then experience."""
        top = sorted(
            self.store.list_characters(),
            key=lambda c: (c.level, c.experience),
            reverse=True,
        )[: self.settings.ranking_size]
        return [
            {
                "user_id": c.user_id,
                "level": c.level,
                "experience": c.experience,
                "character_image": _image_for(self.settings, c.level),
            }
            for c in top
        ]


def _image_for(settings: GameSettings, level: int) -> str | None:
    row = level_status(settings.level_table, level)
    return row.character_image if row else None
