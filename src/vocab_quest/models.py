"""Data records for words, quizzes, quests and character progression."""

from __future__ import annotations

from datetime import datetime, timezone
from enum import Enum

from pydantic import BaseModel, Field, model_validator


class Word(BaseModel):
    id: int
    text: str
    meaning: str
    difficulty_tier: int = Field(default=1, ge=1, le=5)
    owner_id: int | None = None  # None = shared word


class QuizQuestion(BaseModel):
    """A single multiple-choice question."""

    word_id: int
    prompt_text: str  # the word's meaning
    options: list[str] = Field(min_length=4, max_length=4)
    correct_answer: str
    difficulty_tier: int = 1


class QuizBatch(BaseModel):
    """An ordered set of questions with unique correct answers."""

    questions: list[QuizQuestion]

    @model_validator(mode="after")
    def _unique_answers(self) -> QuizBatch:
        ids = [q.word_id for q in self.questions]
        if len(ids) != len(set(ids)):
            raise ValueError("Duplicate correct answer in quiz batch")
        return self


class CombatantStats(BaseModel):
    current_hp: int
    max_hp: int
    attack_power: int
    defense_power: int


class Boss(BaseModel):
    id: int
    name: str
    initial_hp: int = Field(ge=1)
    attack: int
    defense: int
    image_url: str | None = None

    def stats(self, current_hp: int | None = None) -> CombatantStats:
        hp = self.initial_hp if current_hp is None else current_hp
        return CombatantStats(
            current_hp=hp,
            max_hp=self.initial_hp,
            attack_power=self.attack,
            defense_power=self.defense,
        )


class QuestStatus(str, Enum):
    """Lifecycle of a quest session."""

    ongoing = "ongoing"
    completed = "completed"  # boss defeated
    failed = "failed"  # user defeated


class QuestSession(BaseModel):
    id: int
    user_id: int
    boss_id: int
    user_current_hp: int
    boss_current_hp: int
    status: QuestStatus = QuestStatus.ongoing
    started_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class UserCharacter(BaseModel):
    user_id: int
    level: int = 1
    experience: int = 0


class LevelStatus(BaseModel):
    """One row of the level table."""

    level: int
    required_experience: int
    attack_power: int
    defense_power: int
    hp: int = Field(ge=1)
    character_image: str | None = None
    skill_unlocked: str | None = None


class AnswerRecord(BaseModel):
    user_id: int
    word_id: int
    is_correct: bool
    answered_at: datetime = Field(default_factory=lambda: datetime.now(timezone.utc))


class RewardNotice(BaseModel):
    """Grant `amount` currency to `user_id`, emitted when a quest is won."""

    user_id: int
    session_id: int
    amount: int


class TurnResult(BaseModel):
    new_user_hp: int
    new_boss_hp: int
    damage_dealt: int
    damage_taken: int
    new_status: QuestStatus
    reward: RewardNotice | None = None


class ProgressionResult(BaseModel):
    new_level: int
    new_experience: int
    leveled_up: bool
    new_character_image: str | None
    total_experience_gained: int
    skills_unlocked: list[str] = Field(default_factory=list)


class WordAccuracy(BaseModel):
    word_id: int
    word: str
    total_count: int
    correct_count: int
    accuracy_rate: int  # floored percent
