"""Quiz engine: multiple-choice question assembly from a word pool."""

from __future__ import annotations

import logging
import random
from typing import Sequence, TypeVar

from vocab_quest.errors import (
    CorrectAnswerExhaustedError,
    InsufficientDistractorsError,
    InsufficientWordsError,
)
from vocab_quest.models import QuizBatch, QuizQuestion, Word

logger = logging.getLogger(__name__)

OPTIONS_PER_QUESTION = 4
DISTRACTORS_PER_QUESTION = OPTIONS_PER_QUESTION - 1

T = TypeVar("T")


def shuffled(items: Sequence[T], rng: random.Random) -> list[T]:
    """Return a uniformly shuffled copy of `items`."""
    result = list(items)
    rng.shuffle(result)
    return result


def _pick_distractors(
    correct: Word, pool: Sequence[Word], rng: random.Random
) -> list[str]:
    # Distinct surface text only; two words may share a spelling.
    used = {correct.text}
    distractors: list[str] = []
    for word in shuffled([w for w in pool if w.id != correct.id], rng):
        if word.text in used:
            continue
        distractors.append(word.text)
        used.add(word.text)
        if len(distractors) == DISTRACTORS_PER_QUESTION:
            break

    if len(distractors) < DISTRACTORS_PER_QUESTION:
        raise InsufficientDistractorsError(correct.id, len(distractors))
    return distractors


def build_question(
    correct: Word, pool: Sequence[Word], rng: random.Random
) -> QuizQuestion:
    """Build one question for `correct`, drawing distractors from `pool`."""
    distractors = _pick_distractors(correct, pool, rng)
    return QuizQuestion(
        word_id=correct.id,
        prompt_text=correct.meaning,
        options=shuffled([correct.text, *distractors], rng),
        correct_answer=correct.text,
        difficulty_tier=correct.difficulty_tier,
    )


def assemble_quiz(
    pool: Sequence[Word],
    count: int,
    rng: random.Random | None = None,
) -> QuizBatch:
    """Assemble `count` questions with no repeated correct answer.

    The pool must hold at least ``count + 3`` words: one distinct correct
    answer per question plus three distractors, which may be reused across
    questions.

    Raises:
        InsufficientWordsError: the pool is too small.
        CorrectAnswerExhaustedError: no unused word is left for a slot.
        InsufficientDistractorsError: fewer than 3 distinct distractor texts.
    """
    if count < 1:
        raise ValueError(f"Quiz size must be positive, got {count}")
    if rng is None:
        rng = random.Random()

    required = count + DISTRACTORS_PER_QUESTION
    if len(pool) < required:
        logger.warning(
            "Quiz rejected: %d words available, %d required", len(pool), required
        )
        raise InsufficientWordsError(required, len(pool))

    available = shuffled(pool, rng)
    used_ids: set[int] = set()
    questions: list[QuizQuestion] = []

    for slot in range(count):
        correct = next((w for w in available if w.id not in used_ids), None)
        if correct is None:
            raise CorrectAnswerExhaustedError(slot, count)
        used_ids.add(correct.id)
        questions.append(build_question(correct, available, rng))

    return QuizBatch(questions=questions)


def next_question(pool: Sequence[Word], rng: random.Random | None = None) -> QuizQuestion:
    """A single fresh question from the whole pool."""
    return assemble_quiz(pool, 1, rng).questions[0]
