"""Tests for quiz assembly."""

import random
from collections import Counter

import pytest

from conftest import make_pool
from vocab_quest.errors import (
    CorrectAnswerExhaustedError,
    InsufficientDistractorsError,
    InsufficientWordsError,
)
from vocab_quest.models import Word
from vocab_quest.quiz_engine import assemble_quiz, next_question


class TestAssembleQuiz:
    def test_batch_shape(self, pool, rng):
        batch = assemble_quiz(pool, 5, rng)
        assert len(batch.questions) == 5
        for q in batch.questions:
            assert len(q.options) == 4
            assert len(set(q.options)) == 4
            assert q.correct_answer in q.options

    def test_correct_answers_unique(self, rng):
        for _ in range(50):
            batch = assemble_quiz(make_pool(8), 5, rng)
            ids = [q.word_id for q in batch.questions]
            assert len(set(ids)) == 5

    def test_question_carries_word_data(self, pool, rng):
        by_id = {w.id: w for w in pool}
        for q in assemble_quiz(pool, 5, rng).questions:
            word = by_id[q.word_id]
            assert q.prompt_text == word.meaning
            assert q.correct_answer == word.text
            assert q.difficulty_tier == word.difficulty_tier

    def test_exact_minimum_pool(self, rng):
        batch = assemble_quiz(make_pool(4), 1, rng)
        assert len(batch.questions) == 1

    def test_pool_too_small(self, rng):
        with pytest.raises(InsufficientWordsError) as exc:
            assemble_quiz(make_pool(7), 5, rng)
        assert exc.value.required == 8
        assert exc.value.available == 7
        assert "1 short" in str(exc.value)

    def test_non_positive_count(self, pool, rng):
        with pytest.raises(ValueError):
            assemble_quiz(pool, 0, rng)

    def test_homonyms_do_not_count_as_distractors(self, rng):
        pool = [
            Word(id=1, text="bank", meaning="river edge"),
            Word(id=2, text="bank", meaning="money house"),
            Word(id=3, text="bank", meaning="to tilt"),
            Word(id=4, text="shore", meaning="land by the sea"),
        ]
        with pytest.raises(InsufficientDistractorsError) as exc:
            assemble_quiz(pool, 1, rng)
        assert exc.value.found == 1

    def test_correct_answers_exhausted(self, rng):
        # Repeated ids leave only four distinct correct answers for five slots.
        pool = [
            Word(id=1 if i < 5 else i - 3, text=f"w{i}", meaning=f"m{i}")
            for i in range(8)
        ]
        with pytest.raises(CorrectAnswerExhaustedError) as exc:
            assemble_quiz(pool, 5, rng)
        assert exc.value.slot == 4

    def test_same_seed_same_batch(self, pool):
        a = assemble_quiz(pool, 5, random.Random(99))
        b = assemble_quiz(pool, 5, random.Random(99))
        assert a == b

    def test_pool_not_mutated(self, pool, rng):
        before = list(pool)
        assemble_quiz(pool, 5, rng)
        assert pool == before

    def test_correct_position_spread(self, rng):
        positions = Counter()
        for _ in range(400):
            q = assemble_quiz(make_pool(6), 1, rng).questions[0]
            positions[q.options.index(q.correct_answer)] += 1
        assert set(positions) == {0, 1, 2, 3}
        assert min(positions.values()) > 50


class TestNextQuestion:
    def test_single_question(self, pool, rng):
        q = next_question(pool, rng)
        assert q.word_id in {w.id for w in pool}
        assert len(set(q.options)) == 4

    def test_needs_four_words(self, rng):
        with pytest.raises(InsufficientWordsError):
            next_question(make_pool(3), rng)
