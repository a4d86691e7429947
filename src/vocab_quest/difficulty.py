"""Word difficulty re-grading from answer history.

Tiers run from 1 (easiest) to 5 (hardest). A word the user keeps getting
wrong is graded *harder*, so low accuracy maps to a high tier.
"""

from __future__ import annotations

import logging
import math
from typing import Iterable, Sequence

from vocab_quest.models import AnswerRecord, Word, WordAccuracy

logger = logging.getLogger(__name__)

# (inclusive lower bound on accuracy percent, tier), checked top-down
TIER_THRESHOLDS: tuple[tuple[float, int], ...] = (
    (80, 1),
    (60, 2),
    (40, 3),
    (20, 4),
)
HARDEST_TIER = 5


def classify(accuracy_rate: float) -> int:
    """Map an accuracy percentage to a difficulty tier."""
    for lower_bound, tier in TIER_THRESHOLDS:
        if accuracy_rate >= lower_bound:
            return tier
    return HARDEST_TIER


def accuracy_rate(correct_count: int, total_count: int) -> float:
    if total_count == 0:
        return 0.0
    return correct_count / total_count * 100


def _tally(records: Iterable[AnswerRecord]) -> dict[int, tuple[int, int]]:
    counts: dict[int, tuple[int, int]] = {}
    for rec in records:
        correct, total = counts.get(rec.word_id, (0, 0))
        counts[rec.word_id] = (correct + int(rec.is_correct), total + 1)
    return counts


def regrade_words(
    words: Sequence[Word], records: Iterable[AnswerRecord]
) -> list[Word]:
    """Return copies of `words` with tiers recomputed from `records`.

    A word with no history has an accuracy of 0 and becomes tier 5.
    """
    counts = _tally(records)
    updated = []
    for word in words:
        correct, total = counts.get(word.id, (0, 0))
        tier = classify(accuracy_rate(correct, total))
        if tier != word.difficulty_tier:
            logger.info(
                "Word %d regraded: tier %d -> %d (%d/%d correct)",
                word.id, word.difficulty_tier, tier, correct, total,
            )
        updated.append(word.model_copy(update={"difficulty_tier": tier}))
    return updated


def summarize_accuracy(
    words: Sequence[Word], records: Iterable[AnswerRecord]
) -> list[WordAccuracy]:
    """Per-word accuracy for every word that appears in `records`."""
    by_id = {w.id: w for w in words}
    summary = []
    for word_id, (correct, total) in _tally(records).items():
        word = by_id.get(word_id)
        summary.append(
            WordAccuracy(
                word_id=word_id,
                word=word.text if word else "unknown",
                total_count=total,
                correct_count=correct,
                accuracy_rate=math.floor(accuracy_rate(correct, total)),
            )
        )
    return summary
