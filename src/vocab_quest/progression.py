"""Experience and level progression."""

from __future__ import annotations

import logging
from typing import Mapping, Sequence

from vocab_quest.errors import UnknownDifficultyTierError
from vocab_quest.models import (
    CombatantStats,
    LevelStatus,
    ProgressionResult,
    UserCharacter,
)

logger = logging.getLogger(__name__)

# Stats used when a level has no row in the table
DEFAULT_HP = 100
DEFAULT_ATTACK = 10
DEFAULT_DEFENSE = 5


def validate_level_table(level_table: Sequence[LevelStatus]) -> None:
    """Require required_experience to increase strictly with level."""
    rows = sorted(level_table, key=lambda r: r.level)
    for prev, row in zip(rows, rows[1:]):
        if row.level == prev.level:
            raise ValueError(f"Duplicate level {row.level} in level table")
        if row.required_experience <= prev.required_experience:
            raise ValueError(
                f"Level {row.level} requires {row.required_experience} experience, "
                f"not more than level {prev.level} ({prev.required_experience})"
            )


def level_status(level_table: Sequence[LevelStatus], level: int) -> LevelStatus | None:
    return next((row for row in level_table if row.level == level), None)


def stats_for_level(
    level_table: Sequence[LevelStatus], level: int, current_hp: int | None = None
) -> CombatantStats:
    """Combat stats of a character at `level`, at full HP unless given."""
    row = level_status(level_table, level)
    hp = row.hp if row else DEFAULT_HP
    return CombatantStats(
        current_hp=hp if current_hp is None else current_hp,
        max_hp=hp,
        attack_power=row.attack_power if row else DEFAULT_ATTACK,
        defense_power=row.defense_power if row else DEFAULT_DEFENSE,
    )


def experience_for(
    difficulties: Sequence[int], exp_table: Mapping[int, int]
) -> int:
    """Sum the experience of every correct answer, duplicates included."""
    total = 0
    for tier in difficulties:
        if tier not in exp_table:
            raise UnknownDifficultyTierError(tier)
        total += exp_table[tier]
    return total


def apply_correct_answers(
    character: UserCharacter,
    difficulties_answered: Sequence[int],
    exp_table: Mapping[int, int],
    level_table: Sequence[LevelStatus],
) -> ProgressionResult:
    """Convert correct answers into experience and a possible level-up.

    The character jumps straight to the highest level whose requirement is
    met, skipping intermediate levels. `character` is not modified and the
    caller owns at-most-once application.
    """
    gained = experience_for(difficulties_answered, exp_table)
    new_experience = character.experience + gained

    reached = sorted(
        (
            row
            for row in level_table
            if row.level > character.level and row.required_experience <= new_experience
        ),
        key=lambda r: r.level,
    )

    if reached:
        target = reached[-1]
        logger.info(
            "User %d leveled up: %d -> %d (%d exp)",
            character.user_id, character.level, target.level, new_experience,
        )
        return ProgressionResult(
            new_level=target.level,
            new_experience=new_experience,
            leveled_up=True,
            new_character_image=target.character_image,
            total_experience_gained=gained,
            skills_unlocked=[r.skill_unlocked for r in reached if r.skill_unlocked],
        )

    current = level_status(level_table, character.level)
    return ProgressionResult(
        new_level=character.level,
        new_experience=new_experience,
        leveled_up=False,
        new_character_image=current.character_image if current else None,
        total_experience_gained=gained,
    )
