"""Turn-by-turn boss combat driven by quiz answers."""

from __future__ import annotations

import logging
import math
import random

from vocab_quest.errors import InvalidSessionStateError
from vocab_quest.models import (
    CombatantStats,
    QuestSession,
    QuestStatus,
    RewardNotice,
    TurnResult,
    Word,
)

logger = logging.getLogger(__name__)

DIFFICULTY_BONUS_FACTOR = 5
RANDOM_FACTOR = 0.2
MIN_ATTACK_DAMAGE = 1
MIN_BOSS_BASE_DAMAGE = 10
BOSS_DAMAGE_MULTIPLIER = 2


def attack_damage(
    user: CombatantStats,
    boss: CombatantStats,
    difficulty_tier: int,
    bonus_factor: int = DIFFICULTY_BONUS_FACTOR,
) -> int:
    """Damage dealt to the boss by a correct answer."""
    base = max(MIN_ATTACK_DAMAGE, user.attack_power - boss.defense_power)
    return base + difficulty_tier * bonus_factor


def counter_damage(
    user: CombatantStats,
    boss: CombatantStats,
    rng: random.Random,
    random_factor: float = RANDOM_FACTOR,
) -> int:
    """Damage taken by the user after a wrong answer, jittered by ±random_factor."""
    base = max(MIN_BOSS_BASE_DAMAGE, boss.attack_power - user.defense_power)
    base *= BOSS_DAMAGE_MULTIPLIER
    multiplier = rng.uniform(1 - random_factor, 1 + random_factor)
    return math.floor(base * multiplier)


def resolve_turn(
    session: QuestSession,
    answered_word: Word,
    is_correct: bool,
    user: CombatantStats,
    boss: CombatantStats,
    rng: random.Random | None = None,
    *,
    reward_amount: int = 0,
    bonus_factor: int = DIFFICULTY_BONUS_FACTOR,
    random_factor: float = RANDOM_FACTOR,
) -> TurnResult:
    """Resolve one answer against the boss.

    HP values are read from `session`; `user` and `boss` supply attack and
    defense. The session is not modified. When the boss falls the result
    carries a RewardNotice for the caller to deliver.

    Raises:
        InvalidSessionStateError: the session is already finished.
    """
    if session.status != QuestStatus.ongoing:
        logger.warning(
            "Turn rejected for session %d in state %s", session.id, session.status.value
        )
        raise InvalidSessionStateError(session.id, session.status.value)

    user_hp = min(max(0, session.user_current_hp), user.max_hp)
    boss_hp = min(max(0, session.boss_current_hp), boss.max_hp)
    damage_dealt = 0
    damage_taken = 0

    if is_correct:
        damage_dealt = attack_damage(user, boss, answered_word.difficulty_tier, bonus_factor)
        boss_hp = max(0, boss_hp - damage_dealt)
    else:
        if rng is None:
            rng = random.Random()
        damage_taken = counter_damage(user, boss, rng, random_factor)
        user_hp = max(0, user_hp - damage_taken)

    # Boss defeat wins a simultaneous knockout.
    if boss_hp <= 0:
        status = QuestStatus.completed
    elif user_hp <= 0:
        status = QuestStatus.failed
    else:
        status = QuestStatus.ongoing

    reward = None
    if status == QuestStatus.completed:
        reward = RewardNotice(
            user_id=session.user_id, session_id=session.id, amount=reward_amount
        )

    return TurnResult(
        new_user_hp=user_hp,
        new_boss_hp=boss_hp,
        damage_dealt=damage_dealt,
        damage_taken=damage_taken,
        new_status=status,
        reward=reward,
    )


def apply_turn(session: QuestSession, result: TurnResult) -> QuestSession:
    """Return a copy of `session` carrying the outcome of `result`."""
    return session.model_copy(
        update={
            "user_current_hp": result.new_user_hp,
            "boss_current_hp": result.new_boss_hp,
            "status": result.new_status,
        }
    )
