"""Game settings and static tables, loaded once at process start.

Defaults can be overridden by a JSON file named in VOCAB_QUEST_CONFIG and
then by the individual VOCAB_QUEST_* environment variables.
"""

from __future__ import annotations

import json
import logging
import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator

from vocab_quest.models import Boss, LevelStatus
from vocab_quest.progression import validate_level_table

logger = logging.getLogger(__name__)

# Default store directory (override with VOCAB_QUEST_DATA env var)
DATA_DIR = Path(
    os.environ.get("VOCAB_QUEST_DATA", Path(__file__).parent.parent.parent / "data")
)

DEFAULT_EXPERIENCE_TABLE = {1: 10, 2: 20, 3: 30, 4: 40, 5: 50}

_SKILLS = {2: "Focus Up", 3: "Rapid Repeat", 4: "Bonus Experience"}


def _default_level_table() -> list[LevelStatus]:
    rows = []
    for level in range(1, 11):
        rows.append(
            LevelStatus(
                level=level,
                required_experience=(level - 1) * 200,
                attack_power=5 + level * 5,
                defense_power=level * 5,
                hp=90 + level * 10,
                character_image=f"char_lvl{min(level, 5)}.png",
                skill_unlocked=_SKILLS.get(level),
            )
        )
    return rows


def _default_bosses() -> list[Boss]:
    return [
        Boss(
            id=1,
            name="Gentle Slime",
            initial_hp=100,  # about ten correct answers
            attack=5,
            defense=2,
            image_url="boss_slime.png",
        )
    ]


class GameSettings(BaseModel):
    """Read-only game configuration."""

    model_config = ConfigDict(frozen=True)

    quiz_size: int = Field(default=5, ge=1)
    quest_reward: int = Field(default=50, ge=0)  # currency per won quest
    difficulty_bonus_factor: int = 5
    random_factor: float = Field(default=0.2, ge=0, lt=1)
    ranking_size: int = 10
    experience_table: dict[int, int] = Field(
        default_factory=lambda: dict(DEFAULT_EXPERIENCE_TABLE)
    )
    level_table: list[LevelStatus] = Field(default_factory=_default_level_table)
    bosses: list[Boss] = Field(default_factory=_default_bosses)

    @field_validator("level_table")
    @classmethod
    def _check_levels(cls, v: list[LevelStatus]) -> list[LevelStatus]:
        validate_level_table(v)
        return sorted(v, key=lambda r: r.level)


_ENV_OVERRIDES = {
    "VOCAB_QUEST_QUIZ_SIZE": "quiz_size",
    "VOCAB_QUEST_REWARD": "quest_reward",
}


def load_settings(path: str | Path | None = None) -> GameSettings:
    """Build settings from defaults, an optional JSON file, then env vars."""
    data: dict = {}
    if path is None:
        path = os.environ.get("VOCAB_QUEST_CONFIG")
    if path:
        config_path = Path(path)
        if not config_path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
        data = json.loads(config_path.read_text())
        logger.info("Loaded game settings from %s", config_path)

    for env_name, key in _ENV_OVERRIDES.items():
        value = os.environ.get(env_name)
        if value:
            data[key] = int(value)

    return GameSettings(**data)
