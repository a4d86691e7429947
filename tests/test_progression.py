"""Tests for experience and level progression."""

import pytest

from vocab_quest.errors import UnknownDifficultyTierError
from vocab_quest.models import LevelStatus, UserCharacter
from vocab_quest.progression import (
    apply_correct_answers,
    experience_for,
    stats_for_level,
    validate_level_table,
)

EXP_TABLE = {1: 10, 2: 20, 3: 30, 4: 40, 5: 50}


@pytest.fixture
def level_table():
    return [
        LevelStatus(level=1, required_experience=0, attack_power=10, defense_power=5, hp=100,
                    character_image="lv1.png"),
        LevelStatus(level=2, required_experience=100, attack_power=15, defense_power=10, hp=110,
                    character_image="lv2.png", skill_unlocked="Focus Up"),
        LevelStatus(level=3, required_experience=250, attack_power=20, defense_power=15, hp=120,
                    character_image="lv3.png", skill_unlocked="Rapid Repeat"),
    ]


class TestExperience:
    def test_duplicates_count(self):
        assert experience_for([1, 1, 2], {1: 10, 2: 20}) == 40

    def test_empty(self):
        assert experience_for([], EXP_TABLE) == 0

    def test_unknown_tier(self):
        with pytest.raises(UnknownDifficultyTierError) as exc:
            experience_for([1, 9], EXP_TABLE)
        assert exc.value.tier == 9


class TestApplyCorrectAnswers:
    def test_total_gained(self, level_table):
        result = apply_correct_answers(
            UserCharacter(user_id=1), [1, 1, 2], {1: 10, 2: 20}, level_table
        )
        assert result.total_experience_gained == 40
        assert result.new_experience == 40
        assert not result.leveled_up
        assert result.new_level == 1
        assert result.new_character_image == "lv1.png"

    def test_multi_level_jump(self, level_table):
        result = apply_correct_answers(
            UserCharacter(user_id=1), [5, 5, 5, 5, 5, 5], EXP_TABLE, level_table
        )
        assert result.total_experience_gained == 300
        assert result.leveled_up
        assert result.new_level == 3
        assert result.new_character_image == "lv3.png"
        assert result.skills_unlocked == ["Focus Up", "Rapid Repeat"]

    def test_exact_threshold(self, level_table):
        character = UserCharacter(user_id=1, experience=90)
        result = apply_correct_answers(character, [1], EXP_TABLE, level_table)
        assert result.new_level == 2
        assert result.new_experience == 100

    def test_accumulates_existing_experience(self, level_table):
        character = UserCharacter(user_id=1, level=2, experience=200)
        result = apply_correct_answers(character, [3], EXP_TABLE, level_table)
        assert result.new_experience == 230
        assert result.new_level == 2
        assert result.new_character_image == "lv2.png"

    def test_top_level(self, level_table):
        character = UserCharacter(user_id=1, level=3, experience=900)
        result = apply_correct_answers(character, [5], EXP_TABLE, level_table)
        assert result.new_level == 3
        assert not result.leveled_up

    def test_unknown_tier_aborts(self, level_table):
        with pytest.raises(UnknownDifficultyTierError):
            apply_correct_answers(UserCharacter(user_id=1), [0], EXP_TABLE, level_table)

    def test_character_not_mutated(self, level_table):
        character = UserCharacter(user_id=1)
        apply_correct_answers(character, [5] * 10, EXP_TABLE, level_table)
        assert character.level == 1
        assert character.experience == 0


class TestLevelTable:
    def test_stats_for_level(self, level_table):
        stats = stats_for_level(level_table, 2)
        assert stats.max_hp == 110
        assert stats.current_hp == 110
        assert stats.attack_power == 15
        assert stats.defense_power == 10

    def test_stats_defaults_for_missing_level(self, level_table):
        stats = stats_for_level(level_table, 99, current_hp=30)
        assert (stats.max_hp, stats.attack_power, stats.defense_power) == (100, 10, 5)
        assert stats.current_hp == 30

    def test_valid_table(self, level_table):
        validate_level_table(level_table)

    def test_non_increasing_requirement(self, level_table):
        level_table[2] = level_table[2].model_copy(update={"required_experience": 100})
        with pytest.raises(ValueError, match="requires 100"):
            validate_level_table(level_table)
