"""Tests for game settings loading."""

import json

import pytest
from pydantic import ValidationError

from vocab_quest.config import GameSettings, load_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in ("VOCAB_QUEST_CONFIG", "VOCAB_QUEST_QUIZ_SIZE", "VOCAB_QUEST_REWARD"):
        monkeypatch.delenv(name, raising=False)


class TestDefaults:
    def test_defaults(self):
        s = load_settings()
        assert s.quiz_size == 5
        assert s.quest_reward == 50
        assert s.difficulty_bonus_factor == 5
        assert s.random_factor == 0.2
        assert s.experience_table == {1: 10, 2: 20, 3: 30, 4: 40, 5: 50}

    def test_level_table(self):
        table = GameSettings().level_table
        assert len(table) == 10
        first, last = table[0], table[-1]
        assert (first.level, first.required_experience, first.hp) == (1, 0, 100)
        assert (first.attack_power, first.defense_power) == (10, 5)
        assert (last.level, last.required_experience, last.hp) == (10, 1800, 190)
        assert (last.attack_power, last.defense_power) == (55, 50)
        assert table[1].skill_unlocked == "Focus Up"

    def test_starter_boss(self):
        boss = GameSettings().bosses[0]
        assert (boss.initial_hp, boss.attack, boss.defense) == (100, 5, 2)

    def test_frozen(self):
        s = GameSettings()
        with pytest.raises(ValidationError):
            s.quiz_size = 9


class TestOverrides:
    def test_json_file(self, tmp_path):
        path = tmp_path / "game.json"
        path.write_text(json.dumps({"quiz_size": 3, "experience_table": {"1": 5, "2": 7}}))
        s = load_settings(path)
        assert s.quiz_size == 3
        assert s.experience_table == {1: 5, 2: 7}

    def test_env_path_and_vars(self, tmp_path, monkeypatch):
        path = tmp_path / "game.json"
        path.write_text(json.dumps({"quest_reward": 10}))
        monkeypatch.setenv("VOCAB_QUEST_CONFIG", str(path))
        monkeypatch.setenv("VOCAB_QUEST_QUIZ_SIZE", "7")
        s = load_settings()
        assert s.quest_reward == 10
        assert s.quiz_size == 7

    def test_missing_file(self, tmp_path):
        with pytest.raises(FileNotFoundError):
            load_settings(tmp_path / "nope.json")

    def test_bad_level_table(self):
        rows = [
            {"level": 1, "required_experience": 0, "attack_power": 1, "defense_power": 1, "hp": 10},
            {"level": 2, "required_experience": 0, "attack_power": 2, "defense_power": 2, "hp": 20},
        ]
        with pytest.raises(ValidationError):
            GameSettings(level_table=rows)

    def test_zero_hp_boss(self):
        boss = {"id": 1, "name": "Husk", "initial_hp": 0, "attack": 1, "defense": 1}
        with pytest.raises(ValidationError):
            GameSettings(bosses=[boss])

    def test_zero_hp_level(self):
        rows = [{"level": 1, "required_experience": 0, "attack_power": 1, "defense_power": 1, "hp": 0}]
        with pytest.raises(ValidationError):
            GameSettings(level_table=rows)
