"""Shared fixtures. The API module builds its store at import, so the data
directory is pointed at a scratch location before any test module loads."""

import os
import random
import tempfile

import pytest

os.environ["VOCAB_QUEST_DATA"] = tempfile.mkdtemp(prefix="vocab-quest-")
os.environ.pop("API_KEY", None)
os.environ.pop("VOCAB_QUEST_CONFIG", None)

from vocab_quest.models import Word  # noqa: E402


def make_pool(n: int, start: int = 1) -> list[Word]:
    return [
        Word(
            id=i,
            text=f"word{i}",
            meaning=f"meaning of word{i}",
            difficulty_tier=(i % 5) + 1,
        )
        for i in range(start, start + n)
    ]


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def pool():
    return make_pool(8)
