"""JSON file-based storage for words, quests, characters and answer history."""

from __future__ import annotations

import json
import logging
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Any, Iterable, Iterator

from vocab_quest.config import DATA_DIR
from vocab_quest.errors import NotFoundError
from vocab_quest.models import (
    AnswerRecord,
    Boss,
    QuestSession,
    QuestStatus,
    UserCharacter,
    Word,
)

logger = logging.getLogger(__name__)

# Shared business-English vocabulary: (text, meaning, tier)
SEED_WORDS: list[tuple[str, str, int]] = [
    ("arrive", "to reach a place", 1),
    ("office", "a room or building where people work", 1),
    ("meeting", "a gathering of people to discuss something", 1),
    ("product", "something made to be sold", 1),
    ("customer", "a person who buys goods or services", 2),
    ("invoice", "a bill listing goods supplied and their cost", 2),
    ("schedule", "a plan of times for events", 2),
    ("request", "an act of asking for something", 2),
    ("confirm", "to state that something is definitely true", 3),
    ("negotiate", "to discuss in order to reach an agreement", 3),
    ("implement", "to put a plan into effect", 3),
    ("evaluate", "to judge the value or quality of", 3),
    ("efficient", "working well without waste", 4),
    ("allocate", "to distribute for a particular purpose", 4),
    ("comprehensive", "including everything that is necessary", 4),
    ("facilitate", "to make an action easier", 4),
    ("contingency", "a possible future event that cannot be predicted", 5),
    ("mitigate", "to make less severe", 5),
    ("diligence", "careful and persistent effort", 5),
    ("scrutinize", "to examine closely and thoroughly", 5),
]


class GameStore:
    """JSON file-based storage, one file per collection.

    File IO is guarded by a single store lock. `locked()` additionally
    serializes read-modify-write cycles on one entity.
    """

    def __init__(
        self,
        directory: Path = DATA_DIR,
        bosses: Iterable[Boss] = (),
        seed: bool = True,
    ) -> None:
        self.directory = directory
        self.directory.mkdir(parents=True, exist_ok=True)
        self._io_lock = threading.RLock()
        # (kind, key) -> [lock, number of holders and waiters]
        self._entity_locks: dict[tuple[str, Any], list] = {}
        self._bosses = {b.id: b for b in bosses}
        if seed and not self._path("words").exists():
            self.seed_words()

    # --- plumbing ---

    def _path(self, collection: str) -> Path:
        return self.directory / f"{collection}.json"

    def _read(self, collection: str, default: Any) -> Any:
        path = self._path(collection)
        if not path.exists():
            return default
        return json.loads(path.read_text())

    def _write(self, collection: str, data: Any) -> None:
        path = self._path(collection)
        tmp = path.with_suffix(".tmp")
        tmp.write_text(json.dumps(data, indent=2, ensure_ascii=False))
        tmp.replace(path)

    @contextmanager
    def locked(self, kind: str, key: Any) -> Iterator[None]:
        """Hold the lock for one entity, e.g. ``locked("session", 3)``.

        An entry lives in `_entity_locks` only while some caller holds or
        waits for it.
        """
        with self._io_lock:
            entry = self._entity_locks.setdefault((kind, key), [threading.Lock(), 0])
            entry[1] += 1
        try:
            with entry[0]:
                yield
        finally:
            with self._io_lock:
                entry[1] -= 1
                if entry[1] == 0:
                    del self._entity_locks[(kind, key)]

    # --- words ---

    def seed_words(self) -> None:
        with self._io_lock:
            words = self._read("words", [])
            next_id = max((w["id"] for w in words), default=0) + 1
            for offset, (text, meaning, tier) in enumerate(SEED_WORDS):
                words.append(
                    Word(
                        id=next_id + offset,
                        text=text,
                        meaning=meaning,
                        difficulty_tier=tier,
                    ).model_dump()
                )
            self._write("words", words)
        logger.info("Seeded %d shared words", len(SEED_WORDS))

    def _all_words(self) -> list[Word]:
        return [Word(**w) for w in self._read("words", [])]

    def fetch_words(self, user_id: int) -> list[Word]:
        """Words owned by `user_id` plus all shared words."""
        with self._io_lock:
            return [
                w for w in self._all_words()
                if w.owner_id is None or w.owner_id == user_id
            ]

    def fetch_words_by_ids(self, ids: Iterable[int]) -> list[Word]:
        wanted = set(ids)
        with self._io_lock:
            return [w for w in self._all_words() if w.id in wanted]

    def load_word(self, word_id: int) -> Word:
        found = self.fetch_words_by_ids([word_id])
        if not found:
            raise NotFoundError(f"Word not found: {word_id}")
        return found[0]

    def add_word(
        self, text: str, meaning: str, owner_id: int | None, difficulty_tier: int = 1
    ) -> Word:
        with self._io_lock:
            words = self._read("words", [])
            word = Word(
                id=max((w["id"] for w in words), default=0) + 1,
                text=text,
                meaning=meaning,
                difficulty_tier=difficulty_tier,
                owner_id=owner_id,
            )
            words.append(word.model_dump())
            self._write("words", words)
        return word

    def save_words(self, updated: Iterable[Word]) -> None:
        by_id = {w.id: w for w in updated}
        with self._io_lock:
            words = self._read("words", [])
            for i, raw in enumerate(words):
                if raw["id"] in by_id:
                    words[i] = by_id[raw["id"]].model_dump()
            self._write("words", words)

    def delete_word(self, word_id: int, user_id: int) -> None:
        """Delete a word owned by `user_id`."""
        with self._io_lock:
            words = self._read("words", [])
            target = next((w for w in words if w["id"] == word_id), None)
            if target is None:
                raise NotFoundError(f"Word not found: {word_id}")
            if target.get("owner_id") != user_id:
                raise PermissionError(f"Word {word_id} is not owned by user {user_id}")
            self._write("words", [w for w in words if w["id"] != word_id])

    # --- bosses ---

    def load_boss(self, boss_id: int) -> Boss:
        try:
            return self._bosses[boss_id]
        except KeyError:
            raise NotFoundError(f"Boss not found: {boss_id}") from None

    def first_boss(self) -> Boss:
        if not self._bosses:
            raise NotFoundError("No boss is configured")
        return self._bosses[min(self._bosses)]

    # --- quest sessions ---

    def create_session(
        self, user_id: int, boss_id: int, user_hp: int, boss_hp: int
    ) -> QuestSession:
        """Insert a new ongoing session under the next free id."""
        with self._io_lock:
            sessions = self._read("sessions", {})
            session = QuestSession(
                id=max((int(k) for k in sessions), default=0) + 1,
                user_id=user_id,
                boss_id=boss_id,
                user_current_hp=user_hp,
                boss_current_hp=boss_hp,
            )
            sessions[str(session.id)] = session.model_dump(mode="json")
            self._write("sessions", sessions)
        return session

    def load_session(self, session_id: int) -> QuestSession:
        with self._io_lock:
            raw = self._read("sessions", {}).get(str(session_id))
        if raw is None:
            raise NotFoundError(f"Quest session not found: {session_id}")
        return QuestSession(**raw)

    def save_session(self, session: QuestSession) -> QuestSession:
        with self._io_lock:
            sessions = self._read("sessions", {})
            sessions[str(session.id)] = session.model_dump(mode="json")
            self._write("sessions", sessions)
        return session

    def find_ongoing_session(self, user_id: int, boss_id: int) -> QuestSession | None:
        """Most recently started ongoing session for the user/boss pair."""
        with self._io_lock:
            candidates = [
                QuestSession(**raw) for raw in self._read("sessions", {}).values()
            ]
        ongoing = [
            s for s in candidates
            if s.user_id == user_id
            and s.boss_id == boss_id
            and s.status == QuestStatus.ongoing
        ]
        return max(ongoing, key=lambda s: s.started_at, default=None)

    # --- characters ---

    def load_character(self, user_id: int) -> UserCharacter:
        """Load a character, creating a level 1 one on first use."""
        with self._io_lock:
            raw = self._read("characters", {}).get(str(user_id))
        if raw is None:
            logger.info("Creating default character for user %d", user_id)
            return self.save_character(UserCharacter(user_id=user_id))
        return UserCharacter(**raw)

    def save_character(self, character: UserCharacter) -> UserCharacter:
        with self._io_lock:
            characters = self._read("characters", {})
            characters[str(character.user_id)] = character.model_dump()
            self._write("characters", characters)
        return character

    def list_characters(self) -> list[UserCharacter]:
        with self._io_lock:
            return [UserCharacter(**raw) for raw in self._read("characters", {}).values()]

    # --- answer history ---

    def append_answer(self, record: AnswerRecord) -> AnswerRecord:
        path = self.directory / "answers.jsonl"
        with self._io_lock, path.open("a", encoding="utf-8") as f:
            f.write(record.model_dump_json() + "\n")
        return record

    def answers_for(
        self, user_id: int, word_ids: Iterable[int] | None = None
    ) -> list[AnswerRecord]:
        path = self.directory / "answers.jsonl"
        wanted = set(word_ids) if word_ids is not None else None
        records = []
        with self._io_lock:
            if not path.exists():
                return []
            lines = path.read_text(encoding="utf-8").splitlines()
        for line in lines:
            if not line.strip():
                continue
            rec = AnswerRecord.model_validate_json(line)
            if rec.user_id != user_id:
                continue
            if wanted is not None and rec.word_id not in wanted:
                continue
            records.append(rec)
        return records

    # --- currency ---

    def grant_currency(self, user_id: int, amount: int) -> int:
        """Add `amount` to the user's balance and return the new balance."""
        with self._io_lock:
            wallet = self._read("wallet", {})
            balance = wallet.get(str(user_id), 0) + amount
            wallet[str(user_id)] = balance
            self._write("wallet", wallet)
        return balance

    def currency_balance(self, user_id: int) -> int:
        with self._io_lock:
            return self._read("wallet", {}).get(str(user_id), 0)
