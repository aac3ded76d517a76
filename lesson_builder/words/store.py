from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Iterable

from lesson_builder.config import GROUP_NAMES


class Activity(str, Enum):
    VOCABULARY = "vocabulary"
    SPELLING = "spelling"
    PHONICS = "phonics"


ACTIVITY_ORDER = {activity: index for index, activity in enumerate(Activity)}


def ordered_activities(activities: Iterable[Activity | str]) -> list[Activity]:
    unique = {Activity(item) for item in activities}
    return sorted(unique, key=ACTIVITY_ORDER.__getitem__)


def normalize_text(text: str) -> str:
    return text.strip().lower()


@dataclass
class Word:
    id: int
    text: str
    activities: frozenset[Activity]
    group: str

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "text": self.text,
            "activities": [item.value for item in ordered_activities(self.activities)],
            "group": self.group,
        }


class WordStore:
    """Canonical committed words, keyed by id and by normalized text.

    Iteration order is commit order. Ids are never reused within a store.
    """

    def __init__(self) -> None:
        self._words: dict[int, Word] = {}
        self._by_text: dict[str, int] = {}
        self._next_id = 1

    def add(self, text: str, activities: Iterable[Activity | str], group: str, *, word_id: int | None = None) -> Word:
        normalized = normalize_text(text)
        if not normalized:
            raise ValueError("word text is empty")
        if normalized in self._by_text:
            raise ValueError(f"word already in pool: {normalized}")
        activity_set = _require_activities(activities)
        _require_group(group)

        if word_id is None:
            word_id = self._next_id
        elif word_id in self._words:
            raise ValueError(f"word id already used: {word_id}")
        self._next_id = max(self._next_id, word_id + 1)

        word = Word(id=word_id, text=normalized, activities=activity_set, group=group)
        self._words[word_id] = word
        self._by_text[normalized] = word_id
        return word

    def get(self, word_id: int) -> Word | None:
        return self._words.get(word_id)

    def find_by_text(self, text: str) -> Word | None:
        word_id = self._by_text.get(normalize_text(text))
        return self._words.get(word_id) if word_id is not None else None

    def replace_activities(self, word_id: int, activities: Iterable[Activity | str]) -> Word:
        word = self._require(word_id)
        word.activities = _require_activities(activities)
        return word

    def reassign(self, word_id: int, group: str, activities: Iterable[Activity | str]) -> Word:
        word = self._require(word_id)
        _require_group(group)
        word.activities = _require_activities(activities)
        word.group = group
        return word

    def remove(self, word_id: int) -> Word | None:
        word = self._words.pop(word_id, None)
        if word is not None:
            self._by_text.pop(word.text, None)
        return word

    def members(self, group: str) -> list[Word]:
        return [word for word in self._words.values() if word.group == group]

    def all(self) -> list[Word]:
        return list(self._words.values())

    def clear(self) -> None:
        self._words.clear()
        self._by_text.clear()

    def _require(self, word_id: int) -> Word:
        word = self._words.get(word_id)
        if word is None:
            raise ValueError("word not found")
        return word


def _require_activities(activities: Iterable[Activity | str]) -> frozenset[Activity]:
    activity_set = frozenset(Activity(item) for item in activities)
    if not activity_set:
        raise ValueError("a committed word needs at least one activity")
    return activity_set


def _require_group(group: str) -> None:
    if group not in GROUP_NAMES:
        raise ValueError(f"unknown group: {group}")
