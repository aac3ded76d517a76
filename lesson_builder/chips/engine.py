from __future__ import annotations

import logging
from typing import Callable

from lesson_builder.config import CHANNELS, DEFAULT_FILE_GROUP, FILE_GROUPS, GROUP_NAMES
from lesson_builder.groups.registry import ActivityGroupRegistry, ToggleState
from lesson_builder.pipeline.extraction import extract_text_from_bytes, parse_words
from lesson_builder.words.store import Word, WordStore

logger = logging.getLogger(__name__)

ChangeHandler = Callable[[list[dict]], None]


class StagingBuffer:
    """Tokens typed or uploaded for one group that are not yet in the lesson."""

    def __init__(self) -> None:
        self._tokens: list[str] = []

    def extend(self, tokens: list[str]) -> list[str]:
        added: list[str] = []
        for token in tokens:
            if token in self._tokens:
                continue
            self._tokens.append(token)
            added.append(token)
        return added

    def __contains__(self, token: str) -> bool:
        return token in self._tokens

    def remove(self, token: str) -> bool:
        try:
            self._tokens.remove(token)
        except ValueError:
            return False
        return True

    def drain(self) -> list[str]:
        tokens, self._tokens = self._tokens, []
        return tokens

    def tokens(self) -> list[str]:
        return list(self._tokens)


class ChipAssignmentEngine:
    def __init__(self, registry: ActivityGroupRegistry, store: WordStore | None = None) -> None:
        self.registry = registry
        self.store = store if store is not None else WordStore()
        self._staging: dict[str, StagingBuffer] = {group: StagingBuffer() for group in GROUP_NAMES}
        self._handlers: list[ChangeHandler] = []
        registry.subscribe(self._apply_group_toggles)

    def on_change(self, handler: ChangeHandler) -> None:
        self._handlers.append(handler)

    # Staging

    def stage(self, group: str, raw_text: str) -> list[str]:
        buffer = self._buffer(group)
        added = buffer.extend(parse_words(raw_text))
        if added:
            logger.info("staged %d token(s) in %s", len(added), group)
        return buffer.tokens()

    def stage_file(self, filename: str, payload: bytes, group: str = DEFAULT_FILE_GROUP) -> list[str]:
        if group not in FILE_GROUPS:
            raise ValueError(f"file uploads can only be staged into {', '.join(FILE_GROUPS)}")
        text = extract_text_from_bytes(filename, payload)
        return self.stage(group, text)

    def unstage(self, group: str, token: str) -> bool:
        buffer = self._buffer(group)
        tokens = parse_words(token)
        return len(tokens) == 1 and buffer.remove(tokens[0])

    def move_staged(self, token: str, source_group: str, target_group: str) -> bool:
        """Route an uploaded token to another file group before it is committed.

        The token leaves the source buffer and joins the target one unless it is
        already staged there.
        """
        for group in (source_group, target_group):
            if group not in FILE_GROUPS:
                raise ValueError(f"staged tokens can only move between {', '.join(FILE_GROUPS)}")
        tokens = parse_words(token)
        source = self._buffer(source_group)
        if len(tokens) != 1 or tokens[0] not in source:
            return False
        if source_group == target_group:
            return True
        source.remove(tokens[0])
        self._buffer(target_group).extend(tokens)
        logger.info("moved staged token %s from %s to %s", tokens[0], source_group, target_group)
        return True

    def staged(self, group: str) -> list[str]:
        return self._buffer(group).tokens()

    # Commit

    def commit(self, group: str) -> list[Word]:
        buffer = self._buffer(group)
        activities = self.registry.get(group).enabled()
        created: list[Word] = []
        skipped = 0
        for token in buffer.drain():
            if self.store.find_by_text(token) is not None:
                skipped += 1
                continue
            created.append(self.store.add(token, activities, group))

        if created or skipped:
            logger.info("committed %d word(s) to %s, skipped %d already in pool", len(created), group, skipped)
        if created:
            self._notify()
        return created

    def commit_channel(self, channel: str) -> list[Word]:
        groups = CHANNELS.get(channel)
        if groups is None:
            raise ValueError(f"unknown channel: {channel}")
        created: list[Word] = []
        for group in groups:
            created.extend(self.commit(group))
        return created

    # Committed words

    def move(self, word_id: int, target_group: str) -> Word | None:
        activities = self.registry.get(target_group).enabled()
        word = self.store.get(word_id)
        if word is None:
            return None
        source_group = word.group
        self.store.reassign(word_id, target_group, activities)
        logger.info("moved word %s from %s to %s", word.text, source_group, target_group)
        self._notify()
        return word

    def delete(self, word_id: int) -> bool:
        word = self.store.remove(word_id)
        if word is None:
            return False
        logger.info("deleted word %s from %s", word.text, word.group)
        self._notify()
        return True

    def members(self, group: str) -> list[Word]:
        if group not in GROUP_NAMES:
            raise ValueError(f"unknown group: {group}")
        return self.store.members(group)

    def get_pool(self) -> list[dict]:
        return [word.to_dict() for word in self.store.all()]

    def clear_all(self) -> None:
        self.store.clear()
        for buffer in self._staging.values():
            buffer.drain()
        logger.info("cleared all words and staging buffers")
        self._notify()

    def load_store(self, store: WordStore) -> None:
        self.store = store
        for buffer in self._staging.values():
            buffer.drain()
        logger.info("loaded %d word(s) into the pool", len(store.all()))
        self._notify()

    def _apply_group_toggles(self, group: str, state: ToggleState) -> None:
        members = self.store.members(group)
        if not members:
            return
        activities = state.enabled()
        for word in members:
            self.store.replace_activities(word.id, activities)
        self._notify()

    def _buffer(self, group: str) -> StagingBuffer:
        buffer = self._staging.get(group)
        if buffer is None:
            raise ValueError(f"unknown group: {group}")
        return buffer

    def _notify(self) -> None:
        pool = self.get_pool()
        for handler in self._handlers:
            handler(pool)
