from __future__ import annotations

import logging

from lesson_builder.api.schemas import DayRecord, GroupRecord, LessonRecord, WordRecord
from lesson_builder.chips.engine import ChipAssignmentEngine
from lesson_builder.config import GROUP_NAMES, SchedulePolicy, default_toggles
from lesson_builder.groups.registry import ActivityGroupRegistry, ToggleState
from lesson_builder.scheduler.adjuster import MoveResult, move_word
from lesson_builder.scheduler.distributor import (
    DayPlan,
    DaySchedule,
    ScheduleInvariantError,
    build_schedule,
    distribute,
    validate_schedule,
)
from lesson_builder.words.store import Activity, WordStore

logger = logging.getLogger(__name__)


class LessonController:
    """Owns the group toggles, the word pool and the day schedule of one lesson.

    Every mutation goes through this object (or the registry and chip engine
    it owns), one call at a time. The schedule is dropped as soon as the set of
    pooled words no longer matches it.
    """

    def __init__(self, policy: SchedulePolicy | None = None) -> None:
        self.policy = policy or SchedulePolicy.from_env()
        self.registry = ActivityGroupRegistry()
        self.chips = ChipAssignmentEngine(self.registry)
        self.schedule: DaySchedule | None = None
        self.chips.on_change(self._on_pool_change)

    def distribute(self, word_count: int, day_count: int) -> list[int]:
        return distribute(word_count, day_count, policy=self.policy)

    def build_schedule(self, day_count: int) -> DaySchedule:
        word_ids = [word.id for word in self.chips.store.all()]
        if not word_ids:
            raise ValueError("add words to the lesson before scheduling it")
        self.schedule = build_schedule(word_ids, day_count, policy=self.policy)
        logger.info("built %d-day schedule for %d words: %s", day_count, len(word_ids), self.schedule.new_counts())
        return self.schedule

    def move_scheduled_word(self, word_id: int, from_day: int, to_day: int) -> MoveResult:
        if self.schedule is None:
            raise ValueError("no schedule has been built for this lesson")
        result = move_word(word_id, from_day, to_day, self.schedule)
        if result.accepted:
            self.schedule = result.schedule
        return result

    def to_record(self) -> LessonRecord:
        return LessonRecord(
            words=[WordRecord(**word.to_dict()) for word in self.chips.store.all()],
            groups=[
                GroupRecord(name=group, **state.to_dict()) for group, state in self.registry.states().items()
            ],
            schedule=(
                [DayRecord(**plan.to_dict()) for plan in self.schedule.days] if self.schedule is not None else None
            ),
        )

    def restore(self, record: LessonRecord) -> None:
        """Replace the whole lesson with a saved record.

        Toggle states, word activities and the saved schedule are checked
        before anything is cleared, so a bad record leaves the current lesson
        untouched. Groups missing from the record get their default toggles,
        and every word must carry exactly its group's enabled activities.
        """
        states: dict[str, ToggleState] = {}
        for group in record.groups:
            if group.name not in GROUP_NAMES:
                raise ValueError(f"unknown group: {group.name}")
            state = ToggleState(vocabulary=group.vocabulary, spelling=group.spelling, phonics=group.phonics)
            if not state.any_enabled():
                raise ValueError(f"group {group.name} has no enabled activity")
            states[group.name] = state

        effective = {name: states.get(name, ToggleState.from_dict(default_toggles(name))) for name in GROUP_NAMES}
        store = WordStore()
        for word in record.words:
            if word.group not in effective:
                raise ValueError(f"unknown group: {word.group}")
            try:
                activities = {Activity(item) for item in word.activities}
            except ValueError as exc:
                raise ValueError(f"word {word.text} has an unknown activity") from exc
            if activities != set(effective[word.group].enabled()):
                raise ValueError(f"word {word.text} does not carry the enabled activities of group {word.group}")
            store.add(word.text, word.activities, word.group, word_id=word.id)

        schedule: DaySchedule | None = None
        if record.schedule is not None:
            schedule = DaySchedule(
                days=[DayPlan(day.day, list(day.new_word_ids), list(day.review_word_ids)) for day in record.schedule]
            )
            if not self.policy.min_days <= schedule.day_count <= self.policy.max_days:
                raise ValueError(
                    f"saved schedule has {schedule.day_count} days, expected {self.policy.min_days}..{self.policy.max_days}"
                )
            validate_schedule(schedule)
            if set(schedule.word_ids()) != {word.id for word in record.words}:
                raise ScheduleInvariantError("saved schedule does not cover exactly the saved words")

        self.chips.clear_all()
        self.schedule = None
        self.registry.reset()
        for name, state in states.items():
            self.registry.replace_state(name, state)
        self.chips.load_store(store)
        self.schedule = schedule
        logger.info("restored lesson with %d words", len(record.words))

    def _on_pool_change(self, pool: list[dict]) -> None:
        if self.schedule is None:
            return
        pooled = {entry["id"] for entry in pool}
        if pooled != set(self.schedule.word_ids()):
            logger.info("word pool changed, discarding %d-day schedule", self.schedule.day_count)
            self.schedule = None
