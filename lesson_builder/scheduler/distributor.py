from __future__ import annotations

import logging
import math
from dataclasses import dataclass, field
from typing import Sequence

from lesson_builder.config import DEFAULT_POLICY, SchedulePolicy

logger = logging.getLogger(__name__)


class ScheduleInvariantError(RuntimeError):
    """A computed schedule broke one of its own invariants."""


@dataclass
class DayPlan:
    day: int
    new_word_ids: list[int] = field(default_factory=list)
    review_word_ids: list[int] = field(default_factory=list)

    def to_dict(self) -> dict:
        return {
            "day": self.day,
            "new_word_ids": list(self.new_word_ids),
            "review_word_ids": list(self.review_word_ids),
        }


@dataclass
class DaySchedule:
    days: list[DayPlan]

    @property
    def day_count(self) -> int:
        return len(self.days)

    def plan(self, day: int) -> DayPlan:
        return self.days[day - 1]

    def introduction_day(self, word_id: int) -> int | None:
        for plan in self.days:
            if word_id in plan.new_word_ids:
                return plan.day
        return None

    def word_ids(self) -> list[int]:
        return [word_id for plan in self.days for word_id in plan.new_word_ids]

    def new_counts(self) -> list[int]:
        return [len(plan.new_word_ids) for plan in self.days]

    def copy(self) -> "DaySchedule":
        return DaySchedule(
            days=[DayPlan(plan.day, list(plan.new_word_ids), list(plan.review_word_ids)) for plan in self.days]
        )

    def to_dict(self) -> dict:
        return {"days": [plan.to_dict() for plan in self.days]}


def round_half_up(value: float) -> int:
    return int(math.floor(value + 0.5))


def distribute(word_count: int, day_count: int, *, policy: SchedulePolicy = DEFAULT_POLICY) -> list[int]:
    """Number of new words introduced on each lesson day.

    Day 1 takes the front-loaded share, the middle days share the rest with
    exponentially decaying weights, and the last day (when there is more than
    one) introduces nothing so it can be spent on review.
    """
    if word_count < 1:
        raise ValueError("word count must be at least 1")
    if not policy.min_days <= day_count <= policy.max_days:
        raise ValueError(f"day count must be between {policy.min_days} and {policy.max_days}")

    if day_count <= 2:
        counts = [word_count] + [0] * (day_count - 1)
        _check_counts(counts, word_count)
        return counts

    first_day = min(word_count, max(1, round_half_up(policy.front_load_ratio * word_count)))
    remaining = word_count - first_day
    middle = _spread_with_decay(remaining, day_count - 2, policy.decay)

    counts = [first_day] + middle + [0]
    _check_counts(counts, word_count)
    return counts


def _spread_with_decay(remaining: int, middle_days: int, decay: float) -> list[int]:
    weights = [decay ** k for k in range(middle_days)]
    total_weight = sum(weights)
    counts = [round_half_up(remaining * weight / total_weight) for weight in weights]

    # Rounding drift lands on the last middle day; a deficit that would push it
    # below zero spills back onto earlier middle days.
    counts[-1] += remaining - sum(counts)
    index = len(counts) - 1
    while index > 0 and counts[index] < 0:
        counts[index - 1] += counts[index]
        counts[index] = 0
        index -= 1
    return counts


def _check_counts(counts: Sequence[int], word_count: int) -> None:
    if any(count < 0 for count in counts):
        logger.error("distribution produced a negative count: %s", list(counts))
        raise ScheduleInvariantError(f"negative new-word count in {list(counts)}")
    if sum(counts) != word_count:
        logger.error("distribution lost words: %s for %d words", list(counts), word_count)
        raise ScheduleInvariantError(f"distribution {list(counts)} does not sum to {word_count}")
    if len(counts) > 1 and counts[-1] != 0:
        logger.error("distribution introduces words on the final day: %s", list(counts))
        raise ScheduleInvariantError("final day must not introduce new words")


def build_schedule(
    word_ids: Sequence[int],
    day_count: int,
    *,
    policy: SchedulePolicy = DEFAULT_POLICY,
) -> DaySchedule:
    """Assign pool words, in pool order, to introduction days and add reviews."""
    ids = list(dict.fromkeys(word_ids))
    if len(ids) != len(word_ids):
        raise ValueError("word ids must be unique")
    counts = distribute(len(ids), day_count, policy=policy)

    days: list[DayPlan] = []
    cursor = 0
    for index, count in enumerate(counts, start=1):
        days.append(DayPlan(day=index, new_word_ids=ids[cursor : cursor + count]))
        cursor += count

    schedule = rebuild_review_closure(DaySchedule(days=days))
    validate_schedule(schedule)
    return schedule


def rebuild_review_closure(schedule: DaySchedule) -> DaySchedule:
    introduced: list[int] = []
    for plan in schedule.days:
        plan.review_word_ids = list(introduced)
        introduced.extend(plan.new_word_ids)
    return schedule


def validate_schedule(schedule: DaySchedule) -> None:
    intro_day: dict[int, int] = {}
    for plan in schedule.days:
        for word_id in plan.new_word_ids:
            if word_id in intro_day:
                _fail(f"word {word_id} is introduced on day {intro_day[word_id]} and day {plan.day}")
            intro_day[word_id] = plan.day

    for index, plan in enumerate(schedule.days, start=1):
        if plan.day != index:
            _fail(f"day {plan.day} is out of order at position {index}")
        reviews = set(plan.review_word_ids)
        if len(reviews) != len(plan.review_word_ids):
            _fail(f"day {plan.day} repeats a review word")
        for word_id in reviews:
            introduced_on = intro_day.get(word_id)
            if introduced_on is None:
                _fail(f"day {plan.day} reviews word {word_id} that is never introduced")
            if introduced_on >= plan.day:
                _fail(f"day {plan.day} reviews word {word_id} introduced on day {introduced_on}")
        expected = {word_id for word_id, day in intro_day.items() if day < plan.day}
        if reviews != expected:
            _fail(f"day {plan.day} review set is incomplete")

    if schedule.day_count > 1 and schedule.days[-1].new_word_ids:
        _fail("final day must not introduce new words")


def _fail(message: str) -> None:
    logger.error("schedule invariant violated: %s", message)
    raise ScheduleInvariantError(message)
