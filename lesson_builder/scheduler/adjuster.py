from __future__ import annotations

import logging
from dataclasses import dataclass

from lesson_builder.config import FINAL_DAY_REASON
from lesson_builder.scheduler.distributor import DaySchedule, rebuild_review_closure, validate_schedule

logger = logging.getLogger(__name__)


@dataclass
class MoveResult:
    accepted: bool
    schedule: DaySchedule
    reason: str | None = None

    def to_dict(self) -> dict:
        return {
            "accepted": self.accepted,
            "schedule": self.schedule.to_dict(),
            "reason": self.reason,
        }


def move_word(word_id: int, from_day: int, to_day: int, schedule: DaySchedule) -> MoveResult:
    """Change the introduction day of one word.

    The input schedule is never mutated; an accepted move returns a new
    schedule whose review lists are rebuilt for every day.
    """
    day_count = schedule.day_count
    if not 1 <= from_day <= day_count or word_id not in schedule.plan(from_day).new_word_ids:
        return MoveResult(accepted=False, schedule=schedule)
    if from_day == to_day:
        return MoveResult(accepted=True, schedule=schedule)
    if not 1 <= to_day <= day_count:
        reason = f"Day {to_day} is not part of this {day_count}-day lesson."
        logger.info("rejected move of word %s: %s", word_id, reason)
        return MoveResult(accepted=False, schedule=schedule, reason=reason)
    if day_count > 1 and to_day == day_count:
        logger.info("rejected move of word %s to final day %s", word_id, to_day)
        return MoveResult(accepted=False, schedule=schedule, reason=FINAL_DAY_REASON)

    updated = schedule.copy()
    updated.plan(from_day).new_word_ids.remove(word_id)
    updated.plan(to_day).new_word_ids.append(word_id)
    rebuild_review_closure(updated)
    validate_schedule(updated)
    logger.info("moved word %s from day %s to day %s", word_id, from_day, to_day)
    return MoveResult(accepted=True, schedule=updated)
