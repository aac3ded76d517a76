from __future__ import annotations

import os
from dataclasses import dataclass

ACTIVITIES = ("vocabulary", "spelling", "phonics")

MANUAL_GROUPS = ("vocabulary", "spelling", "phonics")
FILE_GROUPS = ("file-vocabulary", "file-spelling", "file-phonics")
GROUP_NAMES = MANUAL_GROUPS + FILE_GROUPS

CHANNELS = {
    "manual": MANUAL_GROUPS,
    "file": FILE_GROUPS,
}

DEFAULT_FILE_GROUP = "file-vocabulary"
ALLOWED_UPLOAD_SUFFIXES = {".txt", ".csv"}

TOGGLE_ALL_OFF_REASON = "At least one activity must stay enabled for each word group."
FINAL_DAY_REASON = "The last day of a lesson is for review only; new words cannot be introduced on it."


def default_toggles(group: str) -> dict[str, bool]:
    own = group.removeprefix("file-")
    return {activity: activity == own for activity in ACTIVITIES}


@dataclass(frozen=True)
class SchedulePolicy:
    front_load_ratio: float = 0.4
    decay: float = 0.6
    min_days: int = 1
    max_days: int = 10

    @classmethod
    def from_env(cls) -> "SchedulePolicy":
        defaults = cls()
        return cls(
            front_load_ratio=_env_float("LESSON_FRONT_LOAD_RATIO", defaults.front_load_ratio, low=0.0, high=1.0),
            decay=_env_float("LESSON_DECAY", defaults.decay, low=0.01, high=1.0),
            min_days=defaults.min_days,
            max_days=_env_int("LESSON_MAX_DAYS", defaults.max_days, low=defaults.min_days, high=31),
        )


def _env_float(name: str, default: float, *, low: float, high: float) -> float:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = float(raw)
    except ValueError:
        return default
    if not low <= value <= high:
        return default
    return value


def _env_int(name: str, default: int, *, low: int, high: int) -> int:
    raw = os.getenv(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    if not low <= value <= high:
        return default
    return value


DEFAULT_POLICY = SchedulePolicy()
