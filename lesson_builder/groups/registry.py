from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Callable

from lesson_builder.config import GROUP_NAMES, TOGGLE_ALL_OFF_REASON, default_toggles
from lesson_builder.words.store import Activity

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class ToggleState:
    vocabulary: bool = False
    spelling: bool = False
    phonics: bool = False

    @classmethod
    def from_dict(cls, data: dict[str, bool]) -> "ToggleState":
        return cls(
            vocabulary=bool(data.get("vocabulary", False)),
            spelling=bool(data.get("spelling", False)),
            phonics=bool(data.get("phonics", False)),
        )

    def enabled(self) -> list[Activity]:
        return [activity for activity in Activity if getattr(self, activity.value)]

    def any_enabled(self) -> bool:
        return self.vocabulary or self.spelling or self.phonics

    def with_activity(self, activity: Activity, enabled: bool) -> "ToggleState":
        values = self.to_dict()
        values[activity.value] = enabled
        return ToggleState.from_dict(values)

    def to_dict(self) -> dict[str, bool]:
        return {
            "vocabulary": self.vocabulary,
            "spelling": self.spelling,
            "phonics": self.phonics,
        }


@dataclass
class ToggleResult:
    accepted: bool
    group: str
    state: ToggleState
    reason: str | None = None

    def to_dict(self) -> dict:
        return {
            "accepted": self.accepted,
            "group": self.group,
            "state": self.state.to_dict(),
            "reason": self.reason,
        }


ToggleListener = Callable[[str, ToggleState], None]


class ActivityGroupRegistry:
    """Per-group activity toggles; at least one toggle per group is always on."""

    def __init__(self) -> None:
        self._states: dict[str, ToggleState] = {
            group: ToggleState.from_dict(default_toggles(group)) for group in GROUP_NAMES
        }
        self._listeners: list[ToggleListener] = []

    def subscribe(self, listener: ToggleListener) -> None:
        self._listeners.append(listener)

    def get(self, group: str) -> ToggleState:
        return self._states[_require_group(group)]

    def states(self) -> dict[str, ToggleState]:
        return dict(self._states)

    def set_toggle(self, group: str, activity: Activity | str, enabled: bool) -> ToggleResult:
        group = _require_group(group)
        activity = _require_activity(activity)
        current = self._states[group]
        proposed = current.with_activity(activity, bool(enabled))

        if not proposed.any_enabled():
            logger.info("rejected toggle %s/%s off: would leave no activity enabled", group, activity.value)
            return ToggleResult(accepted=False, group=group, state=current, reason=TOGGLE_ALL_OFF_REASON)

        if proposed != current:
            self._states[group] = proposed
            logger.info("group %s activities now %s", group, [item.value for item in proposed.enabled()])
            self._broadcast(group, proposed)
        return ToggleResult(accepted=True, group=group, state=proposed)

    def replace_state(self, group: str, state: ToggleState) -> ToggleResult:
        """Set all three toggles at once, e.g. when restoring a saved lesson."""
        group = _require_group(group)
        current = self._states[group]
        if not state.any_enabled():
            return ToggleResult(accepted=False, group=group, state=current, reason=TOGGLE_ALL_OFF_REASON)
        if state != current:
            self._states[group] = state
            self._broadcast(group, state)
        return ToggleResult(accepted=True, group=group, state=state)

    def reset(self) -> None:
        for group in GROUP_NAMES:
            self.replace_state(group, ToggleState.from_dict(default_toggles(group)))

    def _broadcast(self, group: str, state: ToggleState) -> None:
        for listener in self._listeners:
            listener(group, state)


def _require_group(group: str) -> str:
    if group not in GROUP_NAMES:
        raise ValueError(f"unknown group: {group}")
    return group


def _require_activity(activity: Activity | str) -> Activity:
    try:
        return Activity(activity)
    except ValueError as exc:
        raise ValueError(f"unknown activity: {activity}") from exc
