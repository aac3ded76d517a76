from __future__ import annotations

import itertools

import pytest

from lesson_builder.config import GROUP_NAMES, TOGGLE_ALL_OFF_REASON
from lesson_builder.groups.registry import ActivityGroupRegistry, ToggleState
from lesson_builder.words.store import Activity


def test_default_toggles_enable_the_group_activity():
    registry = ActivityGroupRegistry()

    assert registry.get("vocabulary") == ToggleState(vocabulary=True)
    assert registry.get("spelling") == ToggleState(spelling=True)
    assert registry.get("file-phonics") == ToggleState(phonics=True)
    assert set(registry.states()) == set(GROUP_NAMES)


def test_turning_off_last_activity_is_rejected():
    registry = ActivityGroupRegistry()

    result = registry.set_toggle("vocabulary", "vocabulary", False)

    assert result.accepted is False
    assert result.reason == TOGGLE_ALL_OFF_REASON
    assert result.state == ToggleState(vocabulary=True)
    assert registry.get("vocabulary").vocabulary is True


def test_swap_activity_by_enabling_before_disabling():
    registry = ActivityGroupRegistry()

    assert registry.set_toggle("vocabulary", Activity.SPELLING, True).accepted is True
    result = registry.set_toggle("vocabulary", "vocabulary", False)

    assert result.accepted is True
    assert result.state.enabled() == [Activity.SPELLING]


def test_every_toggle_sequence_keeps_one_activity_enabled():
    moves = list(itertools.product(["vocabulary", "spelling", "phonics"], [True, False]))
    for sequence in itertools.product(moves, repeat=4):
        registry = ActivityGroupRegistry()
        for activity, enabled in sequence:
            before = registry.get("phonics")
            result = registry.set_toggle("phonics", activity, enabled)
            assert registry.get("phonics").any_enabled()
            if not result.accepted:
                assert registry.get("phonics") == before


def test_listeners_hear_accepted_changes_only():
    registry = ActivityGroupRegistry()
    heard: list[tuple[str, ToggleState]] = []
    registry.subscribe(lambda group, state: heard.append((group, state)))

    registry.set_toggle("spelling", "phonics", True)
    registry.set_toggle("spelling", "phonics", True)
    registry.set_toggle("vocabulary", "vocabulary", False)

    assert heard == [("spelling", ToggleState(spelling=True, phonics=True))]


def test_unknown_group_or_activity_raises():
    registry = ActivityGroupRegistry()

    with pytest.raises(ValueError):
        registry.set_toggle("grammar", "vocabulary", True)
    with pytest.raises(ValueError):
        registry.set_toggle("vocabulary", "grammar", True)


def test_replace_state_rejects_all_off():
    registry = ActivityGroupRegistry()

    result = registry.replace_state("spelling", ToggleState())

    assert result.accepted is False
    assert registry.get("spelling") == ToggleState(spelling=True)
