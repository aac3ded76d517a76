from __future__ import annotations

import sys
from pathlib import Path

import pytest
from fastapi.testclient import TestClient

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

import lesson_builder.app as app_module
from lesson_builder.config import SchedulePolicy
from lesson_builder.lesson import LessonController


@pytest.fixture()
def lesson():
    return LessonController(policy=SchedulePolicy())


@pytest.fixture()
def client(lesson, monkeypatch):
    monkeypatch.setattr(app_module, "lesson", lesson)
    with TestClient(app_module.app) as c:
        yield c
