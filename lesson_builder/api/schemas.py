from __future__ import annotations

from pydantic import BaseModel, Field


class ToggleRequest(BaseModel):
    activity: str
    enabled: bool


class StageRequest(BaseModel):
    text: str


class MoveStagedRequest(BaseModel):
    target_group: str


class MoveWordRequest(BaseModel):
    target_group: str


class BuildScheduleRequest(BaseModel):
    days: int


class MoveScheduledWordRequest(BaseModel):
    word_id: int
    from_day: int
    to_day: int


class WordRecord(BaseModel):
    id: int
    text: str
    activities: list[str] = Field(min_length=1)
    group: str


class GroupRecord(BaseModel):
    name: str
    vocabulary: bool = False
    spelling: bool = False
    phonics: bool = False


class DayRecord(BaseModel):
    day: int
    new_word_ids: list[int] = Field(default_factory=list)
    review_word_ids: list[int] = Field(default_factory=list)


class LessonRecord(BaseModel):
    words: list[WordRecord] = Field(default_factory=list)
    groups: list[GroupRecord] = Field(default_factory=list)
    schedule: list[DayRecord] | None = None
