from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, File, HTTPException, Query, UploadFile
from fastapi.middleware.cors import CORSMiddleware

from lesson_builder.api.schemas import (
    BuildScheduleRequest,
    LessonRecord,
    MoveScheduledWordRequest,
    MoveStagedRequest,
    MoveWordRequest,
    StageRequest,
    ToggleRequest,
)
from lesson_builder.lesson import LessonController
from lesson_builder.scheduler.distributor import ScheduleInvariantError

lesson = LessonController()


def configure_logging() -> None:
    root = logging.getLogger()
    if root.handlers:
        return
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter("%(asctime)s - %(name)s - %(levelname)s - %(message)s"))
    root.addHandler(handler)
    root.setLevel(logging.INFO)


@asynccontextmanager
async def lifespan(_app: FastAPI):
    configure_logging()
    yield


app = FastAPI(title="Lesson Builder", version="0.1.0", lifespan=lifespan)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


@app.get("/health")
def health() -> dict:
    return {"status": "ok"}


@app.get("/api/groups")
def groups() -> dict:
    return {
        "ok": True,
        "groups": [
            {
                "name": name,
                "toggles": state.to_dict(),
                "staged": lesson.chips.staged(name),
                "word_ids": [word.id for word in lesson.chips.members(name)],
            }
            for name, state in lesson.registry.states().items()
        ],
    }


@app.post("/api/groups/{group}/toggles")
def set_toggle(group: str, req: ToggleRequest) -> dict:
    try:
        result = lesson.registry.set_toggle(group, req.activity, req.enabled)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"ok": True, **result.to_dict(), "pool": lesson.chips.get_pool()}


@app.post("/api/groups/{group}/stage")
def stage(group: str, req: StageRequest) -> dict:
    try:
        staged = lesson.chips.stage(group, req.text)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"ok": True, "group": group, "staged": staged}


@app.post("/api/groups/{group}/stage/file")
async def stage_file(group: str, file: UploadFile = File(...)) -> dict:
    payload = await file.read()
    try:
        staged = lesson.chips.stage_file(file.filename or "", payload, group=group)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"ok": True, "group": group, "filename": file.filename, "staged": staged}


@app.delete("/api/groups/{group}/stage/{token}")
def unstage(group: str, token: str) -> dict:
    try:
        removed = lesson.chips.unstage(group, token)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"ok": True, "removed": removed, "staged": lesson.chips.staged(group)}


@app.post("/api/groups/{group}/stage/{token}/move")
def move_staged(group: str, token: str, req: MoveStagedRequest) -> dict:
    try:
        moved = lesson.chips.move_staged(token, group, req.target_group)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {
        "ok": True,
        "moved": moved,
        "staged": {group: lesson.chips.staged(group), req.target_group: lesson.chips.staged(req.target_group)},
    }


@app.post("/api/groups/{group}/commit")
def commit(group: str) -> dict:
    try:
        created = lesson.chips.commit(group)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"ok": True, "created": [word.to_dict() for word in created], "pool": lesson.chips.get_pool()}


@app.post("/api/channels/{channel}/commit")
def commit_channel(channel: str) -> dict:
    try:
        created = lesson.chips.commit_channel(channel)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"ok": True, "created": [word.to_dict() for word in created], "pool": lesson.chips.get_pool()}


@app.get("/api/pool")
def pool() -> dict:
    items = lesson.chips.get_pool()
    return {"ok": True, "items": items, "total": len(items)}


@app.post("/api/words/{word_id}/move")
def move_word(word_id: int, req: MoveWordRequest) -> dict:
    try:
        word = lesson.chips.move(word_id, req.target_group)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"ok": True, "moved": word is not None, "word": word.to_dict() if word else None}


@app.delete("/api/words/{word_id}")
def delete_word(word_id: int) -> dict:
    return {"ok": True, "removed": lesson.chips.delete(word_id)}


@app.get("/api/schedule/distribute")
def distribute(words: int = Query(...), days: int = Query(...)) -> dict:
    try:
        counts = lesson.distribute(words, days)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ScheduleInvariantError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {"ok": True, "counts": counts}


@app.post("/api/schedule")
def build_schedule(req: BuildScheduleRequest) -> dict:
    try:
        schedule = lesson.build_schedule(req.days)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ScheduleInvariantError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {"ok": True, **schedule.to_dict()}


@app.get("/api/schedule")
def current_schedule() -> dict:
    if lesson.schedule is None:
        raise HTTPException(status_code=404, detail="no schedule has been built for this lesson")
    return {"ok": True, **lesson.schedule.to_dict()}


@app.post("/api/schedule/move")
def move_scheduled_word(req: MoveScheduledWordRequest) -> dict:
    try:
        result = lesson.move_scheduled_word(req.word_id, req.from_day, req.to_day)
    except ValueError as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    except ScheduleInvariantError as exc:
        raise HTTPException(status_code=500, detail=str(exc)) from exc
    return {"ok": True, **result.to_dict()}


@app.get("/api/lesson")
def export_lesson() -> dict:
    return {"ok": True, "lesson": lesson.to_record().model_dump()}


@app.put("/api/lesson")
def restore_lesson(record: LessonRecord) -> dict:
    try:
        lesson.restore(record)
    except (ValueError, ScheduleInvariantError) as exc:
        raise HTTPException(status_code=400, detail=str(exc)) from exc
    return {"ok": True, "lesson": lesson.to_record().model_dump()}
