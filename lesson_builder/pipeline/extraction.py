from __future__ import annotations

import csv
import io
import re
from pathlib import Path

from lesson_builder.config import ALLOWED_UPLOAD_SUFFIXES

SPLIT_RE = re.compile(r"[\s,]+")
STRIP_RE = re.compile(r"[^\w\s'-]", re.ASCII)
LETTER_RE = re.compile(r"[A-Za-z]")


def parse_words(text: str) -> list[str]:
    """Split a typed or uploaded word list into lower-cased word tokens.

    Duplicates are kept; callers de-duplicate against their own buffers.
    """
    if not text or not text.strip():
        return []

    tokens: list[str] = []
    for raw in SPLIT_RE.split(text):
        token = STRIP_RE.sub("", raw.strip())
        if not token or not LETTER_RE.search(token):
            continue
        tokens.append(token.lower())
    return tokens


def extract_text_from_bytes(filename: str, payload: bytes) -> str:
    suffix = Path(filename).suffix.lower()
    if suffix not in ALLOWED_UPLOAD_SUFFIXES:
        raise ValueError("Only TXT or CSV word lists are supported")
    if suffix == ".csv":
        return _extract_from_csv(payload)
    return payload.decode("utf-8", errors="ignore")


def _extract_from_csv(payload: bytes) -> str:
    data = payload.decode("utf-8", errors="ignore")
    reader = csv.reader(io.StringIO(data))
    values: list[str] = []
    for row in reader:
        values.extend(cell.strip() for cell in row if cell.strip())
    return "\n".join(values)
