from __future__ import annotations

import json
import logging
import math
from typing import Any, List, Optional

from .errors import EmptyResponse, InvalidSubtitleItem, MalformedResponse
from .subtitles import MAX_TIMESTAMP_SECONDS
from .types import SubtitleItem, SubtitleSequence

logger = logging.getLogger(__name__)


def parse_subtitle_response(raw: Optional[str]) -> SubtitleSequence:
    """Validate the service reply and return it as an immutable subtitle sequence.

    Any malformed entry rejects the whole reply. Order is kept as returned; items are
    neither sorted nor de-duplicated, and ``end > start`` is not enforced here.
    """
    if raw is None or not raw.strip():
        raise EmptyResponse("Empty response from AI")

    try:
        payload = json.loads(_strip_code_fence(raw))
    except ValueError as exc:
        raise MalformedResponse(f"Response is not valid JSON: {exc}") from exc

    if not isinstance(payload, dict):
        raise MalformedResponse(f"Expected a JSON object, got {type(payload).__name__}")
    entries = payload.get("subtitles")
    if not isinstance(entries, list):
        raise MalformedResponse('Response has no "subtitles" array')

    items: List[SubtitleItem] = []
    for index, entry in enumerate(entries):
        items.append(_parse_item(entry, index))

    logger.info("Validated %s subtitle lines", len(items))
    if logger.isEnabledFor(logging.DEBUG):
        for idx, item in enumerate(items, start=1):
            logger.debug("Subtitle %03d: %.3f-%.3f %s", idx, item.start, item.end, item.text)
    return tuple(items)


def _parse_item(entry: Any, index: int) -> SubtitleItem:
    if not isinstance(entry, dict):
        raise InvalidSubtitleItem(f"Subtitle #{index} is not an object", index=index)
    start = _parse_time(entry, "start", index)
    end = _parse_time(entry, "end", index)
    text = entry.get("text")
    if not isinstance(text, str) or not text.strip():
        raise InvalidSubtitleItem(f"Subtitle #{index} has no text", index=index)
    return SubtitleItem(start=float(start), end=float(end), text=text.strip())


def _parse_time(entry: dict, key: str, index: int) -> float:
    value = entry.get(key)
    # bool is an int subclass but never a valid timestamp.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidSubtitleItem(f"Subtitle #{index} has a non-numeric {key!r}: {value!r}", index=index)
    if not math.isfinite(value) or not 0 <= value <= MAX_TIMESTAMP_SECONDS:
        raise InvalidSubtitleItem(f"Subtitle #{index} has an invalid {key!r}: {value!r}", index=index)
    return float(value)


def _strip_code_fence(raw: str) -> str:
    text = raw.strip()
    if text.startswith("```"):
        lines = text.split("\n")
        if lines[0].startswith("```"):
            lines = lines[1:]
        if lines and lines[-1].strip() == "```":
            lines = lines[:-1]
        text = "\n".join(lines).strip()
    return text
