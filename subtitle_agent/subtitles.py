from __future__ import annotations

import datetime as dt
import math
from decimal import ROUND_HALF_UP, Decimal
from typing import Iterable

import srt

from .types import SubtitleItem

# Caption times above this are rejected; timedelta and Decimal both stay in range below it.
MAX_TIMESTAMP_SECONDS = 10**12
_MILLISECOND = Decimal("0.001")


def to_milliseconds(seconds: float) -> int:
    """Round seconds half-up to whole milliseconds on their decimal value."""
    if isinstance(seconds, bool) or not math.isfinite(seconds) or not 0 <= seconds <= MAX_TIMESTAMP_SECONDS:
        raise ValueError(f"Timestamp must be a number between 0 and {MAX_TIMESTAMP_SECONDS}, got {seconds!r}")
    return int(Decimal(str(seconds)).quantize(_MILLISECOND, rounding=ROUND_HALF_UP) * 1000)


def format_timestamp(seconds: float) -> str:
    """Format seconds as an SRT timestamp ``HH:MM:SS,mmm``.

    Milliseconds are rounded half-up, carrying into the seconds. Hours are not wrapped at 24.
    """
    return srt.timedelta_to_srt_timestamp(dt.timedelta(milliseconds=to_milliseconds(seconds)))


def parse_timestamp(timestamp: str) -> float:
    """Inverse of :func:`format_timestamp`."""
    try:
        return srt.srt_timestamp_to_timedelta(timestamp.strip()).total_seconds()
    except (srt.SRTParseError, srt.TimestampParseError) as exc:
        raise ValueError(str(exc)) from exc


def compose_srt(subtitles: Iterable[SubtitleItem]) -> str:
    """Render subtitles as SRT blocks numbered from 1 in the given order.

    Blank lines inside a caption are collapsed so every item stays one block.
    """
    blocks = []
    for idx, item in enumerate(subtitles, start=1):
        blocks.append(
            srt.Subtitle(
                index=idx,
                start=dt.timedelta(milliseconds=to_milliseconds(item.start)),
                end=dt.timedelta(milliseconds=to_milliseconds(item.end)),
                content=item.text,
            )
        )
    return srt.compose(blocks, reindex=False)


def compose_transcript(subtitles: Iterable[SubtitleItem]) -> str:
    """Plain transcript: one subtitle text per line, no timestamps."""
    return "\n".join(item.text for item in subtitles)
