from __future__ import annotations

import base64
import io
import logging
import mimetypes
import os
from pathlib import Path
from typing import BinaryIO, Optional, Union

from .config import MAX_INPUT_BYTES
from .errors import InputReadError, InputTooLarge, UnsupportedMediaType
from .types import EncodedPayload

logger = logging.getLogger(__name__)

MediaInput = Union[str, Path, bytes, BinaryIO]


def strip_data_uri(text: str) -> str:
    """Drop a ``data:<type>;base64,`` prefix so only the base64 body remains."""
    if text.startswith("data:") and "," in text:
        return text.split(",", 1)[1]
    return text


def guess_media_type(name: Optional[str]) -> Optional[str]:
    if not name:
        return None
    media_type, _ = mimetypes.guess_type(name)
    return media_type


def encode_media(
    media: MediaInput,
    media_type: Optional[str] = None,
    name: Optional[str] = None,
    max_bytes: int = MAX_INPUT_BYTES,
) -> EncodedPayload:
    """Read an audio or video file and return it base64-encoded with its media type.

    ``media`` may be a filesystem path, raw bytes, or a binary file object. The size
    limit is checked before any encoding happens.
    """
    if isinstance(media, (str, Path)):
        path = Path(media)
        name = name or path.name
        media_type = media_type or guess_media_type(path.name)
        _check_media_type(media_type, name)
        try:
            size = path.stat().st_size
        except OSError as exc:
            raise InputReadError(f"Failed to read file {path}: {exc}") from exc
        _check_size(size, max_bytes)
        try:
            raw = path.read_bytes()
        except OSError as exc:
            raise InputReadError(f"Failed to read file {path}: {exc}") from exc
    else:
        if name is None and not isinstance(media, (bytes, bytearray)):
            stream_name = getattr(media, "name", None)
            name = os.path.basename(stream_name) if isinstance(stream_name, str) else None
        media_type = media_type or guess_media_type(name)
        _check_media_type(media_type, name)
        raw = _read_stream(media, max_bytes)

    encoded = base64.b64encode(raw).decode("ascii")
    logger.info("Encoded %s (%s, %d bytes)", name or "media input", media_type, len(raw))
    return EncodedPayload(data=strip_data_uri(encoded), media_type=media_type, name=name, size=len(raw))


def _read_stream(media: Union[bytes, BinaryIO], max_bytes: int) -> bytes:
    if isinstance(media, (bytes, bytearray)):
        _check_size(len(media), max_bytes)
        return bytes(media)
    try:
        if media.seekable():
            position = media.tell()
            size = media.seek(0, io.SEEK_END) - position
            media.seek(position)
            _check_size(size, max_bytes)
            return media.read()
        # Unknown length: read one byte past the limit to detect oversize input.
        raw = media.read(max_bytes + 1)
    except (OSError, ValueError) as exc:
        raise InputReadError(f"Failed to read media stream: {exc}") from exc
    _check_size(len(raw), max_bytes)
    return raw


def _check_size(size: int, max_bytes: int) -> None:
    if size > max_bytes:
        logger.warning("Rejecting media input of %d bytes (limit %d)", size, max_bytes)
        raise InputTooLarge(size=size, limit=max_bytes)


def _check_media_type(media_type: Optional[str], name: Optional[str]) -> None:
    if not media_type or not media_type.startswith(("audio/", "video/")):
        raise UnsupportedMediaType(f"Unsupported media type {media_type!r} for {name or 'media input'}")
