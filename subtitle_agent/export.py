from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from .types import TargetLanguage

logger = logging.getLogger(__name__)

DEFAULT_LINK_PREFIX = "youtube_video"


def export_filename(language: TargetLanguage, media_name: Optional[str] = None, transcript: bool = False) -> str:
    """Name an exported file after its media, e.g. ``talk_id.srt`` or ``talk_id_transcript.txt``."""
    prefix = media_name.split(".")[0] if media_name else ""
    prefix = prefix or DEFAULT_LINK_PREFIX
    suffix = "_transcript.txt" if transcript else ".srt"
    return f"{prefix}_{language.value}{suffix}"


class ExportSink:
    """Delivers serialized text under a file name."""

    def deliver(self, content: str, filename: str) -> Path:
        raise NotImplementedError


class DirectoryExportSink(ExportSink):
    """Write exported files into a local directory."""

    def __init__(self, output_dir: Path, overwrite: bool = True):
        self.output_dir = output_dir
        self.overwrite = overwrite

    def deliver(self, content: str, filename: str) -> Path:
        output_path = self.output_dir / Path(filename).name
        if output_path.exists() and not self.overwrite:
            raise FileExistsError(f"{output_path} already exists and overwrite=False")
        output_path.parent.mkdir(parents=True, exist_ok=True)
        output_path.write_text(content, encoding="utf-8")
        logger.debug("Wrote %s (%d chars)", output_path, len(content))
        return output_path
