"""Generate time-aligned subtitles in a target language from a media file or link."""

from .config import PipelineConfig, ServiceConfig
from .pipeline import SubtitleAgent
from .types import SubtitleItem, TargetLanguage

__all__ = ["SubtitleAgent", "PipelineConfig", "ServiceConfig", "SubtitleItem", "TargetLanguage"]
