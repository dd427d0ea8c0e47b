from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Any, Dict, List, Optional, Tuple, Union


class TargetLanguage(Enum):
    """Languages subtitles can be produced in."""

    ENGLISH = "en"
    INDONESIAN = "id"

    @property
    def display_name(self) -> str:
        return self.name.capitalize()

    @classmethod
    def parse(cls, value: Union[str, "TargetLanguage"]) -> "TargetLanguage":
        """Accept a member, its name (``english``) or its code (``en``)."""
        if isinstance(value, cls):
            return value
        key = str(value).strip()
        for member in cls:
            if key.lower() in (member.name.lower(), member.value):
                return member
        raise ValueError(f"Unsupported target language: {value}")


@dataclass(frozen=True)
class SubtitleItem:
    """Single caption with timing data in seconds."""

    start: float
    end: float
    text: str


SubtitleSequence = Tuple[SubtitleItem, ...]


@dataclass(frozen=True)
class EncodedPayload:
    """Inline media: base64 text without any data-URI prefix."""

    data: str
    media_type: str
    name: Optional[str] = None
    size: int = 0


@dataclass(frozen=True)
class ExternalReference:
    """Media the service is expected to resolve on its own, e.g. a video link."""

    url: str


MediaSource = Union[EncodedPayload, ExternalReference]


@dataclass(frozen=True)
class RequestSpec:
    """Provider-neutral description of one subtitle generation request."""

    language: TargetLanguage
    instructions: str
    schema: Dict[str, Any]
    parts: List[Dict[str, Any]] = field(default_factory=list)
    tools: List[str] = field(default_factory=list)


@dataclass(frozen=True)
class SubtitleResult:
    """Outcome of one generation run."""

    subtitles: SubtitleSequence
    language: TargetLanguage
    media_name: Optional[str] = None


@dataclass
class ExportArtifacts:
    """Paths to the exported files for a generation run."""

    subtitles_path: Path
    transcript_path: Path
