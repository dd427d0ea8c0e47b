from __future__ import annotations

from typing import Optional

GENERIC_USER_MESSAGE = "Failed to process media. Please ensure the file or link is valid."


class SubtitlePipelineError(Exception):
    """Base error for the subtitle generation pipeline."""

    user_message = GENERIC_USER_MESSAGE


class InputTooLarge(SubtitlePipelineError):
    """Raised when the media file exceeds the upload limit."""

    def __init__(self, size: int, limit: int):
        super().__init__(f"Input is {size} bytes, limit is {limit} bytes")
        self.size = size
        self.limit = limit

    @property
    def user_message(self) -> str:  # type: ignore[override]
        return f"File size exceeds {self.limit // (1024 * 1024)}MB. Please upload a smaller file."


class InputReadError(SubtitlePipelineError):
    """Raised when the media file cannot be read."""


class UnsupportedMediaType(SubtitlePipelineError):
    """Raised when the media file is neither audio nor video."""

    user_message = "Invalid file format. Please use audio or video files."


class NoSourceProvided(SubtitlePipelineError):
    """Raised when neither a media file nor a link was given."""

    user_message = "Please provide a file or a YouTube link."


class EmptyResponse(SubtitlePipelineError):
    """Raised when the service returned no text."""


class MalformedResponse(SubtitlePipelineError):
    """Raised when the service reply is not the expected JSON object."""


class InvalidSubtitleItem(SubtitlePipelineError):
    """Raised when any entry of the ``subtitles`` array is malformed."""

    def __init__(self, message: str, index: Optional[int] = None):
        super().__init__(message)
        self.index = index


class ExternalServiceFailure(SubtitlePipelineError):
    """Raised when the language service call fails (network, auth, model)."""

    def __init__(self, message: str, provider: Optional[str] = None):
        super().__init__(message)
        self.provider = provider
