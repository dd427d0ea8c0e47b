from __future__ import annotations

import logging
from typing import Any, Dict, Optional, Union

from .errors import NoSourceProvided
from .types import EncodedPayload, ExternalReference, MediaSource, RequestSpec, TargetLanguage

logger = logging.getLogger(__name__)

WEB_LOOKUP_TOOL = "web_lookup"

SUBTITLE_RESPONSE_SCHEMA: Dict[str, Any] = {
    "type": "object",
    "properties": {
        "subtitles": {
            "type": "array",
            "items": {
                "type": "object",
                "properties": {
                    "start": {"type": "number"},
                    "end": {"type": "number"},
                    "text": {"type": "string"},
                },
                "required": ["start", "end", "text"],
                "additionalProperties": False,
            },
        },
    },
    "required": ["subtitles"],
    "additionalProperties": False,
}

INSTRUCTION_TEMPLATE = """You are a professional subtitle creator. Your goal is to produce subtitles in {language}.

INSTRUCTIONS:
1. {detect}
2. {task}
3. All output MUST be in {language}.
4. Keep every timestamp tightly synchronized to the moment the words are spoken.

FORMATTING:
- Return a single JSON object with a "subtitles" array.
- Each item must have all three fields:
  - "start": start time in seconds (number)
  - "end": end time in seconds (number)
  - "text": the {language} text (string)
- Keep lines brief (max 10 words)."""

REFERENCE_TASK = (
    "Task: Generate subtitles for this video: {url}. "
    "Use your tools to find the transcript or dialogue."
)


def build_instructions(
    language: TargetLanguage,
    source_language: Optional[Union[str, TargetLanguage]] = None,
    reference_url: Optional[str] = None,
) -> str:
    """Render the instruction text for ``language``.

    With a known ``source_language`` the task is fixed to transcription (same language)
    or translation (different language); otherwise the service decides after detecting
    the spoken language.
    """
    name = language.display_name
    if source_language is None:
        detect = "Detect the language spoken or the content of the media."
        task = (
            f"Produce a precise transcription if the source matches {name}, "
            f"or a faithful translation if it differs."
        )
    else:
        source_name = _source_display_name(source_language)
        detect = f"The media is spoken in {source_name}."
        if source_name.lower() == name.lower():
            task = f"Transcribe the {name} speech precisely, word for word."
        else:
            task = f"Translate the speech faithfully from {source_name} into {name}."

    instructions = INSTRUCTION_TEMPLATE.format(language=name, detect=detect, task=task)
    if reference_url:
        instructions = f"{instructions}\n\n{REFERENCE_TASK.format(url=reference_url)}"
    return instructions


def build_request(
    language: TargetLanguage,
    source: Optional[MediaSource],
    source_language: Optional[Union[str, TargetLanguage]] = None,
) -> RequestSpec:
    """Build the request for one media source.

    A reference gets the lookup tool and its URL in the instructions; an inline payload
    is attached as a content part and never gets the tool.
    """
    if isinstance(source, ExternalReference) and source.url.strip():
        url = source.url.strip()
        logger.info("Building %s subtitle request for link %s", language.display_name, url)
        instructions = build_instructions(language, source_language, reference_url=url)
        return RequestSpec(
            language=language,
            instructions=instructions,
            schema=SUBTITLE_RESPONSE_SCHEMA,
            parts=[{"type": "text", "text": instructions}],
            tools=[WEB_LOOKUP_TOOL],
        )
    if isinstance(source, EncodedPayload) and source.data:
        logger.info(
            "Building %s subtitle request for inline %s (%d bytes)",
            language.display_name,
            source.media_type,
            source.size,
        )
        instructions = build_instructions(language, source_language)
        return RequestSpec(
            language=language,
            instructions=instructions,
            schema=SUBTITLE_RESPONSE_SCHEMA,
            parts=[
                {"type": "text", "text": instructions},
                {"type": "media", "data": source.data, "media_type": source.media_type, "name": source.name},
            ],
        )
    raise NoSourceProvided("No source provided")


def _source_display_name(source_language: Union[str, TargetLanguage]) -> str:
    try:
        return TargetLanguage.parse(source_language).display_name
    except ValueError:
        return str(source_language).strip().capitalize()
