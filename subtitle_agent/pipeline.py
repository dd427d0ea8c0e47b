from __future__ import annotations

import asyncio
import logging
from pathlib import Path
from typing import Optional, Union

from openai import OpenAI

from .config import PipelineConfig
from .encoding import encode_media
from .errors import NoSourceProvided
from .export import DirectoryExportSink, ExportSink, export_filename
from .request import build_request
from .response import parse_subtitle_response
from .service import BaseSubtitleService, build_service
from .subtitles import compose_srt, compose_transcript
from .types import (
    EncodedPayload,
    ExportArtifacts,
    ExternalReference,
    MediaSource,
    RequestSpec,
    SubtitleResult,
    TargetLanguage,
)

logger = logging.getLogger(__name__)

LanguageArg = Union[str, TargetLanguage]


class SubtitleAgent:
    """High-level orchestrator: encode, build the request, call the service, validate."""

    def __init__(
        self,
        config: Optional[PipelineConfig] = None,
        service: Optional[BaseSubtitleService] = None,
        client: Optional[OpenAI] = None,
    ):
        self.config = config or PipelineConfig()
        self.service = service or build_service(self.config.service, client=client)

    def run(
        self,
        target_language: LanguageArg,
        media_path: Optional[Path] = None,
        url: Optional[str] = None,
        source_language: Optional[LanguageArg] = None,
    ) -> SubtitleResult:
        language = TargetLanguage.parse(target_language)
        source, request = self._prepare(language, media_path, url, source_language)

        logger.info("Step 3/4: Waiting for %s service...", self.service.provider)
        raw = self.service.generate(request)

        return self._finish(language, source, raw)

    async def run_async(
        self,
        target_language: LanguageArg,
        media_path: Optional[Path] = None,
        url: Optional[str] = None,
        source_language: Optional[LanguageArg] = None,
    ) -> SubtitleResult:
        """Same as :meth:`run`; the service call is the only await point."""
        language = TargetLanguage.parse(target_language)
        source, request = self._prepare(language, media_path, url, source_language)

        logger.info("Step 3/4: Waiting for %s service...", self.service.provider)
        raw = await asyncio.to_thread(self.service.generate, request)

        return self._finish(language, source, raw)

    def export(self, result: SubtitleResult, sink: Optional[ExportSink] = None) -> ExportArtifacts:
        sink = sink or DirectoryExportSink(self.config.output_root.resolve(), overwrite=self.config.overwrite)
        subtitles_path = sink.deliver(
            compose_srt(result.subtitles),
            export_filename(result.language, result.media_name),
        )
        transcript_path = sink.deliver(
            compose_transcript(result.subtitles),
            export_filename(result.language, result.media_name, transcript=True),
        )
        artifacts = ExportArtifacts(subtitles_path=subtitles_path, transcript_path=transcript_path)
        logger.info("Export completed. Artifacts: %s", artifacts)
        return artifacts

    def _prepare(
        self,
        language: TargetLanguage,
        media_path: Optional[Path],
        url: Optional[str],
        source_language: Optional[LanguageArg],
    ) -> tuple[MediaSource, RequestSpec]:
        logger.info("Step 1/4: Encoding media input...")
        source = self._resolve_source(media_path, url)
        logger.info("Step 2/4: Building %s subtitle request...", language.display_name)
        return source, build_request(language, source, source_language)

    def _resolve_source(self, media_path: Optional[Path], url: Optional[str]) -> MediaSource:
        # A local file wins over a link, as in the upload form.
        if media_path is not None:
            return encode_media(media_path, max_bytes=self.config.max_input_bytes)
        if url and url.strip():
            return ExternalReference(url=url.strip())
        raise NoSourceProvided("No source provided")

    def _finish(self, language: TargetLanguage, source: MediaSource, raw: str) -> SubtitleResult:
        logger.info("Step 4/4: Validating subtitle response...")
        subtitles = parse_subtitle_response(raw)
        media_name = source.name if isinstance(source, EncodedPayload) else None
        result = SubtitleResult(subtitles=subtitles, language=language, media_name=media_name)
        logger.info("Generated %s %s subtitle lines", len(subtitles), language.display_name)
        return result
