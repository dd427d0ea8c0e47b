from __future__ import annotations

import logging
import os
from typing import Any, Dict, List, Optional

import requests
from openai import OpenAI, OpenAIError

from .config import ServiceConfig
from .errors import ExternalServiceFailure, UnsupportedMediaType
from .request import WEB_LOOKUP_TOOL
from .types import RequestSpec

logger = logging.getLogger(__name__)

GEMINI_API_BASE = "https://generativelanguage.googleapis.com/v1beta"


class BaseSubtitleService:
    """Language service that turns a request into raw reply text."""

    provider = "base"

    def generate(self, request: RequestSpec) -> str:
        raise NotImplementedError


class OpenAISubtitleService(BaseSubtitleService):
    """Call an OpenAI-compatible Responses API with a strict JSON schema.

    The Responses API only takes document files inline, so this provider handles links;
    uploaded audio or video must go to Gemini.
    """

    provider = "openai"

    def __init__(self, config: ServiceConfig, client: Optional[OpenAI] = None):
        self.config = config
        if client is not None and config.api_base:
            logger.warning("Ignoring provided OpenAI client because custom api_base was supplied.")
            client = None
        kwargs = {}
        if config.api_base:
            kwargs["base_url"] = config.api_base
        if config.api_key_env:
            api_key = os.getenv(config.api_key_env)
            if api_key:
                kwargs["api_key"] = api_key
        try:
            self.client = client or OpenAI(**kwargs)
        except OpenAIError as exc:
            raise ExternalServiceFailure(f"Could not create OpenAI client: {exc}", provider=self.provider) from exc

    def generate(self, request: RequestSpec) -> str:
        media = [part for part in request.parts if part["type"] == "media"]
        if media:
            raise UnsupportedMediaType(
                f"OpenAI cannot take inline {media[0]['media_type']} input; use the gemini provider for uploaded media"
            )
        kwargs: Dict[str, Any] = {
            "model": self.config.model,
            "input": [{"role": "user", "content": self._content(request)}],
            "text": {
                "format": {
                    "type": "json_schema",
                    "name": "subtitles",
                    "schema": request.schema,
                    "strict": True,
                }
            },
            "temperature": self.config.temperature,
        }
        if WEB_LOOKUP_TOOL in request.tools:
            kwargs["tools"] = [{"type": "web_search"}]

        logger.info("Requesting subtitles from OpenAI model %s", self.config.model)
        try:
            response = self.client.responses.create(**kwargs)
        except OpenAIError as exc:
            logger.error("OpenAI subtitle request failed: %s", exc)
            raise ExternalServiceFailure(f"OpenAI request failed: {exc}", provider=self.provider) from exc
        return response.output_text or ""

    def _content(self, request: RequestSpec) -> List[Dict[str, Any]]:
        return [{"type": "input_text", "text": part["text"]} for part in request.parts if part["type"] == "text"]


class GeminiSubtitleService(BaseSubtitleService):
    """Call the Gemini ``generateContent`` REST endpoint."""

    provider = "gemini"

    def __init__(self, config: ServiceConfig):
        self.config = config
        key_env = config.api_key_env or "GEMINI_API_KEY"
        self.api_key = os.getenv(key_env)
        if not self.api_key:
            raise ExternalServiceFailure(
                f"Gemini API key not found. Please set environment variable '{key_env}'.",
                provider=self.provider,
            )
        self.base_url = (config.api_base or GEMINI_API_BASE).rstrip("/")

    def generate(self, request: RequestSpec) -> str:
        url = f"{self.base_url}/models/{self.config.model}:generateContent"
        headers = {"x-goog-api-key": self.api_key, "Content-Type": "application/json"}
        payload: Dict[str, Any] = {
            "contents": [{"parts": self._parts(request)}],
            "generationConfig": {
                "responseMimeType": "application/json",
                "responseSchema": to_gemini_schema(request.schema),
                "temperature": self.config.temperature,
            },
        }
        if WEB_LOOKUP_TOOL in request.tools:
            payload["tools"] = [{"google_search": {}}]

        logger.info("Requesting subtitles from Gemini model %s", self.config.model)
        try:
            response = requests.post(url, headers=headers, json=payload, timeout=self.config.timeout)
        except requests.exceptions.RequestException as exc:
            logger.error("Gemini subtitle request failed: %s", exc)
            raise ExternalServiceFailure(f"Gemini request failed: {exc}", provider=self.provider) from exc
        if response.status_code >= 400:
            logger.warning("Gemini request failed (HTTP %s): %s", response.status_code, response.text)
            raise ExternalServiceFailure(
                f"Gemini request failed (HTTP {response.status_code})", provider=self.provider
            )
        try:
            data = response.json()
        except ValueError as exc:
            raise ExternalServiceFailure("Gemini returned a non-JSON body", provider=self.provider) from exc

        candidates = data.get("candidates") or []
        if not candidates:
            logger.warning("Gemini returned no candidates: %s", data.get("promptFeedback"))
            return ""
        parts = (candidates[0].get("content") or {}).get("parts") or []
        return "".join(part.get("text", "") for part in parts)

    def _parts(self, request: RequestSpec) -> List[Dict[str, Any]]:
        parts: List[Dict[str, Any]] = []
        for part in request.parts:
            if part["type"] == "text":
                parts.append({"text": part["text"]})
            elif part["type"] == "media":
                parts.append({"inline_data": {"mime_type": part["media_type"], "data": part["data"]}})
        return parts


def to_gemini_schema(schema: Dict[str, Any]) -> Dict[str, Any]:
    """Translate a JSON schema into Gemini's OpenAPI subset (upper-case types, no additionalProperties)."""
    converted: Dict[str, Any] = {}
    for key, value in schema.items():
        if key == "additionalProperties":
            continue
        if key == "type":
            converted[key] = value.upper()
        elif key == "properties":
            converted[key] = {name: to_gemini_schema(prop) for name, prop in value.items()}
        elif key == "items":
            converted[key] = to_gemini_schema(value)
        else:
            converted[key] = value
    return converted


def build_service(config: ServiceConfig, client: Optional[OpenAI] = None) -> BaseSubtitleService:
    provider = (config.provider or "openai").lower()
    if provider == "openai":
        return OpenAISubtitleService(config=config, client=client)
    if provider == "gemini":
        return GeminiSubtitleService(config=config)
    raise ValueError(f"Unsupported subtitle provider: {config.provider}")
