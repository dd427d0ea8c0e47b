from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional

MAX_INPUT_BYTES = 100 * 1024 * 1024

DEFAULT_MODELS = {
    "gemini": "gemini-3-flash-preview",
    "openai": "gpt-4o-mini",
}
DEFAULT_API_KEY_ENVS = {
    "gemini": "GEMINI_API_KEY",
    "openai": "OPENAI_API_KEY",
}


@dataclass
class ServiceConfig:
    """Configuration for the language service that writes the subtitles."""

    provider: str = "gemini"
    model: str = DEFAULT_MODELS["gemini"]
    temperature: float = 0.2
    timeout: float = 300.0  # large uploads take a while on the REST provider
    api_base: Optional[str] = None
    api_key_env: Optional[str] = DEFAULT_API_KEY_ENVS["gemini"]


@dataclass
class PipelineConfig:
    """Top level configuration for the subtitle agent."""

    service: ServiceConfig = field(default_factory=ServiceConfig)
    max_input_bytes: int = MAX_INPUT_BYTES
    output_root: Path = Path("artifacts")
    overwrite: bool = True
