import argparse
import logging
import sys
from pathlib import Path

from dotenv import load_dotenv

from subtitle_agent import PipelineConfig, SubtitleAgent
from subtitle_agent.config import DEFAULT_API_KEY_ENVS, DEFAULT_MODELS, ServiceConfig
from subtitle_agent.errors import SubtitlePipelineError
from subtitle_agent.types import TargetLanguage


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Generate SRT subtitles and a transcript for a media file or link.")
    parser.add_argument("source", type=str, help="Path to an audio/video file, or an http(s) video link.")
    parser.add_argument(
        "--language",
        type=str,
        choices=[language.name.lower() for language in TargetLanguage],
        default="english",
        help="Language the subtitles are written in.",
    )
    parser.add_argument("--source-language", type=str, help="Spoken language of the media, if known.")
    parser.add_argument("--output-dir", type=Path, default=Path("artifacts"), help="Directory to store exported files.")
    parser.add_argument("--overwrite", action="store_true", help="Overwrite previously exported files.")
    parser.add_argument("--provider", type=str, choices=["gemini", "openai"], default="gemini", help="Language service to use.")
    parser.add_argument("--model", type=str, help="Model name for the provider (defaults per provider).")
    parser.add_argument("--api-base", type=str, help="Custom base URL for the provider API (optional).")
    parser.add_argument("--api-key-env", type=str, help="Environment variable containing the API key.")
    parser.add_argument("--temperature", type=float, default=0.2, help="Sampling temperature for the model.")
    parser.add_argument("--log-level", type=str, default="INFO", help="Logging level (DEBUG, INFO, WARNING, ERROR).")
    return parser.parse_args()


def build_config(args: argparse.Namespace) -> PipelineConfig:
    model = args.model or DEFAULT_MODELS[args.provider]
    api_key_env = args.api_key_env or DEFAULT_API_KEY_ENVS[args.provider]

    service = ServiceConfig(
        provider=args.provider,
        model=model,
        temperature=args.temperature,
        api_base=args.api_base,
        api_key_env=api_key_env,
    )
    return PipelineConfig(service=service, output_root=args.output_dir, overwrite=args.overwrite)


def main() -> None:
    args = parse_args()
    load_dotenv()
    logging.basicConfig(level=getattr(logging, args.log_level.upper(), logging.INFO))

    is_link = args.source.startswith(("http://", "https://"))
    try:
        agent = SubtitleAgent(config=build_config(args))
        result = agent.run(
            target_language=args.language,
            media_path=None if is_link else Path(args.source),
            url=args.source if is_link else None,
            source_language=args.source_language,
        )
        artifacts = agent.export(result)
    except SubtitlePipelineError as exc:
        logging.error("%s (%s: %s)", exc.user_message, type(exc).__name__, exc)
        sys.exit(1)

    logging.info("Subtitles: %s", artifacts.subtitles_path)
    logging.info("Transcript: %s", artifacts.transcript_path)


if __name__ == "__main__":
    main()
