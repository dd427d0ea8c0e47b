import asyncio

import pytest

from conftest import FakeSubtitleService
from subtitle_agent import PipelineConfig, SubtitleAgent, SubtitleItem, TargetLanguage
from subtitle_agent.errors import InputTooLarge, InvalidSubtitleItem, NoSourceProvided
from subtitle_agent.export import DirectoryExportSink, export_filename
from subtitle_agent.request import WEB_LOOKUP_TOOL


def test_run_with_media_file(fake_service, media_file):
    agent = SubtitleAgent(service=fake_service)

    result = agent.run("indonesian", media_path=media_file, source_language="indonesian")

    assert result.language is TargetLanguage.INDONESIAN
    assert result.media_name == "interview.final.mp3"
    assert result.subtitles[0] == SubtitleItem(start=0.0, end=2.5, text="Hello")
    request = fake_service.requests[0]
    assert request.tools == []
    assert request.parts[1]["media_type"] == "audio/mpeg"
    assert "Transcribe the Indonesian speech" in request.instructions


def test_run_with_link(fake_service):
    agent = SubtitleAgent(service=fake_service)

    result = agent.run(TargetLanguage.ENGLISH, url="https://youtu.be/abc")

    assert result.media_name is None
    assert len(result.subtitles) == 2
    assert fake_service.requests[0].tools == [WEB_LOOKUP_TOOL]


def test_file_takes_precedence_over_link(fake_service, media_file):
    SubtitleAgent(service=fake_service).run("english", media_path=media_file, url="https://youtu.be/abc")

    assert fake_service.requests[0].tools == []


def test_no_source_never_calls_service(fake_service):
    with pytest.raises(NoSourceProvided):
        SubtitleAgent(service=fake_service).run("english", url="  ")

    assert fake_service.requests == []


def test_oversized_input_never_calls_service(fake_service, media_file):
    agent = SubtitleAgent(config=PipelineConfig(max_input_bytes=4), service=fake_service)

    with pytest.raises(InputTooLarge):
        agent.run("english", media_path=media_file)

    assert fake_service.requests == []


def test_invalid_reply_produces_no_result():
    service = FakeSubtitleService('{"subtitles": [{"start": 0, "end": 1, "text": "ok"}, {"start": 1, "end": 2}]}')

    with pytest.raises(InvalidSubtitleItem):
        SubtitleAgent(service=service).run("english", url="https://youtu.be/abc")


def test_run_async(fake_service, media_file):
    agent = SubtitleAgent(service=fake_service)

    result = asyncio.run(agent.run_async("english", media_path=media_file))

    assert [item.text for item in result.subtitles] == ["Hello", "World"]


def test_export_writes_srt_and_transcript(fake_service, media_file, tmp_path):
    agent = SubtitleAgent(config=PipelineConfig(output_root=tmp_path / "out"), service=fake_service)
    result = agent.run("indonesian", media_path=media_file)

    artifacts = agent.export(result)

    assert artifacts.subtitles_path.name == "interview_id.srt"
    assert artifacts.transcript_path.name == "interview_id_transcript.txt"
    assert artifacts.subtitles_path.read_text(encoding="utf-8").startswith("1\n00:00:00,000 --> 00:00:02,500\nHello\n")
    assert artifacts.transcript_path.read_text(encoding="utf-8") == "Hello\nWorld"


def test_export_filename_defaults_for_links():
    assert export_filename(TargetLanguage.ENGLISH) == "youtube_video_en.srt"
    assert export_filename(TargetLanguage.ENGLISH, transcript=True) == "youtube_video_en_transcript.txt"


def test_directory_sink_respects_overwrite(tmp_path):
    sink = DirectoryExportSink(tmp_path, overwrite=False)
    sink.deliver("first", "clip_en.srt")

    with pytest.raises(FileExistsError):
        sink.deliver("second", "clip_en.srt")

    assert (tmp_path / "clip_en.srt").read_text(encoding="utf-8") == "first"
