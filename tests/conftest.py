import json
from pathlib import Path
from typing import List, Optional

import pytest

from subtitle_agent.service import BaseSubtitleService
from subtitle_agent.types import RequestSpec


class FakeSubtitleService(BaseSubtitleService):
    """Returns a canned reply and records every request it receives."""

    provider = "fake"

    def __init__(self, reply: Optional[str]):
        self.reply = reply
        self.requests: List[RequestSpec] = []

    def generate(self, request: RequestSpec) -> str:
        self.requests.append(request)
        return self.reply


@pytest.fixture
def hello_world_reply() -> str:
    return json.dumps(
        {
            "subtitles": [
                {"start": 0, "end": 2.5, "text": "Hello"},
                {"start": 2.5, "end": 5, "text": "World"},
            ]
        }
    )


@pytest.fixture
def fake_service(hello_world_reply: str) -> FakeSubtitleService:
    return FakeSubtitleService(hello_world_reply)


@pytest.fixture
def media_file(tmp_path: Path) -> Path:
    path = tmp_path / "interview.final.mp3"
    path.write_bytes(b"ID3\x03\x00fake-mp3-frames")
    return path
