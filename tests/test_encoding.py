import base64
import io

import pytest

from subtitle_agent.encoding import encode_media, strip_data_uri
from subtitle_agent.errors import InputReadError, InputTooLarge, UnsupportedMediaType


class _Unseekable:
    def __init__(self, data: bytes):
        self._buffer = io.BytesIO(data)

    def seekable(self) -> bool:
        return False

    def read(self, size: int = -1) -> bytes:
        return self._buffer.read(size)


def test_encodes_file_with_guessed_media_type(media_file):
    payload = encode_media(media_file)

    assert base64.b64decode(payload.data) == media_file.read_bytes()
    assert payload.media_type == "audio/mpeg"
    assert payload.name == "interview.final.mp3"
    assert payload.size == len(media_file.read_bytes())
    assert not payload.data.startswith("data:")


def test_encodes_stream_and_bytes():
    stream_payload = encode_media(io.BytesIO(b"abc"), media_type="video/mp4", name="clip.mp4")
    bytes_payload = encode_media(b"abc", media_type="video/mp4")

    assert stream_payload.data == bytes_payload.data == base64.b64encode(b"abc").decode()
    assert stream_payload.name == "clip.mp4"


def test_strip_data_uri():
    assert strip_data_uri("data:audio/mpeg;base64,SUQz") == "SUQz"
    assert strip_data_uri("SUQz") == "SUQz"


def test_file_over_limit_is_rejected_before_reading(tmp_path):
    path = tmp_path / "movie.mp4"
    with open(path, "wb") as handle:
        handle.truncate(101 * 1024 * 1024)

    with pytest.raises(InputTooLarge) as excinfo:
        encode_media(path)

    assert excinfo.value.size == 101 * 1024 * 1024
    assert excinfo.value.limit == 100 * 1024 * 1024
    assert "100MB" in excinfo.value.user_message


def test_file_at_limit_is_accepted(tmp_path):
    path = tmp_path / "short.mp4"
    path.write_bytes(b"x" * 16)

    assert encode_media(path, max_bytes=16).size == 16


@pytest.mark.parametrize(
    "media",
    [io.BytesIO(b"x" * 17), _Unseekable(b"x" * 17), b"x" * 17],
)
def test_streams_over_limit_are_rejected(media):
    with pytest.raises(InputTooLarge):
        encode_media(media, media_type="audio/wav", max_bytes=16)


def test_unseekable_stream_within_limit():
    payload = encode_media(_Unseekable(b"hello"), media_type="audio/wav", max_bytes=16)

    assert base64.b64decode(payload.data) == b"hello"


def test_missing_file_is_a_read_error(tmp_path):
    with pytest.raises(InputReadError):
        encode_media(tmp_path / "missing.mp4")


@pytest.mark.parametrize("name", ["notes.txt", "slides.pdf", "no_extension"])
def test_non_media_files_are_rejected(tmp_path, name):
    path = tmp_path / name
    path.write_bytes(b"data")

    with pytest.raises(UnsupportedMediaType):
        encode_media(path)
