"""Shared fixtures: a fake Gemini client and canned responses."""

from pathlib import Path
from types import SimpleNamespace
from unittest.mock import AsyncMock, MagicMock

import pytest

from scriptreel.services.gemini import GeminiClient
from scriptreel.services.payloads import to_data_uri

PNG_BYTES = b"\x89PNG\r\n\x1a\nfake-image"
PCM_BYTES = b"\x00\x01" * 240


def inline_response(data: bytes = PNG_BYTES, mime_type: str = "image/png"):
    """A generate_content response carrying one inline payload."""
    text_part = SimpleNamespace(text="Here you go", inline_data=None)
    blob_part = SimpleNamespace(text=None, inline_data=SimpleNamespace(data=data, mime_type=mime_type))
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[text_part, blob_part]))])


def empty_response():
    """A response with text only, no inline payload."""
    part = SimpleNamespace(text="I cannot draw that.", inline_data=None)
    return SimpleNamespace(candidates=[SimpleNamespace(content=SimpleNamespace(parts=[part]))])


def video_operation(done: bool = False, uri=None, error=None, video_bytes=None, name="operations/veo-1"):
    response = None
    if done and (uri or video_bytes):
        video = SimpleNamespace(uri=uri, video_bytes=video_bytes)
        response = SimpleNamespace(generated_videos=[SimpleNamespace(video=video)])
    elif done:
        response = SimpleNamespace(generated_videos=[])
    return SimpleNamespace(name=name, done=done, error=error, response=response, result=None)


def image_uri(tag: str = "ref") -> str:
    return to_data_uri(f"image-{tag}".encode(), "image/jpeg")


@pytest.fixture
def gemini(tmp_path: Path):
    """A GeminiClient double whose calls all succeed by default."""
    client = MagicMock(spec=GeminiClient)
    client.generate_text = AsyncMock(return_value="A professional cinematic prompt")
    client.generate_media = AsyncMock(return_value=inline_response())
    client.speak = AsyncMock(return_value=inline_response(PCM_BYTES, "audio/L16;codec=pcm;rate=24000"))
    client.submit_video = AsyncMock(return_value=video_operation())
    client.refresh_video = AsyncMock(
        return_value=video_operation(done=True, uri="https://files.example/v1/video.mp4?alt=media")
    )

    async def download(uri, dest):
        dest.parent.mkdir(parents=True, exist_ok=True)
        dest.write_bytes(b"mp4-bytes")
        return dest

    client.download = AsyncMock(side_effect=download)
    return client
