"""Helpers for inline binary payloads and data URIs."""

import base64
import io
import mimetypes
import wave
from pathlib import Path
from typing import Any, Optional, Tuple


def split_data_uri(uri: str) -> Tuple[str, str]:
    """Split ``data:<mime>;base64,<data>`` into ``(mime, base64 data)``.

    Raises:
        ValueError: If ``uri`` is not a base64 data URI.
    """
    if not uri.startswith("data:") or "," not in uri:
        raise ValueError(f"Not a data URI: {uri[:40]}...")
    header, data = uri.split(",", 1)
    mime = header[5:].split(";")[0] or "application/octet-stream"
    return mime, data


def decode_data_uri(uri: str) -> Tuple[str, bytes]:
    mime, data = split_data_uri(uri)
    return mime, base64.b64decode(data)


def to_data_uri(data: bytes, mime_type: str) -> str:
    return f"data:{mime_type};base64,{base64.b64encode(data).decode()}"


def _payload_bytes(data: Any) -> bytes:
    if isinstance(data, str):
        return base64.b64decode(data)
    return bytes(data)


def first_inline_payload(response: Any) -> Optional[Tuple[bytes, Optional[str]]]:
    """Return ``(bytes, mime_type)`` of the first inline part, or None."""
    for candidate in getattr(response, "candidates", None) or []:
        content = getattr(candidate, "content", None)
        for part in getattr(content, "parts", None) or []:
            inline_data = getattr(part, "inline_data", None)
            if inline_data is None or not getattr(inline_data, "data", None):
                continue
            return _payload_bytes(inline_data.data), getattr(inline_data, "mime_type", None)
    return None


def parse_mime(mime_type: Optional[str]) -> Tuple[Optional[str], dict]:
    """Split ``audio/L16;codec=pcm;rate=24000`` into base type and parameters."""
    if not mime_type:
        return None, {}
    parts = [part.strip() for part in mime_type.split(";") if part.strip()]
    params = {}
    for part in parts[1:]:
        if "=" in part:
            key, value = part.split("=", 1)
            params[key.strip().lower()] = value.strip()
    return parts[0].lower(), params


def pcm_to_wav(pcm: bytes, rate: int = 24000, channels: int = 1) -> bytes:
    """Wrap 16-bit little-endian PCM in a WAV container."""
    frame_size = 2 * channels
    usable = len(pcm) - (len(pcm) % frame_size)
    buffer = io.BytesIO()
    with wave.open(buffer, "wb") as wf:
        wf.setnchannels(channels)
        wf.setsampwidth(2)
        wf.setframerate(rate)
        wf.writeframes(pcm[:usable])
    return buffer.getvalue()


def file_to_data_uri(path: Path) -> str:
    """Read an image or audio file into a data URI."""
    mime, _ = mimetypes.guess_type(path.name)
    return to_data_uri(path.read_bytes(), mime or "application/octet-stream")


def write_data_uri(uri: str, path: Path) -> Path:
    """Decode a data URI into ``path``."""
    _, data = decode_data_uri(uri)
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_bytes(data)
    return path
