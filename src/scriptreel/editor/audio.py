"""Narration audio handling for sequence assembly."""

import tempfile
from pathlib import Path

from moviepy import AudioFileClip, VideoClip

from ..services.payloads import decode_data_uri

_EXTENSIONS = {
    "audio/wav": ".wav",
    "audio/x-wav": ".wav",
    "audio/mpeg": ".mp3",
    "audio/mp3": ".mp3",
    "audio/ogg": ".ogg",
}


def write_narration(uri: str, directory: Path) -> Path:
    """Decode a narration data URI into a file under ``directory``."""
    mime, data = decode_data_uri(uri)
    with tempfile.NamedTemporaryFile(
        dir=directory, suffix=_EXTENSIONS.get(mime, ".wav"), delete=False
    ) as f:
        f.write(data)
    return Path(f.name)


def load_audio(audio_path: Path) -> AudioFileClip:
    """Load an audio file.

    Raises:
        FileNotFoundError: If audio file doesn't exist.
    """
    if not audio_path.exists():
        raise FileNotFoundError(f"Audio file not found: {audio_path}")

    return AudioFileClip(str(audio_path))


def attach_narration(video: VideoClip, audio_path: Path) -> VideoClip:
    """Replace the clip's soundtrack with narration, cut to the clip length.

    The clip sets the pace: narration longer than the clip is trimmed.
    """
    audio = load_audio(audio_path)
    if audio.duration > video.duration:
        audio = audio.subclipped(0, video.duration)
    return video.with_audio(audio)
