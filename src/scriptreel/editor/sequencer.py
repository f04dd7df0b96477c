"""Sequenced playback of animated scenes."""

import logging
import tempfile
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Tuple

from moviepy import VideoClip, VideoFileClip, concatenate_videoclips
from moviepy.video.fx import CrossFadeIn, CrossFadeOut

from ..models import Scene
from ..services.veo import local_path_from_uri
from .audio import attach_narration, write_narration
from .captions import CaptionStyle, add_caption

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SequenceEntry:
    """One playable scene: its clip and optional narration."""

    scene_id: str
    description: str
    video_url: str
    narration_url: Optional[str] = None


@dataclass(frozen=True)
class Sequence:
    """Scenes with video, in script order."""

    entries: Tuple[SequenceEntry, ...]

    def __len__(self) -> int:
        return len(self.entries)

    def __iter__(self):
        return iter(self.entries)

    @property
    def narrated(self) -> int:
        return sum(1 for entry in self.entries if entry.narration_url)


def build_sequence(scenes: Iterable[Scene]) -> Sequence:
    """Collect every scene that has a video, preserving order."""
    return Sequence(tuple(
        SequenceEntry(
            scene_id=scene.id,
            description=scene.description,
            video_url=scene.video_url,
            narration_url=scene.narration_url,
        )
        for scene in scenes
        if scene.video_url
    ))


def load_clip(clip_path: Path) -> VideoFileClip:
    """Open a downloaded scene clip.

    Raises:
        FileNotFoundError: If the clip file doesn't exist.
    """
    if not clip_path.exists():
        raise FileNotFoundError(f"Clip not found: {clip_path}")
    return VideoFileClip(str(clip_path))


def prepare_clip(
    clip: VideoClip,
    entry: SequenceEntry,
    workdir: Path,
    captions: bool = True,
    caption_style: Optional[CaptionStyle] = None,
) -> VideoClip:
    """Give a scene clip its soundtrack and caption.

    The clip's own audio is always dropped: it plays under the narration, or
    silent when the scene has none.
    """
    if entry.narration_url:
        clip = attach_narration(clip, write_narration(entry.narration_url, workdir))
    else:
        clip = clip.without_audio()
    if captions and entry.description:
        clip = add_caption(clip, entry.description, caption_style)
    return clip


def stitch_clips(clips: List[VideoClip], transition_duration: float = 0.0) -> VideoClip:
    """Join clips in playback order, crossfading when ``transition_duration`` > 0.

    Raises:
        ValueError: If clips is empty.
    """
    if not clips:
        raise ValueError("No clips provided")
    if len(clips) == 1:
        return clips[0]

    if transition_duration > 0:
        last = len(clips) - 1
        faded = []
        for index, clip in enumerate(clips):
            effects = []
            if index > 0:
                effects.append(CrossFadeIn(transition_duration))
            if index < last:
                effects.append(CrossFadeOut(transition_duration))
            faded.append(clip.with_effects(effects))
        clips = faded

    return concatenate_videoclips(clips, method="compose")


def export(
    video: VideoClip,
    output_path: Path,
    fps: int = 30,
    preset: str = "medium",
    bitrate: Optional[str] = None,
) -> Path:
    """Encode the sequence as H.264 video with AAC audio."""
    output_path.parent.mkdir(parents=True, exist_ok=True)
    video.write_videofile(
        str(output_path),
        fps=fps,
        codec="libx264",
        audio_codec="aac",
        preset=preset,
        bitrate=bitrate,
    )
    return output_path


def render_sequence(
    sequence: Sequence,
    output_path: Path,
    transition: float = 0.0,
    captions: bool = True,
    caption_style: Optional[CaptionStyle] = None,
    **export_params,
) -> Path:
    """Render the sequence into a single video file.

    Each clip plays muted under its narration with the scene description as a
    caption; clips are joined in order.

    Raises:
        ValueError: If the sequence is empty.
    """
    if not sequence.entries:
        raise ValueError("Sequence has no clips to render")

    sources = []
    with tempfile.TemporaryDirectory(prefix="scriptreel-") as tmp:
        try:
            clips = []
            for entry in sequence:
                source = load_clip(local_path_from_uri(entry.video_url))
                sources.append(source)
                clips.append(prepare_clip(source, entry, Path(tmp), captions, caption_style))

            logger.info(f"Rendering {len(clips)} clips to {output_path} (captions={captions})")
            video = stitch_clips(clips, transition_duration=transition)
            export(video, output_path, **export_params)
        finally:
            for source in sources:
                source.close()

    return output_path
