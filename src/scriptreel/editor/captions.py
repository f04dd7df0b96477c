"""Scene description captions over sequence clips."""

from dataclasses import dataclass
from typing import Optional

from moviepy import CompositeVideoClip, TextClip, VideoClip


@dataclass(frozen=True)
class CaptionStyle:
    """Look of the caption strip under each clip."""

    font: Optional[str] = None
    font_size: int = 32
    color: str = "white"
    background_color: Optional[str] = "rgba(0,0,0,0.7)"
    margin: int = 40
    width_ratio: float = 0.9


DEFAULT_CAPTION = CaptionStyle()


def render_caption(text: str, width: int, style: CaptionStyle = DEFAULT_CAPTION) -> TextClip:
    """Render ``text`` wrapped to ``width`` pixels."""
    params = {
        "text": text,
        "font_size": style.font_size,
        "color": style.color,
        "method": "caption",
        "size": (width, None),
        "text_align": "center",
    }
    if style.font:
        params["font"] = style.font
    if style.background_color:
        params["bg_color"] = style.background_color
    return TextClip(**params)


def add_caption(
    video: VideoClip, text: str, style: Optional[CaptionStyle] = None
) -> CompositeVideoClip:
    """Overlay ``text`` at the bottom of ``video`` for its whole duration.

    The video keeps its own audio track.
    """
    style = style or DEFAULT_CAPTION
    caption = render_caption(text, int(video.w * style.width_ratio), style)
    caption = caption.with_duration(video.duration).with_position(
        ("center", max(video.h - caption.h - style.margin, 0))
    )
    return CompositeVideoClip([video, caption])
