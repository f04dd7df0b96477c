"""Sequence assembly and rendering."""

from .audio import attach_narration, load_audio, write_narration
from .captions import CaptionStyle, add_caption, render_caption
from .sequencer import (
    Sequence,
    SequenceEntry,
    build_sequence,
    export,
    load_clip,
    prepare_clip,
    render_sequence,
    stitch_clips,
)

__all__ = [
    # Audio
    "attach_narration",
    "load_audio",
    "write_narration",
    # Captions
    "CaptionStyle",
    "add_caption",
    "render_caption",
    # Sequencer
    "Sequence",
    "SequenceEntry",
    "build_sequence",
    "export",
    "load_clip",
    "prepare_clip",
    "render_sequence",
    "stitch_clips",
]
