"""Data models for the script-to-video pipeline."""

from .asset import AssetType, GeneratedAsset
from .media import AspectRatio, ImageSize
from .scene import Scene, SceneStatus
from .workspace import MAX_CHARACTER_REFS, Workspace

__all__ = [
    "AssetType",
    "GeneratedAsset",
    "AspectRatio",
    "ImageSize",
    "Scene",
    "SceneStatus",
    "MAX_CHARACTER_REFS",
    "Workspace",
]
