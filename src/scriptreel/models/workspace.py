"""Session workspace model.

A ``Workspace`` is an immutable snapshot of everything a session has produced:
the script, its scenes, the gallery, and the protagonist references. Every
mutation returns a new snapshot; the owning controller swaps the whole value.
"""

from typing import Optional, Tuple
from pydantic import BaseModel, Field

from ..errors import AssetNotFound, SceneNotFound
from .asset import GeneratedAsset
from .scene import Scene

MAX_CHARACTER_REFS = 4


class Workspace(BaseModel):
    """Memory-resident state of one creative session."""

    script: str = Field("", description="Script text the scenes came from")
    scenes: Tuple[Scene, ...] = Field(default_factory=tuple, description="Scenes in script order")
    gallery: Tuple[GeneratedAsset, ...] = Field(
        default_factory=tuple, description="Every generated asset, newest first"
    )
    character_refs: Tuple[str, ...] = Field(
        default_factory=tuple,
        description="Protagonist reference images (data URIs)",
        max_length=MAX_CHARACTER_REFS,
    )
    consistency_enabled: bool = Field(True, description="Condition image calls on the references")
    style_reference: Optional[str] = Field(None, description="Style image for thumbnail restyling")

    class Config:
        """Pydantic config."""
        frozen = True

    def _replace(self, **changes) -> "Workspace":
        return self.model_copy(update=changes)

    # Scenes

    def with_script(self, script: str) -> "Workspace":
        return self._replace(script=script)

    def with_scenes(self, scenes) -> "Workspace":
        """Replace the whole scene list."""
        return self._replace(scenes=tuple(scenes))

    def scene(self, scene_id: str) -> Scene:
        for scene in self.scenes:
            if scene.id == scene_id:
                return scene
        raise SceneNotFound(scene_id)

    def replace_scene(self, scene: Scene) -> "Workspace":
        self.scene(scene.id)
        return self.with_scenes(
            scene if existing.id == scene.id else existing for existing in self.scenes
        )

    def update_scene(self, scene_id: str, **changes) -> "Workspace":
        """Return a workspace where one scene has the given fields replaced."""
        return self.replace_scene(self.scene(scene_id).updated(**changes))

    @property
    def video_scenes(self) -> Tuple[Scene, ...]:
        return tuple(scene for scene in self.scenes if scene.video_url)

    def scene_image_references(self, limit: int = 3) -> Tuple[str, ...]:
        """Images of the first scenes that have one, used to seed thumbnails."""
        images = [scene.image_url for scene in self.scenes if scene.image_url]
        return tuple(images[:limit])

    # Gallery

    def add_asset(self, asset: GeneratedAsset) -> "Workspace":
        """Prepend an asset to the gallery."""
        return self._replace(gallery=(asset,) + self.gallery)

    def asset(self, asset_id: str) -> GeneratedAsset:
        for asset in self.gallery:
            if asset.id == asset_id:
                return asset
        raise AssetNotFound(asset_id)

    # Protagonist references

    def add_character_refs(self, refs) -> "Workspace":
        """Append references, keeping at most ``MAX_CHARACTER_REFS`` (oldest win)."""
        combined = self.character_refs + tuple(refs)
        return self._replace(character_refs=combined[:MAX_CHARACTER_REFS])

    def clear_character_refs(self) -> "Workspace":
        return self._replace(character_refs=())

    def with_consistency(self, enabled: bool) -> "Workspace":
        return self._replace(consistency_enabled=enabled)

    @property
    def active_references(self) -> Tuple[str, ...]:
        """References to send with image calls, honoring the consistency toggle."""
        return self.character_refs if self.consistency_enabled else ()

    def with_style_reference(self, uri: Optional[str]) -> "Workspace":
        return self._replace(style_reference=uri)
