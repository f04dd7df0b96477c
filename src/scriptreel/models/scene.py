"""Scene data model."""

from enum import Enum
from typing import Optional
from pydantic import BaseModel, Field, model_validator


class SceneStatus(str, Enum):
    """Image generation status of a scene."""
    IDLE = "idle"
    GENERATING = "generating"
    COMPLETED = "completed"
    ERROR = "error"


class Scene(BaseModel):
    """One narrative beat extracted from a script."""

    id: str = Field(..., description="Unique scene identifier")
    timestamp: str = Field("", description="Timestamp label from the script")
    description: str = Field(..., description="Short visual description in the display language")
    image_prompt: str = Field(..., description="Detailed image prompt in English")
    status: SceneStatus = Field(default=SceneStatus.IDLE, description="Image generation status")
    image_url: Optional[str] = Field(None, description="Generated image (data URI)")
    video_url: Optional[str] = Field(None, description="Generated clip (file URI)")
    narration_url: Optional[str] = Field(None, description="Narration audio (data URI)")

    class Config:
        """Pydantic config."""
        frozen = True

    @model_validator(mode="after")
    def _check_asset_order(self) -> "Scene":
        # image -> video -> narration
        if self.video_url and not self.image_url:
            raise ValueError(f"Scene {self.id}: video requires an image")
        if self.narration_url and not self.video_url:
            raise ValueError(f"Scene {self.id}: narration requires a video")
        return self

    def updated(self, **changes) -> "Scene":
        """Return a validated copy with the given fields replaced."""
        return Scene.model_validate({**self.model_dump(), **changes})
