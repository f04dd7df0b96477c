"""Gallery asset model."""

import uuid
from datetime import datetime, timezone
from enum import Enum
from pydantic import BaseModel, Field


class AssetType(str, Enum):
    """Kind of generated asset."""
    IMAGE = "image"
    VIDEO = "video"
    NARRATION = "narration"
    THUMBNAIL = "thumbnail"


def _asset_id() -> str:
    return uuid.uuid4().hex[:9]


class GeneratedAsset(BaseModel):
    """An entry in the gallery of everything produced during a session."""

    id: str = Field(default_factory=_asset_id, description="Asset identifier")
    type: AssetType = Field(..., description="Asset kind")
    url: str = Field(..., description="Data URI or file URI of the asset")
    prompt: str = Field("", description="Prompt or caption that produced the asset")
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc),
        description="Creation time (UTC)"
    )

    class Config:
        """Pydantic config."""
        frozen = True
