"""Configuration management."""

import os
from pathlib import Path
from pydantic import BaseModel, Field
from dotenv import load_dotenv

# Load environment variables
load_dotenv()


def _env_flag(name: str) -> bool:
    return os.getenv(name, "").strip().lower() in ("1", "true", "yes")


class Config(BaseModel):
    """Application configuration."""

    # Credentials
    gemini_api_key: str = Field(
        default_factory=lambda: os.getenv("GEMINI_API_KEY") or os.getenv("GOOGLE_API_KEY", ""),
        description="Gemini API key"
    )
    use_vertexai: bool = Field(
        default_factory=lambda: _env_flag("GOOGLE_GENAI_USE_VERTEXAI"),
        description="Route requests through Vertex AI instead of the Gemini API"
    )
    google_cloud_project: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_CLOUD_PROJECT", ""),
        description="Google Cloud project ID (Vertex AI only)"
    )
    google_cloud_location: str = Field(
        default_factory=lambda: os.getenv("GOOGLE_CLOUD_LOCATION", "us-central1"),
        description="Google Cloud region (Vertex AI only)"
    )

    # Paths
    workspace: Path = Field(
        default_factory=lambda: Path(os.getenv("SCRIPTREEL_WORKSPACE", ".")),
        description="Directory for downloaded videos and rendered sequences"
    )

    # Model settings
    text_model: str = Field(default="gemini-3-flash-preview", description="Fast text model")
    analysis_model: str = Field(default="gemini-3-pro-preview", description="Script analysis model")
    image_model: str = Field(default="gemini-2.5-flash-image", description="Standard image model")
    pro_image_model: str = Field(default="gemini-3-pro-image-preview", description="Pro image model")
    tts_model: str = Field(default="gemini-2.5-flash-preview-tts", description="Speech model")
    video_model: str = Field(default="veo-3.1-fast-generate-preview", description="Video model")

    # Language settings
    display_language: str = Field(
        default_factory=lambda: os.getenv("SCRIPTREEL_DISPLAY_LANGUAGE", "Brazilian Portuguese"),
        description="Language of scene descriptions shown to the user"
    )
    narration_language: str = Field(
        default_factory=lambda: os.getenv("SCRIPTREEL_NARRATION_LANGUAGE", "Portuguese"),
        description="Language the narrator speaks"
    )
    voice: str = Field(
        default_factory=lambda: os.getenv("SCRIPTREEL_VOICE", "Kore"),
        description="Prebuilt TTS voice name"
    )

    # Retry and polling
    retries: int = Field(
        default_factory=lambda: int(os.getenv("SCRIPTREEL_RETRIES", "2")),
        description="Retries per external call after the first attempt",
        ge=0,
    )
    retry_delay: float = Field(
        default_factory=lambda: float(os.getenv("SCRIPTREEL_RETRY_DELAY", "2.0")),
        description="Fixed delay between retries in seconds",
        ge=0,
    )
    poll_interval: float = Field(default=8.0, description="Initial video poll interval (s)", gt=0)
    poll_backoff: float = Field(default=1.5, description="Poll interval growth factor", ge=1)
    max_poll_interval: float = Field(default=30.0, description="Poll interval ceiling (s)", gt=0)
    max_poll_time: float = Field(
        default_factory=lambda: float(os.getenv("SCRIPTREEL_MAX_POLL_TIME", "600")),
        description="Maximum seconds to wait for a video job",
        gt=0,
    )

    class Config:
        """Pydantic config."""
        frozen = False

    @property
    def has_credentials(self) -> bool:
        """Whether a Gemini API key or a Vertex AI project is configured."""
        if self.use_vertexai:
            return bool(self.google_cloud_project)
        return bool(self.gemini_api_key)

    def validate_required(self) -> None:
        """Validate that required credentials are set.

        Raises:
            ValueError: If neither an API key nor a Vertex AI project is set.
        """
        if self.use_vertexai and not self.google_cloud_project:
            raise ValueError(
                "GOOGLE_GENAI_USE_VERTEXAI is set but GOOGLE_CLOUD_PROJECT is not"
            )
        if not self.use_vertexai and not self.gemini_api_key:
            raise ValueError("GEMINI_API_KEY not set")


# Global config instance
config = Config()
