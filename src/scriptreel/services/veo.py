"""Google Veo image-to-video generation via the Gemini API."""

import asyncio
import logging
import time
import uuid
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import Any, Optional
from urllib.parse import unquote, urlparse

from ..config import config
from ..errors import GenerationFailed, NoDownloadLink, VideoTimedOut
from .gemini import GeminiClient

logger = logging.getLogger(__name__)


class GenerationStatus(str, Enum):
    """Status of a Veo generation operation."""

    SUBMITTED = "submitted"
    POLLING = "polling"
    COMPLETED = "completed"
    FAILED = "failed"


@dataclass
class GenerationResult:
    """Bookkeeping for one Veo operation."""

    operation_id: str
    status: GenerationStatus
    local_path: Optional[Path] = None
    polls: int = 0
    started_at: Optional[datetime] = None
    completed_at: Optional[datetime] = None
    metadata: dict = field(default_factory=dict)

    @property
    def url(self) -> Optional[str]:
        """Local blob reference (file URI) of the downloaded clip."""
        return self.local_path.resolve().as_uri() if self.local_path else None


def local_path_from_uri(uri: str) -> Path:
    """Turn a ``file://`` blob reference back into a path."""
    if uri.startswith("file://"):
        return Path(unquote(urlparse(uri).path))
    return Path(uri)


class VideoGenerator:
    """Animates a seed image into a clip with Veo.

    This generator handles:
    - Submitting image-to-video jobs
    - Polling the operation with capped backoff until done or timed out
    - Downloading the finished clip into the workspace
    """

    DEFAULT_RESOLUTION = "720p"

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        model: Optional[str] = None,
        output_dir: Optional[Path] = None,
        poll_interval: Optional[float] = None,
        poll_backoff: Optional[float] = None,
        max_poll_interval: Optional[float] = None,
        max_poll_time: Optional[float] = None,
    ) -> None:
        """Initialize the video generator.

        Args:
            client: GeminiClient instance. Created if not provided.
            model: Veo model id.
            output_dir: Where downloaded clips are written.
            poll_interval: Seconds before the first status check.
            poll_backoff: Factor the interval grows by after each check.
            max_poll_interval: Ceiling for the poll interval.
            max_poll_time: Maximum seconds to wait for the job.
        """
        self._client = client or GeminiClient()
        self._model = model or config.video_model
        self._output_dir = output_dir or config.workspace / "videos"
        self._poll_interval = poll_interval if poll_interval is not None else config.poll_interval
        self._poll_backoff = poll_backoff if poll_backoff is not None else config.poll_backoff
        self._max_poll_interval = (
            max_poll_interval if max_poll_interval is not None else config.max_poll_interval
        )
        self._max_poll_time = max_poll_time if max_poll_time is not None else config.max_poll_time

    @property
    def model(self) -> str:
        return self._model

    async def generate(
        self,
        image: str,
        prompt: str = "Cinematic video",
        aspect_ratio: str = "16:9",
        name: Optional[str] = None,
    ) -> str:
        """Animate ``image`` and return a file URI of the clip.

        Args:
            image: Seed image (data URI).
            prompt: Motion description.
            aspect_ratio: Video aspect ratio.
            name: Base file name for the clip.

        Raises:
            GenerationFailed: If the operation finished with an error.
            NoDownloadLink: If the finished operation carries no video.
            VideoTimedOut: If the job did not finish within ``max_poll_time``.
        """
        result = await self.generate_clip(image, prompt, aspect_ratio, name)
        return result.url

    async def generate_clip(
        self,
        image: str,
        prompt: str = "Cinematic video",
        aspect_ratio: str = "16:9",
        name: Optional[str] = None,
    ) -> GenerationResult:
        """Same as :meth:`generate` but returns the full result record."""
        operation = await self._client.submit_video(
            self._model,
            f"Cinematic: {prompt}. Realistic motion.",
            image,
            aspect_ratio=aspect_ratio,
            resolution=self.DEFAULT_RESOLUTION,
        )
        result = GenerationResult(
            operation_id=getattr(operation, "name", None) or "veo-operation",
            status=GenerationStatus.SUBMITTED,
            started_at=datetime.now(),
            metadata={"prompt": prompt, "aspect_ratio": aspect_ratio, "model": self._model},
        )
        logger.info(f"Started Veo generation: {result.operation_id}")

        try:
            operation = await self._poll_operation(operation, result)
            clip_name = name or f"clip-{uuid.uuid4().hex[:8]}"
            result.local_path = await self._save_video(
                operation, self._output_dir / f"{clip_name}.mp4"
            )
        except Exception:
            result.status = GenerationStatus.FAILED
            result.completed_at = datetime.now()
            raise

        result.status = GenerationStatus.COMPLETED
        result.completed_at = datetime.now()
        logger.info(f"Saved video to {result.local_path} after {result.polls} polls")
        return result

    async def _poll_operation(self, operation: Any, result: GenerationResult) -> Any:
        """Poll until the operation reports done, with capped backoff."""
        start_time = time.monotonic()
        interval = self._poll_interval
        result.status = GenerationStatus.POLLING

        while not operation.done:
            elapsed = time.monotonic() - start_time
            if elapsed >= self._max_poll_time:
                logger.warning(f"Operation {result.operation_id} timed out after {elapsed:.1f}s")
                raise VideoTimedOut(result.operation_id, elapsed)

            await asyncio.sleep(min(interval, self._max_poll_time - elapsed))
            operation = await self._client.refresh_video(operation)
            result.polls += 1
            logger.debug(f"Polled {result.operation_id} (attempt {result.polls}, done={operation.done})")
            interval = min(interval * self._poll_backoff, self._max_poll_interval)

        error = getattr(operation, "error", None)
        if error:
            logger.error(f"Operation {result.operation_id} failed: {error}")
            raise GenerationFailed("video", str(error))
        return operation

    async def _save_video(self, operation: Any, dest: Path) -> Path:
        """Write the finished clip to ``dest``, downloading it if needed."""
        response = getattr(operation, "response", None) or getattr(operation, "result", None)
        videos = getattr(response, "generated_videos", None) or []
        video = getattr(videos[0], "video", None) if videos else None

        video_bytes = getattr(video, "video_bytes", None)
        if video_bytes:
            dest.parent.mkdir(parents=True, exist_ok=True)
            dest.write_bytes(video_bytes)
            return dest

        uri = getattr(video, "uri", None)
        if not uri:
            raise NoDownloadLink(f"Operation {getattr(operation, 'name', '')} returned no video link")
        return await self._client.download(uri, dest)
