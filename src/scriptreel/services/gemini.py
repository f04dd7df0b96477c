"""Google Gemini API client wrapper (google-genai).

This is the only module that talks to the generative service. Every call goes
through :func:`call_with_retry` with the configured budget.
"""

import asyncio
import logging
from pathlib import Path
from typing import Any, Optional, Sequence

import requests
from google import genai
from google.genai import types

from ..config import config
from .payloads import decode_data_uri
from .retry import call_with_retry

logger = logging.getLogger(__name__)


def image_part(uri: str) -> types.Part:
    """Build an inline image part from a data URI."""
    mime, data = decode_data_uri(uri)
    return types.Part.from_bytes(data=data, mime_type=mime)


class GeminiClient:
    """Client wrapper for Gemini text, image, speech and Veo video calls."""

    DOWNLOAD_TIMEOUT = 300

    def __init__(
        self,
        api_key: Optional[str] = None,
        retries: Optional[int] = None,
        retry_delay: Optional[float] = None,
        client: Optional[genai.Client] = None,
    ) -> None:
        """Initialize the Gemini client.

        Args:
            api_key: Gemini API key. Defaults to GEMINI_API_KEY env var.
            retries: Retries per call after the first attempt.
            retry_delay: Fixed delay between retries in seconds.
            client: Pre-built ``genai.Client``. Created from config if not provided.
        """
        self._api_key = api_key or config.gemini_api_key
        self._retries = config.retries if retries is None else retries
        self._retry_delay = config.retry_delay if retry_delay is None else retry_delay

        if client is None:
            if config.use_vertexai:
                client = genai.Client(
                    vertexai=True,
                    project=config.google_cloud_project,
                    location=config.google_cloud_location,
                )
            else:
                if not self._api_key:
                    raise ValueError("Gemini API key not provided. Set GEMINI_API_KEY env var.")
                client = genai.Client(api_key=self._api_key)
        self._client = client

    async def _call(self, label: str, fn) -> Any:
        return await call_with_retry(fn, retries=self._retries, delay=self._retry_delay, label=label)

    async def generate_text(
        self,
        model: str,
        prompt: str,
        schema: Optional[dict] = None,
        use_search: bool = False,
    ) -> str:
        """Generate text, optionally constrained to a JSON schema.

        Search grounding cannot be combined with a JSON response schema, so
        ``schema`` is ignored when ``use_search`` is set.

        Returns:
            The response text ("" when the model returned none).
        """
        kwargs: dict = {}
        if use_search:
            kwargs["tools"] = [types.Tool(google_search=types.GoogleSearch())]
        elif schema is not None:
            kwargs["response_mime_type"] = "application/json"
            kwargs["response_schema"] = schema
        gen_config = types.GenerateContentConfig(**kwargs) if kwargs else None

        logger.debug(f"Text request to {model} ({len(prompt)} chars, search={use_search})")
        response = await self._call(
            f"generate_text[{model}]",
            lambda: self._client.aio.models.generate_content(
                model=model, contents=prompt, config=gen_config
            ),
        )
        return response.text or ""

    async def generate_media(
        self,
        model: str,
        text: str,
        images: Sequence[str] = (),
        aspect_ratio: Optional[str] = None,
        image_size: Optional[str] = None,
        use_search: bool = False,
    ) -> Any:
        """Send reference images followed by an instruction to an image model.

        Args:
            model: Image-capable model id.
            text: Instruction, sent after the images.
            images: Data URIs attached in order.
            aspect_ratio: Output aspect ratio; omitted from the request when None.
            image_size: Resolution tier (pro model only).
            use_search: Enable search grounding.

        Returns:
            The raw ``GenerateContentResponse``.
        """
        parts = [image_part(uri) for uri in images]
        parts.append(types.Part.from_text(text=text))

        kwargs: dict = {}
        if aspect_ratio or image_size:
            kwargs["image_config"] = types.ImageConfig(
                aspect_ratio=aspect_ratio, image_size=image_size
            )
        if use_search:
            kwargs["tools"] = [types.Tool(google_search=types.GoogleSearch())]
        gen_config = types.GenerateContentConfig(**kwargs) if kwargs else None

        logger.debug(f"Media request to {model} with {len(images)} image(s)")
        return await self._call(
            f"generate_media[{model}]",
            lambda: self._client.aio.models.generate_content(
                model=model,
                contents=types.Content(role="user", parts=parts),
                config=gen_config,
            ),
        )

    async def speak(self, model: str, text: str, voice: str) -> Any:
        """Synthesize speech with a prebuilt voice; returns the raw response."""
        gen_config = types.GenerateContentConfig(
            response_modalities=["AUDIO"],
            speech_config=types.SpeechConfig(
                voice_config=types.VoiceConfig(
                    prebuilt_voice_config=types.PrebuiltVoiceConfig(voice_name=voice)
                )
            ),
        )
        return await self._call(
            f"speak[{model}]",
            lambda: self._client.aio.models.generate_content(
                model=model, contents=text, config=gen_config
            ),
        )

    async def submit_video(
        self,
        model: str,
        prompt: str,
        image: str,
        aspect_ratio: str = "16:9",
        resolution: str = "720p",
    ) -> types.GenerateVideosOperation:
        """Start an image-to-video job and return its operation handle."""
        mime, data = decode_data_uri(image)
        return await self._call(
            f"submit_video[{model}]",
            lambda: self._client.aio.models.generate_videos(
                model=model,
                prompt=prompt,
                image=types.Image(image_bytes=data, mime_type=mime),
                config=types.GenerateVideosConfig(
                    number_of_videos=1,
                    resolution=resolution,
                    aspect_ratio=aspect_ratio,
                ),
            ),
        )

    async def refresh_video(
        self, operation: types.GenerateVideosOperation
    ) -> types.GenerateVideosOperation:
        """Fetch a fresh snapshot of a video operation."""
        return await self._call(
            "refresh_video",
            lambda: self._client.aio.operations.get(operation),
        )

    def _download(self, uri: str, dest: Path) -> Path:
        headers = {"x-goog-api-key": self._api_key} if self._api_key else {}
        with requests.get(
            uri, headers=headers, stream=True, timeout=self.DOWNLOAD_TIMEOUT
        ) as response:
            response.raise_for_status()
            dest.parent.mkdir(parents=True, exist_ok=True)
            with open(dest, "wb") as f:
                for chunk in response.iter_content(chunk_size=1 << 20):
                    f.write(chunk)
        logger.debug(f"Downloaded {uri} to {dest}")
        return dest

    async def download(self, uri: str, dest: Path) -> Path:
        """Download an authenticated file URI to ``dest``."""
        return await self._call(
            "download",
            lambda: asyncio.to_thread(self._download, uri, dest),
        )
