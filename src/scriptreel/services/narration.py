"""Narration synthesis with Gemini TTS."""

import logging
from typing import Optional

from ..config import config
from ..errors import GenerationFailed
from .gemini import GeminiClient
from .payloads import first_inline_payload, parse_mime, pcm_to_wav, to_data_uri

logger = logging.getLogger(__name__)


class NarrationGenerator:
    """Speaks scene descriptions with a fixed language and voice."""

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        model: Optional[str] = None,
        voice: Optional[str] = None,
        language: Optional[str] = None,
    ) -> None:
        self._client = client or GeminiClient()
        self._model = model or config.tts_model
        self._voice = voice or config.voice
        self._language = language or config.narration_language

    @property
    def voice(self) -> str:
        return self._voice

    async def synthesize(self, text: str) -> str:
        """Narrate ``text`` and return it as a WAV data URI.

        Raises:
            GenerationFailed: If the response carries no audio.
        """
        response = await self._client.speak(
            self._model, f"Narrate in {self._language}: {text}", self._voice
        )
        payload = first_inline_payload(response)
        if payload is None:
            raise GenerationFailed("narration", "no audio in response")

        audio, mime_type = payload
        mime_base, params = parse_mime(mime_type)
        if mime_base in (None, "audio/l16", "audio/pcm"):
            # Gemini TTS returns headerless 16-bit PCM
            audio = pcm_to_wav(
                audio,
                rate=int(params.get("rate", "24000")),
                channels=int(params.get("channels", "1")),
            )
            mime_base = "audio/wav"

        logger.info(f"Synthesized narration ({len(text)} chars, {len(audio)} bytes)")
        return to_data_uri(audio, mime_base)
