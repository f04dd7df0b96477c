"""Image generation with protagonist consistency."""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Sequence

from ..agents.optimizer import OptimizeMode, PromptOptimizer
from ..config import config
from ..errors import GenerationFailed
from .gemini import GeminiClient
from .payloads import first_inline_payload, to_data_uri

logger = logging.getLogger(__name__)

IDENTITY_RULES = """IDENTITY RULES:
1. PROTAGONIST: Use references ONLY for characters labeled 'PROTAGONIST'.
2. OTHERS: For anyone else, generate unique faces that match the scene's historical/geographic context. DO NOT use reference faces for these people.

STYLE: {prompt}"""

PRO_IDENTITY_RULES = """PRO IDENTITY MANAGEMENT:
- references ONLY for 'PROTAGONIST'.
- all other figures MUST have unique, era-accurate, diverse faces.

STYLE: {prompt}"""

VARIATION_SCENARIOS = (
    "Full-body studio portrait, neutral background.",
    "Candid full-body shot walking in a city.",
    "Dramatic low-angle shot in nature.",
)

RESTYLE_INSTRUCTION = (
    "ACT AS A HIGH-END ART DIRECTOR. Redraw the content and composition of the FIRST "
    "image using the EXACT artistic style, lighting, color palette, and mood of the "
    "SECOND image. Maintain the original subject matter: {prompt}"
)

# Quick actions offered next to the free-text edit box.
EDIT_PRESETS = {
    "studio-lighting": "Add professional studio lighting, rim light and soft shadows",
    "max-realism": "Increase skin detail, pores, organic textures and cinematic sharpness",
    "golden-hour": "Change the lighting to sunset, warm tones and soft natural light",
    "remove-background": "Remove the background and keep only the main subject with clean edges",
}

DEFAULT_CONCEPT = "High impact cinematic shot."
MAX_THUMBNAIL_REFS = 3


@dataclass(frozen=True)
class ThumbnailResult:
    """Generated thumbnail and the prompt that produced it."""

    url: str
    prompt: str


def extract_image(response: Any, operation: str) -> str:
    """Return the first inline payload of ``response`` as a data URI.

    Raises:
        GenerationFailed: If the response carries no inline payload.
    """
    payload = first_inline_payload(response)
    if payload is None:
        raise GenerationFailed(operation, "no image in response")
    data, mime_type = payload
    return to_data_uri(data, mime_type or "image/png")


class ImageGenerator:
    """Generates scene images, character sheets, thumbnails and edits."""

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        optimizer: Optional[PromptOptimizer] = None,
        model: Optional[str] = None,
        pro_model: Optional[str] = None,
        concept_model: Optional[str] = None,
    ) -> None:
        """Initialize the image generator.

        Args:
            client: GeminiClient instance. Created if not provided.
            optimizer: Prompt optimizer sharing the same client by default.
            model: Standard image model.
            pro_model: High-resolution image model.
            concept_model: Text model used for thumbnail concepts.
        """
        self._client = client or GeminiClient()
        self._optimizer = optimizer or PromptOptimizer(client=self._client)
        self._model = model or config.image_model
        self._pro_model = pro_model or config.pro_image_model
        self._concept_model = concept_model or config.text_model

    @property
    def model(self) -> str:
        return self._model

    @property
    def pro_model(self) -> str:
        return self._pro_model

    async def generate(
        self,
        prompt: str,
        aspect_ratio: str = "16:9",
        references: Sequence[str] = (),
    ) -> str:
        """Generate an image from an optimized prompt.

        Args:
            prompt: Plain description of the image.
            aspect_ratio: Output aspect ratio.
            references: Protagonist reference images (data URIs).

        Returns:
            Data URI of the generated image.
        """
        optimized = await self._optimizer.optimize(prompt)
        logger.info(f"Generating image ({aspect_ratio}, {len(references)} refs): {prompt[:50]}...")
        response = await self._client.generate_media(
            self._model,
            IDENTITY_RULES.format(prompt=optimized),
            images=references,
            aspect_ratio=aspect_ratio,
        )
        return extract_image(response, "image")

    async def generate_pro(
        self,
        prompt: str,
        size: str = "1K",
        aspect_ratio: str = "16:9",
        use_search: bool = False,
        references: Sequence[str] = (),
    ) -> str:
        """Generate a high-resolution image with the pro model.

        Callers are expected to have verified the paid-tier credential.
        """
        optimized = await self._optimizer.optimize(prompt)
        logger.info(f"Generating pro image ({size}, {aspect_ratio}, search={use_search})")
        response = await self._client.generate_media(
            self._pro_model,
            PRO_IDENTITY_RULES.format(prompt=optimized),
            images=references,
            aspect_ratio=aspect_ratio,
            image_size=size,
            use_search=use_search,
        )
        return extract_image(response, "pro image")

    async def character_variations(self, face: str) -> list[str]:
        """Render the protagonist in each fixed scenario, one call per scenario.

        Scenarios that come back without an image are skipped.
        """
        results: list[str] = []
        for scenario in VARIATION_SCENARIOS:
            response = await self._client.generate_media(
                self._model,
                f"Full-body view of THIS PROTAGONIST. 100% facial fidelity. Scenario: {scenario}",
                images=[face],
                aspect_ratio="9:16",
            )
            payload = first_inline_payload(response)
            if payload is None:
                logger.warning(f"No variation returned for scenario: {scenario}")
                continue
            data, mime_type = payload
            results.append(to_data_uri(data, mime_type or "image/png"))
        logger.info(f"Generated {len(results)} character variations")
        return results

    async def thumbnail(self, script: str, references: Sequence[str] = ()) -> ThumbnailResult:
        """Generate a thumbnail: concept text first, then the image."""
        concept = await self._client.generate_text(
            self._concept_model,
            f"Viral YouTube thumbnail concept for: {script}. Prompt in English.",
        )
        optimized = await self._optimizer.optimize(
            concept.strip() or DEFAULT_CONCEPT, OptimizeMode.THUMBNAIL
        )
        response = await self._client.generate_media(
            self._model,
            f"PROTAGONIST: Use references. CONCEPT: {optimized}",
            images=list(references)[:MAX_THUMBNAIL_REFS],
            aspect_ratio="16:9",
        )
        return ThumbnailResult(url=extract_image(response, "thumbnail"), prompt=optimized)

    async def restyle(self, source: str, style_reference: str, prompt: str) -> str:
        """Redraw ``source`` in the style of ``style_reference``."""
        response = await self._client.generate_media(
            self._model,
            RESTYLE_INSTRUCTION.format(prompt=prompt),
            images=[source, style_reference],
            aspect_ratio="16:9",
        )
        return extract_image(response, "restyle")

    async def edit(self, source: str, instruction: str) -> str:
        """Apply a free-text edit to ``source``. The instruction is not optimized."""
        instruction = EDIT_PRESETS.get(instruction, instruction)
        response = await self._client.generate_media(
            self._model,
            f"PHOTO EDIT: {instruction}. Professional photorealistic blending.",
            images=[source],
        )
        return extract_image(response, "edit")
