"""Prompt optimizer: rewrites plain descriptions into technical image prompts."""

from enum import Enum
from typing import Optional

from ..services.gemini import GeminiClient
from .base import BaseAgent


class OptimizeMode(str, Enum):
    """Which professional persona rewrites the prompt."""
    CINEMATIC = "cinematic"
    THUMBNAIL = "thumbnail"


TEMPLATES = {
    OptimizeMode.CINEMATIC: """ACT AS AN EXPERT CINEMATOGRAPHER.
Rewrite the following description into a technical prompt for a high-fidelity image generator.
INCLUDE: Camera gear (e.g., 35mm lens), Lighting (volumetric, rim light), and Texture details.
CRITICAL: Ensure secondary characters are described with historical and ethnic details suitable to the era.""",
    OptimizeMode.THUMBNAIL: """ACT AS A YOUTUBE THUMBNAIL STRATEGIST AND PHOTOGRAPHER.
Rewrite this into a prompt for a high-CTR thumbnail.
- Use close-up or mid-shot for emotional impact.
- Dramatic lighting: High contrast, vibrant but natural colors.
- Style: Photorealistic, professional photography.""",
}


class PromptOptimizer(BaseAgent[str, str]):
    """Turns a raw description into a photorealistic generation prompt."""

    model_setting = "text_model"

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        model: Optional[str] = None,
        mode: OptimizeMode = OptimizeMode.CINEMATIC,
    ) -> None:
        super().__init__(client=client, model=model)
        self._mode = mode

    @property
    def name(self) -> str:
        return "PromptOptimizer"

    async def run(self, input_data: str) -> str:
        return await self.optimize(input_data, self._mode)

    async def optimize(self, raw: str, mode: OptimizeMode = OptimizeMode.CINEMATIC) -> str:
        """Rewrite ``raw`` with the template for ``mode``.

        Returns:
            The model's text verbatim, or ``raw`` when the model returned nothing.
        """
        prompt = f"{TEMPLATES[mode]}\n\nOriginal Description: {raw}\n\nProfessional Prompt:"
        text = await self._generate(prompt)
        if not text.strip():
            self._logger.info("Optimizer returned no text, keeping the raw prompt")
            return raw
        return text
