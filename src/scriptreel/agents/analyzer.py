"""Script analyzer: splits a script into scenes with bilingual fields."""

import json
from dataclasses import dataclass
from typing import Optional

from ..config import config
from ..errors import AnalysisFailed
from ..models import Scene, SceneStatus
from ..services.gemini import GeminiClient
from .base import BaseAgent

PROMPT_TEMPLATE = """Analyze this YouTube script.
1. 'description' MUST be in {language}.
2. 'imagePrompt' MUST be in ENGLISH.
3. Identify 'PROTAGONIST' when present.
4. Describe other characters as 'SECONDARY CHARACTERS' with unique faces and context-appropriate features (ethnicity, age, era clothing).

Script:
{script}"""

SEARCH_SUFFIX = """

Return ONLY a JSON object of the form {"scenes": [{"timestamp": "...", "description": "...", "imagePrompt": "..."}]}."""


def scene_schema(language: str) -> dict:
    """Response schema for the scene list."""
    return {
        "type": "OBJECT",
        "properties": {
            "scenes": {
                "type": "ARRAY",
                "items": {
                    "type": "OBJECT",
                    "properties": {
                        "timestamp": {"type": "STRING"},
                        "description": {
                            "type": "STRING",
                            "description": f"Short visual description in {language} for the user.",
                        },
                        "imagePrompt": {
                            "type": "STRING",
                            "description": "Detailed visual prompt in ENGLISH for the image generator.",
                        },
                    },
                    "required": ["timestamp", "description", "imagePrompt"],
                },
            }
        },
        "required": ["scenes"],
    }


@dataclass
class AnalysisInput:
    """Input data for the script analyzer."""

    script: str
    use_search: bool = False


class ScriptAnalyzer(BaseAgent[AnalysisInput, list[Scene]]):
    """Agent that decomposes a script into scenes.

    Each scene carries a description in the display language and an English
    image prompt. Scene ids are derived from position (``scene-0``, ...).
    """

    model_setting = "analysis_model"

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        model: Optional[str] = None,
        language: Optional[str] = None,
    ) -> None:
        super().__init__(client=client, model=model)
        self._language = language or config.display_language

    @property
    def name(self) -> str:
        return "ScriptAnalyzer"

    async def run(self, input_data: AnalysisInput) -> list[Scene]:
        """Analyze the script.

        Raises:
            ValueError: If the script is empty.
            AnalysisFailed: If the response is not a valid scene list.
        """
        if not input_data.script.strip():
            raise ValueError("Script cannot be empty")

        self._logger.info(
            f"Analyzing script ({len(input_data.script)} chars, search={input_data.use_search})"
        )
        prompt = PROMPT_TEMPLATE.format(language=self._language, script=input_data.script)
        if input_data.use_search:
            prompt += SEARCH_SUFFIX

        response = await self._generate(
            prompt,
            schema=scene_schema(self._language),
            use_search=input_data.use_search,
        )
        scenes = self._parse_response(response)
        self._logger.info(f"Extracted {len(scenes)} scenes")
        return scenes

    def _parse_response(self, response: str) -> list[Scene]:
        """Parse the model's JSON into Scene objects."""
        try:
            data = self._load_json(response)
        except json.JSONDecodeError as e:
            self._logger.debug(f"Raw response: {response}")
            raise AnalysisFailed(f"Invalid JSON in analysis response: {e}") from e

        scenes_data = data.get("scenes") if isinstance(data, dict) else None
        if not isinstance(scenes_data, list):
            raise AnalysisFailed("Analysis response does not contain a scenes array")

        scenes: list[Scene] = []
        for i, item in enumerate(scenes_data):
            if not isinstance(item, dict):
                raise AnalysisFailed(f"Scene {i} is not an object")
            try:
                scenes.append(Scene(
                    id=f"scene-{i}",
                    timestamp=str(item.get("timestamp", "")),
                    description=item["description"],
                    image_prompt=item["imagePrompt"],
                    status=SceneStatus.IDLE,
                ))
            except (KeyError, ValueError) as e:
                raise AnalysisFailed(f"Scene {i} is missing required fields: {e}") from e
        return scenes

    @classmethod
    def _load_json(cls, response: str):
        """Parse the response as JSON, falling back to extracting an embedded object."""
        try:
            return json.loads(response)
        except json.JSONDecodeError:
            return json.loads(cls._extract_json(response))

    @staticmethod
    def _extract_json(response: str) -> str:
        """Extract JSON from a response that may contain markdown fences."""
        text = response.strip()
        if "```" in text:
            start = text.find("```") + 3
            end = text.find("```", start)
            if end > start:
                block = text[start:end].strip()
                if block.startswith("json"):
                    block = block[4:]
                return block.strip()

        start = text.find("{")
        end = text.rfind("}")
        if start != -1 and end > start:
            return text[start:end + 1]
        return text
