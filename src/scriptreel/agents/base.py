"""Base agent abstraction."""

import logging
from abc import ABC, abstractmethod
from typing import Generic, Optional, TypeVar

from ..config import config
from ..services.gemini import GeminiClient

logger = logging.getLogger(__name__)

InputT = TypeVar("InputT")
OutputT = TypeVar("OutputT")


class BaseAgent(ABC, Generic[InputT, OutputT]):
    """Abstract base class for text-generation agents.

    Provides shared functionality for agents that send a single prompt to a
    Gemini text model. Subclasses implement ``run`` and build their prompts.
    """

    model_setting: str = "text_model"

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        model: Optional[str] = None,
    ) -> None:
        """Initialize the agent.

        Args:
            client: GeminiClient instance. Created if not provided.
            model: Model to use. Defaults to the config field named by ``model_setting``.
        """
        self._model = model or getattr(config, self.model_setting)
        self._client = client or GeminiClient()
        self._logger = logging.getLogger(f"{__name__}.{self.name}")

    @property
    @abstractmethod
    def name(self) -> str:
        """Return the agent's name."""
        ...

    @property
    def model(self) -> str:
        """Return the model being used."""
        return self._model

    @abstractmethod
    async def run(self, input_data: InputT) -> OutputT:
        """Execute the agent's main task.

        Args:
            input_data: Input data for the agent.

        Returns:
            Structured output from the agent.
        """
        ...

    async def _generate(
        self,
        prompt: str,
        schema: Optional[dict] = None,
        use_search: bool = False,
    ) -> str:
        """Send a prompt to the agent's model and return the response text."""
        self._logger.debug(f"Generating with prompt length: {len(prompt)}")

        try:
            response = await self._client.generate_text(
                self._model, prompt, schema=schema, use_search=use_search
            )
            self._logger.debug(f"Received response of length: {len(response)}")
            return response

        except Exception as e:
            self._logger.error(f"Error generating text: {e}")
            raise
