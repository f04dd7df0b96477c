"""Credential precondition checks for paid-tier calls."""

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from ..config import Config, config

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PreconditionNotMet:
    """Returned by a workflow instead of calling the service."""

    capability: str
    remediation: str

    def __str__(self) -> str:
        return f"{self.capability} unavailable: {self.remediation}"


class CredentialCheck(Protocol):
    """Answers whether the caller has an active credential for paid models."""

    remediation: str

    async def has_selected_key(self) -> bool:
        ...


class ConfigCredentialCheck:
    """Credential check backed by the application config."""

    remediation = (
        "Set GEMINI_API_KEY to a key with billing enabled, or set "
        "GOOGLE_GENAI_USE_VERTEXAI=true and GOOGLE_CLOUD_PROJECT."
    )

    def __init__(self, settings: Optional[Config] = None) -> None:
        self._config = settings or config

    async def has_selected_key(self) -> bool:
        available = self._config.has_credentials
        if not available:
            logger.debug("No paid-tier credential configured")
        return available


class StaticCredentialCheck:
    """Fixed answer, for embedding hosts that decide up front."""

    def __init__(self, available: bool, remediation: str = "Select an API key.") -> None:
        self._available = available
        self.remediation = remediation

    async def has_selected_key(self) -> bool:
        return self._available


async def require_paid_key(check: CredentialCheck, capability: str) -> Optional[PreconditionNotMet]:
    """Return ``PreconditionNotMet`` when the check fails, else None."""
    if await check.has_selected_key():
        return None
    logger.warning(f"{capability} requires a selected API key")
    return PreconditionNotMet(capability=capability, remediation=check.remediation)
