"""External service integrations."""

from .credentials import (
    ConfigCredentialCheck,
    CredentialCheck,
    PreconditionNotMet,
    StaticCredentialCheck,
)
from .gemini import GeminiClient
from .retry import call_with_retry

__all__ = [
    "ConfigCredentialCheck",
    "CredentialCheck",
    "PreconditionNotMet",
    "StaticCredentialCheck",
    "GeminiClient",
    "call_with_retry",
]
