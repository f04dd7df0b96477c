"""Exceptions raised by the generation pipeline."""


class ScriptreelError(Exception):
    """Base class for pipeline failures surfaced to the user."""


class GenerationFailed(ScriptreelError):
    """The service answered but returned no usable asset."""

    def __init__(self, operation: str, detail: str = "") -> None:
        self.operation = operation
        message = f"{operation} generation failed"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(message)


class NoDownloadLink(ScriptreelError):
    """A finished video job did not carry a download URI."""


class VideoTimedOut(ScriptreelError):
    """A video job did not finish within the allowed wait."""

    def __init__(self, operation_name: str, waited: float) -> None:
        self.operation_name = operation_name
        self.waited = waited
        super().__init__(f"Video operation {operation_name} timed out after {waited:.0f}s")


class AnalysisFailed(ScriptreelError):
    """Script analysis returned something that is not a scene list."""


class SceneNotFound(ScriptreelError, KeyError):
    """No scene with the given id exists in the workspace."""

    def __str__(self) -> str:
        return f"Scene not found: {self.args[0]}"


class AssetNotFound(ScriptreelError, KeyError):
    """No gallery asset with the given id exists in the workspace."""

    def __str__(self) -> str:
        return f"Asset not found: {self.args[0]}"


class MissingPrerequisite(ScriptreelError):
    """A workflow was started before its inputs exist."""


class MissingStyleReference(MissingPrerequisite):
    """Restyling requires an uploaded style reference image."""


class NothingToCompile(MissingPrerequisite):
    """Finalizing requires at least one scene with a video."""
