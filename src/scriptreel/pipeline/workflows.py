"""Orchestrated workflows over a single owned workspace.

``Studio`` is the only writer of its ``Workspace``. Each step replaces the
whole snapshot, so ``studio.workspace`` always reflects every completed step,
including scenes left in the ``error`` state by a failed generation.
"""

import logging
from typing import Optional, Sequence, Union

from ..agents.analyzer import AnalysisInput, ScriptAnalyzer
from ..editor.sequencer import Sequence as PlaybackSequence, build_sequence
from ..errors import (
    AnalysisFailed,
    MissingPrerequisite,
    MissingStyleReference,
    NothingToCompile,
)
from ..models import AssetType, GeneratedAsset, Scene, SceneStatus, Workspace
from ..services.credentials import (
    ConfigCredentialCheck,
    CredentialCheck,
    PreconditionNotMet,
    require_paid_key,
)
from ..services.gemini import GeminiClient
from ..services.images import MAX_THUMBNAIL_REFS, ImageGenerator
from ..services.narration import NarrationGenerator
from ..services.veo import VideoGenerator
from .runner import ErrorPolicy, RunReport, SequentialRunner, Task

logger = logging.getLogger(__name__)

SCENE_ASPECT_RATIO = "16:9"
RESTYLED_PREFIX = "Restyled: "


class Studio:
    """Single owning controller for one creative session."""

    def __init__(
        self,
        client: Optional[GeminiClient] = None,
        analyzer: Optional[ScriptAnalyzer] = None,
        images: Optional[ImageGenerator] = None,
        narrator: Optional[NarrationGenerator] = None,
        videos: Optional[VideoGenerator] = None,
        credentials: Optional[CredentialCheck] = None,
        workspace: Optional[Workspace] = None,
    ) -> None:
        if client is None and None in (analyzer, images, narrator, videos):
            client = GeminiClient()
        self._analyzer = analyzer or ScriptAnalyzer(client=client)
        self._images = images or ImageGenerator(client=client)
        self._narrator = narrator or NarrationGenerator(client=client)
        self._videos = videos or VideoGenerator(client=client)
        self._credentials = credentials or ConfigCredentialCheck()
        self._workspace = workspace or Workspace()
        self._sequence: Optional[PlaybackSequence] = None

    @property
    def workspace(self) -> Workspace:
        return self._workspace

    @property
    def sequence(self) -> Optional[PlaybackSequence]:
        """The sequenced playback, set once ``finalize`` has processed every scene."""
        return self._sequence

    def _commit(self, workspace: Workspace) -> Workspace:
        self._workspace = workspace
        return workspace

    def _record(self, asset_type: AssetType, url: str, prompt: str) -> GeneratedAsset:
        asset = GeneratedAsset(type=asset_type, url=url, prompt=prompt)
        self._commit(self._workspace.add_asset(asset))
        return asset

    # Session inputs

    def set_script(self, script: str) -> Workspace:
        """Record a script without analyzing it."""
        return self._commit(self._workspace.with_script(script))

    def add_character_reference(self, uri: str) -> Workspace:
        """Add an uploaded protagonist reference (the set is capped at 4)."""
        return self._commit(self._workspace.add_character_refs([uri]))

    def set_consistency(self, enabled: bool) -> Workspace:
        return self._commit(self._workspace.with_consistency(enabled))

    def set_style_reference(self, uri: Optional[str]) -> Workspace:
        return self._commit(self._workspace.with_style_reference(uri))

    # Script and scenes

    async def analyze_script(self, script: str, use_search: bool = False) -> list[Scene]:
        """Replace the scene list with the analysis of ``script``.

        Raises:
            AnalysisFailed: If analysis fails for any reason. Scenes are untouched.
        """
        try:
            scenes = await self._analyzer.run(AnalysisInput(script=script, use_search=use_search))
        except AnalysisFailed:
            raise
        except Exception as e:
            raise AnalysisFailed(f"Script analysis failed: {e}") from e

        self._sequence = None
        self._commit(self._workspace.with_script(script).with_scenes(scenes))
        return scenes

    async def generate_scene_image(self, scene_id: str) -> str:
        """Generate the image of one scene.

        The scene is marked ``generating`` first, then ``completed`` with its
        image, or ``error`` when generation fails (the failure is re-raised).
        """
        scene = self._workspace.scene(scene_id)
        self._commit(self._workspace.update_scene(scene_id, status=SceneStatus.GENERATING))

        try:
            url = await self._images.generate(
                scene.image_prompt, SCENE_ASPECT_RATIO, self._workspace.active_references
            )
        except Exception:
            self._commit(self._workspace.update_scene(scene_id, status=SceneStatus.ERROR))
            raise

        self._commit(self._workspace.update_scene(
            scene_id, status=SceneStatus.COMPLETED, image_url=url
        ))
        self._record(AssetType.IMAGE, url, scene.description)
        return url

    async def generate_all_scene_images(
        self, policy: ErrorPolicy = ErrorPolicy.CONTINUE
    ) -> RunReport:
        """Generate every scene image in order, one at a time."""
        tasks = [
            Task(scene.id, lambda scene_id=scene.id: self.generate_scene_image(scene_id))
            for scene in self._workspace.scenes
        ]
        report = await SequentialRunner(policy).run(tasks)
        logger.info(f"Storyboard complete: {len(report.succeeded)}/{report.total} scene images")
        return report

    async def animate_scene(
        self, scene_id: str, aspect_ratio: str = SCENE_ASPECT_RATIO
    ) -> Union[str, PreconditionNotMet]:
        """Turn a scene's image into a video clip.

        Raises:
            MissingPrerequisite: If the scene has no image yet.
        """
        scene = self._workspace.scene(scene_id)
        if not scene.image_url:
            raise MissingPrerequisite(f"Scene {scene_id} has no image to animate")

        blocked = await require_paid_key(self._credentials, "video generation")
        if blocked:
            return blocked

        url = await self._videos.generate(
            scene.image_url, scene.image_prompt, aspect_ratio, name=scene_id
        )
        self._commit(self._workspace.update_scene(scene_id, video_url=url))
        self._record(AssetType.VIDEO, url, scene.description)
        return url

    async def finalize(self) -> PlaybackSequence:
        """Narrate every animated scene that lacks narration, then build the sequence.

        Raises:
            NothingToCompile: If no scene has a video.
        """
        if not self._workspace.video_scenes:
            raise NothingToCompile("Generate at least one video before compiling")

        self._sequence = None
        for scene in self._workspace.scenes:
            if not scene.video_url or scene.narration_url:
                continue
            url = await self._narrator.synthesize(scene.description)
            self._commit(self._workspace.update_scene(scene.id, narration_url=url))
            self._record(AssetType.NARRATION, url, f"Narration: {scene.description}")

        self._sequence = build_sequence(self._workspace.scenes)
        logger.info(f"Sequence ready: {len(self._sequence)} clips, {self._sequence.narrated} narrated")
        return self._sequence

    # Thumbnails

    async def create_thumbnail(self, references: Optional[Sequence[str]] = None) -> GeneratedAsset:
        """Generate a thumbnail from the script.

        Args:
            references: Images to condition on. Defaults to the first three
                scene images.
        """
        if not self._workspace.script.strip():
            raise MissingPrerequisite("Add a script before creating a thumbnail")

        if references is None:
            references = self._workspace.scene_image_references(MAX_THUMBNAIL_REFS)
        result = await self._images.thumbnail(
            self._workspace.script, list(references)[:MAX_THUMBNAIL_REFS]
        )
        return self._record(AssetType.THUMBNAIL, result.url, result.prompt)

    async def restyle_thumbnail(self, asset_id: str) -> GeneratedAsset:
        """Apply the style reference to a generated thumbnail, adding a new entry.

        Raises:
            MissingStyleReference: If no style reference was uploaded.
            AssetNotFound: If the gallery has no asset ``asset_id``.
            MissingPrerequisite: If the asset is not an original thumbnail.
        """
        style = self._workspace.style_reference
        if not style:
            raise MissingStyleReference("Upload a style reference image first")

        asset = self._workspace.asset(asset_id)
        if asset.type is not AssetType.THUMBNAIL:
            raise MissingPrerequisite(f"Asset {asset_id} is a {asset.type.value}, not a thumbnail")
        if asset.prompt.startswith(RESTYLED_PREFIX):
            raise MissingPrerequisite(f"Thumbnail {asset_id} is already restyled")

        url = await self._images.restyle(asset.url, style, asset.prompt)
        return self._record(AssetType.THUMBNAIL, url, f"{RESTYLED_PREFIX}{asset.prompt}")

    # Protagonist references

    async def generate_character_variations(self) -> tuple[str, ...]:
        """Derive extra views of the first reference and append them."""
        if not self._workspace.character_refs:
            raise MissingPrerequisite("Upload a protagonist reference first")

        variations = await self._images.character_variations(self._workspace.character_refs[0])
        self._commit(self._workspace.add_character_refs(variations))
        return self._workspace.character_refs

    # Independent creator and editor

    async def create_image(
        self,
        prompt: str,
        aspect_ratio: str = SCENE_ASPECT_RATIO,
        pro: bool = False,
        size: str = "1K",
        use_search: bool = False,
    ) -> Union[str, PreconditionNotMet]:
        """Generate a free-standing image, optionally with the pro model."""
        references = self._workspace.active_references
        if pro:
            blocked = await require_paid_key(self._credentials, "pro image generation")
            if blocked:
                return blocked
            url = await self._images.generate_pro(prompt, size, aspect_ratio, use_search, references)
        else:
            url = await self._images.generate(prompt, aspect_ratio, references)

        self._record(AssetType.IMAGE, url, prompt)
        return url

    async def creator_to_video(
        self, image: str, prompt: str, aspect_ratio: str = SCENE_ASPECT_RATIO
    ) -> Union[str, PreconditionNotMet]:
        """Animate a free-standing image."""
        blocked = await require_paid_key(self._credentials, "video generation")
        if blocked:
            return blocked

        url = await self._videos.generate(image, prompt, aspect_ratio)
        self._record(AssetType.VIDEO, url, prompt)
        return url

    async def edit_image(self, image: str, instruction: str) -> str:
        url = await self._images.edit(image, instruction)
        self._record(AssetType.IMAGE, url, instruction)
        return url

    async def edit_scene_image(self, scene_id: str, instruction: str) -> str:
        """Edit a scene's image in place of the original."""
        scene = self._workspace.scene(scene_id)
        if not scene.image_url:
            raise MissingPrerequisite(f"Scene {scene_id} has no image to edit")

        url = await self._images.edit(scene.image_url, instruction)
        self._commit(self._workspace.update_scene(scene_id, image_url=url))
        self._record(AssetType.IMAGE, url, "Magic edit")
        return url
