"""CLI entry point for the script-to-video generator."""

import asyncio
import logging
from pathlib import Path
from typing import List, Optional

import typer

from . import __version__
from .config import config
from .errors import ScriptreelError
from .models import AspectRatio, ImageSize
from .services.credentials import PreconditionNotMet
from .services.payloads import file_to_data_uri, write_data_uri

app = typer.Typer(
    name="scriptreel",
    help="AI-powered script-to-video storyboard generator",
    no_args_is_help=True
)


def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.INFO
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        typer.echo(f"scriptreel version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Optional[bool] = typer.Option(
        None,
        "--version",
        "-V",
        callback=version_callback,
        is_eager=True,
        help="Show version and exit"
    )
) -> None:
    """Scriptreel - Turn a script into a narrated storyboard video using AI."""
    pass


def _studio(references: Optional[List[Path]] = None, consistency: bool = True):
    """Build a Studio, exiting with a message when credentials are missing."""
    from .pipeline import Studio

    try:
        config.validate_required()
        studio = Studio()
    except ValueError as e:
        typer.echo(f"❌ Configuration error: {e}")
        raise typer.Exit(1)

    for ref in references or []:
        if not ref.exists():
            typer.echo(f"❌ Reference image not found: {ref}")
            raise typer.Exit(1)
        studio.add_character_reference(file_to_data_uri(ref))
    studio.set_consistency(consistency)
    return studio


def _read_script(script: Path) -> str:
    if not script.exists():
        typer.echo(f"❌ Script not found: {script}")
        raise typer.Exit(1)
    text = script.read_text(encoding="utf-8")
    if not text.strip():
        typer.echo(f"❌ Script is empty: {script}")
        raise typer.Exit(1)
    return text


def _run(coro):
    """Run a workflow coroutine, turning pipeline failures into exit code 1."""
    try:
        return asyncio.run(coro)
    except ScriptreelError as e:
        typer.echo(f"❌ {e}")
        raise typer.Exit(1)


def _check_blocked(result) -> None:
    if isinstance(result, PreconditionNotMet):
        typer.echo(f"🔑 {result}")
        raise typer.Exit(2)


def _preview(text: str, width: int = 70) -> str:
    return text[:width] + "..." if len(text) > width else text


ScriptArg = typer.Argument(..., help="Path to the script text file")
SearchOpt = typer.Option(False, "--search", help="Ground script analysis with web search")
ReferenceOpt = typer.Option(
    None, "--reference", "-r", help="Protagonist reference image (repeatable, max 4)"
)
ConsistencyOpt = typer.Option(
    True, "--consistency/--no-consistency", help="Condition scene images on the references"
)
VerboseOpt = typer.Option(False, "--verbose", "-v", help="Enable verbose logging")


@app.command()
def analyze(
    script: Path = ScriptArg,
    search: bool = SearchOpt,
    verbose: bool = VerboseOpt,
) -> None:
    """Split a script into scenes and show them."""
    setup_logging(verbose)
    text = _read_script(script)
    studio = _studio()

    typer.echo(f"🎬 Analyzing: {script}")
    scenes = _run(studio.analyze_script(text, use_search=search))

    typer.echo(f"\n📽️  {len(scenes)} scenes:")
    for scene in scenes:
        typer.echo(f"   • {scene.id} [{scene.timestamp}] {scene.description}")
        typer.echo(f"     → {_preview(scene.image_prompt)}")


@app.command()
def storyboard(
    script: Path = ScriptArg,
    output: Path = typer.Option(
        Path("./storyboard"), "--output", "-o", help="Directory for scene images"
    ),
    search: bool = SearchOpt,
    reference: Optional[List[Path]] = ReferenceOpt,
    consistency: bool = ConsistencyOpt,
    variations: bool = typer.Option(
        False, "--variations", help="Derive extra protagonist views from the first reference"
    ),
    verbose: bool = VerboseOpt,
) -> None:
    """Analyze a script and generate every scene image."""
    setup_logging(verbose)
    text = _read_script(script)
    studio = _studio(reference, consistency)

    async def flow():
        if variations:
            refs = await studio.generate_character_variations()
            typer.echo(f"   Protagonist references: {len(refs)}")
        scenes = await studio.analyze_script(text, use_search=search)
        typer.echo(f"   Scenes: {len(scenes)}")
        return await studio.generate_all_scene_images()

    typer.echo(f"🖼️  Storyboarding: {script}")
    report = _run(flow())

    for scene in studio.workspace.scenes:
        if scene.image_url:
            path = write_data_uri(scene.image_url, output / f"{scene.id}.png")
            typer.echo(f"   ✅ {scene.id} → {path}")
        else:
            typer.echo(f"   ❌ {scene.id}: {scene.status.value}")

    typer.echo(f"\n✅ Storyboard complete: {len(report.succeeded)}/{report.total} images")


@app.command()
def produce(
    script: Path = ScriptArg,
    output: Path = typer.Option(
        Path("output/final.mp4"), "--output", "-o", help="Rendered sequence path"
    ),
    search: bool = SearchOpt,
    reference: Optional[List[Path]] = ReferenceOpt,
    consistency: bool = ConsistencyOpt,
    limit: Optional[int] = typer.Option(
        None, "--limit", "-l", help="Animate only the first N scenes"
    ),
    transition: float = typer.Option(
        0.0, "--transition", "-t", help="Crossfade between clips in seconds"
    ),
    captions: bool = typer.Option(
        True, "--captions/--no-captions", help="Show scene descriptions over the clips"
    ),
    verbose: bool = VerboseOpt,
) -> None:
    """Run the whole pipeline: scenes, images, clips, narration, final video."""
    from .editor import render_sequence

    setup_logging(verbose)
    text = _read_script(script)
    studio = _studio(reference, consistency)

    async def flow():
        scenes = await studio.analyze_script(text, use_search=search)
        typer.echo(f"   Scenes: {len(scenes)}")
        await studio.generate_all_scene_images()

        animated = [s for s in studio.workspace.scenes if s.image_url]
        if limit and limit > 0:
            animated = animated[:limit]
        for scene in animated:
            typer.echo(f"   ⏳ Animating {scene.id}...")
            try:
                result = await studio.animate_scene(scene.id)
            except ScriptreelError as e:
                typer.echo(f"   ❌ {scene.id}: {e}")
                continue
            _check_blocked(result)
            typer.echo(f"   ✅ {scene.id} animated")

        typer.echo("   🎙️  Narrating...")
        return await studio.finalize()

    typer.echo(f"🎬 Producing: {script}")
    sequence = _run(flow())

    typer.echo(f"   Rendering {len(sequence)} clips to {output}...")
    try:
        render_sequence(sequence, output, transition=transition, captions=captions)
    except Exception as e:
        typer.echo(f"❌ Error rendering sequence: {e}")
        raise typer.Exit(1)
    typer.echo(f"✅ Video assembled: {output}")


@app.command()
def image(
    prompt: str = typer.Argument(..., help="Description of the image"),
    output: Path = typer.Option(Path("./image.png"), "--output", "-o", help="Output image path"),
    aspect_ratio: AspectRatio = typer.Option(
        AspectRatio.LANDSCAPE, "--aspect-ratio", "-a", help="Image aspect ratio"
    ),
    pro: bool = typer.Option(False, "--pro", help="Use the high-resolution pro model"),
    size: ImageSize = typer.Option(ImageSize.SIZE_1K, "--size", help="Pro resolution tier"),
    search: bool = typer.Option(False, "--search", help="Ground the pro model with web search"),
    reference: Optional[List[Path]] = ReferenceOpt,
    animate: Optional[Path] = typer.Option(
        None, "--animate", help="Also animate the image into this video path"
    ),
    verbose: bool = VerboseOpt,
) -> None:
    """Generate a single image, optionally animating it."""
    setup_logging(verbose)
    studio = _studio(reference)

    async def flow():
        url = await studio.create_image(
            prompt, aspect_ratio.value, pro=pro, size=size.value, use_search=search
        )
        _check_blocked(url)
        video = None
        if animate:
            video = await studio.creator_to_video(url, prompt, aspect_ratio.value)
            _check_blocked(video)
        return url, video

    typer.echo(f"🎨 Generating image: {_preview(prompt)}")
    url, video = _run(flow())
    typer.echo(f"✅ Image saved: {write_data_uri(url, output)}")
    if video:
        from .services.veo import local_path_from_uri

        animate.parent.mkdir(parents=True, exist_ok=True)
        local_path_from_uri(video).replace(animate)
        typer.echo(f"✅ Video saved: {animate}")


@app.command()
def edit(
    source: Path = typer.Argument(..., help="Image to edit"),
    instruction: str = typer.Argument(
        ..., help="Edit instruction, or a preset: studio-lighting, max-realism, "
                  "golden-hour, remove-background"
    ),
    output: Path = typer.Option(Path("./edited.png"), "--output", "-o", help="Output image path"),
    verbose: bool = VerboseOpt,
) -> None:
    """Edit an image with a free-text instruction."""
    setup_logging(verbose)
    if not source.exists():
        typer.echo(f"❌ Image not found: {source}")
        raise typer.Exit(1)
    studio = _studio()

    url = _run(studio.edit_image(file_to_data_uri(source), instruction))
    typer.echo(f"✅ Edited image saved: {write_data_uri(url, output)}")


@app.command()
def thumbnail(
    script: Path = ScriptArg,
    output: Path = typer.Option(Path("./thumbnail.png"), "--output", "-o", help="Output path"),
    style: Optional[Path] = typer.Option(
        None, "--style", "-s", help="Style reference; also writes a restyled copy"
    ),
    scene_image: Optional[List[Path]] = typer.Option(
        None, "--scene-image", help="Scene image used as reference (max 3)"
    ),
    verbose: bool = VerboseOpt,
) -> None:
    """Create a thumbnail for a script, optionally restyled."""
    setup_logging(verbose)
    text = _read_script(script)
    studio = _studio()

    async def flow():
        studio.set_script(text)
        original = await studio.create_thumbnail(
            [file_to_data_uri(path) for path in scene_image or []]
        )
        restyled = None
        if style:
            studio.set_style_reference(file_to_data_uri(style))
            restyled = await studio.restyle_thumbnail(original.id)
        return original, restyled

    typer.echo(f"🖼️  Creating thumbnail for {script}")
    original, restyled = _run(flow())
    typer.echo(f"✅ Thumbnail saved: {write_data_uri(original.url, output)}")
    typer.echo(f"   Prompt: {_preview(original.prompt)}")
    if restyled:
        styled_path = output.with_name(f"{output.stem}-styled{output.suffix}")
        typer.echo(f"✅ Restyled thumbnail saved: {write_data_uri(restyled.url, styled_path)}")


@app.command()
def variations(
    face: Path = typer.Argument(..., help="Protagonist face image"),
    output: Path = typer.Option(
        Path("./references"), "--output", "-o", help="Directory for reference images"
    ),
    verbose: bool = VerboseOpt,
) -> None:
    """Derive full-body protagonist references from one face."""
    setup_logging(verbose)
    studio = _studio([face])

    refs = _run(studio.generate_character_variations())
    for i, uri in enumerate(refs):
        path = write_data_uri(uri, output / f"reference-{i}.png")
        typer.echo(f"   ✅ {path}")
    typer.echo(f"\n✅ {len(refs)} references (max 4)")


if __name__ == "__main__":
    app()
