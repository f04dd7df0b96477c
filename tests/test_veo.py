"""Tests for video generation and polling."""

import pytest

from scriptreel.errors import GenerationFailed, NoDownloadLink, VideoTimedOut
from scriptreel.services.veo import VideoGenerator, local_path_from_uri

from .conftest import image_uri, video_operation

VIDEO_URI = "https://files.example/v1/video.mp4?alt=media"


@pytest.fixture
def generator(gemini, tmp_path):
    return VideoGenerator(
        client=gemini,
        model="veo-model",
        output_dir=tmp_path / "videos",
        poll_interval=0.001,
        poll_backoff=2.0,
        max_poll_interval=0.004,
        max_poll_time=5.0,
    )


async def test_polls_until_done_then_downloads(generator, gemini, tmp_path):
    gemini.refresh_video.side_effect = [
        video_operation(),
        video_operation(),
        video_operation(done=True, uri=VIDEO_URI),
    ]
    seed = image_uri("seed")

    url = await generator.generate(seed, "a man walks", "9:16", name="scene-0")

    assert url.startswith("file://")
    path = local_path_from_uri(url)
    assert path == (tmp_path / "videos" / "scene-0.mp4").resolve()
    assert path.read_bytes() == b"mp4-bytes"
    assert gemini.refresh_video.await_count == 3

    model, prompt, image = gemini.submit_video.await_args.args
    assert model == "veo-model"
    assert prompt == "Cinematic: a man walks. Realistic motion."
    assert image == seed
    assert gemini.submit_video.await_args.kwargs == {"aspect_ratio": "9:16", "resolution": "720p"}
    assert gemini.download.await_args.args[0] == VIDEO_URI


async def test_each_poll_uses_the_freshest_handle(generator, gemini):
    first = video_operation(name="operations/a")
    second = video_operation(done=True, uri=VIDEO_URI, name="operations/a")
    gemini.submit_video.return_value = video_operation(name="operations/a")
    gemini.refresh_video.side_effect = [first, second]

    await generator.generate(image_uri())

    handles = [call.args[0] for call in gemini.refresh_video.await_args_list]
    assert handles[1] is first


async def test_already_done_operation_is_not_polled(generator, gemini):
    gemini.submit_video.return_value = video_operation(done=True, uri=VIDEO_URI)

    await generator.generate(image_uri())

    gemini.refresh_video.assert_not_awaited()


async def test_inline_video_bytes_skip_download(generator, gemini):
    gemini.refresh_video.return_value = video_operation(done=True, video_bytes=b"inline-mp4")

    url = await generator.generate(image_uri(), name="inline")

    assert local_path_from_uri(url).read_bytes() == b"inline-mp4"
    gemini.download.assert_not_awaited()


async def test_missing_link_raises(generator, gemini):
    gemini.refresh_video.return_value = video_operation(done=True)

    with pytest.raises(NoDownloadLink):
        await generator.generate(image_uri())
    gemini.download.assert_not_awaited()


async def test_operation_error_raises_generation_failed(generator, gemini):
    gemini.refresh_video.return_value = video_operation(done=True, error={"message": "blocked"})

    with pytest.raises(GenerationFailed, match="blocked"):
        await generator.generate(image_uri())


async def test_never_finishing_job_times_out(gemini, tmp_path):
    generator = VideoGenerator(
        client=gemini,
        output_dir=tmp_path,
        poll_interval=0.005,
        max_poll_interval=0.005,
        max_poll_time=0.05,
    )
    gemini.refresh_video.return_value = video_operation()

    with pytest.raises(VideoTimedOut):
        await generator.generate(image_uri())
    assert gemini.refresh_video.await_count >= 1
    gemini.download.assert_not_awaited()


async def test_generate_clip_records_polls(generator, gemini):
    gemini.refresh_video.side_effect = [video_operation(), video_operation(done=True, uri=VIDEO_URI)]

    result = await generator.generate_clip(image_uri())

    assert result.polls == 2
    assert result.status.value == "completed"
    assert result.operation_id == "operations/veo-1"
