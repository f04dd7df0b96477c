"""Tests for the image generators."""

import pytest

from scriptreel.errors import GenerationFailed
from scriptreel.services.images import DEFAULT_CONCEPT, EDIT_PRESETS, ImageGenerator
from scriptreel.services.payloads import decode_data_uri

from .conftest import PNG_BYTES, empty_response, image_uri, inline_response


@pytest.fixture
def generator(gemini):
    return ImageGenerator(
        client=gemini, model="image-model", pro_model="pro-image-model", concept_model="text-model"
    )


async def test_generate_returns_data_uri_of_first_payload(generator, gemini):
    refs = [image_uri("a"), image_uri("b")]

    url = await generator.generate("a man at a bar", "9:16", refs)

    assert decode_data_uri(url) == ("image/png", PNG_BYTES)
    call = gemini.generate_media.await_args
    assert call.args[0] == "image-model"
    assert "IDENTITY RULES" in call.args[1]
    assert "STYLE: A professional cinematic prompt" in call.args[1]
    assert call.kwargs["images"] == refs
    assert call.kwargs["aspect_ratio"] == "9:16"


async def test_generate_without_payload_fails(generator, gemini):
    gemini.generate_media.return_value = empty_response()

    with pytest.raises(GenerationFailed) as exc_info:
        await generator.generate("a man at a bar")
    assert exc_info.value.operation == "image"


async def test_pro_passes_size_and_search(generator, gemini):
    await generator.generate_pro("castle", size="4K", aspect_ratio="1:1", use_search=True)

    call = gemini.generate_media.await_args
    assert call.args[0] == "pro-image-model"
    assert "PRO IDENTITY MANAGEMENT" in call.args[1]
    assert call.kwargs["image_size"] == "4K"
    assert call.kwargs["aspect_ratio"] == "1:1"
    assert call.kwargs["use_search"] is True


async def test_character_variations_issue_one_call_per_scenario(generator, gemini):
    gemini.generate_media.side_effect = [inline_response(), empty_response(), inline_response()]
    face = image_uri("face")

    results = await generator.character_variations(face)

    assert len(results) == 2
    assert gemini.generate_media.await_count == 3
    for call in gemini.generate_media.await_args_list:
        assert call.kwargs["images"] == [face]
        assert call.kwargs["aspect_ratio"] == "9:16"
        assert "THIS PROTAGONIST" in call.args[1]
    gemini.generate_text.assert_not_awaited()


async def test_thumbnail_runs_concept_then_image(generator, gemini):
    gemini.generate_text.side_effect = ["", "Close-up, dramatic light"]
    refs = [image_uri(str(i)) for i in range(5)]

    result = await generator.thumbnail("script text", refs)

    concept_call, optimize_call = gemini.generate_text.await_args_list
    assert concept_call.args[0] == "text-model"
    assert "script text" in concept_call.args[1]
    assert f"Original Description: {DEFAULT_CONCEPT}" in optimize_call.args[1]
    assert "THUMBNAIL STRATEGIST" in optimize_call.args[1]
    assert result.prompt == "Close-up, dramatic light"
    assert gemini.generate_media.await_args.kwargs["images"] == refs[:3]
    assert gemini.generate_media.await_args.kwargs["aspect_ratio"] == "16:9"


async def test_restyle_sends_source_then_style(generator, gemini):
    source, style = image_uri("source"), image_uri("style")

    await generator.restyle(source, style, "a hero on a cliff")

    call = gemini.generate_media.await_args
    assert call.kwargs["images"] == [source, style]
    assert "ART DIRECTOR" in call.args[1]
    assert call.args[1].endswith("a hero on a cliff")


async def test_edit_skips_optimizer_and_expands_presets(generator, gemini):
    await generator.edit(image_uri("source"), "golden-hour")

    gemini.generate_text.assert_not_awaited()
    call = gemini.generate_media.await_args
    assert EDIT_PRESETS["golden-hour"] in call.args[1]
    assert "aspect_ratio" not in call.kwargs


async def test_edit_without_payload_fails(generator, gemini):
    gemini.generate_media.return_value = empty_response()

    with pytest.raises(GenerationFailed, match="edit"):
        await generator.edit(image_uri("source"), "make it blue")
