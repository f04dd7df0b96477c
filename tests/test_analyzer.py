"""Tests for the script analyzer."""

import json

import pytest

from scriptreel.agents.analyzer import AnalysisInput, ScriptAnalyzer
from scriptreel.errors import AnalysisFailed
from scriptreel.models import SceneStatus

SCENES_JSON = json.dumps({
    "scenes": [
        {"timestamp": "00:00", "description": "Um homem entra no bar", "imagePrompt": "A man walks into a bar"},
        {"timestamp": "00:08", "description": "O sol se põe", "imagePrompt": "Sunset over the desert"},
    ]
})


@pytest.fixture
def analyzer(gemini):
    return ScriptAnalyzer(client=gemini, model="pro-model", language="Brazilian Portuguese")


async def test_scenes_get_positional_ids_and_idle_status(analyzer, gemini):
    gemini.generate_text.return_value = SCENES_JSON

    scenes = await analyzer.run(AnalysisInput(script="A man walks into a bar at sunset"))

    assert [s.id for s in scenes] == ["scene-0", "scene-1"]
    assert all(s.status is SceneStatus.IDLE for s in scenes)
    assert scenes[0].description == "Um homem entra no bar"
    assert scenes[0].image_prompt == "A man walks into a bar"
    assert scenes[1].timestamp == "00:08"


async def test_request_carries_schema_and_language(analyzer, gemini):
    gemini.generate_text.return_value = SCENES_JSON

    await analyzer.run(AnalysisInput(script="Some script"))

    call = gemini.generate_text.await_args
    assert call.args[0] == "pro-model"
    assert "MUST be in Brazilian Portuguese" in call.args[1]
    assert "Some script" in call.args[1]
    schema = call.kwargs["schema"]
    item = schema["properties"]["scenes"]["items"]
    assert item["required"] == ["timestamp", "description", "imagePrompt"]
    assert call.kwargs["use_search"] is False


async def test_search_grounding_parses_fenced_json(analyzer, gemini):
    gemini.generate_text.return_value = f"Here are the scenes:\n```json\n{SCENES_JSON}\n```"

    scenes = await analyzer.run(AnalysisInput(script="Some script", use_search=True))

    assert len(scenes) == 2
    assert gemini.generate_text.await_args.kwargs["use_search"] is True


@pytest.mark.parametrize("response", ["", "not json at all", '{"items": []}', '{"scenes": "nope"}'])
async def test_malformed_output_raises_analysis_failed(analyzer, gemini, response):
    gemini.generate_text.return_value = response

    with pytest.raises(AnalysisFailed):
        await analyzer.run(AnalysisInput(script="Some script"))


async def test_scene_missing_fields_raises_analysis_failed(analyzer, gemini):
    gemini.generate_text.return_value = json.dumps({"scenes": [{"timestamp": "00:00"}]})

    with pytest.raises(AnalysisFailed):
        await analyzer.run(AnalysisInput(script="Some script"))


async def test_empty_script_is_rejected_without_calling(analyzer, gemini):
    with pytest.raises(ValueError):
        await analyzer.run(AnalysisInput(script="   "))
    gemini.generate_text.assert_not_awaited()


async def test_plain_json_with_backticks_in_text_is_parsed_as_is(analyzer, gemini):
    gemini.generate_text.return_value = json.dumps({"scenes": [{
        "timestamp": "00:00",
        "description": "Ele digita ```print('olá')``` no terminal",
        "imagePrompt": "A hacker typing ```code``` on a green screen",
    }]})

    scenes = await analyzer.run(AnalysisInput(script="Some script"))

    assert scenes[0].description == "Ele digita ```print('olá')``` no terminal"
    assert scenes[0].image_prompt == "A hacker typing ```code``` on a green screen"
