"""Tests for the prompt optimizer."""

from scriptreel.agents.optimizer import OptimizeMode, PromptOptimizer


async def test_returns_model_text_verbatim(gemini):
    gemini.generate_text.return_value = "  35mm lens, rim light, a man at a bar  "
    optimizer = PromptOptimizer(client=gemini, model="text-model")

    result = await optimizer.optimize("a man at a bar")

    assert result == "  35mm lens, rim light, a man at a bar  "
    model, prompt = gemini.generate_text.await_args.args
    assert model == "text-model"
    assert "EXPERT CINEMATOGRAPHER" in prompt
    assert prompt.endswith("Original Description: a man at a bar\n\nProfessional Prompt:")


async def test_empty_result_falls_back_to_raw(gemini):
    gemini.generate_text.return_value = "   "
    optimizer = PromptOptimizer(client=gemini, model="text-model")

    assert await optimizer.optimize("sunset") == "sunset"


async def test_thumbnail_mode_uses_strategist_template(gemini):
    optimizer = PromptOptimizer(client=gemini, model="text-model")

    await optimizer.optimize("shocked face", OptimizeMode.THUMBNAIL)

    prompt = gemini.generate_text.await_args.args[1]
    assert "THUMBNAIL STRATEGIST" in prompt
    assert "CINEMATOGRAPHER" not in prompt


async def test_run_uses_configured_mode(gemini):
    optimizer = PromptOptimizer(client=gemini, model="text-model", mode=OptimizeMode.THUMBNAIL)

    await optimizer.run("hook")

    assert "THUMBNAIL STRATEGIST" in gemini.generate_text.await_args.args[1]
