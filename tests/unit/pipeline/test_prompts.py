import pytest

from scriptarc.core.schemas import ResearchReply, ScriptReply
from scriptarc.core.types import ScriptFramework, Tone
from scriptarc.pipeline.prompts import (
    SCRIPT_PHASES,
    build_research_request,
    build_rewrite_request,
    build_script_request,
    build_system_instruction,
)

pytestmark = pytest.mark.unit


def test_research_request_shape():
    req = build_research_request("Black holes", "Astronomy", model="flash")
    assert req.model_name == "flash"
    assert req.response_schema is ResearchReply
    assert req.use_search is False
    assert '"Black holes"' in req.prompt
    assert '"Astronomy"' in req.prompt
    assert '"hooks"' in req.prompt


def test_research_request_search_variant_is_a_copy():
    req = build_research_request("Black holes", "Astronomy", model="flash")
    searched = req.with_search(True)
    assert searched.use_search is True
    assert req.use_search is False
    assert searched.prompt == req.prompt


@pytest.mark.parametrize("topic", ["", "   "])
def test_research_rejects_blank_topic(topic):
    with pytest.raises(ValueError, match="topic"):
        build_research_request(topic, "Astronomy", model="flash")


def test_system_instruction_uses_profile(profile):
    text = build_system_instruction(profile)
    assert "Astronomy channel" in text
    assert "Curious adults" in text


def test_script_request_shape(profile):
    req = build_script_request(
        "Black holes",
        ScriptFramework.DOCUMENTARY,
        Tone.DRAMATIC,
        profile,
        "Research text",
        "What if light could not escape?",
        model="pro",
        thinking_budget=4000,
    )
    assert req.model_name == "pro"
    assert req.response_schema is ScriptReply
    assert req.thinking_budget == 4000
    assert req.system_instruction == build_system_instruction(profile)
    assert "Documentary Style" in req.prompt
    assert "Tone: Dramatic." in req.prompt
    assert "Research text" in req.prompt
    assert '"What if light could not escape?"' in req.prompt
    for phase in SCRIPT_PHASES:
        assert phase in req.prompt


def test_script_request_blank_hook_rejected(profile):
    with pytest.raises(ValueError, match="selected_hook"):
        build_script_request(
            "Topic",
            ScriptFramework.EXPLAINER,
            Tone.MINIMALIST,
            profile,
            "r",
            " ",
            model="pro",
        )


def test_rewrite_request_is_free_text():
    req = build_rewrite_request("Old narration.", "Make it punchier", Tone.VIRAL, model="flash")
    assert req.response_schema is None
    assert req.is_structured is False
    assert '"Make it punchier"' in req.prompt
    assert "High Energy / Viral tone" in req.prompt
    assert req.prompt.endswith("Old narration.")


@pytest.mark.parametrize("instruction", ["", "\n\t"])
def test_rewrite_rejects_blank_instruction(instruction):
    with pytest.raises(ValueError, match="instruction"):
        build_rewrite_request("content", instruction, Tone.VIRAL, model="flash")
