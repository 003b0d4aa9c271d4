"""
Tests for the AI synthesis client against a stubbed chat completions API.
"""
import json
from types import SimpleNamespace

import pytest

from videochat.llm import SynthesisClient, SynthesisError
from videochat.models import AssemblyPlan, MediaAnalysis, ScriptAnalysis

class StubCompletions:
    def __init__(self, *contents):
        self.contents = list(contents)
        self.requests = []

    def create(self, **kwargs):
        self.requests.append(kwargs)
        content = self.contents.pop(0)
        if isinstance(content, Exception):
            raise content
        return SimpleNamespace(choices=[SimpleNamespace(message=SimpleNamespace(content=content))])

def _client(*contents):
    completions = StubCompletions(*contents)
    stub = SimpleNamespace(chat=SimpleNamespace(completions=completions))
    return SynthesisClient(client=stub, model="main-model", fast_model="fast-model"), completions

SCRIPT_JSON = json.dumps({
    "scriptSummary": "A founder explains the product",
    "mainThemes": ["startup", "vision"],
    "suggestedTiming": 60,
    "mood": "professional",
    "visualElements": ["office", "whiteboard"],
})

PLAN_JSON = json.dumps({
    "totalDuration": 20,
    "scenes": [
        {"sceneNumber": 1, "duration": 10, "description": "Open on office", "mediaFiles": ["office.mp4"],
         "audioOverlay": None, "textOverlay": "Hello", "transitions": "cut"},
        {"sceneNumber": 2, "duration": 10, "description": "Whiteboard", "mediaFiles": ["board.jpg"],
         "transitions": "fade"},
    ],
    "audioTrack": "music.mp3",
    "pacing": "fast",
    "style": "Clean corporate",
})

def test_analyze_script_uses_json_mode():
    client, completions = _client(SCRIPT_JSON)
    analysis = client.analyze_script("We build things.")
    assert analysis.mood == "professional"
    assert analysis.main_themes == ["startup", "vision"]
    request = completions.requests[0]
    assert request["model"] == "main-model"
    assert request["response_format"] == {"type": "json_object"}
    assert "We build things." in request["messages"][1]["content"]

def test_empty_response_is_failure():
    client, _ = _client("")
    with pytest.raises(SynthesisError):
        client.analyze_script("x")

def test_invalid_json_is_failure():
    client, _ = _client("{not json")
    with pytest.raises(SynthesisError):
        client.analyze_script("x")

def test_mood_outside_enumeration_is_failure():
    bad = json.loads(SCRIPT_JSON)
    bad["mood"] = "spooky"
    client, _ = _client(json.dumps(bad))
    with pytest.raises(SynthesisError):
        client.analyze_script("x")

def test_provider_error_is_wrapped():
    client, _ = _client(RuntimeError("503 from provider"))
    with pytest.raises(SynthesisError) as exc:
        client.analyze_script("x")
    assert "503 from provider" in str(exc.value)

def test_analyze_media_keeps_known_facts():
    client, _ = _client(json.dumps({
        "type": "image",
        "description": "Drone shot of a coastline",
        "suggestedUsage": "Opening shot",
        "duration": 12,
    }))
    analysis = client.analyze_media("coast.mp4", "video")
    assert analysis.type == "video"
    assert analysis.file_name == "coast.mp4"
    assert analysis.duration == 12

def test_assembly_plan_and_storyboard():
    client, completions = _client(PLAN_JSON, "Scene one opens in a bright office...")
    script = ScriptAnalysis.model_validate(json.loads(SCRIPT_JSON))
    media = [MediaAnalysis(type="video", description="office", suggested_usage="main", file_name="office.mp4")]

    plan = client.create_assembly_plan(script, media)
    assert isinstance(plan, AssemblyPlan)
    assert [s.scene_number for s in plan.scenes] == [1, 2]
    assert plan.scenes[0].text_overlay == "Hello"
    assert "office.mp4" in completions.requests[0]["messages"][1]["content"]

    description = client.generate_storyboard_description(plan)
    assert description.startswith("Scene one")
    assert completions.requests[1]["model"] == "fast-model"
    assert "response_format" not in completions.requests[1]

def test_storyboard_empty_response_falls_back():
    client, _ = _client(PLAN_JSON, "")
    plan = AssemblyPlan.model_validate(json.loads(PLAN_JSON))
    assert client.generate_storyboard_description(plan) == "Storyboard description not available"

def test_missing_api_key(monkeypatch):
    monkeypatch.delenv("GEMINI_API_KEY", raising=False)
    monkeypatch.setattr("videochat.settings.GEMINI_API_KEY", "")
    with pytest.raises(SynthesisError):
        SynthesisClient().analyze_script("x")
