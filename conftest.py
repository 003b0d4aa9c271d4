"""
Shared fixtures for the VideoChat test scripts.
"""
import os
import sys

import httpx
import pytest

# Add the backend to the path
sys.path.insert(0, os.path.join(os.path.dirname(__file__), 'videochat_backend'))

from videochat.app import create_app
from videochat.api_client import VideoChatClient
from videochat.llm import SynthesisError
from videochat.models import AssemblyPlan, MediaAnalysis, ScriptAnalysis, StoryboardScene
from videochat.storage import ProjectStore

class FakeSynthesis:
    """Stands in for SynthesisClient; records calls and fails on request"""

    def __init__(self):
        self.calls = []
        self.fail_script = False
        self.fail_plan = False
        self.bad_files = set()

    def analyze_script(self, script_content):
        self.calls.append(("analyze_script", script_content))
        if self.fail_script:
            raise SynthesisError("Failed to analyze script: upstream down")
        return ScriptAnalysis(
            script_summary="A short promo about coffee",
            main_themes=["coffee", "morning"],
            suggested_timing=45,
            mood="energetic",
            visual_elements=["steam", "sunrise"],
        )

    def analyze_media(self, file_name, media_type):
        self.calls.append(("analyze_media", file_name, media_type))
        if file_name in self.bad_files:
            raise SynthesisError(f"Failed to analyze {media_type}: broken file")
        return MediaAnalysis(
            type=media_type,
            description=f"Footage from {file_name}",
            suggested_usage="B-roll",
            file_name=file_name,
            duration=30 if media_type != "image" else None,
        )

    def create_assembly_plan(self, script_analysis, media_analyses):
        self.calls.append(("create_assembly_plan", len(media_analyses)))
        if self.fail_plan:
            raise SynthesisError("Failed to create assembly plan: upstream down")
        return AssemblyPlan(
            total_duration=45,
            scenes=[
                StoryboardScene(
                    scene_number=i + 1,
                    duration=45 / len(media_analyses),
                    description=m.description,
                    media_files=[m.file_name],
                    transitions="crossfade",
                )
                for i, m in enumerate(media_analyses)
            ],
            audio_track="theme.mp3",
            pacing="medium",
            style="Warm and upbeat",
        )

    def generate_storyboard_description(self, assembly_plan):
        self.calls.append(("generate_storyboard_description",))
        return f"A {len(assembly_plan.scenes)}-scene story that opens on steam rising from a cup."

@pytest.fixture
def synthesis():
    return FakeSynthesis()

@pytest.fixture
def store():
    return ProjectStore()

@pytest.fixture
def app(store, synthesis):
    return create_app(store=store, synthesis=synthesis)

@pytest.fixture
def api(app):
    """VideoChatClient wired straight into the in-process app"""
    return VideoChatClient("http://testserver", transport=httpx.ASGITransport(app=app))
