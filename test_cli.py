"""
Tests for the terminal chat front end.
"""
import asyncio
import builtins

from typer.testing import CliRunner

from videochat.cli import _chat_loop, app, render_message
from videochat.messages import FileDetail, FileListMetadata, MessageLog, PlanMetadata, ProgressMetadata
from videochat.models import AssemblyPlan, StoryboardScene
from videochat.workflow import WorkflowController

def _scripted_input(monkeypatch, lines):
    pending = list(lines)

    def fake_input(prompt=""):
        if not pending:
            raise EOFError
        return pending.pop(0)

    monkeypatch.setattr(builtins, "input", fake_input)

def test_render_file_list():
    log = MessageLog()
    message = log.add("success", "Got files", FileListMetadata(files=[FileDetail(name="a.mp4", size="2.0 KB")]))
    rendered = render_message(message)
    assert rendered.startswith("✅ Got files")
    assert "a.mp4 (2.0 KB)" in rendered

def test_render_progress_and_plan():
    log = MessageLog()
    progress = log.add("progress", "Working", ProgressMetadata(marker="m", progress=40))
    assert "[40%]" in render_message(progress)

    plan = AssemblyPlan(
        total_duration=75,
        scenes=[
            StoryboardScene(scene_number=1, duration=8, description="Sunrise", media_files=["sun.mp4"],
                            text_overlay="Good morning", transitions="fade in"),
            StoryboardScene(scene_number=2, duration=67, description="Long walk", transitions="cut"),
        ],
        audio_track="birds.mp3",
        pacing="slow",
        style="Calm",
    )
    message = log.add("success", "Ready", PlanMetadata(assembly_plan=plan, storyboard_description="We open on a sunrise."))
    rendered = render_message(message)
    assert "1. [0:00 - 0:08] (8s) Sunrise" in rendered
    assert "2. [0:08 - 1:15] (67s) Long walk" in rendered
    assert "media: sun.mp4" in rendered
    assert "text: Good morning" in rendered
    assert rendered.endswith("We open on a sunrise.")

def test_chat_loop_runs_whole_workflow(api, monkeypatch, tmp_path, capsys):
    clip = tmp_path / "intro.mp4"
    clip.write_bytes(b"\0" * 2048)
    transcript = tmp_path / "chat.json"
    _scripted_input(monkeypatch, [
        "A short film about morning coffee",
        f"/upload {clip}",
        "/upload missing.mp4",
        "next",
        "yes",
        "/quit",
    ])

    asyncio.run(_chat_loop(WorkflowController(api), transcript))

    out = capsys.readouterr().out
    assert "intro.mp4 (2.0 KB)" in out
    assert "File not found: missing.mp4" in out
    assert "Your storyboard is ready" in out

    log = MessageLog.from_json(transcript.read_text(encoding="utf-8"))
    assert isinstance(log[-1].metadata, PlanMetadata)

def test_help_lists_commands():
    result = CliRunner().invoke(app, ["--help"])
    assert result.exit_code == 0
    for command in ("serve", "chat", "show"):
        assert command in result.output
