"""
Tests for the chat message log.
"""
import pydantic
import pytest

from videochat.messages import (
    ChatMessage, ConfirmationMetadata, FileDetail, FileListMetadata, MessageLog,
    PlanMetadata, ProgressMetadata,
)
from videochat.models import AssemblyPlan, StoryboardScene

def _plan():
    return AssemblyPlan(
        total_duration=12.5,
        scenes=[StoryboardScene(scene_number=1, duration=12.5, description="Intro", media_files=["a.mp4"],
                                text_overlay="Hi", transitions="fade")],
        audio_track="a.mp3",
        pacing="slow",
        style="Minimal",
    )

def test_messages_keep_insertion_order_and_unique_ids():
    log = MessageLog()
    for i in range(50):
        log.add("system", f"message {i}")
    assert [m.content for m in log] == [f"message {i}" for i in range(50)]
    assert len({m.id for m in log}) == 50

def test_messages_are_immutable():
    message = MessageLog().add("user", "hello")
    with pytest.raises(pydantic.ValidationError):
        message.content = "changed"

def test_update_progress_replaces_only_matching_message():
    log = MessageLog()
    log.add("progress", "script", ProgressMetadata(marker="analyze-script"))
    log.add("progress", "media", ProgressMetadata(marker="analyze-media"))
    original_id = log[0].id

    updated = log.update_progress("analyze-script", 55)

    assert updated.id == original_id
    assert log[0].metadata.progress == 55
    assert log[1].metadata.progress == 0
    assert len(log) == 2

def test_update_progress_without_match():
    log = MessageLog()
    log.add("success", "done")
    assert log.update_progress("analyze-script", 10) is None

def test_update_progress_is_clamped():
    log = MessageLog()
    log.add("progress", "plan", ProgressMetadata(marker="assembly-plan"))
    log.update_progress("assembly-plan", 250)
    assert log[0].metadata.progress == 100

def test_json_round_trip_preserves_everything():
    log = MessageLog()
    log.add("system", "welcome")
    log.add("success", "files", FileListMetadata(files=[FileDetail(name="a.mp4", size="1.5 KB")]))
    log.add("progress", "working", ProgressMetadata(marker="analyze-media", progress=33.3))
    log.add("system", "confirm?", ConfirmationMetadata(has_script=True, file_count=2))
    log.add("success", "plan", PlanMetadata(assembly_plan=_plan(), storyboard_description="A quiet intro."))

    restored = MessageLog.from_json(log.to_json())

    assert restored.messages == log.messages
    assert isinstance(restored[1].metadata, FileListMetadata)
    assert isinstance(restored[4].metadata, PlanMetadata)
    assert restored[4].metadata.assembly_plan.scenes[0].text_overlay == "Hi"

def test_json_uses_camel_case_and_kind_tags():
    log = MessageLog()
    log.add("system", "confirm?", ConfirmationMetadata(has_script=False, file_count=0))
    data = log.to_json()
    assert '"kind":"confirmation"' in data
    assert '"fileCount":0' in data

def test_unknown_metadata_kind_is_rejected():
    with pytest.raises(pydantic.ValidationError):
        ChatMessage.model_validate({"type": "system", "content": "x", "metadata": {"kind": "mystery"}})
