"""CLI entry point: run the API server or chat with it from a terminal."""

import asyncio
import logging
import shlex
from pathlib import Path
from typing import Optional

import typer

from . import settings
from .api_client import ApiError, VideoChatClient
from .messages import ChatMessage, FileListMetadata, MessageLog, PlanMetadata, ProgressMetadata
from .uploads import describe_file
from .workflow import TOTAL_STEPS, WorkflowController, WorkflowState

app = typer.Typer(
    name="videochat",
    help="Chat-driven AI video production assistant",
    no_args_is_help=True,
)

ICONS = {
    "system": "🤖",
    "user": "🧑",
    "progress": "⏳",
    "success": "✅",
    "error": "❌",
    "processing": "⚙️",
}

COLORS = {
    "error": typer.colors.RED,
    "success": typer.colors.GREEN,
    "progress": typer.colors.CYAN,
    "processing": typer.colors.CYAN,
}

def setup_logging(verbose: bool = False) -> None:
    """Configure logging."""
    level = logging.DEBUG if verbose else logging.WARNING
    logging.basicConfig(
        level=level,
        format="%(levelname)s: %(message)s",
        force=True,
    )

def _clock(seconds: float) -> str:
    total = int(round(seconds))
    return f"{total // 60}:{total % 60:02d}"

def render_message(message: ChatMessage) -> str:
    """Format one chat message for the terminal."""
    lines = [f"{ICONS[message.type]} {message.content}"]
    meta = message.metadata
    if isinstance(meta, FileListMetadata):
        lines.extend(f"   • {f.name} ({f.size})" for f in meta.files)
    elif isinstance(meta, ProgressMetadata):
        lines.append(f"   [{meta.progress:.0f}%]")
    elif isinstance(meta, PlanMetadata):
        plan = meta.assembly_plan
        lines.append(f"   Style: {plan.style} | Audio: {plan.audio_track}")
        start = 0.0
        for scene in plan.scenes:
            end = start + scene.duration
            lines.append(f"   {scene.scene_number}. [{_clock(start)} - {_clock(end)}] ({scene.duration:g}s) {scene.description}")
            start = end
            if scene.media_files:
                lines.append(f"      media: {', '.join(scene.media_files)}")
            if scene.text_overlay:
                lines.append(f"      text: {scene.text_overlay}")
            lines.append(f"      transition: {scene.transitions}")
        lines.append("")
        lines.append(meta.storyboard_description)
    return "\n".join(lines)

def _print_new(log: MessageLog, start: int) -> int:
    for message in log.since(start):
        typer.secho(render_message(message), fg=COLORS.get(message.type))
        if message.type == "error":
            typer.secho("   ⚠ Processing Error - see the message above", fg=typer.colors.RED, bold=True)
    return len(log)

async def _chat_loop(controller: WorkflowController, transcript: Optional[Path]) -> None:
    state = WorkflowState()
    log = MessageLog()
    controller.start(state, log)
    shown = _print_new(log, 0)

    while True:
        try:
            line = await asyncio.to_thread(input, f"[step {state.current_step}/{TOTAL_STEPS} · {state.step_title}] > ")
        except (EOFError, KeyboardInterrupt):
            typer.echo("")
            break
        line = line.strip()
        if not line:
            continue
        if line in ("/quit", "/exit"):
            break

        if line.startswith("/upload"):
            paths = shlex.split(line)[1:]
            if not paths:
                typer.secho("Usage: /upload <file> [file ...]", fg=typer.colors.YELLOW)
                continue
            missing = [p for p in paths if not Path(p).is_file()]
            if missing:
                typer.secho(f"❌ File not found: {', '.join(missing)}", fg=typer.colors.RED)
                continue
            files = [describe_file(p, state.current_step) for p in paths]
            await controller.handle_upload(state, log, files)
        else:
            await controller.handle_message(state, log, line)
        shown = _print_new(log, shown)

    if transcript:
        transcript.write_text(log.to_json(), encoding="utf-8")
        typer.echo(f"💾 Saved chat transcript to {transcript}")

@app.command()
def serve(
    host: str = typer.Option("127.0.0.1", "--host", help="Interface to bind"),
    port: int = typer.Option(8000, "--port", "-p", help="Port to listen on"),
    reload: bool = typer.Option(False, "--reload", help="Reload on code changes"),
) -> None:
    """Run the VideoChat API server."""
    import uvicorn

    if not settings.has_all_keys():
        typer.secho("⚠️  GEMINI_API_KEY is not set; AI requests will fail", fg=typer.colors.YELLOW)
    uvicorn.run("videochat.app:app", host=host, port=port, reload=reload)

@app.command()
def chat(
    server: str = typer.Option(settings.API_BASE_URL, "--server", "-s", help="VideoChat API base URL"),
    title: Optional[str] = typer.Option(None, "--title", "-t", help="Title for the project created at synthesis"),
    pace: float = typer.Option(settings.CHAT_PACING_DELAY_S, "--pace", help="Seconds to pause before replies (0 for none)"),
    transcript: Optional[Path] = typer.Option(None, "--transcript", help="Write the chat log as JSON on exit"),
    verbose: bool = typer.Option(False, "--verbose", "-v", help="Show debug logs"),
) -> None:
    """Chat with the assistant. Type /upload <file> to add files, /quit to leave."""
    setup_logging(verbose)
    controller = WorkflowController(VideoChatClient(server), pacing_delay=pace, project_title=title)
    asyncio.run(_chat_loop(controller, transcript))

@app.command()
def show(
    project_id: str = typer.Argument(..., help="Project id"),
    server: str = typer.Option(settings.API_BASE_URL, "--server", "-s", help="VideoChat API base URL"),
) -> None:
    """Show a project's stored analyses and plan."""
    try:
        project = asyncio.run(VideoChatClient(server).get_project(project_id))
    except ApiError as e:
        typer.secho(f"❌ {e.message}", fg=typer.colors.RED)
        raise typer.Exit(1)

    typer.echo(f"📁 Project: {project.title} ({project.id})")
    typer.echo(f"   Status: {project.status} · step {project.current_step}/{TOTAL_STEPS}")
    if project.script_analysis:
        typer.echo(f"   Script: {project.script_analysis.script_summary}")
    typer.echo(f"   Media analyses: {len(project.media_analyses)}")
    if project.assembly_plan:
        typer.echo(f"   Plan: {len(project.assembly_plan.scenes)} scenes, {project.assembly_plan.total_duration:g}s")


if __name__ == "__main__":
    app()
