"""
Chat-driven workflow for a video project.

The controller walks the user through six steps:

1. Script & Audio      - paste a script or upload script/audio files
2. Media Collection    - upload videos, images and extra audio
3. AI Synthesis        - script and media analysis, assembly planning
4. Assembly            - (internal) the plan is being put together
5. Storyboard Preview  - review the generated plan
6. Final Video         - export

Every transition appends to a `MessageLog`; front ends render the log plus
`WorkflowState.current_step` and nothing else. The controller keeps no session
state of its own: callers own the `WorkflowState` and `MessageLog` and pass them
in on every call. The state object is updated in place and returned, so callers
sharing one state object see a synthesis run that is still in progress.
"""
import asyncio
import logging
from typing import Iterable, List, Literal, Optional
from pydantic import Field
from .api_client import VideoChatClient
from .messages import ConfirmationMetadata, FileDetail, FileListMetadata, MessageLog
from .models import CamelModel
from .orchestrator import SynthesisState, run_pipeline
from .uploads import UploadCollector, UploadedFile

logger = logging.getLogger(__name__)

TOTAL_STEPS = 6

STEP_TITLES = {
    1: "Script & Audio",
    2: "Media Collection",
    3: "AI Synthesis",
    4: "Assembly",
    5: "Storyboard Preview",
    6: "Final Video",
}

PipelineStatus = Literal["idle", "running", "failed"]

WELCOME_TEXT = (
    "👋 Welcome to VideoChat Pro! I'm your AI video editing assistant. Let's create something amazing together!\n\n"
    "To get started, paste your script or upload your script and any audio files you'd like to include."
)
HELP_TEXT = (
    "I'm here to help! You can upload files, ask questions about the video editing process, "
    "or request specific adjustments to your project.\n\n"
    "Type 'status' to see where you are, 'next' when you're done with the current step, "
    "and 'yes' or 'no' when I ask you to confirm something."
)
FALLBACK_TEXT = (
    "I understand you want to work on your video project. Please upload the necessary files "
    "for the current step, and I'll guide you through the process!"
)
SCRIPT_FOLLOW_UP_TEXT = (
    "Upload any script or audio files you'd like to include, or type 'next' to move on to your media files."
)
MEDIA_PROMPT_TEXT = (
    "Perfect! Now let's collect your media files. Please upload any videos, images, "
    "or additional audio you want to include in your project."
)
MORE_MEDIA_TEXT = "Files added! Upload more, or type 'next' when you're ready to start AI synthesis."
CANCELLED_TEXT = "No problem! Keep uploading, and type 'next' when you're ready."
SYNTHESIS_ACK_TEXT = "🚀 Great, let's go! Starting AI synthesis now."
SYNTHESIS_PROCESSING_TEXT = (
    "🤖 AI is synthesizing your materials...\n\n"
    "Analyzing script, matching audio, and organizing visual elements"
)
SYNTHESIS_BUSY_TEXT = "⏳ AI synthesis is already running. I'll let you know as soon as it finishes."
RECEIVED_FILES_TEXT = "Great! I've received your files:"

class WorkflowState(CamelModel):
    current_step: int = Field(default=1, ge=1, le=TOTAL_STEPS)
    pending_confirmation: bool = False
    uploaded_files: List[UploadedFile] = Field(default_factory=list)
    script_text: Optional[str] = None
    project_id: Optional[str] = None
    pipeline_status: PipelineStatus = "idle"

    @property
    def progress_percentage(self) -> float:
        return self.current_step / TOTAL_STEPS * 100

    @property
    def step_title(self) -> str:
        return STEP_TITLES[self.current_step]

def _mentions(text: str, *keywords: str) -> bool:
    return any(k in text for k in keywords)

def status_text(state: WorkflowState) -> str:
    step = state.current_step
    if step == 1:
        detail = "Please paste your script or upload your script and audio files to continue."
    elif step == 2:
        detail = "Upload your media files (videos, images, audio), then type 'next'."
    elif step == 3 and state.pipeline_status == "running":
        detail = "AI synthesis is in progress."
    elif step == 3 and state.pipeline_status == "failed":
        detail = "AI synthesis failed. Type 'proceed' to try again."
    elif step == 5:
        detail = "Your storyboard is ready for review."
    elif step == 6:
        detail = "Your video is ready to export."
    else:
        detail = "Processing your content..."
    return f"Your project is currently at step {step} of {TOTAL_STEPS} ({STEP_TITLES[step]}). {detail}"

def confirmation_text(has_script: bool, file_count: int) -> str:
    script = "your script" if has_script else "no script"
    files = f"{file_count} file{'s' if file_count != 1 else ''}"
    return (
        f"⚠️ Ready to start AI synthesis with {script} and {files}? "
        "You won't be able to add more files once it starts.\n\n"
        "Type 'yes' to proceed or 'no' to keep uploading."
    )

class WorkflowController:
    def __init__(self, api: VideoChatClient, pacing_delay: float = 0.0, project_title: Optional[str] = None):
        self.api = api
        self.pacing_delay = pacing_delay
        self.project_title = project_title

    async def _pause(self, factor: float = 1.0):
        if self.pacing_delay > 0:
            await asyncio.sleep(self.pacing_delay * factor)

    def start(self, state: WorkflowState, log: MessageLog) -> WorkflowState:
        if not len(log):
            log.add("system", WELCOME_TEXT)
        return state

    async def handle_message(self, state: WorkflowState, log: MessageLog, content: str) -> WorkflowState:
        log.add("user", content)
        await self._pause()

        text = content.lower()
        if _mentions(text, "help"):
            log.add("system", HELP_TEXT)
        elif _mentions(text, "status"):
            log.add("system", status_text(state))
        elif _mentions(text, "next", "continue") and state.current_step in (1, 2):
            self._advance(state, log)
        elif _mentions(text, "proceed", "yes") and self._can_synthesize(state):
            await self._confirm(state, log)
        elif _mentions(text, "no", "cancel") and state.pending_confirmation:
            state.pending_confirmation = False
            log.add("system", CANCELLED_TEXT)
        elif state.current_step == 1:
            self._capture_script(state, log, content)
        else:
            log.add("system", FALLBACK_TEXT)
        return state

    async def handle_upload(self, state: WorkflowState, log: MessageLog, files: Iterable[UploadedFile], step: Optional[int] = None) -> WorkflowState:
        """Record uploaded files.

        `step` is the step the files were submitted under; it defaults to the
        current step.
        """
        step = step or state.current_step
        accepted = UploadCollector(state.uploaded_files).collect(files, step)
        if not accepted:
            return state

        log.add("success", RECEIVED_FILES_TEXT, FileListMetadata(
            files=[FileDetail(name=f.name, size=f.display_size) for f in accepted]
        ))
        logger.info(f"Collected {len(accepted)} files at step {step}")

        if step == 1:
            await self._pause(1.5)
            log.add("system", MEDIA_PROMPT_TEXT)
            state.current_step = max(state.current_step, 2)
        elif step == 2 and state.pending_confirmation:
            # The pending warning counted fewer files; ask again
            self._advance(state, log)
        elif step == 2:
            log.add("system", MORE_MEDIA_TEXT)
        elif state.pipeline_status == "failed":
            log.add("system", "I've saved these files. They'll be included when you type 'proceed' to retry AI synthesis.")
        else:
            log.add("system", "I've saved these files, but AI synthesis has already started, so they won't be part of this storyboard.")
        return state

    def _advance(self, state: WorkflowState, log: MessageLog):
        if state.current_step == 1:
            state.current_step = 2
            log.add("system", MEDIA_PROMPT_TEXT)
            return
        state.pending_confirmation = True
        has_script = bool(state.script_text)
        file_count = len(state.uploaded_files)
        log.add("system", confirmation_text(has_script, file_count), ConfirmationMetadata(
            has_script=has_script, file_count=file_count
        ))

    def _can_synthesize(self, state: WorkflowState) -> bool:
        if state.pending_confirmation:
            return True
        # A failed or still-running synthesis at step 3 answers "proceed" itself
        return state.current_step == 3

    def _capture_script(self, state: WorkflowState, log: MessageLog, content: str):
        state.script_text = content.strip()
        words = len(state.script_text.split())
        log.add("success", f"📝 Got your script ({words} word{'s' if words != 1 else ''}). I'll use it for the AI synthesis.")
        log.add("system", SCRIPT_FOLLOW_UP_TEXT)

    async def _confirm(self, state: WorkflowState, log: MessageLog):
        if state.pipeline_status == "running":
            log.add("system", SYNTHESIS_BUSY_TEXT)
            return
        state.pending_confirmation = False
        state.current_step = 3
        log.add("system", SYNTHESIS_ACK_TEXT)
        await self._synthesize(state, log)

    async def _synthesize(self, state: WorkflowState, log: MessageLog):
        state.pipeline_status = "running"
        log.add("processing", SYNTHESIS_PROCESSING_TEXT)
        try:
            result = await run_pipeline(
                SynthesisState(
                    project_id=state.project_id,
                    project_title=self.project_title,
                    script_text=state.script_text,
                    file_names=UploadCollector(state.uploaded_files).names(),
                ),
                self.api,
                log,
            )
        except Exception as e:
            logger.error(f"Synthesis crashed: {e}", exc_info=True)
            log.add("error", f"❌ Something went wrong during AI synthesis: {e}. Type 'proceed' to try again.")
            state.pipeline_status = "failed"
            return
        state.project_id = result.project_id or state.project_id
        if result.error:
            state.pipeline_status = "failed"
            logger.warning(f"Synthesis failed at step {state.current_step}: {result.error}")
            return
        state.pipeline_status = "idle"
        state.current_step = 5
        logger.info(f"Synthesis finished for project {state.project_id}")
