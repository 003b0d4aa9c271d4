from datetime import datetime, timezone
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel
from typing import List, Literal, Optional

ProjectStatus = Literal["draft", "processing", "completed", "error"]
Mood = Literal["energetic", "calm", "professional", "dramatic", "educational"]
MediaType = Literal["image", "video", "audio"]
Pacing = Literal["slow", "medium", "fast"]

def utcnow() -> datetime:
    return datetime.now(timezone.utc)

class CamelModel(BaseModel):
    # JSON uses camelCase keys; Python code uses snake_case attributes
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

# --- AI results ---

class ScriptAnalysis(CamelModel):
    script_summary: str
    main_themes: List[str] = Field(default_factory=list)
    suggested_timing: float
    mood: Mood
    visual_elements: List[str] = Field(default_factory=list)

class MediaAnalysis(CamelModel):
    type: MediaType
    description: str
    suggested_usage: str
    file_name: Optional[str] = None
    duration: Optional[float] = None
    key_frames: Optional[List[str]] = None

class StoryboardScene(CamelModel):
    scene_number: int
    duration: float
    description: str
    media_files: List[str] = Field(default_factory=list)
    audio_overlay: Optional[str] = None
    text_overlay: Optional[str] = None
    transitions: str

class AssemblyPlan(CamelModel):
    total_duration: float
    scenes: List[StoryboardScene]
    audio_track: str
    pacing: Pacing
    style: str

# --- Stored project ---

class VideoProject(CamelModel):
    id: str
    user_id: str
    title: str
    description: Optional[str] = None
    status: ProjectStatus = "draft"
    current_step: int = 1
    script_content: Optional[str] = None
    audio_files: List[str] = Field(default_factory=list)
    media_files: List[str] = Field(default_factory=list)
    script_analysis: Optional[ScriptAnalysis] = None
    media_analyses: List[MediaAnalysis] = Field(default_factory=list)
    assembly_plan: Optional[AssemblyPlan] = None
    storyboard_description: Optional[str] = None
    created_at: datetime = Field(default_factory=utcnow)
    updated_at: datetime = Field(default_factory=utcnow)

# --- Request bodies ---
# Required fields are Optional here so the routes can answer with their own 400 messages.

class CreateProjectRequest(CamelModel):
    title: Optional[str] = None
    description: Optional[str] = None

class AnalyzeScriptRequest(CamelModel):
    project_id: Optional[str] = None
    script_content: Optional[str] = None

class AnalyzeMediaRequest(CamelModel):
    project_id: Optional[str] = None
    media_files: Optional[List[str]] = None

class AssemblyPlanRequest(CamelModel):
    project_id: Optional[str] = None
