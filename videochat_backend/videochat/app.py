import logging
from typing import Optional
from fastapi import APIRouter, Depends, FastAPI, HTTPException, Query, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException

# Ensure .env is loaded before importing modules that initialize API clients
from . import settings
from .settings import has_all_keys, ALLOWED_ORIGINS
from .models import (
    AnalyzeMediaRequest, AnalyzeScriptRequest, AssemblyPlanRequest,
    CreateProjectRequest, MediaType, VideoProject,
)
from .storage import ProjectStore
from .llm import SynthesisClient, SynthesisError

# Configure logging
logging.basicConfig(level=logging.INFO)
logger = logging.getLogger(__name__)

VIDEO_EXTENSIONS = {"mp4", "mov", "avi", "webm"}
AUDIO_EXTENSIONS = {"mp3", "wav", "m4a", "aac"}

def media_type_for(file_name: str) -> MediaType:
    extension = file_name.lower().rsplit(".", 1)[-1]
    if extension in VIDEO_EXTENSIONS:
        return "video"
    if extension in AUDIO_EXTENSIONS:
        return "audio"
    return "image"

def get_store(request: Request) -> ProjectStore:
    return request.app.state.store

def get_synthesis(request: Request) -> SynthesisClient:
    return request.app.state.synthesis

def _dump(model) -> dict:
    return model.model_dump(by_alias=True, mode="json")

def _mark_error(store: ProjectStore, project_id: str):
    if store.get(project_id):
        store.update(project_id, status="error")

router = APIRouter()

@router.get("/health")
def health():
    keys_ok = has_all_keys()
    logger.info(f"Health check: API keys present = {keys_ok}")
    return {"ok": True, "has_keys": keys_ok}

@router.post("/api/projects", status_code=201)
def create_project(req: Optional[CreateProjectRequest] = None, store: ProjectStore = Depends(get_store)):
    req = req or CreateProjectRequest()
    project = store.create(
        user_id=settings.DEFAULT_USER_ID,
        title=req.title or "New Video Project",
        description=req.description or None,
    )
    return _dump(project)

@router.get("/api/projects")
def list_projects(user_id: Optional[str] = Query(None, alias="userId"), store: ProjectStore = Depends(get_store)):
    return [_dump(p) for p in store.list_for_user(user_id or settings.DEFAULT_USER_ID)]

@router.get("/api/projects/{project_id}")
def get_project(project_id: str, store: ProjectStore = Depends(get_store)):
    project = store.get(project_id)
    if not project:
        raise HTTPException(404, "Project not found")
    return _dump(project)

@router.post("/api/analyze-script")
def analyze_script(
    req: AnalyzeScriptRequest,
    store: ProjectStore = Depends(get_store),
    synthesis: SynthesisClient = Depends(get_synthesis),
):
    if not req.project_id or not req.script_content:
        raise HTTPException(400, "Missing projectId or scriptContent")

    try:
        analysis = synthesis.analyze_script(req.script_content)
    except SynthesisError as e:
        logger.error(f"Script analysis failed for project {req.project_id}: {e}")
        _mark_error(store, req.project_id)
        raise HTTPException(500, "Failed to analyze script")

    current = store.get(req.project_id)
    store.update(
        req.project_id,
        script_content=req.script_content,
        script_analysis=analysis,
        status="processing",
        current_step=max(2, current.current_step if current else 1),
    )
    return {"success": True, "analysis": _dump(analysis)}

@router.post("/api/analyze-media")
def analyze_media(
    req: AnalyzeMediaRequest,
    store: ProjectStore = Depends(get_store),
    synthesis: SynthesisClient = Depends(get_synthesis),
):
    if not req.project_id or not req.media_files:
        raise HTTPException(400, "Missing projectId or mediaFiles")

    analyses = []
    for file_name in req.media_files:
        try:
            analyses.append(synthesis.analyze_media(file_name, media_type_for(file_name)))
        except SynthesisError as e:
            # One bad file should not sink the batch
            logger.error(f"Failed to analyze {file_name}: {e}")

    current = store.get(req.project_id)
    store.update(
        req.project_id,
        media_files=list(req.media_files),
        media_analyses=analyses,
        status="processing",
        current_step=max(3, current.current_step if current else 1),
    )
    logger.info(f"Analyzed {len(analyses)}/{len(req.media_files)} media files for project {req.project_id}")
    return {"success": True, "analyses": [_dump(a) for a in analyses]}

@router.post("/api/create-assembly-plan")
def create_assembly_plan(
    req: AssemblyPlanRequest,
    store: ProjectStore = Depends(get_store),
    synthesis: SynthesisClient = Depends(get_synthesis),
):
    if not req.project_id:
        raise HTTPException(400, "Missing projectId")

    project: Optional[VideoProject] = store.get(req.project_id)
    if not project:
        raise HTTPException(404, "Project not found")

    if not project.script_analysis or not project.media_analyses:
        raise HTTPException(400, {
            "error": "Script and media analysis required",
            "details": {
                "hasScript": project.script_analysis is not None,
                "hasMediaAnalysis": bool(project.media_analyses),
                "mediaCount": len(project.media_analyses),
            },
        })

    try:
        assembly_plan = synthesis.create_assembly_plan(project.script_analysis, project.media_analyses)
        storyboard_description = synthesis.generate_storyboard_description(assembly_plan)
    except SynthesisError as e:
        logger.error(f"Assembly plan creation failed for project {req.project_id}: {e}")
        _mark_error(store, req.project_id)
        raise HTTPException(500, "Failed to create assembly plan")

    store.update(
        req.project_id,
        assembly_plan=assembly_plan,
        storyboard_description=storyboard_description,
        status="completed",
        current_step=max(4, project.current_step),
    )
    return {
        "success": True,
        "assemblyPlan": _dump(assembly_plan),
        "storyboardDescription": storyboard_description,
    }

async def _http_error(request: Request, exc: StarletteHTTPException):
    content = exc.detail if isinstance(exc.detail, dict) else {"error": exc.detail}
    return JSONResponse(content, status_code=exc.status_code)

async def _validation_error(request: Request, exc: RequestValidationError):
    logger.info(f"Rejected request to {request.url.path}: {exc.errors()}")
    return JSONResponse({"error": "Invalid request body"}, status_code=400)

async def _unhandled_error(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.url.path}")
    return JSONResponse({"error": "Internal server error"}, status_code=500)

def create_app(store: Optional[ProjectStore] = None, synthesis: Optional[SynthesisClient] = None) -> FastAPI:
    app = FastAPI(title="VideoChat Pro API")

    app.add_middleware(
        CORSMiddleware,
        allow_origins=ALLOWED_ORIGINS or ["*"],
        allow_credentials=True,
        allow_methods=["POST", "GET", "OPTIONS"],
        allow_headers=["*"],
    )
    app.add_exception_handler(StarletteHTTPException, _http_error)
    app.add_exception_handler(RequestValidationError, _validation_error)
    app.add_exception_handler(Exception, _unhandled_error)

    app.state.store = store or ProjectStore()
    app.state.synthesis = synthesis or SynthesisClient()
    app.include_router(router)
    return app

app = create_app()
