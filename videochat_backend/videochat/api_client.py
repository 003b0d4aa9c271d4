"""
HTTP client for the VideoChat API, used by the chat workflow.
"""
import httpx
import logging
from contextlib import contextmanager
from typing import Any, Dict, List, Optional
from pydantic import ValidationError
from .models import AssemblyPlan, MediaAnalysis, ScriptAnalysis, VideoProject
from . import settings

logger = logging.getLogger(__name__)

class ApiError(Exception):
    def __init__(self, status_code: int, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.status_code = status_code
        self.message = message
        self.details = details or {}

@contextmanager
def _parsing(path: str):
    try:
        yield
    except (KeyError, TypeError, ValidationError) as e:
        logger.error(f"Malformed response from {path}: {e}")
        raise ApiError(502, f"Malformed response from {path}") from e

class VideoChatClient:
    def __init__(self, base_url: Optional[str] = None, transport: Optional[httpx.AsyncBaseTransport] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self._transport = transport
        # Synthesis calls can take a while; default to the AI timeout plus headroom
        self._timeout = timeout if timeout is not None else settings.AI_REQUEST_TIMEOUT_S + 30

    async def _request(self, method: str, path: str, json: Optional[dict] = None) -> Any:
        try:
            async with httpx.AsyncClient(base_url=self.base_url, transport=self._transport, timeout=self._timeout) as client:
                r = await client.request(method, path, json=json)
        except httpx.HTTPError as e:
            logger.error(f"{method} {path} failed: {e}")
            raise ApiError(0, f"Could not reach the server: {e}") from e

        try:
            body = r.json()
        except ValueError:
            body = None

        if r.is_success:
            if body is None:
                raise ApiError(502, f"Malformed response from {path}")
            return body

        message = body.get("error") if isinstance(body, dict) else None
        details = body.get("details") if isinstance(body, dict) else None
        logger.warning(f"{method} {path} returned {r.status_code}: {message}")
        raise ApiError(r.status_code, message or f"Request failed with status {r.status_code}", details)

    async def create_project(self, title: Optional[str] = None, description: Optional[str] = None) -> VideoProject:
        path = "/api/projects"
        data = await self._request("POST", path, {"title": title, "description": description})
        with _parsing(path):
            return VideoProject.model_validate(data)

    async def get_project(self, project_id: str) -> VideoProject:
        path = f"/api/projects/{project_id}"
        data = await self._request("GET", path)
        with _parsing(path):
            return VideoProject.model_validate(data)

    async def analyze_script(self, project_id: str, script_content: str) -> ScriptAnalysis:
        path = "/api/analyze-script"
        data = await self._request("POST", path, {"projectId": project_id, "scriptContent": script_content})
        with _parsing(path):
            return ScriptAnalysis.model_validate(data["analysis"])

    async def analyze_media(self, project_id: str, media_files: List[str]) -> List[MediaAnalysis]:
        path = "/api/analyze-media"
        data = await self._request("POST", path, {"projectId": project_id, "mediaFiles": media_files})
        with _parsing(path):
            return [MediaAnalysis.model_validate(a) for a in data["analyses"]]

    async def create_assembly_plan(self, project_id: str) -> Dict[str, Any]:
        """Returns {"assembly_plan": AssemblyPlan, "storyboard_description": str}"""
        path = "/api/create-assembly-plan"
        data = await self._request("POST", path, {"projectId": project_id})
        with _parsing(path):
            return {
                "assembly_plan": AssemblyPlan.model_validate(data["assemblyPlan"]),
                "storyboard_description": data.get("storyboardDescription") or "",
            }
