"""
In-memory project storage.

Projects live in a plain dict for the lifetime of the process. Nothing is
persisted; a restart starts from an empty store.
"""
import uuid
import logging
from typing import Any, Dict, List, Optional
from .models import VideoProject, utcnow

logger = logging.getLogger(__name__)

class ProjectStore:
    def __init__(self):
        self._projects: Dict[str, VideoProject] = {}

    def create(self, **fields: Any) -> VideoProject:
        """Store a new project with a fresh id; status and step get their defaults when not given"""
        project_id = str(uuid.uuid4())
        now = utcnow()
        fields.setdefault("status", "draft")
        fields.setdefault("current_step", 1)
        project = VideoProject(id=project_id, created_at=now, updated_at=now, **fields)
        self._projects[project_id] = project
        logger.info(f"Created project {project_id}")
        return project.model_copy(deep=True)

    def get(self, project_id: str) -> Optional[VideoProject]:
        project = self._projects.get(project_id)
        return project.model_copy(deep=True) if project else None

    def update(self, project_id: str, **updates: Any) -> Optional[VideoProject]:
        """Shallow-merge updates into an existing project.

        Fields not named in `updates` are left untouched. Returns None when the
        project does not exist.
        """
        existing = self._projects.get(project_id)
        if not existing:
            logger.warning(f"Cannot update project {project_id} - not found")
            return None

        unknown = set(updates) - set(VideoProject.model_fields)
        if unknown:
            raise ValueError(f"Unknown project fields: {', '.join(sorted(unknown))}")

        merged = existing.model_dump()
        merged.update(updates)
        merged["updated_at"] = utcnow()
        updated = VideoProject.model_validate(merged)
        self._projects[project_id] = updated
        logger.info(f"Updated project {project_id}: {', '.join(sorted(updates))}")
        return updated.model_copy(deep=True)

    def list_for_user(self, user_id: str) -> List[VideoProject]:
        return [p.model_copy(deep=True) for p in self._projects.values() if p.user_id == user_id]
