import os
import mimetypes
from typing import Iterable, List, Optional
from .models import CamelModel

class UploadedFile(CamelModel):
    name: str
    size_bytes: int
    step: int = 1
    content_type: Optional[str] = None

    @property
    def display_size(self) -> str:
        return f"{self.size_bytes / 1024:.1f} KB"

def describe_file(path: str, step: int = 1) -> UploadedFile:
    """Build an upload descriptor for a file on local disk"""
    content_type, _ = mimetypes.guess_type(path)
    return UploadedFile(
        name=os.path.basename(path),
        size_bytes=os.path.getsize(path),
        step=step,
        content_type=content_type,
    )

class UploadCollector:
    """Cumulative list of every file the user has handed over, tagged by step.

    Nothing is filtered here; accepting or rejecting file types is up to the
    front end that hands files in.
    """

    def __init__(self, files: Optional[List[UploadedFile]] = None):
        self.files = files if files is not None else []

    def collect(self, files: Iterable[UploadedFile], step: int) -> List[UploadedFile]:
        accepted = [f.model_copy(update={"step": step}) for f in files]
        self.files.extend(accepted)
        return accepted

    def names(self) -> List[str]:
        return [f.name for f in self.files]
