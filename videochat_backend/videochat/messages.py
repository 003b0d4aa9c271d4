"""
Chat message log shown to the user.

The log is append-only. The one exception is a `progress` message, whose
metadata may be swapped for an updated copy (matched by its marker) while the
work it tracks is still running.
"""
import secrets
import time
from datetime import datetime
from typing import Annotated, Iterator, List, Literal, Optional, Union
from pydantic import ConfigDict, Field, TypeAdapter
from .models import AssemblyPlan, CamelModel, utcnow

MessageType = Literal["system", "user", "progress", "success", "error", "processing"]

class FileDetail(CamelModel):
    name: str
    size: str

class FileListMetadata(CamelModel):
    kind: Literal["files"] = "files"
    files: List[FileDetail]

class ProgressMetadata(CamelModel):
    kind: Literal["progress"] = "progress"
    marker: str
    progress: float = 0.0

class PlanMetadata(CamelModel):
    kind: Literal["plan"] = "plan"
    assembly_plan: AssemblyPlan
    storyboard_description: str

class ConfirmationMetadata(CamelModel):
    kind: Literal["confirmation"] = "confirmation"
    has_script: bool
    file_count: int

MessageMetadata = Annotated[
    Union[FileListMetadata, ProgressMetadata, PlanMetadata, ConfirmationMetadata],
    Field(discriminator="kind"),
]

def new_message_id() -> str:
    return f"{int(time.time() * 1000)}-{secrets.token_hex(4)}"

class ChatMessage(CamelModel):
    model_config = ConfigDict(frozen=True)

    id: str = Field(default_factory=new_message_id)
    type: MessageType
    content: str
    metadata: Optional[MessageMetadata] = None
    timestamp: datetime = Field(default_factory=utcnow)

_messages_adapter = TypeAdapter(List[ChatMessage])

class MessageLog:
    def __init__(self, messages: Optional[List[ChatMessage]] = None):
        self._messages: List[ChatMessage] = list(messages or [])

    def add(self, type: MessageType, content: str, metadata=None) -> ChatMessage:
        message = ChatMessage(type=type, content=content, metadata=metadata)
        self._messages.append(message)
        return message

    def update_progress(self, marker: str, progress: float) -> Optional[ChatMessage]:
        """Replace the metadata of the latest in-flight progress message tagged with `marker`"""
        for i in range(len(self._messages) - 1, -1, -1):
            message = self._messages[i]
            meta = message.metadata
            if message.type == "progress" and isinstance(meta, ProgressMetadata) and meta.marker == marker:
                updated = message.model_copy(
                    update={"metadata": meta.model_copy(update={"progress": max(0.0, min(100.0, progress))})}
                )
                self._messages[i] = updated
                return updated
        return None

    @property
    def messages(self) -> List[ChatMessage]:
        return list(self._messages)

    def since(self, index: int) -> List[ChatMessage]:
        return self._messages[index:]

    def __len__(self) -> int:
        return len(self._messages)

    def __iter__(self) -> Iterator[ChatMessage]:
        return iter(list(self._messages))

    def __getitem__(self, index: int) -> ChatMessage:
        return self._messages[index]

    def to_json(self) -> str:
        return _messages_adapter.dump_json(self._messages, by_alias=True).decode("utf-8")

    @classmethod
    def from_json(cls, data: str) -> "MessageLog":
        return cls(_messages_adapter.validate_json(data))
