from datetime import datetime
from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class MediaModel(BaseModel):
    """Media proxy payloads are camelCase on the wire"""
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class MediaFileDescriptor(MediaModel):
    """Descriptor returned by the file store after an upload"""
    path: str
    name: str
    size: int = 0
    mime_type: Optional[str] = None
    created_utc: datetime
    url: str


class MediaFileInfo(MediaModel):
    path: str
    name: str
    size: int = 0
    last_modified: Optional[datetime] = None
    url: str


class MediaListResponse(MediaModel):
    path: str
    files: List[MediaFileInfo] = Field(default_factory=list)
    total_count: int = 0


class MoveFileRequest(MediaModel):
    source_path: Optional[str] = None
    destination_path: Optional[str] = None


class MoveFileResponse(MediaModel):
    message: str = "File moved successfully."
    old_path: str
    new_path: str
    url: str


class DeleteFileResponse(MediaModel):
    message: str = "File deleted successfully."
    path: str
