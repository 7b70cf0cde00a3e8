from datetime import datetime
from typing import Any, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, field_validator


def cms_field(camel: str, default: Any = None, **kwargs: Any) -> Any:
    """Field readable from GraphQL (camelCase), REST (PascalCase) or snake_case input"""
    snake = "".join(f"_{c.lower()}" if c.isupper() else c for c in camel)
    pascal = camel[0].upper() + camel[1:]
    return Field(default, validation_alias=AliasChoices(snake, camel, pascal), **kwargs)


class CmsModel(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class ContainedPart(CmsModel):
    """Containment back-reference to the parent folder"""
    list_content_item_id: str = cms_field("listContentItemId", ...)
    order: int = cms_field("order", 0)


class TaxonomyPart(CmsModel):
    repository: Optional[str] = cms_field("repository")

    @field_validator("repository", mode="before")
    @classmethod
    def _first_repository(cls, value: Any) -> Any:
        # Orchard stores the term as a list, e.g. {"Repository": ["Local"]}
        if isinstance(value, list):
            return value[0] if value else None
        return value


class Folder(CmsModel):
    """Folder content item as returned by the CMS"""
    content_item_id: str = cms_field("contentItemId", ...)
    display_text: str = cms_field("displayText", "")
    owner: Optional[str] = cms_field("owner")
    author: Optional[str] = cms_field("author")
    created_utc: Optional[datetime] = cms_field("createdUtc")
    modified_utc: Optional[datetime] = cms_field("modifiedUtc")
    published: bool = cms_field("published", False)
    contained_part: Optional[ContainedPart] = cms_field("containedPart")
    taxonomy_part: Optional[TaxonomyPart] = cms_field("taxonomyPart")

    @field_validator("display_text", mode="before")
    @classmethod
    def _untitled_as_empty(cls, value: Any) -> Any:
        # Orchard sends null for items saved without a title
        return "" if value is None else value

    @property
    def parent_id(self) -> Optional[str]:
        if self.contained_part is None:
            return None
        return self.contained_part.list_content_item_id or None

    @property
    def repository(self) -> Optional[str]:
        return self.taxonomy_part.repository if self.taxonomy_part else None


class MediaReference(CmsModel):
    """One uploaded asset attached to a folder"""
    path: str = cms_field("path", ...)
    name: str = cms_field("name", "")
    url: str = cms_field("url", "")
    size: Optional[int] = cms_field("size")
    mime_type: Optional[str] = cms_field("mimeType")
    created_utc: Optional[datetime] = cms_field("createdUtc")
    display_text: Optional[str] = cms_field("displayText")

    def to_record(self) -> dict:
        """Serialize the way the reference is embedded in a folder record"""
        record = {
            "path": self.path,
            "name": self.name,
            "url": self.url,
            "size": self.size,
            "mimeType": self.mime_type,
            "createdUtc": self.created_utc.isoformat() if self.created_utc else None,
            "displayText": self.display_text,
        }
        return {k: v for k, v in record.items() if v is not None}


class ContentItem(BaseModel):
    """Read-only projection of a media reference as a content record"""
    content_item_id: str
    content_type: str = "Media"
    display_text: str
    owner: Optional[str] = None
    author: Optional[str] = None
    created_utc: Optional[datetime] = None
    modified_utc: Optional[datetime] = None
    published: bool = False
    contained_part: ContainedPart
    taxonomy_part: TaxonomyPart
    content_size: Optional[int] = None
    mime_type: Optional[str] = None
    file_extension: str = ""
    file_type: str = "File"
    media_path: str
    media_url: str


class BreadcrumbItem(CmsModel):
    content_item_id: str = cms_field("contentItemId", ...)
    display_text: str = cms_field("displayText", "")
    level: int = 0

    @field_validator("display_text", mode="before")
    @classmethod
    def _untitled_as_empty(cls, value: Any) -> Any:
        return "" if value is None else value


class FolderQueryResponse(BaseModel):
    folders: List[Folder] = Field(default_factory=list)
    total_count: int = 0


class ContentQueryResponse(BaseModel):
    items: List[ContentItem] = Field(default_factory=list)
    total_count: int = 0
    total_size: int = 0


class FolderCreateRequest(BaseModel):
    folder_name: str = Field(..., description="Display text of the new folder")
    repository: Literal["Local", "Shared"] = Field("Local", description="Repository partition")
    parent_folder_id: Optional[str] = Field(None, description="Parent folder id, omitted for a root folder")


class FolderNameRequest(BaseModel):
    folder_name: str = ""


class ValidationResult(BaseModel):
    valid: bool
    error: Optional[str] = None


class BulkActionRequest(BaseModel):
    content_item_ids: List[str] = Field(..., min_length=1)
    action: Literal["publish", "unpublish", "delete"]


class BulkActionResult(BaseModel):
    action: str
    content_item_ids: List[str]
    succeeded: int
