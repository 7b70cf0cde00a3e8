"""Shapes in which a folder record can carry its media list.

The CMS has been seen exposing a folder's media in two ways:

* an Orchard media field, ``record[<Part>][<Field>]["Paths"]``, holding only
  path strings (optionally with a parallel ``MediaTexts`` list);
* a flat list of reference objects under ``mediaItems`` or ``MediaItems``.

``detect_media_field`` says which one a record uses so that reading and
appending always go through the same variant.
"""
import posixpath
from typing import Annotated, List, Literal, Union

from pydantic import BaseModel, Field, ValidationError

from cms_dashboard.schemas.folder import MediaReference
from cms_dashboard.utils import get_logger

logger = get_logger(__name__)

FLAT_LIST_KEYS = ("mediaItems", "MediaItems")
DEFAULT_FLAT_LIST_KEY = "MediaItems"


class NestedPathsShape(BaseModel):
    kind: Literal["nested_paths"] = "nested_paths"
    part: str
    field: str
    has_texts: bool = False


class FlatListShape(BaseModel):
    kind: Literal["flat_list"] = "flat_list"
    key: str


class MissingShape(BaseModel):
    kind: Literal["missing"] = "missing"


MediaFieldShape = Annotated[
    Union[NestedPathsShape, FlatListShape, MissingShape],
    Field(discriminator="kind"),
]


def detect_media_field(record: dict, part: str, field: str) -> MediaFieldShape:
    """Return the media field variant present on a raw folder record"""
    part_value = record.get(part)
    media_field = part_value.get(field) if isinstance(part_value, dict) else None
    if isinstance(media_field, dict) and isinstance(media_field.get("Paths"), list):
        return NestedPathsShape(
            part=part,
            field=field,
            has_texts=isinstance(media_field.get("MediaTexts"), list),
        )

    for key in FLAT_LIST_KEYS:
        if isinstance(record.get(key), list):
            return FlatListShape(key=key)

    return MissingShape()


def append_media_reference(record: dict, shape: MediaFieldShape, reference: MediaReference) -> dict:
    """Append a reference to the record in the shape it already uses"""
    if isinstance(shape, NestedPathsShape):
        media_field = record[shape.part][shape.field]
        if shape.has_texts:
            # MediaTexts is index-aligned with Paths, pad or trim before adding
            paths, texts = media_field["Paths"], media_field["MediaTexts"]
            del texts[len(paths):]
            texts.extend([""] * (len(paths) - len(texts)))
            texts.append(reference.display_text or "")
        media_field["Paths"].append(reference.path)
    elif isinstance(shape, FlatListShape):
        record[shape.key].append(reference.to_record())
    else:
        record[DEFAULT_FLAT_LIST_KEY] = [reference.to_record()]
    return record


def read_media_references(record: dict, shape: MediaFieldShape, url_prefix: str) -> List[MediaReference]:
    """Read the media list of a raw folder record in insertion order"""
    if isinstance(shape, NestedPathsShape):
        media_field = record[shape.part][shape.field]
        texts = media_field.get("MediaTexts") or []
        references = []
        for index, path in enumerate(media_field["Paths"]):
            if not isinstance(path, str) or not path:
                continue
            references.append(MediaReference(
                path=path,
                name=posixpath.basename(path),
                url=f"{url_prefix.rstrip('/')}/{path.lstrip('/')}",
                display_text=(texts[index] or None) if index < len(texts) else None,
            ))
        return references

    if isinstance(shape, FlatListShape):
        references = []
        for entry in record[shape.key]:
            try:
                references.append(MediaReference.model_validate(entry))
            except ValidationError:
                logger.warning(f"Skipping malformed media entry under {shape.key}: {entry!r}")
        return references

    return []
