"""Tests for media field shape detection and merging."""

from pydantic import TypeAdapter

from cms_dashboard.schemas import MediaReference
from cms_dashboard.utils.media_fields import (
    FlatListShape, MediaFieldShape, MissingShape, NestedPathsShape,
    append_media_reference, detect_media_field, read_media_references
)

REFERENCE = MediaReference(path="Local/docs/a.txt", name="a.txt", url="/media/Local/docs/a.txt", size=3)


def test_nested_paths_take_precedence_over_flat_list():
    record = {"Folder": {"Media": {"Paths": []}}, "MediaItems": []}

    shape = detect_media_field(record, "Folder", "Media")

    assert shape == NestedPathsShape(part="Folder", field="Media", has_texts=False)


def test_flat_list_keys_are_detected_in_either_case():
    assert detect_media_field({"mediaItems": []}, "Folder", "Media") == FlatListShape(key="mediaItems")
    assert detect_media_field({"MediaItems": []}, "Folder", "Media") == FlatListShape(key="MediaItems")


def test_non_list_values_count_as_missing():
    record = {"Folder": {"Media": {"Paths": "oops"}}, "mediaItems": None}

    assert isinstance(detect_media_field(record, "Folder", "Media"), MissingShape)


def test_part_that_is_not_an_object_counts_as_missing():
    assert isinstance(detect_media_field({"Folder": ["oops"]}, "Folder", "Media"), MissingShape)
    assert detect_media_field({"Folder": "oops", "mediaItems": []}, "Folder", "Media") == FlatListShape(key="mediaItems")


def test_shape_round_trips_through_its_discriminator():
    adapter = TypeAdapter(MediaFieldShape)

    assert isinstance(adapter.validate_python({"kind": "flat_list", "key": "mediaItems"}), FlatListShape)
    assert isinstance(adapter.validate_python({"kind": "missing"}), MissingShape)


def test_append_to_missing_creates_pascal_case_list():
    record = {"ContentItemId": "docs"}

    append_media_reference(record, MissingShape(), REFERENCE)

    assert record["MediaItems"] == [{"path": "Local/docs/a.txt", "name": "a.txt", "url": "/media/Local/docs/a.txt", "size": 3}]


def test_append_to_nested_paths_without_texts_only_adds_path():
    record = {"Folder": {"Media": {"Paths": ["old.txt"]}}}
    shape = detect_media_field(record, "Folder", "Media")

    append_media_reference(record, shape, REFERENCE)

    assert record["Folder"]["Media"] == {"Paths": ["old.txt", "Local/docs/a.txt"]}


def test_append_to_nested_paths_pads_short_texts():
    record = {"Folder": {"Media": {"Paths": ["a", "b"], "MediaTexts": ["A"]}}}
    shape = detect_media_field(record, "Folder", "Media")

    append_media_reference(record, shape, MediaReference(path="c", display_text="C"))
    references = read_media_references(record, shape, "/media")

    assert record["Folder"]["Media"]["MediaTexts"] == ["A", "", "C"]
    assert [(r.path, r.display_text) for r in references] == [("a", "A"), ("b", None), ("c", "C")]


def test_append_to_nested_paths_drops_surplus_texts():
    record = {"Folder": {"Media": {"Paths": ["a"], "MediaTexts": ["A", "stale"]}}}
    shape = detect_media_field(record, "Folder", "Media")

    append_media_reference(record, shape, MediaReference(path="b", display_text="B"))

    assert record["Folder"]["Media"] == {"Paths": ["a", "b"], "MediaTexts": ["A", "B"]}


def test_read_preserves_insertion_order():
    record = {"mediaItems": []}
    shape = detect_media_field(record, "Folder", "Media")
    for name in ("one.txt", "two.txt", "three.txt"):
        append_media_reference(record, shape, MediaReference(path=name, name=name, url=f"/media/{name}"))

    references = read_media_references(record, shape, "/media")

    assert [r.path for r in references] == ["one.txt", "two.txt", "three.txt"]


def test_read_nested_paths_builds_urls_and_names():
    record = {"Folder": {"Media": {"Paths": ["/Shared/x/photo.png", ""]}}}
    shape = detect_media_field(record, "Folder", "Media")

    references = read_media_references(record, shape, "/media/")

    assert len(references) == 1
    assert references[0].name == "photo.png"
    assert references[0].url == "/media/Shared/x/photo.png"


def test_read_missing_is_empty():
    assert read_media_references({}, MissingShape(), "/media") == []
