import pytest

from cms_dashboard.utils import FileClassifier


@pytest.mark.parametrize("size, expected", [
    (None, "0 B"),
    (0, "0 B"),
    (512, "512 B"),
    (1024, "1 KB"),
    (1536, "1.5 KB"),
    (1048576, "1 MB"),
    (5 * 1024 ** 3, "5 GB"),
    (3 * 1024 ** 5, "3072 TB"),
])
def test_format_file_size(size, expected):
    assert FileClassifier.format_file_size(size) == expected


@pytest.mark.parametrize("mime_type, extension, expected", [
    ("image/png", ".png", "Image"),
    ("video/mp4", None, "Video"),
    ("application/pdf", ".pdf", "PDF"),
    ("application/vnd.openxmlformats-officedocument.wordprocessingml.document", ".docx", "Document"),
    ("application/vnd.ms-excel", ".xls", "Spreadsheet"),
    (None, ".MD", "Markdown"),
    ("application/octet-stream", ".zip", "Archive"),
    (None, ".unknown", "File"),
    (None, None, "File"),
])
def test_get_file_type(mime_type, extension, expected):
    assert FileClassifier.get_file_type(mime_type, extension) == expected


def test_get_file_extension():
    assert FileClassifier.get_file_extension("report_20240115103000.pdf") == ".pdf"
    assert FileClassifier.get_file_extension("archive.tar.gz") == ".gz"
    assert FileClassifier.get_file_extension("README") == ""
