import os
from typing import Optional


class FileClassifier:
    """Utility class for classifying media files for display"""

    EXTENSION_TYPES = {
        "pdf": "PDF",
        "doc": "Document",
        "docx": "Document",
        "xls": "Spreadsheet",
        "xlsx": "Spreadsheet",
        "ppt": "Presentation",
        "pptx": "Presentation",
        "jpg": "Image",
        "jpeg": "Image",
        "png": "Image",
        "gif": "Image",
        "svg": "Image",
        "mp4": "Video",
        "avi": "Video",
        "mov": "Video",
        "mp3": "Audio",
        "wav": "Audio",
        "txt": "Text",
        "md": "Markdown",
        "html": "HTML",
        "css": "CSS",
        "js": "JavaScript",
        "ts": "TypeScript",
        "json": "JSON",
        "xml": "XML",
        "zip": "Archive",
        "rar": "Archive",
        "7z": "Archive",
    }

    SIZE_UNITS = ["B", "KB", "MB", "GB", "TB"]

    @staticmethod
    def get_file_extension(file_name: str) -> str:
        """Return the extension of a file name including the dot, e.g. '.png'"""
        return os.path.splitext(file_name or "")[1]

    @staticmethod
    def get_file_type(mime_type: Optional[str] = None, extension: Optional[str] = None) -> str:
        """Display name for a file, MIME type first then extension"""
        if mime_type:
            if mime_type.startswith("image/"):
                return "Image"
            if mime_type.startswith("video/"):
                return "Video"
            if mime_type.startswith("audio/"):
                return "Audio"
            if "pdf" in mime_type:
                return "PDF"
            if "word" in mime_type or "document" in mime_type:
                return "Document"
            if "sheet" in mime_type or "excel" in mime_type:
                return "Spreadsheet"
            if "presentation" in mime_type or "powerpoint" in mime_type:
                return "Presentation"
            if "text" in mime_type:
                return "Text"

        if extension:
            ext = extension.lower().replace(".", "", 1)
            return FileClassifier.EXTENSION_TYPES.get(ext, "File")

        return "File"

    @staticmethod
    def format_file_size(size: Optional[int]) -> str:
        """Human readable size, e.g. 1536 -> '1.5 KB'"""
        if not size:
            return "0 B"

        index = 0
        scaled = float(size)
        while scaled >= 1024 and index < len(FileClassifier.SIZE_UNITS) - 1:
            scaled /= 1024
            index += 1

        value = round(scaled, 2)
        if value == int(value):
            value = int(value)
        return f"{value} {FileClassifier.SIZE_UNITS[index]}"
