from cms_dashboard.utils.logging import get_logger, setup_logging
from cms_dashboard.utils.api_response import ok, created
from cms_dashboard.utils.file_classifier import FileClassifier


__all__= [
    "get_logger",
    "setup_logging",
    "ok",
    "created",
    "FileClassifier",
]
