"""Service layer for ftprelay."""

from .base import BaseService
from .files import PruneSummary, RemoteFileService
from .uploads import StagedFile, UploadService

__all__ = [
    "BaseService",
    "PruneSummary",
    "RemoteFileService",
    "StagedFile",
    "UploadService",
]
