"""Data models for ftprelay."""

from .base import BaseModel
from .entry import RemoteEntry
from .transfer import BatchResult, UploadFailure, UploadProgress, UploadSuccess

__all__ = [
    "BaseModel",
    "RemoteEntry",
    "BatchResult",
    "UploadFailure",
    "UploadProgress",
    "UploadSuccess",
]
