"""Remote directory listing model."""

from __future__ import annotations

from datetime import datetime
from typing import Literal

from pydantic import Field

from .base import BaseModel

EntryType = Literal["file", "directory", "unknown"]


class RemoteEntry(BaseModel):
    """One entry of a remote directory listing."""

    name: str = Field(..., description="Entry name (no directory part)")
    type: EntryType = Field("unknown", description="file, directory or unknown")
    size: int | None = Field(None, description="Size in bytes, when reported")
    modified_at: datetime | None = Field(None, description="Last modification time")

    @property
    def is_file(self) -> bool:
        return self.type == "file"

    @property
    def is_dir(self) -> bool:
        return self.type == "directory"
