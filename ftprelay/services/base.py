"""Base service shared by the ftprelay services."""

from __future__ import annotations

from typing import TYPE_CHECKING

from ftprelay.uploaders.constants import DEFAULT_BASE_PATH

if TYPE_CHECKING:
    from ftprelay.core.session import TransferSession


class BaseService:
    """Base service class holding the transfer session."""

    def __init__(
        self,
        session: "TransferSession",
        *,
        base_path: str = DEFAULT_BASE_PATH,
    ) -> None:
        """Initialize service with a transfer session.

        Args:
            session: Transfer session; the service does not own its lifetime.
            base_path: Remote base directory for uploads.
        """
        self.session = session
        self.base_path = base_path

    def _build_path(self, *parts: str) -> str:
        """Join remote path segments under the base path.

        Args:
            *parts: Path segments.

        Returns:
            Absolute remote path.
        """
        segments = [self.base_path.strip("/")] + [p.strip("/") for p in parts if p]
        return "/" + "/".join(s for s in segments if s)
