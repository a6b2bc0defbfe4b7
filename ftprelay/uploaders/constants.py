"""Shared constants for uploader modules."""

from ftprelay.core.config import DEFAULT_UPLOAD_PATH

# =============================================================================
# Remote Path Layout
# =============================================================================

# Base directory on the remote store: <base>/<date>/<owner>/<submission>/<file>
DEFAULT_BASE_PATH = DEFAULT_UPLOAD_PATH

# Characters kept as-is in remote file names; everything else becomes "_"
SAFE_FILENAME_PATTERN = r"[^A-Za-z0-9.-]"
FILENAME_REPLACEMENT = "_"

# Prefix for submission ids generated when the caller has none
TEMP_SUBMISSION_PREFIX = "temp_"
