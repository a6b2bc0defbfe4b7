"""Timeout defaults shared by the session and configuration layers."""

# Connect and per-command timeout for the FTP control connection
DEFAULT_FTP_TIMEOUT_SECONDS = 30

# Standard FTP control port
DEFAULT_FTP_PORT = 21
