"""Default configuration values for photovault."""

from __future__ import annotations

from typing import Final

KiB: Final[int] = 1024
MiB: Final[int] = 1024 * KiB
GiB: Final[int] = 1024 * MiB

# Archives are sealed once their accumulated size goes past this many bytes.
# Callers may override it per request.
DEFAULT_ARCHIVE_SIZE: Final[int] = 4 * GiB

# Page size used when walking an album or a whole library for download.
DOWNLOAD_PAGE_SIZE: Final[int] = 2500

MEMORY_LANE_DEFAULT_YEARS: Final[int] = 30
MEMORY_LANE_MAX_WORKERS: Final[int] = 4

ZIP_CONTENT_TYPE: Final[str] = "application/zip"
DEFAULT_CONTENT_TYPE: Final[str] = "application/octet-stream"

DATABASE_FILE_NAME: Final[str] = "library.db"
