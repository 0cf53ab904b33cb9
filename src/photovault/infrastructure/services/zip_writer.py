"""Streaming zip archive writer backed by ``zipstream-ng``."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Iterable
from zipfile import ZIP_STORED

from zipstream import ZipStream

from photovault.application.interfaces import IArchiveWriter
from photovault.errors import ArchiveWriteError

LOGGER = logging.getLogger(__name__)


class ZipStreamWriter(IArchiveWriter):
    """Build a zip lazily; file contents are read only while streaming.

    Photos and videos are already compressed, so entries are stored as-is
    unless a different ``compress_type`` is requested.
    """

    def __init__(self, compress_type: int = ZIP_STORED) -> None:
        self._zip = ZipStream(compress_type=compress_type)
        self._finalized = False

    def add_file(self, source: Path, entry_name: str) -> None:
        if self._finalized:
            raise ArchiveWriteError("Archive already finalized")
        try:
            self._zip.add_path(str(source), arcname=entry_name)
        except (OSError, ValueError) as exc:
            raise ArchiveWriteError(f"Cannot add {source} as {entry_name}: {exc}") from exc
        LOGGER.debug("Queued %s as %s", source, entry_name)

    def finalize(self) -> None:
        if not self._finalized:
            self._zip.finalize()
            self._finalized = True

    @property
    def stream(self) -> Iterable[bytes]:
        return iter(self._zip)
