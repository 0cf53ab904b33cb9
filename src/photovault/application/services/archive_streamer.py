"""Drive an external archive writer with collision-free entry names."""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterable, List

from photovault.application.dtos import ArchiveStream
from photovault.application.interfaces import IArchiveWriter
from photovault.domain.models import Asset

LOGGER = logging.getLogger(__name__)


class ArchiveNamer:
    """Hand out unique entry names within a single archive.

    The first ``IMG_0001.jpg`` keeps its name; later ones become
    ``IMG_0001+1.jpg``, ``IMG_0001+2.jpg`` and so on.
    """

    def __init__(self) -> None:
        self._seen: Dict[str, int] = {}

    def name_for(self, asset: Asset) -> str:
        ext = asset.extension
        filename = f"{asset.original_file_name}{ext}"
        count = self._seen.get(filename, 0)
        self._seen[filename] = count + 1
        if count:
            filename = f"{asset.original_file_name}+{count}{ext}"
        return filename


class ArchiveStreamer:
    def __init__(self, writer_factory: Callable[[], IArchiveWriter]) -> None:
        self._writer_factory = writer_factory

    def stream(self, assets: Iterable[Asset]) -> ArchiveStream:
        writer = self._writer_factory()
        namer = ArchiveNamer()
        entry_names: List[str] = []

        for asset in assets:
            entry_name = namer.name_for(asset)
            writer.add_file(asset.original_path, entry_name)
            entry_names.append(entry_name)

        writer.finalize()
        LOGGER.info("Archive prepared with %d entries", len(entry_names))
        return ArchiveStream(stream=writer.stream, entry_names=entry_names)
