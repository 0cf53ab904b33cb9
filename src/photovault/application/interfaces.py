from abc import ABC, abstractmethod
from pathlib import Path
from typing import Iterable


class IArchiveWriter(ABC):
    """Streaming archive writer. One instance produces exactly one archive."""

    @abstractmethod
    def add_file(self, source: Path, entry_name: str) -> None:
        """Queue the file at *source* under *entry_name* inside the archive."""
        pass

    @abstractmethod
    def finalize(self) -> None:
        """Close the archive; no entries may be added afterwards."""
        pass

    @property
    @abstractmethod
    def stream(self) -> Iterable[bytes]:
        """Byte chunks of the archive, produced lazily while iterated."""
        pass

