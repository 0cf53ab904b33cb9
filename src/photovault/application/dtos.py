from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Dict, Iterable, List, Optional

from photovault.config import ZIP_CONTENT_TYPE
from photovault.domain.models import Asset


@dataclass
class DownloadRequest:
    """Selection for a download. Exactly one criterion is honoured.

    Priority when several are supplied: ``asset_ids``, then ``album_id``,
    then ``user_id``.
    """
    asset_ids: Optional[List[str]] = None
    album_id: Optional[str] = None
    user_id: Optional[str] = None
    archive_size: Optional[int] = None


@dataclass
class ArchivePlan:
    size: int = 0
    asset_ids: List[str] = field(default_factory=list)
    sealed: bool = False

    @property
    def is_empty(self) -> bool:
        return not self.asset_ids

    def add(self, asset: Asset) -> None:
        if self.sealed:
            raise RuntimeError("Cannot add assets to a sealed archive plan")
        # Unknown sizes count as zero
        self.size += asset.size_bytes or 0
        self.asset_ids.append(asset.id)

    def seal(self) -> "ArchivePlan":
        self.sealed = True
        return self

    def to_dict(self) -> Dict[str, Any]:
        return {"size": self.size, "assetIds": list(self.asset_ids)}


@dataclass
class DownloadInfo:
    archives: List[ArchivePlan] = field(default_factory=list)

    @property
    def total_size(self) -> int:
        return sum(archive.size for archive in self.archives)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "totalSize": self.total_size,
            "archives": [archive.to_dict() for archive in self.archives],
        }


@dataclass
class AssetDTO:
    id: str
    owner_id: str
    original_file_name: str
    media_type: str
    created_at: Optional[datetime]
    size_bytes: Optional[int]
    is_favorite: bool
    live_photo_video_id: Optional[str] = None

    @property
    def is_video(self) -> bool:
        return self.media_type == "video"

    @classmethod
    def from_asset(cls, asset: Asset) -> "AssetDTO":
        return cls(
            id=asset.id,
            owner_id=asset.owner_id,
            original_file_name=asset.original_file_name,
            media_type=asset.media_type.value,
            created_at=asset.created_at,
            size_bytes=asset.size_bytes,
            is_favorite=asset.is_favorite,
            live_photo_video_id=asset.live_photo_video_id,
        )


@dataclass
class MemoryLaneEntry:
    title: str
    assets: List[AssetDTO] = field(default_factory=list)

    @staticmethod
    def title_for(years_ago: int) -> str:
        return f"{years_ago} year{'s' if years_ago > 1 else ''} since..."


@dataclass
class ArchiveStream:
    stream: Iterable[bytes]
    entry_names: List[str] = field(default_factory=list)
    content_type: str = ZIP_CONTENT_TYPE


@dataclass
class FileStream:
    path: Path
    content_type: str
    size: Optional[int] = None
