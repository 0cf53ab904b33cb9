from __future__ import annotations
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from pathlib import Path
from typing import List, Optional
import uuid

# Define MediaType here as the single source of truth for the domain
class MediaType(str, Enum):
    PHOTO = "photo"
    VIDEO = "video"


class Permission(str, Enum):
    ASSET_DOWNLOAD = "asset.download"
    ALBUM_DOWNLOAD = "album.download"
    LIBRARY_DOWNLOAD = "library.download"


@dataclass(frozen=True)
class Principal:
    """The authenticated user an operation runs on behalf of."""
    id: str
    is_admin: bool = False


@dataclass
class Asset:
    id: str
    owner_id: str
    original_path: Path
    # Display name without the extension; the extension comes from original_path
    original_file_name: str
    media_type: MediaType = MediaType.PHOTO
    # None when the file size was never extracted
    size_bytes: Optional[int] = None
    created_at: Optional[datetime] = None
    is_favorite: bool = False
    checksum: Optional[str] = None

    # Live Photo support: id of the paired motion clip (weak reference)
    live_photo_video_id: Optional[str] = None

    @property
    def is_video(self) -> bool:
        return self.media_type == MediaType.VIDEO

    @property
    def extension(self) -> str:
        return self.original_path.suffix


@dataclass
class Album:
    id: str
    owner_id: str
    title: str
    created_at: Optional[datetime] = None
    shared_with: List[str] = field(default_factory=list)

    @classmethod
    def create(cls, owner_id: str, title: str) -> Album:
        return cls(
            id=str(uuid.uuid4()),
            owner_id=owner_id,
            title=title,
            created_at=datetime.now()
        )

    def is_visible_to(self, user_id: str) -> bool:
        return self.owner_id == user_id or user_id in self.shared_with
