import sys
from datetime import datetime
from pathlib import Path
from typing import Dict, List, Optional

import pytest

ROOT = Path(__file__).resolve().parents[1]
SRC = ROOT / "src"

# Ensure the project sources are importable without an editable install.
if str(SRC) not in sys.path:
    sys.path.insert(0, str(SRC))

from photovault.domain.models import Asset, MediaType, Page, PageRequest  # noqa: E402
from photovault.domain.repositories import IAssetRepository  # noqa: E402


def make_asset(
    asset_id: str,
    size: Optional[int] = 100,
    *,
    owner_id: str = "user-1",
    name: Optional[str] = None,
    ext: str = ".jpg",
    live_photo_video_id: Optional[str] = None,
    created_at: Optional[datetime] = None,
) -> Asset:
    stem = name or asset_id
    return Asset(
        id=asset_id,
        owner_id=owner_id,
        original_path=Path(f"/library/{owner_id}/{asset_id}{ext}"),
        original_file_name=stem,
        media_type=MediaType.VIDEO if ext.lower() in (".mov", ".mp4") else MediaType.PHOTO,
        size_bytes=size,
        created_at=created_at,
        live_photo_video_id=live_photo_video_id,
    )


def _without_motion_parts(assets: List[Asset]) -> List[Asset]:
    """Drop video clips that a photo in *assets* claims as its motion part."""
    claimed = {
        a.live_photo_video_id for a in assets
        if a.media_type == MediaType.PHOTO and a.live_photo_video_id
    }
    return [a for a in assets if not (a.media_type == MediaType.VIDEO and a.id in claimed)]


class InMemoryAssetRepository(IAssetRepository):
    """List-backed repository that records every call it receives."""

    def __init__(self, assets: List[Asset] = (), albums: Optional[Dict[str, List[str]]] = None):
        self.assets: Dict[str, Asset] = {asset.id: asset for asset in assets}
        self.albums = albums or {}
        self.calls: List[tuple] = []

    def get_by_ids(self, ids):
        self.calls.append(("get_by_ids", list(ids)))
        return [self.assets[i] for i in ids if i in self.assets]

    def get_by_album_id(self, pagination: PageRequest, album_id: str) -> Page[Asset]:
        self.calls.append(("get_by_album_id", pagination, album_id))
        ids = self.albums.get(album_id, [])
        return self._page(_without_motion_parts([self.assets[i] for i in ids]), pagination)

    def get_by_user_id(self, pagination: PageRequest, user_id: str) -> Page[Asset]:
        self.calls.append(("get_by_user_id", pagination, user_id))
        owned = [a for a in self.assets.values() if a.owner_id == user_id]
        return self._page(_without_motion_parts(owned), pagination)

    def get_by_date(self, user_id, day):
        self.calls.append(("get_by_date", user_id, day))
        return [
            a for a in self.assets.values()
            if a.owner_id == user_id and a.created_at and a.created_at.date() == day
        ]

    def save_batch(self, assets):
        for asset in assets:
            self.assets[asset.id] = asset

    @staticmethod
    def _page(items: List[Asset], pagination: PageRequest) -> Page[Asset]:
        chunk = items[pagination.skip:pagination.skip + pagination.take]
        has_next = pagination.skip + pagination.take < len(items)
        return Page(items=chunk, next_cursor=pagination.next() if has_next else None)


@pytest.fixture(name="make_asset")
def make_asset_fixture():
    return make_asset


@pytest.fixture
def repo_factory():
    return InMemoryAssetRepository
