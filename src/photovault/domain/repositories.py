from abc import ABC, abstractmethod
from datetime import date
from typing import Iterable, List, Optional, Union

from .models import Album, Asset, Page, PageRequest, Permission, Principal


class IAlbumRepository(ABC):
    @abstractmethod
    def get(self, id: str) -> Optional[Album]:
        pass

    @abstractmethod
    def save(self, album: Album) -> None:
        pass

    @abstractmethod
    def add_assets(self, album_id: str, asset_ids: List[str]) -> None:
        pass


class IAssetRepository(ABC):
    @abstractmethod
    def get_by_ids(self, ids: List[str]) -> List[Asset]:
        """Return the assets matching *ids*; unknown ids are silently absent."""
        pass

    @abstractmethod
    def get_by_album_id(self, pagination: PageRequest, album_id: str) -> Page[Asset]:
        """Return one page of the assets contained in an album.

        Video clips referenced as the motion part of a photo in the same
        album are left out; callers reach them through the photo.
        """
        pass

    @abstractmethod
    def get_by_user_id(self, pagination: PageRequest, user_id: str) -> Page[Asset]:
        """Return one page of the assets owned by a user.

        Motion clips are left out the same way as for album pages.
        """
        pass

    @abstractmethod
    def get_by_date(self, user_id: str, day: date) -> List[Asset]:
        """Return the user's assets created on the calendar date *day*."""
        pass

    @abstractmethod
    def save_batch(self, assets: List[Asset]) -> None:
        """Batch save assets (insert or update)"""
        pass


class IAccessGate(ABC):
    @abstractmethod
    def require_permission(
        self,
        principal: Principal,
        permission: Permission,
        ids: Union[str, Iterable[str]],
    ) -> None:
        """Return quietly when allowed, raise ``AccessDeniedError`` otherwise."""
        pass
