"""Lazy paged asset retrieval for downloads.

A :class:`PagedAssetSource` hides which selection criterion produced the
assets: an explicit id list yields a single pre-resolved page, while album
and library selections walk the repository ``DOWNLOAD_PAGE_SIZE`` items at a
time.  The next page is fetched only when the consumer asks for it, so memory
stays bounded by the page size rather than the size of the library.
"""

from __future__ import annotations

import logging
from typing import Callable, Iterable, Iterator, List, Optional, TypeVar

from photovault.application.dtos import DownloadRequest
from photovault.config import DOWNLOAD_PAGE_SIZE
from photovault.domain.models import Asset, Page, PageRequest, Permission, Principal
from photovault.domain.repositories import IAccessGate, IAssetRepository
from photovault.errors import InvalidRequestError

LOGGER = logging.getLogger(__name__)

T = TypeVar("T")


def paginate(page_size: int, fetch: Callable[[PageRequest], Page[T]]) -> Iterator[List[T]]:
    """Yield the items of successive pages until the store runs dry.

    Iteration stops on an empty page or on a page without a continuation
    cursor.  ``fetch`` is not called again until the caller advances.
    """

    cursor: Optional[PageRequest] = PageRequest(skip=0, take=page_size)
    while cursor is not None:
        page = fetch(cursor)
        if not page.items:
            return
        yield page.items
        cursor = page.next_cursor


class PagedAssetSource:
    """Forward-only, single-use sequence of asset pages."""

    def __init__(self, pages: Iterable[List[Asset]], description: str = "") -> None:
        self._pages = pages
        self._description = description
        self._consumed = False

    @classmethod
    def single(cls, assets: List[Asset]) -> "PagedAssetSource":
        return cls(iter([assets]), description=f"{len(assets)} explicit assets")

    @property
    def description(self) -> str:
        return self._description

    def __iter__(self) -> Iterator[List[Asset]]:
        if self._consumed:
            raise RuntimeError("PagedAssetSource can only be iterated once")
        self._consumed = True
        for index, page in enumerate(self._pages):
            LOGGER.debug("Page %d of %s: %d assets", index + 1, self._description, len(page))
            yield page


def open_download_source(
    access: IAccessGate,
    repo: IAssetRepository,
    principal: Principal,
    request: DownloadRequest,
    page_size: int = DOWNLOAD_PAGE_SIZE,
) -> PagedAssetSource:
    """Check access for the selected criterion and return its page source.

    Selection priority is explicit ids, then album, then owner.  The
    permission check happens once, before any page is produced.
    """

    if request.asset_ids:
        asset_ids = list(request.asset_ids)
        access.require_permission(principal, Permission.ASSET_DOWNLOAD, asset_ids)
        return PagedAssetSource.single(repo.get_by_ids(asset_ids))

    if request.album_id:
        album_id = request.album_id
        access.require_permission(principal, Permission.ALBUM_DOWNLOAD, album_id)
        return PagedAssetSource(
            paginate(page_size, lambda pagination: repo.get_by_album_id(pagination, album_id)),
            description=f"album {album_id}",
        )

    if request.user_id:
        user_id = request.user_id
        access.require_permission(principal, Permission.LIBRARY_DOWNLOAD, user_id)
        return PagedAssetSource(
            paginate(page_size, lambda pagination: repo.get_by_user_id(pagination, user_id)),
            description=f"library {user_id}",
        )

    raise InvalidRequestError("asset_ids, album_id, or user_id is required")
