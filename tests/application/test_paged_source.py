"""Tests for PagedAssetSource / open_download_source: lazy paged selection."""

from __future__ import annotations

from unittest.mock import Mock

import pytest

from photovault.application.dtos import DownloadRequest
from photovault.application.services.paged_source import (
    PagedAssetSource,
    open_download_source,
    paginate,
)
from photovault.config import DOWNLOAD_PAGE_SIZE
from photovault.domain.models import Page, PageRequest, Permission, Principal
from photovault.errors import AccessDeniedError, InvalidRequestError


PRINCIPAL = Principal(id="user-1")


# ---------------------------------------------------------------------------
# paginate
# ---------------------------------------------------------------------------


class TestPaginate:
    def test_walks_until_cursor_absent(self):
        requests = []

        def fetch(pagination: PageRequest) -> Page[int]:
            requests.append(pagination)
            items = list(range(pagination.skip, min(pagination.skip + pagination.take, 7)))
            has_next = pagination.skip + pagination.take < 7
            return Page(items=items, next_cursor=pagination.next() if has_next else None)

        pages = list(paginate(3, fetch))

        assert pages == [[0, 1, 2], [3, 4, 5], [6]]
        assert requests == [PageRequest(0, 3), PageRequest(3, 3), PageRequest(6, 3)]

    def test_stops_on_empty_page(self):
        fetch = Mock(return_value=Page(items=[], next_cursor=PageRequest(10, 10)))
        assert list(paginate(10, fetch)) == []
        fetch.assert_called_once()

    def test_fetches_lazily(self):
        fetch = Mock(side_effect=lambda p: Page(items=[p.skip], next_cursor=p.next()))
        pages = paginate(1, fetch)

        assert fetch.call_count == 0
        assert next(pages) == [0]
        assert fetch.call_count == 1
        assert next(pages) == [1]
        assert fetch.call_count == 2


# ---------------------------------------------------------------------------
# PagedAssetSource
# ---------------------------------------------------------------------------


class TestPagedAssetSource:
    def test_single_yields_one_page(self, make_asset):
        assets = [make_asset("a"), make_asset("b")]
        source = PagedAssetSource.single(assets)
        assert list(source) == [assets]

    def test_second_iteration_raises(self, make_asset):
        source = PagedAssetSource.single([make_asset("a")])
        list(source)
        with pytest.raises(RuntimeError):
            list(source)


# ---------------------------------------------------------------------------
# open_download_source
# ---------------------------------------------------------------------------


class TestOpenDownloadSource:
    def test_explicit_ids_resolved_upfront(self, make_asset, repo_factory):
        repo = repo_factory([make_asset("a"), make_asset("b")])
        access = Mock()

        source = open_download_source(access, repo, PRINCIPAL, DownloadRequest(asset_ids=["a", "b"]))

        access.require_permission.assert_called_once_with(
            PRINCIPAL, Permission.ASSET_DOWNLOAD, ["a", "b"]
        )
        assert repo.calls == [("get_by_ids", ["a", "b"])]
        assert [[a.id for a in page] for page in source] == [["a", "b"]]

    def test_album_pages_through_store(self, make_asset, repo_factory):
        assets = [make_asset(f"a{i}") for i in range(5)]
        repo = repo_factory(assets, albums={"album-1": [a.id for a in assets]})
        access = Mock()

        source = open_download_source(
            access, repo, PRINCIPAL, DownloadRequest(album_id="album-1"), page_size=2
        )
        access.require_permission.assert_called_once_with(
            PRINCIPAL, Permission.ALBUM_DOWNLOAD, "album-1"
        )
        # Nothing is fetched before iteration starts
        assert repo.calls == []

        pages = [[a.id for a in page] for page in source]
        assert pages == [["a0", "a1"], ["a2", "a3"], ["a4"]]
        assert access.require_permission.call_count == 1

    def test_user_library_uses_default_page_size(self, make_asset, repo_factory):
        repo = repo_factory([make_asset("a")])
        access = Mock()

        source = open_download_source(access, repo, PRINCIPAL, DownloadRequest(user_id="user-1"))
        list(source)

        access.require_permission.assert_called_once_with(
            PRINCIPAL, Permission.LIBRARY_DOWNLOAD, "user-1"
        )
        assert repo.calls[0] == ("get_by_user_id", PageRequest(0, DOWNLOAD_PAGE_SIZE), "user-1")

    def test_priority_prefers_asset_ids(self, make_asset, repo_factory):
        repo = repo_factory([make_asset("a")], albums={"album-1": ["a"]})
        access = Mock()

        open_download_source(
            access, repo, PRINCIPAL,
            DownloadRequest(asset_ids=["a"], album_id="album-1", user_id="user-1"),
        )
        permission = access.require_permission.call_args[0][1]
        assert permission == Permission.ASSET_DOWNLOAD

    def test_album_before_user(self, repo_factory):
        access = Mock()
        open_download_source(
            access, repo_factory(), PRINCIPAL, DownloadRequest(album_id="x", user_id="user-1")
        )
        assert access.require_permission.call_args[0][1] == Permission.ALBUM_DOWNLOAD

    def test_no_selection_is_invalid_without_store_access(self, repo_factory):
        repo = repo_factory()
        access = Mock()

        with pytest.raises(InvalidRequestError):
            open_download_source(access, repo, PRINCIPAL, DownloadRequest())

        assert repo.calls == []
        access.require_permission.assert_not_called()

    def test_denied_before_store_access(self, repo_factory):
        repo = repo_factory()
        access = Mock()
        access.require_permission.side_effect = AccessDeniedError("no")

        with pytest.raises(AccessDeniedError):
            open_download_source(access, repo, PRINCIPAL, DownloadRequest(asset_ids=["a"]))
        assert repo.calls == []
