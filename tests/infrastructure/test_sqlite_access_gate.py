import pytest
from datetime import datetime
from pathlib import Path

from photovault.domain.models import Album, Asset, Permission, Principal
from photovault.errors import AccessDeniedError
from photovault.infrastructure.db.pool import ConnectionPool
from photovault.infrastructure.repositories.sqlite_access_gate import SQLiteAccessGate
from photovault.infrastructure.repositories.sqlite_album_repository import SQLiteAlbumRepository
from photovault.infrastructure.repositories.sqlite_asset_repository import SQLiteAssetRepository


OWNER = Principal(id="owner")
FRIEND = Principal(id="friend")
STRANGER = Principal(id="stranger")


@pytest.fixture
def gate(tmp_path):
    pool = ConnectionPool(tmp_path / "library.db")
    assets = SQLiteAssetRepository(pool)
    albums = SQLiteAlbumRepository(pool)
    assets.save_batch([
        Asset(id=asset_id, owner_id="owner", original_path=Path(f"/{asset_id}.jpg"),
              original_file_name=asset_id, created_at=datetime(2024, 1, 1))
        for asset_id in ("shared-asset", "private-asset")
    ])
    albums.save(Album(id="album", owner_id="owner", title="Trip", shared_with=["friend"]))
    albums.add_assets("album", ["shared-asset"])
    yield SQLiteAccessGate(pool)
    pool.close_all()


def test_owner_may_download_own_assets(gate):
    gate.require_permission(OWNER, Permission.ASSET_DOWNLOAD, ["shared-asset", "private-asset"])


def test_shared_album_grants_asset_download(gate):
    gate.require_permission(FRIEND, Permission.ASSET_DOWNLOAD, "shared-asset")


def test_one_forbidden_asset_denies_all(gate):
    with pytest.raises(AccessDeniedError):
        gate.require_permission(FRIEND, Permission.ASSET_DOWNLOAD, ["shared-asset", "private-asset"])


def test_unknown_asset_denied(gate):
    with pytest.raises(AccessDeniedError):
        gate.require_permission(OWNER, Permission.ASSET_DOWNLOAD, ["ghost"])


def test_album_download(gate):
    gate.require_permission(OWNER, Permission.ALBUM_DOWNLOAD, "album")
    gate.require_permission(FRIEND, Permission.ALBUM_DOWNLOAD, "album")
    with pytest.raises(AccessDeniedError):
        gate.require_permission(STRANGER, Permission.ALBUM_DOWNLOAD, "album")


def test_library_download_is_owner_only(gate):
    gate.require_permission(OWNER, Permission.LIBRARY_DOWNLOAD, "owner")
    with pytest.raises(AccessDeniedError):
        gate.require_permission(FRIEND, Permission.LIBRARY_DOWNLOAD, "owner")


def test_admin_may_download_any_library(gate):
    gate.require_permission(Principal(id="root", is_admin=True), Permission.LIBRARY_DOWNLOAD, ["owner"])


def test_empty_id_list_denied(gate):
    with pytest.raises(AccessDeniedError):
        gate.require_permission(OWNER, Permission.ASSET_DOWNLOAD, [])
