import logging
import sqlite3
from datetime import date, datetime
from pathlib import Path
from typing import Any, List, Sequence

from photovault.domain.models import Asset, MediaType, Page, PageRequest
from photovault.domain.repositories import IAssetRepository
from photovault.infrastructure.db.pool import ConnectionPool

_logger = logging.getLogger(__name__)

# Keep IN (...) lists below SQLite's bound-parameter limit
_ID_CHUNK_SIZE = 500


class SQLiteAssetRepository(IAssetRepository):
    def __init__(self, pool: ConnectionPool):
        self._pool = pool
        _logger.info("[REPO-INIT] SQLiteAssetRepository created, db_path=%s", pool.db_path)
        self._init_table()
        self._ensure_indices()

    def _init_table(self):
        with self._pool.connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS assets (
                    id TEXT PRIMARY KEY,
                    owner_id TEXT NOT NULL,
                    original_path TEXT NOT NULL,
                    original_file_name TEXT NOT NULL,
                    media_type INTEGER DEFAULT 0,
                    bytes INTEGER,
                    created_at TEXT,
                    is_favorite INTEGER DEFAULT 0,
                    checksum TEXT,
                    live_photo_video_id TEXT
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS album_assets (
                    album_id TEXT NOT NULL,
                    asset_id TEXT NOT NULL,
                    PRIMARY KEY (album_id, asset_id)
                )
            """)

    def _ensure_indices(self):
        with self._pool.connection() as conn:
            conn.execute("CREATE INDEX IF NOT EXISTS idx_assets_owner ON assets(owner_id, created_at)")
            conn.execute("CREATE INDEX IF NOT EXISTS idx_album_assets_asset ON album_assets(asset_id)")
            conn.execute(
                "CREATE INDEX IF NOT EXISTS idx_assets_live_photo ON assets(live_photo_video_id)"
            )

    def get_by_ids(self, ids: List[str]) -> List[Asset]:
        by_id = {}
        with self._pool.connection() as conn:
            for start in range(0, len(ids), _ID_CHUNK_SIZE):
                chunk = ids[start:start + _ID_CHUNK_SIZE]
                placeholders = ", ".join("?" for _ in chunk)
                rows = conn.execute(
                    f"SELECT * FROM assets WHERE id IN ({placeholders})", chunk
                ).fetchall()
                for row in rows:
                    by_id[row["id"]] = self._map_row_to_asset(row)
        # Preserve the caller's order
        return [by_id[asset_id] for asset_id in dict.fromkeys(ids) if asset_id in by_id]

    # Paged selections leave out motion clips whose still is in the same
    # selection; the planner reaches them through the still.
    def get_by_album_id(self, pagination: PageRequest, album_id: str) -> Page[Asset]:
        return self._fetch_page(
            """
            SELECT a.* FROM assets a
            JOIN album_assets aa ON aa.asset_id = a.id
            WHERE aa.album_id = ?
              AND NOT (a.media_type = 1 AND EXISTS (
                  SELECT 1 FROM assets s
                  JOIN album_assets sa ON sa.asset_id = s.id
                  WHERE sa.album_id = aa.album_id
                    AND s.live_photo_video_id = a.id
                    AND s.media_type = 0
              ))
            ORDER BY a.created_at, a.id
            LIMIT ? OFFSET ?
            """,
            (album_id,),
            pagination,
        )

    def get_by_user_id(self, pagination: PageRequest, user_id: str) -> Page[Asset]:
        return self._fetch_page(
            """
            SELECT a.* FROM assets a
            WHERE a.owner_id = ?
              AND NOT (a.media_type = 1 AND EXISTS (
                  SELECT 1 FROM assets s
                  WHERE s.owner_id = a.owner_id
                    AND s.live_photo_video_id = a.id
                    AND s.media_type = 0
              ))
            ORDER BY a.created_at, a.id
            LIMIT ? OFFSET ?
            """,
            (user_id,),
            pagination,
        )

    def get_by_date(self, user_id: str, day: date) -> List[Asset]:
        # created_at is stored as local ISO text; its first ten characters are the calendar date
        with self._pool.connection() as conn:
            rows = conn.execute(
                """
                SELECT * FROM assets
                WHERE owner_id = ? AND substr(created_at, 1, 10) = ?
                ORDER BY created_at, id
                """,
                (user_id, day.isoformat()),
            ).fetchall()
        _logger.debug("[REPO-QUERY] %d assets for %s on %s", len(rows), user_id, day)
        return [self._map_row_to_asset(row) for row in rows]

    def save(self, asset: Asset) -> None:
        self.save_batch([asset])

    def save_batch(self, assets: List[Asset]) -> None:
        data = []
        for asset in assets:
            # Map Enum to Int (0=Photo, 1=Video)
            mt_int = 1 if asset.media_type == MediaType.VIDEO else 0
            data.append((
                asset.id,
                asset.owner_id,
                asset.original_path.as_posix(),
                asset.original_file_name,
                mt_int,
                asset.size_bytes,
                asset.created_at.isoformat() if asset.created_at else None,
                1 if asset.is_favorite else 0,
                asset.checksum,
                asset.live_photo_video_id,
            ))

        with self._pool.connection() as conn:
            conn.executemany("""
                INSERT INTO assets
                (id, owner_id, original_path, original_file_name, media_type, bytes,
                 created_at, is_favorite, checksum, live_photo_video_id)
                VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?)
                ON CONFLICT(id) DO UPDATE SET
                    owner_id = excluded.owner_id,
                    original_path = excluded.original_path,
                    original_file_name = excluded.original_file_name,
                    media_type = excluded.media_type,
                    bytes = excluded.bytes,
                    created_at = excluded.created_at,
                    is_favorite = excluded.is_favorite,
                    checksum = excluded.checksum,
                    live_photo_video_id = excluded.live_photo_video_id
            """, data)
        _logger.info("[REPO-SAVE] Saved %d assets", len(data))

    def _fetch_page(self, sql: str, params: Sequence[Any], pagination: PageRequest) -> Page[Asset]:
        # Ask for one extra row to learn whether another page exists
        with self._pool.connection() as conn:
            rows = conn.execute(
                sql, (*params, pagination.take + 1, pagination.skip)
            ).fetchall()

        has_next = len(rows) > pagination.take
        items = [self._map_row_to_asset(row) for row in rows[:pagination.take]]
        return Page(items=items, next_cursor=pagination.next() if has_next else None)

    def _map_row_to_asset(self, row: sqlite3.Row) -> Asset:
        created_at = datetime.fromisoformat(row["created_at"]) if row["created_at"] else None
        return Asset(
            id=row["id"],
            owner_id=row["owner_id"],
            original_path=Path(row["original_path"]),
            original_file_name=row["original_file_name"],
            media_type=MediaType.VIDEO if row["media_type"] == 1 else MediaType.PHOTO,
            size_bytes=row["bytes"],
            created_at=created_at,
            is_favorite=bool(row["is_favorite"]),
            checksum=row["checksum"],
            live_photo_video_id=row["live_photo_video_id"],
        )
