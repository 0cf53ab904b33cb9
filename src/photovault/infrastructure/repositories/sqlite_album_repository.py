from datetime import datetime
from typing import List, Optional

from photovault.domain.models import Album
from photovault.domain.repositories import IAlbumRepository
from photovault.infrastructure.db.pool import ConnectionPool

class SQLiteAlbumRepository(IAlbumRepository):
    def __init__(self, pool: ConnectionPool):
        self._pool = pool
        self._init_table()

    def _init_table(self):
        with self._pool.connection() as conn:
            conn.execute("""
                CREATE TABLE IF NOT EXISTS albums (
                    id TEXT PRIMARY KEY,
                    owner_id TEXT NOT NULL,
                    title TEXT,
                    created_at TEXT
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS album_users (
                    album_id TEXT NOT NULL,
                    user_id TEXT NOT NULL,
                    PRIMARY KEY (album_id, user_id)
                )
            """)
            conn.execute("""
                CREATE TABLE IF NOT EXISTS album_assets (
                    album_id TEXT NOT NULL,
                    asset_id TEXT NOT NULL,
                    PRIMARY KEY (album_id, asset_id)
                )
            """)

    def get(self, id: str) -> Optional[Album]:
        with self._pool.connection() as conn:
            row = conn.execute("SELECT * FROM albums WHERE id = ?", (id,)).fetchone()
            if not row:
                return None
            shared = conn.execute(
                "SELECT user_id FROM album_users WHERE album_id = ? ORDER BY user_id", (id,)
            ).fetchall()
            return self._map_row_to_album(row, [r["user_id"] for r in shared])

    def save(self, album: Album) -> None:
        with self._pool.connection() as conn:
            conn.execute("""
                INSERT OR REPLACE INTO albums
                (id, owner_id, title, created_at)
                VALUES (?, ?, ?, ?)
            """, (
                album.id,
                album.owner_id,
                album.title,
                album.created_at.isoformat() if album.created_at else None,
            ))
            conn.execute("DELETE FROM album_users WHERE album_id = ?", (album.id,))
            conn.executemany(
                "INSERT INTO album_users (album_id, user_id) VALUES (?, ?)",
                [(album.id, user_id) for user_id in dict.fromkeys(album.shared_with)],
            )

    def add_assets(self, album_id: str, asset_ids: List[str]) -> None:
        with self._pool.connection() as conn:
            conn.executemany(
                "INSERT OR IGNORE INTO album_assets (album_id, asset_id) VALUES (?, ?)",
                [(album_id, asset_id) for asset_id in asset_ids],
            )

    def _map_row_to_album(self, row, shared_with: List[str]) -> Album:
        created_at = datetime.fromisoformat(row["created_at"]) if row["created_at"] else None
        return Album(
            id=row["id"],
            owner_id=row["owner_id"],
            title=row["title"],
            created_at=created_at,
            shared_with=shared_with,
        )
