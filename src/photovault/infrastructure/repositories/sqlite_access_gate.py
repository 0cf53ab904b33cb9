"""Ownership and album-sharing based permission checks."""

import logging
from typing import Iterable, List, Union

from photovault.domain.models import Permission, Principal
from photovault.domain.repositories import IAccessGate
from photovault.errors import AccessDeniedError
from photovault.infrastructure.db.pool import ConnectionPool

_logger = logging.getLogger(__name__)


def _as_id_list(ids: Union[str, Iterable[str]]) -> List[str]:
    if isinstance(ids, str):
        return [ids]
    return list(dict.fromkeys(ids))


class SQLiteAccessGate(IAccessGate):
    """Answer permission questions from the library database.

    Expects the ``assets``, ``albums``, ``album_users`` and ``album_assets``
    tables created by the SQLite repositories.
    """

    def __init__(self, pool: ConnectionPool):
        self._pool = pool

    def require_permission(
        self,
        principal: Principal,
        permission: Permission,
        ids: Union[str, Iterable[str]],
    ) -> None:
        id_list = _as_id_list(ids)
        if not id_list or not self._check(principal, permission, id_list):
            _logger.warning(
                "Denied %s for %s on %d ids", permission.value, principal.id, len(id_list)
            )
            raise AccessDeniedError(f"Not found or no {permission.value} access")

    def _check(self, principal: Principal, permission: Permission, ids: List[str]) -> bool:
        if permission == Permission.LIBRARY_DOWNLOAD:
            return principal.is_admin or all(user_id == principal.id for user_id in ids)
        if permission == Permission.ALBUM_DOWNLOAD:
            return self._count_visible_albums(principal.id, ids) == len(ids)
        if permission == Permission.ASSET_DOWNLOAD:
            return self._count_visible_assets(principal.id, ids) == len(ids)
        return False

    def _count_visible_albums(self, user_id: str, album_ids: List[str]) -> int:
        placeholders = ", ".join("?" for _ in album_ids)
        with self._pool.connection() as conn:
            row = conn.execute(
                f"""
                SELECT COUNT(*) FROM albums al
                WHERE al.id IN ({placeholders})
                  AND (al.owner_id = ?
                       OR EXISTS (SELECT 1 FROM album_users au
                                  WHERE au.album_id = al.id AND au.user_id = ?))
                """,
                (*album_ids, user_id, user_id),
            ).fetchone()
        return row[0]

    def _count_visible_assets(self, user_id: str, asset_ids: List[str]) -> int:
        placeholders = ", ".join("?" for _ in asset_ids)
        with self._pool.connection() as conn:
            row = conn.execute(
                f"""
                SELECT COUNT(*) FROM assets a
                WHERE a.id IN ({placeholders})
                  AND (a.owner_id = ?
                       OR EXISTS (SELECT 1 FROM album_assets aa
                                  JOIN albums al ON al.id = aa.album_id
                                  LEFT JOIN album_users au
                                    ON au.album_id = al.id AND au.user_id = ?
                                  WHERE aa.asset_id = a.id
                                    AND (al.owner_id = ? OR au.user_id IS NOT NULL)))
                """,
                (*asset_ids, user_id, user_id, user_id),
            ).fetchone()
        return row[0]
