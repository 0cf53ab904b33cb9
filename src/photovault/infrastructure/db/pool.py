import logging
import sqlite3
import threading
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, List

from photovault.errors import ConnectionPoolExhausted, DatabaseError

_logger = logging.getLogger(__name__)


class ConnectionPool:
    """Bounded set of SQLite connections shared across threads.

    Memory lane lookups run on worker threads while the planner reads on the
    caller's thread, so connections are opened with ``check_same_thread``
    disabled and in WAL mode.  At most ``pool_size`` connections are checked
    out at once; further callers wait up to ``timeout`` seconds.
    """

    def __init__(self, db_path: Path, pool_size: int = 5, timeout: float = 30.0):
        self._db_path = Path(db_path)
        self._timeout = timeout
        self._pool_size = pool_size
        self._slots = threading.BoundedSemaphore(pool_size)
        self._idle: List[sqlite3.Connection] = []
        self._lock = threading.Lock()
        self._closed = False

    @property
    def db_path(self) -> Path:
        return self._db_path

    @contextmanager
    def connection(self) -> Iterator[sqlite3.Connection]:
        """Check out a connection; commit on success, roll back on error."""
        if self._closed:
            raise DatabaseError(f"Connection pool for {self._db_path} is closed")
        if not self._slots.acquire(timeout=self._timeout):
            raise ConnectionPoolExhausted(
                f"No connections available within {self._timeout}s "
                f"(pool_size={self._pool_size})"
            )
        try:
            conn = self._checkout()
            try:
                yield conn
                conn.commit()
            except Exception:
                conn.rollback()
                raise
            finally:
                self._checkin(conn)
        finally:
            self._slots.release()

    def close_all(self) -> None:
        with self._lock:
            self._closed = True
            idle, self._idle = self._idle, []
        for conn in idle:
            conn.close()
        _logger.debug("[POOL] closed %d idle connections to %s", len(idle), self._db_path)

    def _checkout(self) -> sqlite3.Connection:
        with self._lock:
            if self._idle:
                return self._idle.pop()
        try:
            conn = sqlite3.connect(self._db_path, check_same_thread=False, timeout=self._timeout)
            conn.row_factory = sqlite3.Row
            conn.execute("PRAGMA journal_mode=WAL")
        except sqlite3.Error as exc:
            raise DatabaseError(f"Cannot open {self._db_path}: {exc}") from exc
        _logger.debug("[POOL] opened connection to %s", self._db_path)
        return conn

    def _checkin(self, conn: sqlite3.Connection) -> None:
        with self._lock:
            if not self._closed:
                self._idle.append(conn)
                return
        conn.close()
