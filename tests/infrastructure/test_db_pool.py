import pytest
import sqlite3
from pathlib import Path
from photovault.errors import ConnectionPoolExhausted, DatabaseError
from photovault.infrastructure.db.pool import ConnectionPool

@pytest.fixture
def db_path(tmp_path):
    path = tmp_path / "test.db"
    conn = sqlite3.connect(path)
    conn.execute("CREATE TABLE test (id INTEGER PRIMARY KEY, name TEXT)")
    conn.close()
    return path

def test_connection_acquisition(db_path):
    pool = ConnectionPool(db_path, pool_size=1)

    with pool.connection() as conn:
        assert isinstance(conn, sqlite3.Connection)
        cursor = conn.execute("SELECT 1")
        assert cursor.fetchone()[0] == 1

def test_connection_recycling(db_path):
    pool = ConnectionPool(db_path, pool_size=1)

    conn_id = None
    with pool.connection() as conn:
        conn_id = id(conn)

    with pool.connection() as conn:
        assert id(conn) == conn_id

def test_transaction_commit(db_path):
    pool = ConnectionPool(db_path)

    with pool.connection() as conn:
        conn.execute("INSERT INTO test (name) VALUES (?)", ("foo",))

    # Verify in new connection
    conn = sqlite3.connect(db_path)
    cursor = conn.execute("SELECT name FROM test")
    assert cursor.fetchone()[0] == "foo"
    conn.close()

def test_transaction_rollback(db_path):
    pool = ConnectionPool(db_path)

    try:
        with pool.connection() as conn:
            conn.execute("INSERT INTO test (name) VALUES (?)", ("bar",))
            raise RuntimeError("oops")
    except RuntimeError:
        pass

    conn = sqlite3.connect(db_path)
    cursor = conn.execute("SELECT name FROM test WHERE name='bar'")
    assert cursor.fetchone() is None
    conn.close()

def test_exhausted_pool_times_out(db_path):
    pool = ConnectionPool(db_path, pool_size=1, timeout=0.05)

    with pool.connection():
        with pytest.raises(ConnectionPoolExhausted):
            with pool.connection():
                pass

def test_connections_usable_from_worker_threads(db_path):
    from concurrent.futures import ThreadPoolExecutor

    pool = ConnectionPool(db_path, pool_size=1)
    with pool.connection() as conn:
        conn.execute("INSERT INTO test (name) VALUES (?)", ("main",))

    def _read():
        with pool.connection() as conn:
            return conn.execute("SELECT name FROM test").fetchone()["name"]

    with ThreadPoolExecutor(max_workers=1) as executor:
        assert executor.submit(_read).result() == "main"
    pool.close_all()

def test_closed_pool_refuses_checkout(db_path):
    pool = ConnectionPool(db_path)
    with pool.connection():
        pass
    pool.close_all()

    with pytest.raises(DatabaseError):
        with pool.connection():
            pass

def test_connection_returned_after_close_is_closed(db_path):
    pool = ConnectionPool(db_path)

    with pool.connection() as conn:
        pool.close_all()

    with pytest.raises(sqlite3.ProgrammingError):
        conn.execute("SELECT 1")

def test_unopenable_database_raises_database_error(tmp_path):
    pool = ConnectionPool(tmp_path / "missing-dir" / "library.db")

    with pytest.raises(DatabaseError):
        with pool.connection():
            pass

def test_connections_use_wal_journal(db_path):
    pool = ConnectionPool(db_path)
    with pool.connection() as conn:
        assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "wal"
    pool.close_all()
