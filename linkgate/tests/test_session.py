import pytest
from sqlalchemy import inspect

from linkgate.db.session import Database


def test_open_creates_directory_and_tables(tmp_path):
    database = Database(f"sqlite:///{tmp_path / 'nested' / 'dir' / 'links.db'}")
    with pytest.raises(RuntimeError):
        database.session()

    database.open()
    try:
        assert (tmp_path / "nested" / "dir" / "links.db").exists()
        tables = inspect(database.engine).get_table_names()
        assert {"download_links", "audit_log"} <= set(tables)
    finally:
        database.close()

    assert database.engine is None
    database.close()
