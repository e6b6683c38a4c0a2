import logging
from pathlib import Path

from sqlalchemy import create_engine, event
from sqlalchemy.engine import Engine, make_url
from sqlalchemy.orm import Session, sessionmaker

from linkgate.db.base import Base

logger = logging.getLogger(__name__)

# seconds a writer waits on SQLite's database lock before giving up
SQLITE_BUSY_TIMEOUT = 30


class Database:
    """Process-wide storage handle: opened at startup, closed at shutdown."""

    def __init__(self, url: str, echo: bool = False):
        self.url = url
        self.echo = echo
        self.engine: Engine | None = None
        self._sessionmaker: sessionmaker | None = None

    @property
    def is_sqlite(self) -> bool:
        return make_url(self.url).get_backend_name() == "sqlite"

    def open(self, create_tables: bool = True) -> "Database":
        if self.engine is not None:
            return self
        connect_args = {}
        if self.is_sqlite:
            self._ensure_sqlite_dir()
            connect_args = {"check_same_thread": False, "timeout": SQLITE_BUSY_TIMEOUT}
        self.engine = create_engine(self.url, echo=self.echo, future=True, connect_args=connect_args)
        if self.is_sqlite:
            event.listen(self.engine, "connect", _sqlite_pragmas)
        self._sessionmaker = sessionmaker(
            bind=self.engine, autoflush=False, autocommit=False, expire_on_commit=False, future=True
        )
        if create_tables:
            Base.metadata.create_all(bind=self.engine)
        logger.info(f"Database opened ({make_url(self.url).render_as_string(hide_password=True)})")
        return self

    def close(self) -> None:
        if self.engine is None:
            return
        self.engine.dispose()
        self.engine = None
        self._sessionmaker = None
        logger.info("Database closed")

    def session(self) -> Session:
        if self._sessionmaker is None:
            raise RuntimeError("Database is not open")
        return self._sessionmaker()

    def _ensure_sqlite_dir(self) -> None:
        database = make_url(self.url).database
        if database and database != ":memory:" and not database.startswith("file:"):
            Path(database).expanduser().parent.mkdir(parents=True, exist_ok=True)


def _sqlite_pragmas(dbapi_connection, connection_record):
    cursor = dbapi_connection.cursor()
    cursor.execute(f"PRAGMA busy_timeout = {SQLITE_BUSY_TIMEOUT * 1000}")
    cursor.execute("PRAGMA journal_mode=WAL")
    cursor.execute("PRAGMA synchronous=NORMAL")
    cursor.close()
