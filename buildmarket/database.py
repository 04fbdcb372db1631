import logging
import os

from sqlalchemy import create_engine, event, inspect, text
from sqlalchemy.orm import declarative_base, sessionmaker

from buildmarket.config import DATABASE_URL, DATA_DIR

logger = logging.getLogger(__name__)

Base = declarative_base()

# Columns added after the first releases of the schema. Older database files
# are brought up to date on startup.
LEGACY_COLUMNS = {
    "users": {
        "is_admin": "BOOLEAN DEFAULT 0",
        "is_top_specialist": "BOOLEAN DEFAULT 0",
        "wallet_balance": "INTEGER DEFAULT 0",
        "updated_at": "DATETIME",
    },
    "tenders": {
        "person_type": "VARCHAR(20) DEFAULT 'individual'",
        "required_professions": "TEXT DEFAULT '[]'",
        "moderation_status": "VARCHAR(20) DEFAULT 'pending'",
        "moderated_by": "INTEGER",
        "moderated_at": "DATETIME",
        "moderation_comment": "TEXT",
    },
    "tender_bids": {
        "status": "VARCHAR(20) DEFAULT 'pending'",
        "rejection_reason": "TEXT",
    },
    "marketplace_listings": {
        "moderation_status": "VARCHAR(20) DEFAULT 'pending'",
        "moderated_by": "INTEGER",
        "moderated_at": "DATETIME",
        "moderation_comment": "TEXT",
    },
}


def _is_sqlite(url):
    return url.startswith("sqlite")


def make_engine(url=DATABASE_URL):
    connect_args = {}
    if _is_sqlite(url):
        connect_args["check_same_thread"] = False
    new_engine = create_engine(url, connect_args=connect_args)

    if _is_sqlite(url):
        @event.listens_for(new_engine, "connect")
        def _set_sqlite_pragma(dbapi_connection, connection_record):
            cursor = dbapi_connection.cursor()
            cursor.execute("PRAGMA foreign_keys=ON")
            if ":memory:" not in url:
                cursor.execute("PRAGMA journal_mode=WAL")
            cursor.close()

    return new_engine


if _is_sqlite(DATABASE_URL) and ":memory:" not in DATABASE_URL:
    os.makedirs(DATA_DIR, exist_ok=True)

engine = make_engine()
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def get_db():
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


def ensure_legacy_columns(bind):
    """Add columns that older database files are missing."""
    inspector = inspect(bind)
    tables = set(inspector.get_table_names())
    for table, columns in LEGACY_COLUMNS.items():
        if table not in tables:
            continue
        existing = {col["name"] for col in inspector.get_columns(table)}
        missing = [name for name in columns if name not in existing]
        if not missing:
            continue
        with bind.begin() as conn:
            for name in missing:
                conn.execute(text(f"ALTER TABLE {table} ADD COLUMN {name} {columns[name]}"))
                logger.info("Added column %s.%s", table, name)


def init_db(bind=None):
    # Import models so every table is registered on Base.metadata
    import buildmarket.models  # noqa: F401

    bind = bind or engine
    Base.metadata.create_all(bind=bind)
    ensure_legacy_columns(bind)
