"""
Insights Database Builder

Loads the insights JSON export into the SQLite store used by the API.
Every run replaces the stored dataset: records are cleaned, existing rows are
deleted, and the cleaned records are inserted in batches of 1000.

Usage:
    python build_insights_db.py                          # data/jsondata.json -> insights.sqlite
    python build_insights_db.py --json export.json       # Custom source file
    python build_insights_db.py --db mydb.sqlite         # Custom database path
"""

import argparse
import sqlite3
import sys
import time
from pathlib import Path

from utils import (
    INSIGHT_FIELDS,
    INSIGHTS_TABLE,
    AppConfig,
    batch_insert,
    init_pragmas,
    load_json_records,
)

DEFAULT_DB_PATH = Path("insights.sqlite")
DEFAULT_JSON_NAME = "jsondata.json"
BATCH_SIZE = 1000

_INSERT_SQL = (
    f"INSERT INTO {INSIGHTS_TABLE} ({', '.join(INSIGHT_FIELDS)}) "
    f"VALUES ({', '.join('?' for _ in INSIGHT_FIELDS)})"
)


def create_database(db_path: Path) -> sqlite3.Connection:
    """Create the SQLite store (if needed) and return an open connection."""
    db_path.parent.mkdir(parents=True, exist_ok=True)
    conn = sqlite3.connect(str(db_path))
    init_pragmas(conn)

    conn.executescript(f"""
        CREATE TABLE IF NOT EXISTS {INSIGHTS_TABLE} (
            id INTEGER PRIMARY KEY AUTOINCREMENT,
            end_year INTEGER,
            start_year INTEGER,
            intensity REAL,
            likelihood REAL,
            relevance REAL,
            impact REAL,
            sector TEXT NOT NULL DEFAULT '',
            topic TEXT NOT NULL DEFAULT '',
            insight TEXT NOT NULL DEFAULT '',
            url TEXT NOT NULL DEFAULT '',
            region TEXT NOT NULL DEFAULT '',
            country TEXT NOT NULL DEFAULT '',
            city TEXT NOT NULL DEFAULT '',
            pestle TEXT NOT NULL DEFAULT '',
            source TEXT NOT NULL DEFAULT '',
            swot TEXT NOT NULL DEFAULT '',
            title TEXT NOT NULL DEFAULT '',
            added TEXT NOT NULL DEFAULT '',
            published TEXT NOT NULL DEFAULT '',
            created_at TEXT DEFAULT CURRENT_TIMESTAMP,
            updated_at TEXT DEFAULT CURRENT_TIMESTAMP
        );

        CREATE INDEX IF NOT EXISTS idx_insights_end_year ON {INSIGHTS_TABLE}(end_year);
        CREATE INDEX IF NOT EXISTS idx_insights_start_year ON {INSIGHTS_TABLE}(start_year);
        CREATE INDEX IF NOT EXISTS idx_insights_topic ON {INSIGHTS_TABLE}(topic);
        CREATE INDEX IF NOT EXISTS idx_insights_sector ON {INSIGHTS_TABLE}(sector);
        CREATE INDEX IF NOT EXISTS idx_insights_region ON {INSIGHTS_TABLE}(region);
        CREATE INDEX IF NOT EXISTS idx_insights_pestle ON {INSIGHTS_TABLE}(pestle);
        CREATE INDEX IF NOT EXISTS idx_insights_source ON {INSIGHTS_TABLE}(source);
        CREATE INDEX IF NOT EXISTS idx_insights_swot ON {INSIGHTS_TABLE}(swot);
        CREATE INDEX IF NOT EXISTS idx_insights_country ON {INSIGHTS_TABLE}(country);
        CREATE INDEX IF NOT EXISTS idx_insights_city ON {INSIGHTS_TABLE}(city);
        CREATE INDEX IF NOT EXISTS idx_insights_added ON {INSIGHTS_TABLE}(added);
        -- Compound indexes for the common dashboard filter combinations
        CREATE INDEX IF NOT EXISTS idx_insights_sector_region_pestle
            ON {INSIGHTS_TABLE}(sector, region, pestle);
        CREATE INDEX IF NOT EXISTS idx_insights_topic_source
            ON {INSIGHTS_TABLE}(topic, source);
    """)
    conn.commit()
    return conn


def resolve_json_path(explicit: Path | None = None) -> Path:
    """Locate the JSON export.

    An explicit path wins.  Otherwise look for ``data/jsondata.json`` next to
    this script, then in its parent directory.  If neither exists the first
    candidate is returned so the caller reports a useful path.
    """
    if explicit is not None:
        return explicit
    here = Path(__file__).resolve().parent
    candidates = [here / "data" / DEFAULT_JSON_NAME, here.parent / "data" / DEFAULT_JSON_NAME]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return candidates[0]


def seed_database(json_path: Path, db_path: Path, verbose: bool = True) -> int:
    """Replace the stored dataset with the cleaned contents of *json_path*.

    Returns:
        Number of records inserted.

    Raises:
        FileNotFoundError: If *json_path* does not exist.
        ValueError: If *json_path* does not hold a JSON array.
    """
    start = time.time()
    records = load_json_records(json_path)
    if verbose:
        print(f"  Loaded {len(records):,} records from {json_path}")

    conn = create_database(db_path)
    try:
        deleted = conn.execute(f"DELETE FROM {INSIGHTS_TABLE}").rowcount
        conn.commit()
        if verbose:
            print(f"  Cleared {deleted:,} existing records")

        rows = [tuple(rec[field] for field in INSIGHT_FIELDS) for rec in records]

        def _progress(done: int, total: int) -> None:
            if verbose:
                print(f"  Inserted {done:,}/{total:,} records")

        inserted = batch_insert(conn, _INSERT_SQL, rows,
                                batch_size=BATCH_SIZE, on_batch=_progress)
    finally:
        conn.close()

    if verbose:
        print(f"  Seeded {inserted:,} records into {db_path} in {time.time() - start:.1f}s")
    return inserted


def main():
    """Parse command-line arguments and seed the insights store."""
    config = AppConfig.from_env()
    parser = argparse.ArgumentParser(description="Seed the insights SQLite store from JSON")
    parser.add_argument("--json", type=Path, default=None,
                        help=f"Source JSON export (default: data/{DEFAULT_JSON_NAME})")
    parser.add_argument("--db", type=Path, default=config.db_path,
                        help=f"Database path (default: {config.db_path})")
    args = parser.parse_args()

    json_path = resolve_json_path(args.json)
    print(f"Seeding {args.db} from {json_path}")
    try:
        seed_database(json_path, args.db)
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}")
        sys.exit(1)
    print("Done.")


if __name__ == "__main__":
    main()
