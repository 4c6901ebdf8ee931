#!/usr/bin/env python3
"""
Insights Dashboard: launch the API and web dashboard.

Usage:
    python main.py                          # http://localhost:5000/dashboard
    python main.py --port 9000              # http://localhost:9000/dashboard
    python main.py --host 0.0.0.0           # listen on all interfaces
    python main.py --db /path/to/insights.sqlite
    python main.py --reload                 # auto-reload on code changes
"""

from __future__ import annotations

import argparse
import os
import webbrowser
from pathlib import Path

import uvicorn


def main() -> None:
    parser = argparse.ArgumentParser(
        description="Launch the insights API and dashboard.",
    )
    parser.add_argument(
        "--host", default=os.getenv("APP_HOST", "127.0.0.1"),
        help="Bind address (default: 127.0.0.1 or APP_HOST env var)",
    )
    parser.add_argument(
        "--port", type=int, default=int(os.getenv("APP_PORT", "5000")),
        help="Port to listen on (default: 5000 or APP_PORT env var)",
    )
    parser.add_argument(
        "--db", type=Path, default=None,
        help="Path to SQLite database (default: insights.sqlite or APP_DB_PATH env var)",
    )
    parser.add_argument(
        "--reload", action="store_true",
        help="Enable auto-reload on file changes (development mode)",
    )
    parser.add_argument(
        "--no-browser", action="store_true",
        help="Don't open a browser window automatically",
    )
    args = parser.parse_args()

    # Set DB path env var if provided via CLI
    if args.db is not None:
        os.environ["APP_DB_PATH"] = str(args.db)

    db_path = Path(os.getenv("APP_DB_PATH", "insights.sqlite"))
    if not db_path.exists():
        print(f"Warning: Database not found at {db_path}")
        print("  Run 'python build_insights_db.py' first to seed the database,")
        print("  or pass --db /path/to/your/database.sqlite")
        print()

    url = f"http://{'localhost' if args.host == '0.0.0.0' else args.host}:{args.port}"
    print(f"Starting Insights Dashboard at {url}/dashboard")
    print(f"API: {url}/api/data")
    print(f"Database: {db_path}")
    print()

    if not args.no_browser:
        # Open browser after a short delay to let the server start
        import threading
        threading.Timer(1.5, webbrowser.open, args=(f"{url}/dashboard",)).start()

    uvicorn.run(
        "api.app:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level="info",
    )


if __name__ == "__main__":
    main()
