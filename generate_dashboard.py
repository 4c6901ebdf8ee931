#!/usr/bin/env python3
"""
Static Dashboard Generator

Renders the insights dashboard to a standalone HTML file.  Records and filter
options come from the API when it is reachable and from the local JSON
dataset otherwise, so the export works offline.

Usage:
    python generate_dashboard.py                              # dashboard.html
    python generate_dashboard.py --out report.html --sector Energy
    python generate_dashboard.py --search oil --end-year 2027
    python generate_dashboard.py --local                      # skip the API
"""

import argparse
import logging
import sys
import time
from pathlib import Path

from dashboard.data_service import DataService
from dashboard.render import build_dashboard_context, render_dashboard_html
from utils.config import AppConfig, FILTER_FIELDS
from utils.filters import FilterState

logger = logging.getLogger(__name__)


def generate(service: DataService, filters: FilterState, out_path: Path) -> int:
    """Fetch, render and write the dashboard; return the record count."""
    records = service.fetch_data(filters)
    options = service.get_filter_options()
    context = build_dashboard_context(records, filters, options, static_page=True)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    out_path.write_text(render_dashboard_html(context), encoding="utf-8")
    return len(records)


def main():
    """Parse command-line arguments and write the dashboard HTML."""
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s %(message)s")
    config = AppConfig.from_env()

    parser = argparse.ArgumentParser(description="Render the insights dashboard to static HTML")
    parser.add_argument("--out", type=Path, default=Path("dashboard.html"),
                        help="Output file (default: dashboard.html)")
    parser.add_argument("--api-url", default=config.api_url,
                        help=f"API base URL (default: {config.api_url})")
    parser.add_argument("--local", action="store_true",
                        help="Use the local JSON dataset only")
    parser.add_argument("--local-data", type=Path, default=config.local_data_path,
                        help=f"Fallback JSON dataset (default: {config.local_data_path})")
    for field in FILTER_FIELDS:
        parser.add_argument(f"--{field.replace('_', '-')}", dest=field, default="",
                            help=f"Filter on {field}")
    parser.add_argument("--search", default="", help="Case-insensitive substring search")
    args = parser.parse_args()

    config.api_url = args.api_url.rstrip("/")
    config.local_data_path = args.local_data
    if args.local:
        config.use_backend = False

    filters = FilterState.from_mapping(vars(args))
    start = time.time()
    with DataService(config) as service:
        if config.use_backend and not service.check_api_health():
            print(f"  API at {config.api_url} is not healthy; using local data where needed")
        count = generate(service, filters, args.out)

    if count == 0 and filters.is_empty():
        print("ERROR: no records available from the API or the local dataset")
        sys.exit(1)
    print(f"  Wrote {args.out} ({count:,} records) in {time.time() - start:.1f}s")


if __name__ == "__main__":
    main()
