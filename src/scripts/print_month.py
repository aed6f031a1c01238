#!/usr/bin/env python3
"""
Print a user's packed month grid.

Each visible day lists its entries by lane. An event is printed in full on the
first day it appears, with its span; later days show it as a continuation.

Usage:
    uv run python src/scripts/print_month.py --user demo-user --month 2025-11
"""

import argparse
import sys
from datetime import date, datetime
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from core.config import DB_PATH
from core.database import get_connection
from models.events import MonthLayout
from services.calendar import build_month_view
from services.month import day_key


def format_month(view: MonthLayout) -> str:
    lines = [f"Month: {view.month}"]
    for day in view.days:
        entries = sorted(view.entries[day_key(day)], key=lambda entry: entry.position)
        marker = "" if day.strftime("%Y-%m") == view.month else " (outside month)"
        lines.append(f"\n{day:%a %Y-%m-%d}{marker}")
        for entry in entries:
            event = entry.event
            if entry.span:
                span = f" [{entry.span} days]" if entry.span > 1 else ""
                lines.append(
                    f"  {entry.position}: {event.start:%H:%M} {event.title} ({event.category}){span}"
                )
            else:
                lines.append(f"  {entry.position}: ... {event.title}")
    return "\n".join(lines)


def main(user_id: str, month_str: str | None = None):
    if month_str:
        anchor = datetime.strptime(month_str, "%Y-%m").date()
    else:
        anchor = date.today()

    conn = get_connection(DB_PATH)
    try:
        view = build_month_view(conn, user_id, anchor)
    finally:
        conn.close()

    print(format_month(view))


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Print a packed month calendar grid")
    parser.add_argument("--user", required=True, help="User id whose calendar to print")
    parser.add_argument(
        "--month",
        help="Target month (YYYY-MM). Defaults to current month.",
    )
    args = parser.parse_args()

    main(args.user, args.month)
