#!/usr/bin/env python3
"""
Fill a month of a user's calendar with sample events.

Generates weekday meetings and calls, a multi-day conference, and a recurring
weekly standup, then stores them through the event service so they pass the
same validation as API writes.

Usage:
    uv run python src/scripts/seed_events.py --user demo-user --month 2025-11
"""

import argparse
import random
import sys
from datetime import date, datetime, time, timedelta
from pathlib import Path

# Add src to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent))

from dateutil.relativedelta import relativedelta
from faker import Faker

from core.config import DB_PATH, DEPARTMENTS
from core.database import create_schema, get_connection
from services.events import create_event

fake = Faker()

# Category -> sample titles
TITLES = {
    "meeting": [
        "Client meeting",
        "Pipeline review",
        "Team meeting",
        "Account planning session",
    ],
    "call": [
        "Follow-up call",
        "Supplier call",
        "Prospect discovery call",
    ],
    "work": [
        "Quote preparation",
        "Proposal writing",
        "CRM data cleanup",
    ],
    "break": ["Lunch"],
}

# Duration choices in minutes
DURATIONS = [30, 45, 60, 90, 120]


def parse_month(month_str: str | None) -> date:
    """First day of the target month (YYYY-MM), defaulting to the current month."""
    if month_str:
        return datetime.strptime(month_str, "%Y-%m").date()
    return date.today().replace(day=1)


def workdays(first: date) -> list[date]:
    last = first + relativedelta(months=1)
    days = []
    current = first
    while current < last:
        # Skip weekends (5=Saturday, 6=Sunday)
        if current.weekday() < 5:
            days.append(current)
        current += timedelta(days=1)
    return days


def generate_day(day: date) -> list[dict]:
    """Two to five events between 8 AM and 5 PM, some deliberately overlapping."""
    events = []
    for _ in range(random.randint(2, 5)):
        category = random.choices(
            ["meeting", "call", "work", "break"],
            weights=[0.4, 0.3, 0.2, 0.1],
            k=1,
        )[0]
        start = datetime.combine(day, time(random.randint(8, 16), random.choice([0, 30])))
        events.append(
            {
                "title": random.choice(TITLES[category]),
                "description": fake.sentence(nb_words=8),
                "start": start,
                "end": start + timedelta(minutes=random.choice(DURATIONS)),
                "category": category,
                "department": random.choice(sorted(DEPARTMENTS)),
            }
        )
    return events


def generate_month(first: date) -> list[dict]:
    days = workdays(first)
    events = []
    for day in days:
        events.extend(generate_day(day))

    # Multi-day conference somewhere mid-month
    conference_day = random.choice(days[5:-5] or days)
    events.append(
        {
            "title": f"{fake.company()} Conference",
            "description": fake.catch_phrase(),
            "start": datetime.combine(conference_day, time(9, 0)),
            "end": datetime.combine(conference_day + timedelta(days=2), time(17, 0)),
            "category": "conference",
        }
    )

    # Weekly standup for the whole month, skipping one week
    standup_start = datetime.combine(days[0], time(9, 0))
    events.append(
        {
            "title": "Weekly standup",
            "start": standup_start,
            "end": standup_start + timedelta(minutes=30),
            "category": "meeting",
            "recurrence": {
                "frequency": "weekly",
                "interval": 1,
                "end_date": datetime.combine(days[-1], time(23, 59)),
                "exception_dates": [days[0] + timedelta(weeks=2)],
            },
        }
    )
    return events


def main(user_id: str, month_str: str | None = None):
    first = parse_month(month_str)
    print(f"Seeding {first:%B %Y} for user {user_id}...")

    DB_PATH.parent.mkdir(parents=True, exist_ok=True)
    conn = get_connection(DB_PATH)
    try:
        create_schema(conn)
        events = generate_month(first)
        for data in events:
            create_event(conn, user_id, data)
    finally:
        conn.close()

    recurring = sum(1 for data in events if data.get("recurrence"))
    print(f"\nEvents created: {len(events)} ({recurring} recurring)")
    print(f"Database: {DB_PATH}")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed a month of sample calendar events")
    parser.add_argument("--user", required=True, help="Owner user id for the events")
    parser.add_argument(
        "--month",
        help="Target month (YYYY-MM). Defaults to current month.",
    )
    args = parser.parse_args()

    main(args.user, args.month)
