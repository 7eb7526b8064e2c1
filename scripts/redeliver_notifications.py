#!/usr/bin/env python3
"""
One-off script to complete interrupted notification fan-outs.

This script compares every notification's recipient list against the
attendee inboxes and delivers it to the recipients that are missing it.
The same work runs periodically inside the app; use this after an outage
or to inspect the backlog.

Usage:
    python scripts/redeliver_notifications.py [--dry-run]

Options:
    --dry-run    Show what would be delivered without making changes
"""
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from sqlmodel import Session, select

from app.core.database import create_db_and_tables, engine
from app.models import Notification
from app.registration.notifications import deliver, missing_recipients


def main(dry_run: bool = False):
    """Report and deliver notifications missing from recipient inboxes."""
    create_db_and_tables()

    with Session(engine) as session:
        notifications = session.exec(
            select(Notification).order_by(Notification.created_at)
        ).all()

        if not notifications:
            print("No notifications found.")
            return

        pending = []
        for notification in notifications:
            missing = missing_recipients(session, notification)
            if missing:
                print(f"{notification.title} ({notification.id}):")
                print(f"  Recipients: {len(notification.attendees)}")
                print(f"  Missing:    {len(missing)}")
                pending.append(notification)

        if not pending:
            print(f"All {len(notifications)} notifications are fully delivered.")
            return

        if dry_run:
            print("--- DRY RUN: No changes made ---")
            return

        delivered = 0
        for notification in pending:
            delivered += deliver(session, notification)

        print(f"\nComplete: {delivered} inbox entries created across {len(pending)} notifications")


if __name__ == "__main__":
    dry_run = "--dry-run" in sys.argv
    main(dry_run=dry_run)
