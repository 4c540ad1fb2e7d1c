#!/usr/bin/env python3
"""
Inspect the hosted database schema.

Samples one row from each table the API uses and prints its columns, so
code can be checked against what the database actually has. Read-only.

Usage:
    python scripts/inspect_schema.py
    python scripts/inspect_schema.py skills users
"""

import os
import sys
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from dotenv import load_dotenv
load_dotenv()

from lib.supabase_client import SupabaseClient

KNOWN_TABLES = [
    "users",
    "skills",
    "user_skills",
    "trade_proposals",
    "messages",
    "skill_categories",
    "system_health",
]

# Columns the API reads; a missing one is worth shouting about
EXPECTED_COLUMNS = {
    "users": {"id", "full_name", "display_name", "email", "profile_image_url", "location", "bio", "created_at"},
    "skills": {"id", "user_id", "title", "category", "description", "is_active"},
    "user_skills": {"id", "user_id", "skill_id", "is_offering", "proficiency_level"},
    "trade_proposals": {"id", "proposer_id", "recipient_id", "status"},
    "messages": {"id", "trade_id", "sender_id", "recipient_id", "content", "is_read"},
}


def inspect_table(client, table: str) -> dict | None:
    """Print the columns of one sample row. Returns the row (or None)."""
    print(f"\n{'='*60}")
    print(f"TABLE: {table}")
    print(f"{'='*60}")

    try:
        response = client.table(table).select("*").limit(1).execute()
    except Exception as e:
        print(f"  ERROR: {e}")
        return None

    if not response.data:
        print("  (empty - columns can't be sampled)")
        return None

    row = response.data[0]
    for column, value in row.items():
        print(f"  - {column}: {type(value).__name__}")

    expected = EXPECTED_COLUMNS.get(table, set())
    missing = sorted(expected - set(row))
    if missing:
        print(f"  MISSING expected columns: {', '.join(missing)}")

    return row


def check_skill_title(row: dict | None) -> None:
    """The skills table uses `title`; older code used `name`."""
    if row is None:
        return
    if "title" in row and "name" not in row:
        print("\n  OK: skills uses `title` (queries must not select `name`)")
    elif "name" in row and "title" not in row:
        print("\n  WARNING: skills uses `name` but the API selects `title`")
    elif "name" in row and "title" in row:
        print("\n  NOTE: skills has both `title` and `name`; the API reads `title`")


def main(tables: list[str]) -> int:
    print("SkillSwap Database Schema Inspection")
    client = SupabaseClient.get_client()

    for table in tables:
        row = inspect_table(client, table)
        if table == "skills":
            check_skill_title(row)

    return 0


if __name__ == "__main__":
    sys.exit(main(sys.argv[1:] or KNOWN_TABLES))
