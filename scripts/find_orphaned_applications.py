#!/usr/bin/env python3
"""List approved applications that have no linked member account.

Usage:
    python scripts/find_orphaned_applications.py
    python scripts/find_orphaned_applications.py --limit 200

These are approvals recorded before member linking existed, or approvals
whose provisioning was repaired by hand. Prints one line per application.
Exits 0 when none are found, 2 when some are, 1 on failure.
"""

from __future__ import annotations

import argparse
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).resolve().parent.parent))

from ccs_membership.db.session import SessionLocal
from ccs_membership.services.application_store import SqlApplicationStore


def main() -> int:
    parser = argparse.ArgumentParser(description="Find approvals with no linked member")
    parser.add_argument("--limit", type=int, default=1000, help="Max applications to scan")
    args = parser.parse_args()

    db = SessionLocal()
    try:
        orphaned = SqlApplicationStore(db).list_approved_without_member(limit=args.limit)
        for application in orphaned:
            print(
                f"{application.id} email={application.email} "
                f"approved={application.approval_date} decided_by={application.decided_by}"
            )
        print(f"orphaned_approvals={len(orphaned)}")
        return 2 if orphaned else 0
    except Exception as e:
        print(f"ERROR: {e}", file=sys.stderr)
        return 1
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
