"""Issue an API token for a studio admin.

Usage:
    python -m ccs_membership.scripts.create_reviewer_token --email admin@example.org
"""

from __future__ import annotations

import argparse
import sys
from datetime import timedelta

from ccs_membership.platform.factory import get_platform_client
from ccs_membership.services.auth import create_access_token
from ccs_membership.services.authorization import is_studio_admin


def main() -> None:
    parser = argparse.ArgumentParser(description="Create a reviewer API token")
    parser.add_argument("--email", required=True, help="Login email of the studio admin")
    parser.add_argument("--hours", type=int, default=24, help="Token lifetime in hours")
    args = parser.parse_args()

    client = get_platform_client()
    try:
        member = client.find_member_by_email(args.email)
        if member is None:
            print(f"No member with login email '{args.email}'.")
            sys.exit(1)
        if not is_studio_admin(member):
            print(f"Member '{args.email}' does not hold the studio admin role.")
            sys.exit(1)

        token = create_access_token(
            data={"sub": member.id}, expires_delta=timedelta(hours=args.hours)
        )
        print(token)
    finally:
        client.close()


if __name__ == "__main__":
    main()
