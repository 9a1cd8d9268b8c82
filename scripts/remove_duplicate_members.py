#!/usr/bin/env python3
"""
Remove duplicate organization memberships.

This script:
1. Scans the organization members table
2. Groups memberships by (userId, organizationId)
3. Keeps the membership with the newest joinedAt and deletes the rest

Usage:
    python scripts/remove_duplicate_members.py [--region ap-northeast-2] [--fix]
"""

import argparse
import os
import sys

from mokoji.utils.dynamodb import scan_all, tables
from mokoji.utils.maintenance import confirm, find_duplicate_memberships


def main():
    parser = argparse.ArgumentParser(description='Remove duplicate organization memberships')
    parser.add_argument('--region', default='ap-northeast-2', help='AWS region')
    parser.add_argument('--fix', action='store_true', help='Delete duplicates (default: dry-run)')
    args = parser.parse_args()

    os.environ.setdefault('AWS_DEFAULT_REGION', args.region)
    members_table = tables.members

    print(f"Members table: {members_table.name}")
    print(f"Mode: {'FIX' if args.fix else 'DRY-RUN'}")
    print()

    members = list(scan_all(members_table))
    print(f"Found {len(members)} memberships")

    duplicates = find_duplicate_memberships(members)
    for member in duplicates:
        print(
            f"  duplicate: memberId={member['memberId']} userId={member.get('userId')} "
            f"organizationId={member.get('organizationId')} joinedAt={member.get('joinedAt')}"
        )

    print("\n" + "=" * 80)
    print(f"Duplicates to delete: {len(duplicates)}")
    print("=" * 80 + "\n")

    if not duplicates:
        print("✅ No duplicates found")
        return
    if not args.fix:
        print("Run with --fix to delete duplicates")
        return

    if not confirm("This will delete memberships."):
        print("Aborted.")
        sys.exit(0)

    deleted = 0
    for member in duplicates:
        try:
            members_table.delete_item(Key={'memberId': member['memberId']})
            deleted += 1
            print(f"  ✓ Deleted {member['memberId']}")
        except Exception as e:
            print(f"  ✗ Error deleting {member['memberId']}: {e}")

    print(f"\n✅ Deleted {deleted}/{len(duplicates)} duplicates")


if __name__ == '__main__':
    main()
