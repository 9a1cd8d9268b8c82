#!/usr/bin/env python3
"""
Check and fix organization memberCount against active memberships.

Usage:
    python scripts/reconcile_member_counts.py [--fix]
"""

import argparse
import os
import sys

from mokoji.utils.dynamodb import scan_all, tables
from mokoji.utils.maintenance import confirm, plan_member_count_fixes
from mokoji.utils.organizations import set_member_count


def main():
    parser = argparse.ArgumentParser(description='Reconcile organization member counts')
    parser.add_argument('--region', default='ap-northeast-2', help='AWS region')
    parser.add_argument('--fix', action='store_true', help='Apply fixes (default: dry-run)')
    args = parser.parse_args()

    os.environ.setdefault('AWS_DEFAULT_REGION', args.region)

    organizations = list(scan_all(tables.organizations))
    members = list(scan_all(tables.members))
    print(f"Found {len(organizations)} organizations and {len(members)} memberships")

    fixes = plan_member_count_fixes(organizations, members)
    for organization_id, stored, actual in fixes:
        print(f"  {organization_id}: memberCount={stored}, active members={actual}")

    if not fixes:
        print("✅ All member counts are correct")
        return
    if not args.fix:
        print(f"\n{len(fixes)} mismatches. Run with --fix to apply fixes")
        return

    if not confirm("This will modify the database."):
        print("Aborted.")
        sys.exit(0)

    for organization_id, _, actual in fixes:
        try:
            set_member_count(organization_id, actual)
            print(f"  ✓ Fixed {organization_id} -> {actual}")
        except Exception as e:
            print(f"  ✗ Error fixing {organization_id}: {e}")

    print("\n✅ Done!")


if __name__ == '__main__':
    main()
