#!/usr/bin/env python3
"""
Re-key memberships from legacy user IDs to Cognito subs.

Memberships created before the move to Cognito reference user IDs without
dashes. Each legacy ID is resolved through the legacy users record's email
to the users record keyed by the Cognito sub.

This script:
1. Scans the members and users tables
2. Plans the userId rewrite for every legacy membership
3. With --fix, rewrites the userId of each legacy membership
4. With --delete-orphans, deletes memberships that cannot be resolved

Usage:
    python scripts/migrate_member_userids.py [--fix] [--delete-orphans]
"""

import argparse
import os
import sys

from mokoji.utils.dynamodb import scan_all, tables
from mokoji.utils.maintenance import confirm, plan_member_user_id_migration


def main():
    parser = argparse.ArgumentParser(description='Migrate membership userIds to Cognito subs')
    parser.add_argument('--region', default='ap-northeast-2', help='AWS region')
    parser.add_argument('--fix', action='store_true', help='Apply changes (default: dry-run)')
    parser.add_argument('--delete-orphans', action='store_true',
                        help='Delete memberships whose user cannot be resolved')
    args = parser.parse_args()

    os.environ.setdefault('AWS_DEFAULT_REGION', args.region)
    members_table = tables.members

    members = list(scan_all(members_table))
    users = list(scan_all(tables.users))
    print(f"Found {len(members)} memberships and {len(users)} users")

    remapped, orphans = plan_member_user_id_migration(members, users)

    for member, new_user_id in remapped:
        print(f"  {member['memberId']}: {member['userId']} -> {new_user_id}")
    for member in orphans:
        print(f"  ⚠️  orphan {member['memberId']}: userId={member['userId']}")

    print("\n" + "=" * 80)
    print(f"Memberships to migrate: {len(remapped)}")
    print(f"Orphaned memberships: {len(orphans)}")
    print("=" * 80 + "\n")

    if not args.fix:
        print("Run with --fix to apply changes")
        return

    if not confirm("This will modify the database."):
        print("Aborted.")
        sys.exit(0)

    for member, new_user_id in remapped:
        try:
            members_table.put_item(Item={**member, 'userId': new_user_id})
            print(f"  ✓ Migrated {member['memberId']}")
        except Exception as e:
            print(f"  ✗ Error migrating {member['memberId']}: {e}")

    if args.delete_orphans:
        for member in orphans:
            try:
                members_table.delete_item(Key={'memberId': member['memberId']})
                print(f"  ✓ Deleted orphan {member['memberId']}")
            except Exception as e:
                print(f"  ✗ Error deleting {member['memberId']}: {e}")

    print("\n✅ Done!")


if __name__ == '__main__':
    main()
