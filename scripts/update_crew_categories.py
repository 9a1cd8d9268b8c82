#!/usr/bin/env python3
"""
Normalize crew categories onto the standard category list.

Usage:
    python scripts/update_crew_categories.py [--fix]
"""

import argparse
import os
import sys

from mokoji.utils.categories import normalize_categories
from mokoji.utils.dynamodb import scan_all, tables
from mokoji.utils.maintenance import confirm


def main():
    parser = argparse.ArgumentParser(description='Normalize crew categories')
    parser.add_argument('--region', default='ap-northeast-2', help='AWS region')
    parser.add_argument('--fix', action='store_true', help='Apply changes (default: dry-run)')
    args = parser.parse_args()

    os.environ.setdefault('AWS_DEFAULT_REGION', args.region)
    organizations_table = tables.organizations

    changes = []
    for organization in scan_all(organizations_table):
        current = list(organization.get('categories') or [])
        normalized = normalize_categories(current)
        if sorted(current) == sorted(normalized):
            continue

        changes.append((organization['organizationId'], normalized))
        print(f"\n크루: {organization.get('name')} ({organization['organizationId']})")
        print(f"  현재: {current}")
        print(f"  변경: {normalized}")

    if not changes:
        print("\n✅ All crew categories are normalized")
        return
    if not args.fix:
        print(f"\n{len(changes)} crews would change (run with --fix)")
        return

    if not confirm("This will modify the database."):
        print("Aborted.")
        sys.exit(0)

    for organization_id, normalized in changes:
        organizations_table.update_item(
            Key={'organizationId': organization_id},
            UpdateExpression='SET categories = :categories',
            ExpressionAttributeValues={':categories': normalized},
        )
        print(f"  ✓ Updated {organization_id}")

    print(f"\n✅ {len(changes)} crews updated")


if __name__ == '__main__':
    main()
