#!/usr/bin/env python3
"""
Create missing users records for Cognito users.

This script:
1. Pages through the Cognito user pool (60 users per page)
2. Skips users whose sub already has a users record
3. Creates the record, copying profile fields from a legacy record with the
   same email when one exists

Usage:
    python scripts/sync_cognito_users.py --user-pool-id ap-northeast-2_XXXX [--fix]
"""

import argparse
import os
import sys

import boto3

from mokoji.utils.dynamodb import scan_all, tables
from mokoji.utils.maintenance import build_user_from_cognito, confirm, is_legacy_user_id
from mokoji.utils.users import create_user


def list_cognito_users(user_pool_id: str, region: str):
    """Yield every user of the pool."""
    cognito = boto3.client('cognito-idp', region_name=region)
    paginator = cognito.get_paginator('list_users')
    for page in paginator.paginate(UserPoolId=user_pool_id, PaginationConfig={'PageSize': 60}):
        yield from page.get('Users', [])


def main():
    parser = argparse.ArgumentParser(description='Sync Cognito users into the users table')
    parser.add_argument('--user-pool-id', default=os.getenv('COGNITO_USER_POOL_ID'),
                        help='Cognito user pool ID (default: $COGNITO_USER_POOL_ID)')
    parser.add_argument('--region', default='ap-northeast-2', help='AWS region')
    parser.add_argument('--fix', action='store_true', help='Create records (default: dry-run)')
    args = parser.parse_args()

    if not args.user_pool_id:
        parser.error('--user-pool-id is required')

    os.environ.setdefault('AWS_DEFAULT_REGION', args.region)

    existing = list(scan_all(tables.users))
    existing_ids = {u['userId'] for u in existing}
    legacy_by_email = {
        u['email']: u for u in existing if u.get('email') and is_legacy_user_id(u['userId'])
    }
    print(f"Found {len(existing)} users records ({len(legacy_by_email)} legacy)")

    to_create = []
    for cognito_user in list_cognito_users(args.user_pool_id, args.region):
        attributes = {a['Name']: a['Value'] for a in cognito_user.get('Attributes', [])}
        if attributes.get('sub') in existing_ids:
            continue
        user = build_user_from_cognito(cognito_user, legacy_by_email.get(attributes.get('email')))
        if user:
            to_create.append(user)
            print(f"  missing: {user['userId']} ({user.get('email', '-')})")

    print("\n" + "=" * 80)
    print(f"Users records to create: {len(to_create)}")
    print("=" * 80 + "\n")

    if not to_create:
        print("✅ Users table is in sync")
        return
    if not args.fix:
        print("Run with --fix to create records")
        return

    if not confirm("This will modify the database."):
        print("Aborted.")
        sys.exit(0)

    for user in to_create:
        try:
            create_user(user)
            print(f"  ✓ Created {user['userId']}")
        except Exception as e:
            print(f"  ✗ Error creating {user['userId']}: {e}")

    print("\n✅ Done!")


if __name__ == '__main__':
    main()
