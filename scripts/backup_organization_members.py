#!/usr/bin/env python3
"""
Back up the organization members table to a local JSON file.

Run before any script that rewrites memberships.

Usage:
    python scripts/backup_organization_members.py [--output backups/members.json]
"""

import argparse
import json
import os
from datetime import datetime, timezone
from decimal import Decimal

from mokoji.utils.dynamodb import scan_all, tables


def _default(value):
    if isinstance(value, Decimal):
        return int(value) if value == value.to_integral_value() else float(value)
    raise TypeError(f"Cannot serialize {type(value).__name__}")


def main():
    timestamp = datetime.now(timezone.utc).strftime('%Y%m%dT%H%M%SZ')
    parser = argparse.ArgumentParser(description='Back up organization members')
    parser.add_argument('--region', default='ap-northeast-2', help='AWS region')
    parser.add_argument('--output', default=f'backups/organization-members-{timestamp}.json',
                        help='Output file path')
    args = parser.parse_args()

    os.environ.setdefault('AWS_DEFAULT_REGION', args.region)

    members = list(scan_all(tables.members))
    os.makedirs(os.path.dirname(args.output) or '.', exist_ok=True)
    with open(args.output, 'w', encoding='utf-8') as f:
        json.dump(
            {'exportedAt': timestamp, 'count': len(members), 'members': members},
            f,
            default=_default,
            ensure_ascii=False,
            indent=2,
        )

    print(f"✅ Backed up {len(members)} memberships to {args.output}")


if __name__ == '__main__':
    main()
