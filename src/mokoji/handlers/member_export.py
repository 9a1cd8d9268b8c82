"""
Member roster export Lambda handler.

Implements:
- POST /organizations/{orgId}/members/export: Excel/CSV roster of a crew
"""

import csv
import re
from datetime import datetime, timedelta, timezone
from io import BytesIO, StringIO
from typing import Any, Dict, List

from openpyxl import Workbook
from openpyxl.styles import Font, PatternFill

from ..utils import members, organizations, storage, users
from ..utils.auth import is_organization_admin, require_auth
from ..utils.dates import format_date, to_millis
from ..utils.errors import AppError, ErrorCode
from ..utils.http_types import get_json_body, get_path_parameter
from ..utils.logging import get_correlation_id, get_logger
from ..utils.names import add_duplicate_name_suffixes
from ..utils.responses import json_response

HEADERS = ["이름", "이메일", "역할", "상태", "가입일"]

ROLE_LABELS = {"owner": "크루장", "admin": "운영진", "member": "멤버"}
STATUS_LABELS = {"active": "활동", "pending": "승인 대기", "inactive": "비활동"}

EXPORT_EXPIRY_DAYS = 7

XLSX_CONTENT_TYPE = "application/vnd.openxmlformats-officedocument.spreadsheetml.sheet"


def export_members(event: Dict[str, Any], context: Any) -> Dict[str, Any]:
    """
    Generate a member roster and upload it to the exports bucket.

    Request body:
        format: "xlsx" (default) or "csv"

    Returns:
        {exportUrl, key, format, memberCount, expiresAt}
    """
    logger = get_logger(__name__, get_correlation_id(event))

    try:
        caller = require_auth(event)
        organization_id = get_path_parameter(event, "orgId")
        export_format = str(get_json_body(event).get("format") or "xlsx").lower()
        if export_format not in ("xlsx", "csv"):
            raise AppError(ErrorCode.INVALID_INPUT, "format must be xlsx or csv")

        organization = organizations.get_organization(organization_id)
        if not organization:
            raise AppError(ErrorCode.NOT_FOUND, "Organization not found")

        membership = members.find_membership(caller["sub"], organization_id)
        if not is_organization_admin(organization, membership, caller["sub"]):
            raise AppError(ErrorCode.FORBIDDEN, "Only crew managers can export the member list")

        rows = _build_rows(members.list_members_by_organization(organization_id))

        if export_format == "csv":
            content = _generate_csv(rows)
            content_type = "text/csv; charset=utf-8"
        else:
            content = _generate_excel(organization.get("name", ""), rows)
            content_type = XLSX_CONTENT_TYPE

        now = datetime.now(timezone.utc)
        bucket = storage.get_exports_bucket()
        key = f"exports/{organization_id}/members-{now.strftime('%Y%m%d%H%M%S')}.{export_format}"
        storage.put_export(bucket, key, content, content_type)

        expires_in = EXPORT_EXPIRY_DAYS * 24 * 60 * 60
        export_url = storage.create_download_url(bucket, key, expires_in)

        logger.info("Member roster exported", organization_id=organization_id, key=key, rows=len(rows))
        return json_response(
            {
                "exportUrl": export_url,
                "key": key,
                "format": export_format,
                "memberCount": len(rows),
                "expiresAt": (now + timedelta(seconds=expires_in)).isoformat(),
            }
        )

    except AppError:
        raise
    except Exception as e:
        logger.error("Unexpected error exporting members", error=str(e))
        raise AppError(ErrorCode.INTERNAL_ERROR, "Failed to export members")


def _build_rows(member_list: List[Dict[str, Any]]) -> List[List[str]]:
    """One row per member, oldest first, with duplicate names disambiguated."""
    ordered = sorted(member_list, key=lambda m: to_millis(m.get("joinedAt")))
    rows = []
    for member in add_duplicate_name_suffixes(ordered):
        profile = users.get_user(member["userId"]) if member.get("userId") else None
        rows.append(
            [
                member["displayName"],
                (profile or {}).get("email", ""),
                ROLE_LABELS.get(member.get("role", ""), member.get("role", "")),
                STATUS_LABELS.get(member.get("status", ""), member.get("status", "")),
                format_date(member.get("joinedAt")),
            ]
        )
    return rows


def _generate_csv(rows: List[List[str]]) -> bytes:
    output = StringIO()
    writer = csv.writer(output)
    writer.writerow(HEADERS)
    writer.writerows(rows)
    # BOM so Excel opens Korean text correctly
    return output.getvalue().encode("utf-8-sig")


def _generate_excel(organization_name: str, rows: List[List[str]]) -> bytes:
    """Generate the roster workbook with a styled header row."""
    wb = Workbook()
    ws = wb.active
    assert ws is not None, "Workbook must have an active worksheet"
    # Sheet titles are limited to 31 characters and reject \/*?:[]
    ws.title = re.sub(r"[\\/*?:\[\]]", " ", organization_name or "Members")[:31] or "Members"

    header_fill = PatternFill(start_color="4472C4", end_color="4472C4", fill_type="solid")
    header_font = Font(bold=True, color="FFFFFF")

    for col, header in enumerate(HEADERS, start=1):
        cell = ws.cell(row=1, column=col, value=header)
        cell.fill = header_fill
        cell.font = header_font

    for row_idx, row in enumerate(rows, start=2):
        for col_idx, value in enumerate(row, start=1):
            ws.cell(row=row_idx, column=col_idx, value=value)

    # Auto-size columns
    for column in ws.columns:
        column_letter = getattr(column[0], "column_letter", None)
        if column_letter is None:  # pragma: no cover
            continue
        max_length = max(len(str(cell.value or "")) for cell in column)
        ws.column_dimensions[column_letter].width = min(max_length + 2, 50)

    buffer = BytesIO()
    wb.save(buffer)
    return buffer.getvalue()
