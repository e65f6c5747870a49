from __future__ import annotations

from merchant_auth.models.user import User

from .dto import StaffSummaryOut, StaffUserOut


def user_to_summary(row: User) -> StaffSummaryOut:
    return StaffSummaryOut(
        id=row.id,
        username=row.username,
        full_name=row.full_name,
        role=row.role.name if row.role is not None else None,
    )


def user_to_out(row: User) -> StaffUserOut:
    return StaffUserOut(
        id=row.id,
        merchant_id=row.merchant_id,
        username=row.username,
        email=row.email,
        full_name=row.full_name,
        role_id=row.role_id,
        role=row.role.name if row.role is not None else None,
        status=row.status,
        last_login_at=row.last_login_at,
    )
