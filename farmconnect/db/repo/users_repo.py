from __future__ import annotations

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from farmconnect.db.models.users import User

CUSTOMER_ROLE = "customer"


class UsersRepo:
    @staticmethod
    async def list_sms_recipients(session: AsyncSession) -> list[tuple[int, str]]:
        stmt = (
            select(User.id, User.phone)
            .where(
                User.role == CUSTOMER_ROLE,
                User.phone.is_not(None),
                User.phone != "",
            )
            .order_by(User.id.asc())
        )
        result = await session.execute(stmt)
        return [(int(user_id), str(phone)) for user_id, phone in result.all()]
