from __future__ import annotations

import pytest

from farmconnect.db.repo.users_repo import UsersRepo
from tests.db.repo_sql_fixtures import _CapturingSession, compile_postgres


@pytest.mark.asyncio
async def test_list_sms_recipients_selects_customers_with_phone() -> None:
    session = _CapturingSession(rows=[(11, "9876543210"), (12, "+919812345678")])

    recipients = await UsersRepo.list_sms_recipients(session)

    assert recipients == [(11, "9876543210"), (12, "+919812345678")]
    sql, params = compile_postgres(session.statements[0])
    assert sql == (
        "SELECT users.id, users.phone FROM users "
        "WHERE users.role = ? AND users.phone IS NOT NULL AND users.phone != ? "
        "ORDER BY users.id ASC"
    )
    assert params == ["customer", ""]
