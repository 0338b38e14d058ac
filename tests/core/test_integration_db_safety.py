import pytest

from farmconnect.core.integration_db_safety import assess_integration_db_safety


@pytest.mark.parametrize(
    ("url", "is_safe", "reason"),
    [
        ("postgresql+asyncpg://u:p@localhost:5432/farmconnect_test", True, "ok"),
        ("postgresql+asyncpg://u:p@postgres:5432/test_offers", True, "ok"),
        (
            "postgresql+asyncpg://u:p@localhost:5432/farmconnect",
            False,
            "database name must contain 'test'",
        ),
        (
            "postgresql+asyncpg://u:p@db.prod.example.com:5432/farmconnect_test",
            False,
            "host 'db.prod.example.com' is not an allowed local test host",
        ),
        ("sqlite+aiosqlite:///test.db", False, "only PostgreSQL test databases are supported"),
    ],
)
def test_assess_integration_db_safety(url: str, is_safe: bool, reason: str) -> None:
    result = assess_integration_db_safety(url)

    assert result.is_safe is is_safe
    assert result.reason == reason
