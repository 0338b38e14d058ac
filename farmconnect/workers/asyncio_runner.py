from __future__ import annotations

import asyncio
from collections.abc import Coroutine
from typing import Any, TypeVar

from farmconnect.core.config import get_settings
from farmconnect.core.logging import configure_logging
from farmconnect.db.session import dispose_engine

T = TypeVar("T")


async def _run_with_fresh_db_pool(coroutine: Coroutine[Any, Any, T]) -> T:
    await dispose_engine()
    try:
        return await coroutine
    finally:
        await dispose_engine()


def run_async_job(coroutine: Coroutine[Any, Any, T]) -> T:
    configure_logging(get_settings().log_level)
    return asyncio.run(_run_with_fresh_db_pool(coroutine))
