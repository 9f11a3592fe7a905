"""Bridge for the blocking vendor SDKs (Azure Storage, Stripe)."""

import asyncio
from functools import partial
from typing import Any


async def run_in_executor(func, *args, **kwargs) -> Any:
    """Run a synchronous SDK call in the default thread pool."""
    loop = asyncio.get_running_loop()
    return await loop.run_in_executor(None, partial(func, *args, **kwargs))
