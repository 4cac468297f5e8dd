import asyncio
from typing import Any, Callable, TypeVar

from food_vision_relay.core.errors import UpstreamTimeout

T = TypeVar('T')


async def run_with_deadline(func: Callable[..., T], *args: Any, timeout_ms: int) -> T:
    """Run a blocking call in a worker thread and give up after ``timeout_ms``.

    The worker thread is not interrupted on expiry; callers are expected to
    bound the underlying I/O as well.
    """
    try:
        return await asyncio.wait_for(asyncio.to_thread(func, *args), timeout=timeout_ms / 1000.0)
    except asyncio.TimeoutError as exc:
        raise UpstreamTimeout(timeout_ms) from exc
