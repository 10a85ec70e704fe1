# batchmint/trigger.py
import asyncio
import time
from typing import Awaitable, Callable

from .util import get_logger
log = get_logger()


async def wait_until(
    target_ms: int,
    clock: Callable[[], float] = time.time,
    sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
) -> int:
    """Suspend until the unix-millisecond target; return the delay waited in ms."""
    delay = int(target_ms - clock() * 1000)
    if delay <= 0:
        log.info("The target timestamp is in the past. Running immediately.")
        return 0
    log.info(f"Minting will start in {delay / 60000:.2f} minutes.")
    await sleep(delay / 1000)
    log.info("Target timestamp reached.")
    return delay
