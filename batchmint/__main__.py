# batchmint/__main__.py
import asyncio
import sys

from .config import ConfigError, load_settings
from .orchestrator import run_forever
from .util import init_logging


def main() -> int:
    log = init_logging()
    try:
        settings = load_settings()
    except ConfigError as e:
        log.error(f"config: {e}")
        return 1
    log.info(
        f"mint {settings.mint_amount} x id {settings.mint_id} on {settings.contract_address}, "
        f"{settings.attempts_per_wallet} attempts per wallet"
    )
    try:
        asyncio.run(run_forever(settings))
    except KeyboardInterrupt:
        log.info("interrupted, bye")
    return 0


if __name__ == "__main__":
    sys.exit(main())
