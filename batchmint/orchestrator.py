# batchmint/orchestrator.py
import asyncio
from typing import Callable, List, Mapping, Optional

from .chain import ChainConnection
from .config import Settings
from .dispatcher import AttemptResult, dispatch, summarize
from .mint import MintRequest
from .trigger import wait_until
from .util import get_logger, on_error, fmt_amount
from .wallets import WalletPool
log = get_logger()


def iteration_limit(max_iterations: int) -> Callable[[int], bool]:
    """Stop condition for run_forever; 0 keeps going forever."""
    if max_iterations <= 0:
        return lambda count: True
    return lambda count: count < max_iterations


async def _log_fees(chain: ChainConnection) -> None:
    try:
        fees = await chain.suggest_fees()
    except Exception as e:
        log.warning(f"fee data unavailable: {e}")
        return
    if fees is None:
        log.info("network has no base fee (pre-London), legacy gas price only")
        return
    log.info(
        f"base fee {fmt_amount(fees.base_fee, 9)} gwei | "
        f"maxFee {fmt_amount(fees.max_fee_per_gas, 9)} gwei | "
        f"tip {fmt_amount(fees.max_priority_fee_per_gas, 9)} gwei | "
        f"node gasPrice {fmt_amount(fees.gas_price, 9)} gwei"
    )


async def run_iteration(
    settings: Settings,
    chain: Optional[ChainConnection] = None,
    environ: Optional[Mapping[str, str]] = None,
    sleep=asyncio.sleep,
) -> List[AttemptResult]:
    """connect -> load wallets -> balances -> wait for target -> dispatch"""
    chain = chain if chain is not None else ChainConnection(settings)
    network = await chain.connect()
    log.info(f"Connected to network: {network.name} (Chain ID: {network.chain_id})")
    if network.chain_id != settings.chain_id:
        log.warning(f"RPC reports chain id {network.chain_id}, expected {settings.chain_id}")

    pool = WalletPool.from_env(environ, settings.key_prefix)
    await pool.check_balances(chain, settings.currency)
    await _log_fees(chain)

    await wait_until(settings.target_timestamp_ms, sleep=sleep)

    log.info("Starting minting process for all wallets...")
    results = await dispatch(
        chain, pool, MintRequest.from_settings(settings),
        attempts_per_wallet=settings.attempts_per_wallet,
        receipt_timeout=settings.receipt_timeout,
        currency=settings.currency,
    )
    s = summarize(results)
    log.info(
        f"Minting completed for {s['total']} attempts: "
        f"{s['confirmed']} confirmed, {s['failed']} failed, {s['rejected']} rejected"
    )
    return results


async def run_forever(
    settings: Settings,
    should_continue: Optional[Callable[[int], bool]] = None,
    chain_factory: Callable[[Settings], ChainConnection] = ChainConnection,
    environ: Optional[Mapping[str, str]] = None,
    sleep=asyncio.sleep,
) -> int:
    """Repeat run_iteration until should_continue(count) is False.

    A failing iteration is logged and the next one starts straight away.
    Returns the number of iterations run.
    """
    if should_continue is None:
        should_continue = iteration_limit(settings.max_iterations)

    count = 0
    while should_continue(count):
        try:
            await run_iteration(settings, chain=chain_factory(settings), environ=environ, sleep=sleep)
        except KeyboardInterrupt:
            raise
        except Exception as e:
            on_error(log, f"iteration {count} failed", e)
        log.info(f"iteration {count} finished")
        count += 1
        if settings.iteration_pause > 0 and should_continue(count):
            await sleep(settings.iteration_pause)
    return count
