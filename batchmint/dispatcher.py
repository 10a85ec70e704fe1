# batchmint/dispatcher.py
import asyncio
from dataclasses import dataclass
from typing import Dict, List, Optional

from .mint import MintOutcome, MintRequest, MintStatus, quote_and_mint
from .util import get_logger
from .wallets import Wallet, WalletPool
log = get_logger()


@dataclass(frozen=True)
class AttemptResult:
    wallet_index: int
    address: str
    attempt: int  # 1-based
    status: MintStatus
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None
    reason: Optional[str] = None
    rejected: bool = False  # the attempt raised instead of returning

    @property
    def success(self) -> bool:
        return self.status is MintStatus.SUCCESS


async def _settle(chain, wallet: Wallet, attempt: int, request: MintRequest,
                  receipt_timeout: Optional[float], currency: str) -> AttemptResult:
    try:
        outcome: MintOutcome = await quote_and_mint(chain, wallet, request, receipt_timeout, currency)
    except Exception as e:
        log.error(f"Failed minting for wallet {wallet.address} (attempt {attempt}): {e}")
        return AttemptResult(
            wallet_index=wallet.index, address=wallet.address, attempt=attempt,
            status=MintStatus.FAILED, reason=str(e), rejected=True,
        )
    return AttemptResult(
        wallet_index=wallet.index, address=wallet.address, attempt=attempt,
        status=outcome.status, tx_hash=outcome.tx_hash,
        block_number=outcome.block_number, reason=outcome.reason,
    )


async def dispatch(
    chain, pool: WalletPool, request: MintRequest,
    attempts_per_wallet: int = 10, receipt_timeout: Optional[float] = None,
    currency: str = "ETH",
) -> List[AttemptResult]:
    """Launch attempts_per_wallet mints for every wallet at once and wait for all of them."""
    tasks = [
        _settle(chain, wallet, attempt, request, receipt_timeout, currency)
        for wallet in pool
        for attempt in range(1, attempts_per_wallet + 1)
    ]
    results = await asyncio.gather(*tasks)
    results = sorted(results, key=lambda r: (r.wallet_index, r.attempt))

    for r in results:
        if r.success:
            log.info(f"Success for wallet {r.address} (attempt {r.attempt}): {r.tx_hash}")
        else:
            log.warning(f"Failed for wallet {r.address} (attempt {r.attempt}): {r.tx_hash or '-'} {r.reason}")
    return results


def summarize(results: List[AttemptResult]) -> Dict[str, int]:
    summary = {"total": len(results), "confirmed": 0, "failed": 0, "rejected": 0}
    for r in results:
        if r.success:
            summary["confirmed"] += 1
        elif r.rejected:
            summary["rejected"] += 1
        else:
            summary["failed"] += 1
    return summary
