# batchmint/mint.py
from dataclasses import dataclass
from enum import Enum
from typing import Optional

from .config import Settings, ZERO_ADDRESS
from .util import get_logger, short, fmt_amount
from .wallets import Wallet
log = get_logger()


class MintError(RuntimeError):
    """An attempt failed before its transaction reached the network."""


class QuoteError(MintError):
    pass


class BroadcastError(MintError):
    pass


class MintStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass(frozen=True)
class MintRequest:
    contract_address: str
    amount: int
    mint_id: int
    affiliate: str = ZERO_ADDRESS  # accepted by the API, never sent on-chain

    @classmethod
    def from_settings(cls, settings: Settings) -> "MintRequest":
        return cls(
            contract_address=settings.contract_address,
            amount=settings.mint_amount,
            mint_id=settings.mint_id,
            affiliate=settings.affiliate,
        )


@dataclass(frozen=True)
class MintOutcome:
    status: MintStatus
    tx_hash: Optional[str] = None
    block_number: Optional[int] = None
    reason: Optional[str] = None
    total_cost: Optional[int] = None

    @property
    def success(self) -> bool:
        return self.status is MintStatus.SUCCESS


async def quote_and_mint(
    chain, wallet: Wallet, request: MintRequest,
    receipt_timeout: Optional[float] = None, currency: str = "ETH",
) -> MintOutcome:
    """Quote the batch price, then send batchMint paying exactly that price.

    Raises QuoteError or BroadcastError when nothing reached the network.
    A transaction that was broadcast but reverted or never confirmed is
    reported as a failed MintOutcome carrying its hash.
    """
    owner = wallet.address
    try:
        total_cost, fee_amount = await chain.quote_batch_mint(
            request.contract_address, request.mint_id, request.amount,
        )
    except Exception as e:
        raise QuoteError(f"quoteBatchMint failed for {owner}: {e}") from e
    log.info(f"[{short(owner)}] total cost: {fmt_amount(total_cost)} {currency} (fee {fmt_amount(fee_amount)})")

    try:
        tx_hash = await chain.send_batch_mint(
            wallet.account, request.contract_address,
            request.amount, request.mint_id, total_cost,
        )
    except Exception as e:
        raise BroadcastError(f"batchMint broadcast failed for {owner}: {e}") from e

    log.info(f"[{short(owner)}] tx hash: {tx_hash}")
    log.info(f"[{short(owner)}] view on block scanner: {chain.explorer_link(tx_hash)}")

    try:
        receipt = await chain.wait_for_receipt(tx_hash, receipt_timeout)
    except Exception as e:
        log.error(f"Transaction failed for wallet {owner}: {e}")
        return MintOutcome(MintStatus.FAILED, tx_hash=tx_hash, reason=str(e) or type(e).__name__, total_cost=total_cost)

    block_number = receipt.get("blockNumber")
    if receipt.get("status") != 1:
        log.error(f"Transaction reverted for wallet {owner} in block {block_number}")
        return MintOutcome(
            MintStatus.FAILED, tx_hash=tx_hash, block_number=block_number,
            reason="transaction reverted", total_cost=total_cost,
        )

    log.info(f"Transaction confirmed for wallet {owner}! Block number: {block_number}")
    return MintOutcome(MintStatus.SUCCESS, tx_hash=tx_hash, block_number=block_number, total_cost=total_cost)
