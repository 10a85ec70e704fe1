# batchmint/wallets.py
import asyncio
import os
from dataclasses import dataclass
from typing import List, Mapping, NamedTuple, Optional

from eth_account import Account
from eth_account.signers.local import LocalAccount

from .config import ConfigError
from .util import get_logger, fmt_amount
log = get_logger()


class BalanceEntry(NamedTuple):
    address: str
    balance: int


@dataclass(frozen=True)
class Wallet:
    index: int
    account: LocalAccount

    @property
    def address(self) -> str:
        return self.account.address


def load_private_keys(environ: Optional[Mapping[str, str]] = None, prefix: str = "PRIVATE_KEY") -> List[str]:
    """Read PREFIX_1, PREFIX_2, ... until the first missing entry."""
    env = os.environ if environ is None else environ
    keys = []
    index = 1
    while True:
        pk = (env.get(f"{prefix}_{index}") or "").strip()
        if not pk:
            break
        keys.append(pk)
        index += 1
    return keys


class WalletPool:
    def __init__(self, wallets: List[Wallet]):
        self.wallets = list(wallets)

    def __len__(self) -> int:
        return len(self.wallets)

    def __iter__(self):
        return iter(self.wallets)

    @classmethod
    def from_keys(cls, private_keys: List[str]) -> "WalletPool":
        if not private_keys:
            raise ConfigError("No wallets loaded. Please check your .env file")
        wallets = []
        for i, pk in enumerate(private_keys):
            try:
                acct = Account.from_key(pk)
            except Exception as e:
                raise ConfigError(f"private key #{i + 1} is invalid: {e}") from e
            wallets.append(Wallet(index=i, account=acct))
        return cls(wallets)

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None, prefix: str = "PRIVATE_KEY") -> "WalletPool":
        pool = cls.from_keys(load_private_keys(environ, prefix))
        log.info(f"Loaded {len(pool)} wallets")
        return pool

    async def check_balances(self, chain, currency: str = "ETH") -> List[BalanceEntry]:
        balances = await asyncio.gather(*(chain.get_balance(w.address) for w in self.wallets))
        entries = [BalanceEntry(w.address, int(b)) for w, b in zip(self.wallets, balances)]
        log.info("Wallet balances:")
        for entry in entries:
            log.info(f"  {entry.address}: {fmt_amount(entry.balance)} {currency}")
        return entries
