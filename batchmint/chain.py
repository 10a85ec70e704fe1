# batchmint/chain.py
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from aiohttp import ClientTimeout
from eth_account.signers.local import LocalAccount
from web3 import AsyncWeb3, Web3
from web3.types import TxParams

from .config import Settings
from .util import batch_mint_abi


class ChainError(ConnectionError):
    """Raised when the RPC endpoint cannot be reached."""


@dataclass(frozen=True)
class NetworkInfo:
    chain_id: int
    name: str


@dataclass(frozen=True)
class FeeSuggestion:
    base_fee: int
    max_fee_per_gas: int
    max_priority_fee_per_gas: int
    gas_price: int


def get_w3(settings: Settings) -> AsyncWeb3:
    provider = AsyncWeb3.AsyncHTTPProvider(
        settings.rpc_url,
        request_kwargs={"timeout": ClientTimeout(total=settings.rpc_timeout)},
    )
    return AsyncWeb3(provider)


class ChainConnection:
    """Read and write access to one EVM network through an AsyncWeb3 client."""

    def __init__(self, settings: Settings, w3: Optional[AsyncWeb3] = None):
        self.settings = settings
        self.w3 = w3 if w3 is not None else get_w3(settings)
        self._contracts: Dict[str, Any] = {}

    async def connect(self) -> NetworkInfo:
        if not await self.w3.is_connected():
            raise ChainError(f"RPC not connected: {self.settings.rpc_url}")
        chain_id = int(await self.w3.eth.chain_id)
        name = self.settings.network_name if chain_id == self.settings.chain_id else "unknown"
        return NetworkInfo(chain_id=chain_id, name=name)

    async def get_balance(self, address: str) -> int:
        return int(await self.w3.eth.get_balance(address))

    async def get_block(self, tag: str = "latest"):
        return await self.w3.eth.get_block(tag)

    async def get_fee_data(self) -> Dict[str, Optional[int]]:
        """Node gas price plus the base fee of the latest block (None before London)."""
        gas_price = int(await self.w3.eth.gas_price)
        block = await self.get_block("latest")
        base_fee = block.get("baseFeePerGas")
        return {"gas_price": gas_price, "base_fee": None if base_fee is None else int(base_fee)}

    async def suggest_fees(self) -> Optional[FeeSuggestion]:
        """EIP-1559 fee caps scaled from the latest base fee.

        Returns None on chains whose blocks carry no base fee.
        """
        data = await self.get_fee_data()
        base_fee = data["base_fee"]
        if base_fee is None:
            return None
        max_fee = base_fee * int(self.settings.gas_multiplier * 100) // 100
        return FeeSuggestion(
            base_fee=base_fee,
            max_fee_per_gas=max_fee,
            max_priority_fee_per_gas=self.settings.priority_fee_wei,
            gas_price=data["gas_price"],
        )

    def contract(self, address: str):
        address = Web3.to_checksum_address(address)
        if address not in self._contracts:
            self._contracts[address] = self.w3.eth.contract(address=address, abi=batch_mint_abi())
        return self._contracts[address]

    async def quote_batch_mint(self, contract_address: str, mint_id: int, amount: int) -> Tuple[int, int]:
        c = self.contract(contract_address)
        total_cost, fee_amount = await c.functions.quoteBatchMint(int(mint_id), int(amount)).call()
        return int(total_cost), int(fee_amount)

    async def _tx_base(self, from_addr: str, value: int) -> TxParams:
        # gasPrice keeps the envelope legacy (type 0); price and nonce come from the node
        tx: TxParams = {
            "from": from_addr,
            "value": int(value),
            "nonce": await self.w3.eth.get_transaction_count(from_addr, "pending"),
            "gasPrice": await self.w3.eth.gas_price,
        }
        if self.settings.gas_limit:
            tx["gas"] = self.settings.gas_limit
        return tx

    async def send_batch_mint(
        self, account: LocalAccount, contract_address: str,
        amount: int, mint_id: int, value: int,
    ) -> str:
        c = self.contract(contract_address)
        tx = await self._tx_base(account.address, value)
        tx_data = await c.functions.batchMint(int(amount), int(mint_id)).build_transaction(tx)
        signed = account.sign_transaction(tx_data)
        txh = await self.w3.eth.send_raw_transaction(signed.raw_transaction)
        return Web3.to_hex(txh)

    async def wait_for_receipt(self, tx_hash: str, timeout: Optional[float] = None):
        return await self.w3.eth.wait_for_transaction_receipt(
            tx_hash, timeout=timeout or self.settings.receipt_timeout,
        )

    def explorer_link(self, tx_hash: str) -> str:
        return f"{self.settings.explorer_url}{tx_hash}"
