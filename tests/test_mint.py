"""Quote-then-mint behaviour for a single attempt."""

import unittest

from batchmint.mint import (
    BroadcastError,
    MintRequest,
    MintStatus,
    QuoteError,
    quote_and_mint,
)
from batchmint.wallets import WalletPool

from fakes import FakeChain, make_key

CONTRACT = "0x2222222222222222222222222222222222222222"


class QuoteAndMintTests(unittest.IsolatedAsyncioTestCase):
    def setUp(self) -> None:
        self.wallet = WalletPool.from_keys([make_key(1)]).wallets[0]
        self.request = MintRequest(contract_address=CONTRACT, amount=1, mint_id=3)

    async def test_success_pays_quoted_total(self) -> None:
        chain = FakeChain(quote=(123456789, 1000))

        outcome = await quote_and_mint(chain, self.wallet, self.request)

        self.assertEqual(outcome.status, MintStatus.SUCCESS)
        self.assertTrue(outcome.success)
        self.assertEqual(outcome.tx_hash, chain.sent[0]["hash"])
        self.assertIsNotNone(outcome.block_number)
        self.assertEqual(outcome.total_cost, 123456789)

        sent = chain.sent[0]
        self.assertEqual(sent["value"], 123456789)
        self.assertEqual(sent["amount"], 1)
        self.assertEqual(sent["mint_id"], 3)
        self.assertEqual(sent["from"], self.wallet.address)
        self.assertEqual(sent["to"], CONTRACT)

    async def test_reverted_receipt_is_failed_not_raised(self) -> None:
        chain = FakeChain(receipt_status=0)

        outcome = await quote_and_mint(chain, self.wallet, self.request)

        self.assertEqual(outcome.status, MintStatus.FAILED)
        self.assertEqual(outcome.tx_hash, chain.sent[0]["hash"])
        self.assertIn("reverted", outcome.reason)

    async def test_receipt_error_is_failed_not_raised(self) -> None:
        chain = FakeChain(receipt_error=TimeoutError("not in chain after 120 seconds"))

        outcome = await quote_and_mint(chain, self.wallet, self.request)

        self.assertEqual(outcome.status, MintStatus.FAILED)
        self.assertEqual(outcome.tx_hash, chain.sent[0]["hash"])
        self.assertIsNone(outcome.block_number)
        self.assertIn("120 seconds", outcome.reason)

    async def test_quote_failure_raises(self) -> None:
        cause = ValueError("execution reverted: mint not active")
        chain = FakeChain(fail_quote=cause)

        with self.assertRaises(QuoteError) as ctx:
            await quote_and_mint(chain, self.wallet, self.request)

        self.assertIs(ctx.exception.__cause__, cause)
        self.assertEqual(chain.sent, [])

    async def test_broadcast_failure_raises(self) -> None:
        chain = FakeChain(fail_send_for={self.wallet.address})

        with self.assertRaises(BroadcastError):
            await quote_and_mint(chain, self.wallet, self.request)


class MintRequestTests(unittest.TestCase):
    def test_from_settings(self) -> None:
        from batchmint.config import load_settings

        settings = load_settings({"CONTRACT_ADDRESS": CONTRACT, "MINT_AMOUNT": "5", "MINT_ID": "9"})
        request = MintRequest.from_settings(settings)

        self.assertEqual(request.contract_address, CONTRACT)
        self.assertEqual(request.amount, 5)
        self.assertEqual(request.mint_id, 9)
        self.assertEqual(request.affiliate, settings.affiliate)


if __name__ == "__main__":
    unittest.main()
