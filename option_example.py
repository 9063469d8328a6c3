"""
option_example.py - Step-by-Step Stellar Option Example

Demonstrates building the three transactions of a European call option:
1. Setup: Create participants and the asset being optioned
2. Terms: Define underlying, premium, exercise price, expiry and delay
3. Build: Produce setup, exercise and refund against a ledger snapshot
4. Inspect: Show operations, time bounds and how the transactions are linked

The example runs offline against a StaticLedgerSource. To build against the
live test network, replace it with:

    HorizonLedgerSource(TESTNET_HORIZON_URL)

Run this file directly:
    python option_example.py
"""

import json
import logging
from datetime import datetime, timedelta, timezone

from stellar_option import (
    # Core
    Asset, AssetAmount, Keypair,

    # Envelope inspection
    is_unbounded, operation_source, operation_types, time_bounds_of,

    # Ledger queries
    LedgerSnapshot, StaticLedgerSource,

    # Option engine
    Option, OptionParams,
)


def describe(name, envelope):
    """Print a one-screen summary of a transaction envelope."""
    tx = envelope.transaction
    bounds = time_bounds_of(envelope)
    until = "forever" if is_unbounded(bounds) else bounds.max_time
    print(f"\n{name}: source={tx.source.account_id[:8]}... seq={tx.sequence} fee={tx.fee} "
          f"valid [{bounds.min_time}, {until}) signatures={len(envelope.signatures)}")
    print(f"   hash {envelope.hash_hex()}")
    for i, (op, op_type) in enumerate(zip(tx.operations, operation_types(envelope))):
        print(f"   [{i}] {op_type:<15} source={operation_source(op)[:8]}...")


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(name)s: %(message)s")

    # ------------------------------------------------------------------
    # 1. Participants
    # ------------------------------------------------------------------
    buyer = Keypair.random()
    seller = Keypair.random()
    issuer = Keypair.random()
    usd = Asset("USD", issuer.public_key)

    # ------------------------------------------------------------------
    # 2. Terms: the right to buy 100 USD for 200 XLM in 90 days
    # ------------------------------------------------------------------
    now = datetime.now(timezone.utc).replace(microsecond=0)
    params = OptionParams(
        underlying=AssetAmount(usd, 100),
        premium=AssetAmount.native(10),
        exercise=AssetAmount.native(200),
        expiry=now + timedelta(days=90),
        delay=timedelta(days=1),
    )
    option = Option(buyer.public_key, seller.public_key, params,
                    network={'network_passphrase': 'testnet'})

    # ------------------------------------------------------------------
    # 3. Build against a ledger snapshot
    # ------------------------------------------------------------------
    source = StaticLedgerSource(
        LedgerSnapshot(height=30_000_000, close_time=int(now.timestamp())),
        {seller.public_key: 12_884_901_888},
    )
    transactions = option.create_transactions(source)

    # ------------------------------------------------------------------
    # 4. Inspect
    # ------------------------------------------------------------------
    print(f"\nEscrow account:  {transactions.escrow_account_id}")
    print(f"Escrow sequence: {transactions.escrow_sequence}")
    describe("setup", transactions.setup)
    describe("exercise", transactions.exercise)
    describe("refund", transactions.refund)

    # Buyer and seller both sign setup; the buyer keeps exercise for later.
    # Envelopes are signed in place; the hash does not change.
    transactions.setup.sign(seller)
    transactions.setup.sign(buyer)
    transactions.exercise.sign(buyer)
    print(f"\nsetup now carries {len(transactions.setup.signatures)} signatures, "
          f"exercise {len(transactions.exercise.signatures)}, refund {len(transactions.refund.signatures)}")

    print("\nExported set:")
    print(json.dumps(transactions.to_dict(), indent=2)[:1200], "...")

    print("\nSetup envelope XDR, ready to submit once signed:")
    print(transactions.setup.to_xdr())


if __name__ == "__main__":
    main()
