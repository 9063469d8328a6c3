"""
operations.py - Pure functions composing escrow operations

Each function returns a tuple of stellar_sdk operations. Callers concatenate
the tuples in the order the operations must be applied; nothing here mutates
a transaction builder in progress.
"""

from __future__ import annotations
from decimal import Decimal
from typing import Optional, Tuple

from stellar_sdk import (
    AccountMerge, BumpSequence, ChangeTrust, CreateAccount, Payment, SetOptions,
    TransactionEnvelope,
)
from stellar_sdk.operation import Operation

from .core import AssetAmount, format_amount
from .transaction import pre_auth_signer

Operations = Tuple[Operation, ...]


def create_account(
    source: str,
    destination: str,
    balance: Decimal,
    sequence_number: Optional[int] = None,
) -> Operations:
    """
    Create `destination` funded by `source`, optionally bumping its sequence.

    When sequence_number is given, the new account's sequence is moved to it
    immediately, so the next transaction it can execute is sequence_number + 1.
    """
    ops: Operations = (
        CreateAccount(destination=destination, starting_balance=format_amount(balance), source=source),
    )
    if sequence_number is not None:
        ops += (BumpSequence(bump_to=sequence_number, source=destination),)
    return ops


def add_trustline(source: str, amount: AssetAmount) -> Operations:
    """Trust the asset of `amount` up to its quantity; nothing for the native asset."""
    if amount.is_native():
        return ()
    return (ChangeTrust(asset=amount.asset, limit=format_amount(amount.amount), source=source),)


def remove_trustline(source: str, amount: AssetAmount) -> Operations:
    """Drop the trustline for the asset of `amount`; nothing for the native asset."""
    if amount.is_native():
        return ()
    return (ChangeTrust(asset=amount.asset, limit="0", source=source),)


def send_payment(sender: str, recipient: str, amount: AssetAmount) -> Operations:
    return (
        Payment(destination=recipient, asset=amount.asset,
                amount=format_amount(amount.amount), source=sender),
    )


def lock_escrow(
    escrow: str,
    exercise_tx: TransactionEnvelope,
    refund_tx: TransactionEnvelope,
) -> Operations:
    """
    Hand control of the escrow account to exactly two transactions.

    Adds the hashes of exercise_tx and refund_tx as weight-1 signers, then
    sets the master key weight to 0. After this the account can only ever
    execute one of those two transactions.
    """
    return (
        SetOptions(signer=pre_auth_signer(exercise_tx, weight=1), source=escrow),
        SetOptions(signer=pre_auth_signer(refund_tx, weight=1), source=escrow),
        SetOptions(master_weight=0, source=escrow),
    )


def merge_account(source: str, destination: str) -> Operations:
    return (AccountMerge(destination=destination, source=source),)
