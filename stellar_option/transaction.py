"""
transaction.py - Transaction envelopes on top of stellar_sdk

Every transaction of an option is a stellar_sdk.TransactionEnvelope built
with TransactionBuilder, so its hash is the network's own hash: the value a
pre-authorized signer must carry for the network to accept the transaction
without any other signature.

Helpers:
- build_transaction: one envelope from a source, a sequence and operations
- pre_auth_signer: signer whitelisting exactly one envelope
- time_bounds_of / window_contains: validity windows
- operation_types / transaction_to_dict: inspection and export
"""

from __future__ import annotations
from typing import Any, Dict, Iterable, Optional, Tuple

from stellar_sdk import (
    Account, AccountMerge, BumpSequence, ChangeTrust, CreateAccount, Payment,
    SetOptions, Signer, TimeBounds, TransactionBuilder, TransactionEnvelope,
)
from stellar_sdk.operation import Operation

from .core import InvalidTransaction, MAX_SEQUENCE_NUMBER
from .keys import is_valid_account_id


MAX_OPERATIONS = 100

UNBOUNDED = TimeBounds(min_time=0, max_time=0)

OPERATION_NAMES = {
    CreateAccount: "create_account",
    BumpSequence: "bump_sequence",
    ChangeTrust: "change_trust",
    Payment: "payment",
    SetOptions: "set_options",
    AccountMerge: "account_merge",
}


# ============================================================================
# TIME BOUNDS
# ============================================================================

def is_unbounded(time_bounds: Optional[TimeBounds]) -> bool:
    """A max_time of 0 (or no time bounds at all) means the window never closes."""
    return time_bounds is None or time_bounds.max_time == 0


def window_contains(time_bounds: Optional[TimeBounds], timestamp: int) -> bool:
    """
    Whether `timestamp` falls in the window [min_time, max_time).

    Option windows are read half-open so that the exercise window
    [expiry, expiry + delay) ends exactly where the refund window starts.
    """
    if time_bounds is None:
        return True
    if timestamp < time_bounds.min_time:
        return False
    return is_unbounded(time_bounds) or timestamp < time_bounds.max_time


def time_bounds_of(envelope: TransactionEnvelope) -> Optional[TimeBounds]:
    preconditions = envelope.transaction.preconditions
    return preconditions.time_bounds if preconditions is not None else None


# ============================================================================
# ENVELOPES
# ============================================================================

def build_transaction(
    source: str,
    account_sequence: int,
    operations: Iterable[Operation],
    base_fee: int,
    network_passphrase: str,
    time_bounds: Optional[TimeBounds] = None,
) -> TransactionEnvelope:
    """
    Build an unsigned envelope consuming the next sequence number of `source`.

    Args:
        source: Transaction source account id
        account_sequence: Current sequence number of the source account
        operations: Operations in application order
        base_fee: Fee per operation, in stroops
        network_passphrase: Network the transaction is valid on
        time_bounds: Validity window (default: always valid)

    Returns:
        TransactionEnvelope with sequence account_sequence + 1 and fee
        base_fee * len(operations)

    Raises:
        InvalidTransaction: On a bad source, sequence, operation count or passphrase.
    """
    operations = tuple(operations)
    if not is_valid_account_id(source):
        raise InvalidTransaction(f"transaction source is not a valid account id: {source!r}")
    if not 0 <= account_sequence < MAX_SEQUENCE_NUMBER:
        raise InvalidTransaction(f"account sequence out of range: {account_sequence}")
    if not operations:
        raise InvalidTransaction("transaction must contain at least one operation")
    if len(operations) > MAX_OPERATIONS:
        raise InvalidTransaction(
            f"transaction has {len(operations)} operations, limit is {MAX_OPERATIONS}"
        )
    if not network_passphrase:
        raise InvalidTransaction("network_passphrase cannot be empty")

    bounds = time_bounds or UNBOUNDED
    builder = TransactionBuilder(
        source_account=Account(source, account_sequence),
        network_passphrase=network_passphrase,
        base_fee=base_fee,
    ).add_time_bounds(bounds.min_time, bounds.max_time)
    for operation in operations:
        builder.append_operation(operation)
    return builder.build()


def pre_auth_signer(envelope: TransactionEnvelope, weight: int = 1) -> Signer:
    """Return a signer that whitelists exactly this envelope."""
    return Signer.pre_auth_tx(envelope.hash(), weight)


def operation_source(operation: Operation) -> Optional[str]:
    return operation.source.account_id if operation.source is not None else None


def operation_types(envelope: TransactionEnvelope) -> Tuple[str, ...]:
    return tuple(
        OPERATION_NAMES.get(type(op), type(op).__name__)
        for op in envelope.transaction.operations
    )


def transaction_to_dict(envelope: TransactionEnvelope) -> Dict[str, Any]:
    """Summary of an envelope plus its base64 XDR, ready for JSON export."""
    tx = envelope.transaction
    bounds = time_bounds_of(envelope) or UNBOUNDED
    return {
        'source': tx.source.account_id,
        'sequence': str(tx.sequence),
        'fee': tx.fee,
        'time_bounds': {'min_time': bounds.min_time, 'max_time': bounds.max_time},
        'operations': list(operation_types(envelope)),
        'hash': envelope.hash_hex(),
        'signatures': len(envelope.signatures),
        'xdr': envelope.to_xdr(),
    }
