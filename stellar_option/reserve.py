"""
reserve.py - Minimum starting balance of an escrow account

The escrow account must be able to pay for its own existence, its signers,
an optional trustline, and the fees of whichever closing transaction ends up
being submitted.
"""

from __future__ import annotations
from decimal import Decimal, ROUND_UP, localcontext

from .config import NetworkParameters
from .core import DECIMAL_CONTEXT, STROOP

# Account entry (2 reserves) plus the two pre-authorized signers.
BASE_SUBENTRIES = 4

# Payment, trustline removal and merge: the operations executed on the escrow
# account's behalf by the closing transaction.
BASE_OPERATIONS = 3


def minimum_balance(underlying_is_native: bool, network: NetworkParameters) -> Decimal:
    """
    Compute the native balance the escrow account is created with.

    balance = base_reserve * (4 + extra) + STROOP * base_fee * (3 + extra)

    where extra is 1 when the underlying asset needs a trustline, else 0.
    This is a conservative floor, not the exact minimum.

    Args:
        underlying_is_native: Whether the escrowed asset is the native asset
        network: Network parameters supplying base_reserve and base_fee

    Returns:
        Starting balance, rounded up to whole stroops
    """
    extra = 0 if underlying_is_native else 1
    num_subentries = BASE_SUBENTRIES + extra
    num_operations = BASE_OPERATIONS + extra
    with localcontext(DECIMAL_CONTEXT):
        balance = (
            network.base_reserve * num_subentries
            + STROOP * network.base_fee * num_operations
        )
        return balance.quantize(STROOP, rounding=ROUND_UP)
