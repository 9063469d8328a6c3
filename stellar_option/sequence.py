"""
sequence.py - Escrow lock sequence estimation

The escrow account does not exist when its exercise and refund transactions
are built, so their sequence number has to be predicted.

    now:                            (timestamp = x, ledger = a)
    expiry of setup transaction:    (timestamp = y, ledger = b)
    option maturity:                (timestamp = z, ledger = c)

b and c are unknown, but approximately:

    b ~= a + (y - x) / 5
    c ~= a + (z - x) / 5

A freshly created account starts at sequence (creation ledger << 32), which
lies somewhere between a and b. The escrow must still be mergeable at c, so
it is bumped to the midpoint between b and c.

When the option matured long ago the midpoint lies behind the current
ledger. The estimate is then clamped to a: the transactions built on it
are well-formed, but the escrow sequence will most likely not match.
"""

from __future__ import annotations
from decimal import Decimal, ROUND_FLOOR, localcontext
from typing import Optional, Union

from .core import AVERAGE_LEDGER_CLOSE_SECONDS, DECIMAL_CONTEXT, SEQUENCE_LEDGER_SHIFT

Timestamp = Union[int, float, Decimal]


def ledger_to_sequence_number(ledger: int) -> int:
    """Return the first sequence number of an account created in `ledger`."""
    return int(ledger) << SEQUENCE_LEDGER_SHIFT


def sequence_number_to_ledger(sequence: int) -> int:
    """Return the ledger height encoded in the high 32 bits of a sequence number."""
    return int(sequence) >> SEQUENCE_LEDGER_SHIFT


def estimate_lock_ledger(
    ledger_height: int,
    now: Timestamp,
    submit_timeout: int,
    expiry: Timestamp,
) -> int:
    """
    Estimate the ledger height halfway between setup expiry and option maturity.

    offset = floor((submit_timeout + (expiry - now)) / (2 * AVERAGE_LEDGER_CLOSE_SECONDS))

    A negative offset (expiry already far behind `now`) is clamped to 0, so
    the estimate never falls below the current ledger.

    The arithmetic is done in Decimal so that fractional close times never
    round through binary floating point.
    """
    with localcontext(DECIMAL_CONTEXT):
        window = Decimal(str(submit_timeout)) + (Decimal(str(expiry)) - Decimal(str(now)))
        offset = (window / (2 * AVERAGE_LEDGER_CLOSE_SECONDS)).to_integral_value(rounding=ROUND_FLOOR)
    return int(ledger_height) + max(int(offset), 0)


def estimate_lock_sequence(
    ledger_height: int,
    close_time: Timestamp,
    submit_timeout: int,
    expiry: Timestamp,
    now: Optional[Timestamp] = None,
) -> int:
    """
    Predict the sequence number to bump the escrow account to.

    Args:
        ledger_height: Height of the latest closed ledger
        close_time: Close time of that ledger, in UNIX seconds
        submit_timeout: Seconds the setup transaction may wait before submission
        expiry: Option maturity, in UNIX seconds
        now: Reference time for the estimate (default: close_time)

    Returns:
        (estimated ledger height) << 32, as an exact integer

    Example:
        >>> estimate_lock_sequence(100, 1000, 1800, 1300)
        1331439861760
    """
    reference = close_time if now is None else now
    return ledger_to_sequence_number(
        estimate_lock_ledger(ledger_height, reference, submit_timeout, expiry)
    )
