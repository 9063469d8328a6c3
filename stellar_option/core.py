"""
Core types and pure functions for the Stellar option generator.

This module provides the foundational data structures for the rest of the package:
1. Constants: network passphrases, stroop size, ledger timing
2. Exceptions: OptionError and domain-specific error types
3. Immutable data structures: AssetAmount (over stellar_sdk.Asset)
4. Helpers: Decimal coercion and normalisation, timestamp conversion

All functions in this module are pure.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from decimal import Context, Decimal, ROUND_HALF_EVEN, InvalidOperation
from typing import Union

from stellar_sdk import Asset, Network


# ============================================================================
# DECIMAL CONTEXT CONFIGURATION
# ============================================================================
#
# Amounts, reserves and fees are computed with Decimal arithmetic in this
# context. It is passed explicitly or entered with decimal.localcontext();
# the calling thread's current context is never modified.
#
DECIMAL_CONTEXT = Context(prec=50, rounding=ROUND_HALF_EVEN)


# ============================================================================
# CONSTANTS
# ============================================================================

PUBLIC_NETWORK_PASSPHRASE = Network.PUBLIC_NETWORK_PASSPHRASE
TESTNET_NETWORK_PASSPHRASE = Network.TESTNET_NETWORK_PASSPHRASE

NETWORK_ALIASES = {
    "public": PUBLIC_NETWORK_PASSPHRASE,
    "testnet": TESTNET_NETWORK_PASSPHRASE,
}

PUBLIC_HORIZON_URL = "https://horizon.stellar.org"
TESTNET_HORIZON_URL = "https://horizon-testnet.stellar.org"

# Smallest representable amount of any asset (one stroop).
STROOP = Decimal("0.0000001")
AMOUNT_DECIMAL_PLACES = 7

# Largest amount an asset balance can hold: (2^63 - 1) stroops.
MAX_AMOUNT = Decimal(2 ** 63 - 1) * STROOP

# Average number of seconds between two ledger closes.
AVERAGE_LEDGER_CLOSE_SECONDS = 5

# Sequence numbers carry the ledger height in their high 32 bits.
SEQUENCE_LEDGER_SHIFT = 32

MAX_SEQUENCE_NUMBER = 2 ** 63 - 1

NATIVE_ASSET_CODE = "XLM"


# ============================================================================
# EXCEPTIONS
# ============================================================================

class OptionError(Exception):
    """Base exception for all option-generator errors."""
    pass


class InvalidAmount(OptionError, ValueError):
    """Raised when an amount is negative, non-finite, too precise, or zero where it must be positive."""
    pass


class InvalidAsset(OptionError, ValueError):
    """Raised when an amount is attached to something that is not a stellar_sdk.Asset."""
    pass


class InvalidAccountId(OptionError, ValueError):
    """Raised when an account identifier is not a valid public StrKey."""
    pass


class InvalidOptionParams(OptionError, ValueError):
    """Raised when option terms are inconsistent (negative delay, buyer equals seller, ...)."""
    pass


class InvalidNetworkParameters(OptionError, ValueError):
    """Raised when a network parameter override is unknown or out of range."""
    pass


class InvalidTransaction(OptionError, ValueError):
    """Raised when a transaction cannot be assembled from its parts."""
    pass


class LedgerQueryError(OptionError):
    """Raised when the latest ledger or an account cannot be read from the network."""
    pass


class AccountNotFound(LedgerQueryError):
    """Raised when the requested account does not exist on the ledger."""
    pass


# ============================================================================
# HELPERS
# ============================================================================

Numeric = Union[Decimal, int, float, str]


def to_decimal(value: Numeric) -> Decimal:
    """
    Convert a numeric input to Decimal.

    Floats are converted through str() so that 0.1 becomes Decimal("0.1")
    rather than its binary expansion.

    Raises:
        InvalidAmount: If the value cannot be parsed or is not finite.
    """
    if isinstance(value, bool):
        raise InvalidAmount(f"amount must be numeric, got {value!r}")
    try:
        result = value if isinstance(value, Decimal) else Decimal(str(value))
    except (InvalidOperation, ValueError) as exc:
        raise InvalidAmount(f"amount must be numeric, got {value!r}") from exc
    if not result.is_finite():
        raise InvalidAmount(f"amount must be finite, got {value!r}")
    return result


def to_timestamp(value: Union[int, float, datetime]) -> int:
    """
    Convert a UNIX timestamp or datetime to integer seconds.

    Naive datetimes are interpreted as UTC. Fractional seconds are truncated.
    """
    if isinstance(value, datetime):
        if value.tzinfo is None:
            value = value.replace(tzinfo=timezone.utc)
        return int(value.timestamp())
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidOptionParams(f"timestamp must be a number or datetime, got {value!r}")
    return int(value)


def to_seconds(value: Union[int, float, timedelta]) -> int:
    """Convert a duration in seconds or a timedelta to integer seconds."""
    if isinstance(value, timedelta):
        return int(value.total_seconds())
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise InvalidOptionParams(f"duration must be a number or timedelta, got {value!r}")
    return int(value)


def format_amount(d: Decimal) -> str:
    """
    Normalize a Decimal to the amount string Stellar operations accept.

    Ensures that semantically equal values produce identical strings:
    - Decimal("1.0") and Decimal("1.00") both become "1"
    - Scientific notation is never produced
    """
    normalized = d.normalize(DECIMAL_CONTEXT)
    if normalized == normalized.to_integral_value():
        return str(int(normalized))
    return format(normalized, 'f')


# ============================================================================
# AMOUNTS
# ============================================================================

@dataclass(frozen=True, slots=True)
class AssetAmount:
    """
    A quantity of a specific asset.

    Attributes:
        asset: The stellar_sdk.Asset being quantified.
        amount: Non-negative Decimal with at most 7 decimal places.

    Numeric inputs (int, str, float) are converted to Decimal on construction.
    """
    asset: Asset
    amount: Decimal

    def __post_init__(self):
        if not isinstance(self.asset, Asset):
            raise InvalidAsset(f"asset must be a stellar_sdk.Asset, got {type(self.asset).__name__}")
        amount = to_decimal(self.amount)
        if amount < 0:
            raise InvalidAmount(f"amount must be non-negative, got {amount}")
        if amount > MAX_AMOUNT:
            raise InvalidAmount(f"amount exceeds the maximum representable balance, got {amount}")
        if amount != amount.quantize(STROOP, context=DECIMAL_CONTEXT):
            raise InvalidAmount(
                f"amount must have at most {AMOUNT_DECIMAL_PLACES} decimal places, got {amount}"
            )
        object.__setattr__(self, 'amount', amount)

    @classmethod
    def native(cls, amount: Numeric) -> 'AssetAmount':
        """Create an amount of the native asset."""
        return cls(Asset.native(), amount)

    def is_native(self) -> bool:
        return self.asset.is_native()

    def is_positive(self) -> bool:
        return self.amount > 0

    def to_dict(self) -> dict:
        return {'asset': self.asset.to_dict(), 'amount': format_amount(self.amount)}

    def __repr__(self) -> str:
        code = NATIVE_ASSET_CODE if self.asset.is_native() else self.asset.code
        return f"AssetAmount({format_amount(self.amount)} {code})"
