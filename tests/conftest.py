"""
conftest.py - Shared pytest fixtures for option tests

Provides:
- Fresh participant accounts (buyer, seller, issuer)
- Native and credit underlying assets
- Ready-made option terms and options
- Ledger sources pinned to a known ledger
"""

import pytest
from decimal import Decimal

from stellar_option import (
    Asset, AssetAmount, Keypair, LedgerSnapshot,
    NetworkParameters, Option, OptionParams, StaticLedgerSource,
    TESTNET_NETWORK_PASSPHRASE,
)

from tests.fake_source import RecordingLedgerSource


# =============================================================================
# CONSTANTS
# =============================================================================

LEDGER_HEIGHT = 100
LEDGER_CLOSE_TIME = 1_000
EXPIRY = 10_000
DELAY = 3_600
NOW = 1_005
SELLER_SEQUENCE = 123 << 32


# =============================================================================
# ACCOUNTS AND ASSETS
# =============================================================================

@pytest.fixture
def buyer() -> str:
    return Keypair.random().public_key


@pytest.fixture
def seller() -> str:
    return Keypair.random().public_key


@pytest.fixture
def issuer() -> str:
    return Keypair.random().public_key


@pytest.fixture
def usd(issuer) -> Asset:
    return Asset("USD", issuer)


@pytest.fixture
def testnet() -> NetworkParameters:
    return NetworkParameters(network_passphrase=TESTNET_NETWORK_PASSPHRASE)


# =============================================================================
# OPTION TERMS
# =============================================================================

def make_params(underlying: AssetAmount, expiry: int = EXPIRY, delay: int = DELAY) -> OptionParams:
    """Option terms with native premium 10 and native exercise price 200."""
    return OptionParams(
        underlying=underlying,
        premium=AssetAmount.native(10),
        exercise=AssetAmount.native(200),
        expiry=expiry,
        delay=delay,
    )


@pytest.fixture
def native_params() -> OptionParams:
    return make_params(AssetAmount.native(1))


@pytest.fixture
def credit_params(usd) -> OptionParams:
    return make_params(AssetAmount(usd, Decimal("100")))


@pytest.fixture
def native_option(buyer, seller, native_params) -> Option:
    return Option(buyer, seller, native_params)


@pytest.fixture
def credit_option(buyer, seller, credit_params) -> Option:
    return Option(buyer, seller, credit_params)


# =============================================================================
# LEDGER SOURCES
# =============================================================================

@pytest.fixture
def ledger_snapshot() -> LedgerSnapshot:
    return LedgerSnapshot(height=LEDGER_HEIGHT, close_time=LEDGER_CLOSE_TIME)


@pytest.fixture
def ledger_source(ledger_snapshot, seller) -> StaticLedgerSource:
    return StaticLedgerSource(ledger_snapshot, {seller: SELLER_SEQUENCE})


@pytest.fixture
def recording_source(ledger_snapshot, seller) -> RecordingLedgerSource:
    return RecordingLedgerSource(ledger_snapshot, {seller: SELLER_SEQUENCE})


@pytest.fixture
def clock():
    """Wall clock frozen at NOW."""
    return lambda: NOW
