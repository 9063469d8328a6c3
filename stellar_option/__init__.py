"""
stellar_option - European options on Stellar, built from plain transactions

An option is expressed as three linked transactions on a single-use escrow
account, with no contract execution layer: pre-authorized transaction
signers, a disabled master key, and time bounds do all the work.

Usage:
    from stellar_option import (
        Asset, AssetAmount, Option, OptionParams, HorizonLedgerSource,
        TESTNET_HORIZON_URL,
    )

    usd = Asset("USD", issuer_account_id)
    option = Option(buyer, seller, OptionParams(
        underlying=AssetAmount(usd, 100),
        premium=AssetAmount.native(10),
        exercise=AssetAmount.native(200),
        expiry=1767225600,
        delay=86400,
    ), network={'network_passphrase': 'testnet'})

    transactions = option.create_transactions(HorizonLedgerSource(TESTNET_HORIZON_URL))
    # transactions.setup    -> sign by buyer and seller, then submit
    # transactions.exercise -> sign by buyer, submit in [expiry, expiry + delay)
    # transactions.refund   -> submit as-is from expiry + delay onwards
"""

# Core types
from .core import (
    Asset,
    AssetAmount,
    OptionError,
    InvalidAmount,
    InvalidAsset,
    InvalidAccountId,
    InvalidOptionParams,
    InvalidNetworkParameters,
    InvalidTransaction,
    LedgerQueryError,
    AccountNotFound,
    PUBLIC_NETWORK_PASSPHRASE,
    TESTNET_NETWORK_PASSPHRASE,
    PUBLIC_HORIZON_URL,
    TESTNET_HORIZON_URL,
    AVERAGE_LEDGER_CLOSE_SECONDS,
    STROOP,
    DECIMAL_CONTEXT,
    format_amount,
)

# Keys
from .keys import (
    Keypair,
    is_valid_account_id,
    validate_account_id,
    pre_auth_tx_signer_key,
)

# Transactions
from stellar_sdk import TimeBounds, TransactionEnvelope
from .transaction import (
    UNBOUNDED,
    build_transaction,
    pre_auth_signer,
    time_bounds_of,
    window_contains,
    is_unbounded,
    operation_source,
    operation_types,
    transaction_to_dict,
)

# Configuration
from .config import (
    NetworkParameters,
    DEFAULT_NETWORK_PARAMETERS,
    network_parameters_from_env,
    horizon_url_from_env,
)

# Ledger queries
from .ledger_source import (
    LedgerSource,
    LedgerSnapshot,
    AccountSnapshot,
    StaticLedgerSource,
    HorizonLedgerSource,
)

# Estimation
from .reserve import minimum_balance
from .sequence import (
    estimate_lock_sequence,
    estimate_lock_ledger,
    ledger_to_sequence_number,
    sequence_number_to_ledger,
)

# Option engine
from .option import (
    Option,
    OptionParams,
    OptionTransactionSet,
    build_setup_transaction,
    build_exercise_transaction,
    build_refund_transaction,
)
