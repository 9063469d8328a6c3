"""
option.py - European options as three linked transactions

An option between a buyer and a seller is expressed without any contract
execution layer. A single-use escrow account holds the underlying asset and
is locked so that it can only ever execute one of two pre-built
transactions:

    setup     creates the escrow account, moves the underlying into it,
              pays the seller the premium, and locks the account down.
              Needs to be signed by both buyer and seller.

    exercise  lets the buyer pay the strike price and take the underlying,
              valid from expiry until expiry + delay.
              Needs to be signed by the buyer.

    refund    returns the underlying to the seller, valid from
              expiry + delay onwards. Can be submitted as-is.

exercise and refund use the same sequence number on the escrow account, so
at most one of them can ever be applied.
"""

from __future__ import annotations
from dataclasses import dataclass, field
from decimal import Decimal
import logging
import time
from typing import Any, Callable, Dict, Mapping, Union

from stellar_sdk import Keypair, TimeBounds, TransactionEnvelope

from .config import DEFAULT_NETWORK_PARAMETERS, NetworkParameters
from .core import (
    AssetAmount, InvalidAmount, InvalidOptionParams,
    format_amount, to_seconds, to_timestamp,
)
from .keys import validate_account_id
from .ledger_source import LedgerSource
from .operations import (
    add_trustline, create_account, lock_escrow, merge_account,
    remove_trustline, send_payment,
)
from .reserve import minimum_balance
from .sequence import estimate_lock_sequence
from .transaction import UNBOUNDED, build_transaction, transaction_to_dict

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class OptionParams:
    """
    Terms of an option.

    Attributes:
        underlying: The asset (and amount) the buyer gets the right to buy.
        premium: The price the buyer pays the seller for that right.
        exercise: The price the buyer pays if the option is exercised.
        expiry: UNIX timestamp at which the option matures and can be exercised.
        delay: Seconds after expiry the seller has to wait before reclaiming
               the underlying of an option that was not exercised.

    expiry accepts a datetime (naive values are UTC) and delay a timedelta;
    both are stored as integer seconds.
    """
    underlying: AssetAmount
    premium: AssetAmount
    exercise: AssetAmount
    expiry: int
    delay: int = 0

    def __post_init__(self):
        for name in ('underlying', 'premium', 'exercise'):
            amount = getattr(self, name)
            if not isinstance(amount, AssetAmount):
                raise InvalidOptionParams(f"{name} must be an AssetAmount, got {type(amount).__name__}")
            if not amount.is_positive():
                raise InvalidAmount(f"{name} amount must be positive, got {amount.amount}")
        expiry = to_timestamp(self.expiry)
        if expiry < 0:
            raise InvalidOptionParams(f"expiry must be a non-negative timestamp, got {expiry}")
        object.__setattr__(self, 'expiry', expiry)
        delay = to_seconds(self.delay)
        if delay < 0:
            raise InvalidOptionParams(f"delay must be non-negative, got {delay}")
        object.__setattr__(self, 'delay', delay)

    @property
    def refund_time(self) -> int:
        """First moment the seller can reclaim the underlying."""
        return self.expiry + self.delay

    @property
    def exercise_window(self) -> TimeBounds:
        return TimeBounds(min_time=self.expiry, max_time=self.refund_time)

    @property
    def refund_window(self) -> TimeBounds:
        return TimeBounds(min_time=self.refund_time, max_time=0)


@dataclass(frozen=True, slots=True)
class OptionTransactionSet:
    """
    The three transactions of one option instance.

    Attributes:
        setup: Signed by the escrow key; still needs buyer and seller signatures.
        exercise: Unsigned; needs the buyer's signature.
        refund: Unsigned; authorised by its hash alone.
        escrow_account_id: Account created by setup.
        escrow_sequence: Sequence number setup bumps the escrow account to.
    """
    setup: TransactionEnvelope
    exercise: TransactionEnvelope
    refund: TransactionEnvelope
    escrow_account_id: str
    escrow_sequence: int

    def to_dict(self) -> Dict[str, Any]:
        return {
            'escrow_account_id': self.escrow_account_id,
            'escrow_sequence': str(self.escrow_sequence),
            'setup': transaction_to_dict(self.setup),
            'exercise': transaction_to_dict(self.exercise),
            'refund': transaction_to_dict(self.refund),
        }


NetworkOverrides = Union[NetworkParameters, Mapping[str, Any], None]


@dataclass(frozen=True, slots=True)
class Option:
    """
    A European option between `buyer` and `seller`.

    An Option is a pure descriptor. Every call to create_transactions()
    generates a new escrow account, so one Option can back any number of
    independent transaction sets.

    Attributes:
        buyer: Account id of the buyer (pays premium, holds the right).
        seller: Account id of the seller (writes the option, escrows the underlying).
        params: Terms of the option.
        network: Network parameters; a partial mapping is merged over the defaults.

    Example:
        option = Option(buyer, seller, OptionParams(
            underlying=AssetAmount(usd, 100),
            premium=AssetAmount.native(10),
            exercise=AssetAmount.native(200),
            expiry=datetime(2026, 12, 18),
            delay=timedelta(days=1),
        ), network={'network_passphrase': 'testnet'})
        transactions = option.create_transactions(HorizonLedgerSource(TESTNET_HORIZON_URL))
    """
    buyer: str
    seller: str
    params: OptionParams
    network: NetworkParameters = field(default=DEFAULT_NETWORK_PARAMETERS)

    def __post_init__(self):
        validate_account_id(self.buyer, "buyer")
        validate_account_id(self.seller, "seller")
        if self.buyer == self.seller:
            raise InvalidOptionParams("buyer and seller must be different accounts")
        if not isinstance(self.params, OptionParams):
            raise InvalidOptionParams(f"params must be OptionParams, got {type(self.params).__name__}")
        object.__setattr__(self, 'network', _merge_network(self.network))

    def create_transactions(
        self,
        source: LedgerSource,
        clock: Callable[[], float] = time.time,
        keypair_factory: Callable[[], Keypair] = Keypair.random,
    ) -> OptionTransactionSet:
        """
        Build the setup, exercise and refund transactions for a new escrow account.

        Reads the seller's account and the latest ledger from `source` exactly
        once each. Any query failure propagates; no partial set is returned.

        Args:
            source: Ledger query interface
            clock: Wall clock used for the setup transaction's time bounds
            keypair_factory: Generator of the escrow key pair

        Returns:
            OptionTransactionSet bound to a freshly generated escrow account
        """
        escrow_keys = keypair_factory()
        escrow = escrow_keys.public_key

        seller_account = source.load_account(self.seller)
        ledger = source.latest_ledger()

        escrow_sequence = estimate_lock_sequence(
            ledger.height, ledger.close_time, self.network.timeout, self.params.expiry,
        )
        balance = minimum_balance(self.params.underlying.asset.is_native(), self.network)
        logger.debug(
            "escrow %s: lock sequence %d, starting balance %s",
            escrow, escrow_sequence, format_amount(balance),
        )
        if self.params.expiry <= ledger.close_time + self.network.timeout:
            logger.warning(
                "expiry %d is not after the setup deadline %d; escrow sequence %d may be unusable",
                self.params.expiry, ledger.close_time + self.network.timeout, escrow_sequence,
            )

        refund_tx = build_refund_transaction(self, escrow, escrow_sequence)
        exercise_tx = build_exercise_transaction(self, escrow, escrow_sequence)
        setup_tx = build_setup_transaction(
            self, escrow, escrow_sequence, balance,
            seller_sequence=seller_account.sequence,
            exercise_tx=exercise_tx,
            refund_tx=refund_tx,
            now=clock(),
        )
        setup_tx.sign(escrow_keys)

        logger.info(
            "built option transactions: escrow=%s setup=%s exercise=%s refund=%s",
            escrow, setup_tx.hash_hex(), exercise_tx.hash_hex(), refund_tx.hash_hex(),
        )
        return OptionTransactionSet(
            setup=setup_tx,
            exercise=exercise_tx,
            refund=refund_tx,
            escrow_account_id=escrow,
            escrow_sequence=escrow_sequence,
        )


def _merge_network(network: NetworkOverrides) -> NetworkParameters:
    if network is None:
        return DEFAULT_NETWORK_PARAMETERS
    if isinstance(network, NetworkParameters):
        return network
    return DEFAULT_NETWORK_PARAMETERS.with_overrides(network)


def build_refund_transaction(option: Option, escrow: str, escrow_sequence: int) -> TransactionEnvelope:
    """
    Build the seller's reclaim transaction.

    Valid from expiry + delay with no upper bound. Operations: return the
    underlying to the seller, drop the trustline (non-native underlying),
    merge the escrow into the seller.
    """
    params = option.params
    operations = (
        send_payment(escrow, option.seller, params.underlying)
        + remove_trustline(escrow, params.underlying)
        + merge_account(escrow, option.seller)
    )
    return build_transaction(
        escrow, escrow_sequence, operations,
        base_fee=option.network.base_fee,
        network_passphrase=option.network.network_passphrase,
        time_bounds=params.refund_window,
    )


def build_exercise_transaction(option: Option, escrow: str, escrow_sequence: int) -> TransactionEnvelope:
    """
    Build the buyer's exercise transaction.

    Valid in [expiry, expiry + delay). Operations: buyer pays the exercise
    price to the seller, escrow pays the underlying to the buyer, drop the
    trustline (non-native underlying), merge the escrow into the seller.
    """
    params = option.params
    operations = (
        send_payment(option.buyer, option.seller, params.exercise)
        + send_payment(escrow, option.buyer, params.underlying)
        + remove_trustline(escrow, params.underlying)
        + merge_account(escrow, option.seller)
    )
    return build_transaction(
        escrow, escrow_sequence, operations,
        base_fee=option.network.base_fee,
        network_passphrase=option.network.network_passphrase,
        time_bounds=params.exercise_window,
    )


def build_setup_transaction(
    option: Option,
    escrow: str,
    escrow_sequence: int,
    balance: Decimal,
    seller_sequence: int,
    exercise_tx: TransactionEnvelope,
    refund_tx: TransactionEnvelope,
    now: float,
) -> TransactionEnvelope:
    """
    Build the unsigned setup transaction on the seller's account.

    Operations, in order: create and fund the escrow, bump its sequence to
    escrow_sequence, trust the underlying (non-native), escrow the underlying,
    pay the premium, whitelist exercise_tx and refund_tx, zero the master key.

    Valid until `timeout` seconds after `now` (no upper bound if timeout is 0).
    """
    params = option.params
    network = option.network
    operations = (
        create_account(option.seller, escrow, balance, escrow_sequence)
        + add_trustline(escrow, params.underlying)
        + send_payment(option.seller, escrow, params.underlying)
        + send_payment(option.buyer, option.seller, params.premium)
        + lock_escrow(escrow, exercise_tx, refund_tx)
    )
    if network.timeout:
        time_bounds = TimeBounds(min_time=0, max_time=int(now) + network.timeout)
    else:
        time_bounds = UNBOUNDED
    return build_transaction(
        option.seller, seller_sequence, operations,
        base_fee=network.base_fee,
        network_passphrase=network.network_passphrase,
        time_bounds=time_bounds,
    )
