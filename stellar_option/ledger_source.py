"""
ledger_source.py - Read access to the live ledger

The option engine needs two facts from the network before it can build
anything: the latest closed ledger (height and close time) and the seller's
current sequence number.

Classes:
- LedgerSource: Protocol defining the query interface
- StaticLedgerSource: Fixed snapshots, for offline use and tests
- HorizonLedgerSource: Queries a Horizon server through stellar_sdk.Server

Queries are attempted once. Nothing is cached between calls.
"""

from __future__ import annotations
from dataclasses import dataclass
from datetime import datetime, timezone
import logging
from typing import Dict, Optional, Protocol, runtime_checkable

import requests
from stellar_sdk import RequestsClient, Server
from stellar_sdk.exceptions import BaseHorizonError, BaseRequestError, NotFoundError

from .core import AccountNotFound, LedgerQueryError, PUBLIC_HORIZON_URL

logger = logging.getLogger(__name__)


@dataclass(frozen=True, slots=True)
class LedgerSnapshot:
    """
    The latest closed ledger.

    Attributes:
        height: Ledger sequence (height) of the ledger.
        close_time: Close time in UNIX seconds.
    """
    height: int
    close_time: int


@dataclass(frozen=True, slots=True)
class AccountSnapshot:
    """An account's id and its current sequence number."""
    account_id: str
    sequence: int


@runtime_checkable
class LedgerSource(Protocol):
    """
    Protocol for ledger queries.

    Implementations must provide latest_ledger() and load_account(). Both
    raise LedgerQueryError (or AccountNotFound) when the data cannot be read.
    """

    def latest_ledger(self) -> LedgerSnapshot:
        """Return the most recently closed ledger."""
        ...

    def load_account(self, account_id: str) -> AccountSnapshot:
        """Return the current state of an account."""
        ...


class StaticLedgerSource:
    """
    Ledger source with a fixed ledger snapshot and fixed account sequences.

    Useful for building option transactions offline.
    """

    def __init__(self, ledger: LedgerSnapshot, accounts: Optional[Dict[str, int]] = None):
        """
        Initialize with a ledger snapshot and an account map.

        Args:
            ledger: Snapshot returned by latest_ledger()
            accounts: Mapping of account id to current sequence number
        """
        self.ledger = ledger
        self.accounts = dict(accounts or {})

    def latest_ledger(self) -> LedgerSnapshot:
        return self.ledger

    def load_account(self, account_id: str) -> AccountSnapshot:
        if account_id not in self.accounts:
            raise AccountNotFound(f"account {account_id} not found")
        return AccountSnapshot(account_id, self.accounts[account_id])

    def set_account(self, account_id: str, sequence: int):
        """Add or update an account's sequence number."""
        self.accounts[account_id] = sequence

    def __repr__(self):
        return f"StaticLedgerSource(height={self.ledger.height}, {len(self.accounts)} accounts)"


def parse_close_time(closed_at: str) -> int:
    """Convert a Horizon `closed_at` ISO-8601 string to UNIX seconds."""
    text = closed_at.strip()
    if text.endswith('Z'):
        text = text[:-1] + '+00:00'
    parsed = datetime.fromisoformat(text)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return int(parsed.timestamp())


class HorizonLedgerSource:
    """
    Ledger source backed by a Horizon server, through stellar_sdk.Server.

    Each call issues exactly one HTTP GET: the underlying RequestsClient is
    configured without retries. Failures surface as LedgerQueryError so that
    the caller decides whether to retry.
    """

    def __init__(
        self,
        horizon_url: str = PUBLIC_HORIZON_URL,
        timeout: int = 20,
        session: Optional[requests.Session] = None,
    ):
        self.horizon_url = horizon_url.rstrip('/')
        self.timeout = timeout
        client = RequestsClient(num_retries=0, request_timeout=timeout, session=session)
        self.server = Server(horizon_url=self.horizon_url, client=client)

    def latest_ledger(self) -> LedgerSnapshot:
        try:
            body = self.server.ledgers().order(desc=True).limit(1).call()
        except BaseRequestError as exc:
            logger.error("Latest ledger query to %s failed: %s", self.horizon_url, _describe(exc))
            raise LedgerQueryError(f"latest ledger query failed: {_describe(exc)}") from exc
        except ValueError as exc:
            raise LedgerQueryError(f"Horizon returned invalid JSON: {exc}") from exc
        try:
            record = body['_embedded']['records'][0]
            return LedgerSnapshot(
                height=int(record['sequence']),
                close_time=parse_close_time(record['closed_at']),
            )
        except (KeyError, IndexError, TypeError, ValueError) as exc:
            raise LedgerQueryError(f"malformed ledger response: {exc!r}") from exc

    def load_account(self, account_id: str) -> AccountSnapshot:
        try:
            account = self.server.load_account(account_id)
        except NotFoundError as exc:
            raise AccountNotFound(f"account {account_id} not found") from exc
        except BaseRequestError as exc:
            logger.error("Account query for %s failed: %s", account_id, _describe(exc))
            raise LedgerQueryError(f"account query failed: {_describe(exc)}") from exc
        except (KeyError, TypeError, ValueError) as exc:
            raise LedgerQueryError(f"malformed account response: {exc!r}") from exc
        return AccountSnapshot(account_id=account.account.account_id, sequence=account.sequence)

    def close(self):
        self.server.close()

    def __repr__(self):
        return f"HorizonLedgerSource({self.horizon_url})"


def _describe(exc: BaseRequestError) -> str:
    if isinstance(exc, BaseHorizonError):
        return f"status {exc.status} {exc.message[:500]}"
    return str(exc)
