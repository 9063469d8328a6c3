"""
keys.py - Account ids and pre-authorized transaction keys

Accounts and pre-authorized transaction signers are exchanged as StrKeys.
Encoding and checksums are handled by stellar_sdk.StrKey; this module adds
role-aware validation for the accounts taking part in an option.
"""

from __future__ import annotations

from stellar_sdk import Keypair, StrKey

from .core import InvalidAccountId

__all__ = ['Keypair', 'is_valid_account_id', 'validate_account_id', 'pre_auth_tx_signer_key']


def is_valid_account_id(account_id: str) -> bool:
    """True if account_id is a 'G...' ed25519 public key StrKey."""
    return isinstance(account_id, str) and StrKey.is_valid_ed25519_public_key(account_id)


def validate_account_id(account_id: str, role: str = "account") -> str:
    """
    Return account_id unchanged if it is a valid public StrKey.

    Raises:
        InvalidAccountId: Naming the role ("buyer", "seller", ...) of the bad id.
    """
    if not is_valid_account_id(account_id):
        raise InvalidAccountId(f"{role} is not a valid account id: {account_id!r}")
    return account_id


def pre_auth_tx_signer_key(tx_hash: bytes) -> str:
    """Return the 'T...' StrKey naming a pre-authorized transaction hash."""
    return StrKey.encode_pre_auth_tx(tx_hash)
