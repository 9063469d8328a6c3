"""
config.py - Network parameters

NetworkParameters is an explicit, immutable configuration value. It is
constructed once (from defaults, a partial override, or the environment) and
passed to every function that needs a fee, a reserve or a timeout.
"""

from __future__ import annotations
from dataclasses import dataclass, fields, replace
from decimal import Decimal
import os
from typing import Any, Mapping, Optional

from .core import (
    InvalidAmount, InvalidNetworkParameters,
    NETWORK_ALIASES, PUBLIC_HORIZON_URL, PUBLIC_NETWORK_PASSPHRASE,
    TESTNET_HORIZON_URL, TESTNET_NETWORK_PASSPHRASE,
    to_decimal,
)


ENV_PREFIX = "STELLAR_OPTION_"


def resolve_network(network: str) -> str:
    """Map the aliases "public" and "testnet" to their passphrases; pass anything else through."""
    return NETWORK_ALIASES.get(network.strip().lower(), network)


@dataclass(frozen=True, slots=True)
class NetworkParameters:
    """
    Fee, reserve and timeout settings for one network.

    Attributes:
        network_passphrase: Passphrase identifying the network.
        base_reserve: Native balance reserved per account subentry.
        base_fee: Fee per operation, in stroops.
        timeout: Seconds the setup transaction stays valid after it is built.
    """
    network_passphrase: str = PUBLIC_NETWORK_PASSPHRASE
    base_reserve: Decimal = Decimal("0.5")
    base_fee: int = 1000
    timeout: int = 1800

    def __post_init__(self):
        if not isinstance(self.network_passphrase, str) or not self.network_passphrase.strip():
            raise InvalidNetworkParameters("network_passphrase cannot be empty")
        object.__setattr__(self, 'network_passphrase', resolve_network(self.network_passphrase))
        try:
            base_reserve = to_decimal(self.base_reserve)
        except InvalidAmount as exc:
            raise InvalidNetworkParameters(f"base_reserve: {exc}") from exc
        if base_reserve <= 0:
            raise InvalidNetworkParameters(f"base_reserve must be positive, got {base_reserve}")
        object.__setattr__(self, 'base_reserve', base_reserve)
        base_fee = _as_int(self.base_fee, "base_fee")
        if base_fee <= 0:
            raise InvalidNetworkParameters(f"base_fee must be positive, got {base_fee}")
        object.__setattr__(self, 'base_fee', base_fee)
        timeout = _as_int(self.timeout, "timeout")
        if timeout < 0:
            raise InvalidNetworkParameters(f"timeout must be non-negative, got {timeout}")
        object.__setattr__(self, 'timeout', timeout)

    def with_overrides(self, overrides: Optional[Mapping[str, Any]] = None) -> 'NetworkParameters':
        """
        Return a copy with the given fields replaced.

        Unset fields keep their current value; the override wins per field.

        Raises:
            InvalidNetworkParameters: On unknown field names or invalid values.
        """
        if not overrides:
            return self
        known = {f.name for f in fields(self)}
        unknown = set(overrides) - known
        if unknown:
            raise InvalidNetworkParameters(f"unknown network parameters: {sorted(unknown)}")
        return replace(self, **{k: v for k, v in overrides.items() if v is not None})

    @property
    def is_testnet(self) -> bool:
        return self.network_passphrase == TESTNET_NETWORK_PASSPHRASE


def _as_int(value: Any, name: str) -> int:
    if isinstance(value, bool):
        raise InvalidNetworkParameters(f"{name} must be an integer, got {value!r}")
    try:
        result = int(value)
    except (TypeError, ValueError) as exc:
        raise InvalidNetworkParameters(f"{name} must be an integer, got {value!r}") from exc
    if result != value and not isinstance(value, str):
        raise InvalidNetworkParameters(f"{name} must be an integer, got {value!r}")
    return result


DEFAULT_NETWORK_PARAMETERS = NetworkParameters()


def network_parameters_from_env(
    environ: Optional[Mapping[str, str]] = None,
    defaults: NetworkParameters = DEFAULT_NETWORK_PARAMETERS,
) -> NetworkParameters:
    """
    Read network parameters from STELLAR_OPTION_* environment variables.

    Recognised variables: STELLAR_OPTION_NETWORK ("public", "testnet" or a
    passphrase), STELLAR_OPTION_BASE_RESERVE, STELLAR_OPTION_BASE_FEE and
    STELLAR_OPTION_TIMEOUT. Missing variables fall back to `defaults`.
    """
    env = os.environ if environ is None else environ
    overrides = {
        'network_passphrase': env.get(f"{ENV_PREFIX}NETWORK"),
        'base_reserve': env.get(f"{ENV_PREFIX}BASE_RESERVE"),
        'base_fee': env.get(f"{ENV_PREFIX}BASE_FEE"),
        'timeout': env.get(f"{ENV_PREFIX}TIMEOUT"),
    }
    return defaults.with_overrides({k: v for k, v in overrides.items() if v not in (None, "")})


def horizon_url_from_env(
    network: NetworkParameters,
    environ: Optional[Mapping[str, str]] = None,
) -> str:
    """Return STELLAR_OPTION_HORIZON_URL, or the public Horizon matching the network."""
    env = os.environ if environ is None else environ
    url = env.get(f"{ENV_PREFIX}HORIZON_URL", "").strip()
    if url:
        return url.rstrip('/')
    return TESTNET_HORIZON_URL if network.is_testnet else PUBLIC_HORIZON_URL
