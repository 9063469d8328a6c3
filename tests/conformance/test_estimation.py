"""
Estimation Conformance Tests

INVARIANTS:

    minimum_balance is non-decreasing in base_reserve and base_fee,
    and strictly larger for a non-native underlying.

    estimate_lock_sequence(h, now, timeout, expiry)
        == (h + max(floor((timeout + expiry - now) / 10), 0)) << 32
"""

from decimal import Decimal

from hypothesis import given, settings
from hypothesis import strategies as st

from stellar_option import (
    NetworkParameters, estimate_lock_sequence, ledger_to_sequence_number,
    minimum_balance, sequence_number_to_ledger,
)


reserves = st.decimals(min_value=Decimal("0.0000001"), max_value=Decimal("100"), places=7)
fees = st.integers(min_value=1, max_value=10_000_000)


class TestReserveProperties:

    @given(reserves, reserves, fees, st.booleans())
    @settings(max_examples=100)
    def test_monotonic_in_base_reserve(self, r1, r2, fee, native):
        low, high = sorted((r1, r2))
        assert minimum_balance(native, NetworkParameters(base_reserve=low, base_fee=fee)) <= \
            minimum_balance(native, NetworkParameters(base_reserve=high, base_fee=fee))

    @given(reserves, fees, fees, st.booleans())
    @settings(max_examples=100)
    def test_monotonic_in_base_fee(self, reserve, f1, f2, native):
        low, high = sorted((f1, f2))
        assert minimum_balance(native, NetworkParameters(base_reserve=reserve, base_fee=low)) <= \
            minimum_balance(native, NetworkParameters(base_reserve=reserve, base_fee=high))

    @given(reserves, fees)
    @settings(max_examples=100)
    def test_credit_underlying_costs_more(self, reserve, fee):
        network = NetworkParameters(base_reserve=reserve, base_fee=fee)
        assert minimum_balance(False, network) > minimum_balance(True, network)


class TestSequenceProperties:

    @given(
        st.integers(min_value=1, max_value=2 ** 31),
        st.integers(min_value=0, max_value=2 ** 33),
        st.integers(min_value=0, max_value=86_400),
        st.integers(min_value=0, max_value=10 ** 9),
    )
    @settings(max_examples=200)
    def test_integer_formula(self, height, now, timeout, ahead):
        expiry = now + ahead
        sequence = estimate_lock_sequence(height, now, timeout, expiry)
        assert sequence == (height + (timeout + ahead) // 10) << 32
        assert sequence & 0xFFFFFFFF == 0

    @given(
        st.integers(min_value=1, max_value=2 ** 31),
        st.integers(min_value=0, max_value=2 ** 33),
        st.integers(min_value=0, max_value=86_400),
        st.integers(min_value=0, max_value=10 ** 9),
    )
    @settings(max_examples=100)
    def test_lock_ledger_between_setup_expiry_and_maturity(self, height, now, timeout, ahead):
        ledger = sequence_number_to_ledger(estimate_lock_sequence(height, now, timeout, now + ahead))
        setup_ledger = height + timeout / 5
        maturity_ledger = height + ahead / 5
        assert min(setup_ledger, maturity_ledger) - 1 <= ledger <= max(setup_ledger, maturity_ledger)

    @given(
        st.integers(min_value=0, max_value=2 ** 31),
        st.integers(min_value=0, max_value=2 ** 33),
        st.integers(min_value=0, max_value=86_400),
        st.integers(min_value=0, max_value=2 ** 33),
    )
    @settings(max_examples=100)
    def test_never_below_current_ledger(self, height, now, timeout, behind):
        sequence = estimate_lock_sequence(height, now, timeout, now - behind)
        assert sequence >= ledger_to_sequence_number(height)
