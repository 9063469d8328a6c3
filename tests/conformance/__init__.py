"""
Conformance Test Suite

These tests pin down the properties every option transaction set must have,
for any valid terms:

1. test_mutual_exclusion.py - exercise and refund can never both apply
2. test_estimation.py - reserve and lock sequence formulas

These tests use hypothesis for property-based testing.
"""
