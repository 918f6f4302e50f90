"""
Test suite for salekit

Contains:
- tests/unit/          : Unit tests for individual modules
- tests/fakes.py       : In-memory currencies, oracle and notification receivers
"""
