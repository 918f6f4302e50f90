"""
Core domain models, fixed-point math primitives, errors and contracts.

This module contains the foundational building blocks that are independent
of external collaborators (currencies, oracles, notification receivers).
"""
