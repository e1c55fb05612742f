# -*- coding: utf-8 -*-
# Homotrack/algebra/__init__.py

"""
Project: Homotrack
Date: 9/18/2026

Modules:
--------
- letters: `Letter` (puncture_id, sign) and freely reduced `Word` with inverse,
           concatenation, cyclic reduction and exponent sums.
- reducer: Stack-based incremental free reduction (`WordReducer`, `reduce_letters`).
"""

__all__ = ["letters", "reducer"]
