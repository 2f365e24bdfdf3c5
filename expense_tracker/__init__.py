"""
Expense Tracker - Source Package

A personal expense tracker core: account registration, password-digest
authentication, session gating and per-user expense records, all persisted
in a swappable key-value store.

DESIGN PRINCIPLES:
1. Storage layer is swappable (in-memory, JSON file, ...)
2. Expected failures are returned as values, never raised
3. Every expense query is scoped to its owner
4. Every step is auditable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
