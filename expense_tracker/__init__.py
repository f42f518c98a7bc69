"""
Expense Tracker - Source Package

A small multi-user expense tracking service backed by flat JSON files.

DESIGN PRINCIPLES:
1. Every expense belongs to exactly one user
2. A user never sees or touches another user's records
3. Fail early, fail visibly
4. Every write is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
