"""
Stone Ledger - Source Package

Record-keeping for stone-breaking work: who broke how many kilograms,
and what they are owed at a fixed rate per kilogram.

DESIGN PRINCIPLES:
1. Payment is always derived, never typed in or imported
2. Fail early, fail visibly
3. A rejected change leaves the ledger untouched
4. Storage failures are surfaced, never swallowed
"""

__version__ = "1.0.0"
__author__ = "Stone Ledger Team"
