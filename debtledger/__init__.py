"""
Debts With Friends - Source Package

A shared debt ledger ("plan") kept between two friends in a chat.

DESIGN PRINCIPLES:
1. One JSON document per ledger, always read and written whole
2. Normal rejections are quiet no-ops, lookups of unknown users fail loudly
3. One operation at a time per ledger
4. Every operation is auditable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Debts With Friends Team"
