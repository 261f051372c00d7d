"""
Shopbook - Source Package

Bookkeeping for a small shop: products and stock, income and expense
transactions, and money owed to or by the shop.

DESIGN PRINCIPLES:
1. One record store, created at startup and passed around explicitly
2. Totals are derived on every read, never stored
3. Every change is written to local storage immediately
4. Unreadable stored data is quarantined, not discarded
5. Storage layer is swappable
"""

__version__ = "1.0.0"
