# src/fxhistory/__init__.py
"""
FXHistory - Downsampled Exchange Rate History Builder

Maintains a rolling archive of daily exchange-rate snapshots and compresses
it into a small set of per-period history files (week, month, 6 months,
year, 2 years, 5 years) that charts can render without downloading the
full daily archive.
"""

__version__ = "1.0.0"
__author__ = "Masih Sadri"
