"""
FPL Studio Package

A Fantasy Premier League (FPL) statistics toolkit. Fetches public league data
from the FPL API, derives ranking tables and gameweek-range aggregates, and
builds a starting XI under a budget with a greedy squad allocator.
"""

__version__ = "0.3.0"
