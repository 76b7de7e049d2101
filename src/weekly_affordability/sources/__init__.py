"""
Ingestion of raw upstream responses.
Contains the parsers turning FRED and BLS payloads into observation lists.
"""

from .parsing import income_cutoff_date, parse_bls_income, parse_fred_observations

__all__ = ['income_cutoff_date', 'parse_bls_income', 'parse_fred_observations']
