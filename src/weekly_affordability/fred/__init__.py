"""
FRED (Federal Reserve Economic Data) package.
This module contains the client fetching home price and mortgage rate observations from the FRED API.
"""

from .client import FREDClient

__all__ = ['FREDClient']
