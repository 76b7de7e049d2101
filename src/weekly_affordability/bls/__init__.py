"""
BLS (Bureau of Labor Statistics) package.
This module contains the client fetching wage data from the BLS public API.
"""

from .client import BLSClient

__all__ = ['BLSClient']
