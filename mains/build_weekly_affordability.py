#!/usr/bin/env python
"""
Weekly housing affordability series

Entry point fetching the BLS wage, FRED home price and FRED mortgage rate
series and writing the aligned weekly cost report.

Usage:
    python build_weekly_affordability.py -f FRED_KEY -b BLS_KEY [-s YYYY-MM-DD] [-m MODE] [-o OUTPUT]

Output: weekly_case_shiller_output.json
"""

import sys

from weekly_affordability.cli import main

if __name__ == "__main__":
    sys.exit(main())
