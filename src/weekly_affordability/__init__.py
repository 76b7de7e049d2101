"""
Weekly housing affordability series.

This package aligns mixed-frequency economic data (monthly home prices,
weekly mortgage rates and monthly wages) onto the weekly mortgage-rate
release dates and derives cost-to-income affordability metrics, extending
the series past the last observed data with tagged estimates.
"""
