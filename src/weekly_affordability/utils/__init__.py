"""
Utility functions for the weekly affordability pipeline.

This package contains configuration management, data validation and
other helpers supporting the alignment engine.
"""
