"""
Shared utilities: logging setup, async helpers.
"""
