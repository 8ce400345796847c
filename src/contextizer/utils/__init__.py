"""
Shared utilities: logging setup and async helpers.
"""
