"""Pure field parsing and classification rules.

This package turns raw run text into typed values without storage access.
"""
