"""Relational storage layer.

This package owns the schema, transactions, and dictionary tables.
It also hosts the SDK client built on top of them.
"""
