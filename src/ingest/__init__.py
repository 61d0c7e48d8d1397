"""Raw run ingestion and stage processing.

This package imports uploaded runs and derives typed tables from them.
"""
