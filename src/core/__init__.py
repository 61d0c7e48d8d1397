"""Shared configuration, errors, logging, and typed models.

This package holds the pieces every other benchdb package depends on.
"""
