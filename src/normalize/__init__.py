"""Post-processing passes over derived tables.

This package classifies GPUs, canonicalizes application names, links
model names to the model dictionary, and reports identity null-ness.
"""
