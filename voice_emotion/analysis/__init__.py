"""Signal analysis layer.

Read-only helpers that turn a decoded clip into a spectrum snapshot,
the six emotion features and a loudness summary.
"""
