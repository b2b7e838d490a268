"""State/store layer.

This package is the single source of truth for how incoming readings are
merged into the per-device location history.
"""
