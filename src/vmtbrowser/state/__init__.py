"""Selection/state layer.

This package is the single owner of the user's selection (theme, year,
municipality) and of the render projections derived from it.
"""
