"""Checklist model, normalization and run filters."""
