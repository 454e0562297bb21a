"""Compliance verification engine: routing, dispatch, orchestration."""
