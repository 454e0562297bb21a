"""Packaged site profile presets (YAML)."""
