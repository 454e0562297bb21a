"""Site profiles and packaged presets."""
