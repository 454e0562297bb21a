"""shopaudit — evidence-backed compliance checks for e-commerce websites."""

__version__ = "0.1.0"
