"""Stratify IT-asset inventory and portfolio-assessment core."""

__version__ = "1.0.0"
