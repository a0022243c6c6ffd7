"""
Top-level package for vc_daily_report.

This package exposes the main CLI entry point via the
``vc_daily_report.cli`` module.
"""

__all__ = ["__version__"]

__version__ = "0.1.0"
