"""
Report which platform applications were staged with a given buildpack.

The package resolves a buildpack, scans the application inventory through the
Cloud Controller v2 API and renders an org/space/application table.
"""

__version__ = "1.0.0"

__all__ = ["__version__"]
