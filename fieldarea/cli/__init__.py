"""
FieldArea CLI Package

Usage:
    fieldarea points add --lat 32.0853 --lng 34.7818
    fieldarea area
    fieldarea --user alice sessions save "North field"
"""

from fieldarea.cli.main import app

__all__ = ["app"]
