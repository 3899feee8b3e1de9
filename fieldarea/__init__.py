"""
FieldArea

Record GPS points on foot, measure the enclosed area and keep named
measurement sessions in a per-user object store.
"""

__version__ = "0.1.0"
