"""
Domain package for synthetic-export.

Exports the column and table models the export engine is built from.
"""

from synthexport.domain.models import Column, Table

__all__ = [
    "Column",
    "Table",
]
