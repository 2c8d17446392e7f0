"""Declarative mapping annotations consumed by the member accessors.

Usage::

    from typing import Annotated
    from memberaccess.metadata import table, Column, Key

    @table('orders')
    class Order:
        id: Annotated[int, Key()]
        customer: Annotated[str, Column('customer_name')]
"""

from __future__ import annotations

from .annotations import (
    Table, Column, Key, NotMapped, ConcurrencyCheck,
    DatabaseGenerated, DatabaseGeneratedOption, ForeignKey,
    table, is_annotation,
)
from .reader import find_annotation, has_annotation, read_table

__all__ = [
    'Table', 'Column', 'Key', 'NotMapped', 'ConcurrencyCheck',
    'DatabaseGenerated', 'DatabaseGeneratedOption', 'ForeignKey',
    'table', 'is_annotation',
    'find_annotation', 'has_annotation', 'read_table',
]
