"""memberaccess: fast, cached, name-based member access for Python classes.

Usage::

    from dataclasses import dataclass
    from typing import Annotated
    from memberaccess import type_accessor, late_binder, table, Key, Column

    @table('orders')
    @dataclass
    class Order:
        id: Annotated[int, Key()]
        customer: Annotated[str, Column('customer_name')]
        total: float = 0.0

        def add(self, amount: float) -> None:
            self.total += amount

    accessor = type_accessor(Order)
    order = accessor.create_with(1, 'Acme')

    customer = accessor.find('CUSTOMER')          # case-insensitive fallback
    customer.get_value(order)                      # 'Acme'
    customer.column                                # 'customer_name'

    accessor.find_method('add', (float,)).invoke(order, 5)
    late_binder.get(order, 'total')                # 5.0
"""

from .reflection.binding import (
    Binding, DEFAULT_PUBLIC, DEFAULT_NON_PUBLIC, DEFAULT_METHOD, DEFAULT_PROPERTIES,
)
from .reflection.members import (
    PropertyInfo, FieldInfo, MethodInfo, ConstructorInfo, ParameterInfo,
)
from .reflection.member import MemberAccessor, PropertyAccessor, FieldAccessor, ColumnMetadata
from .reflection.method import MethodAccessor
from .reflection.type_accessor import TypeAccessor
from .reflection.expressions import member_name_of
from .registry import (
    AccessorRegistry, RegistryOptions, default_registry, type_accessor, get_accessor,
)
from .metadata import (
    Table, Column, Key, NotMapped, ConcurrencyCheck,
    DatabaseGenerated, DatabaseGeneratedOption, ForeignKey, table,
)
from .text.formatter import format_name
from . import late_binder
from .exc import (
    AccessorError, InvalidArgumentError, ArgumentCountError,
    InvalidOperationError, MemberNotFoundError, InvalidCastError,
)

__version__ = "0.1.0"

__all__ = [
    # Core
    'TypeAccessor', 'MemberAccessor', 'PropertyAccessor', 'FieldAccessor',
    'MethodAccessor', 'ColumnMetadata',
    'AccessorRegistry', 'RegistryOptions', 'default_registry',
    'type_accessor', 'get_accessor', 'late_binder', 'format_name',
    'member_name_of',
    # Binding
    'Binding', 'DEFAULT_PUBLIC', 'DEFAULT_NON_PUBLIC', 'DEFAULT_METHOD', 'DEFAULT_PROPERTIES',
    # Descriptors
    'PropertyInfo', 'FieldInfo', 'MethodInfo', 'ConstructorInfo', 'ParameterInfo',
    # Metadata
    'Table', 'Column', 'Key', 'NotMapped', 'ConcurrencyCheck',
    'DatabaseGenerated', 'DatabaseGeneratedOption', 'ForeignKey', 'table',
    # Exceptions
    'AccessorError', 'InvalidArgumentError', 'ArgumentCountError',
    'InvalidOperationError', 'MemberNotFoundError', 'InvalidCastError',
]
