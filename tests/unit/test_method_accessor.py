"""Unit tests for MethodAccessor."""

from typing import Optional

import pytest

from memberaccess.exc import ArgumentCountError, InvalidArgumentError, InvalidCastError
from memberaccess.reflection import members
from memberaccess.reflection.binding import DEFAULT_METHOD
from memberaccess.reflection.method import MethodAccessor


class Calculator:
    def __init__(self) -> None:
        self.memory = 0

    def add(self, a: int, b: int) -> int:
        return a + b

    def scale(self, value: float, factor: float = 2.0) -> float:
        return value * factor

    def label(self, text: Optional[str]) -> str:
        return f"<{text}>"

    def store(self, value: int) -> None:
        self.memory = value

    def divide(self, a: int, b: int) -> float:
        return a / b

    @staticmethod
    def square(value: int) -> int:
        return value * value


def _accessor(name):
    [info] = members.get_methods(Calculator, DEFAULT_METHOD, name)
    return MethodAccessor(info)


class TestInvoke:
    def test_invoke(self):
        assert _accessor('add').invoke(Calculator(), 2, 3) == 5

    def test_argument_count_mismatch(self):
        with pytest.raises(InvalidArgumentError, match="Expected 2 parameters but got 1."):
            _accessor('add').invoke(Calculator(), 1)

    def test_argument_count_error_details(self):
        with pytest.raises(ArgumentCountError) as excinfo:
            _accessor('add').invoke(Calculator(), 1, 2, 3)
        assert excinfo.value.expected == '2'
        assert excinfo.value.actual == 3

    def test_optional_trailing_parameter(self):
        accessor = _accessor('scale')
        assert accessor.invoke(Calculator(), 3) == 6.0
        assert accessor.invoke(Calculator(), 3, 3) == 9.0

    def test_invalid_cast(self):
        with pytest.raises(InvalidCastError, match="Unable to cast object of type 'str' to type 'int'."):
            _accessor('add').invoke(Calculator(), 'a', 1)

    def test_optional_accepts_none(self):
        assert _accessor('label').invoke(Calculator(), None) == '<None>'

    def test_void_yields_none(self):
        calc = Calculator()
        assert _accessor('store').invoke(calc, 7) is None
        assert calc.memory == 7

    def test_method_exception_propagates_unchanged(self):
        with pytest.raises(ZeroDivisionError):
            _accessor('divide').invoke(Calculator(), 1, 0)

    def test_static_ignores_instance(self):
        accessor = _accessor('square')
        assert accessor.invoke(None, 4) == 16
        assert accessor.invoke(object(), 4) == 16

    def test_instance_method_requires_instance(self):
        with pytest.raises(InvalidArgumentError):
            _accessor('add').invoke(None, 1, 2)


class TestKey:
    def test_get_key(self):
        assert MethodAccessor.get_key('add', [int, int]) == ('add', (int, int))

    def test_get_key_is_deterministic(self):
        assert MethodAccessor.get_key('f', (str,)) == MethodAccessor.get_key('f', [str])
        assert MethodAccessor.get_key('f', (str,)) != MethodAccessor.get_key('f', (int,))

    def test_accessor_key(self):
        assert _accessor('add').key == ('add', (int, int))


class TestAttributes:
    def test_descriptor_attributes(self):
        accessor = _accessor('add')
        assert accessor.name == 'add'
        assert accessor.declaring_type is Calculator
        assert accessor.parameter_types == (int, int)
        assert accessor.return_type is int
        assert not accessor.is_static
        assert accessor.method_info.function is Calculator.__dict__['add']

    def test_static_flag(self):
        assert _accessor('square').is_static

    def test_equality(self):
        assert _accessor('add') == _accessor('add')
        assert hash(_accessor('add')) == hash(_accessor('add'))
        assert _accessor('add') != _accessor('divide')

    def test_repr(self):
        assert repr(_accessor('add')) == 'MethodAccessor(Calculator.add(int, int))'
