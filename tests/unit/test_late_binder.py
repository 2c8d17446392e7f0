"""Unit tests for the late-binding functions."""

import pytest

from memberaccess import late_binder
from memberaccess.exc import InvalidArgumentError, InvalidOperationError, MemberNotFoundError
from memberaccess.reflection.binding import Binding, DEFAULT_NON_PUBLIC
from memberaccess.reflection.member import FieldAccessor, PropertyAccessor


class Order:
    currency = 'USD'
    total: float = 0.0
    _notes: str = ''

    def __init__(self, customer: str = '', total: float = 0.0) -> None:
        self._customer = customer
        self.total = total
        self.lines = []

    @property
    def customer(self) -> str:
        return self._customer

    @customer.setter
    def customer(self, value: str) -> None:
        self._customer = value

    @property
    def summary(self) -> str:
        return f"{self._customer}: {self.total}"

    def add_line(self, sku: str, quantity: int) -> int:
        self.lines.append((sku, quantity))
        return len(self.lines)

    def describe(self, prefix) -> str:
        return f"{prefix}{self._customer}"

    @classmethod
    def empty(cls) -> 'Order':
        return cls()

    @staticmethod
    def tax_rate() -> float:
        return 0.2


class TestFind:
    def test_find_property(self, registry):
        member = late_binder.find(Order(), 'customer', registry=registry)
        assert isinstance(member, PropertyAccessor)

    def test_find_includes_non_public_fields(self, registry):
        member = late_binder.find(Order(), '_notes', registry=registry)
        assert isinstance(member, FieldAccessor)

    def test_find_on_class_includes_static(self, registry):
        assert late_binder.find(Order, 'currency', registry=registry) is not None
        assert late_binder.find(Order(), 'currency', registry=registry) is None

    def test_find_property_by_reference(self, registry):
        member = late_binder.find_property(Order, lambda o: o.customer, registry=registry)
        assert member.name == 'customer'

    def test_find_field(self, registry):
        assert late_binder.find_field(Order(), 'TOTAL', registry=registry).name == 'total'

    def test_find_method(self, registry):
        method = late_binder.find_method(Order(), 'add_line', [str, int], registry=registry)
        assert method.parameter_types == (str, int)

    def test_missing_returns_none(self, registry):
        assert late_binder.find(Order(), 'missing', registry=registry) is None

    def test_case_sensitive_registry(self, case_sensitive_registry):
        assert late_binder.find(Order(), 'CUSTOMER', registry=case_sensitive_registry) is None

    def test_target_required(self):
        with pytest.raises(InvalidArgumentError):
            late_binder.find(None, 'customer')

    @pytest.mark.parametrize("name", ['', None])
    def test_name_required(self, name):
        with pytest.raises(InvalidArgumentError):
            late_binder.find(Order(), name)


class TestGetSet:
    def test_get_property(self, registry):
        assert late_binder.get(Order('Acme'), 'customer', registry=registry) == 'Acme'
        assert late_binder.get_property(Order('Acme'), 'Customer', registry=registry) == 'Acme'

    def test_get_field(self, registry):
        assert late_binder.get_field(Order(total=3.5), 'total', registry=registry) == 3.5

    def test_get_static_from_class(self, registry):
        assert late_binder.get(Order, 'currency', registry=registry) == 'USD'

    def test_get_missing_raises(self, registry):
        with pytest.raises(MemberNotFoundError) as excinfo:
            late_binder.get(Order(), 'missing', registry=registry)
        assert str(excinfo.value) == (
            "Could not find a property or field with a name of 'missing' in type 'Order'."
        )
        assert excinfo.value.member_name == 'missing'
        assert excinfo.value.type_name == 'Order'

    def test_get_property_missing_names_kind(self, registry):
        with pytest.raises(MemberNotFoundError, match="Could not find property 'total' in type 'Order'."):
            late_binder.get_property(Order(), 'total', registry=registry)

    def test_get_field_respects_binding(self, registry):
        order = Order()
        with pytest.raises(MemberNotFoundError, match="field '_notes'"):
            late_binder.get_field(order, '_notes', registry=registry)
        assert late_binder.get_field(order, '_notes', DEFAULT_NON_PUBLIC, registry=registry) == ''

    def test_set(self, registry):
        order = Order()
        late_binder.set(order, 'customer', 'Acme', registry=registry)
        late_binder.set(order, 'total', 5, registry=registry)
        assert order.customer == 'Acme'
        assert order.total == 5.0
        assert isinstance(order.total, float)

    def test_set_property_and_field(self, registry):
        order = Order()
        late_binder.set_property(order, 'customer', 'Beta', registry=registry)
        late_binder.set_field(order, 'total', 1.5, registry=registry)
        assert (order.customer, order.total) == ('Beta', 1.5)

    def test_set_missing_raises(self, registry):
        order = Order()
        with pytest.raises(MemberNotFoundError):
            late_binder.set(order, 'missing', 1, registry=registry)
        assert not hasattr(order, 'missing')

    def test_set_read_only(self, registry):
        with pytest.raises(InvalidOperationError, match="does not have a setter"):
            late_binder.set(Order(), 'summary', 'x', registry=registry)

    def test_set_static_on_class(self, registry, monkeypatch):
        monkeypatch.setattr(Order, 'currency', 'USD')
        late_binder.set(Order, 'currency', 'EUR', Binding.PUBLIC, registry=registry)
        assert Order.currency == 'EUR'


class TestInvoke:
    def test_invoke_method(self, registry):
        order = Order()
        assert late_binder.invoke_method(order, 'add_line', 'widget', 2, registry=registry) == 1
        assert order.lines == [('widget', 2)]

    def test_none_argument(self, registry):
        assert late_binder.invoke_method(Order('Acme'), 'describe', None, registry=registry) == 'NoneAcme'

    def test_static_on_class(self, registry):
        assert late_binder.invoke_method(Order, 'tax_rate', registry=registry) == 0.2

    def test_classmethod_on_class(self, registry):
        assert isinstance(late_binder.invoke_method(Order, 'empty', registry=registry), Order)

    def test_instance_method_on_class_needs_instance(self, registry):
        with pytest.raises(InvalidArgumentError):
            late_binder.invoke_method(Order, 'add_line', 'widget', 1, registry=registry)

    def test_missing_method(self, registry):
        with pytest.raises(MemberNotFoundError, match="Could not find method 'ship' in type 'Order'."):
            late_binder.invoke_method(Order(), 'ship', registry=registry)


class TestCreateInstance:
    def test_parameterless(self, registry):
        order = late_binder.create_instance(Order, registry=registry)
        assert isinstance(order, Order)
        assert order.customer == ''

    def test_with_arguments(self, registry):
        order = late_binder.create_instance(Order, 'Acme', 3, registry=registry)
        assert order.customer == 'Acme'
        assert order.total == 3.0

    def test_requires_class(self):
        with pytest.raises(InvalidArgumentError):
            late_binder.create_instance(Order())

    def test_uses_default_registry(self):
        assert isinstance(late_binder.create_instance(Order), Order)
