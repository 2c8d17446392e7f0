"""Unit tests for the compiled-accessor factory."""

from dataclasses import dataclass
from typing import ClassVar

import pytest

from memberaccess.exc import (
    ArgumentCountError, InvalidArgumentError, InvalidCastError, InvalidOperationError,
)
from memberaccess.reflection import factory, members
from memberaccess.reflection.binding import Binding, DEFAULT_METHOD, DEFAULT_PUBLIC

STATIC = Binding.PUBLIC | Binding.STATIC


class Account:
    currency = 'EUR'
    RATE: ClassVar[float] = 1.5
    balance: float = 0.0

    def __init__(self, owner: str = '') -> None:
        self._owner = owner

    @property
    def owner(self) -> str:
        return self._owner

    @owner.setter
    def owner(self, value: str) -> None:
        self._owner = value

    @property
    def summary(self) -> str:
        return f"{self._owner}: {self.balance}"

    def deposit(self, amount: float) -> float:
        self.balance += amount
        return self.balance

    def transfer(self, amount: float, note: str = None) -> str:
        return f"{amount}:{note}"

    def total(self, *amounts: float) -> int:
        return len(amounts)

    def reset(self) -> None:
        self.balance = 0.0

    def fail(self) -> None:
        raise ZeroDivisionError("boom")

    @staticmethod
    def convert(amount: int, rate: float) -> float:
        return amount * rate

    @classmethod
    def kind(cls) -> str:
        return cls.__name__


class SavingsAccount(Account):
    pass


class Slotted:
    __slots__ = ('value',)

    def __init__(self, value: int = 0) -> None:
        self.value = value


@dataclass(frozen=True)
class Frozen:
    value: int = 0


class Unassigned:
    value: int
    hits: ClassVar[int]


class NeedsArgs:
    def __init__(self, name: str, size: int = 1) -> None:
        self.name = name
        self.size = size


def _property(cls, name):
    return members.find_property(cls, name, DEFAULT_PUBLIC)


def _field(cls, name, binding=DEFAULT_PUBLIC):
    return members.find_field(cls, name, binding)


def _method(cls, name):
    [info] = members.get_methods(cls, DEFAULT_METHOD, name)
    return info


class TestCreateGet:
    def test_property_getter(self):
        get = factory.create_get(_property(Account, 'owner'))
        assert get(Account('ann')) == 'ann'

    def test_property_getter_requires_instance(self):
        get = factory.create_get(_property(Account, 'owner'))
        with pytest.raises(InvalidArgumentError):
            get(None)

    def test_property_getter_rejects_wrong_instance_type(self):
        get = factory.create_get(_property(Account, 'owner'))
        with pytest.raises(InvalidCastError):
            get('not an account')

    def test_property_getter_accepts_subclass(self):
        get = factory.create_get(_property(Account, 'owner'))
        assert get(SavingsAccount('sue')) == 'sue'

    def test_instance_field_getter(self):
        account = Account()
        account.balance = 12.5
        assert factory.create_get(_field(Account, 'balance'))(account) == 12.5

    def test_instance_field_falls_back_to_class_default(self):
        assert factory.create_get(_field(Account, 'balance'))(Account()) == 0.0

    def test_static_field_ignores_instance(self):
        get = factory.create_get(_field(Account, 'currency', STATIC))
        assert get(None) == 'EUR'
        assert get('anything') == 'EUR'

    def test_slot_getter(self):
        assert factory.create_get(_field(Slotted, 'value'))(Slotted(7)) == 7

    def test_none_descriptor(self):
        with pytest.raises(InvalidArgumentError):
            factory.create_get(None)

    def test_unassigned_field(self):
        get = factory.create_get(_field(Unassigned, 'value'))
        with pytest.raises(InvalidOperationError, match="Field 'value' of 'Unassigned' has no value."):
            get(Unassigned())

    def test_unassigned_static_field(self):
        get = factory.create_get(_field(Unassigned, 'hits', STATIC))
        with pytest.raises(InvalidOperationError, match="Field 'hits'"):
            get(None)

    def test_unassigned_slot(self):
        get = factory.create_get(_field(Slotted, 'value'))
        with pytest.raises(InvalidOperationError, match="has no value"):
            get(Slotted.__new__(Slotted))


class TestCreateSet:
    def test_property_setter(self):
        account = Account('ann')
        factory.create_set(_property(Account, 'owner'))(account, 'bob')
        assert account.owner == 'bob'

    def test_read_only_property_has_no_setter(self):
        assert factory.create_set(_property(Account, 'summary')) is None

    def test_frozen_field_has_no_setter(self):
        assert factory.create_set(_field(Frozen, 'value')) is None

    def test_field_setter_widens(self):
        account = Account()
        factory.create_set(_field(Account, 'balance'))(account, 5)
        assert account.balance == 5.0
        assert type(account.balance) is float

    def test_field_setter_rejects_mismatch(self):
        with pytest.raises(InvalidCastError, match="Unable to cast object of type 'str' to type 'float'."):
            factory.create_set(_field(Account, 'balance'))(Account(), 'ten')

    def test_setter_without_widening(self):
        with pytest.raises(InvalidCastError):
            factory.create_set(_field(Account, 'balance'), widen=False)(Account(), 5)

    def test_setter_accepts_none(self):
        account = Account()
        factory.create_set(_field(Account, 'balance'))(account, None)
        assert account.balance is None

    def test_slot_setter(self):
        slotted = Slotted()
        factory.create_set(_field(Slotted, 'value'))(slotted, 3)
        assert slotted.value == 3

    def test_static_field_setter(self, monkeypatch):
        monkeypatch.setattr(Account, 'RATE', 1.5)
        factory.create_set(_field(Account, 'RATE', STATIC))(None, 2)
        assert Account.RATE == 2.0


class TestCreateMethod:
    def test_invoke(self):
        account = Account()
        invoke = factory.create_method(_method(Account, 'deposit'))
        assert invoke(account, (10,)) == 10.0

    def test_wrong_argument_count(self):
        invoke = factory.create_method(_method(Account, 'deposit'))
        with pytest.raises(ArgumentCountError, match="Expected 1 parameters but got 2."):
            invoke(Account(), (1, 2))

    def test_argument_count_with_defaults(self):
        invoke = factory.create_method(_method(Account, 'transfer'))
        assert invoke(Account(), (5.0,)) == '5.0:None'
        with pytest.raises(ArgumentCountError, match="Expected 1 to 2 parameters but got 0."):
            invoke(Account(), ())

    def test_var_positional(self):
        invoke = factory.create_method(_method(Account, 'total'))
        assert invoke(Account(), (1.0, 2.0, 3.0)) == 3
        assert invoke(Account(), ()) == 0

    def test_none_for_none_default(self):
        invoke = factory.create_method(_method(Account, 'transfer'))
        assert invoke(Account(), (1.0, None)) == '1.0:None'

    def test_void_returns_none(self):
        assert factory.create_method(_method(Account, 'reset'))(Account(), ()) is None

    def test_cast_failure(self):
        invoke = factory.create_method(_method(Account, 'deposit'))
        with pytest.raises(InvalidCastError):
            invoke(Account(), ('ten',))

    def test_body_exception_propagates(self):
        invoke = factory.create_method(_method(Account, 'fail'))
        with pytest.raises(ZeroDivisionError, match="boom"):
            invoke(Account(), ())

    def test_instance_required(self):
        invoke = factory.create_method(_method(Account, 'deposit'))
        with pytest.raises(InvalidArgumentError):
            invoke(None, (1.0,))

    def test_static_ignores_instance(self):
        invoke = factory.create_method(_method(Account, 'convert'))
        assert invoke(None, (2, 1.5)) == 3.0
        assert invoke('wrong type', (2, 1.5)) == 3.0

    def test_classmethod_binds_declaring_type(self):
        invoke = factory.create_method(_method(Account, 'kind'))
        assert invoke(None, ()) == 'Account'

    def test_classmethod_binds_instance_type(self):
        invoke = factory.create_method(_method(Account, 'kind'))
        assert invoke(SavingsAccount(), ()) == 'SavingsAccount'


class TestCreateConstructor:
    def test_parameterless(self):
        construct = factory.create_constructor(Account)
        assert isinstance(construct(), Account)

    def test_unavailable(self):
        assert factory.create_constructor(NeedsArgs) is None

    def test_parameterized(self):
        construct = factory.create_constructor_with(members.constructor_info(NeedsArgs))
        obj = construct(('box', 3))
        assert (obj.name, obj.size) == ('box', 3)

    def test_parameterized_count(self):
        construct = factory.create_constructor_with(members.constructor_info(NeedsArgs))
        with pytest.raises(ArgumentCountError, match="Constructor expected 1 to 2 parameters but got 0."):
            construct(())

    def test_parameterized_coerces(self):
        construct = factory.create_constructor_with(members.constructor_info(NeedsArgs))
        with pytest.raises(InvalidCastError):
            construct((1,))
