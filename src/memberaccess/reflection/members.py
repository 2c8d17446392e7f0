"""Member descriptors and the scanner that discovers them on a class.

A class is treated as a type descriptor.  The scanner walks ``cls.__mro__``
(skipping builtins) and classifies what each class declares:

- ``property`` objects become :class:`PropertyInfo`;
- annotated attributes, ``__slots__`` entries and plain class-level data
  become :class:`FieldInfo`;
- functions, ``staticmethod``, ``classmethod`` and every registered
  implementation of a ``functools.singledispatchmethod`` become
  :class:`MethodInfo`.

A name declared on a subclass hides the same name further up the MRO.
"""

from __future__ import annotations

import dataclasses
import functools
import inspect
from typing import Any, Annotated, ClassVar, Final, Iterator, get_args, get_origin, get_type_hints

from .binding import Binding, matches

_NON_METHODS = frozenset({
    '__init__', '__new__', '__init_subclass__', '__class_getitem__',
    '__subclasshook__', '__annotate__', '__annotate_func__',
})
_SKIPPED_MODULES = frozenset({'builtins', 'typing', 'abc'})


def _is_dunder(name: str) -> bool:
    return (name.startswith('__') and name.endswith('__')) or name.startswith('_abc_')


def _is_slot(value: Any) -> bool:
    return inspect.ismemberdescriptor(value)


# ── Descriptors ────────────────────────────────────────────────────

@dataclasses.dataclass(frozen=True, slots=True)
class ParameterInfo:
    """One positional parameter of a method or constructor."""
    name: str
    position: int
    annotation: Any = object
    has_default: bool = False
    default: Any = None


@dataclasses.dataclass(frozen=True, slots=True)
class PropertyInfo:
    """A ``property`` declared on a class."""
    declaring_type: type
    name: str
    descriptor: property = dataclasses.field(compare=False, repr=False)
    member_type: Any = dataclasses.field(default=object, compare=False)
    metadata: tuple[Any, ...] = dataclasses.field(default=(), compare=False, repr=False)

    @property
    def can_read(self) -> bool:
        return self.descriptor.fget is not None

    @property
    def can_write(self) -> bool:
        return self.descriptor.fset is not None

    @property
    def is_static(self) -> bool:
        return False


@dataclasses.dataclass(frozen=True, slots=True)
class FieldInfo:
    """A storage member: annotated attribute, slot, or class-level value."""
    declaring_type: type
    name: str
    is_static: bool = False
    member_type: Any = dataclasses.field(default=object, compare=False)
    read_only: bool = dataclasses.field(default=False, compare=False)
    slot: Any = dataclasses.field(default=None, compare=False, repr=False)
    metadata: tuple[Any, ...] = dataclasses.field(default=(), compare=False, repr=False)

    @property
    def can_read(self) -> bool:
        return True

    @property
    def can_write(self) -> bool:
        return not self.read_only


@dataclasses.dataclass(frozen=True, slots=True)
class MethodInfo:
    """A callable member.  Each overload is a separate descriptor."""
    declaring_type: type
    name: str
    parameter_types: tuple[Any, ...]
    function: Any = dataclasses.field(compare=False, repr=False)
    is_static: bool = dataclasses.field(default=False, compare=False)
    binds_class: bool = dataclasses.field(default=False, compare=False)
    parameters: tuple[ParameterInfo, ...] = dataclasses.field(default=(), compare=False, repr=False)
    var_positional: bool = dataclasses.field(default=False, compare=False)
    return_type: Any = dataclasses.field(default=object, compare=False)

    @property
    def required_count(self) -> int:
        return sum(1 for p in self.parameters if not p.has_default)

    @property
    def max_count(self) -> int | None:
        """Upper bound on positional arguments, None when ``*args`` is accepted."""
        return None if self.var_positional else len(self.parameters)


@dataclasses.dataclass(frozen=True, slots=True)
class ConstructorInfo:
    """The construction signature of a class."""
    declaring_type: type
    parameters: tuple[ParameterInfo, ...] = ()
    var_positional: bool = False
    is_abstract: bool = False
    required_keywords: tuple[str, ...] = ()

    @property
    def required_count(self) -> int:
        return sum(1 for p in self.parameters if not p.has_default)

    @property
    def max_count(self) -> int | None:
        return None if self.var_positional else len(self.parameters)

    @property
    def is_parameterless(self) -> bool:
        return not self.is_abstract and self.required_count == 0 and not self.required_keywords


MemberInfo = PropertyInfo | FieldInfo


# ── Annotation helpers ─────────────────────────────────────────────

def unwrap_annotation(annotation: Any) -> tuple[Any, tuple[Any, ...], bool, bool]:
    """Split an annotation into ``(type, metadata, is_classvar, is_final)``.

    Peels ``Annotated``, ``ClassVar`` and ``Final`` wrappers in any order,
    collecting ``Annotated`` extras into *metadata*.
    """
    metadata: tuple[Any, ...] = ()
    is_classvar = False
    is_final = False
    while True:
        origin = get_origin(annotation)
        if origin is Annotated:
            args = get_args(annotation)
            annotation = args[0]
            metadata += tuple(args[1:])
        elif annotation is ClassVar or origin is ClassVar:
            is_classvar = True
            args = get_args(annotation)
            annotation = args[0] if args else Any
        elif annotation is Final or origin is Final:
            is_final = True
            args = get_args(annotation)
            annotation = args[0] if args else Any
        else:
            break

    # Unresolvable string annotations still tell us about ClassVar / Final
    if isinstance(annotation, str):
        text = annotation.replace('typing.', '')
        if text.startswith('ClassVar'):
            is_classvar = True
        elif text.startswith('Final'):
            is_final = True

    return annotation, metadata, is_classvar, is_final


def _own_hints(klass: type) -> dict[str, Any]:
    """Annotations declared directly on *klass*, resolved where possible."""
    own = inspect.get_annotations(klass)
    if not own:
        return {}
    try:
        resolved = get_type_hints(klass, include_extras=True)
    except Exception:
        return dict(own)
    return {name: resolved.get(name, raw) for name, raw in own.items()}


def _callable_hints(func: Any) -> dict[str, Any]:
    try:
        return get_type_hints(func, include_extras=True)
    except Exception:
        return dict(getattr(func, '__annotations__', None) or {})


def _own_slots(klass: type) -> tuple[str, ...]:
    slots = klass.__dict__.get('__slots__', ())
    if isinstance(slots, str):
        return (slots,)
    return tuple(slots)


def _is_frozen_dataclass(klass: type) -> bool:
    params = klass.__dict__.get('__dataclass_params__')
    return bool(params is not None and params.frozen)


def _is_namedtuple(klass: type) -> bool:
    return issubclass(klass, tuple) and '_fields' in klass.__dict__


def _is_method_like(value: Any) -> bool:
    return (
        inspect.isfunction(value)
        or isinstance(value, (staticmethod, classmethod, functools.singledispatchmethod))
    )


def hierarchy(cls: type, declared_only: bool = False) -> Iterator[type]:
    """Yield the classes whose members *cls* exposes, most-derived first."""
    if declared_only:
        yield cls
        return
    for klass in cls.__mro__:
        if klass.__module__ in _SKIPPED_MODULES:
            continue
        yield klass


# ── Properties and fields ──────────────────────────────────────────

def _property_info(klass: type, name: str, prop: property) -> PropertyInfo:
    member_type: Any = object
    metadata: tuple[Any, ...] = ()
    if prop.fget is not None:
        ret = _callable_hints(prop.fget).get('return', inspect.Parameter.empty)
        if ret is not inspect.Parameter.empty:
            member_type, metadata, _, _ = unwrap_annotation(ret)
    if member_type is object and prop.fset is not None:
        hints = _callable_hints(prop.fset)
        params = [h for key, h in hints.items() if key != 'return']
        if params:
            member_type, extra, _, _ = unwrap_annotation(params[-1])
            metadata = metadata or extra
    return PropertyInfo(
        declaring_type=klass,
        name=name,
        descriptor=prop,
        member_type=member_type,
        metadata=metadata,
    )


def declared_members(klass: type) -> list[PropertyInfo | FieldInfo]:
    """Properties and fields declared directly on *klass*, in declaration order."""
    namespace = klass.__dict__
    hints = _own_hints(klass)
    slots = _own_slots(klass)
    frozen = _is_frozen_dataclass(klass) or _is_namedtuple(klass)

    result: list[PropertyInfo | FieldInfo] = []
    seen: set[str] = set()

    for name, annotation in hints.items():
        if _is_dunder(name):
            continue
        value = namespace.get(name)
        if isinstance(value, property):
            continue
        if isinstance(annotation, dataclasses.InitVar) or annotation is dataclasses.InitVar:
            continue
        member_type, metadata, is_classvar, is_final = unwrap_annotation(annotation)
        seen.add(name)
        if is_classvar:
            result.append(FieldInfo(
                declaring_type=klass, name=name, is_static=True,
                member_type=member_type, read_only=is_final, metadata=metadata,
            ))
        else:
            result.append(FieldInfo(
                declaring_type=klass, name=name, is_static=False,
                member_type=member_type, read_only=is_final or frozen,
                slot=value if _is_slot(value) else None, metadata=metadata,
            ))

    for name, value in namespace.items():
        if name in seen or _is_dunder(name):
            continue
        if isinstance(value, property):
            result.append(_property_info(klass, name, value))
        elif name in slots and _is_slot(value):
            result.append(FieldInfo(
                declaring_type=klass, name=name, read_only=frozen, slot=value,
            ))
        elif _is_method_like(value) or hasattr(type(value), '__get__') or callable(value):
            continue
        else:
            result.append(FieldInfo(
                declaring_type=klass, name=name, is_static=True,
                member_type=type(value),
            ))

    return result


def _visible_members(cls: type, binding: Binding) -> Iterator[PropertyInfo | FieldInfo]:
    hidden: set[str] = set()
    for klass in hierarchy(cls, bool(binding & Binding.DECLARED_ONLY)):
        for info in declared_members(klass):
            if info.name in hidden:
                continue
            hidden.add(info.name)
            if matches(binding, info.name, info.is_static):
                yield info


def get_properties(cls: type, binding: Binding) -> list[PropertyInfo]:
    """All properties of *cls* visible under *binding*."""
    return [m for m in _visible_members(cls, binding) if isinstance(m, PropertyInfo)]


def get_fields(cls: type, binding: Binding) -> list[FieldInfo]:
    """All fields of *cls* visible under *binding*."""
    return [m for m in _visible_members(cls, binding) if isinstance(m, FieldInfo)]


def _match_name(items: list[Any], name: str, ignore_case: bool) -> Any | None:
    for item in items:
        if item.name == name:
            return item
    if ignore_case:
        folded = name.casefold()
        for item in items:
            if item.name.casefold() == folded:
                return item
    return None


def find_property(cls: type, name: str, binding: Binding, ignore_case: bool = True) -> PropertyInfo | None:
    """Exact-name match first, then the first case-insensitive match."""
    return _match_name(get_properties(cls, binding), name, ignore_case)


def find_field(cls: type, name: str, binding: Binding, ignore_case: bool = True) -> FieldInfo | None:
    """Exact-name match first, then the first case-insensitive match."""
    return _match_name(get_fields(cls, binding), name, ignore_case)


# ── Methods ────────────────────────────────────────────────────────

def _signature(func: Any) -> inspect.Signature | None:
    try:
        return inspect.signature(func, eval_str=True)
    except Exception:
        pass
    try:
        return inspect.signature(func)
    except (ValueError, TypeError):
        return None


def _collect_parameters(
    sig: inspect.Signature,
    hints: dict[str, Any],
    skip_first: bool = False,
    first_type: Any = None,
) -> tuple[tuple[ParameterInfo, ...], bool, tuple[str, ...]]:
    """Positional parameters, ``*args`` presence and required keyword-only names."""
    params: list[ParameterInfo] = []
    required_keywords: list[str] = []
    var_positional = False
    skipped = not skip_first
    for param in sig.parameters.values():
        if param.kind is inspect.Parameter.VAR_POSITIONAL:
            var_positional = True
            continue
        if param.kind is inspect.Parameter.KEYWORD_ONLY:
            if param.default is inspect.Parameter.empty:
                required_keywords.append(param.name)
            continue
        if param.kind is inspect.Parameter.VAR_KEYWORD:
            continue
        if not skipped:
            skipped = True
            continue

        annotation = hints.get(param.name, param.annotation)
        if annotation is inspect.Parameter.empty:
            annotation = object
        else:
            annotation = unwrap_annotation(annotation)[0]
        if first_type is not None and not params:
            annotation = first_type

        has_default = param.default is not inspect.Parameter.empty
        params.append(ParameterInfo(
            name=param.name,
            position=len(params),
            annotation=annotation,
            has_default=has_default,
            default=param.default if has_default else None,
        ))
    return tuple(params), var_positional, tuple(required_keywords)


def _method_info(
    klass: type,
    name: str,
    func: Any,
    is_static: bool,
    binds_class: bool,
    first_type: Any = None,
) -> MethodInfo:
    sig = _signature(func)
    if sig is None:
        return MethodInfo(
            declaring_type=klass, name=name, parameter_types=(), function=func,
            is_static=is_static, binds_class=binds_class, var_positional=True,
        )

    hints = _callable_hints(func)
    params, var_positional, _ = _collect_parameters(
        sig, hints, skip_first=not is_static or binds_class, first_type=first_type,
    )
    ret = hints.get('return', sig.return_annotation)
    ret = object if ret is inspect.Parameter.empty else unwrap_annotation(ret)[0]
    return MethodInfo(
        declaring_type=klass,
        name=name,
        parameter_types=tuple(p.annotation for p in params),
        function=func,
        is_static=is_static,
        binds_class=binds_class,
        parameters=params,
        var_positional=var_positional,
        return_type=ret,
    )


def _unwrap_callable(value: Any) -> tuple[Any, bool, bool]:
    """Return ``(function, is_static, binds_class)`` for a class-dict entry."""
    if isinstance(value, staticmethod):
        return value.__func__, True, False
    if isinstance(value, classmethod):
        return value.__func__, True, True
    return value, False, False


def declared_methods(klass: type, name: str) -> list[MethodInfo]:
    """Every overload of *name* declared directly on *klass*."""
    value = klass.__dict__.get(name)
    if value is None or name in _NON_METHODS:
        return []

    if isinstance(value, functools.singledispatchmethod):
        base, is_static, binds_class = _unwrap_callable(value.func)
        overloads = []
        for dispatch_type, impl in value.dispatcher.registry.items():
            impl, _, _ = _unwrap_callable(impl)
            # The undecorated base is registered under ``object``; keep its own annotation
            first = None if impl is base or dispatch_type is object else dispatch_type
            overloads.append(_method_info(klass, name, impl, is_static, binds_class, first))
        return overloads

    if inspect.isfunction(value) or isinstance(value, (staticmethod, classmethod)):
        func, is_static, binds_class = _unwrap_callable(value)
        return [_method_info(klass, name, func, is_static, binds_class)]

    return []


def _method_owner(cls: type, name: str, declared_only: bool) -> type | None:
    for klass in hierarchy(cls, declared_only):
        if name in klass.__dict__:
            return klass
    return None


def get_methods(cls: type, binding: Binding, name: str | None = None) -> list[MethodInfo]:
    """Methods visible under *binding*, optionally restricted to one name.

    Overloads come from the most-derived class declaring the name.
    """
    declared_only = bool(binding & Binding.DECLARED_ONLY)
    if name is not None:
        names: list[str] = [name]
    else:
        names = []
        for klass in hierarchy(cls, declared_only):
            for key in klass.__dict__:
                if key not in names:
                    names.append(key)

    result: list[MethodInfo] = []
    for method_name in names:
        owner = _method_owner(cls, method_name, declared_only)
        if owner is None:
            continue
        for info in declared_methods(owner, method_name):
            if matches(binding, info.name, info.is_static):
                result.append(info)
    return result


# ── Constructors ───────────────────────────────────────────────────

def constructor_info(cls: type) -> ConstructorInfo:
    """Describe how *cls* is constructed, from its call signature."""
    is_abstract = inspect.isabstract(cls)
    sig = _signature(cls)
    if sig is None:
        return ConstructorInfo(declaring_type=cls, var_positional=True, is_abstract=is_abstract)

    init = cls.__init__ if cls.__init__ is not object.__init__ else cls.__new__
    params, var_positional, required_keywords = _collect_parameters(sig, _callable_hints(init))
    return ConstructorInfo(
        declaring_type=cls,
        parameters=params,
        var_positional=var_positional,
        is_abstract=is_abstract,
        required_keywords=required_keywords,
    )
