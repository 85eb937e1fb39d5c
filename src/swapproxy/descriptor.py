"""Type descriptors that answer interface and hierarchy questions about Python classes."""

import abc
import inspect
import typing
from typing import Any

UNIVERSAL_BASE: type = object
_ROOT_TYPES: tuple[type, ...] = (object, abc.ABC, typing.Protocol, typing.Generic)  # type: ignore[arg-type]


def is_root_type(type_object: type) -> bool:
    """Report whether ``type_object`` is a hierarchy root rather than a capability.

    :param type_object: Candidate class.
    :returns: ``True`` for ``object``, ``ABC``, ``Protocol`` and ``Generic``.
    """
    for root in _ROOT_TYPES:
        if type_object is root:
            return True
    return False


def _declares_public_functions(type_object: type) -> bool:
    """Report whether a class body defines public callables or properties."""
    for attr_name, attr_value in vars(type_object).items():
        if attr_name.startswith("_"):
            continue
        if isinstance(attr_value, (staticmethod, classmethod, property)) is True:
            return True
        if inspect.isfunction(attr_value) is True:
            return True
    return False


def is_interface_type(type_object: type) -> bool:
    """Decide whether a class plays the role of an interface.

    Protocol classes are always interfaces. Other classes qualify when they use
    ``ABCMeta``, declare no ``__init__``, extend only interfaces or hierarchy
    roots, and either carry abstract methods or are empty markers.

    :param type_object: Candidate class.
    :returns: ``True`` when the class is treated as an interface.
    """
    if isinstance(type_object, type) is False:
        return False
    if is_root_type(type_object) is True:
        return False
    is_protocol: bool = bool(getattr(type_object, "_is_protocol", False))
    if is_protocol is True:
        return True
    if isinstance(type_object, abc.ABCMeta) is False:
        return False
    if "__init__" in vars(type_object):
        return False
    for base in type_object.__bases__:
        if is_root_type(base) is False and is_interface_type(base) is False:
            return False
    abstract_names: frozenset[str] = getattr(type_object, "__abstractmethods__", frozenset())
    if len(abstract_names) > 0:
        return True
    return _declares_public_functions(type_object) is False


def _nominal_subclass(candidate: type, type_object: type) -> bool:
    """Check nominal inheritance without invoking ``__subclasscheck__`` hooks."""
    mro: tuple[type, ...] = getattr(candidate, "__mro__", ())
    return type_object in mro


class TypeDescriptor:
    """Opaque handle over one Python class used by the introspection helpers.

    Equality and hashing follow the wrapped class, so descriptors can be kept in
    sets and compared with each other freely.
    """

    _type: type

    def __init__(self, type_object: type) -> None:
        """Wrap one class.

        :param type_object: Class to describe.
        :raises TypeError: If ``type_object`` is not a class.
        """
        if isinstance(type_object, type) is False:
            raise TypeError(f"TypeDescriptor requires a class, got {type_object!r}")
        self._type = type_object

    @classmethod
    def of_value(cls, value: object) -> "TypeDescriptor":
        """Describe the runtime type of ``value``.

        :param value: Any object.
        :returns: Descriptor for ``type(value)``.
        """
        return cls(type(value))

    @property
    def type(self) -> type:
        """Return the wrapped class.

        :returns: Wrapped class.
        """
        return self._type

    @property
    def name(self) -> str:
        """Return the dotted ``module.qualname`` of the wrapped class.

        :returns: Dotted class name.
        """
        return type_name(self._type)

    @property
    def is_interface(self) -> bool:
        """Report whether the wrapped class is an interface.

        :returns: ``True`` when the class is treated as an interface.
        """
        return is_interface_type(self._type)

    @property
    def superclass(self) -> "TypeDescriptor | None":
        """Return the superclass in the single-inheritance sense.

        The superclass is the first direct base that is not an interface; a class
        extending only interfaces has ``object`` as superclass. Interfaces and
        ``object`` itself have none.

        :returns: Superclass descriptor or ``None``.
        """
        if self._type is UNIVERSAL_BASE:
            return None
        if self.is_interface is True:
            return None
        for base in self._type.__bases__:
            if is_interface_type(base) is False and is_root_type(base) is False:
                return TypeDescriptor(base)
        return TypeDescriptor(UNIVERSAL_BASE)

    @property
    def declared_interfaces(self) -> tuple["TypeDescriptor", ...]:
        """Return the interfaces named directly in the class statement.

        :returns: Interface descriptors in ``__bases__`` order.
        """
        interfaces: list[TypeDescriptor] = []
        for base in self._type.__bases__:
            if is_interface_type(base) is True:
                interfaces.append(TypeDescriptor(base))
        return tuple(interfaces)

    def is_instance(self, value: object) -> bool:
        """Check whether ``value`` is an instance of the wrapped class.

        Protocols that are not runtime checkable are tested nominally.

        :param value: Candidate object.
        :returns: ``True`` when ``value`` conforms.
        """
        try:
            return isinstance(value, self._type)
        except TypeError:
            return _nominal_subclass(type(value), self._type)

    def is_assignable_from(self, other: "TypeDescriptor | type") -> bool:
        """Check whether instances of ``other`` may be used where this type is expected.

        :param other: Candidate descriptor or class.
        :returns: ``True`` when ``other`` is this class or a subclass of it.
        """
        other_type: type = other.type if isinstance(other, TypeDescriptor) else other
        if self._type is UNIVERSAL_BASE:
            return True
        try:
            return issubclass(other_type, self._type)
        except TypeError:
            return _nominal_subclass(other_type, self._type)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, TypeDescriptor) is False:
            return NotImplemented
        return self._type is other.type  # type: ignore[union-attr]

    def __hash__(self) -> int:
        return hash(self._type)

    def __repr__(self) -> str:
        return f"TypeDescriptor({self.name})"


def type_name(type_object: Any) -> str:
    """Build a stable dotted name for a type object.

    :param type_object: Type object.
    :returns: Dotted ``module.qualname`` string, or ``repr`` for typing constructs.
    """
    if isinstance(type_object, type) is False:
        return repr(type_object)
    module_name: str = type_object.__module__
    qualname: str = type_object.__qualname__
    if module_name == "builtins":
        return qualname
    return f"{module_name}.{qualname}"
