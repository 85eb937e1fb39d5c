"""Helpers for walking interface and class hierarchies."""

from collections.abc import Sequence
from typing import TYPE_CHECKING

from swapproxy.descriptor import UNIVERSAL_BASE
from swapproxy.descriptor import TypeDescriptor
from swapproxy.descriptor import is_interface_type
from swapproxy.descriptor import is_root_type
from swapproxy.reference import InvokerReference

if TYPE_CHECKING:
    from swapproxy.factory import ProxyFactory


def _add_interfaces(descriptor: TypeDescriptor, interfaces: set[type]) -> None:
    """Add ``descriptor`` (if an interface) and everything it implements.

    The declared interfaces of a class only cover its own class statement, so the
    superclass chain is walked as well as every superinterface.

    :param descriptor: Type to explore.
    :param interfaces: Accumulator, updated in place.
    """
    if descriptor.is_interface is True:
        interfaces.add(descriptor.type)
    current: TypeDescriptor | None = descriptor
    while current is not None:
        for implemented in current.declared_interfaces:
            already_seen: bool = implemented.type in interfaces
            if already_seen is False:
                _add_interfaces(implemented, interfaces)
        current = current.superclass


def collect_interfaces(*values: object) -> set[type]:
    """Get all the interfaces implemented by the runtime types of ``values``.

    :param values: Objects to consider; ``None`` entries are skipped.
    :returns: Set of interfaces, possibly empty.
    """
    interfaces: set[type] = set()
    for value in values:
        if value is not None:
            _add_interfaces(TypeDescriptor.of_value(value), interfaces)
    interfaces.discard(InvokerReference)
    return interfaces


def collect_type_interfaces(type_object: type) -> set[type]:
    """Get all interfaces of ``type_object``.

    For a class this is every interface it implements, directly or through its
    superclasses. For an interface it is the interface itself plus all of its
    superinterfaces.

    :param type_object: Type to explore.
    :returns: Set of interfaces, possibly empty.
    """
    interfaces: set[type] = set()
    _add_interfaces(TypeDescriptor(type_object), interfaces)
    interfaces.discard(InvokerReference)
    return interfaces


def _ancestor_chain(type_object: type) -> list[type]:
    """List ``type_object`` followed by the concrete classes of its MRO, ending at ``object``.

    :param type_object: Class to start from.
    :returns: Candidates in the order a common superclass search climbs them.
    """
    chain: list[type] = [type_object]
    for klass in type_object.__mro__[1:]:
        if klass is UNIVERSAL_BASE:
            break
        if is_root_type(klass) is True or is_interface_type(klass) is True:
            continue
        chain.append(klass)
    if type_object is not UNIVERSAL_BASE:
        chain.append(UNIVERSAL_BASE)
    return chain


def get_most_common_superclass(*values: object) -> type:
    """Get the most specific superclass shared by all given objects.

    The candidate climbs the MRO of the type it was taken from, so every concrete
    base of a class with several bases is tried before ``object``.

    :param values: Objects to consider; ``None`` entries are skipped.
    :returns: Shared superclass, or ``object`` when nothing remains to compare.
    """
    candidate: TypeDescriptor | None = None
    chain: list[type] = []
    position: int = 0
    found: bool = False
    while found is False:
        found = True
        for value in values:
            if value is None:
                continue
            current: TypeDescriptor = TypeDescriptor.of_value(value)
            if candidate is None:
                candidate = current
                chain = _ancestor_chain(current.type)
                position = 0
            if candidate.is_assignable_from(current) is True:
                continue
            if current.is_assignable_from(candidate) is True:
                candidate = current
                chain = _ancestor_chain(current.type)
                position = 0
                continue
            position += 1
            if position < len(chain):
                candidate = TypeDescriptor(chain[position])
            else:
                candidate = TypeDescriptor(UNIVERSAL_BASE)
            found = False
            break
    if candidate is None:
        return UNIVERSAL_BASE
    return candidate.type


def add_if_proxyable(type_object: type, interfaces: set[type], factory: "ProxyFactory") -> None:
    """Add ``type_object`` to ``interfaces`` when ``factory`` can proxy it.

    ``object`` is never added.

    :param type_object: Candidate class.
    :param interfaces: Set to update in place.
    :param factory: Proxy factory that will generate the proxy.
    """
    if type_object is UNIVERSAL_BASE:
        return
    if factory.can_proxy(type_object) is True:
        interfaces.add(type_object)


def make_types_list(primary_type: type | None, types: Sequence[type] | None) -> list[type]:
    """Combine a primary type and additional types into one ordered list.

    When ``primary_type`` is ``None`` the additional types are used as given.

    :param primary_type: Type placed first.
    :param types: Additional types, may be ``None``.
    :returns: List with ``primary_type`` first followed by ``types``.
    """
    if primary_type is None:
        return list(types) if types is not None else []
    combined: list[type] = [primary_type]
    if types is not None:
        combined.extend(types)
    return combined
