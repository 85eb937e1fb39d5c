"""Call dispatch from a proxy to the delegate held in its swappable slot."""

import inspect
import logging
from collections.abc import Mapping
from collections.abc import Sequence
from typing import Any
from typing import Literal

from swapproxy.descriptor import TypeDescriptor
from swapproxy.descriptor import is_root_type
from swapproxy.descriptor import type_name
from swapproxy.errors import IncompatibleDelegateError
from swapproxy.overloads import EQUALS
from swapproxy.overloads import HASH
from swapproxy.overloads import REPR
from swapproxy.overloads import Method
from swapproxy.overloads import method_of_callable
from swapproxy.overloads import methods_named
from swapproxy.overloads import resolve_method
from swapproxy.overloads import signature_compatible
from swapproxy.reference import DelegationMode
from swapproxy.reference import SwappableReference

logger: logging.Logger = logging.getLogger(__name__)

MemberKind = Literal["method", "attribute"]
FORWARDED_SPECIAL_NAMES: frozenset[str] = frozenset(
    {
        "__str__",
        "__bytes__",
        "__bool__",
        "__len__",
        "__iter__",
        "__next__",
        "__getitem__",
        "__setitem__",
        "__delitem__",
        "__contains__",
        "__lt__",
        "__le__",
        "__gt__",
        "__ge__",
        "__call__",
        "__enter__",
        "__exit__",
    }
)
NEVER_FORWARDED_NAMES: frozenset[str] = frozenset(
    {EQUALS.name, HASH.name, REPR.name, "__init__", "__new__", "hotswap", "get_invoker"}
)


class MemberRequirement:
    """One member a proxied type exposes, with the declarations callers rely on."""

    name: str
    kind: MemberKind
    declaring_type: type
    declarations: tuple[Method, ...]

    def __init__(self, name: str, kind: MemberKind, declaring_type: type, declarations: Sequence[Method] = ()) -> None:
        """Initialize a requirement.

        :param name: Member name.
        :param kind: ``method`` or ``attribute``.
        :param declaring_type: Proxied type the member was found on.
        :param declarations: Method declarations; empty for attributes.
        """
        self.name = name
        self.kind = kind
        self.declaring_type = declaring_type
        self.declarations = tuple(declarations)

    def __repr__(self) -> str:
        return f"MemberRequirement({self.name!r}, {self.kind!r}, {type_name(self.declaring_type)})"


def _is_forwarded_name(member_name: str, abstract_names: frozenset[str]) -> bool:
    """Report whether a proxy forwards ``member_name`` to its delegate."""
    if member_name in NEVER_FORWARDED_NAMES:
        return False
    if member_name.startswith("_") is False:
        return True
    if member_name in FORWARDED_SPECIAL_NAMES:
        return True
    return member_name in abstract_names


def _member_kind(raw: object) -> MemberKind:
    """Classify a class-body entry as a forwarded method or attribute."""
    if isinstance(raw, (staticmethod, classmethod)) is True:
        return "method"
    if isinstance(raw, property) is True:
        return "attribute"
    if callable(raw) is True:
        return "method"
    return "attribute"


def _own_annotations(klass: type) -> Mapping[str, object]:
    """Return the annotations written in one class body, unevaluated where possible."""
    try:
        return inspect.get_annotations(klass)
    except NameError:
        return {}


def member_requirements(type_object: type) -> dict[str, MemberRequirement]:
    """Compute the members a proxy for ``type_object`` has to forward.

    Public members, abstract members, supported special methods and public
    annotated attributes along the MRO are included; the most derived
    definition of each name wins.

    :param type_object: Proxied type.
    :returns: Requirements keyed by member name.
    """
    abstract_names: frozenset[str] = getattr(type_object, "__abstractmethods__", frozenset())
    requirements: dict[str, MemberRequirement] = {}
    for klass in type_object.__mro__:
        if is_root_type(klass) is True:
            continue
        namespace: Mapping[str, object] = vars(klass)
        for member_name, raw in namespace.items():
            if member_name in requirements:
                continue
            if _is_forwarded_name(member_name, abstract_names) is False:
                continue
            kind: MemberKind = _member_kind(raw)
            declarations: list[Method] = []
            if kind == "method":
                declarations = methods_named(type_object, member_name)
            requirements[member_name] = MemberRequirement(member_name, kind, type_object, declarations)
        annotations: Mapping[str, object] = _own_annotations(klass)
        for member_name in annotations:
            if member_name in requirements or member_name in namespace:
                continue
            if _is_forwarded_name(member_name, frozenset()) is False:
                continue
            requirements[member_name] = MemberRequirement(member_name, "attribute", type_object)
    return requirements


def _offered_declarations(delegate: object, member_name: str) -> list[Method]:
    """List the declarations ``delegate`` offers for ``member_name``."""
    offered: list[Method] = methods_named(type(delegate), member_name)
    if len(offered) > 0:
        return offered
    bound: object = getattr(delegate, member_name)
    described: Method | None = method_of_callable(type(delegate), member_name, bound)  # type: ignore[arg-type]
    if described is None:
        return []
    return [described]


def check_signature_compatible(delegate: object, requirements: Mapping[str, MemberRequirement]) -> None:
    """Verify that ``delegate`` structurally provides every required member.

    Every required method declaration must be served by one of the delegate's
    declarations with a compatible arity and coercible parameter types.

    :param delegate: Candidate delegate.
    :param requirements: Requirements of the proxied types.
    :raises IncompatibleDelegateError: On the first missing or incompatible member.
    """
    delegate_name: str = type_name(type(delegate))
    for requirement in requirements.values():
        has_member: bool = hasattr(delegate, requirement.name)
        if has_member is False:
            raise IncompatibleDelegateError(
                f"{delegate_name} has no member {requirement.name!r} required by "
                + type_name(requirement.declaring_type)
            )
        if requirement.kind == "attribute":
            continue
        bound: object = getattr(delegate, requirement.name)
        if callable(bound) is False:
            raise IncompatibleDelegateError(f"{delegate_name}.{requirement.name} is not callable")
        offered: list[Method] = _offered_declarations(delegate, requirement.name)
        if len(offered) == 0:
            continue
        for declaration in requirement.declarations:
            served: bool = False
            for candidate in offered:
                if signature_compatible(declaration, candidate) is True:
                    served = True
                    break
            if served is False:
                raise IncompatibleDelegateError(
                    f"{delegate_name}.{requirement.name} is not signature compatible with {declaration!r}"
                )


def check_direct_instance(delegate: object, types: Sequence[type]) -> None:
    """Verify that ``delegate`` is a true instance of every proxied type.

    :param delegate: Candidate delegate.
    :param types: Proxied types.
    :raises IncompatibleDelegateError: On the first type the delegate does not implement.
    """
    for type_object in types:
        if TypeDescriptor(type_object).is_instance(delegate) is False:
            raise IncompatibleDelegateError(
                f"{type_name(type(delegate))} is not an instance of {type_name(type_object)}"
            )


class HotSwappingInvoker:
    """Forward proxy calls to whatever delegate the slot holds at call time."""

    _types: tuple[type, ...]
    _reference: SwappableReference
    _mode: DelegationMode
    _members: dict[str, MemberRequirement]

    def __init__(self, types: Sequence[type], reference: SwappableReference, mode: DelegationMode) -> None:
        """Initialize the invoker and validate the initial delegate.

        :param types: Proxied types, primary first.
        :param reference: Slot holding the delegate.
        :param mode: Delegation mode.
        :raises IncompatibleDelegateError: If the initial delegate does not suit ``mode``.
        """
        self._types = tuple(types)
        self._reference = reference
        self._mode = mode
        self._members = {}
        for type_object in self._types:
            for member_name, requirement in member_requirements(type_object).items():
                if member_name not in self._members:
                    self._members[member_name] = requirement
        logger.debug(
            "Forwarding %d members of %s in %s mode",
            len(self._members),
            ", ".join(type_name(type_object) for type_object in self._types),
            mode.value,
        )

        delegate: object = reference.get()
        if delegate is None:
            return
        if mode is DelegationMode.DIRECT:
            check_direct_instance(delegate, self._types)
        else:
            check_signature_compatible(delegate, self._members)

    @property
    def types(self) -> tuple[type, ...]:
        """Return the proxied types.

        :returns: Proxied types, primary first.
        """
        return self._types

    @property
    def reference(self) -> SwappableReference:
        """Return the delegate slot.

        :returns: Slot shared with the proxy.
        """
        return self._reference

    @property
    def mode(self) -> DelegationMode:
        """Return the delegation mode.

        :returns: Delegation mode.
        """
        return self._mode

    @property
    def members(self) -> dict[str, MemberRequirement]:
        """Return the forwarding table.

        :returns: Forwarded members keyed by name.
        """
        return dict(self._members)

    def invoke(self, member_name: str, args: Sequence[object], kwargs: Mapping[str, Any]) -> object:
        """Call ``member_name`` on the current delegate.

        Signature mode picks the delegate's declaration with :func:`resolve_method`
        for positional calls; keyword calls and direct mode use attribute lookup.

        :param member_name: Method name.
        :param args: Positional arguments.
        :param kwargs: Keyword arguments.
        :returns: Delegate result.
        :raises MethodNotFoundError: In signature mode, when no delegate declaration accepts ``args``.
        """
        delegate: object = self._reference.get()
        if self._mode is DelegationMode.SIGNATURE and len(kwargs) == 0:
            is_declared: bool = len(methods_named(type(delegate), member_name)) > 0
            if is_declared is True:
                method: Method = resolve_method(type(delegate), member_name, args)
                return method.invoke(delegate, args)
        return getattr(delegate, member_name)(*args, **kwargs)

    def get_attribute(self, member_name: str) -> object:
        """Read one attribute from the current delegate.

        :param member_name: Attribute name.
        :returns: Attribute value.
        """
        return getattr(self._reference.get(), member_name)

    def set_attribute(self, member_name: str, value: object) -> None:
        """Write one attribute on the current delegate.

        :param member_name: Attribute name.
        :param value: New value.
        """
        setattr(self._reference.get(), member_name, value)

    def hotswap(self, new_delegate: object) -> object:
        """Exchange the delegate.

        :param new_delegate: Delegate for subsequent calls.
        :returns: Previous delegate.
        """
        return self._reference.swap(new_delegate)
