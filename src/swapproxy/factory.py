"""Proxy factories that turn a type list and a delegate slot into a proxy object."""

import logging
from collections.abc import Callable
from collections.abc import Sequence
from types import new_class
from typing import Protocol

from swapproxy.descriptor import type_name
from swapproxy.errors import ProxyConstructionError
from swapproxy.invoker import HotSwappingInvoker
from swapproxy.invoker import MemberRequirement
from swapproxy.reference import DelegationMode
from swapproxy.reference import InvokerReference
from swapproxy.reference import Swappable
from swapproxy.reference import SwappableReference

logger: logging.Logger = logging.getLogger(__name__)

_INVOKER_ATTR: str = "_swapproxy_invoker"
_MARKER_TYPES: tuple[type, ...] = (Swappable, InvokerReference)


class ProxyFactory(Protocol):
    """Backend that manufactures swappable proxies."""

    def create_proxy(
        self,
        types: Sequence[type],
        reference: SwappableReference,
        mode: DelegationMode,
    ) -> object:
        """Create a proxy implementing ``types`` and :class:`Swappable`.

        The proxy must read ``reference`` on every call rather than caching the delegate.

        :param types: Proxied types, primary first.
        :param reference: Slot holding the delegate.
        :param mode: Delegation mode.
        :returns: Proxy object.
        """
        ...

    def can_proxy(self, type_object: type) -> bool:
        """Report whether proxies for ``type_object`` can be generated.

        :param type_object: Candidate class.
        :returns: ``True`` when the type is supported.
        """
        ...


def _invoker_of(proxy: object) -> HotSwappingInvoker:
    """Return the invoker stored on ``proxy`` without triggering forwarded lookups."""
    return object.__getattribute__(proxy, _INVOKER_ATTR)  # type: ignore[no-any-return]


def _make_method_forwarder(member_name: str, qualname: str, doc: str | None) -> Callable[..., object]:
    """Build one forwarding method.

    :param member_name: Forwarded method name.
    :param qualname: Qualified name for the generated function.
    :param doc: Docstring copied from the declaration.
    :returns: Function suitable for a class namespace.
    """

    def forward(self: object, *args: object, **kwargs: object) -> object:
        return _invoker_of(self).invoke(member_name, args, kwargs)

    forward.__name__ = member_name
    forward.__qualname__ = qualname
    forward.__doc__ = doc
    return forward


def _make_attribute_forwarder(member_name: str, doc: str | None) -> property:
    """Build one forwarding property.

    :param member_name: Forwarded attribute name.
    :param doc: Docstring copied from the declaration.
    :returns: Property reading and writing the delegate's attribute.
    """

    def getter(self: object) -> object:
        return _invoker_of(self).get_attribute(member_name)

    def setter(self: object, value: object) -> None:
        _invoker_of(self).set_attribute(member_name, value)

    return property(getter, setter, doc=doc)


def _declaration_doc(requirement: MemberRequirement) -> str | None:
    """Return the docstring of the proxied declaration behind ``requirement``, if any."""
    raw: object = getattr(requirement.declaring_type, requirement.name, None)
    doc: object = getattr(raw, "__doc__", None)
    if isinstance(doc, str) is True:
        return doc  # type: ignore[return-value]
    return None


def _proxy_hotswap(self: object, new_delegate: object) -> object:
    """Exchange the delegate behind this proxy.

    :param new_delegate: Delegate used by all subsequent calls.
    :returns: The delegate that was replaced.
    """
    return _invoker_of(self).hotswap(new_delegate)


def _proxy_get_invoker(self: object) -> HotSwappingInvoker:
    """Return the invoker dispatching this proxy's calls.

    :returns: Invoker instance.
    """
    return _invoker_of(self)


def _proxy_repr(self: object) -> str:
    """Describe the proxy and its current delegate."""
    invoker: HotSwappingInvoker = _invoker_of(self)
    return f"<{type(self).__name__} delegating to {invoker.reference.get()!r}>"


def _most_specific_bases(types: Sequence[type]) -> list[type]:
    """Drop listed types already implied by a more specific listed type.

    :param types: Proxied types in caller order.
    :returns: Base classes for the generated proxy class.
    """
    bases: list[type] = []
    for candidate in types:
        if candidate in _MARKER_TYPES:
            continue
        implied: bool = False
        for other in types:
            if other is not candidate and candidate in other.__mro__:
                implied = True
                break
        if implied is False:
            bases.append(candidate)
    bases.extend(_MARKER_TYPES)
    return bases


class StandardProxyFactory:
    """Generate proxy classes that subclass the proxied types and forward every member."""

    def can_proxy(self, type_object: type) -> bool:
        """Report whether ``type_object`` can be subclassed by a generated proxy class.

        :param type_object: Candidate class.
        :returns: ``True`` when the class accepts subclasses.
        """
        if isinstance(type_object, type) is False:
            return False
        try:
            new_class("_ProxyProbe", (type_object,))
        except TypeError:
            return False
        return True

    def create_proxy_class(self, proxied_types: Sequence[type], invoker: HotSwappingInvoker) -> type:
        """Generate the proxy class for one invoker.

        :param proxied_types: Proxied types, primary first.
        :param invoker: Invoker whose member table drives the generated members.
        :returns: Generated class.
        :raises ProxyConstructionError: If Python rejects the class definition.
        """
        class_name: str = f"{proxied_types[0].__name__}SwappableProxy"
        namespace: dict[str, object] = {
            "__module__": __name__,
            "__doc__": "Swappable proxy for " + ", ".join(type_name(item) for item in proxied_types) + ".",
            "__eq__": object.__eq__,
            "__hash__": object.__hash__,
            "__repr__": _proxy_repr,
            "hotswap": _proxy_hotswap,
            "get_invoker": _proxy_get_invoker,
        }
        for member_name, requirement in invoker.members.items():
            doc: str | None = _declaration_doc(requirement)
            if requirement.kind == "method":
                namespace[member_name] = _make_method_forwarder(member_name, f"{class_name}.{member_name}", doc)
            else:
                namespace[member_name] = _make_attribute_forwarder(member_name, doc)

        bases: list[type] = _most_specific_bases(proxied_types)
        try:
            return new_class(class_name, tuple(bases), exec_body=lambda body: body.update(namespace))
        except TypeError as exc:
            raise ProxyConstructionError(
                "Cannot generate a proxy class for " + ", ".join(type_name(item) for item in proxied_types)
            ) from exc

    def create_proxy(
        self,
        types: Sequence[type],
        reference: SwappableReference,
        mode: DelegationMode,
    ) -> object:
        """Create a proxy implementing ``types`` and :class:`Swappable`.

        :param types: Proxied types, primary first.
        :param reference: Slot holding the delegate.
        :param mode: Delegation mode.
        :returns: Proxy object.
        :raises ProxyConstructionError: If ``types`` is empty or cannot be subclassed together.
        :raises IncompatibleDelegateError: If the delegate does not suit ``mode``.
        """
        proxied_types: list[type] = list(types)
        if len(proxied_types) == 0:
            raise ProxyConstructionError("At least one type is required to build a proxy")
        for proxied_type in proxied_types:
            if self.can_proxy(proxied_type) is False:
                raise ProxyConstructionError(f"Cannot proxy type {proxied_type!r}")

        invoker: HotSwappingInvoker = HotSwappingInvoker(proxied_types, reference, mode)
        proxy_class: type = self.create_proxy_class(proxied_types, invoker)
        try:
            proxy: object = object.__new__(proxy_class)
        except TypeError as exc:
            raise ProxyConstructionError(f"Cannot instantiate generated class {proxy_class.__name__}") from exc
        object.__setattr__(proxy, _INVOKER_ATTR, invoker)
        logger.debug("Created %s in %s mode", proxy_class.__name__, mode.value)
        return proxy
