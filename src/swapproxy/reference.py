"""Delegate slots, delegation modes and the marker interfaces carried by proxies."""

import abc
import enum
import logging
import threading
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from swapproxy.invoker import HotSwappingInvoker

logger: logging.Logger = logging.getLogger(__name__)


class DelegationMode(enum.Enum):
    """How a proxy matches its delegate against the proxied types."""

    DIRECT = "direct"
    SIGNATURE = "signature"


def validate_delegation_mode(mode: "DelegationMode | str") -> DelegationMode:
    """Validate and normalize delegation mode values.

    :param mode: Mode enum member or its string value.
    :returns: Validated mode.
    :raises ValueError: If the mode is unsupported.
    """
    if isinstance(mode, DelegationMode) is True:
        return mode  # type: ignore[return-value]
    if mode == "direct":
        return DelegationMode.DIRECT
    if mode == "signature":
        return DelegationMode.SIGNATURE
    raise ValueError("delegation mode must be one of: direct, signature")


class SwappableReference:
    """Single slot holding the delegate that currently backs one proxy.

    Each ``get``, ``set`` and ``swap`` is atomic. Nothing orders a swap against a
    call that already read the previous delegate.
    """

    _value: object
    _lock: threading.Lock

    def __init__(self, value: object = None) -> None:
        """Initialize the slot.

        :param value: Initial delegate.
        """
        self._value = value
        self._lock = threading.Lock()

    def get(self) -> object:
        """Return the current delegate.

        :returns: Current slot contents.
        """
        with self._lock:
            return self._value

    def set(self, value: object) -> None:
        """Replace the current delegate.

        :param value: New slot contents.
        """
        with self._lock:
            self._value = value

    def swap(self, value: object) -> object:
        """Replace the current delegate and return the previous one.

        :param value: New slot contents.
        :returns: Previous slot contents.
        """
        with self._lock:
            previous: object = self._value
            self._value = value
        logger.debug("Swapped delegate %s for %s", type(previous).__name__, type(value).__name__)
        return previous

    def __repr__(self) -> str:
        return f"SwappableReference({self.get()!r})"


class Swappable(abc.ABC):
    """Implemented by every proxy whose delegate can be exchanged."""

    @abc.abstractmethod
    def hotswap(self, new_delegate: object) -> object:
        """Exchange the delegate behind this proxy.

        :param new_delegate: Delegate used by all subsequent calls.
        :returns: The delegate that was replaced.
        """


class InvokerReference(abc.ABC):
    """Marker for proxies that expose their invoker. Never reported as a capability."""

    @abc.abstractmethod
    def get_invoker(self) -> "HotSwappingInvoker":
        """Return the invoker dispatching this proxy's calls.

        :returns: Invoker instance.
        """
