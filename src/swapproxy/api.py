"""User-facing API entrypoints for swapproxy."""

from swapproxy.builder import HotSwapping
from swapproxy.builder import SwapWith
from swapproxy.reference import Swappable


def hotswap_proxy(primary_type: type | None, *types: type) -> SwapWith:
    """Start building a proxy whose delegate can be exchanged later.

    :param primary_type: Type the proxy implements first; ``None`` uses ``types`` alone.
    :param types: Other types implemented by the proxy.
    :returns: Builder stage that binds the delegate.
    """
    return SwapWith(HotSwapping(primary_type, *types))


def swap(proxy: object, new_delegate: object) -> object:
    """Exchange the delegate behind ``proxy``.

    :param proxy: Proxy created by :func:`hotswap_proxy`.
    :param new_delegate: Delegate used by all subsequent calls.
    :returns: The delegate that was replaced.
    :raises TypeError: If ``proxy`` is not swappable.
    """
    if isinstance(proxy, Swappable) is False:
        raise TypeError(f"{type(proxy).__name__} does not support hot swapping")
    return proxy.hotswap(new_delegate)  # type: ignore[attr-defined]
