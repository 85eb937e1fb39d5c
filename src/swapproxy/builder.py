"""Staged builder for proxies whose delegate can be exchanged later."""

import enum
import logging

from swapproxy.descriptor import TypeDescriptor
from swapproxy.descriptor import type_name
from swapproxy.errors import BuilderStateError
from swapproxy.factory import ProxyFactory
from swapproxy.factory import StandardProxyFactory
from swapproxy.introspection import make_types_list
from swapproxy.reference import DelegationMode
from swapproxy.reference import SwappableReference
from swapproxy.reference import validate_delegation_mode

logger: logging.Logger = logging.getLogger(__name__)


class SwapState(enum.Enum):
    """Stages a builder moves through, in order."""

    TARGETS_FIXED = "targets_fixed"
    DELEGATE_BOUND = "delegate_bound"
    MODE_CONFIRMED = "mode_confirmed"
    BUILT = "built"


class HotSwapping:
    """Configuration collected by the builder stages.

    The stage objects returned by :func:`swapproxy.hotswap_proxy` are the public
    surface; this class only records what they were told and which stage was
    reached.
    """

    _types: list[type]
    _delegate: object
    _mode: DelegationMode | None
    _state: SwapState

    def __init__(self, primary_type: type | None, *types: type) -> None:
        """Fix the proxied types.

        :param primary_type: Type listed first; ``None`` keeps only ``types``.
        :param types: Additional types, kept in order without deduplication.
        """
        self._types = make_types_list(primary_type, types)
        self._delegate = None
        self._mode = None
        self._state = SwapState.TARGETS_FIXED

    @property
    def state(self) -> SwapState:
        """Return the stage reached so far.

        :returns: Current stage.
        """
        return self._state

    @property
    def types(self) -> list[type]:
        """Return the proxied types.

        :returns: Copy of the type list, primary first.
        """
        return list(self._types)

    @property
    def delegate(self) -> object:
        """Return the bound delegate.

        :returns: Delegate, or ``None`` before binding.
        """
        return self._delegate

    @property
    def mode(self) -> DelegationMode | None:
        """Return the resolved delegation mode.

        :returns: Mode, or ``None`` before a delegate is bound.
        """
        return self._mode

    def _require_state(self, action: str, *allowed: SwapState) -> None:
        """Reject ``action`` unless the builder is in one of ``allowed``.

        :param action: Name of the attempted stage operation.
        :param allowed: Stages from which ``action`` may run.
        :raises BuilderStateError: If the builder is elsewhere.
        """
        if self._state in allowed:
            return
        raise BuilderStateError(f"Cannot {action} once the builder reached {self._state.value}")

    def bind(self, delegate: object) -> None:
        """Bind the delegate and pick the delegation mode.

        ``DIRECT`` is chosen when ``delegate`` is an instance of every proxied type,
        otherwise ``SIGNATURE``.

        :param delegate: Object the proxy forwards to.
        :raises BuilderStateError: If a delegate was already bound.
        """
        self._require_state("bind a delegate", SwapState.TARGETS_FIXED)
        self._delegate = delegate
        self._mode = DelegationMode.DIRECT
        for type_object in self._types:
            if TypeDescriptor(type_object).is_instance(delegate) is False:
                self._mode = DelegationMode.SIGNATURE
                logger.debug(
                    "Delegate %s is not a %s, using signature mode",
                    type_name(type(delegate)),
                    type_name(type_object),
                )
                break
        self._state = SwapState.DELEGATE_BOUND

    def override_mode(self, mode: DelegationMode | str) -> None:
        """Replace the automatically selected delegation mode.

        :param mode: Mode enum member or its string value.
        :raises BuilderStateError: If no delegate is bound or the mode was already confirmed.
        :raises ValueError: If the mode is unsupported.
        """
        self._require_state("override the mode", SwapState.DELEGATE_BOUND)
        self._mode = validate_delegation_mode(mode)
        self._state = SwapState.MODE_CONFIRMED

    def build(self, factory: ProxyFactory | None = None) -> object:
        """Create the proxy through ``factory``.

        Errors raised by the factory propagate unchanged.

        :param factory: Proxy factory; :class:`StandardProxyFactory` when omitted.
        :returns: Proxy implementing the proxied types and :class:`~swapproxy.reference.Swappable`.
        :raises BuilderStateError: If no delegate is bound or the proxy was already built.
        """
        self._require_state("build", SwapState.DELEGATE_BOUND, SwapState.MODE_CONFIRMED)
        active_factory: ProxyFactory = factory if factory is not None else StandardProxyFactory()
        reference: SwappableReference = SwappableReference(self._delegate)
        mode: DelegationMode = self._mode if self._mode is not None else DelegationMode.DIRECT
        proxy: object = active_factory.create_proxy(list(self._types), reference, mode)
        self._state = SwapState.BUILT
        return proxy


class SwapBuild:
    """Final stage: build the proxy."""

    _hotswapping: HotSwapping

    def __init__(self, hotswapping: HotSwapping) -> None:
        """Wrap the builder configuration.

        :param hotswapping: Shared builder configuration.
        """
        self._hotswapping = hotswapping

    @property
    def state(self) -> SwapState:
        """Return the stage reached so far.

        :returns: Current stage.
        """
        return self._hotswapping.state

    @property
    def delegation_mode(self) -> DelegationMode | None:
        """Return the delegation mode that ``build`` will use.

        :returns: Resolved mode.
        """
        return self._hotswapping.mode

    def build(self, factory: ProxyFactory | None = None) -> object:
        """Create a proxy with hot swapping capabilities.

        The delegate must implement the proxied types in ``DIRECT`` mode, or offer
        signature compatible members in ``SIGNATURE`` mode. The proxy implements
        :class:`~swapproxy.reference.Swappable`.

        :param factory: Proxy factory; :class:`StandardProxyFactory` when omitted.
        :returns: Created proxy.
        """
        return self._hotswapping.build(factory)


class SwapBuildOrMode(SwapBuild):
    """Stage after binding the delegate: optionally force a mode, then build."""

    def mode(self, mode: DelegationMode | str) -> SwapBuild:
        """Force a particular delegation mode.

        :param mode: ``DelegationMode.DIRECT`` or ``DelegationMode.SIGNATURE`` (or their string values).
        :returns: Build stage.
        """
        self._hotswapping.override_mode(mode)
        return SwapBuild(self._hotswapping)


class SwapWith:
    """First stage: bind the delegate."""

    _hotswapping: HotSwapping

    def __init__(self, hotswapping: HotSwapping) -> None:
        """Wrap the builder configuration.

        :param hotswapping: Shared builder configuration.
        """
        self._hotswapping = hotswapping

    @property
    def types(self) -> list[type]:
        """Return the proxied types.

        :returns: Type list, primary first.
        """
        return self._hotswapping.types

    def with_(self, delegate: object) -> SwapBuildOrMode:
        """Define the object that shall be proxied.

        :param delegate: Object implementing the proxied types or offering compatible members.
        :returns: Stage that can override the mode or build.
        """
        self._hotswapping.bind(delegate)
        return SwapBuildOrMode(self._hotswapping)
