"""Public package API for swapproxy."""

from swapproxy.api import hotswap_proxy
from swapproxy.api import swap
from swapproxy.builder import SwapState
from swapproxy.codec import decode_method
from swapproxy.codec import encode_method
from swapproxy.codec import read_method
from swapproxy.codec import write_method
from swapproxy.descriptor import TypeDescriptor
from swapproxy.errors import BuilderStateError
from swapproxy.errors import IncompatibleDelegateError
from swapproxy.errors import InvalidEncodedDataError
from swapproxy.errors import MethodNotFoundError
from swapproxy.errors import MethodRelocationError
from swapproxy.errors import ProxyConstructionError
from swapproxy.errors import SwapProxyError
from swapproxy.factory import ProxyFactory
from swapproxy.factory import StandardProxyFactory
from swapproxy.introspection import add_if_proxyable
from swapproxy.introspection import collect_interfaces
from swapproxy.introspection import collect_type_interfaces
from swapproxy.introspection import get_most_common_superclass
from swapproxy.overloads import Method
from swapproxy.overloads import resolve_method
from swapproxy.reference import DelegationMode
from swapproxy.reference import Swappable
from swapproxy.reference import SwappableReference

__all__: list[str] = [
    "add_if_proxyable",
    "collect_interfaces",
    "collect_type_interfaces",
    "decode_method",
    "encode_method",
    "get_most_common_superclass",
    "hotswap_proxy",
    "read_method",
    "resolve_method",
    "swap",
    "write_method",
    "BuilderStateError",
    "DelegationMode",
    "IncompatibleDelegateError",
    "InvalidEncodedDataError",
    "Method",
    "MethodNotFoundError",
    "MethodRelocationError",
    "ProxyConstructionError",
    "ProxyFactory",
    "StandardProxyFactory",
    "Swappable",
    "SwappableReference",
    "SwapProxyError",
    "SwapState",
    "TypeDescriptor",
]
