"""Custom error types for swapproxy."""


class SwapProxyError(Exception):
    """Base class for all swapproxy errors."""


class MethodNotFoundError(SwapProxyError, LookupError):
    """Raised when no declared method matches a requested name and arguments."""

    method_name: str
    argument_types: tuple[type, ...]

    def __init__(self, message: str, method_name: str, argument_types: tuple[type, ...] = ()) -> None:
        """Initialize a lookup failure.

        :param message: Human-readable description of the failed lookup.
        :param method_name: Requested method name.
        :param argument_types: Runtime or declared types used for the lookup.
        """
        self.method_name = method_name
        self.argument_types = argument_types
        super().__init__(message)


class InvalidEncodedDataError(SwapProxyError, ValueError):
    """Raised when an encoded method identity is malformed."""


class MethodRelocationError(MethodNotFoundError, InvalidEncodedDataError):
    """Raised when a well-formed method identity no longer resolves."""


class BuilderStateError(SwapProxyError, RuntimeError):
    """Raised when a builder stage is used after the builder moved past it."""


class ProxyConstructionError(SwapProxyError, TypeError):
    """Raised by the standard proxy factory when a proxy cannot be generated."""


class IncompatibleDelegateError(ProxyConstructionError):
    """Raised when a delegate does not satisfy the proxied types under its delegation mode."""
