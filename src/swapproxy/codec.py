"""Transportable method identities.

A :class:`~swapproxy.overloads.Method` is written as the triple
``(declaring_type, name, parameter_types)`` and located again on read, so no
function object ever has to be serialized.
"""

import pickle
import typing
from typing import IO
from typing import Any

from swapproxy.descriptor import type_name
from swapproxy.errors import InvalidEncodedDataError
from swapproxy.errors import MethodRelocationError
from swapproxy.overloads import Method
from swapproxy.overloads import methods_named

EncodedMethod = tuple[type, str, tuple[Any, ...]]
_ANNOTATION_FORMS: tuple[type, ...] = (
    type,
    str,
    typing.ForwardRef,
    typing.TypeVar,
    typing.ParamSpec,
    typing.TypeVarTuple,
    typing.NewType,
    typing._SpecialForm,
)


def _is_parameter_type(candidate: object) -> bool:
    """Report whether ``candidate`` is an annotation a method declaration can carry."""
    if isinstance(candidate, _ANNOTATION_FORMS) is True:
        return True
    if candidate is Any:
        return True
    return typing.get_origin(candidate) is not None


def encode_method(method: Method) -> EncodedMethod:
    """Encode a method as a transportable triple.

    :param method: Method to encode.
    :returns: Tuple of ``(declaring_type, name, parameter_types)``.
    """
    return (method.declaring_type, method.name, method.parameter_types)


def _validate_encoded(data: object) -> EncodedMethod:
    """Check the shape of an encoded method triple.

    :param data: Candidate triple.
    :returns: Normalized triple with a tuple of parameter types.
    :raises InvalidEncodedDataError: If any element has the wrong type.
    """
    if isinstance(data, (tuple, list)) is False or len(data) != 3:  # type: ignore[arg-type]
        raise InvalidEncodedDataError("Encoded method must be a (type, name, parameter_types) triple")
    declaring_type, name, parameter_types = data  # type: ignore[misc]
    if isinstance(declaring_type, type) is False:
        raise InvalidEncodedDataError(f"Encoded declaring type is not a class: {declaring_type!r}")
    if isinstance(name, str) is False:
        raise InvalidEncodedDataError(f"Encoded method name is not a string: {name!r}")
    if isinstance(parameter_types, (tuple, list)) is False:
        raise InvalidEncodedDataError(f"Encoded parameter types are not a sequence: {parameter_types!r}")
    for parameter_type in parameter_types:
        if _is_parameter_type(parameter_type) is False:
            raise InvalidEncodedDataError(f"Encoded parameter type is not a type: {parameter_type!r}")
    return declaring_type, name, tuple(parameter_types)


def decode_method(data: object) -> Method:
    """Locate the method described by an encoded triple.

    Only a declaration with exactly the encoded parameter types qualifies.

    :param data: Triple produced by :func:`encode_method`.
    :returns: Located method.
    :raises InvalidEncodedDataError: If the triple is malformed.
    :raises MethodRelocationError: If no declaration matches exactly.
    """
    declaring_type, name, parameter_types = _validate_encoded(data)
    for method in methods_named(declaring_type, name):
        if method.parameter_types == parameter_types:
            return method
    rendered: str = ", ".join(type_name(parameter_type) for parameter_type in parameter_types)
    raise MethodRelocationError(
        f"{type_name(declaring_type)}.{name}({rendered})",
        name,
        parameter_types,
    )


def write_method(stream: IO[bytes], method: Method) -> None:
    """Write a method identity as three consecutive pickle records.

    :param stream: Writable binary stream.
    :param method: Method to write.
    """
    pickler: pickle.Pickler = pickle.Pickler(stream, protocol=pickle.HIGHEST_PROTOCOL)
    for element in encode_method(method):
        pickler.dump(element)


def read_method(stream: IO[bytes]) -> Method:
    """Read a method identity written by :func:`write_method`.

    :param stream: Readable binary stream.
    :returns: Located method.
    :raises InvalidEncodedDataError: If the records cannot be read or are malformed.
    :raises MethodRelocationError: If the method no longer exists.
    """
    unpickler: pickle.Unpickler = pickle.Unpickler(stream)
    try:
        declaring_type: object = unpickler.load()
        name: object = unpickler.load()
        parameter_types: object = unpickler.load()
    except (pickle.UnpicklingError, EOFError, AttributeError, ValueError) as exc:
        raise InvalidEncodedDataError("Failed to read encoded method records") from exc
    return decode_method((declaring_type, name, parameter_types))
