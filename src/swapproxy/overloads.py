"""Overload-aware method lookup driven by declared parameter annotations."""

import inspect
import logging
import types
import typing
from collections.abc import Callable
from collections.abc import Mapping
from collections.abc import Sequence
from typing import Any
from typing import Literal

from swapproxy.descriptor import TypeDescriptor
from swapproxy.descriptor import type_name
from swapproxy.errors import MethodNotFoundError

logger: logging.Logger = logging.getLogger(__name__)

MatchKind = Literal["exact", "loose", "none"]
_PRIMITIVE_TYPES: tuple[type, ...] = (bool, int, float, complex)
_NUMERIC_PROMOTIONS: dict[type, tuple[type, ...]] = {
    bool: (),
    int: (bool,),
    float: (bool, int),
    complex: (bool, int, float),
}
_POSITIONAL_KINDS: tuple[inspect._ParameterKind, ...] = (
    inspect.Parameter.POSITIONAL_ONLY,
    inspect.Parameter.POSITIONAL_OR_KEYWORD,
)


class Method:
    """One callable declaration identified by declaring type, name and parameter types.

    Equality and hashing only consider that triple. The arity bounds and the
    underlying function are carried along for resolution and invocation.
    """

    _declaring_type: type
    _name: str
    _parameter_types: tuple[Any, ...]
    _required_count: int
    _variadic_type: Any
    _function: Callable[..., object] | None

    def __init__(
        self,
        declaring_type: type,
        name: str,
        parameter_types: Sequence[Any],
        required_count: int | None = None,
        variadic_type: Any = None,
        function: Callable[..., object] | None = None,
    ) -> None:
        """Initialize a method identity.

        :param declaring_type: Class whose body declares the method.
        :param name: Method name.
        :param parameter_types: Positional parameter annotations, receiver excluded.
        :param required_count: Positional parameters without defaults; all of them when omitted.
        :param variadic_type: Element annotation of ``*args``, or ``None`` when not variadic.
        :param function: Function object the declaration was read from.
        """
        self._declaring_type = declaring_type
        self._name = name
        self._parameter_types = tuple(parameter_types)
        if required_count is None:
            self._required_count = len(self._parameter_types)
        else:
            self._required_count = required_count
        self._variadic_type = variadic_type
        self._function = function

    @property
    def declaring_type(self) -> type:
        """Return the class declaring this method.

        :returns: Declaring class.
        """
        return self._declaring_type

    @property
    def name(self) -> str:
        """Return the method name.

        :returns: Method name.
        """
        return self._name

    @property
    def parameter_types(self) -> tuple[Any, ...]:
        """Return the declared positional parameter types.

        :returns: Parameter annotations, receiver excluded.
        """
        return self._parameter_types

    @property
    def function(self) -> Callable[..., object] | None:
        """Return the function this declaration was read from.

        :returns: Function object, or ``None`` for hand-built identities.
        """
        return self._function

    @property
    def required_count(self) -> int:
        """Return how many positional arguments are mandatory.

        :returns: Count of positional parameters without defaults.
        """
        return self._required_count

    @property
    def variadic_type(self) -> Any:
        """Return the ``*args`` element annotation.

        :returns: Annotation, or ``None`` when the method is not variadic.
        """
        return self._variadic_type

    @property
    def is_variadic(self) -> bool:
        """Report whether the method accepts ``*args``.

        :returns: ``True`` when surplus positional arguments are accepted.
        """
        return self._variadic_type is not None

    def accepts_count(self, argument_count: int) -> bool:
        """Check whether ``argument_count`` positional arguments fit this method.

        :param argument_count: Number of positional arguments.
        :returns: ``True`` when the arity bounds admit the count.
        """
        if argument_count < self._required_count:
            return False
        if argument_count <= len(self._parameter_types):
            return True
        return self.is_variadic

    def parameter_type_at(self, position: int) -> Any:
        """Return the annotation governing one positional argument.

        :param position: Zero-based argument position.
        :returns: Declared annotation, or the ``*args`` annotation past the named parameters.
        """
        if position < len(self._parameter_types):
            return self._parameter_types[position]
        return self._variadic_type

    def invoke(self, target: object, args: Sequence[object], kwargs: dict[str, object] | None = None) -> object:
        """Call this method on ``target``.

        :param target: Receiver object.
        :param args: Positional arguments.
        :param kwargs: Keyword arguments.
        :returns: Method result.
        """
        bound: Callable[..., object] = getattr(target, self._name)
        if kwargs is None:
            return bound(*args)
        return bound(*args, **kwargs)

    def __eq__(self, other: object) -> bool:
        if isinstance(other, Method) is False:
            return NotImplemented
        return (
            self._declaring_type is other.declaring_type  # type: ignore[union-attr]
            and self._name == other.name  # type: ignore[union-attr]
            and self._parameter_types == other.parameter_types  # type: ignore[union-attr]
        )

    def __hash__(self) -> int:
        return hash((self._declaring_type, self._name, self._parameter_types))

    def __repr__(self) -> str:
        parameters: str = ", ".join(type_name(parameter) for parameter in self._parameter_types)
        return f"Method({type_name(self._declaring_type)}.{self._name}({parameters}))"


def _type_hints(function: Callable[..., object]) -> dict[str, Any]:
    """Resolve annotations of ``function``, keeping raw ones when resolution fails.

    :param function: Function to inspect.
    :returns: Mapping of parameter name to annotation.
    """
    try:
        return typing.get_type_hints(function)
    except (NameError, TypeError, AttributeError):
        raw: object = getattr(function, "__annotations__", {})
        if isinstance(raw, dict) is True:
            return dict(raw)  # type: ignore[arg-type]
        return {}


def _method_from_signature(
    declaring_type: type,
    name: str,
    declaration: Callable[..., object],
    implementation: Callable[..., object],
    has_receiver: bool,
) -> Method | None:
    """Read one declaration's positional parameters into a :class:`Method`.

    :param declaring_type: Class declaring the method.
    :param name: Method name.
    :param declaration: Function whose signature is read (an overload variant or the implementation).
    :param implementation: Function actually executed.
    :param has_receiver: Whether the first positional parameter binds ``self`` or ``cls``.
    :returns: Method identity, or ``None`` when the callable exposes no signature.
    """
    try:
        signature: inspect.Signature = inspect.signature(declaration)
    except (TypeError, ValueError):
        return None

    hints: dict[str, Any] = _type_hints(declaration)
    parameters: list[inspect.Parameter] = list(signature.parameters.values())
    if has_receiver is True and len(parameters) > 0 and parameters[0].kind in _POSITIONAL_KINDS:
        parameters = parameters[1:]

    parameter_types: list[Any] = []
    required_count: int = 0
    variadic_type: Any = None
    for parameter in parameters:
        annotation: Any = hints.get(parameter.name, parameter.annotation)
        if annotation is inspect.Parameter.empty:
            annotation = object
        if parameter.kind in _POSITIONAL_KINDS:
            parameter_types.append(annotation)
            if parameter.default is inspect.Parameter.empty:
                required_count += 1
        elif parameter.kind is inspect.Parameter.VAR_POSITIONAL:
            variadic_type = annotation
    return Method(
        declaring_type,
        name,
        parameter_types,
        required_count=required_count,
        variadic_type=variadic_type,
        function=implementation,
    )


def methods_named(type_object: type, method_name: str) -> list[Method]:
    """List every declaration of ``method_name`` visible on ``type_object``.

    The attribute found first along the MRO wins, as in normal attribute lookup.
    Functions declared with ``typing.overload`` yield one entry per overload in
    declaration order; other callables yield a single entry.

    :param type_object: Class to inspect.
    :param method_name: Method name.
    :returns: Declarations in declaration order; empty when the name is not a method.
    """
    declaring_type: type | None = None
    raw: object = None
    for klass in type_object.__mro__:
        namespace: Mapping[str, object] = vars(klass)
        if method_name in namespace:
            declaring_type = klass
            raw = namespace[method_name]
            break
    if declaring_type is None:
        return []

    has_receiver: bool = True
    function: object = raw
    if isinstance(raw, staticmethod) is True:
        function = raw.__func__  # type: ignore[union-attr]
        has_receiver = False
    elif isinstance(raw, classmethod) is True:
        function = raw.__func__  # type: ignore[union-attr]
    elif isinstance(raw, property) is True or callable(raw) is False:
        return []

    declarations: Sequence[Callable[..., object]] = ()
    if inspect.isfunction(function) is True:
        declarations = typing.get_overloads(function)  # type: ignore[arg-type]
    if len(declarations) == 0:
        declarations = (function,)  # type: ignore[assignment]

    methods: list[Method] = []
    for declaration in declarations:
        method: Method | None = _method_from_signature(
            declaring_type,
            method_name,
            declaration,
            function,  # type: ignore[arg-type]
            has_receiver,
        )
        if method is not None:
            methods.append(method)
    return methods


def _matches_forward_reference(reference: str, value: object) -> MatchKind:
    """Classify ``value`` against an annotation that could not be resolved."""
    value_type: type = type(value)
    if value_type.__qualname__ == reference or value_type.__name__ == reference:
        return "exact"
    for klass in value_type.__mro__:
        if klass.__qualname__ == reference or klass.__name__ == reference:
            return "loose"
    return "none"


def _classify_primitive(primitive: type, value: object) -> MatchKind:
    """Classify ``value`` against a numeric primitive slot.

    :param primitive: One of ``bool``, ``int``, ``float`` or ``complex``.
    :param value: Argument value.
    :returns: Match classification.
    """
    if value is None:
        return "none"
    value_type: type = type(value)
    if value_type is primitive:
        return "exact"
    for promoted in _NUMERIC_PROMOTIONS[primitive]:
        if value_type is promoted:
            return "loose"
    if isinstance(value, primitive) is True:
        return "loose"
    return "none"


def _accepts(annotation: Any, value: object) -> bool:
    """Report whether ``value`` is acceptable for ``annotation`` at all."""
    return classify_argument(annotation, value) != "none"


def classify_argument(annotation: Any, value: object) -> MatchKind:
    """Classify one argument against one declared parameter annotation.

    ``exact`` means the runtime type is the declared type itself; ``loose`` means
    the value is acceptable through subclassing, numeric promotion, unions or an
    unconstrained annotation; ``none`` disqualifies the candidate. ``None`` is a
    loose match except for numeric primitive slots, which it disqualifies.

    :param annotation: Declared parameter annotation.
    :param value: Argument value.
    :returns: Match classification.
    """
    origin: Any = typing.get_origin(annotation)
    if origin is typing.Annotated:
        return classify_argument(typing.get_args(annotation)[0], value)

    for primitive in _PRIMITIVE_TYPES:
        if annotation is primitive:
            return _classify_primitive(primitive, value)

    if value is None:
        return "loose"
    if annotation is Any or annotation is object:
        if type(value) is object:
            return "exact"
        return "loose"
    if isinstance(annotation, str) is True:
        return _matches_forward_reference(annotation, value)
    if isinstance(annotation, typing.TypeVar) is True:
        bound: Any = annotation.__bound__
        if bound is None or _accepts(bound, value) is True:
            return "loose"
        return "none"
    if origin is typing.Union or origin is types.UnionType:
        for member in typing.get_args(annotation):
            if _accepts(member, value) is True:
                return "loose"
        return "none"
    if origin is Literal:
        if value in typing.get_args(annotation):
            return "loose"
        return "none"
    if isinstance(origin, type) is True:
        if TypeDescriptor(origin).is_instance(value) is True:
            return "loose"
        return "none"
    if isinstance(annotation, type) is True:
        if type(value) is annotation:
            return "exact"
        if TypeDescriptor(annotation).is_instance(value) is True:
            return "loose"
        return "none"

    # Typing constructs without a runtime check accept any value.
    return "loose"


def resolve_method(type_object: type, method_name: str, args: Sequence[object] | None) -> Method:
    """Find the declaration of ``method_name`` on ``type_object`` matching ``args``.

    The first candidate, in declaration order, whose every argument is an exact
    match wins. Without one, the first candidate matching at least loosely is
    returned; several loose candidates are not ranked against each other.

    :param type_object: Class to search.
    :param method_name: Method name.
    :param args: Positional argument values; ``None`` means no arguments.
    :returns: Matching method declaration.
    :raises MethodNotFoundError: If no declaration accepts the arguments.
    """
    arguments: tuple[object, ...] = tuple(args) if args is not None else ()
    loose_candidates: list[Method] = []
    for method in methods_named(type_object, method_name):
        fits_count: bool = method.accepts_count(len(arguments))
        if fits_count is False:
            continue
        exact: bool = True
        disqualified: bool = False
        for position, argument in enumerate(arguments):
            kind: MatchKind = classify_argument(method.parameter_type_at(position), argument)
            if kind == "none":
                disqualified = True
                break
            if kind == "loose":
                exact = False
        if disqualified is True:
            continue
        if exact is True:
            return method
        loose_candidates.append(method)

    if len(loose_candidates) > 0:
        chosen: Method = loose_candidates[0]
        if len(loose_candidates) > 1:
            logger.debug(
                "Ambiguous call %s.%s with %d loose candidates, using %r",
                type_name(type_object),
                method_name,
                len(loose_candidates),
                chosen,
            )
        return chosen

    argument_types: tuple[type, ...] = tuple(type(argument) for argument in arguments)
    rendered: str = ", ".join(type_name(argument_type) for argument_type in argument_types)
    raise MethodNotFoundError(
        f"{type_name(type_object)}.{method_name}({rendered})",
        method_name,
        argument_types,
    )


def parameter_accepts(target: Any, source: Any) -> bool:
    """Check whether a value declared as ``source`` may be passed to a ``target`` parameter.

    :param target: Annotation of the receiving parameter.
    :param source: Annotation the caller declares for the value.
    :returns: ``True`` when the types are coercible; unknown constructs are accepted.
    """
    if target is Any or target is object:
        return True
    target_origin: Any = typing.get_origin(target)
    source_origin: Any = typing.get_origin(source)
    if target_origin is typing.Annotated:
        return parameter_accepts(typing.get_args(target)[0], source)
    if source_origin is typing.Annotated:
        return parameter_accepts(target, typing.get_args(source)[0])
    if source_origin is typing.Union or source_origin is types.UnionType:
        for member in typing.get_args(source):
            if parameter_accepts(target, member) is False:
                return False
        return True
    if target_origin is typing.Union or target_origin is types.UnionType:
        for member in typing.get_args(target):
            if parameter_accepts(member, source) is True:
                return True
        return False
    if isinstance(target_origin, type) is True:
        target = target_origin
    if isinstance(source_origin, type) is True:
        source = source_origin
    if isinstance(target, type) is False or isinstance(source, type) is False:
        return True
    if source is target:
        return True
    promotions: tuple[type, ...] = _NUMERIC_PROMOTIONS.get(target, ())
    for promoted in promotions:
        if source is promoted:
            return True
    return TypeDescriptor(target).is_assignable_from(source)


def signature_compatible(required: Method, offered: Method) -> bool:
    """Check whether ``offered`` can serve every call ``required`` admits.

    :param required: Declaration callers are written against.
    :param offered: Declaration that will actually receive the calls.
    :returns: ``True`` when arity and every parameter type are compatible.
    """
    if offered.accepts_count(required.required_count) is False:
        return False
    if required.is_variadic is True and offered.is_variadic is False:
        return False
    if offered.accepts_count(len(required.parameter_types)) is False:
        return False
    for position, parameter_type in enumerate(required.parameter_types):
        if parameter_accepts(offered.parameter_type_at(position), parameter_type) is False:
            return False
    if required.is_variadic is True:
        return parameter_accepts(offered.parameter_type_at(len(required.parameter_types)), required.variadic_type)
    return True


def method_of_callable(owner: type, method_name: str, bound: Callable[..., object]) -> Method | None:
    """Describe a bound or free callable that is not declared on a class body.

    :param owner: Type reported as declaring type.
    :param method_name: Name the callable is reachable under.
    :param bound: Callable whose signature already excludes any receiver.
    :returns: Method identity, or ``None`` when no signature is available.
    """
    return _method_from_signature(owner, method_name, bound, bound, False)


def _well_known(method_name: str) -> Method:
    """Look up one of the ``object`` methods every proxy answers itself."""
    return methods_named(object, method_name)[0]


EQUALS: Method = _well_known("__eq__")
HASH: Method = _well_known("__hash__")
REPR: Method = _well_known("__repr__")
