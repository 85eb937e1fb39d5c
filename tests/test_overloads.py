"""Tests for overload-aware method resolution."""

import logging
from typing import Any
from typing import Literal
from typing import Optional

import pytest

from swapproxy import Method
from swapproxy import MethodNotFoundError
from swapproxy import resolve_method
from swapproxy.overloads import EQUALS
from swapproxy.overloads import HASH
from swapproxy.overloads import REPR
from swapproxy.overloads import classify_argument
from swapproxy.overloads import methods_named
from swapproxy.overloads import parameter_accepts
from swapproxy.overloads import signature_compatible
from tests.fixtures.animals import Animal
from tests.fixtures.animals import Cat
from tests.fixtures.animals import Counter
from tests.fixtures.animals import Dog
from tests.fixtures.animals import Greeter
from tests.fixtures.animals import Puppy
from tests.fixtures.animals import ReversedCounter


def test_overloads_listed_in_declaration_order() -> None:
    """Each ``typing.overload`` variant becomes one declaration."""
    declarations: list[Method] = methods_named(Counter, "add")
    parameter_types: list[tuple[Any, ...]] = [method.parameter_types for method in declarations]
    assert parameter_types == [(int,), (float,)]

    reversed_types: list[tuple[Any, ...]] = [method.parameter_types for method in methods_named(ReversedCounter, "add")]
    assert reversed_types == [(float,), (int,)]


@pytest.mark.parametrize("owner", [Counter, ReversedCounter])
def test_exact_match_beats_numeric_promotion(owner: type) -> None:
    """An ``int`` argument selects ``add(int)`` whatever the declaration order."""
    resolved: Method = resolve_method(owner, "add", [3])
    assert resolved == Method(owner, "add", (int,))

    resolved_float: Method = resolve_method(owner, "add", [3.5])
    assert resolved_float == Method(owner, "add", (float,))


def test_first_loose_candidate_wins() -> None:
    """Without an exact match the first acceptable declaration is returned."""
    assert resolve_method(Counter, "add", [True]) == Method(Counter, "add", (int,))
    assert resolve_method(ReversedCounter, "add", [True]) == Method(ReversedCounter, "add", (float,))


def test_ambiguous_loose_match_is_logged(caplog: pytest.LogCaptureFixture) -> None:
    """Several loose candidates are reported at debug level."""
    caplog.set_level(logging.DEBUG, logger="swapproxy.overloads")
    resolve_method(Counter, "add", [True])
    contains_message: bool = "loose candidates" in caplog.text
    assert contains_message is True


def test_none_cannot_fill_numeric_slot() -> None:
    """``None`` disqualifies primitive parameters and reports the argument types."""
    with pytest.raises(MethodNotFoundError) as exc_info:
        resolve_method(Dog, "feed", [None])
    error: MethodNotFoundError = exc_info.value
    assert error.method_name == "feed"
    assert error.argument_types == (type(None),)
    assert str(error) == "tests.fixtures.animals.Dog.feed(NoneType)"


def test_none_is_loose_for_reference_slots() -> None:
    """``None`` is acceptable wherever the slot is not a numeric primitive."""
    resolved: Method = resolve_method(Greeter, "greet", [None])
    assert resolved.parameter_types == (str, str)


def test_unmatched_arguments_raise() -> None:
    """Wrong argument types or counts find no declaration."""
    with pytest.raises(MethodNotFoundError, match=r"Counter\.add\(str\)"):
        resolve_method(Counter, "add", ["three"])
    with pytest.raises(MethodNotFoundError, match=r"Counter\.add\(int, int\)"):
        resolve_method(Counter, "add", [1, 2])
    with pytest.raises(MethodNotFoundError):
        resolve_method(Counter, "missing", [])
    assert issubclass(MethodNotFoundError, LookupError) is True


def test_defaults_and_variadics_widen_arity() -> None:
    """Optional parameters and ``*args`` admit extra positional arguments."""
    greet: Method = resolve_method(Greeter, "greet", ["bob"])
    assert greet.required_count == 1
    assert greet.accepts_count(2) is True
    assert greet.accepts_count(3) is False

    total: Method = resolve_method(Greeter, "total", [1, 2, 3])
    assert total.is_variadic is True
    assert total.parameter_types == ()
    assert resolve_method(Greeter, "total", None) == total
    with pytest.raises(MethodNotFoundError):
        resolve_method(Greeter, "total", [1, "two"])


def test_subclass_argument_is_loose_match() -> None:
    """Instances of subclasses satisfy the declared parameter class."""
    resolved: Method = resolve_method(Greeter, "describe", [Puppy()])
    assert resolved.parameter_types == (Animal,)
    result: object = resolved.invoke(Greeter(), [Cat()])
    assert result == "it says meow"


def test_static_and_class_methods_drop_receiver() -> None:
    """Static methods have no receiver and class methods bind ``cls``."""
    shout: Method = resolve_method(Greeter, "shout", ["hey"])
    assert shout.parameter_types == (str,)
    assert shout.invoke(Greeter(), ["hey"]) == "HEY"

    create: Method = resolve_method(Greeter, "create", ["x"])
    assert create.parameter_types == (str,)


def test_inherited_declaration_reports_declaring_class() -> None:
    """The class whose body defines the method is the declaring type."""
    resolved: Method = resolve_method(Puppy, "feed", [1])
    assert resolved.declaring_type is Dog
    assert methods_named(Dog, "name") == []


@pytest.mark.parametrize(
    "annotation,value,expected",
    [
        (int, 3, "exact"),
        (int, True, "loose"),
        (int, 3.0, "none"),
        (float, 3, "loose"),
        (complex, 1.5, "loose"),
        (int, None, "none"),
        (str, None, "loose"),
        (Optional[int], None, "loose"),
        (int | str, "x", "loose"),
        (int | str, 1.5, "none"),
        (Literal["a", "b"], "a", "loose"),
        (Literal["a", "b"], "c", "none"),
        (list[int], [1], "loose"),
        (list[int], (1,), "none"),
        (Any, 1, "loose"),
        (object, object(), "exact"),
        ("Dog", Dog(), "exact"),
        ("Dog", Puppy(), "loose"),
        ("Dog", Cat(), "none"),
    ],
)
def test_classify_argument(annotation: Any, value: object, expected: str) -> None:
    """Arguments are classified as exact, loose or disqualified."""
    assert classify_argument(annotation, value) == expected


@pytest.mark.parametrize(
    "target,source,expected",
    [
        (int, int, True),
        (float, int, True),
        (int, float, False),
        (complex, bool, True),
        (Animal, Dog, True),
        (Dog, Animal, False),
        (object, str, True),
        (int | str, str, True),
        (int, int | str, False),
        (list[int], list, True),
    ],
)
def test_parameter_accepts(target: Any, source: Any, expected: bool) -> None:
    """Parameter compatibility follows identity, numeric promotion and subclassing."""
    assert parameter_accepts(target, source) is expected


def test_signature_compatible() -> None:
    """A wider offered declaration serves every call a narrower one admits."""
    required: Method = Method(Animal, "feed", (int,))
    assert signature_compatible(required, Method(Dog, "feed", (float,))) is True
    assert signature_compatible(required, Method(Dog, "feed", (str,))) is False
    assert signature_compatible(required, Method(Dog, "feed", (int, int), required_count=1)) is True
    assert signature_compatible(required, Method(Dog, "feed", ())) is False
    assert signature_compatible(required, Method(Dog, "feed", (), variadic_type=int)) is True


def test_method_identity_and_repr() -> None:
    """Identity is the declaring type, name and parameter types."""
    first: Method = Method(Counter, "add", (int,), function=Counter.add)
    second: Method = Method(Counter, "add", [int])
    assert first == second
    assert hash(first) == hash(second)
    assert first != Method(ReversedCounter, "add", (int,))
    assert repr(first) == "Method(tests.fixtures.animals.Counter.add(int))"


def test_well_known_object_methods() -> None:
    """Equality, hashing and representation are located on ``object``."""
    assert EQUALS.declaring_type is object
    assert EQUALS.name == "__eq__"
    assert EQUALS.parameter_types == (object,)
    assert HASH.name == "__hash__"
    assert HASH.parameter_types == ()
    assert REPR.name == "__repr__"
