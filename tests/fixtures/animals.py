"""Type hierarchies shared by the swapproxy tests."""

import abc
from typing import Protocol
from typing import overload
from typing import runtime_checkable


class Animal(abc.ABC):
    """Interface implemented by every animal delegate."""

    @abc.abstractmethod
    def speak(self) -> str:
        """Return the animal's sound.

        :returns: Sound text.
        """

    @abc.abstractmethod
    def feed(self, amount: int) -> int:
        """Feed the animal.

        :param amount: Portion size.
        :returns: Total amount eaten so far.
        """


class Named(abc.ABC):
    """Interface for objects with a name."""

    @property
    @abc.abstractmethod
    def name(self) -> str:
        """Return the name.

        :returns: Name text.
        """


class Pet(Animal, Named):
    """Interface combining :class:`Animal` and :class:`Named`."""


class Dog(Pet):
    """Concrete pet."""

    eaten: int
    _name: str

    def __init__(self, name: str = "rex") -> None:
        """Initialize the dog.

        :param name: Dog name.
        """
        self._name = name
        self.eaten = 0

    @property
    def name(self) -> str:
        """Return the dog's name.

        :returns: Name text.
        """
        return self._name

    def speak(self) -> str:
        """Bark.

        :returns: Sound text.
        """
        return "woof"

    def feed(self, amount: int) -> int:
        """Eat ``amount``.

        :param amount: Portion size.
        :returns: Total amount eaten so far.
        """
        self.eaten += amount
        return self.eaten


class Puppy(Dog):
    """Dog subclass with its own sound."""

    def speak(self) -> str:
        """Yip.

        :returns: Sound text.
        """
        return "yip"


class Cat(Animal):
    """Animal that is not :class:`Named`."""

    def speak(self) -> str:
        """Meow.

        :returns: Sound text.
        """
        return "meow"

    def feed(self, amount: int) -> int:
        """Ignore the food.

        :param amount: Portion size.
        :returns: Always ``0``.
        """
        _ = amount
        return 0


class Robot:
    """Structurally compatible with :class:`Animal` without inheriting from it."""

    def speak(self) -> str:
        """Beep.

        :returns: Sound text.
        """
        return "beep"

    def feed(self, amount: int) -> int:
        """Convert food into charge.

        :param amount: Portion size.
        :returns: Charge gained.
        """
        return amount * 10


class FloatFeeder(Robot):
    """Robot accepting any real portion size."""

    def feed(self, amount: float) -> int:
        """Accept fractional portions.

        :param amount: Portion size.
        :returns: Rounded portion.
        """
        return round(amount)


class StrFeeder(Robot):
    """Robot whose ``feed`` takes text, which an ``int`` caller cannot supply."""

    def feed(self, amount: str) -> int:  # type: ignore[override]
        """Parse the portion size.

        :param amount: Portion size as text.
        :returns: Parsed portion.
        """
        return int(amount)


class Mute:
    """Has the right member names but ``speak`` needs an argument."""

    def speak(self, volume: int) -> str:
        """Speak at a volume.

        :param volume: Loudness.
        :returns: Sound text.
        """
        return "." * volume

    def feed(self, amount: int) -> int:
        """Eat.

        :param amount: Portion size.
        :returns: Portion size.
        """
        return amount


class Rock:
    """Offers none of the animal members."""


@runtime_checkable
class Speaker(Protocol):
    """Structural interface for anything that speaks."""

    def speak(self) -> str:
        """Return a sound.

        :returns: Sound text.
        """
        ...


class Walker(Protocol):
    """Protocol that is not runtime checkable."""

    def walk(self) -> int:
        """Walk.

        :returns: Steps taken.
        """
        ...


class Strider(Walker):
    """Nominal implementation of :class:`Walker`."""

    def walk(self) -> int:
        """Walk a few steps.

        :returns: Steps taken.
        """
        return 3


class Top(abc.ABC):
    """Root of a diamond interface hierarchy."""

    @abc.abstractmethod
    def top(self) -> str:
        """Top member."""


class Left(Top):
    """Left side of the diamond."""

    @abc.abstractmethod
    def left(self) -> str:
        """Left member."""


class Right(Top):
    """Right side of the diamond."""

    @abc.abstractmethod
    def right(self) -> str:
        """Right member."""


class Bottom(Left, Right):
    """Interface reaching :class:`Top` twice."""

    @abc.abstractmethod
    def bottom(self) -> str:
        """Bottom member."""


class Diamond(Bottom):
    """Implements the whole diamond."""

    def top(self) -> str:
        return "top"

    def left(self) -> str:
        return "left"

    def right(self) -> str:
        return "right"

    def bottom(self) -> str:
        return "bottom"


class SubDiamond(Diamond):
    """Inherits every interface through its superclass."""


class Base:
    """Root of a plain class chain."""


class Middle(Base):
    """Middle of a plain class chain."""


class Leaf(Middle):
    """Leaf of a plain class chain."""


class Other:
    """Unrelated to :class:`Base`."""


class Tagged:
    """Concrete class used as a second base."""


class TaggedMiddle(Middle, Tagged):
    """Extends two concrete classes."""


class TaggedOnly(Tagged):
    """Shares only :class:`Tagged` with :class:`TaggedMiddle`."""


class Counter:
    """Declares ``add`` overloads with ``int`` first."""

    @overload
    def add(self, value: int) -> str: ...

    @overload
    def add(self, value: float) -> str: ...

    def add(self, value: object) -> str:
        """Report which numeric kind arrived.

        :param value: Number to add.
        :returns: Runtime type name of ``value``.
        """
        return type(value).__name__


class ReversedCounter:
    """Declares ``add`` overloads with ``float`` first."""

    @overload
    def add(self, value: float) -> str: ...

    @overload
    def add(self, value: int) -> str: ...

    def add(self, value: object) -> str:
        """Report which numeric kind arrived.

        :param value: Number to add.
        :returns: Runtime type name of ``value``.
        """
        return type(value).__name__


class Greeter:
    """Methods with defaults, variadics, static and class methods."""

    def greet(self, name: str, punctuation: str = "!") -> str:
        """Greet someone.

        :param name: Person to greet.
        :param punctuation: Trailing punctuation.
        :returns: Greeting text.
        """
        return f"hello {name}{punctuation}"

    def describe(self, animal: Animal) -> str:
        """Describe an animal by its sound.

        :param animal: Animal to describe.
        :returns: Description text.
        """
        return f"it says {animal.speak()}"

    def total(self, *values: int) -> int:
        """Sum integers.

        :param values: Integers to add.
        :returns: Sum.
        """
        return sum(values)

    @staticmethod
    def shout(text: str) -> str:
        """Upper-case ``text``.

        :param text: Text to shout.
        :returns: Upper-cased text.
        """
        return text.upper()

    @classmethod
    def create(cls, name: str) -> "Greeter":
        """Build a greeter.

        :param name: Unused label.
        :returns: New greeter.
        """
        _ = name
        return cls()
