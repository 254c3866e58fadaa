"""Scanners: folds over the elements of an array.

A scanner is seeded with the first visited element (always the one at the
all-zero multi-index) and then updated with every other element. The visit
order of the remaining elements depends on the array order, so only
order-independent folds give backend-independent results.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable

__all__ = [
    'Scanner',
    'FunctionScanner',
    'MinScanner',
    'MaxScanner',
    'MinMaxScanner',
    'SumScanner',
    'as_scanner',
]


class Scanner(ABC):
    """Base class of scanners.

    Example:
        >>> class CountPositive(Scanner):
        ...     def initialize(self, value):
        ...         self.result = int(value > 0)
        ...     def update(self, value):
        ...         self.result += int(value > 0)
        >>> arr.scan(CountPositive())
    """

    result: Any = None

    @abstractmethod
    def initialize(self, value) -> None:
        """Seed the scanner with the first element."""
        ...

    @abstractmethod
    def update(self, value) -> None:
        """Fold one more element."""
        ...


class FunctionScanner(Scanner):
    """Scanner built from an ``initialize(value) -> acc`` and an
    ``update(acc, value) -> acc`` callable."""

    def __init__(self, initialize: Callable[[Any], Any], update: Callable[[Any, Any], Any]):
        self._initialize = initialize
        self._update = update

    def initialize(self, value) -> None:
        self.result = self._initialize(value)

    def update(self, value) -> None:
        self.result = self._update(self.result, value)


class MinScanner(Scanner):

    def initialize(self, value) -> None:
        self.result = value

    def update(self, value) -> None:
        if value < self.result:
            self.result = value


class MaxScanner(Scanner):

    def initialize(self, value) -> None:
        self.result = value

    def update(self, value) -> None:
        if value > self.result:
            self.result = value


class MinMaxScanner(Scanner):
    """Result is a ``(min, max)`` tuple."""

    def initialize(self, value) -> None:
        self._min = self._max = value

    def update(self, value) -> None:
        if value < self._min:
            self._min = value
        if value > self._max:
            self._max = value

    @property
    def result(self):
        return (self._min, self._max)


class SumScanner(Scanner):

    def initialize(self, value) -> None:
        self.result = value

    def update(self, value) -> None:
        self.result = self.result + value


def as_scanner(scanner, update=None) -> Scanner:
    """Return a Scanner for either a Scanner instance or a callable pair."""
    if update is not None:
        return FunctionScanner(scanner, update)
    if not isinstance(scanner, Scanner):
        raise TypeError(
            "scan() expects a Scanner instance or two callables "
            f"(initialize, update), got {type(scanner).__name__}")
    return scanner
