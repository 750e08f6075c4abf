"""A result that is either a single value or an iterable collection."""

from __future__ import annotations

from typing import Any, Iterable, Iterator


class MetaResult:
    """Holds a single value, or a list of values when ``iterable`` is true.

    A single-valued result unwraps to its value; an iterable one can be
    appended to and iterated but not unwrapped.
    """

    def __init__(self, iterable: bool = False, data: Any = None) -> None:
        self.iterable = bool(iterable)
        if self.iterable:
            self.data: Any = [] if data is None else list(data)
        else:
            self.data = data

    def unwrap(self) -> Any:
        """Return the single value held."""
        if self.iterable:
            raise TypeError("an iterable MetaResult has no single value")
        return self.data

    def append(self, item: Any) -> None:
        """Add ``item`` to an iterable result."""
        if not self.iterable:
            raise TypeError("cannot append to a single-valued MetaResult")
        self.data.append(item)

    def __iter__(self) -> Iterator[Any]:
        if not self.iterable:
            raise TypeError("this MetaResult is not iterable")
        return iter(self.data)

    def __repr__(self) -> str:
        return f"MetaResult(iterable={self.iterable!r}, data={self.data!r})"


def convert(value: Any, target_type: type) -> Any:
    """Cast ``value`` to ``target_type`` the way a numeric cast would.

    Integers become single characters when the target is ``str`` and single
    characters become their code when the target is ``int``.
    """
    if isinstance(value, MetaResult):
        value = value.unwrap()
    if target_type is str and isinstance(value, int) and not isinstance(value, bool):
        return chr(value)
    if target_type is int and isinstance(value, str):
        if len(value) != 1:
            raise ValueError(f"cannot cast {value!r} to int: not a single character")
        return ord(value)
    return target_type(value)