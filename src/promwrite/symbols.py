"""Symbol table for remote-write 2.0 requests.

Every string in a request (metric names, label names and values, help text)
is stored once in the request's symbol list and referenced by index.
"""

from typing import Iterable

class SymbolTable:
    """Ordered, deduplicating string table.

    Reference 0 always points at the empty string, so real strings get
    references starting at 1. A table is meant to live for one batch only.
    """

    def __init__(self):
        self._symbols: list[str] = [""]
        self._refs: dict[str, int] = {"": 0}

    def intern(self, value: str) -> int:
        """Return the reference for ``value``, adding it if it is new."""
        ref = self._refs.get(value)
        if ref is None:
            ref = len(self._symbols)
            self._symbols.append(value)
            self._refs[value] = ref
        return ref

    def intern_labels(self, labels: Iterable[str]) -> list[int]:
        """Intern a flat ``[name, value, name, value, ...]`` label list.

        Names and values are interned independently, so the returned list has
        the same length and order as the input.
        """
        labels = list(labels)
        if len(labels) % 2:
            raise ValueError(f"Label list must hold name/value pairs, got {len(labels)} items")
        return [self.intern(item) for item in labels]

    def symbols(self) -> list[str]:
        """Return a copy of the table in reference order."""
        return list(self._symbols)

    def __len__(self) -> int:
        return len(self._symbols)
