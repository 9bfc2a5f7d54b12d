"""Validation report accumulator and the aggregated validation error."""

from __future__ import annotations

from collections.abc import Iterable, Sequence


class ConfigValidationError(ValueError):
    """Raised when one validation pass found any problem.

    ``messages`` keeps every finding in the order the checks ran.
    """

    def __init__(self, messages: Sequence[str]) -> None:
        self.messages = tuple(messages)
        if not self.messages:
            rendered = "unknown validation failure"
        else:
            rendered = "\n  ".join(self.messages)
        super().__init__(f"Invalid configuration:\n  {rendered}")


class ValidationReport:
    __slots__ = ("_items",)

    def __init__(self, initial: Iterable[str] = ()) -> None:
        self._items: list[str] = list(initial)

    def add(self, message: str) -> None:
        self._items.append(message)

    def extend(self, messages: Iterable[str]) -> None:
        self._items.extend(messages)

    def items(self) -> tuple[str, ...]:
        return tuple(self._items)

    def __len__(self) -> int:
        return len(self._items)

    @property
    def has_issues(self) -> bool:
        return bool(self._items)

    def raise_for_issues(self) -> None:
        if self._items:
            raise ConfigValidationError(self._items)


__all__ = ["ConfigValidationError", "ValidationReport"]
