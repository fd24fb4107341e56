"""Key-combo registry used to dispatch normal-mode keys."""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass


@dataclass(frozen=True)
class KeyComboBinding:
    """Map one or more key tokens to an action taking the numeric prefix."""

    combos: tuple[str, ...]
    handler: Callable[[int | None], bool | None]


class KeyComboRegistry:
    def __init__(self) -> None:
        self._handlers: dict[str, Callable[[int | None], bool | None]] = {}

    def register_bindings(self, *bindings: KeyComboBinding) -> KeyComboRegistry:
        """Register bindings; later combos overwrite earlier ones."""
        for binding in bindings:
            for combo in binding.combos:
                self._handlers[combo] = binding.handler
        return self

    def __contains__(self, key: str) -> bool:
        return key in self._handlers

    def dispatch(self, key: str, count: int | None = None) -> bool | None:
        """Run the handler bound to ``key``; ``None`` when nothing is bound."""
        handler = self._handlers.get(key)
        if handler is None:
            return None
        return handler(count)
