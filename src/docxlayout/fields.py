"""Two-way bindings for editable bookmark fields.

The renderer binds each editable ``TextBlock`` to the value stored here under
its ``editable_field_name``; user edits are written back with ``set`` and read
out with ``values_snapshot``.
"""

from __future__ import annotations

import logging
from typing import Callable, Dict, Iterator, List, Mapping

from docxlayout.exceptions import ReadOnlyFieldError
from docxlayout.ir import DocumentLayout

logger = logging.getLogger(__name__)

Listener = Callable[[str, str], None]


class FieldBindings(Mapping[str, str]):
    """Current text of every editable field, keyed by field name."""

    def __init__(self, initial: Mapping[str, str], read_only: bool = False) -> None:
        self._values: Dict[str, str] = dict(initial)
        self.read_only = read_only
        self._listeners: List[Listener] = []

    @classmethod
    def from_layout(cls, layout: DocumentLayout, read_only: bool = False) -> "FieldBindings":
        return cls(layout.fields, read_only=read_only)

    def __getitem__(self, name: str) -> str:
        return self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def set(self, name: str, text: str) -> None:
        """Store an edit and notify listeners if the value changed.

        Raises:
            KeyError: ``name`` is not a field of the document.
            ReadOnlyFieldError: the bindings are read-only.
        """
        if name not in self._values:
            raise KeyError(name)
        if self.read_only:
            raise ReadOnlyFieldError(f"Field '{name}' is read-only")
        if self._values[name] == text:
            return
        self._values[name] = text
        logger.debug(f"Field {name} updated")
        for listener in list(self._listeners):
            listener(name, text)

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener(name, text)``; returns a callable that unsubscribes it."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def values_snapshot(self) -> Dict[str, str]:
        """Copy of all current values."""
        return dict(self._values)
