"""Resolve record and manager classes from their string identifiers.

Identifiers are either keys registered explicitly with
:meth:`ClassRegistry.register` or dotted import paths such as
``shop.records.Item`` (nested attributes like ``shop.records.Item.Manager``
are followed too).
"""

from __future__ import annotations

import importlib
from typing import Any

from modelbridge.infrastructure.db.records import Manager
from modelbridge.infrastructure.observability import get_logger

_logger = get_logger(__name__)

GENERIC_MANAGER = "modelbridge.infrastructure.db.records.Manager"


class ClassNotFoundError(LookupError):
    """Raised when an identifier is neither registered nor importable."""


class ClassRegistry:
    def __init__(self, entries: dict[str, Any] | None = None) -> None:
        self._entries: dict[str, Any] = dict(entries or {})

    def register(self, name: str, obj: Any) -> None:
        self._entries[name] = obj

    def unregister(self, name: str) -> None:
        self._entries.pop(name, None)

    def __contains__(self, name: object) -> bool:
        return name in self._entries

    def resolve(self, name: str) -> Any:
        """Return the object registered as ``name`` or import it by path."""

        if name in self._entries:
            return self._entries[name]
        return self._import(name)

    @staticmethod
    def _import(name: str) -> Any:
        parts = name.split(".")
        # Try the longest importable module prefix, then walk attributes.
        for split in range(len(parts) - 1, 0, -1):
            module_name = ".".join(parts[:split])
            try:
                obj = importlib.import_module(module_name)
            except ModuleNotFoundError as exc:
                # A missing submodule means "try a shorter prefix"; a missing
                # dependency inside an existing module is a real failure.
                if exc.name is not None and not module_name.startswith(exc.name):
                    raise ClassNotFoundError(
                        f"importing '{module_name}' for '{name}' failed: {exc}"
                    ) from exc
                continue
            except ImportError as exc:
                raise ClassNotFoundError(
                    f"importing '{module_name}' for '{name}' failed: {exc}"
                ) from exc
            try:
                for attr in parts[split:]:
                    obj = getattr(obj, attr)
            except AttributeError as exc:
                raise ClassNotFoundError(
                    f"'{module_name}' has no attribute path "
                    f"'{'.'.join(parts[split:])}'"
                ) from exc
            _logger.debug("Resolved %s from module %s", name, module_name)
            return obj
        raise ClassNotFoundError(f"cannot resolve '{name}': no importable module")


def default_registry() -> ClassRegistry:
    """Return a fresh registry holding only the generic manager fallback."""

    return ClassRegistry({GENERIC_MANAGER: Manager})
