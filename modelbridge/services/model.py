"""Uniform model adapter over a record class and its manager.

A :class:`RecordModel` is configured once per application with the dotted
name of a record class (plus an optional manager name and eager-load list)::

    class ItemModel(RecordModel):
        config = {"name": "shop.records.Item", "load_with": ["tags"]}

Request handlers never call the prototype directly. They bind it to the
current request context with :meth:`RecordModel.accept_context` and use the
returned :class:`BoundModel`::

    items = request_context.model("Item")
    item = items.fetch(id=42)
    if request_context.has_errors:
        ...
"""

from __future__ import annotations

from typing import Any, ClassVar, Iterator, Mapping, Protocol, Sequence

from pydantic import BaseModel, ConfigDict, ValidationError

from modelbridge.infrastructure.observability import get_logger, log_context
from modelbridge.services.registry import (GENERIC_MANAGER, ClassRegistry,
                                           default_registry)

_logger = get_logger(__name__)

MANAGER_SUFFIX = "Manager"


class ModelError(Exception):
    """Base class for model adapter errors."""


class ModelConfigurationError(ModelError):
    """Raised when a model is configured without a record class name."""


class ModelLoadError(ModelError):
    """Raised when the configured record class cannot be resolved."""


class ErrorContext(Protocol):
    """What the adapter needs from a request context."""

    log: Any

    def error(self, message: str | None = None) -> list[str]: ...


class ModelConfig(BaseModel):
    """Per-model settings, fixed at registration time."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    name: str | None = None
    manager: str | None = None
    load_with: tuple[str, ...] | None = None


def _as_pairs(values: Sequence[Any]) -> list[tuple[Any, Any]]:
    if all(isinstance(v, (tuple, list)) and len(v) == 2 for v in values):
        return [(v[0], v[1]) for v in values]
    if len(values) % 2 == 0:
        return list(zip(values[0::2], values[1::2]))
    raise ModelError(f"expected key/value pairs, got {values!r}")


class RecordModel:
    config: ClassVar[Mapping[str, Any] | None] = None

    def __init__(
        self,
        config: Mapping[str, Any] | ModelConfig | None = None,
        *,
        registry: ClassRegistry | None = None,
        **settings: Any,
    ) -> None:
        if isinstance(config, ModelConfig):
            config = config.model_dump(exclude_unset=True)
        merged = {**(type(self).config or {}), **(config or {}), **settings}
        try:
            self._settings = ModelConfig(**merged)
        except ValidationError as exc:
            raise ModelConfigurationError(
                f"invalid configuration for {type(self).__name__}: {exc}"
            ) from exc
        self._registry = registry if registry is not None else default_registry()
        self.record_class: Any = None
        self.manager_class: Any = None
        self.setup()

    def setup(self) -> None:
        """Resolve the record class and its manager.

        A missing name or an unresolvable record class is fatal. A manager
        that cannot be loaded for any reason, including an error raised while
        importing its module, falls back to the generic record manager.
        """
        name = self._settings.name
        if not name:
            raise ModelConfigurationError(
                f"{type(self).__name__}: need to configure a record class name"
            )
        manager = self._settings.manager or f"{name}{MANAGER_SUFFIX}"

        try:
            record_class = self._registry.resolve(name)
        except Exception as exc:
            raise ModelLoadError(f"cannot load record class '{name}': {exc}") from exc

        try:
            manager_class = self._registry.resolve(manager)
        except Exception as exc:
            _logger.debug(
                "Manager %s unavailable for %s (%s); using %s",
                manager,
                name,
                exc,
                GENERIC_MANAGER,
            )
            manager = GENERIC_MANAGER
            manager_class = self._registry.resolve(GENERIC_MANAGER)

        self._settings = self._settings.model_copy(update={"manager": manager})
        self.record_class = record_class
        self.manager_class = manager_class

    @property
    def settings(self) -> ModelConfig:
        return self._settings

    @property
    def name(self) -> str:
        return self._settings.name or ""

    @property
    def manager(self) -> str:
        return self._settings.manager or ""

    @property
    def load_with(self) -> tuple[str, ...] | None:
        return self._settings.load_with

    def accept_context(self, context: ErrorContext, *args: Any) -> "BoundModel":
        """Return a request-scoped view of this model bound to ``context``."""
        return BoundModel(self, context)

    def _get_objects(self, method: str, /, *args: Any, **kwargs: Any) -> Any:
        """Call ``method`` on the manager with ``object_class`` injected.

        The first positional argument may be a mapping of filters, a
        sequence of key/value pairs or a structured query object (passed on
        as ``query``). Several positional arguments are read as a flat
        key/value list. Keyword arguments are merged last, so filters may use
        any column name, ``method`` included.
        """
        params: dict[str, Any] = {"object_class": self.record_class}
        if args:
            first = args[0]
            if isinstance(first, Mapping):
                extra = args[1:]
                params.update(first)
            elif isinstance(first, (list, tuple)):
                extra = args[1:]
                params.update(_as_pairs(first))
            elif len(args) == 1:
                extra = ()
                params["query"] = first
            else:
                extra = ()
                params.update(_as_pairs(args))
            if extra:
                raise ModelError(
                    f"{method}() takes one filter argument, got {len(args)}"
                )
        params.update(kwargs)

        if self.load_with:
            params["with_objects"] = list(self.load_with)
            params["multi_many_ok"] = True

        return getattr(self.manager_class, method)(**params)

    def __repr__(self) -> str:
        return f"{type(self).__name__}(name={self.name!r}, manager={self.manager!r})"


class BoundModel:
    """A model bound to one request context.

    Holds only the shared prototype and the context reference; creating one
    per request is cheap and never touches the prototype's state.
    """

    __slots__ = ("model", "context")

    def __init__(self, model: RecordModel, context: ErrorContext) -> None:
        self.model = model
        self.context = context

    @property
    def name(self) -> str:
        return self.model.name

    @property
    def manager(self) -> str:
        return self.model.manager

    def _report(self, message: str) -> None:
        with log_context(model=self.model.name):
            self.context.log.error(message)
        self.context.error(message)

    def fetch(self, params: Mapping[str, Any] | None = None, **fields: Any) -> Any:
        """Build a record from ``fields`` and load it when fields were given.

        Returns None after recording an error on the context when the record
        cannot be built or loaded, or when the loaded ``id`` differs from the
        requested one. A None result on its own does not tell "not found"
        apart from a failure; check the context's errors.

        Example::

            item = model.fetch(id=1234)
            if context.has_errors:
                ...
        """
        fields = {**(params or {}), **fields}
        name = self.model.name

        record = None
        try:
            record = self.model.record_class(**fields)
        except Exception as exc:
            self._report(f"can't create new {name} object: {exc}")
            return None
        if not record:
            reason = getattr(record, "error", None) or ""
            self._report(f"can't create new {name} object: {reason}")
            return None

        if not fields:
            return record

        options: dict[str, Any] = {"speculative": True}
        if self.model.load_with:
            options["with_objects"] = list(self.model.load_with)
        try:
            loaded = record.load(**options)
        except Exception as exc:
            self._report(f"{exc}\nno such object")
            return None
        if not loaded:
            self._report("no such object")
            return None

        wanted = fields.get("id")
        if wanted:
            # Compare as text: string keys may come back padded (CHAR columns).
            wanted_text = str(wanted)
            got = str(record.id).rstrip()
            if got != wanted_text:
                self._report(
                    "Error fetching correct id:\n"
                    f"fetched: {wanted_text} {len(wanted_text)}\n"
                    f"but got: {got} {len(got)}"
                )
                return None

        return record

    def fetch_all(self, *args: Any, **kwargs: Any) -> Any:
        return self.model._get_objects("get_objects", *args, **kwargs)

    all = fetch_all

    def search(self, *args: Any, **kwargs: Any) -> Any:
        return self.model._get_objects("get_objects", *args, **kwargs)

    def count(self, *args: Any, **kwargs: Any) -> int:
        return self.model._get_objects("get_objects_count", *args, **kwargs)

    def iterator(self, *args: Any, **kwargs: Any) -> Iterator[Any]:
        return self.model._get_objects("get_objects_iterator", *args, **kwargs)

    def __repr__(self) -> str:
        return f"<BoundModel {self.model.name}>"
