"""Application-wide registry of configured models."""

from __future__ import annotations

from pathlib import Path
from typing import Any, Iterator, Mapping

from modelbridge.infrastructure.db import get_models_config
from modelbridge.infrastructure.observability import get_logger
from modelbridge.services.model import ModelError, RecordModel
from modelbridge.services.registry import ClassRegistry, default_registry

_logger = get_logger(__name__)


class ModelRegistry:
    """Maps model keys (``"Item"``) to their set-up :class:`RecordModel`.

    Models are created and set up when registered, so configuration errors
    surface at application startup rather than on the first request.
    """

    def __init__(self, classes: ClassRegistry | None = None) -> None:
        self.classes = classes if classes is not None else default_registry()
        self._models: dict[str, RecordModel] = {}

    @classmethod
    def from_config(
        cls,
        config_path: Path | str | None = None,
        *,
        classes: ClassRegistry | None = None,
    ) -> "ModelRegistry":
        """Build a registry from the ``models`` section of ``config.json``."""

        registry = cls(classes)
        for key, settings in get_models_config(config_path).items():
            registry.register(key, settings)
        return registry

    def register(
        self,
        key: str,
        model: RecordModel | type[RecordModel] | Mapping[str, Any],
    ) -> RecordModel:
        if key in self._models:
            raise ModelError(f"model '{key}' is already registered")
        if isinstance(model, RecordModel):
            instance = model
        elif isinstance(model, type) and issubclass(model, RecordModel):
            instance = model(registry=self.classes)
        else:
            instance = RecordModel(model, registry=self.classes)
        self._models[key] = instance
        _logger.info(
            "Registered model %s -> %s (manager %s)",
            key,
            instance.name,
            instance.manager,
        )
        return instance

    def get(self, key: str) -> RecordModel:
        try:
            return self._models[key]
        except KeyError:
            raise ModelError(f"no model registered as '{key}'") from None

    def keys(self) -> list[str]:
        return sorted(self._models)

    def items(self) -> Iterator[tuple[str, RecordModel]]:
        for key in self.keys():
            yield key, self._models[key]

    def __contains__(self, key: object) -> bool:
        return key in self._models

    def __len__(self) -> int:
        return len(self._models)
