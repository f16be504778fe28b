"""Service layer: the model adapter and class resolution."""

from .model import (BoundModel, ModelConfig, ModelConfigurationError,
                    ModelError, ModelLoadError, RecordModel)
from .registry import (GENERIC_MANAGER, ClassNotFoundError, ClassRegistry,
                       default_registry)

__all__ = [
    "BoundModel",
    "ClassNotFoundError",
    "ClassRegistry",
    "GENERIC_MANAGER",
    "ModelConfig",
    "ModelConfigurationError",
    "ModelError",
    "ModelLoadError",
    "RecordModel",
    "default_registry",
]
