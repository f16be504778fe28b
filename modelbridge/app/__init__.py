"""FastAPI integration: request contexts, the model registry and dependencies."""

from .context import RequestContext
from .dependencies import (ModelRegistryDep, RequestContextDep,
                           get_model_registry, get_request_context,
                           install_models, model_dependency,
                           raise_for_context_errors)
from .models import ModelRegistry

__all__ = [
    "ModelRegistry",
    "ModelRegistryDep",
    "RequestContext",
    "RequestContextDep",
    "get_model_registry",
    "get_request_context",
    "install_models",
    "model_dependency",
    "raise_for_context_errors",
]
