"""FastAPI dependencies that hand request-bound models to route handlers."""

from __future__ import annotations

from typing import Annotated, Any

from fastapi import Depends, FastAPI, HTTPException, Request

from modelbridge.app.context import RequestContext
from modelbridge.app.models import ModelRegistry
from modelbridge.services.model import BoundModel

__all__ = [
    "get_model_registry",
    "get_request_context",
    "install_models",
    "model_dependency",
    "raise_for_context_errors",
    "ModelRegistryDep",
    "RequestContextDep",
]


def install_models(app: FastAPI, registry: ModelRegistry) -> ModelRegistry:
    """Attach ``registry`` to ``app`` so the dependencies below can find it."""

    app.state.models = registry
    return registry


def get_model_registry(request: Request) -> ModelRegistry:
    registry = getattr(request.app.state, "models", None)
    if registry is None:
        raise RuntimeError("install_models() was not called for this application")
    return registry


ModelRegistryDep = Annotated[ModelRegistry, Depends(get_model_registry)]


def get_request_context(
    request: Request, registry: ModelRegistryDep
) -> RequestContext:
    """Return the request's context, creating it on first use.

    The context is kept on ``request.state`` so exception handlers and
    middleware see the same error list as the route handler.
    """

    context = getattr(request.state, "model_context", None)
    if context is None:
        context = RequestContext(registry=registry)
        request.state.model_context = context
    return context


RequestContextDep = Annotated[RequestContext, Depends(get_request_context)]


def model_dependency(key: str) -> Any:
    """Return an ``Annotated`` dependency type for the model named ``key``.

    Usage::

        ItemModelDep = model_dependency("Item")

        @app.get("/items")
        def list_items(items: ItemModelDep):
            return [item.as_dict() for item in items.search(status="active")]
    """

    def _bind_model(context: RequestContextDep) -> BoundModel:
        return context.model(key)

    _bind_model.__name__ = f"get_{key.lower()}_model"
    return Annotated[BoundModel, Depends(_bind_model)]


def raise_for_context_errors(context: RequestContext, status_code: int = 500) -> None:
    """Raise ``HTTPException`` carrying the recorded errors, if there are any."""

    if context.has_errors:
        raise HTTPException(status_code=status_code, detail=context.errors)
