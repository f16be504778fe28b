"""Per-request context handed to bound models."""

from __future__ import annotations

import uuid
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from modelbridge.infrastructure.observability import FieldLogger, bind_logger
from modelbridge.services.model import BoundModel, ModelError

if TYPE_CHECKING:
    from modelbridge.app.models import ModelRegistry


def _new_request_id() -> str:
    return uuid.uuid4().hex[:12]


@dataclass
class RequestContext:
    """Error sink, logger and model lookup for a single request.

    Bound models write failures here instead of raising; handlers inspect
    :attr:`errors` (or call ``raise_for_context_errors``) after model calls.
    """

    registry: "ModelRegistry | None" = None
    request_id: str = field(default_factory=_new_request_id)
    log: FieldLogger = field(init=False, repr=False)
    _errors: list[str] = field(default_factory=list, init=False, repr=False)

    def __post_init__(self) -> None:
        self.log = bind_logger("modelbridge.request", request_id=self.request_id)

    def error(self, message: str | None = None) -> list[str]:
        """Append ``message`` when given; always return the error list."""
        if message is not None:
            self._errors.append(message)
        return self._errors

    @property
    def errors(self) -> list[str]:
        return list(self._errors)

    @property
    def has_errors(self) -> bool:
        return bool(self._errors)

    def clear_errors(self) -> None:
        self._errors.clear()

    def model(self, key: str) -> BoundModel:
        """Return the model registered as ``key`` bound to this context."""
        if self.registry is None:
            raise ModelError("no model registry attached to this request context")
        return self.registry.get(key).accept_context(self)
