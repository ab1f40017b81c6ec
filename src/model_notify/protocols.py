"""Shapes of the host agent runtime objects the hook consumes."""

from dataclasses import dataclass
from typing import Any, Callable, Optional, Protocol


class ModelInfoLike(Protocol):
    """Active model as exposed by the host."""

    provider: str
    id: str


class TurnEndEventLike(Protocol):
    """Turn completion event."""

    turn_index: int


class TurnContextLike(Protocol):
    """Per-event context: active model and owning session."""

    @property
    def model(self) -> Optional[ModelInfoLike]: ...

    @property
    def session_id(self) -> str: ...


class ExtensionAPI(Protocol):
    """Host event registration surface."""

    def on(self, event: str, callback: Callable[[Any, Any], Any]) -> Any:
        """Subscribe ``callback(event, ctx)`` to a named event."""
        ...


# ============================================================================
# Concrete event types
# ============================================================================


@dataclass(frozen=True)
class ModelInfo:
    """Provider and model id of the active model."""

    provider: str  # e.g., "openai"
    id: str  # e.g., "gpt-5"


@dataclass(frozen=True)
class TurnEndEvent:
    """A finished agent turn."""

    turn_index: int


@dataclass(frozen=True)
class TurnContext:
    """Context passed alongside a turn event."""

    session_id: str
    model: Optional[ModelInfo] = None
