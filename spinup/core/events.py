"""Deployment events and the synchronous event dispatcher.

Events form a closed set of frozen pydantic models discriminated by their
``type`` tag. Lifecycle events (``start``, ``complete``, ``error``) bracket a
pipeline run; every step additionally publishes ``<step>:start`` followed by
exactly one of ``<step>:complete`` or ``<step>:error``.
"""

from collections import defaultdict
from datetime import datetime, timezone
from typing import Annotated, Any, Callable, Literal, Union

from pydantic import BaseModel, ConfigDict, Field, field_serializer

from spinup.models.pipeline import Step
from spinup.utils.logging import get_logger

logger = get_logger(__name__)

PHASES = ("start", "complete", "error")

EVENT_TYPES: frozenset[str] = frozenset(
    {*PHASES} | {f"{step.value}:{phase}" for step in Step for phase in PHASES}
)


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class BaseEvent(BaseModel):
    """Fields shared by every deployment event."""

    model_config = ConfigDict(frozen=True, arbitrary_types_allowed=True)

    type: str
    timestamp: datetime = Field(default_factory=_utcnow)

    @property
    def step(self) -> str | None:
        """Step name for step-scoped events, None for lifecycle events."""
        step, sep, _ = self.type.partition(":")
        return step if sep else None

    def to_payload(self) -> dict[str, Any]:
        """JSON-safe representation, e.g. for forwarding to a webhook."""
        return self.model_dump(mode="json")


class _ErrorEvent(BaseEvent):
    error: Exception

    @field_serializer("error")
    def serialize_error(self, error: Exception) -> dict[str, str]:
        return {"type": type(error).__name__, "message": str(error)}


class PipelineStarted(BaseEvent):
    type: Literal["start"] = "start"
    repo_path: str
    environment: str


class PipelineCompleted(BaseEvent):
    type: Literal["complete"] = "complete"
    duration_ms: int = Field(ge=0)


class PipelineFailed(_ErrorEvent):
    type: Literal["error"] = "error"


class StepStarted(BaseEvent):
    type: Literal["install:start", "build:start", "deploy:start"]


class InjectStarted(BaseEvent):
    type: Literal["inject:start"] = "inject:start"
    framework: str
    platform: str


class StepCompleted(BaseEvent):
    type: Literal["install:complete", "build:complete"]


class InjectCompleted(BaseEvent):
    type: Literal["inject:complete"] = "inject:complete"
    files_injected: tuple[str, ...]


class DeployCompleted(BaseEvent):
    type: Literal["deploy:complete"] = "deploy:complete"
    # Always None: the deploy tool's output is not parsed for a URL.
    url: str | None = None


class StepFailed(_ErrorEvent):
    type: Literal["install:error", "build:error", "inject:error", "deploy:error"]


DeploymentEvent = Annotated[
    Union[
        PipelineStarted,
        PipelineCompleted,
        PipelineFailed,
        StepStarted,
        InjectStarted,
        StepCompleted,
        InjectCompleted,
        DeployCompleted,
        StepFailed,
    ],
    Field(discriminator="type"),
]

EventListener = Callable[[BaseEvent], None]


class EventDispatcher:
    """Publishes deployment events to registered listeners.

    Listeners subscribe either to every event (wildcard) or to a single event
    type. ``dispatch`` delivers synchronously: wildcard listeners first, then
    listeners of the matching type, each in registration order. A failing
    listener is logged and skipped so it can never abort a pipeline run.
    """

    def __init__(self):
        self._wildcard: list[EventListener] = []
        self._by_type: dict[str, list[EventListener]] = defaultdict(list)

    def subscribe(
        self, listener: EventListener, event_type: str | None = None
    ) -> Callable[[], None]:
        """Register a listener and return a callable that removes it."""
        if event_type is None:
            listeners = self._wildcard
        elif event_type in EVENT_TYPES:
            listeners = self._by_type[event_type]
        else:
            raise ValueError(f"Unknown event type: {event_type}")

        listeners.append(listener)

        def unsubscribe() -> None:
            if listener in listeners:
                listeners.remove(listener)

        return unsubscribe

    def dispatch(self, event: BaseEvent) -> None:
        """Deliver an event to wildcard and type-matching listeners."""
        logger.info("event.dispatched", event_type=event.type)

        for listener in [*self._wildcard, *self._by_type.get(event.type, ())]:
            try:
                listener(event)
            except Exception:
                logger.exception(
                    "event.listener_failed",
                    event_type=event.type,
                    listener=getattr(listener, "__qualname__", repr(listener)),
                )
