"""Application – Event Sourcing runtime."""

from es_commerce.application.event_sourcing.aggregate import (
    AggregateDefinition,
    CommandContext,
    CommandSpec,
    Snapshot,
    State,
    validate_payload,
)
from es_commerce.application.event_sourcing.app import App
from es_commerce.application.event_sourcing.drain import (
    Ack,
    Correlation,
    Drained,
    Drainer,
    Lease,
    LeaseFailure,
)
from es_commerce.application.event_sourcing.executor import (
    AggregateRegistry,
    CommandExecutor,
    CommandResult,
    Target,
)
from es_commerce.application.event_sourcing.projector import Projection, ProjectionEngine
from es_commerce.application.event_sourcing.reactions import (
    CausalDispatcher,
    Dispatcher,
    Reaction,
    ReactionEngine,
)
from es_commerce.application.event_sourcing.slice import Slice
from es_commerce.application.event_sourcing.store import EventLog, InMemoryEventLog
from es_commerce.application.event_sourcing.stored_event import (
    ActionCausation,
    Causation,
    Event,
    EventCausation,
    EventMeta,
    serialize_events,
)
from es_commerce.application.event_sourcing.subscription import Subscription

__all__ = [
    "Ack",
    "ActionCausation",
    "AggregateDefinition",
    "AggregateRegistry",
    "App",
    "Causation",
    "CausalDispatcher",
    "CommandContext",
    "CommandExecutor",
    "CommandResult",
    "CommandSpec",
    "Correlation",
    "Dispatcher",
    "Drained",
    "Drainer",
    "Event",
    "EventCausation",
    "EventLog",
    "EventMeta",
    "InMemoryEventLog",
    "Lease",
    "LeaseFailure",
    "Projection",
    "ProjectionEngine",
    "Reaction",
    "ReactionEngine",
    "Slice",
    "Snapshot",
    "State",
    "Subscription",
    "Target",
    "serialize_events",
    "validate_payload",
]
