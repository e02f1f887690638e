"""Application event sourcing – declarative AggregateDefinition and fold.

An aggregate is described, not subclassed: initial state, the events it may
emit (with their schemas), how each event patches the state, and the
commands it accepts (schema, invariants, emit rule).

Example::

    Cart = (
        AggregateDefinition("Cart", lambda: {"status": "Open", "totalPrice": 0})
        .emits(CartSubmitted=CartSubmitted)
        .patch(CartSubmitted=lambda event, state: {"status": "Submitted"})
        .on("PlaceOrder", PlaceOrder, given=[must_be_open], emit=place_order)
    )
"""

from __future__ import annotations

import copy
import dataclasses
from typing import Any, Callable, Iterable, Mapping, Sequence, Union

import pydantic

from es_commerce.application.event_sourcing.store import Draft
from es_commerce.application.event_sourcing.stored_event import Event
from es_commerce.kernel.ddd import Invariant
from es_commerce.kernel.errors import ValidationError
from es_commerce.kernel.security import Actor

State = dict[str, Any]

#: ``patch(event, state) -> partial state`` merged over the previous state.
PatchFn = Callable[[Event, Mapping[str, Any]], Mapping[str, Any]]


@dataclasses.dataclass(frozen=True)
class CommandContext:
    """What a command handler may look at besides its payload."""

    state: Mapping[str, Any]
    actor: Actor
    stream: str
    version: int


EmitResult = Union[Draft, Sequence[Draft], None]
EmitFn = Callable[[dict[str, Any], CommandContext], EmitResult]


@dataclasses.dataclass(frozen=True)
class Snapshot:
    """Folded state of one stream at ``version``."""

    state: State
    version: int
    event: Event | None = None
    """Last event folded, ``None`` for an empty stream."""


def validate_payload(
    schema: type[pydantic.BaseModel],
    payload: Any,
    *,
    what: str,
) -> dict[str, Any]:
    """Validate *payload* against *schema* and return its wire dict.

    Raises :class:`ValidationError` listing pydantic's field errors.
    """
    try:
        model = payload if isinstance(payload, schema) else schema.model_validate(payload or {})
    except pydantic.ValidationError as exc:
        raise ValidationError(
            f"Invalid payload for {what}",
            errors=[dict(e) for e in exc.errors(include_url=False)],
            cause=exc,
        ) from exc
    return model.model_dump(mode="json", by_alias=True, exclude_none=True)


@dataclasses.dataclass(frozen=True)
class CommandSpec:
    name: str
    schema: type[pydantic.BaseModel]
    emit: str | EmitFn
    given: tuple[Invariant, ...] = ()

    def decide(self, payload: dict[str, Any], ctx: CommandContext) -> list[Draft]:
        """Run the emit rule; a bare event name passes the payload through."""
        if isinstance(self.emit, str):
            return [(self.emit, payload)]
        result = self.emit(payload, ctx)
        if result is None:
            return []
        if isinstance(result, tuple):
            return [result]
        return list(result)


class AggregateDefinition:
    """Pure definition of one aggregate type."""

    def __init__(self, name: str, init: Callable[[], Mapping[str, Any]]) -> None:
        self.name = name
        self._init = init
        self.events: dict[str, type[pydantic.BaseModel]] = {}
        self.patches: dict[str, PatchFn] = {}
        self.commands: dict[str, CommandSpec] = {}

    def __repr__(self) -> str:
        return f"AggregateDefinition({self.name!r})"

    # Builder -------------------------------------------------------------

    def emits(self, **schemas: type[pydantic.BaseModel]) -> AggregateDefinition:
        self.events.update(schemas)
        return self

    def patch(self, **patches: PatchFn) -> AggregateDefinition:
        unknown = set(patches) - set(self.events)
        if unknown:
            raise ValueError(f"{self.name} patches undeclared events: {sorted(unknown)}")
        self.patches.update(patches)
        return self

    def on(
        self,
        command: str,
        schema: type[pydantic.BaseModel],
        *,
        emit: str | EmitFn,
        given: Iterable[Invariant] = (),
    ) -> AggregateDefinition:
        if isinstance(emit, str) and emit not in self.events:
            raise ValueError(f"{self.name} cannot emit undeclared event {emit!r}")
        self.commands[command] = CommandSpec(command, schema, emit, tuple(given))
        return self

    # Fold ----------------------------------------------------------------

    def init(self) -> State:
        return copy.deepcopy(dict(self._init()))

    def apply(self, state: Mapping[str, Any], event: Event) -> State:
        """Merge one event's patch over *state*; events without a patch merge their data."""
        patch = self.patches.get(event.name)
        partial = patch(event, state) if patch is not None else event.data
        return {**state, **copy.deepcopy(dict(partial))}

    def fold(self, events: Iterable[Event], state: Mapping[str, Any] | None = None) -> State:
        folded = self.init() if state is None else dict(state)
        for event in events:
            # streams may be shared with other aggregates
            if event.name in self.events:
                folded = self.apply(folded, event)
        return folded

    def validate_event(self, name: str, data: Any) -> dict[str, Any]:
        schema = self.events.get(name)
        if schema is None:
            raise ValidationError(f"{self.name} does not emit {name!r}")
        return validate_payload(schema, data, what=f"event {name}")


__all__ = [
    "AggregateDefinition",
    "CommandContext",
    "CommandSpec",
    "EmitFn",
    "PatchFn",
    "Snapshot",
    "State",
    "validate_payload",
]
