"""Users: aggregate keyed by email, directory projection with a providerId index."""
from __future__ import annotations

import dataclasses
from typing import Any

from es_commerce.application.event_sourcing import (
    AggregateDefinition,
    App,
    CommandResult,
    Event,
    Projection,
    Slice,
    Target,
    validate_payload,
)
from es_commerce.domain import schemas
from es_commerce.domain.invariants import must_be_registered, must_not_be_registered
from es_commerce.kernel.errors import ConflictError
from es_commerce.kernel.security import SYSTEM_ACTOR, Actor

User = (
    AggregateDefinition(
        "User",
        lambda: {
            "email": "",
            "name": "",
            "role": "user",
            "provider": "local",
            "providerId": "",
        },
    )
    .emits(UserRegistered=schemas.UserRegistered, RoleAssigned=schemas.RoleAssigned)
    .on("RegisterUser", schemas.RegisterUser, given=[must_not_be_registered], emit="UserRegistered")
    .on("AssignRole", schemas.AssignRole, given=[must_be_registered], emit="RoleAssigned")
)


@dataclasses.dataclass
class UserProfile:
    email: str
    name: str
    role: schemas.Role
    provider: schemas.Provider
    provider_id: str
    picture: str | None = None
    password_hash: str | None = None

    def as_actor(self) -> Actor:
        return Actor(id=self.email, name=self.name, role=self.role, picture=self.picture)


class UserProjection(Projection):
    def __init__(self) -> None:
        super().__init__("users")
        self._users: dict[str, UserProfile] = {}
        self._by_provider_id: dict[str, str] = {}  # providerId → email (stream)
        self.on("UserRegistered")(self._registered)
        self.on("RoleAssigned")(self._role_assigned)

    def _registered(self, event: Event) -> None:
        data = schemas.UserRegistered.model_validate(event.data)
        self._users[event.stream] = UserProfile(
            email=data.email,
            name=data.name,
            role="user",
            provider=data.provider,
            provider_id=data.provider_id,
            picture=data.picture,
            password_hash=data.password_hash,
        )
        self._by_provider_id[data.provider_id] = event.stream

    def _role_assigned(self, event: Event) -> None:
        user = self._users.get(event.stream)
        if user is not None:
            user.role = schemas.RoleAssigned.model_validate(event.data).role

    def by_email(self, email: str) -> UserProfile | None:
        user = self._users.get(email)
        return dataclasses.replace(user) if user is not None else None

    def by_provider_id(self, provider_id: str) -> UserProfile | None:
        email = self._by_provider_id.get(provider_id)
        return self.by_email(email) if email is not None else None

    def all(self) -> list[UserProfile]:
        return [dataclasses.replace(u) for u in self._users.values()]

    def is_taken(self, email: str, provider_id: str) -> bool:
        return email in self._users or provider_id in self._by_provider_id

    def clear(self) -> None:
        self._users.clear()
        self._by_provider_id.clear()


async def register_user(
    app: App,
    users: UserProjection,
    payload: dict[str, Any] | schemas.RegisterUser,
    *,
    actor: Actor = SYSTEM_ACTOR,
) -> CommandResult:
    """Register a user unless the directory already knows the email or providerId.

    The directory check is advisory: it only sees registrations the
    projection has already drained, so two concurrent sign-ups on
    different emails with one providerId can both pass it.  Same-email
    sign-ups share a stream and are serialised by the aggregate.
    """
    data = validate_payload(schemas.RegisterUser, payload, what="command RegisterUser")
    email, provider_id = data["email"], data["providerId"]
    if users.is_taken(email, provider_id):
        raise ConflictError(
            f"User '{email}' is already registered",
            detail={"email": email, "providerId": provider_id},
        )
    return await app.do("RegisterUser", Target(stream=email, actor=actor), data)


def user_slice(users: UserProjection) -> Slice:
    return Slice("users").with_state(User).with_projection(users)


__all__ = ["User", "UserProfile", "UserProjection", "register_user", "user_slice"]
