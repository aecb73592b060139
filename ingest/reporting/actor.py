from abc import ABC, abstractmethod

ActorId = int | str


class BaseActorContext(ABC):
    """Resolves the identity of the currently authenticated actor."""

    @abstractmethod
    def current_actor_id(self) -> ActorId | None:
        """Return the current actor's id, or None when nobody is authenticated."""


class AnonymousActorContext(BaseActorContext):
    def current_actor_id(self) -> ActorId | None:
        return None


class StaticActorContext(BaseActorContext):
    """Actor fixed at construction, e.g. the user resolved by the request layer."""

    def __init__(self, actor_id: ActorId | None) -> None:
        self._actor_id = actor_id

    def current_actor_id(self) -> ActorId | None:
        return self._actor_id
