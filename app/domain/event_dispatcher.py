# app/domain/event_dispatcher.py
"""
In-process domain event dispatcher.

Subscribers register for an event class; subscribing to a base class
receives every subclass too. Dispatch happens after commit, so a failing
subscriber is logged and never undoes the write that raised the event.
"""

from collections import defaultdict
from typing import Awaitable, Callable, Sequence, TypeVar
from common.logger import get_app_logger
from .events import DomainEvent

logger = get_app_logger(__name__)

E = TypeVar("E", bound=DomainEvent)
EventHandler = Callable[[E], Awaitable[None]]


class DomainEventsDispatcher:
    def __init__(self) -> None:
        self._handlers: dict[type[DomainEvent], list[EventHandler]] = defaultdict(list)

    def subscribe(self, event_type: type[E], handler: EventHandler) -> None:
        self._handlers[event_type].append(handler)

    def handlers_for(self, event: DomainEvent) -> list[EventHandler]:
        handlers: list[EventHandler] = []
        for cls in type(event).__mro__:
            handlers.extend(self._handlers.get(cls, ()))
        return handlers

    async def dispatch(self, events: Sequence[DomainEvent]) -> int:
        """
        Deliver events in order. Returns the number of handler failures.
        """
        failures = 0
        for event in events:
            for handler in self.handlers_for(event):
                try:
                    await handler(event)
                except Exception as e:
                    failures += 1
                    logger.error(
                        "Domain event handler failed",
                        event_name=event.name,
                        handler=getattr(handler, "__qualname__", repr(handler)),
                        error=str(e),
                        exc_info=True,
                    )
        return failures


async def log_domain_event(event: DomainEvent) -> None:
    logger.info(f"Domain event: {event.name}", **event.to_log_dict())


def create_default_dispatcher() -> DomainEventsDispatcher:
    dispatcher = DomainEventsDispatcher()
    dispatcher.subscribe(DomainEvent, log_domain_event)
    return dispatcher


__all__ = [
    "DomainEventsDispatcher",
    "EventHandler",
    "log_domain_event",
    "create_default_dispatcher",
]
