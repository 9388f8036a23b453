"""
Session change channel

Login and logout are published as discrete SessionEvent objects. Interested
parts of the application subscribe with a callback (plain function or
coroutine function) and get back a handle that removes the subscription.
The channel lives on the application (app.state.session_events); nothing
holds a process-wide "current user".
"""
import inspect
import logging
from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Any, Callable, List, Optional

logger = logging.getLogger(__name__)


class SessionEventKind(str, Enum):
    LOGIN = "login"
    LOGOUT = "logout"
    REGISTERED = "registered"


@dataclass(frozen=True)
class SessionEvent:
    kind: SessionEventKind
    account_id: str
    email: Optional[str] = None
    at: datetime = field(default_factory=datetime.utcnow)


Subscriber = Callable[[SessionEvent], Any]


class SessionEventChannel:
    def __init__(self):
        self._subscribers: List[Subscriber] = []

    def subscribe(self, callback: Subscriber) -> Callable[[], None]:
        self._subscribers.append(callback)

        def unsubscribe():
            if callback in self._subscribers:
                self._subscribers.remove(callback)

        return unsubscribe

    @property
    def subscriber_count(self) -> int:
        return len(self._subscribers)

    async def publish(self, event: SessionEvent) -> None:
        """Deliver event to every subscriber in subscription order.

        A failing subscriber is logged and skipped; it never fails the
        login/logout request that produced the event.
        """
        for callback in list(self._subscribers):
            try:
                result = callback(event)
                if inspect.isawaitable(result):
                    await result
            except Exception:
                logger.exception("Session subscriber failed on %s event", event.kind.value)


def log_session_event(event: SessionEvent) -> None:
    logger.info("🔐 %s: account %s", event.kind.value, event.account_id)
