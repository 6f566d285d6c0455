from enum import Enum
from typing import Callable, List, Optional, Tuple

import structlog
from pydantic import BaseModel, ConfigDict

logger = structlog.get_logger()


class EventKind(str, Enum):
    VARIABLES_CHANGED = "variables_changed"
    FUNCTIONS_CHANGED = "functions_changed"
    SCOPES_CHANGED = "scopes_changed"
    ACTIVE_SCOPE_CHANGED = "active_scope_changed"
    DOCUMENT_CLEARED = "document_cleared"


class RegistryEvent(BaseModel):
    model_config = ConfigDict(frozen=True)

    document: str
    kind: EventKind
    name: Optional[str] = None
    scope_id: Optional[str] = None


Listener = Callable[[RegistryEvent], None]


class EventBus:
    """
    Push-based change notification. Listeners run synchronously, in subscription
    order, after the mutation they describe has been applied. A listener that
    raises is logged and skipped; the remaining listeners are still notified.
    """

    def __init__(self):
        self._subscriptions: List[Tuple[int, Optional[str], Listener]] = []
        self._next_token = 0

    def subscribe(self, listener: Listener, document: Optional[str] = None) -> Callable[[], None]:
        """Registers `listener` (for one document, or all when None). Returns its unsubscribe handle."""
        token = self._next_token
        self._next_token += 1
        self._subscriptions.append((token, document, listener))

        def unsubscribe():
            self._subscriptions = [sub for sub in self._subscriptions if sub[0] != token]

        return unsubscribe

    def publish(self, event: RegistryEvent) -> None:
        # Snapshot so listeners may unsubscribe while being notified.
        for _, document, listener in list(self._subscriptions):
            if document is None or document == event.document:
                try:
                    listener(event)
                except Exception:
                    logger.exception("listener_failed", document=event.document, kind=event.kind.value, name=event.name)

    def __len__(self) -> int:
        return len(self._subscriptions)
