"""Navigation stack for overlays (modals, the player) owned by the app shell."""
import logging
from dataclasses import dataclass, field
from typing import Callable, List, Optional

logger = logging.getLogger(__name__)

NAVIGATION_KINDS = ("modal", "player")


@dataclass(frozen=True)
class NavigationEntry:
    kind: str
    payload: dict = field(default_factory=dict)

    def __post_init__(self):
        if self.kind not in NAVIGATION_KINDS:
            raise ValueError(f"Unknown navigation kind: {self.kind}")


Listener = Callable[[str, NavigationEntry, "NavigationStack"], None]


class NavigationStack:
    """
    Stack of open overlays.

    Listeners are called with ``(action, entry, stack)`` after every push
    ("push") and pop ("pop"). A failing listener is logged and does not
    stop the others.
    """

    def __init__(self):
        self._entries: List[NavigationEntry] = []
        self._listeners: List[Listener] = []

    def __len__(self) -> int:
        return len(self._entries)

    def push(self, entry: NavigationEntry) -> None:
        self._entries.append(entry)
        self._notify("push", entry)

    def pop(self) -> Optional[NavigationEntry]:
        """Close the top overlay. Returns None when nothing is open."""
        if not self._entries:
            return None
        entry = self._entries.pop()
        self._notify("pop", entry)
        return entry

    def peek(self) -> Optional[NavigationEntry]:
        return self._entries[-1] if self._entries else None

    def clear(self) -> None:
        """Pop every entry, top first."""
        while self._entries:
            self.pop()

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """
        Register a listener.

        Returns:
            Callable that unregisters the listener
        """
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe

    def _notify(self, action: str, entry: NavigationEntry) -> None:
        for listener in list(self._listeners):
            try:
                listener(action, entry, self)
            except Exception as e:
                logger.error(f"Navigation listener failed on {action}: {e}", exc_info=True)
