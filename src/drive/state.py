import logging
from typing import Any, Callable, List

logger = logging.getLogger(__name__)

Slot = Callable[[Any, Any], None]


class Signal:
    """Minimal synchronous signal: connected callbacks receive (sender, args)."""

    def __init__(self, sender: Any):
        self.sender = sender
        self._slots: List[Slot] = []

    def connect(self, slot: Slot) -> None:
        if slot not in self._slots:
            self._slots.append(slot)

    def disconnect(self, slot: Slot) -> None:
        if slot in self._slots:
            self._slots.remove(slot)

    def emit(self, args: Any) -> None:
        for slot in list(self._slots):
            try:
                slot(self.sender, args)
            except Exception as exc:
                logger.error(f"Signal handler {slot!r} failed: {exc}")

    def clear(self) -> None:
        self._slots.clear()


class ObservableValue:
    """A value cell that notifies subscribers when it changes.

    Hosts read and subscribe; only the drive's response handlers write.
    """

    def __init__(self, initial: Any = None):
        self._value = initial
        self.changed = Signal(self)

    def get(self) -> Any:
        return self._value

    def set(self, value: Any) -> None:
        old = self._value
        if old == value:
            return
        self._value = value
        self.changed.emit({"name": "value", "old_value": old, "new_value": value})


class AccessState:
    """Advisory flags for the host UI; they never gate drive behaviour."""

    def __init__(self) -> None:
        self.user_valid = ObservableValue(True)
        self.rate_limited = ObservableValue(False)

    def mark_ok(self) -> None:
        self.user_valid.set(True)
        self.rate_limited.set(False)

    def clear(self) -> None:
        self.user_valid.changed.clear()
        self.rate_limited.changed.clear()
