"""Unit tests for the advisory state cells and signals."""

from unittest.mock import Mock

from src.drive.state import AccessState, ObservableValue, Signal


class TestObservableValue:
    def test_notifies_on_change(self):
        cell = ObservableValue(True)
        slot = Mock()
        cell.changed.connect(slot)

        cell.set(False)

        slot.assert_called_once_with(cell, {"name": "value", "old_value": True, "new_value": False})
        assert cell.get() is False

    def test_silent_when_unchanged(self):
        cell = ObservableValue(True)
        slot = Mock()
        cell.changed.connect(slot)

        cell.set(True)

        slot.assert_not_called()


class TestSignal:
    def test_failing_slot_does_not_block_others(self):
        signal = Signal("sender")
        bad = Mock(side_effect=RuntimeError("boom"))
        good = Mock()
        signal.connect(bad)
        signal.connect(good)

        signal.emit("args")

        good.assert_called_once_with("sender", "args")

    def test_disconnect_and_clear(self):
        signal = Signal("sender")
        first, second = Mock(), Mock()
        signal.connect(first)
        signal.connect(second)
        signal.disconnect(first)
        signal.emit(1)
        signal.clear()
        signal.emit(2)

        first.assert_not_called()
        second.assert_called_once_with("sender", 1)


class TestAccessState:
    def test_initial_values(self):
        state = AccessState()
        assert state.user_valid.get() is True
        assert state.rate_limited.get() is False

    def test_mark_ok_resets_both_flags(self):
        state = AccessState()
        state.user_valid.set(False)
        state.rate_limited.set(True)

        state.mark_ok()

        assert state.user_valid.get() is True
        assert state.rate_limited.get() is False
