"""
Tests for the shared input buffer.
"""

import threading

import pytest

from flipshoot.core.input_buffer import Action, Control, InputBuffer, InputFrame


@pytest.fixture
def buffer():
    return InputBuffer()


class TestHeldControls:
    """Level-triggered controls."""

    def test_press_and_release(self, buffer):
        buffer.press(Control.FLAP)
        assert buffer.is_held(Control.FLAP)

        buffer.release(Control.FLAP)
        assert not buffer.is_held(Control.FLAP)

    def test_release_without_press(self, buffer):
        buffer.release(Control.FLAP)
        assert not buffer.is_held(Control.FLAP)

    def test_string_values_accepted(self, buffer):
        buffer.press("flap")
        assert buffer.is_held(Control.FLAP)

    def test_unknown_control_rejected(self, buffer):
        with pytest.raises(ValueError):
            buffer.press("jump")

    def test_unknown_action_rejected(self, buffer):
        with pytest.raises(ValueError):
            buffer.push("reload")

    def test_held_survives_drain(self, buffer):
        buffer.press(Control.FLAP)

        first = buffer.drain()
        second = buffer.drain()

        assert first.flap
        assert second.flap


class TestActionQueue:
    """Edge-triggered one-shot actions."""

    def test_drain_takes_all_actions(self, buffer):
        buffer.push(Action.FIRE)
        buffer.push(Action.FIRE)
        assert buffer.pending == 2

        frame = buffer.drain()

        assert frame.fire_count == 2
        assert buffer.pending == 0
        assert buffer.drain().fire_count == 0

    def test_frame_is_immutable_copy(self, buffer):
        buffer.press(Control.FLAP)
        frame = buffer.drain()

        buffer.release(Control.FLAP)

        assert frame.flap
        assert isinstance(frame.held, frozenset)
        assert isinstance(frame.actions, tuple)

    def test_discard_actions_keeps_held(self, buffer):
        buffer.press(Control.FLAP)
        buffer.push(Action.FIRE)

        buffer.discard_actions()
        frame = buffer.drain()

        assert frame.flap
        assert frame.fire_count == 0

    def test_clear(self, buffer):
        buffer.press(Control.FLAP)
        buffer.push(Action.FIRE)

        buffer.clear()

        assert buffer.drain() == InputFrame.empty()


class TestThreadSafety:
    """Concurrent producers against a single consumer."""

    def test_no_action_lost(self, buffer):
        producers = 4
        per_producer = 1000
        drained = []
        done = threading.Event()

        def produce():
            for _ in range(per_producer):
                buffer.push(Action.FIRE)

        def consume():
            while not done.is_set():
                drained.append(buffer.drain().fire_count)
            drained.append(buffer.drain().fire_count)

        consumer = threading.Thread(target=consume)
        consumer.start()
        threads = [threading.Thread(target=produce) for _ in range(producers)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()
        done.set()
        consumer.join()

        assert sum(drained) == producers * per_producer
