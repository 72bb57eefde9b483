from sketchpad.input import DeferredCalls, InputPort, KeyEvent, PointerEvent, PressedKeys, WheelEvent


def test_port_fans_out_until_closed():
    port = InputPort()
    seen_a, seen_b = [], []
    sub_a = port.subscribe(seen_a.append)
    port.subscribe(seen_b.append)
    port.emit(KeyEvent("x"))
    sub_a.close()
    sub_a.close()
    port.emit(WheelEvent(0, 1))
    assert seen_a == [KeyEvent("x")]
    assert seen_b == [KeyEvent("x"), WheelEvent(0, 1)]
    assert port.listener_count == 1
    assert not sub_a.active


def test_listener_may_unsubscribe_during_emit():
    port = InputPort()
    seen = []
    subscription = None

    def once(event):
        seen.append(event)
        subscription.close()

    subscription = port.subscribe(once)
    port.emit(KeyEvent("a"))
    port.emit(KeyEvent("b"))
    assert seen == [KeyEvent("a")]


def test_pressed_keys_track_press_and_release():
    keys = PressedKeys()
    keys.update(KeyEvent(" "))
    keys.update(KeyEvent("a"))
    assert " " in keys
    keys.update(KeyEvent(" ", pressed=False))
    assert " " not in keys
    assert len(keys) == 1
    keys.clear()
    assert len(keys) == 0


def test_deferred_calls_run_in_order():
    calls = DeferredCalls()
    order = []
    calls.call_soon(lambda: order.append(1))
    calls.call_soon(lambda: order.append(2))
    assert len(calls) == 2
    assert order == []
    assert calls.run_pending() == 2
    assert order == [1, 2]
    assert calls.run_pending() == 0


def test_pointer_event_position():
    assert PointerEvent(3, 4).position == (3, 4)
