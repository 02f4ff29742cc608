import logging

from lumen.core.signal import SignalBridge


def test_connect_and_emit():
    bridge = SignalBridge()
    got = []
    bridge.connect("ping", lambda *args, **kwargs: got.append((args, kwargs)))

    bridge.emit("ping", 1, 2, key="v")
    assert got == [((1, 2), {"key": "v"})]
    assert bridge.is_connected("ping")
    assert not bridge.is_connected("pong")


def test_disconnect():
    bridge = SignalBridge()
    got = []
    conn = bridge.connect("ping", got.append)
    conn.disconnect()

    bridge.emit("ping", 1)
    assert got == []
    # Second disconnect is a no-op
    conn.disconnect()


def test_disconnect_during_emit_is_deferred():
    bridge = SignalBridge()
    got = []
    conns = []

    def first(value):
        got.append(("first", value))
        conns[1].disconnect()

    conns.append(bridge.connect("ping", first))
    conns.append(bridge.connect("ping", lambda value: got.append(("second", value))))

    bridge.emit("ping", 1)
    bridge.emit("ping", 2)
    assert got == [("first", 1), ("second", 1), ("first", 2)]


def test_block_unblock():
    bridge = SignalBridge()
    got = []
    bridge.connect("ping", got.append)

    bridge.block("ping")
    bridge.emit("ping", 1)
    bridge.unblock("ping")
    bridge.emit("ping", 2)
    assert got == [2]


def test_handler_error_is_logged_and_others_run(caplog):
    bridge = SignalBridge()
    got = []

    def broken(value):
        raise ValueError("boom")

    bridge.connect("ping", broken)
    bridge.connect("ping", got.append)

    with caplog.at_level(logging.ERROR, logger="lumen.core.signal"):
        bridge.emit("ping", 7)

    assert got == [7]
    assert "boom" in caplog.text


def test_disconnect_all():
    bridge = SignalBridge()
    bridge.connect("a", print)
    bridge.connect("b", print)
    bridge.disconnect_all("a")
    assert not bridge.is_connected("a")
    assert bridge.is_connected("b")
    bridge.disconnect_all()
    assert not bridge.is_connected("b")


if __name__ == "__main__":
    test_connect_and_emit()
    test_disconnect()
    test_block_unblock()
