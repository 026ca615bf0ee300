import pytest
import serial

from pumpctl.pumps import (
    BasicCommand,
    FrameParser,
    Pump,
    PumpError,
    PumpInterface,
    build_command,
)


class FakeSerial:
    def __init__(self, **settings):
        self.settings = settings
        self.is_open = True
        self.written = []
        self.incoming = bytearray()
        self.dtr = False
        self.rts = False

    def write(self, data):
        self.written.append(bytes(data))
        return len(data)

    @property
    def in_waiting(self):
        return len(self.incoming)

    def read(self, size):
        data = bytes(self.incoming[:size])
        del self.incoming[:size]
        return data

    def close(self):
        self.is_open = False


class Factory:
    def __init__(self):
        self.ports = []

    def __call__(self, **settings):
        port = FakeSerial(**settings)
        self.ports.append(port)
        return port


def failing_factory(**settings):
    raise serial.SerialException("busy")


@pytest.fixture
def opened():
    factory = Factory()
    iface = PumpInterface(serial_factory=factory)
    iface.open_port("TEST")
    return iface, factory.ports[-1]


@pytest.mark.parametrize(
    "cmd, value, expected",
    [
        (BasicCommand.START, 0.0, b"RUN\r"),
        (BasicCommand.STOP, 0.0, b"STP\r"),
        (BasicCommand.SET_FLOW_RATE, 1.25, b"RAT1.25\r"),
        (BasicCommand.SET_DIRECTION, 1.0, b"DIR INF\r"),
        (BasicCommand.SET_DIRECTION, 0.0, b"DIR WDR\r"),
        (BasicCommand.GET_STATUS, 0.0, b"STATUS\r"),
        (BasicCommand.GET_VERSION, 0.0, b"VER\r"),
    ],
)
def test_build_command(cmd, value, expected):
    assert build_command(cmd, value) == expected


def test_parser_extracts_complete_frames():
    parser = FrameParser()
    assert parser.feed(b"\x02 first \x03\x02second\x03") == ["first", "second"]
    assert parser.buffer == bytearray()


def test_parser_waits_for_partial_frame():
    parser = FrameParser()
    assert parser.feed(b"\x02hal") == []
    assert parser.feed(b"f\x03rest") == ["half"]
    assert parser.buffer == bytearray(b"rest")


def test_parser_keeps_data_without_start_byte():
    parser = FrameParser()
    assert parser.feed(b"noise\x03") == []
    assert parser.buffer == bytearray(b"noise\x03")


def test_open_port_sends_version_to_both_pumps(opened):
    iface, port = opened
    assert iface.is_open
    assert port.written == [b"\x00VER\r", b"\x01VER\r"]
    assert port.dtr is True and port.rts is True
    assert port.settings["port"] == "TEST"
    assert port.settings["baudrate"] == 19200


def test_open_port_failure_raises():
    iface = PumpInterface(serial_factory=failing_factory)
    with pytest.raises(PumpError, match="Failed to open port"):
        iface.open_port("COM9")
    assert not iface.is_open


def test_send_to_pump_addresses_by_name(opened):
    iface, port = opened
    assert iface.send_to_pump("Pump B", BasicCommand.SET_FLOW_RATE, 1.25) is True
    assert port.written[-1] == b"\x01RAT1.25\r"


def test_send_to_unknown_pump_raises(opened):
    iface, _ = opened
    with pytest.raises(PumpError, match="Pump C"):
        iface.send_to_pump("Pump C", BasicCommand.START)


def test_broadcast(opened):
    iface, port = opened
    iface.broadcast_command(BasicCommand.STOP)
    assert port.written[-2:] == [b"\x00STP\r", b"\x01STP\r"]


def test_send_when_closed_raises():
    iface = PumpInterface(serial_factory=Factory())
    with pytest.raises(PumpError, match="not open"):
        iface.send_command(0, BasicCommand.START)


def test_close_port(opened):
    iface, port = opened
    iface.close_port()
    assert port.is_open is False
    assert iface.is_open is False


def test_context_manager_closes(opened):
    iface, port = opened
    with iface:
        pass
    assert port.is_open is False


def test_poll_returns_replies(opened):
    iface, port = opened
    port.incoming.extend(b"\x0200S\x03\x02par")
    assert iface.poll() == ["00S"]
    port.incoming.extend(b"tial\x03")
    assert iface.poll() == ["partial"]


def test_default_pumps():
    iface = PumpInterface(serial_factory=Factory())
    assert iface.pumps == (Pump(0, "Pump A"), Pump(1, "Pump B"))