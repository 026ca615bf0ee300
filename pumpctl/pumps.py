"""Serial interface to a pair of syringe pumps sharing one line."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from enum import Enum, auto
from typing import Any, Callable

import serial

log = logging.getLogger(__name__)

STX = 0x02
ETX = 0x03
DEFAULT_BAUD = 19200


class BasicCommand(Enum):
    START = auto()
    STOP = auto()
    SET_FLOW_RATE = auto()
    SET_DIRECTION = auto()
    GET_STATUS = auto()
    GET_VERSION = auto()


@dataclass(frozen=True)
class Pump:
    address: int
    name: str


class PumpError(Exception):
    """Raised when the pumps cannot be reached or addressed."""


def build_command(cmd: BasicCommand, value: float = 0.0) -> bytes:
    """Return the command text for `cmd`, terminated by a carriage return."""
    if cmd is BasicCommand.START:
        payload = "RUN"
    elif cmd is BasicCommand.STOP:
        payload = "STP"
    elif cmd is BasicCommand.SET_FLOW_RATE:
        payload = f"RAT{value:.2f}"
    elif cmd is BasicCommand.SET_DIRECTION:
        payload = "DIR INF" if value > 0 else "DIR WDR"
    elif cmd is BasicCommand.GET_STATUS:
        payload = "STATUS"
    elif cmd is BasicCommand.GET_VERSION:
        payload = "VER"
    else:
        raise ValueError(f"unknown command {cmd!r}")
    return payload.encode("utf-8") + b"\r"


class FrameParser:
    """Collects bytes and yields the text of every complete STX..ETX frame."""

    def __init__(self) -> None:
        self.buffer = bytearray()

    def feed(self, data: bytes) -> list[str]:
        self.buffer.extend(data)
        messages: list[str] = []
        while True:
            start = self.buffer.find(STX)
            end = self.buffer.find(ETX, start + 1)
            if start == -1 or end == -1 or end <= start:
                break
            payload = bytes(self.buffer[start + 1 : end])
            messages.append(payload.decode("utf-8", errors="replace").strip())
            del self.buffer[: end + 1]
        return messages


class PumpInterface:
    """Sends commands to Pump A (address 0) and Pump B (address 1)."""

    def __init__(self, serial_factory: Callable[..., Any] = serial.Serial) -> None:
        self._factory = serial_factory
        self._port: Any = None
        self.parser = FrameParser()
        self.pumps: tuple[Pump, ...] = (Pump(0, "Pump A"), Pump(1, "Pump B"))

    @property
    def is_open(self) -> bool:
        return self._port is not None and bool(self._port.is_open)

    def __enter__(self) -> "PumpInterface":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close_port()

    def open_port(self, port_name: str, baud_rate: int = DEFAULT_BAUD) -> None:
        """Open the line, raise DTR/RTS and ask each pump for its version."""
        self.close_port()
        try:
            port = self._factory(
                port=port_name,
                baudrate=baud_rate,
                bytesize=serial.EIGHTBITS,
                parity=serial.PARITY_NONE,
                stopbits=serial.STOPBITS_ONE,
                xonxoff=False,
                rtscts=False,
            )
        except (serial.SerialException, OSError) as exc:
            raise PumpError(f"Failed to open port: {exc}") from exc
        port.dtr = True
        port.rts = True
        self._port = port
        log.debug("Port opened successfully: %s", port_name)
        self.broadcast_command(BasicCommand.GET_VERSION)

    def close_port(self) -> None:
        if self.is_open:
            self._port.close()
        self._port = None

    def broadcast_command(self, cmd: BasicCommand, value: float = 0.0) -> None:
        for pump in self.pumps:
            self.send_command(pump.address, cmd, value)

    def send_to_pump(self, name: str, cmd: BasicCommand, value: float = 0.0) -> bool:
        for pump in self.pumps:
            if pump.name == name:
                return self.send_command(pump.address, cmd, value)
        raise PumpError(f"Pump with name {name} not found.")

    def send_command(self, address: int, cmd: BasicCommand, value: float = 0.0) -> bool:
        """Write one addressed packet; return whether all of it was written."""
        if not self.is_open:
            raise PumpError("Serial port not open.")
        packet = bytes([address]) + build_command(cmd, value)
        try:
            written = self._port.write(packet)
        except serial.SerialException as exc:
            raise PumpError(f"Serial error: {exc}") from exc
        log.debug("Sending to pump %d: %s", address, packet.hex(" "))
        return written == len(packet)

    def poll(self) -> list[str]:
        """Read whatever has arrived and return the replies completed by it."""
        if not self.is_open:
            raise PumpError("Serial port not open.")
        try:
            waiting = self._port.in_waiting
            data = self._port.read(waiting) if waiting else b""
        except serial.SerialException as exc:
            raise PumpError(f"Serial error: {exc}") from exc
        messages = self.parser.feed(data)
        log.debug("Current buffer: %s", bytes(self.parser.buffer).hex(" "))
        return messages