"""Choice of serial ports for the pumps and the conductivity meter."""

from __future__ import annotations

from typing import Iterable

from serial.tools.list_ports import comports

NO_PORT = "None"
TEST_PORT = "TEST"


def available_ports() -> list[str]:
    """Names of the serial ports present on this machine."""
    return [info.name for info in comports()]


class PortSelection:
    """Two choices from one list of ports that are kept from naming the same port."""

    def __init__(self, ports: Iterable[str] | None = None) -> None:
        found = available_ports() if ports is None else list(ports)
        self.items: list[str] = [NO_PORT, TEST_PORT, *found]
        self.pump_index = 0
        self.cond_index = 0

    @property
    def pump(self) -> str:
        return self.items[self.pump_index]

    @property
    def cond(self) -> str:
        return self.items[self.cond_index]

    def _check(self, index: int) -> None:
        if not 0 <= index < len(self.items):
            raise IndexError(f"port index {index} out of range")

    def _clash(self) -> bool:
        return self.pump_index == self.cond_index and self.pump_index > 0

    def select_pump(self, index: int) -> None:
        """Choose the pump port; a clashing meter port steps back one entry."""
        self._check(index)
        self.pump_index = index
        if self._clash():
            self.cond_index -= 1

    def select_cond(self, index: int) -> None:
        """Choose the meter port; a clashing pump port steps back one entry."""
        self._check(index)
        self.cond_index = index
        if self._clash():
            self.pump_index -= 1

    def accept(self) -> tuple[str, str]:
        """Return the chosen (meter, pump) port names."""
        return self.cond, self.pump