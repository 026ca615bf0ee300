"""Conductivity meter on a serial line, with optional two-point calibration."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Callable

import serial

METER_BAUD = 9600
READ_TIMEOUT = 2.0
MIN_FIELDS = 11
CALIBRATED_UNITS = "mM"


class CondMeterError(Exception):
    """Raised when the meter cannot be reached, read or calibrated."""


@dataclass(frozen=True)
class Measurement:
    """One reading: when the meter took it, its value as text, and its units."""

    time: datetime
    value: str
    units: str


def _to_float(text: str) -> float:
    try:
        return float(text)
    except ValueError:
        return 0.0


def parse_reply(data: bytes) -> Measurement:
    """Parse a comma-separated GETMEAS reply into a raw measurement."""
    fields = data.decode("utf-8", errors="replace").split(",")
    if len(fields) < MIN_FIELDS:
        raise CondMeterError("Failed to read measurement.")
    stamp = f"{fields[4]} {fields[5]}"
    try:
        time = datetime.strptime(stamp, "%m-%d-%Y %H:%M:%S")
    except ValueError as exc:
        raise CondMeterError(f"Invalid measurement time: {stamp!r}") from exc
    return Measurement(time, fields[9], fields[10].strip())


class CondMeter:
    """Reads a conductivity meter and maps readings onto a concentration range."""

    def __init__(
        self,
        port_name: str = "",
        min_conc: float = 0.0,
        max_conc: float = 100.0,
        serial_factory: Callable[..., Any] = serial.Serial,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.min_read = 0.0
        self.max_read = 0.0
        self.min_conc = min_conc
        self.max_conc = max_conc
        self.units = "Units"
        self._clock = clock
        self._port: Any = None
        if port_name:
            try:
                self._port = serial_factory(
                    port=port_name,
                    baudrate=METER_BAUD,
                    bytesize=serial.EIGHTBITS,
                    parity=serial.PARITY_NONE,
                    stopbits=serial.STOPBITS_ONE,
                    xonxoff=False,
                    rtscts=False,
                    timeout=READ_TIMEOUT,
                )
            except (serial.SerialException, OSError) as exc:
                raise CondMeterError(f"Failed to open port: {exc}") from exc
            self.setup()

    @property
    def is_open(self) -> bool:
        return self._port is not None and bool(self._port.is_open)

    @property
    def calibrated(self) -> bool:
        return self.min_read != 0.0 and self.max_read != 0.0

    def __enter__(self) -> "CondMeter":
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def reset(self) -> None:
        """Forget both calibration points."""
        self.min_read = 0.0
        self.max_read = 0.0

    def _check_units(self, units: str) -> None:
        if not self.units:
            self.units = units
        elif self.units != units:
            raise CondMeterError("ERROR -- UNITS DON'T MATCH OTHER SETPOINT!")

    def set_min(self, value: float, units: str) -> None:
        """Record the reading that corresponds to the lowest concentration."""
        if self.max_read != 0.0 and value >= self.max_read:
            raise CondMeterError("ERROR -- MIN POINT GREATER THAN MAX POINT!")
        self._check_units(units)
        self.min_read = value

    def set_max(self, value: float, units: str) -> None:
        """Record the reading that corresponds to the highest concentration."""
        if self.min_read != 0.0 and value <= self.min_read:
            raise CondMeterError("ERROR -- MAX POINT LESS THAN MIN POINT!")
        self._check_units(units)
        self.max_read = value

    def convert(self, reading: float) -> float:
        """Map a reading linearly from the calibration points onto concentration."""
        span = self.max_read - self.min_read
        if span == 0:
            raise CondMeterError("Calibration points are equal.")
        return self.min_conc + (reading - self.min_read) * (
            (self.max_conc - self.min_conc) / span
        )

    def setup(self) -> None:
        """Set the meter's clock to the current time."""
        if not self.is_open:
            return
        stamp = self._clock().strftime("%Y-%m-%d-%H-%M-%S")
        self._port.write(f"SETRTC {stamp}-3\r\n".encode("utf-8"))
        self._port.flush()

    def get_measurement(self) -> Measurement:
        """Ask for a reading; once calibrated it is returned in mM."""
        if not self.is_open:
            raise CondMeterError("Port is not open.")
        try:
            self._port.write(b"GETMEAS\r")
            first = self._port.read(1)
            if not first:
                raise CondMeterError("Failed to read measurement.")
            waiting = self._port.in_waiting
            data = first + (self._port.read(waiting) if waiting else b"")
        except serial.SerialException as exc:
            raise CondMeterError(f"Serial error: {exc}") from exc
        measurement = parse_reply(data)
        if self.calibrated:
            converted = self.convert(_to_float(measurement.value))
            return Measurement(measurement.time, f"{converted:.2f}", CALIBRATED_UNITS)
        return measurement

    def close(self) -> None:
        if self.is_open:
            self._port.close()
        self._port = None