"""Application state and actions of the pump controller, independent of any GUI."""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from datetime import datetime
from pathlib import Path
from typing import Any, Callable

from pumpctl.console import Color, ColorLike, Console
from pumpctl.plot import PlotModel
from pumpctl.ports import NO_PORT
from pumpctl.protocol import Protocol
from pumpctl.pumps import BasicCommand, PumpError, PumpInterface
from pumpctl.segments import SegmentTable

log = logging.getLogger(__name__)

VERSION = "0.5.0"
MAX_SEGMENT_MINUTES = 30
CONFIRMED_STYLE = "QPushButton { color: mediumseagreen;}"

WIDGETS = (
    "spin_flow_rate",
    "spin_pac",
    "spin_pbc",
    "but_set_coms",
    "but_confirm_settings",
    "spin_straight_conc",
    "but_start_pump",
    "but_update_pump",
    "but_stop_pump",
    "spin_seg_time",
    "spin_start_conc",
    "spin_end_conc",
    "but_add_segment",
    "but_delete_segment",
    "but_clear_segments",
    "but_start_protocol",
    "but_stop_protocol",
    "but_send_protocol",
    "but_set_cond_min",
    "but_set_cond_max",
    "but_reset_cond",
)

_INITIALLY_DISABLED = frozenset(
    {
        "spin_straight_conc",
        "but_start_pump",
        "but_update_pump",
        "but_stop_pump",
        "but_start_protocol",
        "but_stop_protocol",
        "but_send_protocol",
        "but_set_cond_min",
        "but_set_cond_max",
        "but_reset_cond",
    }
)

_PUMP_CONTROLS = ("but_start_pump", "but_update_pump", "but_stop_pump")


def _initial_enabled() -> dict[str, bool]:
    return {name: name not in _INITIALLY_DISABLED for name in WIDGETS}


@dataclass
class Controls:
    """Values and enabled state of the controller's inputs."""

    flow_rate: float = 0.4
    pac: int = 0
    pbc: int = 125
    seg_time: float = 0.0
    start_conc: int = 0
    end_conc: int = 0
    seg_time_max: float | None = None
    conc_max: int | None = None
    confirm_text: str = "Confirm"
    confirm_style: str = ""
    start_protocol_text: str = "Start"
    enabled: dict[str, bool] = field(default_factory=_initial_enabled)

    def _check(self, name: str) -> None:
        if name not in self.enabled:
            raise KeyError(f"unknown control {name!r}")

    def enable(self, *names: str) -> None:
        for name in names:
            self._check(name)
            self.enabled[name] = True

    def disable(self, *names: str) -> None:
        for name in names:
            self._check(name)
            self.enabled[name] = False

    def is_enabled(self, name: str) -> bool:
        self._check(name)
        return self.enabled[name]


def _num(value: float) -> str:
    return f"{value:g}"


class PumpController:
    """Settings, segment table, protocol run and console of the controller.

    Time advances through `timer_tick`, called once per protocol time step.
    """

    def __init__(
        self,
        pump_factory: Callable[[], Any] = PumpInterface,
        clock: Callable[[], datetime] = datetime.now,
    ) -> None:
        self.console = Console(clock=clock)
        self.controls = Controls()
        self.table = SegmentTable()
        self.protocol = Protocol()
        self.protocol_plot = PlotModel()
        self.cond_plot = PlotModel()
        self.cond_plot.set_y_label("Units")
        self.pump_com_port = NO_PORT
        self.cond_com_port = NO_PORT
        self.pumps: Any = None
        self.x_pos = -1
        self._pump_factory = pump_factory
        self._ticks_left = 0
        self._pending_start = False
        self.table.subscribe(self.update_protocol)
        self.write_to_console(f"Welcome to Pump Controller v. {VERSION}!")

    @property
    def interval_ms(self) -> float:
        return self.protocol.dt * 1000

    @property
    def run_active(self) -> bool:
        return self._ticks_left > 0

    @property
    def start_pending(self) -> bool:
        return self._pending_start

    # Console

    def write_to_console(self, text: str, color: ColorLike | None = None) -> None:
        self.console.write(text, color)

    def clear_console(self, confirm: bool = True) -> None:
        """Clear the console if confirmed, then note that it was cleared."""
        if confirm:
            self.console.clear()
        self.write_to_console("Console cleared!", Color.YELLOW)

    def save_console(self, base_path: str | Path) -> None:
        try:
            self.console.save(base_path)
        except OSError as exc:
            log.warning("Could not open file for writing: %s", exc)
        self.write_to_console(
            f"Wrote plain text and color version of logs to {base_path}", Color.YELLOW
        )

    # Settings

    def set_coms(self, cond: str, pump: str) -> None:
        """Take the chosen meter and pump ports; "None" means no port."""
        if pump != NO_PORT:
            self.pump_com_port = pump
            self.write_to_console(f"PUMP PORT SELECTED: {pump}", Color.GREEN)
            self.initiate_pumps()
        else:
            self.pump_com_port = ""
            self.write_to_console("No pump port selected!", Color.RED)

        if cond != NO_PORT:
            self.cond_com_port = cond
            self.write_to_console(f"COND METER PORT SELECTED: {cond}", Color.GREEN)
        else:
            self.cond_com_port = ""
            self.write_to_console("No cond meter port selected!", Color.RED)
        self.settings_changed()

    def initiate_pumps(self) -> None:
        """Open the pump line; Pump A is address 0, Pump B address 1."""
        if not self.pump_com_port:
            return
        self.pumps = self._pump_factory()
        try:
            self.pumps.open_port(self.pump_com_port)
        except PumpError as exc:
            self.write_to_console(str(exc), Color.RED)

    def confirm_settings(self) -> None:
        c = self.controls
        self.write_to_console("PUMP SETTINGS CONFIRMED: ", Color.GREEN)
        self.write_to_console(
            f"Flow Rate (mL/min): {c.flow_rate:.2f} | Pump A (mM): {c.pac:.0f}"
            f" | Pump B (mM): {c.pbc:.0f}",
            Color.GREEN,
        )
        if self.pump_com_port == NO_PORT or self.cond_com_port == NO_PORT:
            self.write_to_console(
                "Confirm ports for pumps and meter! At least one was not selected!",
                Color.RED,
            )
        c.confirm_style = CONFIRMED_STYLE
        c.confirm_text = "Confirmed"
        c.enable("spin_seg_time", "spin_start_conc", "spin_end_conc", "but_start_protocol")
        c.disable("but_confirm_settings")
        c.seg_time_max = MAX_SEGMENT_MINUTES
        self.protocol_plot.set_y_axis(c.pac, c.pbc)
        c.conc_max = max(c.pac, c.pbc)
        self.table.notify()
        if self.pump_com_port != NO_PORT:
            c.enable("spin_straight_conc", *_PUMP_CONTROLS, "but_send_protocol")

    def settings_changed(self) -> None:
        """Require the settings to be confirmed again before running."""
        c = self.controls
        c.enable("but_confirm_settings")
        c.confirm_style = ""
        c.confirm_text = "Confirm"
        c.disable(
            "spin_straight_conc",
            *_PUMP_CONTROLS,
            "spin_seg_time",
            "spin_start_conc",
            "spin_end_conc",
            "but_start_protocol",
            "but_stop_protocol",
            "but_send_protocol",
        )

    # Segments

    def add_segment(
        self,
        time_minutes: float,
        start_conc: int,
        end_conc: int,
        selected_row: int | None = None,
    ) -> None:
        """Add a segment after the selected row, or at the end without a selection."""
        if time_minutes > 0:
            row = -1 if selected_row is None else selected_row + 1
            self.table.add_segment(time_minutes, start_conc, end_conc, row)
            self.controls.seg_time = 0.0
            self.controls.start_conc = 0
            self.controls.end_conc = 0
        else:
            self.write_to_console(
                "You can't add a segment zero minutes long...", Color.YELLOW
            )

    def remove_segment(self, selected_row: int | None = None) -> None:
        if selected_row is not None:
            self.table.remove_segment(selected_row)
        else:
            self.write_to_console("Pick a segment to remove first!", Color.YELLOW)

    def clear_segments(self) -> None:
        if self.table.row_count() > 0:
            self.table.clear_segments()
        else:
            self.write_to_console(
                "Maybe add some segments first -- nothing to clear.", Color.YELLOW
            )

    def update_protocol(self) -> None:
        """Regenerate the protocol curve from the table whenever segments change."""
        if self.table.row_count() == 0:
            return
        try:
            self.protocol.generate(self.table.segments())
        except ValueError as exc:
            self.write_to_console(str(exc), Color.RED)
            return
        self.protocol_plot.set_data(self.protocol.x_values, self.protocol.y_values)

    # Protocol run

    def start_protocol(self) -> None:
        """List the segments and start the run on the next timer tick."""
        if self.table.row_count() == 0 or not self.protocol.x_values:
            self.write_to_console(
                "Your protocol is empty! What are you running?", Color.YELLOW
            )
            return
        self.write_to_console("Current segments: ", Color.BLUE)
        for seg in self.protocol.segments:
            if len(seg) != 3:
                continue
            duration, start, end = seg
            self.write_to_console(
                f"{duration:.2f} min | {_num(start)} mM | {_num(end)} mM", Color.BLUE
            )
        self._pending_start = True
        c = self.controls
        c.enable("but_stop_protocol")
        c.disable(*_PUMP_CONTROLS)
        c.start_protocol_text = "Restart"
        c.disable(
            "but_add_segment",
            "but_delete_segment",
            "but_clear_segments",
            "spin_flow_rate",
            "spin_pac",
            "spin_pbc",
            "but_set_coms",
            "but_send_protocol",
        )

    def send_protocol(self) -> None:
        """Send the confirmed flow rate to both pumps."""
        if self.pumps is None or not self.pumps.is_open:
            self.write_to_console("Pumps are not connected!", Color.RED)
            return
        try:
            self.pumps.broadcast_command(
                BasicCommand.SET_FLOW_RATE, self.controls.flow_rate
            )
        except PumpError as exc:
            self.write_to_console(str(exc), Color.RED)

    def stop_protocol(self) -> None:
        if self.run_active:
            self.write_to_console("Protocol stopped", Color.YELLOW)
            self._ticks_left = 0
        else:
            self.write_to_console("Protocol ended on its own", Color.GREEN)
        self._pending_start = False
        self.x_pos = -1
        self.protocol_plot.set_x(-1)
        c = self.controls
        c.disable("but_stop_protocol")
        c.start_protocol_text = "Start"
        c.enable(
            "but_add_segment",
            "but_clear_segments",
            "but_delete_segment",
            "but_set_coms",
            "spin_flow_rate",
            "spin_pac",
            "spin_pbc",
        )
        if self.pump_com_port != NO_PORT:
            c.enable(*_PUMP_CONTROLS, "but_send_protocol")

    def timer_tick(self) -> None:
        """Advance one time step: move the plot marker and end or start a run."""
        self._poll_pumps()
        xs = self.protocol.x_values
        if self.run_active:
            if self.x_pos + 1 < len(xs):
                self.x_pos += 1
                self.protocol_plot.set_x(xs[self.x_pos])
            self._ticks_left -= 1
            if self._ticks_left == 0:
                self.stop_protocol()
        if self._pending_start:
            self._pending_start = False
            self._ticks_left = max(len(xs) - 1, 1)
            self.x_pos = 0
            self.protocol_plot.set_x(xs[0])
            self.write_to_console("Protocol started.", Color.GREEN)

    def _poll_pumps(self) -> None:
        if self.pumps is None or not self.pumps.is_open:
            return
        try:
            replies = self.pumps.poll()
        except PumpError as exc:
            self.write_to_console(str(exc), Color.RED)
            return
        for reply in replies:
            self.write_to_console(reply, Color.YELLOW)